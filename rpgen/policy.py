"""
Password policy rules and the policy used while generating random passwords.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from .config import GeneratorConfig
from .errors import ImpossiblePolicyError, ImpossibleReason, InvalidConfigError
from .strength import MAX_SCORE


@dataclass(frozen=True)
class PasswordPolicy:
    """
    Read-only set of password rules.

    For the per-class maximums (and the repeat limits) 0 means "no limit".
    """

    minimum_length: int = 2
    maximum_length: int = 64

    minimum_numeric: int = 0
    maximum_numeric: int = 0
    minimum_special: int = 0
    maximum_special: int = 0
    minimum_upper: int = 0
    maximum_upper: int = 0
    minimum_lower: int = 0
    maximum_lower: int = 0

    allow_numeric: bool = True
    allow_special: bool = True
    allow_first_char_numeric: bool = True
    allow_last_char_numeric: bool = True
    allow_first_char_special: bool = True
    allow_last_char_special: bool = True

    minimum_strength: int = 0

    # Highest count of any single character.
    maximum_repeat: int = 0
    # Longest run of one character, e.g. 2 rejects "aaa".
    maximum_sequential_repeat: int = 0
    minimum_unique: int = 0

    # Regular expressions that must not be found anywhere in the password.
    disallowed_patterns: tuple[str, ...] = ()

    # Compiled disallowed_patterns, filled in by __post_init__.
    compiled_patterns: tuple[re.Pattern, ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self) -> None:
        if not isinstance(self.disallowed_patterns, tuple):
            object.__setattr__(self, "disallowed_patterns", tuple(self.disallowed_patterns))
        try:
            compiled = tuple(re.compile(p) for p in self.disallowed_patterns)
        except re.error as exc:
            raise InvalidConfigError(f"invalid disallowed pattern {exc.pattern!r}: {exc}") from exc
        object.__setattr__(self, "compiled_patterns", compiled)

    def ensure_satisfiable(self) -> None:
        """
        Raise ImpossiblePolicyError if no password can meet these rules.

        Only structural conflicts are detected here; a policy that passes
        can still be hard to satisfy (for example a demanding strength
        threshold on a short maximum length).
        """
        if self.maximum_length < 1 or self.minimum_length > self.maximum_length:
            raise ImpossiblePolicyError(
                ImpossibleReason.MAX_LENGTH_LESS_THAN_MINIMUM,
                f"min={self.minimum_length}, max={self.maximum_length}",
            )

        class_bounds = (
            ("numeric", self.minimum_numeric, self.maximum_numeric,
             ImpossibleReason.MAX_NUMERIC_LESS_THAN_MINIMUM),
            ("special", self.minimum_special, self.maximum_special,
             ImpossibleReason.MAX_SPECIAL_LESS_THAN_MINIMUM),
            ("upper", self.minimum_upper, self.maximum_upper,
             ImpossibleReason.MAX_UPPER_LESS_THAN_MINIMUM),
            ("lower", self.minimum_lower, self.maximum_lower,
             ImpossibleReason.MAX_LOWER_LESS_THAN_MINIMUM),
        )
        for name, minimum, maximum, reason in class_bounds:
            if 0 < maximum < minimum:
                raise ImpossiblePolicyError(reason, f"{name}: min={minimum}, max={maximum}")

        if self.minimum_numeric > 0 and not self.allow_numeric:
            raise ImpossiblePolicyError(ImpossibleReason.REQUIRED_CHAR_NOT_ALLOWED, "numeric")
        if self.minimum_special > 0 and not self.allow_special:
            raise ImpossiblePolicyError(ImpossibleReason.REQUIRED_CHAR_NOT_ALLOWED, "special")

        required = (
            self.minimum_numeric
            + self.minimum_special
            + self.minimum_upper
            + self.minimum_lower
        )
        if required > self.maximum_length:
            raise ImpossiblePolicyError(
                ImpossibleReason.CLASS_MINIMUMS_EXCEED_MAX_LENGTH,
                f"required={required}, max={self.maximum_length}",
            )

        if self.minimum_strength > MAX_SCORE:
            raise ImpossiblePolicyError(
                ImpossibleReason.STRENGTH_UNREACHABLE,
                f"min={self.minimum_strength}, ceiling={MAX_SCORE}",
            )


DEFAULT_POLICY = PasswordPolicy()


def make_random_gen_policy(
    config: GeneratorConfig,
    baseline: PasswordPolicy | None = None,
) -> PasswordPolicy:
    """
    Derive the policy enforced while generating a random password.

    Starts from the baseline and lets the generator config make it
    stricter, never looser: the maximum length always comes from the
    config, while minimum length and minimum strength are only raised.
    """
    base = baseline or DEFAULT_POLICY

    # Taken as-is, whether it is above or below the baseline.
    maximum_length = config.maximum_length

    minimum_length = base.minimum_length
    if config.minimum_length > base.minimum_length:
        minimum_length = config.minimum_length

    minimum_strength = base.minimum_strength
    if config.minimum_strength > base.minimum_strength:
        minimum_strength = config.minimum_strength

    return replace(
        base,
        minimum_length=minimum_length,
        maximum_length=maximum_length,
        minimum_strength=minimum_strength,
    )
