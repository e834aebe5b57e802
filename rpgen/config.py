"""
Configuration for the random password generator.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable

from .errors import InvalidConfigError

if TYPE_CHECKING:
    from .policy import PasswordPolicy


# Most basic ASCII characters except the visually ambiguous ones.
# No multi-character phrases are included.
DEFAULT_SEED_PHRASES: tuple[str, ...] = (
    "a", "b", "c", "d", "e", "f", "g", "h", "j", "k", "m", "n", "p",
    "q", "r", "s", "t", "u", "v", "w", "x", "y", "z",
    "A", "B", "C", "D", "E", "F", "G", "H", "J", "K", "L", "M", "P",
    "Q", "R", "S", "T", "U", "V", "W", "X", "Y", "Z",
    "2", "3", "4", "5", "6", "7", "8", "9",
    "@", "&", "!", "?", "%", "$", "#", "^", ")", "(", "+", "-", "=",
    ".", ",", "/", "\\",
)


@dataclass(frozen=True)
class GeneratorConfig:
    # Phrases the password is assembled from. Usually single characters,
    # but short literal fragments work too. None means DEFAULT_SEED_PHRASES.
    seed_phrases: tuple[str, ...] | None = None

    minimum_length: int = 8
    maximum_length: int = 16

    # Minimum score from rpgen.strength (0-100).
    minimum_strength: int = 0

    # Total repair rounds allowed for one generate call.
    maximum_attempts: int = 1000

    # Every Nth round throws the candidate away and starts over.
    jitter: int = 50

    def __post_init__(self) -> None:
        if self.maximum_attempts <= 0:
            raise InvalidConfigError(
                f"maximum_attempts must be > 0 (got {self.maximum_attempts})"
            )
        if self.jitter <= 0:
            raise InvalidConfigError(f"jitter must be > 0 (got {self.jitter})")
        if self.minimum_length < 0 or self.maximum_length < 0:
            raise InvalidConfigError("password lengths can not be negative")
        if self.minimum_strength < 0:
            raise InvalidConfigError("minimum_strength can not be negative")
        if self.seed_phrases is not None and not isinstance(self.seed_phrases, tuple):
            # Keep the dataclass hashable when callers pass a list or set.
            object.__setattr__(self, "seed_phrases", tuple(self.seed_phrases))

    def with_overrides(
        self,
        seed_phrases: Iterable[str] | None = None,
        minimum_length: int | None = None,
        maximum_length: int | None = None,
        minimum_strength: int | None = None,
        maximum_attempts: int | None = None,
        jitter: int | None = None,
    ) -> "GeneratorConfig":
        """
        Return a copy with every non-None argument replacing the current value.
        """
        changes: dict = {}
        if seed_phrases is not None:
            changes["seed_phrases"] = tuple(seed_phrases)
        if minimum_length is not None:
            changes["minimum_length"] = minimum_length
        if maximum_length is not None:
            changes["maximum_length"] = maximum_length
        if minimum_strength is not None:
            changes["minimum_strength"] = minimum_strength
        if maximum_attempts is not None:
            changes["maximum_attempts"] = maximum_attempts
        if jitter is not None:
            changes["jitter"] = jitter
        return replace(self, **changes) if changes else self

    def for_policy(self, policy: "PasswordPolicy") -> "GeneratorConfig":
        """
        Clamp the length and strength settings into the bounds of a real
        password policy, so random passwords also satisfy that policy.

        The result can end up with minimum_length > maximum_length when the
        policy and this config disagree; the generator reports that as an
        impossible policy.
        """
        minimum_length = max(self.minimum_length, policy.minimum_length)
        maximum_length = self.maximum_length
        if policy.maximum_length > 0:
            maximum_length = min(maximum_length, policy.maximum_length)
        minimum_strength = max(self.minimum_strength, policy.minimum_strength)
        return replace(
            self,
            minimum_length=minimum_length,
            maximum_length=maximum_length,
            minimum_strength=minimum_strength,
        )


@dataclass
class QuantumConfig:
    # Number of qubits to prepare in superposition.
    # Each qubit gives one raw bit.
    # NOTE: Keep this <= backend limit (often 20-29 for local simulators).
    num_qubits: int = 20

    # How many rounds of entropy amplification (hash mixing) to apply.
    entropy_rounds: int = 2

    # Independent circuit runs XOR-combined into one sample.
    quantum_streams: int = 2


# Default configuration instances you can import elsewhere
DEFAULT_CONFIG = GeneratorConfig()
DEFAULT_QUANTUM_CONFIG = QuantumConfig()
