"""
High-level password generation.

Derives the policy used for random generation, runs the candidate
mutator, re-checks disallowed values and reports the outcome.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from . import strength
from .config import DEFAULT_CONFIG, GeneratorConfig
from .errors import ImpossiblePolicyError, ImpossibleReason
from .mutator import CandidateMutator, MutationResult, Validator
from .policy import DEFAULT_POLICY, PasswordPolicy, make_random_gen_policy
from .random_source import RandomSource, SecureRandom
from .seeds import CharClass, SeedMachine
from .stats import STATISTICS, Statistic, StatisticsClient
from .validator import DisallowedValues, validate

logger = logging.getLogger(__name__)

_DEFAULT_RANDOM = SecureRandom()


class GenerationOutcome(Enum):
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


@dataclass
class PasswordResult:
    """
    Full result of one generate call.
    """
    password: str
    outcome: GenerationOutcome
    # Mutation rounds used, summed over any regenerations.
    rounds: int
    elapsed_seconds: float
    # The policy the password was generated against.
    policy: PasswordPolicy

    @property
    def valid(self) -> bool:
        return self.outcome is GenerationOutcome.ACCEPTED


def _prefix(session_label: str | None) -> str:
    return f"[{session_label}] " if session_label else ""


def _check_alphabets(policy: PasswordPolicy, seed_machine: SeedMachine) -> None:
    required = (
        (CharClass.NUMERIC, policy.minimum_numeric),
        (CharClass.SPECIAL, policy.minimum_special),
        (CharClass.UPPER, policy.minimum_upper),
        (CharClass.LOWER, policy.minimum_lower),
    )
    for char_class, minimum in required:
        if minimum > 0 and not seed_machine.class_alphabet(char_class):
            raise ImpossiblePolicyError(ImpossibleReason.REQUIRED_CHAR_NOT_ALLOWED, char_class.value)


def generate_password_with_meta(
    policy: PasswordPolicy | None = None,
    random_source: RandomSource | None = None,
    seed_phrases: Iterable[str] | None = None,
    min_length: int | None = None,
    max_length: int | None = None,
    min_strength: int | None = None,
    max_attempts: int | None = None,
    jitter: int | None = None,
    disallowed_values: Iterable[str] | DisallowedValues | None = None,
    session_label: str | None = None,
    config: GeneratorConfig | None = None,
    validator: Validator = validate,
    statistics: StatisticsClient = STATISTICS,
) -> PasswordResult:
    """
    Generate a random password that satisfies `policy` (default: the
    system default policy) tightened by the generator settings.

    Raises ImpossiblePolicyError, before any generation work, when the
    resulting policy can not be satisfied at all. Running out of attempts
    is not an error: the result then carries the last candidate and
    GenerationOutcome.EXHAUSTED.
    """
    start = time.perf_counter()
    prefix = _prefix(session_label)

    baseline = policy or DEFAULT_POLICY
    cfg = (config or DEFAULT_CONFIG).with_overrides(
        seed_phrases=seed_phrases,
        minimum_length=min_length,
        maximum_length=max_length,
        minimum_strength=min_strength,
        maximum_attempts=max_attempts,
        jitter=jitter,
    ).for_policy(baseline)

    random_gen_policy = make_random_gen_policy(cfg, baseline)
    random_gen_policy.ensure_satisfiable()

    rng = random_source or _DEFAULT_RANDOM
    seed_machine = SeedMachine(rng, cfg.seed_phrases)
    _check_alphabets(random_gen_policy, seed_machine)

    if isinstance(disallowed_values, DisallowedValues):
        disallowed = disallowed_values
    elif disallowed_values is None:
        disallowed = DisallowedValues()
    else:
        disallowed = DisallowedValues(disallowed_values)

    # Disallowed values are checked below, on each finished run.
    mutator = CandidateMutator(
        rng,
        seed_machine,
        cfg,
        random_gen_policy,
        validator=validator,
    )

    budget = cfg.maximum_attempts
    result: MutationResult = mutator.run(budget)
    rounds = result.rounds
    valid = result.valid
    # A disallowed value can not be repaired locally; regenerate from
    # scratch while rounds are left.
    while valid and disallowed.matches(result.password):
        logger.debug("%sgenerated password matched a disallowed value, regenerating", prefix)
        statistics.increment(Statistic.DISALLOWED_REGENERATIONS)
        valid = False
        if rounds >= budget:
            break
        result = mutator.run(budget - rounds)
        rounds += result.rounds
        valid = result.valid

    elapsed = time.perf_counter() - start
    outcome = GenerationOutcome.ACCEPTED if valid else GenerationOutcome.EXHAUSTED

    if valid:
        logger.debug(
            "%sfinished random password generation after %d rounds (%.1f ms)",
            prefix, rounds, elapsed * 1000,
        )
    else:
        if logger.isEnabledFor(logging.ERROR):
            errors = len(validator(result.password, random_gen_policy))
            judge_level = strength.score(result.password)
            logger.error(
                "%sfailed random password generation after %d rounds (errors=%d, judgeLevel=%d, %.1f ms)",
                prefix, rounds, errors, judge_level, elapsed * 1000,
            )
        statistics.increment(Statistic.GENERATION_EXHAUSTED)

    statistics.increment(Statistic.GENERATED_PASSWORDS)

    return PasswordResult(
        password=result.password,
        outcome=outcome,
        rounds=rounds,
        elapsed_seconds=elapsed,
        policy=random_gen_policy,
    )


def generate_password(
    policy: PasswordPolicy | None = None,
    random_source: RandomSource | None = None,
    **kwargs,
) -> str:
    """
    Same as generate_password_with_meta() but returns only the password.

    On exhaustion the last candidate is still returned (the failure is
    logged); use generate_password_with_meta() to tell the cases apart.
    """
    return generate_password_with_meta(policy, random_source, **kwargs).password
