import logging

import pytest

from rpgen import (
    DisallowedValues,
    GenerationOutcome,
    GeneratorConfig,
    ImpossiblePolicyError,
    ImpossibleReason,
    InvalidConfigError,
    PasswordPolicy,
    SeededRandom,
    ViolationKind,
    generate_password,
    generate_password_with_meta,
)
from rpgen import strength
from rpgen.config import DEFAULT_CONFIG
from rpgen.seeds import CharClass
from rpgen.stats import Statistic, StatisticsClient
from rpgen.validator import validate


def test_default_generation_is_valid():
    result = generate_password_with_meta(random_source=SeededRandom(1))
    assert result.valid
    assert result.outcome is GenerationOutcome.ACCEPTED
    assert 8 <= len(result.password) <= 16
    assert validate(result.password, result.policy) == []


@pytest.mark.parametrize("seed", range(10))
def test_length_bounds_hold_on_success(seed):
    result = generate_password_with_meta(
        random_source=SeededRandom(seed), min_length=12, max_length=14,
    )
    assert result.valid
    assert 12 <= len(result.password) <= 14


def test_same_seed_same_password():
    first = generate_password(random_source=SeededRandom("fixed"), min_length=10)
    second = generate_password(random_source=SeededRandom("fixed"), min_length=10)
    assert first == second


@pytest.mark.parametrize("seed", range(10))
def test_three_seed_phrases_end_to_end(seed):
    policy = PasswordPolicy(minimum_upper=1, minimum_numeric=1, minimum_special=1)
    result = generate_password_with_meta(
        policy,
        SeededRandom(seed),
        seed_phrases={"a", "1", "@"},
        min_length=8,
        max_length=8,
        max_attempts=100,
    )
    password = result.password
    assert result.valid
    assert result.rounds <= 100
    assert len(password) == 8
    assert any(c.isupper() for c in password)
    assert any(c.isdecimal() for c in password)
    assert any(not c.isalnum() for c in password)


def test_policy_class_rules_are_enforced():
    policy = PasswordPolicy(
        minimum_numeric=2,
        maximum_numeric=3,
        minimum_lower=2,
        allow_first_char_numeric=False,
        allow_last_char_special=False,
    )
    for seed in range(5):
        result = generate_password_with_meta(policy, SeededRandom(seed))
        assert result.valid
        assert validate(result.password, policy) == []


def test_minimum_length_above_maximum_is_impossible():
    with pytest.raises(ImpossiblePolicyError) as excinfo:
        generate_password_with_meta(
            PasswordPolicy(minimum_length=20), SeededRandom(1), max_length=10,
        )
    assert excinfo.value.reason is ImpossibleReason.MAX_LENGTH_LESS_THAN_MINIMUM


def test_required_class_not_allowed_is_impossible():
    with pytest.raises(ImpossiblePolicyError) as excinfo:
        generate_password_with_meta(
            PasswordPolicy(minimum_special=1, allow_special=False), SeededRandom(1),
        )
    assert excinfo.value.reason is ImpossibleReason.REQUIRED_CHAR_NOT_ALLOWED


def test_impossible_policy_is_detected_before_generation():
    calls = []

    def validator(candidate, policy):
        calls.append(candidate)
        return validate(candidate, policy)

    with pytest.raises(ImpossiblePolicyError):
        generate_password_with_meta(
            PasswordPolicy(minimum_upper=10), SeededRandom(1), max_length=8, validator=validator,
        )
    assert calls == []


def test_invalid_config_values():
    with pytest.raises(InvalidConfigError):
        GeneratorConfig(maximum_attempts=0)
    with pytest.raises(InvalidConfigError):
        GeneratorConfig(jitter=0)
    with pytest.raises(ValueError):
        generate_password_with_meta(random_source=SeededRandom(1), jitter=-1)


def test_disallowed_value_is_never_returned_as_valid():
    disallowed = DisallowedValues([r"[xyz]+"])
    for seed in range(10):
        result = generate_password_with_meta(
            random_source=SeededRandom(seed),
            seed_phrases=["x", "y", "z"],
            disallowed_values=disallowed,
            max_attempts=200,
        )
        if result.valid:
            assert not disallowed.matches(result.password)
        else:
            assert result.outcome is GenerationOutcome.EXHAUSTED


def test_everything_disallowed_exhausts():
    result = generate_password_with_meta(
        random_source=SeededRandom(3),
        disallowed_values=[r".*"],
        max_attempts=30,
    )
    assert result.outcome is GenerationOutcome.EXHAUSTED
    assert result.rounds == 30


def test_exhaustion_logs_error_and_counts(caplog):
    stats = StatisticsClient()
    with caplog.at_level(logging.ERROR, logger="rpgen.generator"):
        result = generate_password_with_meta(
            random_source=SeededRandom(1),
            max_attempts=10,
            validator=lambda candidate, policy: [ViolationKind.OTHER],
            statistics=stats,
            session_label="req-42",
        )
    assert not result.valid
    assert result.rounds == 10
    assert "[req-42] failed random password generation after 10 rounds" in caplog.text
    assert stats.get(Statistic.GENERATION_EXHAUSTED) == 1
    assert stats.get(Statistic.GENERATED_PASSWORDS) == 1


def test_success_logs_timing_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="rpgen.generator"):
        result = generate_password_with_meta(random_source=SeededRandom(2))
    assert result.valid
    assert f"finished random password generation after {result.rounds} rounds" in caplog.text


def test_failing_statistics_listener_does_not_abort(caplog):
    stats = StatisticsClient()

    def broken(stat, value):
        raise RuntimeError("listener down")

    stats.add_listener(broken)
    with caplog.at_level(logging.WARNING, logger="rpgen.stats"):
        password = generate_password(random_source=SeededRandom(5), statistics=stats)
    assert password
    assert stats.get(Statistic.GENERATED_PASSWORDS) == 1
    assert "statistics listener failed" in caplog.text


def test_min_strength_is_reached():
    for seed in range(5):
        result = generate_password_with_meta(
            random_source=SeededRandom(seed), min_strength=40, max_length=20,
        )
        assert result.valid
        assert result.policy.minimum_strength == 40
        assert strength.score(result.password) >= 40


@pytest.mark.parametrize("seed", range(20))
def test_default_config_reaches_four_missing_specials(seed):
    # No special characters in the seeds: every one must be inserted.
    result = generate_password_with_meta(
        PasswordPolicy(minimum_special=4),
        SeededRandom(seed),
        seed_phrases=list("abcdefgh2345"),
    )
    assert result.valid
    assert sum(1 for c in result.password if CharClass.SPECIAL.matches(c)) >= 4
    assert DEFAULT_CONFIG.jitter > 4


class _FirstPasswordDisallowed(DisallowedValues):
    def __init__(self):
        super().__init__([])
        self.seen = []

    def matches(self, password):
        self.seen.append(password)
        return len(self.seen) == 1


def test_disallowed_value_triggers_regeneration():
    stats = StatisticsClient()
    disallowed = _FirstPasswordDisallowed()
    result = generate_password_with_meta(
        random_source=SeededRandom(6),
        disallowed_values=disallowed,
        statistics=stats,
    )
    assert result.valid
    assert len(disallowed.seen) == 2
    assert result.password == disallowed.seen[-1]
    assert result.rounds >= 2
    assert stats.get(Statistic.DISALLOWED_REGENERATIONS) == 1
    assert stats.get(Statistic.GENERATION_EXHAUSTED) == 0


def test_everything_disallowed_counts_regenerations():
    stats = StatisticsClient()
    result = generate_password_with_meta(
        random_source=SeededRandom(3),
        disallowed_values=[r".*"],
        max_attempts=30,
        statistics=stats,
    )
    assert result.outcome is GenerationOutcome.EXHAUSTED
    assert stats.get(Statistic.DISALLOWED_REGENERATIONS) >= 1
    assert stats.get(Statistic.GENERATION_EXHAUSTED) == 1
