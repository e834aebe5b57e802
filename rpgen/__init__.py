"""
Constrained random password generator package.
"""

from .config import GeneratorConfig, DEFAULT_CONFIG, DEFAULT_SEED_PHRASES
from .errors import ImpossiblePolicyError, ImpossibleReason, InvalidConfigError, RpgenError
from .generator import (
    GenerationOutcome,
    PasswordResult,
    generate_password,
    generate_password_with_meta,
)
from .policy import PasswordPolicy, DEFAULT_POLICY
from .random_source import QuantumRandom, RandomSource, SecureRandom, SeededRandom
from .validator import DisallowedValues, ViolationKind

__all__ = [
    "GeneratorConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_SEED_PHRASES",
    "ImpossiblePolicyError",
    "ImpossibleReason",
    "InvalidConfigError",
    "RpgenError",
    "GenerationOutcome",
    "PasswordResult",
    "generate_password",
    "generate_password_with_meta",
    "PasswordPolicy",
    "DEFAULT_POLICY",
    "QuantumRandom",
    "RandomSource",
    "SecureRandom",
    "SeededRandom",
    "DisallowedValues",
    "ViolationKind",
]
