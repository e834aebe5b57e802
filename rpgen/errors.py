"""
Exceptions raised by the random password generator.
"""

from __future__ import annotations

from enum import Enum


class RpgenError(Exception):
    """Generic generator error."""


class InvalidConfigError(RpgenError, ValueError):
    """A GeneratorConfig or PasswordPolicy value is invalid."""


class ImpossibleReason(Enum):
    MAX_LENGTH_LESS_THAN_MINIMUM = "maximum length is less than minimum length"
    MAX_NUMERIC_LESS_THAN_MINIMUM = "maximum numeric is less than minimum numeric"
    MAX_SPECIAL_LESS_THAN_MINIMUM = "maximum special is less than minimum special"
    MAX_UPPER_LESS_THAN_MINIMUM = "maximum upper is less than minimum upper"
    MAX_LOWER_LESS_THAN_MINIMUM = "maximum lower is less than minimum lower"
    REQUIRED_CHAR_NOT_ALLOWED = "a required character class is not allowed"
    CLASS_MINIMUMS_EXCEED_MAX_LENGTH = "character class minimums exceed maximum length"
    STRENGTH_UNREACHABLE = "minimum strength is above the highest possible score"
    UNEXPECTED_ERROR = "unexpected error"


class ImpossiblePolicyError(RpgenError):
    """
    The effective policy can not be satisfied by any password.

    Raised before generation starts; it means the configuration needs
    fixing, not that generation was unlucky.
    """

    def __init__(self, reason: ImpossibleReason, detail: str | None = None) -> None:
        self.reason = reason
        self.detail = detail
        message = reason.value if not detail else f"{reason.value} ({detail})"
        super().__init__(message)
