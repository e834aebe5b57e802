"""
Password strength scoring.

The score is a rough entropy estimate (length times log2 of the character
pools used) mapped onto 0-100, where 120 bits or more is 100.
"""

from __future__ import annotations

import math

MAX_SCORE = 100
FULL_STRENGTH_BITS = 120.0

_LOWER_POOL = 26
_UPPER_POOL = 26
_DIGIT_POOL = 10
# printable ASCII punctuation
_SYMBOL_POOL = 32


def estimate_entropy_bits(password: str) -> float:
    """
    Rough entropy estimate in bits based on length and character set used.
    """
    if not password:
        return 0.0

    has_lower = any(c.islower() for c in password)
    has_upper = any(c.isupper() for c in password)
    has_digit = any(c.isdecimal() for c in password)
    has_symbol = any(not (c.isalpha() or c.isdecimal()) for c in password)

    pool = 0
    if has_lower:
        pool += _LOWER_POOL
    if has_upper:
        pool += _UPPER_POOL
    if has_digit:
        pool += _DIGIT_POOL
    if has_symbol:
        pool += _SYMBOL_POOL

    if pool == 0:
        return 0.0

    # Repeated characters add no new information.
    unique_ratio = len(set(password)) / len(password)
    return len(password) * math.log2(pool) * unique_ratio


def score(password: str) -> int:
    """
    Strength score between 0 and MAX_SCORE.
    """
    bits = estimate_entropy_bits(password)
    capped = max(0.0, min(bits, FULL_STRENGTH_BITS))
    return int((capped / FULL_STRENGTH_BITS) * MAX_SCORE)


def strength_label(value: int) -> str:
    if value <= 0:
        return "Very weak"
    if value < 42:
        return "Weak"
    if value < 67:
        return "Moderate"
    if value < 92:
        return "Strong"
    return "Very strong"
