"""
Rule validator: checks a candidate password against a PasswordPolicy and
reports which kinds of rules are violated.
"""

from __future__ import annotations

import re
from collections import Counter
from enum import Enum
from typing import Iterable

from . import strength
from .policy import PasswordPolicy
from .seeds import CharClass


class ViolationKind(Enum):
    TOO_SHORT = "too-short"
    TOO_LONG = "too-long"
    FIRST_IS_NUMERIC = "first-char-numeric"
    FIRST_IS_SPECIAL = "first-char-special"
    LAST_IS_NUMERIC = "last-char-numeric"
    LAST_IS_SPECIAL = "last-char-special"
    NOT_ENOUGH_NUMERIC = "not-enough-numeric"
    NOT_ENOUGH_SPECIAL = "not-enough-special"
    NOT_ENOUGH_UPPER = "not-enough-upper"
    NOT_ENOUGH_LOWER = "not-enough-lower"
    TOO_MANY_NUMERIC = "too-many-numeric"
    TOO_MANY_SPECIAL = "too-many-special"
    TOO_MANY_UPPER = "too-many-upper"
    TOO_MANY_LOWER = "too-many-lower"
    TOO_WEAK = "too-weak"
    # Anything the repair table has no targeted fix for.
    OTHER = "other"


class CharCounter:
    """
    Per-class view of one password string.
    """

    def __init__(self, password: str) -> None:
        self.password = password

    def chars(self, char_class: CharClass) -> str:
        return "".join(c for c in self.password if char_class.matches(c))

    def count(self, char_class: CharClass) -> int:
        return sum(1 for c in self.password if char_class.matches(c))

    def max_repeat(self) -> int:
        counts = Counter(self.password)
        return max(counts.values()) if counts else 0

    def max_sequential_repeat(self) -> int:
        longest = 0
        run = 0
        previous = None
        for c in self.password:
            run = run + 1 if c == previous else 1
            previous = c
            longest = max(longest, run)
        return longest

    def unique_count(self) -> int:
        return len(set(self.password))


def validate(password: str, policy: PasswordPolicy) -> list[ViolationKind]:
    """
    Return the violated rule kinds, empty if the password complies.

    Called once per repair round, so it stays cheap: one pass per rule,
    with the disallowed patterns already compiled on the policy.
    """
    errors: list[ViolationKind] = []
    counter = CharCounter(password)
    length = len(password)

    if length < policy.minimum_length:
        errors.append(ViolationKind.TOO_SHORT)
    if length > policy.maximum_length:
        errors.append(ViolationKind.TOO_LONG)

    if password:
        first, last = password[0], password[-1]
        if not policy.allow_first_char_numeric and CharClass.NUMERIC.matches(first):
            errors.append(ViolationKind.FIRST_IS_NUMERIC)
        if not policy.allow_first_char_special and CharClass.SPECIAL.matches(first):
            errors.append(ViolationKind.FIRST_IS_SPECIAL)
        if not policy.allow_last_char_numeric and CharClass.NUMERIC.matches(last):
            errors.append(ViolationKind.LAST_IS_NUMERIC)
        if not policy.allow_last_char_special and CharClass.SPECIAL.matches(last):
            errors.append(ViolationKind.LAST_IS_SPECIAL)

    numeric = counter.count(CharClass.NUMERIC)
    special = counter.count(CharClass.SPECIAL)
    upper = counter.count(CharClass.UPPER)
    lower = counter.count(CharClass.LOWER)

    if numeric < policy.minimum_numeric:
        errors.append(ViolationKind.NOT_ENOUGH_NUMERIC)
    if special < policy.minimum_special:
        errors.append(ViolationKind.NOT_ENOUGH_SPECIAL)
    if upper < policy.minimum_upper:
        errors.append(ViolationKind.NOT_ENOUGH_UPPER)
    if lower < policy.minimum_lower:
        errors.append(ViolationKind.NOT_ENOUGH_LOWER)

    # A disallowed class behaves like a maximum of zero.
    if (not policy.allow_numeric and numeric > 0) or 0 < policy.maximum_numeric < numeric:
        errors.append(ViolationKind.TOO_MANY_NUMERIC)
    if (not policy.allow_special and special > 0) or 0 < policy.maximum_special < special:
        errors.append(ViolationKind.TOO_MANY_SPECIAL)
    if 0 < policy.maximum_upper < upper:
        errors.append(ViolationKind.TOO_MANY_UPPER)
    if 0 < policy.maximum_lower < lower:
        errors.append(ViolationKind.TOO_MANY_LOWER)

    if policy.minimum_strength > 0 and strength.score(password) < policy.minimum_strength:
        errors.append(ViolationKind.TOO_WEAK)

    if 0 < policy.maximum_repeat < counter.max_repeat():
        errors.append(ViolationKind.OTHER)
    elif 0 < policy.maximum_sequential_repeat < counter.max_sequential_repeat():
        errors.append(ViolationKind.OTHER)
    elif counter.unique_count() < policy.minimum_unique:
        errors.append(ViolationKind.OTHER)
    elif any(p.search(password) for p in policy.compiled_patterns):
        errors.append(ViolationKind.OTHER)

    return errors


DEFAULT_DISALLOWED_VALUES: tuple[str, ...] = (
    r"(?i).*<script.*",
    r"(?i).*javascript:.*",
    r"(?i).*%3cscript.*",
)


class DisallowedValues:
    """
    Values a generated password must never be, e.g. strings that an HTTP
    input filter would reject. A password is disallowed when one of the
    regular expressions matches it entirely.
    """

    def __init__(self, patterns: Iterable[str] = DEFAULT_DISALLOWED_VALUES) -> None:
        self.patterns = [re.compile(p) for p in patterns]

    def matches(self, password: str) -> bool:
        return any(p.fullmatch(password) for p in self.patterns)
