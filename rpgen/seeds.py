"""
Seed machine: character alphabets derived from the configured seed phrases.
"""

from __future__ import annotations

from enum import Enum
from functools import cached_property, lru_cache
from typing import Iterable

from .config import DEFAULT_SEED_PHRASES
from .random_source import RandomSource


class CharClass(Enum):
    ALL = "all"
    NUMERIC = "numeric"
    SPECIAL = "special"
    UPPER = "upper"
    LOWER = "lower"

    def matches(self, char: str) -> bool:
        if self is CharClass.NUMERIC:
            return char.isdecimal()
        if self is CharClass.SPECIAL:
            return not (char.isalpha() or char.isdecimal())
        if self is CharClass.UPPER:
            return char.isupper()
        if self is CharClass.LOWER:
            return char.islower()
        return True


def normalize_seeds(seeds: Iterable[str] | None) -> tuple[str, ...]:
    """
    Drop empty phrases and duplicates (keeping first-seen order). Falls back
    to DEFAULT_SEED_PHRASES when nothing usable is left.
    """
    if seeds is None:
        return DEFAULT_SEED_PHRASES
    cleaned = tuple(dict.fromkeys(s for s in seeds if s))
    return cleaned or DEFAULT_SEED_PHRASES


def unique_chars(seeds: Iterable[str]) -> str:
    """
    Every distinct character across the phrases, in first-seen order.
    """
    return "".join(dict.fromkeys(c for phrase in seeds for c in phrase))


def _filter(chars: str, char_class: CharClass) -> str:
    return "".join(c for c in chars if char_class.matches(c))


@lru_cache(maxsize=None)
def default_alphabet(char_class: CharClass) -> str:
    """
    Alphabet of the built-in seed phrases. Never empty.
    """
    return _filter(unique_chars(DEFAULT_SEED_PHRASES), char_class)


class SeedMachine:
    """
    Alphabets for one generate call.

    Administrators may configure degenerate seed lists (a single
    character, no digits at all, ...). Instead of failing, any alphabet
    that comes out too small is replaced by the default seed phrases'
    alphabet of the same class, so every alphabet is non-empty.
    """

    def __init__(self, random_source: RandomSource, seeds: Iterable[str] | None = None) -> None:
        self.random_source = random_source
        self.seeds = normalize_seeds(seeds)

    def random_seed(self) -> str:
        return self.seeds[self.random_source.next_int(len(self.seeds))]

    @cached_property
    def all_chars(self) -> str:
        chars = unique_chars(self.seeds)
        return chars if len(chars) > 2 else default_alphabet(CharClass.ALL)

    def _class_chars(self, char_class: CharClass) -> str:
        chars = _filter(self.all_chars, char_class)
        return chars or default_alphabet(char_class)

    @cached_property
    def num_chars(self) -> str:
        return self._class_chars(CharClass.NUMERIC)

    @cached_property
    def special_chars(self) -> str:
        return self._class_chars(CharClass.SPECIAL)

    @cached_property
    def upper_chars(self) -> str:
        return self._class_chars(CharClass.UPPER)

    @cached_property
    def lower_chars(self) -> str:
        return self._class_chars(CharClass.LOWER)

    def class_alphabet(self, char_class: CharClass) -> str:
        if char_class is CharClass.ALL:
            return self.all_chars
        if char_class is CharClass.NUMERIC:
            return self.num_chars
        if char_class is CharClass.SPECIAL:
            return self.special_chars
        if char_class is CharClass.UPPER:
            return self.upper_chars
        return self.lower_chars
