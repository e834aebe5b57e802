"""
Process-wide generation statistics.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class Statistic(Enum):
    GENERATED_PASSWORDS = "generated_passwords"
    GENERATION_EXHAUSTED = "generation_exhausted"
    DISALLOWED_REGENERATIONS = "disallowed_regenerations"


Listener = Callable[[Statistic, int], None]


class StatisticsClient:
    """
    Thread-safe counters. Listeners are told about every increment; a
    failing listener is logged and otherwise ignored.
    """

    def __init__(self) -> None:
        self._counts: Counter = Counter()
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def increment(self, stat: Statistic) -> int:
        with self._lock:
            self._counts[stat] += 1
            value = self._counts[stat]
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(stat, value)
            except Exception:
                logger.warning("statistics listener failed for %s", stat.value, exc_info=True)
        return value

    def get(self, stat: Statistic) -> int:
        with self._lock:
            return self._counts[stat]

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


STATISTICS = StatisticsClient()
