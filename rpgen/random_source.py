"""
Randomness sources for password generation.

The generator only needs uniform integers below a bound and coin flips.
Every source here may be shared by concurrent generate calls.
"""

from __future__ import annotations

import random
import secrets
import threading
from typing import Protocol, runtime_checkable

from .config import QuantumConfig, DEFAULT_QUANTUM_CONFIG
from .entropy import amplify_entropy, xor_streams


@runtime_checkable
class RandomSource(Protocol):
    def next_int(self, bound: int) -> int:
        """Uniform integer in [0, bound)."""
        ...

    def next_bool(self) -> bool:
        ...


class SecureRandom:
    """
    Operating system CSPRNG. Stateless, so no locking is needed.
    """

    def __init__(self) -> None:
        self._rng = secrets.SystemRandom()

    def next_int(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError(f"bound must be positive (got {bound})")
        return self._rng.randrange(bound)

    def next_bool(self) -> bool:
        return self._rng.randrange(2) == 1


class SeededRandom:
    """
    Deterministic source for tests and reproducible runs. Never use it for
    real passwords.
    """

    def __init__(self, seed: int | str | None = None) -> None:
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def next_int(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError(f"bound must be positive (got {bound})")
        with self._lock:
            return self._rng.randrange(bound)

    def next_bool(self) -> bool:
        with self._lock:
            return self._rng.random() < 0.5


class QuantumRandom:
    """
    Randomness drawn from measured qubits.

    Each refill samples `quantum_streams` circuit runs, XORs them and
    mixes the result with SHA-256 into a 32 byte block. Integers are
    taken from the block with rejection sampling so they stay uniform.
    """

    def __init__(self, config: QuantumConfig | None = None, engine=None) -> None:
        self.config = config or DEFAULT_QUANTUM_CONFIG
        if engine is None:
            # Imported here so the other sources work without qiskit loaded.
            from .quantum_engine import QuantumEngine

            engine = QuantumEngine(self.config)
        self.engine = engine
        self._pool = bytearray()
        self._blocks = 0
        self._lock = threading.Lock()

    def _refill(self) -> None:
        streams = [self.engine.get_raw_bits() for _ in range(max(1, self.config.quantum_streams))]
        combined = xor_streams(streams)
        # At least one mixing round, raw bits alone are too few per block.
        rounds = max(1, self.config.entropy_rounds)
        self._pool.extend(amplify_entropy(combined, rounds, counter=self._blocks))
        self._blocks += 1

    def _take(self, count: int) -> bytes:
        while len(self._pool) < count:
            self._refill()
        data = bytes(self._pool[:count])
        del self._pool[:count]
        return data

    def next_int(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError(f"bound must be positive (got {bound})")
        if bound == 1:
            return 0

        width = (bound.bit_length() + 7) // 8
        space = 1 << (8 * width)
        limit = space - (space % bound)
        with self._lock:
            while True:
                value = int.from_bytes(self._take(width), "big")
                if value < limit:
                    return value % bound

    def next_bool(self) -> bool:
        return self.next_int(2) == 1
