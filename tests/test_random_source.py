import threading

import pytest

from rpgen.config import QuantumConfig
from rpgen.entropy import amplify_entropy, bits_to_bytes, xor_streams
from rpgen.random_source import QuantumRandom, RandomSource, SecureRandom, SeededRandom


class CountingEngine:
    """Stand-in for QuantumEngine that returns predictable bits."""

    def __init__(self, width=8):
        self.width = width
        self.calls = 0

    def get_raw_bits(self):
        self.calls += 1
        return [(self.calls >> i) & 1 for i in range(self.width)]


@pytest.mark.parametrize("source", [SecureRandom(), SeededRandom(1), QuantumRandom(engine=CountingEngine())])
def test_sources_follow_protocol(source):
    assert isinstance(source, RandomSource)
    values = [source.next_int(7) for _ in range(300)]
    assert all(0 <= v < 7 for v in values)
    assert len(set(values)) > 1
    assert {source.next_bool() for _ in range(100)} == {True, False}
    with pytest.raises(ValueError):
        source.next_int(0)


def test_seeded_random_is_repeatable():
    a, b = SeededRandom(99), SeededRandom(99)
    assert [a.next_int(1000) for _ in range(20)] == [b.next_int(1000) for _ in range(20)]


def test_seeded_random_can_be_shared_between_threads():
    source = SeededRandom(5)
    results = []

    def draw():
        results.extend(source.next_int(10) for _ in range(500))

    threads = [threading.Thread(target=draw) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(results) == 2000
    assert all(0 <= v < 10 for v in results)


def test_quantum_random_combines_streams():
    engine = CountingEngine()
    source = QuantumRandom(QuantumConfig(quantum_streams=3), engine=engine)
    source.next_int(256)
    assert engine.calls == 3


def test_quantum_random_large_bounds():
    source = QuantumRandom(engine=CountingEngine())
    values = [source.next_int(70000) for _ in range(50)]
    assert all(0 <= v < 70000 for v in values)
    assert source.next_int(1) == 0


def test_quantum_random_with_simulator():
    source = QuantumRandom(QuantumConfig(num_qubits=4, quantum_streams=1))
    assert 0 <= source.next_int(10) < 10


def test_entropy_helpers():
    assert bits_to_bytes([1, 0, 1]) == bytes([0b10100000])
    assert bits_to_bytes([]) == b""
    assert xor_streams([[1, 0, 1], [1, 1, 0]]) == [0, 1, 1]
    with pytest.raises(ValueError):
        xor_streams([[1, 0], [1]])
    assert len(amplify_entropy([1, 0, 1], rounds=2)) == 32
    assert amplify_entropy([1], counter=1) != amplify_entropy([1], counter=2)
    assert amplify_entropy([1, 0, 1], rounds=0) == bits_to_bytes([1, 0, 1])
