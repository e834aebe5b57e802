from __future__ import annotations

"""
Quantum engine: builds a circuit, puts qubits in superposition,
measures them in alternating bases, and returns raw bitstrings.
"""
from qiskit import QuantumCircuit
from qiskit_aer import AerSimulator
from qiskit import transpile

from .config import QuantumConfig, DEFAULT_QUANTUM_CONFIG


class QuantumEngine:
    """
    Encapsulates all quantum-circuit-related logic.
    """

    def __init__(self, config: QuantumConfig | None = None) -> None:
        self.config = config or DEFAULT_QUANTUM_CONFIG
        # Local simulator backend.
        self.backend = AerSimulator()

        if self.config.num_qubits < 1:
            raise ValueError("num_qubits must be at least 1")

        # Safety: ensure requested num_qubits does not exceed backend capability.
        configuration = getattr(self.backend, "configuration", None)
        backend_cfg = configuration() if callable(configuration) else None
        max_qubits = getattr(backend_cfg, "num_qubits", None)

        if max_qubits is not None and self.config.num_qubits > max_qubits:
            raise ValueError(
                f"Configured num_qubits={self.config.num_qubits} exceeds "
                f"backend limit ({max_qubits}). "
                "Lower num_qubits in QuantumConfig."
            )

        # The transpiled circuit never changes, build it once.
        self._circuit = self._build_circuit()
        self._compiled = transpile(self._circuit, self.backend)

    def _build_circuit(self) -> QuantumCircuit:
        """
        Prepare N qubits, put them in superposition, then measure
        in alternating bases (Z, X, Z, X, ...).
        """
        n = self.config.num_qubits
        qc = QuantumCircuit(n, n)

        for i in range(n):
            qc.h(i)

        # Odd indices get an extra H, i.e. they are measured in the X basis.
        for i in range(n):
            if i % 2 == 1:
                qc.h(i)
            qc.measure(i, i)

        return qc

    def get_raw_bits(self) -> list[int]:
        """
        Run the circuit once (single shot) and return one bit per qubit.
        """
        result = self.backend.run(self._compiled, shots=1).result()
        counts = result.get_counts()

        # counts is a dict like {'0101...': 1}
        bitstring = next(iter(counts.keys()))

        # Qiskit orders bits as [q_(n-1) ... q_0]; reverse so index 0 is first qubit.
        bitstring = bitstring[::-1]

        return [int(b) for b in bitstring]
