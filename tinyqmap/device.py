"""
Hardware coupling model.

Contains:
    - Device: Physical qubit count + symmetric coupling matrix
    - Helper methods: adjacent, neighbors, from_coupling_matrix

Note: coupling is always undirected. `coupling[i][j]` true means physical
qubits i and j may host a two-qubit gate directly.
"""

from dataclasses import dataclass, field
import numpy as np


@dataclass
class Device:
    """Describes which pairs of physical qubits are coupled."""
    n_qubits: int
    edges: frozenset[tuple[int, int]]
    name: str = ""
    _coupling: np.ndarray = field(default=None, init=False, repr=False, compare=False)
    _adj: dict[int, list[int]] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.edges = frozenset(self.edges)
        for a, b in self.edges:
            if not (0 <= a < self.n_qubits and 0 <= b < self.n_qubits):
                raise ValueError(f"Edge ({a},{b}) has invalid qubit index for {self.n_qubits}-qubit device")
            if a == b:
                raise ValueError(f"Self-loop ({a},{a}) not allowed")

        coupling = np.zeros((self.n_qubits, self.n_qubits), dtype=bool)
        for a, b in self.edges:
            coupling[a, b] = coupling[b, a] = True
        coupling.setflags(write=False)
        self._coupling = coupling
        # Pre-sorted for determinism
        self._adj = {q: np.flatnonzero(coupling[q]).tolist() for q in range(self.n_qubits)}

    @classmethod
    def from_coupling_matrix(cls, matrix, name: str = "") -> "Device":
        """Build a device from a square, symmetric boolean matrix."""
        m = np.asarray(matrix, dtype=bool)
        if m.ndim != 2 or m.shape[0] != m.shape[1]:
            raise ValueError(f"Coupling matrix must be square, got shape {m.shape}")
        if not np.array_equal(m, m.T):
            raise ValueError("Coupling matrix must be symmetric")
        if m.diagonal().any():
            q = int(np.flatnonzero(m.diagonal())[0])
            raise ValueError(f"Self-loop ({q},{q}) not allowed")
        rows, cols = np.nonzero(np.triu(m))
        return cls(m.shape[0], frozenset(zip(rows.tolist(), cols.tolist())), name)

    @property
    def coupling_matrix(self) -> np.ndarray:
        """Read-only symmetric adjacency matrix."""
        return self._coupling

    def adjacent(self, q0: int, q1: int) -> bool:
        """Check if two physical qubits can host a 2Q gate directly."""
        if not (0 <= q0 < self.n_qubits and 0 <= q1 < self.n_qubits):
            raise ValueError(f"Invalid physical qubit index: ({q0}, {q1}) for {self.n_qubits}-qubit device")
        return bool(self._coupling[q0, q1])

    def neighbors(self, qubit: int) -> list[int]:
        """Return sorted list of qubits adjacent to given qubit."""
        return self._adj[qubit]
