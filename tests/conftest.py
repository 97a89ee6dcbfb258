"""
Pytest fixtures for test devices and circuits, plus a small statevector simulator.
"""
from math import sqrt, pi

import numpy as np
import pytest

from tinyqmap.ir import Circuit, Gate
from tinyqmap.device import Device


# =============================================================================
# Topology Factories (test utilities)
# =============================================================================

def line_topology(n: int) -> frozenset[tuple[int, int]]:
    """Linear chain: 0-1-2-3-..."""
    return frozenset((i, i + 1) for i in range(n - 1))


def ring_topology(n: int) -> frozenset[tuple[int, int]]:
    """Closed chain: 0-1-...-(n-1)-0"""
    return line_topology(n) | {(n - 1, 0)}


def grid_topology(rows: int, cols: int) -> frozenset[tuple[int, int]]:
    """2D grid topology."""
    edges = set()
    for r in range(rows):
        for c in range(cols):
            i = r * cols + c
            if c < cols - 1: edges.add((i, i + 1))
            if r < rows - 1: edges.add((i, i + cols))
    return frozenset(edges)


def all_to_all_topology(n: int) -> frozenset[tuple[int, int]]:
    """Every qubit connected to every other."""
    return frozenset((i, j) for i in range(n) for j in range(i + 1, n))


# =============================================================================
# Test Devices
# =============================================================================

@pytest.fixture
def line_3():
    """0-1-2: qubits 0,1 coupled, 1,2 coupled, 0,2 not."""
    return Device(3, line_topology(3), name="line_3")

@pytest.fixture
def line_5():
    return Device(5, line_topology(5), name="line_5")

@pytest.fixture
def grid_4():
    """2x2 grid: 0-1, 2-3, 0-2, 1-3."""
    return Device(4, grid_topology(2, 2), name="grid_4")

@pytest.fixture
def full_6():
    return Device(6, all_to_all_topology(6), name="full_6")


# =============================================================================
# Test Circuits
# =============================================================================

@pytest.fixture
def toffoli_circuit():
    """CCX(0, 1 -> 2)."""
    return Circuit(3).mcx([0, 1], 2)

@pytest.fixture
def c3x_circuit():
    """C3X(0, 1, 2 -> 3) with no spare qubit."""
    return Circuit(4).mcx([0, 1, 2], 3)


# =============================================================================
# Statevector simulation (little endian: bit q of the index is qubit q)
# =============================================================================

_MATRICES = {
    Gate.X: np.array([[0, 1], [1, 0]], dtype=complex),
    Gate.Y: np.array([[0, -1j], [1j, 0]], dtype=complex),
    Gate.Z: np.diag([1, -1]).astype(complex),
    Gate.H: np.array([[1, 1], [1, -1]], dtype=complex) / sqrt(2),
    Gate.S: np.diag([1, 1j]),
    Gate.SDG: np.diag([1, -1j]),
    Gate.T: np.diag([1, np.exp(1j * pi / 4)]),
    Gate.TDG: np.diag([1, np.exp(-1j * pi / 4)]),
}
_MATRICES[Gate.CX] = _MATRICES[Gate.MCX] = _MATRICES[Gate.X]
_MATRICES[Gate.CZ] = _MATRICES[Gate.MCZ] = _MATRICES[Gate.Z]


def _control_mask(idx: np.ndarray, op) -> np.ndarray:
    mask = np.ones(len(idx), dtype=bool)
    for c in op.controls:
        bit = (idx >> c) & 1
        mask &= (bit == 0) if c in op.negated else (bit == 1)
    return mask


def _apply(state: np.ndarray, op, n: int) -> np.ndarray:
    idx = np.arange(2 ** n)
    ctrl = _control_mask(idx, op)
    new = state.copy()
    if op.gate == Gate.SWAP:
        a, b = op.targets
        sel = idx[ctrl & (((idx >> a) & 1) == 1) & (((idx >> b) & 1) == 0)]
        other = sel ^ (1 << a) ^ (1 << b)
        new[sel], new[other] = state[other], state[sel]
        return new
    m = _MATRICES[op.gate]
    for t in op.targets:
        i0 = idx[ctrl & (((idx >> t) & 1) == 0)]
        i1 = i0 | (1 << t)
        a0, a1 = new[i0], new[i1]
        new[i0], new[i1] = m[0, 0] * a0 + m[0, 1] * a1, m[1, 0] * a0 + m[1, 1] * a1
    return new


def simulate(circuit: Circuit, basis_index: int = 0) -> np.ndarray:
    """Statevector after running `circuit` on the computational basis state |basis_index>."""
    n = circuit.n_qubits
    state = np.zeros(2 ** n, dtype=complex)
    state[basis_index] = 1.0
    for op in circuit.ops:
        state = _apply(state, op, n)
    return state


def classical_output(circuit: Circuit, basis_index: int, tol: float = 1e-9) -> int | None:
    """Basis state reached from |basis_index>, or None if the output is not a basis state."""
    state = simulate(circuit, basis_index)
    out = int(np.argmax(np.abs(state)))
    return out if abs(abs(state[out]) - 1.0) < tol else None


def states_equal(a: np.ndarray, b: np.ndarray, tol: float = 1e-9) -> bool:
    """Check if two states are equal up to global phase."""
    if a.shape != b.shape: return False
    return np.isclose(abs(np.vdot(a, b)), 1.0, atol=tol)
