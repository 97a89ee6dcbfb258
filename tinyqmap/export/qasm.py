"""OpenQASM export: to_openqasm2()"""
from __future__ import annotations

from ..ir import Circuit, Gate, Operation, UnsupportedGateError

# qelib1.inc names for gates without controls beyond their fixed arity
_QASM2_NAMES = {
    Gate.X: "x", Gate.Y: "y", Gate.Z: "z", Gate.H: "h",
    Gate.S: "s", Gate.SDG: "sdg", Gate.T: "t", Gate.TDG: "tdg",
    Gate.CX: "cx", Gate.CZ: "cz", Gate.SWAP: "swap",
}
# Multi-controlled gates by control count
_QASM2_MC_NAMES = {
    (Gate.MCX, 0): "x", (Gate.MCX, 1): "cx", (Gate.MCX, 2): "ccx",
    (Gate.MCZ, 0): "z", (Gate.MCZ, 1): "cz",
    (Gate.SWAP, 1): "cswap",
}


def _format_gate(name: str, qubits) -> str:
    return f'{name} {", ".join(f"q[{q}]" for q in qubits)};'


def _statements(op: Operation) -> list[str]:
    if op.negated:
        raise UnsupportedGateError(f"{op.gate.name} has negated controls. Use canonicalize() first.")
    if op.gate in (Gate.MCX, Gate.MCZ) or (op.gate == Gate.SWAP and op.controls):
        name = _QASM2_MC_NAMES.get((op.gate, op.n_controls))
        if name is None:
            raise UnsupportedGateError(
                f"{op.gate.name} with {op.n_controls} controls not in qelib1.inc. Use rpt() or decompose.")
        if op.gate == Gate.SWAP:
            return [_format_gate(name, op.qubits)]
        return [_format_gate(name, op.controls + (t,)) for t in op.targets]
    return [_format_gate(_QASM2_NAMES[op.gate], op.qubits)]


def to_openqasm2(circuit: Circuit, layout: list[int] | None = None) -> str:
    """Export circuit to OpenQASM 2.0 format. `layout` adds a virtual->physical comment block."""
    lines = ['OPENQASM 2.0;', 'include "qelib1.inc";', f'qreg q[{circuit.n_qubits}];']
    if layout is not None:
        lines.extend(['', '// Qubit mapping (virtual -> physical):'])
        lines.extend(f"// v{v} -> p{p}" for v, p in enumerate(layout))
    for op in circuit.ops:
        lines.extend(_statements(op))
    return '\n'.join(lines)
