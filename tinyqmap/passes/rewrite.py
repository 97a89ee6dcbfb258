"""
Generic gate-by-gate rewrite engine.

A rewriter is any callable `rewriter(dest, op) -> bool`. It appends zero or
more gates equivalent to `op` onto `dest` and returns True, or returns False
(appending nothing) when it does not handle the gate. Qubit identifiers are
shared between source and destination: ancillae are appended after the
source register, never substituted for existing qubits.
"""
from __future__ import annotations

from typing import Callable

from ..ir import ANCILLA_PREFIX, Circuit, Gate, Operation, UnsupportedGateError

Rewriter = Callable[[Circuit, Operation], bool]


def copy_gate(dest: Circuit, op: Operation) -> bool:
    """Identity rewriter: keep the gate as is."""
    dest.append(op)
    return True


def chain(*rewriters: Rewriter) -> Rewriter:
    """Combine rewriters; the first one that handles a gate wins."""
    def rewriter(dest: Circuit, op: Operation) -> bool:
        return any(r(dest, op) for r in rewriters)
    return rewriter


def rewrite(src: Circuit, rewriter: Rewriter, n_ancillae: int = 0,
            gate_set: frozenset[Gate] | None = None) -> Circuit:
    """Build a new circuit by replaying `src` gate by gate through `rewriter`.

    The destination holds the source qubits (same order and labels) followed by
    `n_ancillae` fresh ancilla qubits, assumed to start in |0>. A gate the
    rewriter declines aborts the whole pass: gate order encodes the unitary, so
    skipping one would silently corrupt the result.

    Args:
        src: Source circuit, never mutated.
        rewriter: Per-gate rewriter, called in source order.
        n_ancillae: Extra qubits appended to the destination register.
        gate_set: Destination gate set. Defaults to the source's.

    Raises:
        UnsupportedGateError: The rewriter returned False for some gate.
    """
    if n_ancillae < 0:
        raise ValueError(f"n_ancillae must be non-negative, got {n_ancillae}")
    dest = Circuit(gate_set=src.gate_set if gate_set is None else gate_set)
    for label in src.labels: dest.create_qubit(label)
    for i in range(n_ancillae): dest.create_qubit(f"{ANCILLA_PREFIX}{i}")

    for idx, op in enumerate(src.ops):
        if not rewriter(dest, op):
            raise UnsupportedGateError(
                f"No rewrite for {op.gate.name} (controls={op.controls}, targets={op.targets}) at gate {idx}")
    return dest
