"""
Gate decomposition rewriters.

Contains:
    - canonicalize(): Positive-polarity controls, controlled SWAPs as MCX
    - decompose(): Convert non-basis gates to basis gate sequences
    - DECOMPOSITIONS: Rule table for narrow gates

Standard decompositions (all correct up to global phase):
    - SWAP → CX CX CX
    - CSWAP(ctrls; a, b) → CX(b,a) MCX(ctrls+a → b) CX(b,a)
    - CZ → H CX H
    - Z → S S, S → T T, S† → T† T†, Y → S† X S
    - MCX/MCZ with 0 or 1 control → X/CX, Z/CZ
    - Negative control c → X(c) · gate · X(c)
"""

from ..ir import Circuit, Operation, Gate
from .rewrite import chain, copy_gate, rewrite


def _decompose_swap(a: int, b: int) -> list[Operation]:
    """SWAP = CX(0,1) CX(1,0) CX(0,1)"""
    return [
        Operation(Gate.CX, (b,), (a,)),
        Operation(Gate.CX, (a,), (b,)),
        Operation(Gate.CX, (b,), (a,)),
    ]


def _decompose_cz(c: int, t: int) -> list[Operation]:
    """CZ = H(target) CX H(target)"""
    return [
        Operation(Gate.H, (t,)),
        Operation(Gate.CX, (t,), (c,)),
        Operation(Gate.H, (t,)),
    ]


def _decompose_y(q: int) -> list[Operation]:
    """Y = S X S† (applied right to left)"""
    return [Operation(Gate.SDG, (q,)), Operation(Gate.X, (q,)), Operation(Gate.S, (q,))]


def _twice(gate: Gate):
    return lambda op: [Operation(gate, op.targets), Operation(gate, op.targets)]


def _narrow_mc(gate_1q: Gate, gate_2q: Gate):
    def rule(op: Operation) -> list[Operation] | None:
        if op.n_controls == 0:
            return [Operation(gate_1q, (t,)) for t in op.targets]
        if op.n_controls == 1:
            return [Operation(gate_2q, (t,), op.controls) for t in op.targets]
        return None
    return rule


# Decomposition rules: gate -> function(op) -> list[Operation] | None (None = no rule for this arity)
DECOMPOSITIONS = {
    Gate.SWAP: lambda op: None if op.controls else _decompose_swap(*op.targets),
    Gate.CZ: lambda op: _decompose_cz(op.controls[0], op.targets[0]),
    Gate.Y: lambda op: _decompose_y(op.targets[0]),
    Gate.Z: _twice(Gate.S),
    Gate.S: _twice(Gate.T),
    Gate.SDG: _twice(Gate.TDG),
    Gate.MCX: _narrow_mc(Gate.X, Gate.CX),
    Gate.MCZ: _narrow_mc(Gate.Z, Gate.CZ),
}


def expand_negated_controls(dest: Circuit, op: Operation) -> bool:
    """Surround a gate's negative controls with X so only positive controls remain."""
    if not op.negated:
        return False
    flips = [Operation(Gate.X, (c,)) for c in op.controls if c in op.negated]
    for new_op in flips: dest.append(new_op)
    dest.append(Operation(op.gate, op.targets, op.controls))
    for new_op in flips: dest.append(new_op)
    return True


def expand_controlled_swap(dest: Circuit, op: Operation) -> bool:
    """Controlled SWAP (Fredkin) as a Toffoli-family gate between two CX."""
    if op.gate != Gate.SWAP or not op.controls or op.negated:
        return False
    a, b = op.targets
    dest.append(Operation(Gate.CX, (a,), (b,)))
    dest.append(Operation(Gate.MCX, (b,), op.controls + (a,)))
    dest.append(Operation(Gate.CX, (a,), (b,)))
    return True


def canonicalize(circuit: Circuit) -> Circuit:
    """Rewrite negated controls and controlled SWAPs into positive MCX form."""
    gate_set = circuit.gate_set | {Gate.X, Gate.CX, Gate.MCX}
    # Negated controls may sit on a controlled SWAP, so expand those in two passes
    circuit = rewrite(circuit, chain(expand_negated_controls, copy_gate), gate_set=gate_set)
    return rewrite(circuit, chain(expand_controlled_swap, copy_gate))


def _expand(op: Operation, basis: frozenset[Gate]) -> list[Operation] | None:
    if op.gate in basis:
        return [op]
    rule = DECOMPOSITIONS.get(op.gate)
    new_ops = rule(op) if rule is not None else None
    if new_ops is None:
        return None
    result = []
    for new_op in new_ops:
        expanded = _expand(new_op, basis)
        if expanded is None:
            return None
        result.extend(expanded)
    return result


def decompose_rewriter(basis: frozenset[Gate]):
    """Rewriter expanding gates recursively until every gate is in `basis`."""
    def rewriter(dest: Circuit, op: Operation) -> bool:
        if op.negated:
            return False
        ops = _expand(op, basis)
        if ops is None:
            return False
        for new_op in ops: dest.append(new_op)
        return True
    return rewriter


def decompose(circuit: Circuit, basis: frozenset[Gate]) -> Circuit:
    """Decompose non-basis gates. Raises UnsupportedGateError for gates without a rule."""
    basis = frozenset(basis)
    return rewrite(circuit, decompose_rewriter(basis), gate_set=basis)
