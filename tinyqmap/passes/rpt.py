"""
Relative-phase Toffoli decomposition.

Contains:
    - rpt(): Rewrite MCX (0-4 controls) and 2-control MCZ into {X, H, T, T†, CX}
    - rpt_rewriter(): The per-gate rewriter, combinable with other rewriters
    - find_helper(): Helper qubit search for the 3- and 4-control cases

Sequences (gate order and qubit roles must be kept exactly):
    - CCZ core: 7 T/T† + 6 CX = 13 gates, CCX adds an H sandwich on the target
    - C3X: R1-TOF(a,b,h) · S-R2-TOF(c,h,t) · R1-TOF⁻¹ · S-R2-TOF⁻¹ (Maslov 2016)
    - C4X: published 4-control relative-phase construction, gate for gate
Extra MCX targets are fanned out from the first target with CX before and after.
The 3-/4-control sequences restore the helper whatever its state, so any qubit
outside the gate can serve; `rpt()` reserves one ancilla for narrow registers.
"""

from ..ir import Circuit, Operation, Gate, ELEMENTARY_GATES, UnsupportedGateError
from .rewrite import rewrite

N_ANCILLAE = 1


class NoHelperQubitError(UnsupportedGateError):
    """No qubit outside the gate's controls and targets is available as helper."""

    def __init__(self, op: Operation, n_qubits: int):
        self.op = op
        super().__init__(f"Insufficient helper qubits for {op.gate.name} with {op.n_controls} controls "
                         f"on {n_qubits}-qubit circuit (controls={op.controls}, targets={op.targets})")


def _h(q: int) -> Operation: return Operation(Gate.H, (q,))
def _t(q: int) -> Operation: return Operation(Gate.T, (q,))
def _tdg(q: int) -> Operation: return Operation(Gate.TDG, (q,))
def _cx(c: int, t: int) -> Operation: return Operation(Gate.CX, (t,), (c,))


def find_helper(n_qubits: int, controls, targets) -> int | None:
    """Lowest qubit index in [0, n_qubits) that is neither a control nor a target."""
    used = set(controls) | set(targets)
    return next((q for q in range(n_qubits) if q not in used), None)


def _fanout(primary: int, targets: tuple[int, ...]) -> list[Operation]:
    return [_cx(primary, t) for t in targets[1:]]


def _ccz_core(a: int, b: int, t: int) -> list[Operation]:
    """CCZ(a, b, t): 6 CX + 4T + 3T† = 13 gates."""
    return [
        _cx(b, t), _tdg(t),
        _cx(a, t), _t(t),
        _cx(b, t), _tdg(t),
        _cx(a, t), _t(t),
        _cx(a, b), _tdg(b),
        _cx(a, b), _t(b),
        _t(a),
    ]


def _decompose_c2x(controls: tuple[int, ...], targets: tuple[int, ...]) -> list[Operation]:
    a, b = controls
    d = targets[0]
    return _fanout(d, targets) + [_h(d)] + _ccz_core(a, b, d) + [_h(d)] + _fanout(d, targets)


def _r1_tof(a: int, b: int, h: int) -> list[Operation]:
    """Relative-phase Toffoli onto h. Applied twice, the phases cancel."""
    return [
        _h(h), _t(h),
        _cx(b, h), _tdg(h),
        _cx(a, h), _t(h),
        _cx(b, h), _tdg(h),
        _h(h),
    ]


def _decompose_c3x(controls: tuple[int, ...], targets: tuple[int, ...], h: int) -> list[Operation]:
    a, b, c = controls
    d = targets[0]
    s_r2_tof = [
        _h(d),
        _cx(d, h), _tdg(h),
        _cx(c, h), _t(h),
        _cx(d, h), _tdg(h),
        _cx(c, h), _t(h),
    ]
    s_r2_tof_inv = [
        _tdg(h),
        _cx(c, h), _t(h),
        _cx(d, h), _tdg(h),
        _cx(c, h), _t(h),
        _cx(d, h),
        _h(d),
    ]
    return (_fanout(d, targets)
            + _r1_tof(a, b, h) + s_r2_tof + _r1_tof(a, b, h) + s_r2_tof_inv
            + _fanout(d, targets))


def _decompose_c4x(controls: tuple[int, ...], targets: tuple[int, ...], h: int) -> list[Operation]:
    a, b, c, d = controls
    e = targets[0]

    # Helper rotation driven by the third control, appears four times
    def c_block() -> list[Operation]:
        return [_h(h), _t(h), _cx(c, h), _tdg(h), _h(h)]

    return _fanout(e, targets) + [
        *c_block(),
        _cx(a, h), _t(h),
        _cx(b, h), _tdg(h),
        _cx(a, h), _t(h),
        _cx(b, h), _tdg(h),
        *c_block(),
        _h(e),
        _cx(e, h), _tdg(h),
        _cx(d, h), _t(h),
        _cx(e, h), _tdg(h),
        _cx(d, h), _t(h),
        *c_block(),
        _t(h),
        _cx(b, h), _tdg(h),
        _cx(a, h), _t(h),
        _cx(b, h), _tdg(h),
        _cx(a, h),
        *c_block(),
        _tdg(h),
        _cx(d, h), _t(h),
        _cx(e, h), _tdg(h),
        _cx(d, h), _t(h),
        _cx(e, h),
        _h(e),
    ] + _fanout(e, targets)


def _decompose_mcx(dest: Circuit, op: Operation) -> list[Operation] | None:
    controls, targets = op.controls, op.targets
    n = len(controls)
    if n == 0:
        return [Operation(Gate.X, (t,)) for t in targets]
    if n == 1:
        return [_cx(controls[0], t) for t in targets]
    if n == 2:
        return _decompose_c2x(controls, targets)
    if n in (3, 4):
        # Search before emitting anything so a failure leaves dest untouched
        helper = find_helper(dest.n_qubits, controls, targets)
        if helper is None:
            raise NoHelperQubitError(op, dest.n_qubits)
        return (_decompose_c3x if n == 3 else _decompose_c4x)(controls, targets, helper)
    return None


def rpt_rewriter(dest: Circuit, op: Operation) -> bool:
    """Rewrite one MCX/MCZ gate into Clifford+T. Returns False for gates it does not handle.

    Raises:
        NoHelperQubitError: 3 or 4 controls and every qubit of `dest` is used by the gate.
    """
    if op.negated:
        return False
    if op.gate == Gate.MCX:
        ops = _decompose_mcx(dest, op)
    elif op.gate == Gate.MCZ and op.n_controls == 2:
        ops = _ccz_core(op.controls[0], op.controls[1], op.targets[0])
    else:
        ops = None
    if ops is None:
        return False
    for new_op in ops: dest.append(new_op)
    return True


def rpt(circuit: Circuit) -> Circuit:
    """Decompose every MCX/MCZ gate of `circuit`, adding one ancilla qubit.

    Raises:
        UnsupportedGateError: A gate outside the supported MCX/MCZ families.
        NoHelperQubitError: No helper qubit for a 3- or 4-control gate.
    """
    return rewrite(circuit, rpt_rewriter, N_ANCILLAE, gate_set=circuit.gate_set | ELEMENTARY_GATES)
