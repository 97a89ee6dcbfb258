"""
Core IR types - the single representation used throughout.

Contains:
    - Gate: Enum of supported gates (13 primitives, two of them variadic)
    - Operation: Dataclass (gate, targets, controls, negated controls)
    - Circuit: Append-only builder over a growing qubit register
"""
from __future__ import annotations

from enum import Enum, auto
from dataclasses import dataclass


class UnsupportedGateError(ValueError):
    """Gate kind or arity not handled by a circuit, pass or format."""


class Gate(Enum):
    """Primitive gates. MCX/MCZ take any number of controls."""
    # Pauli gates
    X = auto()
    Y = auto()
    Z = auto()

    # Single-qubit Clifford+T
    H = auto()
    S = auto()
    SDG = auto()  # S-dagger (S†)
    T = auto()
    TDG = auto()  # T-dagger (T†)

    # Two-qubit
    CX = auto()
    CZ = auto()
    SWAP = auto()  # Two targets, optionally controlled (Fredkin)

    # Multi-controlled
    MCX = auto()   # Toffoli family
    MCZ = auto()

    @property
    def n_qubits(self) -> int | None:
        """Fixed arity, or None for gates whose arity depends on their controls."""
        if self in (Gate.CX, Gate.CZ): return 2
        if self in (Gate.SWAP, Gate.MCX, Gate.MCZ): return None
        return 1

    @property
    def n_targets(self) -> int | None:
        if self == Gate.SWAP: return 2
        if self == Gate.MCX: return None  # Fans out over any number of targets
        return 1


ALL_GATES = frozenset(Gate)
ELEMENTARY_GATES = frozenset({Gate.X, Gate.H, Gate.T, Gate.TDG, Gate.CX})
ANCILLA_PREFIX = "anc"


@dataclass(frozen=True)
class Operation:
    gate: Gate
    targets: tuple[int, ...]
    controls: tuple[int, ...] = ()
    negated: frozenset[int] = frozenset()  # Controls with negative polarity

    @property
    def qubits(self) -> tuple[int, ...]:
        return self.controls + self.targets

    @property
    def n_controls(self) -> int: return len(self.controls)


def _check_operation(op: Operation, n_qubits: int) -> None:
    g = op.gate
    if not op.targets:
        raise ValueError(f"{g.name} needs at least one target")
    if g.n_targets is not None and len(op.targets) != g.n_targets:
        raise ValueError(f"{g.name} takes {g.n_targets} target(s), got {op.targets}")
    if g.n_qubits == 1 and op.controls:
        raise ValueError(f"{g.name} takes no controls, got {op.controls}")
    if g.n_qubits == 2 and len(op.controls) != 1:
        raise ValueError(f"{g.name} takes exactly one control, got {op.controls}")
    qs = op.qubits
    for q in qs:
        if not (0 <= q < n_qubits):
            raise ValueError(f"Invalid qubit index {q} for {n_qubits}-qubit circuit in {g.name}")
    if len(set(qs)) != len(qs):
        raise ValueError(f"{g.name} repeats a qubit: controls={op.controls} targets={op.targets}")
    if not op.negated <= set(op.controls):
        raise ValueError(f"Negated qubits {sorted(op.negated - set(op.controls))} are not controls of {g.name}")


class Circuit:
    """Append-only circuit. The qubit register only grows, operations are never removed."""

    def __init__(self, n_qubits: int = 0, gate_set: frozenset[Gate] | None = None):
        self.gate_set = ALL_GATES if gate_set is None else frozenset(gate_set)
        self.labels: list[str] = []
        self.ops: list[Operation] = []
        for _ in range(n_qubits): self.create_qubit()

    @property
    def n_qubits(self) -> int: return len(self.labels)

    @property
    def n_gates(self) -> int: return len(self.ops)

    def __len__(self) -> int: return len(self.ops)
    def __iter__(self): return iter(self.ops)

    def supports(self, gate: Gate) -> bool: return gate in self.gate_set

    def create_qubit(self, label: str | None = None) -> int:
        """Append a fresh qubit and return its identifier."""
        qid = len(self.labels)
        self.labels.append(f"q{qid}" if label is None else label)
        return qid

    def append(self, op: Operation) -> Operation:
        """Append an already-built operation after validating it against this circuit."""
        if op.gate not in self.gate_set:
            names = ", ".join(sorted(g.name for g in self.gate_set))
            raise UnsupportedGateError(f"Gate {op.gate.name} not in circuit gate set {{{names}}}")
        _check_operation(op, self.n_qubits)
        self.ops.append(op)
        return op

    def add_gate(self, gate: Gate, targets, controls=(), negated=()) -> Operation:
        return self.append(Operation(gate, tuple(targets), tuple(controls), frozenset(negated)))

    def _add(self, gate: Gate, targets: tuple, controls: tuple = ()) -> "Circuit":
        self.add_gate(gate, targets, controls)
        return self

    def x(self, q: int) -> "Circuit": return self._add(Gate.X, (q,))
    def y(self, q: int) -> "Circuit": return self._add(Gate.Y, (q,))
    def z(self, q: int) -> "Circuit": return self._add(Gate.Z, (q,))
    def h(self, q: int) -> "Circuit": return self._add(Gate.H, (q,))
    def s(self, q: int) -> "Circuit": return self._add(Gate.S, (q,))
    def sdg(self, q: int) -> "Circuit": return self._add(Gate.SDG, (q,))
    def t(self, q: int) -> "Circuit": return self._add(Gate.T, (q,))
    def tdg(self, q: int) -> "Circuit": return self._add(Gate.TDG, (q,))
    def cx(self, c: int, t: int) -> "Circuit": return self._add(Gate.CX, (t,), (c,))
    def cz(self, c: int, t: int) -> "Circuit": return self._add(Gate.CZ, (t,), (c,))
    def swap(self, a: int, b: int, controls=()) -> "Circuit": return self._add(Gate.SWAP, (a, b), tuple(controls))
    def mcz(self, controls, t: int) -> "Circuit": return self._add(Gate.MCZ, (t,), tuple(controls))

    def mcx(self, controls, targets) -> "Circuit":
        """Multi-controlled X. `targets` may be a single qubit or a sequence."""
        targets = (targets,) if isinstance(targets, int) else tuple(targets)
        return self._add(Gate.MCX, targets, tuple(controls))

    def count(self, gate: Gate) -> int:
        return sum(op.gate == gate for op in self.ops)
