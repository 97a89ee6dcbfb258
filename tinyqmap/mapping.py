"""
Device-aware mapping view.

Contains:
    - MappingView: Owns a circuit over physical qubits, translates virtual qubits on every gate
    - map_circuit(): Replay a whole circuit through a MappingView
    - invert_map(): virtual->physical <-> physical->virtual

Mapping is online: each gate is translated and checked against the device
coupling as it is added. SWAPs are a primitive here, not a routing search.
"""
from __future__ import annotations

from .ir import Circuit, Gate, Operation, UnsupportedGateError
from .device import Device


class UnmappableGateError(Exception):
    """Two-qubit gate lands on non-adjacent physical qubits under strict mapping."""

    def __init__(self, op: Operation, physical: tuple[int, int], index: int | None = None):
        self.op = op
        self.physical = physical
        where = f" at gate {index}" if index is not None else ""
        super().__init__(f"{op.gate.name}{op.qubits}{where} maps to physical qubits {physical}, "
                         f"which are not coupled")


# Multi-controlled gates with 0 or 1 control: (single-qubit form, two-qubit form)
_NARROW_FORMS = {Gate.MCX: (Gate.X, Gate.CX), Gate.MCZ: (Gate.Z, Gate.CZ)}


def invert_map(mapping: list[int]) -> list[int]:
    """Invert a permutation: result[mapping[i]] == i."""
    inverse = [0] * len(mapping)
    for i, p in enumerate(mapping):
        inverse[p] = i
    return inverse


def _check_permutation(mapping, n: int) -> list[int]:
    mapping = list(mapping)
    if sorted(mapping) != list(range(n)):
        raise ValueError(f"Map {mapping} is not a permutation of {n} device qubits")
    return mapping


class MappingView:
    """
    Circuit decorator that places virtual qubits on physical device qubits.

    Single-qubit gates are always accepted. Two-qubit gates are accepted when
    their physical qubits are coupled; otherwise strict mode rejects them
    (returns None, appends nothing) and partial mode accepts them anyway and
    marks the mapping as partial for good.

    The initial virtual->physical map is frozen once the first gate is added;
    later changes (set_virtual_physical_map, add_swap) only move the live map.
    Not thread-safe: calls on one view must be serialized by the caller.
    """

    def __init__(self, network: Circuit, device: Device, virtual_physical_map: list[int] | None = None,
                 allow_partial: bool = False):
        if network.n_qubits > device.n_qubits:
            raise ValueError(f"Device has {device.n_qubits} qubits but circuit needs {network.n_qubits}")
        self.device = device
        self.allow_partial = allow_partial
        self._partial = False
        self.circuit = Circuit(gate_set=network.gate_set)
        for label in network.labels: self.circuit.create_qubit(label)
        while self.circuit.n_qubits < device.n_qubits: self.circuit.create_qubit()
        identity = list(range(device.n_qubits))
        self._init_v2p = identity
        self._v2p = identity.copy()
        if virtual_physical_map is not None:
            self.set_virtual_physical_map(virtual_physical_map)

    # Forwarded circuit queries
    @property
    def n_qubits(self) -> int: return self.circuit.n_qubits
    @property
    def n_gates(self) -> int: return self.circuit.n_gates
    @property
    def ops(self) -> list[Operation]: return self.circuit.ops
    def __len__(self) -> int: return len(self.circuit)
    def __iter__(self): return iter(self.circuit)

    @property
    def is_partial(self) -> bool:
        """True once any gate was placed on uncoupled physical qubits."""
        return self._partial

    def physical(self, virtual: int) -> int:
        """Current physical location of a virtual qubit."""
        if not (0 <= virtual < len(self._v2p)):
            raise ValueError(f"Invalid virtual qubit index {virtual} for {len(self._v2p)}-qubit device")
        return self._v2p[virtual]

    def add_single_qubit_gate(self, gate: Gate, target: int) -> Operation:
        if gate.n_qubits != 1:
            raise ValueError(f"{gate.name} is not a single-qubit gate")
        return self.circuit.append(Operation(gate, (self.physical(target),)))

    def add_two_qubit_gate(self, gate: Gate, control: int, target: int) -> Operation | None:
        """Add a 2Q gate on virtual qubits. Returns None if rejected by strict mapping."""
        if gate not in (Gate.CX, Gate.CZ, Gate.SWAP):
            raise ValueError(f"{gate.name} is not a two-qubit gate")
        if control == target:
            raise ValueError(f"{gate.name} on virtual qubit {control} twice")
        pc, pt = self.physical(control), self.physical(target)
        coupled = self.device.adjacent(pc, pt)
        if not coupled and not self.allow_partial:
            return None
        op = Operation(gate, (pc, pt)) if gate == Gate.SWAP else Operation(gate, (pt,), (pc,))
        self.circuit.append(op)
        # Only a gate that actually landed marks the mapping partial
        if not coupled:
            self._partial = True
        return op

    def add(self, op: Operation) -> Operation | None:
        """Add an existing single- or two-qubit operation given on virtual qubits."""
        if op.negated:
            raise UnsupportedGateError(f"{op.gate.name} has negated controls; normalize them before mapping")
        qs = op.qubits
        gate_1q, gate_2q = _NARROW_FORMS.get(op.gate, (op.gate, op.gate))
        if len(qs) == 1:
            return self.add_single_qubit_gate(gate_1q, qs[0])
        if len(qs) == 2 and (op.gate == Gate.SWAP or op.n_controls == 1):
            return self.add_two_qubit_gate(gate_2q, *qs)
        raise UnsupportedGateError(
            f"{op.gate.name} on {len(qs)} qubits cannot be mapped directly; decompose it first")

    def virtual_physical_map(self) -> list[int]:
        return self._v2p.copy()

    def initial_virtual_physical_map(self) -> list[int]:
        """The map at the start of the session, frozen once the first gate exists."""
        return self._init_v2p.copy()

    def set_virtual_physical_map(self, mapping: list[int]) -> None:
        """Replace the live map. Before any gate exists this also sets the initial map."""
        mapping = _check_permutation(mapping, self.device.n_qubits)
        if self.circuit.n_gates == 0:
            self._init_v2p = mapping.copy()
        self._v2p = mapping

    def physical_virtual_map(self) -> list[int]:
        return invert_map(self._v2p)

    def set_physical_virtual_map(self, mapping: list[int]) -> None:
        self.set_virtual_physical_map(invert_map(_check_permutation(mapping, self.device.n_qubits)))

    def add_swap(self, phys_a: int, phys_b: int) -> None:
        """Exchange two coupled physical qubits and update the live map.

        Emits a native SWAP when the circuit's gate set has one, else CX(a,b) CX(b,a) CX(a,b).
        """
        if not self.device.adjacent(phys_a, phys_b):
            raise ValueError(f"SWAP({phys_a},{phys_b}) on qubits that are not coupled")
        if self.circuit.supports(Gate.SWAP):
            self.circuit.append(Operation(Gate.SWAP, (phys_a, phys_b)))
        else:
            self.circuit.append(Operation(Gate.CX, (phys_b,), (phys_a,)))
            self.circuit.append(Operation(Gate.CX, (phys_a,), (phys_b,)))
            self.circuit.append(Operation(Gate.CX, (phys_b,), (phys_a,)))
        va, vb = self._v2p.index(phys_a), self._v2p.index(phys_b)
        self._v2p[va], self._v2p[vb] = phys_b, phys_a


def map_circuit(circuit: Circuit, device: Device, virtual_physical_map: list[int] | None = None,
                allow_partial: bool = False) -> MappingView:
    """Place every gate of `circuit` on `device`. Gates must already be single- or two-qubit.

    Raises:
        UnmappableGateError: Strict mode and a 2Q gate lands on uncoupled qubits.
        UnsupportedGateError: A gate with more than two qubits or negated controls.
    """
    view = MappingView(circuit, device, virtual_physical_map, allow_partial)
    for idx, op in enumerate(circuit.ops):
        if view.add(op) is None:
            raise UnmappableGateError(op, tuple(view.physical(q) for q in op.qubits), idx)
    return view
