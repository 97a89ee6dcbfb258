"""
Main compilation entry point.

Pipeline:
1. canonicalize: negative controls and controlled SWAPs into positive MCX
2. rpt: relative-phase Toffoli decomposition (+1 ancilla)
3. decompose: optional lowering to a basis gate set
4. map: online placement on the device coupling graph

No routing search happens here: with a strict mapping every two-qubit gate
must already land on coupled qubits under the given initial map.
"""

import warnings

from .ir import Circuit, Gate, ELEMENTARY_GATES
from .device import Device
from .mapping import MappingView, map_circuit
from .passes.decompose import canonicalize, decompose
from .passes.rewrite import chain, copy_gate, rewrite
from .passes.rpt import N_ANCILLAE, rpt_rewriter
from .report import collect_metrics, build_report


def transpile(circuit: Circuit, device: Device, virtual_physical_map: list[int] | None = None,
              allow_partial: bool = False, basis: frozenset[Gate] | None = None,
              verbosity: int = 0) -> MappingView:
    """
    Compile circuit into elementary gates placed on device qubits.

    Args:
        circuit: Input circuit over virtual qubits
        device: Coupling model; needs one qubit more than the circuit for the ancilla
        virtual_physical_map: Initial placement, identity if None
        allow_partial: Keep gates on uncoupled qubits instead of failing (see MappingView)
        basis: Optional gate set to lower to after decomposition
        verbosity: 0=silent, 1=summary, 2=normal, 3=verbose

    Returns:
        The MappingView holding the physical circuit and its maps.

    Raises:
        UnsupportedGateError: A gate the pipeline cannot decompose
        NoHelperQubitError: No helper qubit for a 3- or 4-control gate
        UnmappableGateError: Strict mapping and a 2Q gate on uncoupled qubits
    """
    stages = [] if verbosity > 0 else None

    def track(c: Circuit, name: str) -> Circuit:
        if stages is not None: stages.append(collect_metrics(c, name))
        return c

    track(circuit, "input")
    c = track(canonicalize(circuit), "canonical")
    c = track(rewrite(c, chain(rpt_rewriter, copy_gate), N_ANCILLAE, c.gate_set | ELEMENTARY_GATES), "rpt")
    if basis is not None:
        c = track(decompose(c, basis), "decomposed")
    view = map_circuit(c, device, virtual_physical_map, allow_partial)
    track(view.circuit, "mapped")

    if view.is_partial:
        warnings.warn("Mapped circuit places gates on uncoupled qubits (partial mapping)")

    if verbosity > 0:
        print(build_report(stages, view).to_text(verbosity))
    return view
