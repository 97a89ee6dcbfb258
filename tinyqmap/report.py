"""Compilation report for explainability."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .ir import Gate

if TYPE_CHECKING:
    from .ir import Circuit, Operation
    from .mapping import MappingView


@dataclass
class PassMetrics:
    """Metrics captured after a single pass."""
    name: str
    qubits: int
    gates: int
    two_q: int
    t_count: int
    depth: int
    ops: list[str] | None = None


@dataclass
class CompileReport:
    """Compilation report with pass-by-pass metrics."""
    passes: list[PassMetrics]
    device: str = ""
    partial: bool = False
    initial_map: list[int] = field(default_factory=list)
    final_map: list[int] = field(default_factory=list)

    def to_text(self, verbosity: int = 2) -> str:
        lines = [
            "=" * 40, "  TinyQMap Compilation Report", "=" * 40, "",
            "SUMMARY",
            f"  Qubits: {self.passes[0].qubits} -> {self.passes[-1].qubits}",
            f"  Input:  {self.passes[0].gates} gates  Output: {self.passes[-1].gates} gates",
            f"  T-count: {self.passes[-1].t_count}",
            f"  Mapping: {'PARTIAL (violates coupling)' if self.partial else 'complete'}",
        ]
        if self.device: lines.append(f"  Device: {self.device}")
        if verbosity < 2: return "\n".join(lines)

        lines += ["", "PASSES", "  Name            Gates  2Q  T-count  Depth", "  " + "-" * 43]
        lines += [f"  {m.name:<14} {m.gates:>5} {m.two_q:>4} {m.t_count:>8} {m.depth:>6}" for m in self.passes]

        if self.initial_map:
            lines += ["", "MAPPING"] + [f"  v{v}->p{p} (now p{q})"
                                       for v, (p, q) in enumerate(zip(self.initial_map, self.final_map))]

        if verbosity >= 3:
            lines += ["", "OPS"]
            for m in self.passes:
                if m.ops:
                    lines += [f"  [{m.name}] {', '.join(m.ops)}"]
        return "\n".join(lines)


def _fmt(op: Operation) -> str:
    ctrl = ",".join(f"{c}'" if c in op.negated else str(c) for c in op.controls)
    tgt = ",".join(map(str, op.targets))
    return f"{op.gate.name}({ctrl};{tgt})" if op.controls else f"{op.gate.name}({tgt})"


def _depth(ops: list[Operation]) -> int:
    free: dict[int, int] = {}
    for op in ops:
        t = max((free.get(q, 0) for q in op.qubits), default=0) + 1
        for q in op.qubits: free[q] = t
    return max(free.values(), default=0)


def collect_metrics(circuit: Circuit, name: str) -> PassMetrics:
    return PassMetrics(name, circuit.n_qubits, len(circuit.ops), sum(len(op.qubits) == 2 for op in circuit.ops),
                       sum(op.gate in (Gate.T, Gate.TDG) for op in circuit.ops),
                       _depth(circuit.ops), [_fmt(op) for op in circuit.ops])


def build_report(passes: list[PassMetrics], view: MappingView) -> CompileReport:
    return CompileReport(passes, view.device.name, view.is_partial,
                         view.initial_virtual_physical_map(), view.virtual_physical_map())
