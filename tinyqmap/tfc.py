"""
Reader for the .tfc reversible-circuit format.

    # comment
    .v a,b,c,d        declare qubits, one per label, in order
    .i a,b            other dot directives are ignored
    BEGIN
    t3 a,b',c         MCX: last label is the target, a trailing ' negates a control
    f2 a,d            SWAP: last two labels are exchanged, earlier ones are controls
    END
"""
from __future__ import annotations

import re
from pathlib import Path

from .ir import Circuit, Gate

_SEP = re.compile(r"[\s,]+")


def _split(line: str) -> list[str]:
    return [e for e in _SEP.split(line) if e]


def parse_tfc(text: str) -> Circuit:
    """Parse .tfc source text into a Circuit."""
    circuit = Circuit()
    qubits: dict[str, int] = {}
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        entries = _split(line)
        if line.startswith('.'):
            if entries[0] == '.v':
                for label in entries[1:]:
                    if label in qubits:
                        raise ValueError(f"line {lineno}: qubit {label!r} declared twice")
                    qubits[label] = circuit.create_qubit(label)
            continue
        if entries[0] in ('BEGIN', 'END'):
            continue

        kind = entries[0][0]
        if kind not in ('t', 'f'):
            raise ValueError(f"line {lineno}: unknown gate {entries[0]!r}")
        operands, negated = [], set()
        for label in entries[1:]:
            name = label[:-1] if label.endswith("'") else label
            if name not in qubits:
                raise ValueError(f"line {lineno}: undeclared qubit {name!r}")
            operands.append(qubits[name])
            if name != label:
                negated.add(qubits[name])

        n_targets = 1 if kind == 't' else 2
        if len(operands) < n_targets:
            raise ValueError(f"line {lineno}: {entries[0]} needs at least {n_targets} qubit(s)")
        controls, targets = operands[:-n_targets], operands[-n_targets:]
        if negated - set(controls):
            raise ValueError(f"line {lineno}: only controls can be negated")
        circuit.add_gate(Gate.MCX if kind == 't' else Gate.SWAP, targets, controls, negated)
    return circuit


def read_tfc(path: str | Path) -> Circuit:
    """Read a .tfc file into a Circuit."""
    return parse_tfc(Path(path).read_text())
