"""
Tests for export adapters.

Tests:
    - OpenQASM 2 syntax correctness
    - Multi-controlled gates mapped to qelib1.inc names
    - Layout comment block
"""
import pytest

from tinyqmap import Circuit, Gate, Device, map_circuit
from tinyqmap.export import to_openqasm2
from tinyqmap.ir import UnsupportedGateError

from conftest import line_topology


class TestOpenQASM2:
    """Tests for OpenQASM 2.0 export."""

    def test_header(self):
        qasm = to_openqasm2(Circuit(2))
        assert qasm.startswith('OPENQASM 2.0;')
        assert 'include "qelib1.inc";' in qasm
        assert 'qreg q[2];' in qasm

    def test_empty_circuit(self):
        """Empty circuit has only header and qreg."""
        lines = [l for l in to_openqasm2(Circuit(3)).split('\n') if l.strip()]
        assert len(lines) == 3

    def test_single_qubit_gates(self):
        c = Circuit(1).x(0).y(0).z(0).h(0).s(0).t(0).sdg(0).tdg(0)
        body = to_openqasm2(c).split('\n')[3:]
        assert body == ['x q[0];', 'y q[0];', 'z q[0];', 'h q[0];',
                        's q[0];', 't q[0];', 'sdg q[0];', 'tdg q[0];']

    def test_two_qubit_gates(self):
        """Control comes first, as in qelib1.inc."""
        qasm = to_openqasm2(Circuit(3).cx(2, 0).cz(1, 2).swap(0, 1))
        assert 'cx q[2], q[0];' in qasm
        assert 'cz q[1], q[2];' in qasm
        assert 'swap q[0], q[1];' in qasm

    def test_toffoli_and_fredkin(self):
        qasm = to_openqasm2(Circuit(3).mcx([0, 1], 2).swap(1, 2, controls=[0]))
        assert 'ccx q[0], q[1], q[2];' in qasm
        assert 'cswap q[0], q[1], q[2];' in qasm

    def test_narrow_multicontrolled(self):
        qasm = to_openqasm2(Circuit(3).mcx([], 1).mcx([0], 2).mcz([], 0).mcz([2], 1))
        body = qasm.split('\n')[3:]
        assert body == ['x q[1];', 'cx q[0], q[2];', 'z q[0];', 'cz q[2], q[1];']

    def test_multi_target_fans_out(self):
        body = to_openqasm2(Circuit(4).mcx([0, 1], [2, 3])).split('\n')[3:]
        assert body == ['ccx q[0], q[1], q[2];', 'ccx q[0], q[1], q[3];']

    @pytest.mark.parametrize("build", [
        lambda c: c.mcx([0, 1, 2], 3),
        lambda c: c.mcz([0, 1], 2),
        lambda c: c.swap(2, 3, controls=[0, 1]),
    ])
    def test_wide_gates_rejected(self, build):
        with pytest.raises(UnsupportedGateError):
            to_openqasm2(build(Circuit(4)))

    def test_negated_controls_rejected(self):
        c = Circuit(2)
        c.add_gate(Gate.CX, [1], [0], negated=[0])
        with pytest.raises(UnsupportedGateError, match="canonicalize"):
            to_openqasm2(c)


class TestLayout:
    """Virtual -> physical comment block."""

    def test_layout_comments(self):
        qasm = to_openqasm2(Circuit(3).h(0), layout=[2, 0, 1])
        assert '// v0 -> p2' in qasm
        assert '// v1 -> p0' in qasm
        assert '// v2 -> p1' in qasm

    def test_no_layout_no_comments(self):
        assert '//' not in to_openqasm2(Circuit(2).cx(0, 1))

    def test_mapped_circuit_export(self):
        dev = Device(3, line_topology(3))
        view = map_circuit(Circuit(3).cx(0, 1), dev, virtual_physical_map=[1, 2, 0])
        qasm = to_openqasm2(view.circuit, layout=view.initial_virtual_physical_map())
        assert 'cx q[1], q[2];' in qasm
        assert '// v0 -> p1' in qasm
