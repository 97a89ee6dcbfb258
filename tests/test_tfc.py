"""
Tests for the .tfc reader.
"""
import pytest

from tinyqmap import Gate, Operation, parse_tfc, read_tfc

from conftest import classical_output


TOFFOLI_TFC = """\
# 3-bit Toffoli
.v a,b,c
.i a,b,c
.o a,b,c
BEGIN
t3 a,b,c
END
"""


def test_declares_qubits_in_order():
    c = parse_tfc(TOFFOLI_TFC)
    assert c.labels == ["a", "b", "c"]
    assert c.ops == [Operation(Gate.MCX, (2,), (0, 1))]


def test_gate_kinds():
    c = parse_tfc(".v a b c d\nBEGIN\nt1 d\nt2 a d\nf2 b,c\nf3 a,b,c\nEND\n")
    assert c.ops == [
        Operation(Gate.MCX, (3,)),
        Operation(Gate.MCX, (3,), (0,)),
        Operation(Gate.SWAP, (1, 2)),
        Operation(Gate.SWAP, (1, 2), (0,)),
    ]


def test_negated_control():
    c = parse_tfc(".v x,y,z\nt3 x',y,z\n")
    op = c.ops[0]
    assert op.controls == (0, 1)
    assert op.negated == {0}
    # fires when x=0, y=1
    assert classical_output(c, 0b010) == 0b110
    assert classical_output(c, 0b011) == 0b011


def test_comments_and_blank_lines_ignored():
    c = parse_tfc("\n# header\n.v a,b\n\n   # indented\nt2 a,b\n")
    assert len(c) == 1


def test_multiple_declarations_accumulate():
    c = parse_tfc(".v a\n.v b,c\nt3 a,b,c\n")
    assert c.n_qubits == 3


@pytest.mark.parametrize("text,match", [
    (".v a,b\nt2 a,z\n", "undeclared"),
    (".v a,a\n", "declared twice"),
    (".v a,b\nq2 a,b\n", "unknown gate"),
    (".v a,b\nf1 a\n", "at least 2"),
    (".v a,b\nt1\n", "at least 1"),
    (".v a,b\nt2 a,b'\n", "only controls"),
])
def test_malformed_input(text, match):
    with pytest.raises(ValueError, match=match):
        parse_tfc(text)


def test_read_tfc_file(tmp_path):
    path = tmp_path / "toffoli.tfc"
    path.write_text(TOFFOLI_TFC)
    assert read_tfc(path).ops == parse_tfc(TOFFOLI_TFC).ops
    assert read_tfc(str(path)).n_qubits == 3
