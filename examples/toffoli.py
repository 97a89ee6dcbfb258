"""
Decompose and place multi-controlled Toffolis on small devices.

Run: python examples/toffoli.py
"""
import sys
import warnings
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tinyqmap import Circuit, Device, Gate, MappingView, UnmappableGateError, parse_tfc, rpt, transpile
from tinyqmap.export import to_openqasm2

# =============================================================================
# Example 1: Toffoli into Clifford+T
# =============================================================================
print("=== Toffoli ===")
ccx = rpt(Circuit(3).mcx([0, 1], 2))
t_count = ccx.count(Gate.T) + ccx.count(Gate.TDG)
print(f"Qubits: {ccx.n_qubits} (with ancilla)  Gates: {len(ccx)}  T-count: {t_count}")
print(to_openqasm2(ccx))

# =============================================================================
# Example 2: 4-control Toffoli using the ancilla as helper
# =============================================================================
print("\n=== C4X ===")
c4x = rpt(Circuit(5).mcx([0, 1, 2, 3], 4))
print(f"Gates: {len(c4x)}  CX: {c4x.count(Gate.CX)}")

# =============================================================================
# Example 3: Manual placement with SWAPs
# =============================================================================
print("\n=== Line device ===")
line = Device(3, frozenset({(0, 1), (1, 2)}), name="line_3")
view = MappingView(Circuit(3), line)
if view.add_two_qubit_gate(Gate.CX, 0, 2) is None:
    print("CX(0,2) rejected: physical 0 and 2 are not coupled")
view.add_swap(1, 2)
view.add_two_qubit_gate(Gate.CX, 0, 2)
print(f"Map: {view.initial_virtual_physical_map()} -> {view.virtual_physical_map()}")
print(to_openqasm2(view.circuit, layout=view.initial_virtual_physical_map()))

# =============================================================================
# Example 4: .tfc input through the full pipeline
# =============================================================================
print("\n=== Pipeline ===")
src = parse_tfc("""
.v a,b,c,d
BEGIN
t3 a,b',c
f3 a,c,d
END
""")
full = Device(5, frozenset((i, j) for i in range(5) for j in range(i + 1, 5)), name="full_5")
transpile(src, full, verbosity=2)

ring = Device(5, frozenset({(0, 1), (1, 2), (2, 3), (3, 4), (4, 0)}), name="ring_5")
try:
    transpile(src, ring)
except UnmappableGateError as e:
    print(f"\nStrict mapping on ring: {e}")
with warnings.catch_warnings(record=True) as caught:
    warnings.simplefilter("always")
    partial = transpile(src, ring, allow_partial=True)
print(f"Partial mapping: {partial.is_partial}, warnings: {len(caught)}")
