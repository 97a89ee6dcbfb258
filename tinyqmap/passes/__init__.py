"""
Compilation passes.

Modules:
    - rewrite: Generic gate-by-gate rewrite engine
    - rpt: Relative-phase Toffoli decomposition
    - decompose: Polarity/controlled-SWAP canonicalization and basis decomposition
"""
