"""
TinyQMap - A tiny quantum circuit decomposer and device mapper
"""

from .ir import Circuit, Gate, Operation, UnsupportedGateError
from .device import Device
from .mapping import MappingView, UnmappableGateError, map_circuit, invert_map
from .passes.rewrite import rewrite, chain, copy_gate
from .passes.rpt import rpt, rpt_rewriter, find_helper, NoHelperQubitError
from .passes.decompose import canonicalize, decompose
from .compile import transpile
from .tfc import parse_tfc, read_tfc
from .export import to_openqasm2

__all__ = [
    # Core IR
    "Circuit",
    "Gate",
    "Operation",
    # Device mapping
    "Device",
    "MappingView",
    "map_circuit",
    "invert_map",
    # Rewriting
    "rewrite",
    "chain",
    "copy_gate",
    "rpt",
    "rpt_rewriter",
    "find_helper",
    "canonicalize",
    "decompose",
    # Compilation
    "transpile",
    # Formats
    "parse_tfc",
    "read_tfc",
    "to_openqasm2",
    # Errors
    "UnsupportedGateError",
    "NoHelperQubitError",
    "UnmappableGateError",
]
