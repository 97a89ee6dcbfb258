"""Export adapters: OpenQASM."""
from .qasm import to_openqasm2

__all__ = ["to_openqasm2"]
