"""Control Flow Graph (CFG) modules.

This package contains the read-only statement graph consumed by every
analysis and a small builder for assembling one from a statement list.
"""

from .graph import StmtGraph
from .builder import GraphBuilder

__all__ = ["StmtGraph", "GraphBuilder"]
