"""Natural loop analysis.

``graph.py`` holds the loop records and ``analyzer.py`` detects natural
loops, builds their nesting and classifies loop dependencies as carried
or independent.
"""

from .graph import Loop, LoopDependency, LoopDependencyKind
from .analyzer import LoopAnalyzer

__all__ = ["Loop", "LoopDependency", "LoopDependencyKind", "LoopAnalyzer"]
