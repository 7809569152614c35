"""Dependency analysis.

This package contains the dependency records (``graph.py``) and the
classifier that derives data and control dependencies from the def/use,
reaching definitions and dominance results (``classifier.py``).
"""

from .graph import Dependency, DependencyKind, DependencyResult
from .classifier import DependencyClassifier

__all__ = ["Dependency", "DependencyKind", "DependencyResult", "DependencyClassifier"]
