"""
Configuration for depflow analysis runs.

``AnalysisConfig`` is passed, through the ``AnalysisContext``, to every
analysis of a run. It is immutable so a run cannot change its own settings
halfway through.
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping

DEFAULT_MAX_ITERATIONS = 1000


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Settings shared by the analyses of one run.

    Attributes:
        max_iterations: Safety cap on the passes of every fixpoint
            computation (dominators, post-dominators, reaching definitions).
        synthetic_exit: Join several exit statements with a virtual exit
            node for post-dominance. When False the first exit is used.
        control_closure: Extend control dependence from the direct
            successors of a branch to every statement on the post-dominator
            tree path up to the branch's immediate post-dominator.
        track_loops: Run loop detection and loop dependency classification.
    """
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    synthetic_exit: bool = True
    control_closure: bool = False
    track_loops: bool = True

    def __post_init__(self):
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise ValueError("max_iterations must be an integer, got %r" % (self.max_iterations,))
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be positive, got %d" % (self.max_iterations,))
        for name in ("synthetic_exit", "control_closure", "track_loops"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError("%s must be a boolean, got %r" % (name, getattr(self, name)))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "AnalysisConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ValueError("unknown analysis option(s): %s" % ", ".join(unknown))
        return cls(**dict(mapping))
