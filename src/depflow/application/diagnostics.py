"""
Degraded-confidence reporting for an analysis run.

Analyses never fail on malformed graphs or on fixpoints that hit their
iteration cap. They record what happened here so callers can treat the
affected facts as advisory.
"""

import logging

LOG = logging.getLogger(__name__)


class Diagnostics(object):
    """Collects the fallbacks and warnings of one analysis run.

    Attributes:
        entry_fallback: No statement without predecessors existed; the
            dominator root was chosen arbitrarily.
        exit_fallback: No statement without successors existed; the
            post-dominator root was chosen arbitrarily.
        synthetic_exit: Several exits were joined by a virtual exit node.
        ambiguous_exit: Several exits existed and one was picked because the
            synthetic exit was disabled.
        unconverged: Names of fixpoint computations that hit the cap.
        unreachable: Statements not reachable from the dominator root.
        no_exit_path: Statements from which the post-dominator root cannot
            be reached (e.g. an infinite loop off a branch).
        overlapping_loops: Pairs of loop headers whose bodies partially
            overlap (irreducible control flow).
        warnings: List of (classification, message) tuples, in order.
    """

    def __init__(self):
        self.entry_fallback = False
        self.exit_fallback = False
        self.synthetic_exit = False
        self.ambiguous_exit = False
        self.unconverged = []
        self.unreachable = []
        self.no_exit_path = []
        self.overlapping_loops = []
        self.warnings = []

    @property
    def warningCount(self):
        return len(self.warnings)

    @property
    def degraded(self):
        """True when some reported fact may be an approximation."""
        return bool(
            self.entry_fallback
            or self.exit_fallback
            or self.ambiguous_exit
            or self.unconverged
            or self.unreachable
            or self.no_exit_path
            or self.overlapping_loops
        )

    def warn(self, classification, message):
        """Record a warning and forward it to the logger."""
        self.warnings.append((classification, message))
        LOG.warning("%s: %s", classification, message)

    def markUnconverged(self, name, iterations):
        if name not in self.unconverged:
            self.unconverged.append(name)
        self.warn(
            "non-convergence",
            "%s did not reach a fixpoint within %d iterations" % (name, iterations),
        )

    def statusString(self):
        if self.degraded:
            return "degraded, %d warnings" % (self.warningCount,)
        return "ok, %d warnings" % (self.warningCount,)

    def __repr__(self):
        return "Diagnostics(%s)" % (self.statusString(),)
