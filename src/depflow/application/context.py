"""
Context management for depflow analysis runs.

An ``AnalysisContext`` holds the state shared by the analyses of a single
run: the configuration, the optional phase console, the diagnostics and the
per-phase statistics. A context belongs to one run; starting a new run with
the same context resets its diagnostics and statistics.
"""

import collections

from .config import AnalysisConfig
from .diagnostics import Diagnostics


class AnalysisContext(object):
    """
    Context for one analysis run.

    Attributes:
        config: AnalysisConfig shared by every analysis
        console: Optional Console used to time and report phases
        diagnostics: Diagnostics collecting fallbacks and warnings
        stats: Statistics collection (phase name -> dict of counters)
    """
    __slots__ = "config", "console", "diagnostics", "stats"

    def __init__(self, config=None, console=None):
        """
        Args:
            config: AnalysisConfig; the default configuration if None.
            console: Console for phase output; phases run silently if None.
        """
        self.config = config if config is not None else AnalysisConfig()
        self.console = console
        self.reset()

    def reset(self):
        self.diagnostics = Diagnostics()
        self.stats = collections.defaultdict(dict)

    def phase(self, name):
        """Context manager timing a pipeline phase on the console, if any."""
        if self.console is None:
            return _NullScope()
        return self.console.scope(name)


class _NullScope(object):
    __slots__ = ()

    def __enter__(self):
        return None

    def __exit__(self, type, value, tb):
        return False
