"""
Console output and timing for analysis phases.

The pipeline wraps every phase (def/use, dominators, reaching definitions,
...) in a console scope, producing nested ``begin``/``end`` lines with the
elapsed time of each phase.
"""

import sys
import time

from depflow.util.io import formatting


class Scope(object):
    """A timed phase; scopes nest to form a tree.

    Attributes:
        parent: Parent scope, or None for the root scope.
        name: Name of this scope.
    """

    def __init__(self, parent, name):
        self.parent = parent
        self.name = name

    def begin(self):
        self._start = time.perf_counter()

    def end(self):
        self._end = time.perf_counter()

    @property
    def elapsed(self):
        """Seconds between begin() and end()."""
        return self._end - self._start

    def path(self):
        """Tuple of scope names from the root (excluded) to this scope."""
        if self.parent is None:
            return ()
        else:
            return self.parent.path() + (self.name,)

    def child(self, name):
        return Scope(self, name)


class ConsoleScopeManager(object):
    """Context manager for console scopes.

    Example:
        with console.scope("dominators"):
            ...
    """

    __slots__ = "console", "name"

    def __init__(self, console, name):
        self.console = console
        self.name = name

    def __enter__(self):
        self.console.begin(self.name)

    def __exit__(self, type, value, tb):
        self.console.end()


class Console(object):
    """Hierarchical console output with timing and scoping.

    Attributes:
        out: Output stream (default: sys.stdout).
        root: Root scope of the hierarchy.
        current: Currently active scope.
        timings: List of (scope path, elapsed seconds) for finished scopes.
    """

    def __init__(self, out=None):
        if out is None:
            out = sys.stdout
        self.out = out

        self.root = Scope(None, "root")
        self.current = self.root
        self.timings = []

    def path(self):
        """Formatted path of the current scope, e.g. "[ analysis | dominators ]"."""
        return "[ %s ]" % " | ".join(self.current.path())

    def begin(self, name):
        scope = self.current.child(name)
        scope.begin()
        self.current = scope

        self.output("begin %s" % self.path(), 0)

    def end(self):
        self.current.end()
        self.timings.append((self.current.path(), self.current.elapsed))
        self.output(
            "end   %s %s" % (self.path(), formatting.elapsedTime(self.current.elapsed)),
            0,
        )
        self.current = self.current.parent

    def scope(self, name):
        return ConsoleScopeManager(self, name)

    def output(self, s, tabs=1):
        if tabs:
            self.out.write("\t" * tabs)

        self.out.write(s)
        self.out.write("\n")
