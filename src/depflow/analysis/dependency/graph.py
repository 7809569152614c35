"""
Dependency data structures.

This module defines the records produced by the dependency classifier and
the loop analyzer, and the ``DependencyResult`` that collects them.

**Dependency Kinds:**
- **RAW**: read after write (true dependence), definition -> use
- **WAR**: write after read (anti dependence), reader -> writer
- **WAW**: write after write (output dependence), writer -> writer
- **DEF_ORDER**: a WAW pair whose source dominates its target
- **CONTROL**: a branch decides whether its target executes

All edges point from the statement that must happen first (source) to the
statement that depends on it (target). Results are indexed by target.
"""

import collections
import enum
from typing import Dict, List, Optional

from depflow.application.errors import InternalError


class DependencyKind(enum.Enum):
    RAW = "RAW"
    WAR = "WAR"
    WAW = "WAW"
    DEF_ORDER = "DEF_ORDER"
    CONTROL = "CONTROL"

    def isData(self):
        return self is not DependencyKind.CONTROL


class Dependency(object):
    """
    A dependency between two statements.

    Attributes:
        source: Statement that must happen first
        target: Statement that depends on source
        kind: DependencyKind
        variable: Variable name, or None for CONTROL dependencies
    """
    __slots__ = ("source", "target", "kind", "variable")

    def __init__(self, source, target, kind: DependencyKind, variable: Optional[str] = None):
        self.source = source
        self.target = target
        self.kind = kind
        self.variable = variable

    def key(self):
        # Statements compare by identity.
        return (self.kind, id(self.source), id(self.target), self.variable)

    def __eq__(self, other):
        return isinstance(other, Dependency) and self.key() == other.key()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        if self.variable is None:
            return "Dependency(%s, %r -> %r)" % (self.kind.name, self.source, self.target)
        return "Dependency(%s %s, %r -> %r)" % (
            self.kind.name,
            self.variable,
            self.source,
            self.target,
        )


class DependencyResult(object):
    """
    All dependencies found in one analysis run.

    Each map goes from target statement to the dependencies ending there, in
    the order they were added. Adding the same dependency twice has no
    effect.

    Attributes:
        data_dependencies: target -> list of RAW/WAR/WAW/DEF_ORDER Dependency
        control_dependencies: target -> list of CONTROL Dependency
        loop_dependencies: use statement -> list of LoopDependency
    """

    def __init__(self):
        self.data_dependencies: Dict[object, List[Dependency]] = collections.OrderedDict()
        self.control_dependencies: Dict[object, List[Dependency]] = collections.OrderedDict()
        self.loop_dependencies: Dict[object, list] = collections.OrderedDict()
        self._seen = set()

    def _add(self, table, key, record):
        if record in self._seen:
            return False
        self._seen.add(record)
        table.setdefault(key, []).append(record)
        return True

    def add_data_dependency(self, dep: Dependency) -> bool:
        if not dep.kind.isData():
            raise InternalError("%r filed as a data dependency" % (dep,))
        return self._add(self.data_dependencies, dep.target, dep)

    def add_control_dependency(self, dep: Dependency) -> bool:
        if dep.kind is not DependencyKind.CONTROL:
            raise InternalError("%r filed as a control dependency" % (dep,))
        return self._add(self.control_dependencies, dep.target, dep)

    def add_loop_dependency(self, stmt, dep) -> bool:
        """Record a loop dependency under its use statement ``stmt``."""
        return self._add(self.loop_dependencies, stmt, dep)

    def dependencies_for(self, stmt) -> List[Dependency]:
        """Data and control dependencies whose target is ``stmt``."""
        return list(self.data_dependencies.get(stmt, ())) + list(
            self.control_dependencies.get(stmt, ())
        )

    def loop_dependencies_for(self, stmt) -> list:
        return list(self.loop_dependencies.get(stmt, ()))

    def all_dependencies(self) -> List[Dependency]:
        """Every data and control dependency."""
        result = []
        for deps in self.data_dependencies.values():
            result.extend(deps)
        for deps in self.control_dependencies.values():
            result.extend(deps)
        return result

    def all_loop_dependencies(self) -> list:
        result = []
        for deps in self.loop_dependencies.values():
            result.extend(deps)
        return result

    def of_kind(self, kind: DependencyKind) -> List[Dependency]:
        return [dep for dep in self.all_dependencies() if dep.kind is kind]

    def stats(self) -> Dict[str, int]:
        """
        Count the dependencies by kind.

        Returns:
            Dictionary with one count per DependencyKind name, plus
            "LOOP_CARRIED" and "LOOP_INDEPENDENT" for loop dependencies.
        """
        counts = collections.OrderedDict((kind.name, 0) for kind in DependencyKind)
        for dep in self.all_dependencies():
            counts[dep.kind.name] += 1

        counts["LOOP_CARRIED"] = 0
        counts["LOOP_INDEPENDENT"] = 0
        for dep in self.all_loop_dependencies():
            counts["LOOP_" + dep.kind.name] += 1
        return counts

    def __repr__(self):
        return "DependencyResult(%d data, %d control, %d loop)" % (
            sum(len(deps) for deps in self.data_dependencies.values()),
            sum(len(deps) for deps in self.control_dependencies.values()),
            sum(len(deps) for deps in self.loop_dependencies.values()),
        )
