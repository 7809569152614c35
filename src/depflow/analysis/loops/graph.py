"""
Natural loop data structures.

A natural loop is identified by its header, the target of one or more back
edges. Its body is every statement that can reach a back edge source
without passing through the header, plus the header itself.

Loops nest: loop B is nested in loop A iff B's statements are a strict
subset of A's. Each loop has at most one parent, the smallest enclosing
loop.
"""

import enum
from typing import List, Optional


class LoopDependencyKind(enum.Enum):
    CARRIED = "CARRIED"
    INDEPENDENT = "INDEPENDENT"


class Loop(object):
    """
    A natural loop.

    Attributes:
        header: Header statement
        headerIndex: Graph index of the header
        indices: Set of graph indices of the body (header included)
        backEdges: List of (tail, header) statement pairs closing the loop
        children: Directly nested loops
        parent: Directly enclosing loop, or None
    """
    __slots__ = ("header", "headerIndex", "indices", "_stmts", "_ids", "backEdges", "children", "parent")

    def __init__(self, header, headerIndex: int):
        self.header = header
        self.headerIndex = headerIndex
        self.indices = set()
        self._stmts = {}
        self._ids = set()
        self.backEdges = []
        self.children: List["Loop"] = []
        self.parent: Optional["Loop"] = None
        self.add(headerIndex, header)

    def add(self, i: int, stmt) -> bool:
        if i in self.indices:
            return False
        self.indices.add(i)
        self._stmts[i] = stmt
        self._ids.add(id(stmt))
        return True

    @property
    def statements(self):
        """Body statements in graph order."""
        return tuple(self._stmts[i] for i in sorted(self.indices))

    def contains(self, stmt) -> bool:
        return id(stmt) in self._ids

    def __contains__(self, stmt):
        return self.contains(stmt)

    def __len__(self):
        return len(self.indices)

    def addNestedLoop(self, child: "Loop"):
        child.parent = self
        if child not in self.children:
            self.children.append(child)

    def isNestedIn(self, other: "Loop") -> bool:
        """True if this loop's body is a strict subset of ``other``'s."""
        return self.indices < other.indices

    @property
    def depth(self) -> int:
        """Number of loops enclosing this one."""
        depth = 0
        loop = self.parent
        while loop is not None:
            depth += 1
            loop = loop.parent
        return depth

    def __eq__(self, other):
        return isinstance(other, Loop) and self.header is other.header

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return id(self.header)

    def __repr__(self):
        return "Loop(%r, %d statements, depth %d)" % (self.header, len(self.indices), self.depth)


class LoopDependency(object):
    """
    A dependency scoped to a loop.

    Attributes:
        kind: LoopDependencyKind
        variable: Variable name
        distance: Iterations between definition and use; 0 for INDEPENDENT
        source: Defining statement
        target: Using statement
        loop: The Loop both statements belong to
    """
    __slots__ = ("kind", "variable", "distance", "source", "target", "loop")

    def __init__(self, kind: LoopDependencyKind, variable: str, distance: int, source, target, loop: Loop):
        self.kind = kind
        self.variable = variable
        self.distance = distance
        self.source = source
        self.target = target
        self.loop = loop

    @property
    def carried(self) -> bool:
        return self.kind is LoopDependencyKind.CARRIED

    def key(self):
        return (
            self.kind,
            self.variable,
            self.distance,
            id(self.source),
            id(self.target),
            id(self.loop.header),
        )

    def __eq__(self, other):
        return isinstance(other, LoopDependency) and self.key() == other.key()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return "LoopDependency(%s %s, distance %d, %r -> %r)" % (
            self.kind.name,
            self.variable,
            self.distance,
            self.source,
            self.target,
        )
