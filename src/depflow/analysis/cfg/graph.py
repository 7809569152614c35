"""Statement-level Control Flow Graph (CFG) representation.

A ``StmtGraph`` is the read-only view of a method body that every depflow
analysis consumes:

- Nodes are statements from ``depflow.language.ir``. Statements are
  identified by object identity, never by structural equality.
- Each statement gets a dense integer index in insertion order. Analyses
  keep their per-statement facts in index-keyed lists and translate back to
  statements only when answering queries.
- Edges are possible execution transitions. Successor and predecessor
  order is the edge insertion order, which keeps results reproducible.

The graph is stored in a ``networkx.DiGraph`` over the indices and is never
mutated after construction.
"""

import networkx as nx

from depflow.application.errors import MalformedGraphError, UnknownStatementError
from depflow.util.graphalgorithim import basic


class StmtGraph(object):
    """
    Immutable statement graph with arena-indexed nodes.

    Attributes:
        graph: networkx.DiGraph over statement indices
    """
    __slots__ = ("_stmts", "_index", "graph", "_forward", "_reverse")

    def __init__(self, statements, edges=()):
        """
        Build a statement graph.

        Args:
            statements: Iterable of statements, in the order that defines
                their indices.
            edges: Iterable of (source statement, target statement) pairs.

        Raises:
            MalformedGraphError: If a statement is listed twice or an edge
                names a statement that is not in ``statements``.
        """
        self._stmts = tuple(statements)
        self._index = {}
        self.graph = nx.DiGraph()

        for i, stmt in enumerate(self._stmts):
            if id(stmt) in self._index:
                raise MalformedGraphError("statement %r is listed twice" % (stmt,))
            self._index[id(stmt)] = i
            self.graph.add_node(i)

        for source, target in edges:
            s = self._index.get(id(source))
            t = self._index.get(id(target))
            if s is None or t is None:
                raise MalformedGraphError(
                    "edge %r -> %r names a statement outside the graph" % (source, target)
                )
            self.graph.add_edge(s, t)

        self._forward = [tuple(self.graph.successors(i)) for i in range(len(self._stmts))]
        self._reverse = [tuple(self.graph.predecessors(i)) for i in range(len(self._stmts))]

    @classmethod
    def fromSuccessors(cls, successors):
        """
        Build a graph from a mapping of statement -> successor statements.

        Statements that only appear as successors are appended after the
        keys, in first-seen order.
        """
        order = []
        seen = set()
        edges = []
        for stmt, nexts in successors.items():
            if id(stmt) not in seen:
                seen.add(id(stmt))
                order.append(stmt)
            for next in nexts:
                edges.append((stmt, next))
        for _stmt, next in edges:
            if id(next) not in seen:
                seen.add(id(next))
                order.append(next)
        return cls(order, edges)

    # Statement <-> index translation
    def index(self, stmt):
        """
        Dense index of ``stmt``.

        Raises:
            UnknownStatementError: If ``stmt`` is not part of this graph.
        """
        try:
            return self._index[id(stmt)]
        except KeyError:
            raise UnknownStatementError(stmt) from None

    def statement(self, i):
        return self._stmts[i]

    def statements(self):
        """All statements, in index order."""
        return self._stmts

    def __len__(self):
        return len(self._stmts)

    def __iter__(self):
        return iter(self._stmts)

    def __contains__(self, stmt):
        return id(stmt) in self._index

    # Index-level adjacency used by the analyses
    @property
    def forward(self):
        """List indexed by statement index of successor index tuples."""
        return self._forward

    @property
    def reverse(self):
        """List indexed by statement index of predecessor index tuples."""
        return self._reverse

    def edgeCount(self):
        return self.graph.number_of_edges()

    def edges(self):
        """All edges as (source statement, target statement) pairs."""
        return [(self._stmts[s], self._stmts[t]) for s, t in self.graph.edges()]

    # Statement-level queries
    def successors(self, stmt):
        return tuple(self._stmts[i] for i in self._forward[self.index(stmt)])

    def predecessors(self, stmt):
        return tuple(self._stmts[i] for i in self._reverse[self.index(stmt)])

    def isBranch(self, stmt):
        """
        A branch is a statement with more than one successor or an explicit
        jump (conditional or unconditional).
        """
        return len(self._forward[self.index(stmt)]) > 1 or stmt.isJump()

    def headIndices(self):
        """Indices of the statements without predecessors, in index order."""
        return basic.findEntryPoints(self._forward)

    def tailIndices(self):
        """Indices of the statements without successors, in index order."""
        return basic.findExitPoints(self._forward)

    def heads(self):
        return [self._stmts[i] for i in self.headIndices()]

    def tails(self):
        return [self._stmts[i] for i in self.tailIndices()]

    def descendants(self, i):
        """
        Indices reachable from index ``i`` by a path of at least one edge.

        ``i`` itself is included only if it lies on a cycle.
        """
        reached = set(nx.descendants(self.graph, i))
        if any(p in reached or p == i for p in self._reverse[i]):
            reached.add(i)
        return reached

    def reaches(self, a, b):
        """True if a path of at least one edge leads from ``a`` to ``b``."""
        return self.index(b) in self.descendants(self.index(a))

    def reversed(self):
        """A new graph over the same statements with every edge reversed."""
        return StmtGraph(self._stmts, [(t, s) for s, t in self.edges()])

    def __repr__(self):
        return "StmtGraph(%d statements, %d edges)" % (len(self._stmts), self.edgeCount())
