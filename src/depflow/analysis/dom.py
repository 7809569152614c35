"""Dominance and post-dominance analysis for statement graphs.

A statement ``a`` dominates ``b`` if every path from the entry to ``b``
passes through ``a``; ``a`` post-dominates ``b`` if every path from ``b`` to
the exit passes through ``a``. Both relations are reflexive.

Both analyses run the iterative solver in
``depflow.util.graphalgorithim.dominator``; post-dominance runs it on the
reversed graph.

Root selection:
- The entry is the first statement without predecessors. If every
  statement has one (e.g. the whole body is a cycle), the first statement
  is used and the fallback is recorded in the diagnostics.
- The exits are all statements without successors. A single exit is the
  root. Several exits are joined by a virtual exit node that never appears
  in any result, unless ``AnalysisConfig.synthetic_exit`` is off, in which
  case the first exit is used. With no exit at all the last statement is
  used and the fallback is recorded.

Statements the solver cannot reach from its root are not iterated. Each
keeps itself as its only (post-)dominator and has no immediate
(post-)dominator.
"""

import logging

from depflow.application.context import AnalysisContext
from depflow.util.graphalgorithim import dominator

LOG = logging.getLogger(__name__)


class DominanceBase(object):
    """
    Shared state of a dominance-style analysis over index adjacency.

    Attributes:
        graph: The analysed StmtGraph.
        context: The AnalysisContext of the run.
        root: Index of the root statement, or None (empty graph or virtual
            exit).
        doms: List indexed by statement index of frozensets of indices.
        idoms: List indexed by statement index of the immediate dominator
            index, or None.
        unreached: Indices the solver could not reach from the root.
        iterations: Number of passes performed by the solver.
        converged: False if the iteration cap was hit.
    """
    name = "dominance"

    def __init__(self, graph, context=None):
        self.graph = graph
        self.context = context if context is not None else AnalysisContext()

        n = len(graph)
        self.root = None
        self.doms = [frozenset((i,)) for i in range(n)]
        self.idoms = [None] * n
        self.unreached = []
        self.iterations = 0
        self.converged = True
        self._children = None

    def solve(self, G, root, virtual=None):
        """
        Run the iterative solver on adjacency ``G`` from ``root``.

        ``virtual`` is the id of a synthetic node that is stripped from the
        results.
        """
        config = self.context.config
        solution = dominator.dominatorSets(G, root, config.max_iterations)

        self.iterations = solution.iterations
        self.converged = solution.converged
        if not solution.converged:
            self.context.diagnostics.markUnconverged(self.name, solution.iterations)

        for node, doms in solution.doms.items():
            if node == virtual:
                continue
            doms = set(doms)
            doms.discard(virtual)
            self.doms[node] = frozenset(doms)

            idom = solution.idoms[node]
            self.idoms[node] = None if idom == virtual else idom

        self.unreached = [node for node in solution.unreached if node != virtual]

        LOG.debug(
            "%s: %d statements, %d passes, %d unreached",
            self.name,
            len(self.graph),
            solution.iterations,
            len(self.unreached),
        )

    # Index level
    def dominatesAt(self, a, b):
        return a in self.doms[b]

    def childrenAt(self, i):
        if self._children is None:
            self._children = [[] for _ in range(len(self.graph))]
            for node, idom in enumerate(self.idoms):
                if idom is not None:
                    self._children[idom].append(node)
        return self._children[i]

    # Statement level
    def _dominators(self, stmt):
        stmts = self.graph.statements()
        return frozenset(stmts[i] for i in self.doms[self.graph.index(stmt)])

    def _immediate(self, stmt):
        idom = self.idoms[self.graph.index(stmt)]
        if idom is None:
            return None
        return self.graph.statement(idom)

    def children(self, stmt):
        """Children of ``stmt`` in the (post-)dominator tree, in index order."""
        return [self.graph.statement(i) for i in self.childrenAt(self.graph.index(stmt))]

    def tree(self):
        """Mapping from each statement to its immediate (post-)dominator or None."""
        stmts = self.graph.statements()
        return {
            stmts[i]: (None if idom is None else stmts[idom])
            for i, idom in enumerate(self.idoms)
        }


class DominatorAnalyzer(DominanceBase):
    """Dominator sets and the dominator tree of a statement graph."""
    name = "dominators"

    def __init__(self, graph, context=None):
        DominanceBase.__init__(self, graph, context)
        self.process()

    def process(self):
        graph = self.graph
        if not len(graph):
            return

        diagnostics = self.context.diagnostics
        heads = graph.headIndices()
        if heads:
            self.root = heads[0]
        else:
            self.root = 0
            diagnostics.entry_fallback = True
            diagnostics.warn(
                "entry-fallback",
                "no statement without predecessors; using %r as the entry"
                % (graph.statement(0),),
            )

        self.solve(graph.forward, self.root)

        if self.unreached:
            unreachable = [graph.statement(i) for i in self.unreached]
            diagnostics.unreachable.extend(unreachable)
            diagnostics.warn(
                "unreachable",
                "%d statement(s) not reachable from the entry" % (len(unreachable),),
            )

    @property
    def entry(self):
        if self.root is None:
            return None
        return self.graph.statement(self.root)

    def dominates(self, a, b):
        """True if ``a`` dominates ``b`` (reflexive)."""
        return self.graph.index(a) in self.doms[self.graph.index(b)]

    def dominators(self, stmt):
        return self._dominators(stmt)

    def immediate_dominator(self, stmt):
        return self._immediate(stmt)


class PostDominatorAnalyzer(DominanceBase):
    """Post-dominator sets and the post-dominator tree of a statement graph.

    Attributes:
        exitIndices: Indices of the true exits (statements without
            successors), in index order.
        virtual: True if a virtual exit joined several exits.
    """
    name = "post-dominators"

    def __init__(self, graph, context=None):
        DominanceBase.__init__(self, graph, context)
        self.exitIndices = []
        self.virtual = False
        self.process()

    def process(self):
        graph = self.graph
        n = len(graph)
        if not n:
            return

        diagnostics = self.context.diagnostics
        self.exitIndices = graph.tailIndices()
        exits = self.exitIndices

        if len(exits) == 1:
            self.root = exits[0]
            self.solve(graph.reverse, self.root)
        elif len(exits) > 1 and self.context.config.synthetic_exit:
            # Node n is the virtual exit; its predecessors in the reversed
            # graph are none, its successors are the true exits.
            self.virtual = True
            diagnostics.synthetic_exit = True
            G = list(graph.reverse)
            G.append(tuple(exits))
            self.solve(G, n, virtual=n)
        elif exits:
            self.root = exits[0]
            diagnostics.ambiguous_exit = True
            diagnostics.warn(
                "ambiguous-exit",
                "%d exits; using %r for post-dominance"
                % (len(exits), graph.statement(self.root)),
            )
            self.solve(graph.reverse, self.root)
        else:
            self.root = n - 1
            diagnostics.exit_fallback = True
            diagnostics.warn(
                "exit-fallback",
                "no statement without successors; using %r as the exit"
                % (graph.statement(self.root),),
            )
            self.solve(graph.reverse, self.root)

        if self.unreached:
            diagnostics.no_exit_path.extend(graph.statement(i) for i in self.unreached)
            diagnostics.warn(
                "no-exit-path",
                "%d statement(s) cannot reach the exit" % (len(self.unreached),),
            )

    @property
    def exit(self):
        """The root exit statement, or None when a virtual exit is used."""
        if self.root is None:
            return None
        return self.graph.statement(self.root)

    @property
    def exits(self):
        """Every statement without successors, in graph order."""
        return [self.graph.statement(i) for i in self.exitIndices]

    def post_dominates(self, a, b):
        """True if ``a`` post-dominates ``b`` (reflexive)."""
        return self.graph.index(a) in self.doms[self.graph.index(b)]

    def post_dominators(self, stmt):
        return self._dominators(stmt)

    def immediate_post_dominator(self, stmt):
        return self._immediate(stmt)
