"""Reaching definitions analysis.

A definition (a statement that defines at least one variable) reaches a
statement ``s`` if some path leads from the definition to ``s`` on which no
other statement redefines any variable the definition defines.

The analysis is the standard gen/kill data-flow problem:

    IN[s]   = union(OUT[p] for p in preds(s))
    GEN[s]  = {s} if s defines something, else {}
    KILL[s] = {d in IN[s] : defs(d) & defs(s)}
    OUT[s]  = GEN[s] | (IN[s] - KILL[s])

Passes visit the statements reachable from the entry in reverse post-order,
then the remaining statements in graph order, until a pass changes nothing.
The problem is monotone, so the order only affects the number of passes.
"""

import logging

from depflow.application.context import AnalysisContext
from depflow.util.graphalgorithim import dominator

LOG = logging.getLogger(__name__)

_empty = frozenset()


class ReachingDefinitions(object):
    """
    IN/OUT sets of every statement, keyed by statement index internally.

    Attributes:
        graph: The analysed StmtGraph.
        defuse: DefUseExtractor of the same graph.
        iterations: Number of passes performed by process().
        converged: False if the iteration cap was hit.
    """

    def __init__(self, graph, defuse, context=None):
        self.graph = graph
        self.defuse = defuse
        self.context = context if context is not None else AnalysisContext()

        n = len(graph)
        self._in = [_empty] * n
        self._out = [_empty] * n
        self._kill = [_empty] * n
        self._gen = [frozenset((i,)) if defuse.defsAt(i) else _empty for i in range(n)]

        self.order = self.visitOrder()
        self.iterations = 0
        self.converged = True

        self.process()

    def visitOrder(self):
        graph = self.graph
        if not len(graph):
            return []

        heads = graph.headIndices()
        head = heads[0] if heads else 0
        order = dominator.ReversePostorderCrawler(graph.forward, head).order

        seen = set(order)
        order.extend(i for i in range(len(graph)) if i not in seen)
        return order

    def iterate(self):
        """
        Perform one full pass over every statement.

        Returns:
            True if any IN or OUT set changed.
        """
        reverse = self.graph.reverse
        defsAt = self.defuse.defsAt
        changed = False

        for i in self.order:
            new = set()
            for p in reverse[i]:
                new.update(self._out[p])
            new = frozenset(new)

            defs = defsAt(i)
            if defs:
                kill = frozenset(d for d in new if defsAt(d) & defs)
            else:
                kill = _empty

            out = self._gen[i] | (new - kill)

            if new != self._in[i] or out != self._out[i]:
                changed = True
            self._in[i] = new
            self._kill[i] = kill
            self._out[i] = out

        return changed

    def process(self):
        cap = self.context.config.max_iterations
        while True:
            if self.iterations >= cap:
                self.converged = False
                self.context.diagnostics.markUnconverged("reaching-definitions", self.iterations)
                break
            self.iterations += 1
            if not self.iterate():
                break

        LOG.debug(
            "reaching definitions: %d statements, %d passes",
            len(self.graph),
            self.iterations,
        )

    # Index level
    def reachingAt(self, i):
        return self._in[i]

    def outAt(self, i):
        return self._out[i]

    # Statement level
    def _statements(self, indices):
        stmts = self.graph.statements()
        return frozenset(stmts[i] for i in indices)

    def reaching(self, stmt):
        """Definitions reaching the entry of ``stmt`` (its IN set)."""
        return self._statements(self._in[self.graph.index(stmt)])

    def out(self, stmt):
        return self._statements(self._out[self.graph.index(stmt)])

    def gen(self, stmt):
        return self._statements(self._gen[self.graph.index(stmt)])

    def kill(self, stmt):
        return self._statements(self._kill[self.graph.index(stmt)])

    def as_dict(self):
        """Mapping from every statement to its reaching definitions."""
        stmts = self.graph.statements()
        return {stmt: self._statements(self._in[i]) for i, stmt in enumerate(stmts)}
