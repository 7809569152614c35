"""Data and control dependency classification.

This module derives every data dependency (RAW, WAR, WAW, DEF_ORDER) and
every control dependency of a statement graph from the def/use sets, the
reaching definitions and the (post-)dominator relations.

**Data dependencies:**
1. **RAW**: a definition ``d`` reaching ``u`` defines a variable ``u``
   uses. Every reaching definition gives its own edge; ``d`` may be ``u``
   itself (an accumulator in a loop).
2. **WAR**: a statement ``r`` reads a variable that another statement ``d``
   writes, and ``d`` can execute after ``r`` (a path of at least one edge
   leads from ``r`` to ``d``). The edge goes from ``r`` to ``d``.
3. **WAW**: two distinct statements define the same variable. One edge per
   pair and variable, from the dominating statement to the dominated one;
   if neither dominates, from the one that reaches the other without being
   reached back; otherwise in graph order.
4. **DEF_ORDER**: added next to a WAW edge whose source dominates its
   target.

**Control dependencies:**
A branch is a statement with several successors or an explicit jump. A
direct successor ``s`` of a branch ``b`` is control dependent on ``b`` if
``s`` does not post-dominate ``b``. With ``AnalysisConfig.control_closure``
every statement on the post-dominator tree path from ``s`` up to (but
excluding) the immediate post-dominator of ``b`` is control dependent on
``b`` as well.
"""

import logging

from depflow.application.context import AnalysisContext

from .graph import Dependency, DependencyKind, DependencyResult

LOG = logging.getLogger(__name__)


class DependencyClassifier(object):
    """
    Classifies the dependencies of one statement graph.

    Attributes:
        graph: The analysed StmtGraph
        defuse: DefUseExtractor of the graph
        reaching: ReachingDefinitions of the graph
        dominators: DominatorAnalyzer of the graph
        postdominators: PostDominatorAnalyzer of the graph
        context: AnalysisContext of the run
    """

    def __init__(self, graph, defuse, reaching, dominators, postdominators, context=None):
        self.graph = graph
        self.defuse = defuse
        self.reaching = reaching
        self.dominators = dominators
        self.postdominators = postdominators
        self.context = context if context is not None else AnalysisContext()

        # index -> indices reachable by a path of at least one edge
        self._reach = {}

    def reachable(self, i):
        reached = self._reach.get(i)
        if reached is None:
            reached = self.graph.descendants(i)
            self._reach[i] = reached
        return reached

    def dependency(self, source, target, kind, variable=None):
        stmt = self.graph.statement
        return Dependency(stmt(source), stmt(target), kind, variable)

    # Data dependencies
    def rawDependencies(self):
        defsAt = self.defuse.defsAt
        for u in range(len(self.graph)):
            uses = self.defuse.usesAt(u)
            if not uses:
                continue
            for d in sorted(self.reaching.reachingAt(u)):
                for variable in sorted(defsAt(d) & uses):
                    yield self.dependency(d, u, DependencyKind.RAW, variable)

    def warDependencies(self):
        n = len(self.graph)
        usesAt = self.defuse.usesAt
        for d in range(n):
            defs = self.defuse.defsAt(d)
            if not defs:
                continue
            for r in range(n):
                if r == d:
                    continue
                shared = defs & usesAt(r)
                if shared and d in self.reachable(r):
                    for variable in sorted(shared):
                        yield self.dependency(r, d, DependencyKind.WAR, variable)

    def orient(self, a, b):
        """Order the writers ``a`` < ``b`` of a WAW pair as (source, target)."""
        dominates = self.dominators.dominatesAt
        if dominates(a, b):
            return a, b
        if dominates(b, a):
            return b, a

        forward = b in self.reachable(a)
        backward = a in self.reachable(b)
        if backward and not forward:
            return b, a
        return a, b

    def wawDependencies(self):
        n = len(self.graph)
        defsAt = self.defuse.defsAt
        for a in range(n):
            defs = defsAt(a)
            if not defs:
                continue
            for b in range(a + 1, n):
                shared = defs & defsAt(b)
                if not shared:
                    continue

                source, target = self.orient(a, b)
                ordered = self.dominators.dominatesAt(source, target)
                for variable in sorted(shared):
                    yield self.dependency(source, target, DependencyKind.WAW, variable)
                    if ordered:
                        yield self.dependency(source, target, DependencyKind.DEF_ORDER, variable)

    def data_dependencies(self):
        """Every RAW, WAR, WAW and DEF_ORDER dependency, as a list."""
        deps = list(self.rawDependencies())
        deps.extend(self.warDependencies())
        deps.extend(self.wawDependencies())
        return deps

    # Control dependencies
    def control_dependencies(self):
        """Every CONTROL dependency, as a list."""
        graph = self.graph
        pdom = self.postdominators
        closure = self.context.config.control_closure

        deps = []
        for b in range(len(graph)):
            if not graph.isBranch(graph.statement(b)):
                continue

            stop = pdom.idoms[b]
            for s in graph.forward[b]:
                if pdom.dominatesAt(s, b):
                    continue

                if not closure:
                    deps.append(self.dependency(b, s, DependencyKind.CONTROL))
                    continue

                visited = set()
                t = s
                while t is not None and t != stop and t not in visited:
                    visited.add(t)
                    deps.append(self.dependency(b, t, DependencyKind.CONTROL))
                    t = pdom.idoms[t]
        return deps

    def classify(self, result=None):
        """
        Add every data and control dependency to ``result``.

        Args:
            result: DependencyResult to fill; a new one if None.

        Returns:
            The DependencyResult.
        """
        if result is None:
            result = DependencyResult()

        data = 0
        for dep in self.data_dependencies():
            if result.add_data_dependency(dep):
                data += 1

        control = 0
        for dep in self.control_dependencies():
            if result.add_control_dependency(dep):
                control += 1

        LOG.debug("classified %d data and %d control dependencies", data, control)
        return result
