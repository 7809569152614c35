"""Natural loop detection and loop dependency classification.

Loops are found from back edges: an edge ``tail -> head`` where ``head``
dominates ``tail``. Every back edge to the same header contributes to one
loop, whose body is collected by walking predecessors backwards from the
tail until the header is reached.

Within each loop, every pair (definition, use) sharing a variable, where the
definition reaches the use, is classified as CARRIED (the value crosses an
iteration) or INDEPENDENT (produced and consumed in one iteration). A
statement that both defines and uses a variable is paired with itself. The
first matching rule decides:

1. A statement paired with itself is CARRIED iff its definition reaches the
   loop header.
2. A definition reaching the loop header is CARRIED.
3. A definition that does not dominate the use is CARRIED.
4. An array element write and an element read of the same array are
   INDEPENDENT for identical subscripts, otherwise CARRIED.
5. An induction update ``v = v +/- k`` dominating the use is INDEPENDENT.
6. Anything else inside the loop is INDEPENDENT.

These are heuristics, not a dependence test: when in doubt they report a
carried dependency.
"""

import logging

from depflow.application.context import AnalysisContext
from depflow.language import ir

from .graph import Loop, LoopDependency, LoopDependencyKind

LOG = logging.getLogger(__name__)


def inductionStep(stmt, variable):
    """
    Step of an induction update ``variable = variable +/- k``.

    Returns:
        The signed integer step, or None if ``stmt`` is not such an update.
    """
    if not isinstance(stmt, ir.AssignStmt):
        return None
    if not (isinstance(stmt.lhs, ir.Local) and stmt.lhs.name == variable):
        return None
    return constantShift(stmt.rhs, stmt.lhs)


def constantShift(expr, base):
    """
    ``k`` if ``expr`` is ``base + k`` or ``base - k`` (``k + base`` also
    accepted) for an integer constant ``k``, else None. The result is signed.
    """
    if not isinstance(expr, ir.BinaryOp) or expr.op not in ("+", "-"):
        return None

    left, right = expr.left, expr.right
    if left == base and isinstance(right, ir.Constant) and right.isInteger():
        return right.value if expr.op == "+" else -right.value
    if expr.op == "+" and right == base and isinstance(left, ir.Constant) and left.isInteger():
        return left.value
    return None


def subscriptShift(a, b):
    """Constant distance between two subscripts, or None if unrelated."""
    if a == b:
        return 0
    k = constantShift(b, a)
    if k is not None:
        return k
    k = constantShift(a, b)
    if k is not None:
        return -k
    return None


class LoopAnalyzer(object):
    """
    Natural loops of a statement graph and their loop dependencies.

    Attributes:
        graph: The analysed StmtGraph
        defuse: DefUseExtractor of the graph
        reaching: ReachingDefinitions of the graph
        dominators: DominatorAnalyzer of the graph
        context: AnalysisContext of the run
    """

    def __init__(self, graph, defuse, reaching, dominators, context=None):
        self.graph = graph
        self.defuse = defuse
        self.reaching = reaching
        self.dominators = dominators
        self.context = context if context is not None else AnalysisContext()

        self._loops = {}  # header index -> Loop
        self._deps = {}  # use index -> [LoopDependency]
        self.backEdgeIndices = []

        self.process()

    def process(self):
        self.findNaturalLoops()
        self.resolveNesting()
        self.computeLoopDependencies()

        LOG.debug(
            "loops: %d loops, %d loop dependencies",
            len(self._loops),
            sum(len(deps) for deps in self._deps.values()),
        )

    # Detection
    def findNaturalLoops(self):
        graph = self.graph
        for tail in range(len(graph)):
            for head in graph.forward[tail]:
                if not self.dominators.dominatesAt(head, tail):
                    continue

                loop = self._loops.get(head)
                if loop is None:
                    loop = Loop(graph.statement(head), head)
                    self._loops[head] = loop
                loop.backEdges.append((graph.statement(tail), loop.header))
                self.backEdgeIndices.append((tail, head))
                self.collectBody(loop, tail)

        self._loops = dict(sorted(self._loops.items()))

    def collectBody(self, loop, tail):
        reverse = self.graph.reverse
        stack = [tail]
        while stack:
            current = stack.pop()
            if loop.add(current, self.graph.statement(current)):
                for p in reverse[current]:
                    if p != loop.headerIndex:
                        stack.append(p)

    def resolveNesting(self):
        loops = list(self._loops.values())
        diagnostics = self.context.diagnostics

        for loop in loops:
            enclosing = [other for other in loops if loop.isNestedIn(other)]
            if enclosing:
                parent = min(enclosing, key=lambda other: (len(other), other.headerIndex))
                parent.addNestedLoop(loop)

        for i, a in enumerate(loops):
            for b in loops[i + 1:]:
                common = a.indices & b.indices
                if common and common != a.indices and common != b.indices:
                    diagnostics.overlapping_loops.append((a.header, b.header))
                    diagnostics.warn(
                        "overlapping-loops",
                        "loops at %r and %r partially overlap" % (a.header, b.header),
                    )

    # Classification
    def computeLoopDependencies(self):
        defsAt = self.defuse.defsAt
        usesAt = self.defuse.usesAt
        reachingAt = self.reaching.reachingAt

        for loop in self._loops.values():
            body = sorted(loop.indices)
            for d in body:
                defs = defsAt(d)
                if not defs:
                    continue

                for u in body:
                    shared = defs & usesAt(u)
                    if not shared:
                        continue
                    if u != d and d not in reachingAt(u):
                        continue

                    for variable in sorted(shared):
                        kind, distance = self.classifyPair(loop, d, u, variable)
                        self.record(u, LoopDependency(
                            kind,
                            variable,
                            distance,
                            self.graph.statement(d),
                            self.graph.statement(u),
                            loop,
                        ))

    def record(self, u, dep):
        deps = self._deps.setdefault(u, [])
        if dep not in deps:
            deps.append(dep)

    def classifyPair(self, loop, d, u, variable):
        """
        Classify the dependency from definition ``d`` to use ``u`` on
        ``variable`` inside ``loop``.

        Returns:
            (LoopDependencyKind, distance)
        """
        carried = self.isCarried(loop, d, u, variable)
        if not carried:
            return LoopDependencyKind.INDEPENDENT, 0
        return LoopDependencyKind.CARRIED, self.distance(d, u, variable)

    def isCarried(self, loop, d, u, variable):
        atHeader = self.reaching.reachingAt(loop.headerIndex)

        if d == u:
            return d in atHeader

        if d in atHeader:
            return True

        if not self.dominators.dominatesAt(d, u):
            return True

        shifts = self.arrayShifts(d, u, variable)
        if shifts is not None:
            return any(shift != 0 for shift in shifts)

        if inductionStep(self.graph.statement(d), variable) is not None:
            # Rule 3 already established that d dominates u.
            return False

        return not (d in loop.indices and u in loop.indices)

    def arrayShifts(self, d, u, variable):
        """
        Subscript shifts between the element written by ``d`` and each
        element of the same array read by ``u``.

        Returns:
            None if the pair is not an array write/read pair, otherwise a list
            with one entry per read: the constant shift, or None if the
            subscripts are unrelated.
        """
        stmt = self.graph.statement
        writes = self.defuse.array_accesses(stmt(d), variable, defined=True)
        reads = self.defuse.array_accesses(stmt(u), variable)
        if not writes or not reads:
            return None

        write = writes[0]
        return [subscriptShift(write.index, read.index) for read in reads]

    def distance(self, d, u, variable):
        step = inductionStep(self.graph.statement(d), variable)
        if step is not None:
            return max(1, abs(step))

        shifts = self.arrayShifts(d, u, variable)
        if shifts:
            known = [abs(shift) for shift in shifts if shift]
            if known:
                return min(known)
        return 1

    # Queries
    @property
    def loops(self):
        """Mapping from header statement to Loop, in header order."""
        return {loop.header: loop for loop in self._loops.values()}

    @property
    def back_edges(self):
        """Back edges as (tail, header) statement pairs."""
        stmt = self.graph.statement
        return [(stmt(tail), stmt(head)) for tail, head in self.backEdgeIndices]

    def loops_containing(self, stmt):
        """Loops whose body contains ``stmt``, outermost first."""
        i = self.graph.index(stmt)
        found = [loop for loop in self._loops.values() if i in loop.indices]
        found.sort(key=lambda loop: (loop.depth, -len(loop), loop.headerIndex))
        return found

    def loop_for(self, stmt):
        """The innermost loop containing ``stmt``, or None."""
        found = self.loops_containing(stmt)
        if found:
            return found[-1]
        return None

    def is_in_loop(self, stmt):
        return bool(self.loops_containing(stmt))

    def top_level_loops(self):
        return [loop for loop in self._loops.values() if loop.parent is None]

    def loop_dependencies(self, stmt):
        """Loop dependencies whose use is ``stmt``."""
        return list(self._deps.get(self.graph.index(stmt), ()))

    def all_loop_dependencies(self):
        result = []
        for u in sorted(self._deps):
            result.extend(self._deps[u])
        return result

    def analyzeLoopDependencies(self, result):
        """Copy every loop dependency into the DependencyResult ``result``."""
        for dep in self.all_loop_dependencies():
            result.add_loop_dependency(dep.target, dep)
        return result
