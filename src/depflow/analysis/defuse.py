"""Def-use extraction for statement graphs.

This module computes, for every statement of a ``StmtGraph``, the variables
it defines and the variables it uses. Variables are identified by the root
name of their access path (``a.f`` and ``a[i]`` are both ``a``); there is no
alias analysis, so two paths are the same variable exactly when their roots
match.

Definitions:
- an assignment defines the root of its left-hand side
- an identity statement defines its bound local
- every other statement defines nothing

Uses are collected by walking the right-hand side and every statement
operand. Writing through a field or an array element also reads the base
(and the subscript), so those appear as uses of the assignment.

Besides the name sets the extractor keeps the structured values, so later
analyses can compare array subscripts expression by expression.
"""

import logging

from depflow.util.typedispatch import *
from depflow.language import ir

LOG = logging.getLogger(__name__)


class UseCollector(TypeDispatcher):
    """Walks expressions and records every variable read.

    Attributes:
        names: Variable names read, in visit order (may repeat).
        values: Every sub-expression visited, in visit order.
    """

    def __init__(self):
        self.names = []
        self.values = []

    def use(self, node):
        if node is not None:
            self(node)

    @dispatch(ir.Local)
    def visitLocal(self, node):
        self.values.append(node)
        self.names.append(node.name)

    @dispatch(ir.Constant, ir.ParameterRef, ir.ThisRef, ir.CaughtExceptionRef)
    def visitLeaf(self, node):
        self.values.append(node)

    @dispatch(
        ir.BinaryOp,
        ir.UnaryOp,
        ir.Cast,
        ir.LengthOf,
        ir.FieldAccess,
        ir.ArrayAccess,
        ir.Construct,
        ir.Call,
    )
    def visitCompound(self, node):
        # Field names, operators and types are not expressions; static
        # fields and static calls have no base.
        self.values.append(node)
        for child in node.children():
            self(child)

    def target(self, lhs):
        """Record the reads performed by writing to ``lhs``."""
        if isinstance(lhs, ir.FieldAccess):
            self.use(lhs.base)
        elif isinstance(lhs, ir.ArrayAccess):
            self.use(lhs.base)
            self.use(lhs.index)
        elif isinstance(lhs, ir.Cast):
            self.target(lhs.operand)


def accessPath(value):
    """The nodes of an access path, from ``value`` down to its root."""
    path = []
    while value is not None:
        path.append(value)
        if isinstance(value, (ir.FieldAccess, ir.ArrayAccess)):
            value = value.base
        elif isinstance(value, ir.Cast):
            value = value.operand
        else:
            break
    return path


class DefUse(object):
    """Def/use facts of a single statement."""
    __slots__ = "defs", "uses", "defValues", "useValues"

    def __init__(self, defs, uses, defValues, useValues):
        self.defs = defs
        self.uses = uses
        self.defValues = defValues
        self.useValues = useValues


def extractDefUse(stmt):
    collector = UseCollector()
    defValues = ()
    defs = ()

    if stmt.isAssignment():
        defValues = (stmt.lhs,)
        root = ir.rootName(stmt.lhs)
        if root is not None:
            defs = (root,)
        collector.target(stmt.lhs)
    elif stmt.isIdentity():
        defValues = (stmt.local,)
        defs = (stmt.local.name,)

    for operand in stmt.operands():
        collector.use(operand)

    return DefUse(
        frozenset(defs),
        frozenset(collector.names),
        defValues,
        tuple(collector.values),
    )


class DefUseExtractor(object):
    """
    Memoized def/use sets for the statements of one graph.

    Facts are computed on first request and kept for the lifetime of the
    extractor. Queries naming a statement outside the graph raise
    ``UnknownStatementError``.
    """

    def __init__(self, graph):
        self.graph = graph
        self._facts = [None] * len(graph)

    def facts(self, i):
        """Def/use facts of the statement with index ``i``."""
        du = self._facts[i]
        if du is None:
            du = extractDefUse(self.graph.statement(i))
            self._facts[i] = du
        return du

    def defsAt(self, i):
        return self.facts(i).defs

    def usesAt(self, i):
        return self.facts(i).uses

    def def_set(self, stmt):
        return self.facts(self.graph.index(stmt)).defs

    def use_set(self, stmt):
        return self.facts(self.graph.index(stmt)).uses

    def def_values(self, stmt):
        return self.facts(self.graph.index(stmt)).defValues

    def use_values(self, stmt):
        """Every sub-expression read by ``stmt``, in visit order."""
        return self.facts(self.graph.index(stmt)).useValues

    def array_accesses(self, stmt, name, defined=False):
        """
        Array element accesses of ``stmt`` whose base is rooted at ``name``.

        Args:
            stmt: The statement to inspect.
            name: Root variable name of the array.
            defined: If True, return the elements on the path written by
                ``stmt`` (``a[i]`` for both ``a[i] = v`` and ``a[i].f = v``);
                otherwise the elements it reads.

        Returns:
            Tuple of ``ir.ArrayAccess`` expressions.
        """
        if defined:
            values = [
                node
                for value in self.def_values(stmt)
                for node in accessPath(value)
            ]
        else:
            values = self.use_values(stmt)
        return tuple(
            value
            for value in values
            if isinstance(value, ir.ArrayAccess) and ir.rootName(value.base) == name
        )

    def all_def_sets(self):
        return {stmt: self.facts(i).defs for i, stmt in enumerate(self.graph.statements())}

    def all_use_sets(self):
        return {stmt: self.facts(i).uses for i, stmt in enumerate(self.graph.statements())}

    def variables(self):
        """Every variable defined or used in the graph, sorted."""
        names = set()
        for i in range(len(self.graph)):
            names.update(self.facts(i).defs)
            names.update(self.facts(i).uses)
        return sorted(names)

    def process(self):
        """Compute the facts of every statement eagerly."""
        for i in range(len(self.graph)):
            self.facts(i)
        LOG.debug("def/use extracted for %d statements", len(self.graph))
        return self
