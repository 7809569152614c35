"""Assembling statement graphs from linear statement lists.

Frontends usually produce a method body as a list of statements in which
control falls through to the next statement unless a jump says otherwise.
``GraphBuilder`` turns such a list, plus the jump targets, into a
``StmtGraph``:

- an ``IfStmt`` falls through and also jumps to its target
- a ``GotoStmt`` only jumps
- a ``SwitchStmt`` jumps to each case target and to its default target
- ``ReturnStmt`` and ``ThrowStmt`` end control flow (no successors)
- any other statement falls through

Example::

    b = GraphBuilder()
    b.add(AssignStmt(Local("i"), Constant(0)))
    b.add(IfStmt(BinaryOp(">=", Local("i"), Constant(10))), target="exit", name="cond")
    b.add(AssignStmt(Local("i"), BinaryOp("+", Local("i"), Constant(1))))
    b.add(GotoStmt(), target="cond")
    b.add(ReturnStmt(), name="exit")
    graph = b.build()
"""

from depflow.application.errors import MalformedGraphError
from depflow.language import ir

from .graph import StmtGraph


class GraphBuilder(object):
    """
    Collects statements and jump targets, then builds a ``StmtGraph``.

    Attributes:
        stmts: Statements in program order.
        names: Mapping from label name to statement.
        targets: Mapping from statement id to the list of jump targets
            (names or statements) declared for it.
    """

    def __init__(self):
        self.stmts = []
        self.names = {}
        self.targets = {}
        self.extra = []

    def add(self, stmt, target=None, targets=(), name=None):
        """
        Append ``stmt``.

        Args:
            stmt: Statement to append.
            target: Jump target (label name or statement) for jumps.
            targets: Several jump targets, for switches.
            name: Label under which other statements can jump here. It also
                becomes the statement's label if it has none.

        Returns:
            The statement, for convenience.
        """
        if name is not None:
            if name in self.names:
                raise MalformedGraphError("label %r is defined twice" % (name,))
            self.names[name] = stmt
            if stmt.label is None:
                stmt.label = name

        jumps = list(targets)
        if target is not None:
            jumps.append(target)
        if jumps:
            self.targets[id(stmt)] = jumps

        self.stmts.append(stmt)
        return stmt

    def edge(self, source, target):
        """Add an explicit edge, e.g. an exceptional transfer to a handler."""
        self.extra.append((source, target))

    def resolve(self, target):
        if isinstance(target, ir.Statement):
            return target
        try:
            return self.names[target]
        except KeyError:
            raise MalformedGraphError("jump to unknown label %r" % (target,)) from None

    def fallsThrough(self, stmt):
        if stmt.isReturn():
            return False
        return not isinstance(stmt, (ir.GotoStmt, ir.SwitchStmt, ir.ThrowStmt))

    def build(self):
        edges = []
        for i, stmt in enumerate(self.stmts):
            if self.fallsThrough(stmt) and i + 1 < len(self.stmts):
                edges.append((stmt, self.stmts[i + 1]))

            for target in self.targets.get(id(stmt), ()):
                edges.append((stmt, self.resolve(target)))

        for source, target in self.extra:
            edges.append((self.resolve(source), self.resolve(target)))

        return StmtGraph(self.stmts, edges)
