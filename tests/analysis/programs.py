"""
Statement graphs shared by the analysis tests.

Each function builds a small method body and returns a ``Program`` whose
statements can be looked up by name::

    prog = for_loop()
    prog["cond"]  # the loop condition
"""

from depflow.analysis.cfg import GraphBuilder, StmtGraph
from depflow.language.ir import (
    ArrayAccess,
    AssignStmt,
    BinaryOp,
    Call,
    Constant,
    FieldAccess,
    GotoStmt,
    IdentityStmt,
    IfStmt,
    InvokeStmt,
    Local,
    ParameterRef,
    ReturnStmt,
    SwitchStmt,
)


class Program(object):
    def __init__(self, graph, names):
        self.graph = graph
        self.names = dict(names)

    def __getitem__(self, name):
        return self.names[name]


def fromBuilder(builder):
    return Program(builder.build(), builder.names)


def fromEdges(named, edges):
    """Build a program from (name, statement) pairs and (name, name) edges."""
    names = dict(named)
    for name, stmt in named:
        stmt.label = name
    graph = StmtGraph(
        [stmt for _name, stmt in named],
        [(names[a], names[b]) for a, b in edges],
    )
    return Program(graph, names)


def x(name):
    return Local(name)


def c(value):
    return Constant(value)


def plus(left, right):
    return BinaryOp("+", left, right)


def straight_line():
    """x = 1; y = x + 1"""
    b = GraphBuilder()
    b.add(AssignStmt(x("x"), c(1)), name="def")
    b.add(AssignStmt(x("y"), plus(x("x"), c(1))), name="use")
    return fromBuilder(b)


def redefinition():
    """x = 1; x = 2"""
    b = GraphBuilder()
    b.add(AssignStmt(x("x"), c(1)), name="first")
    b.add(AssignStmt(x("x"), c(2)), name="second")
    return fromBuilder(b)


def branch():
    """if (cond) { a = 1; } b = 2; return"""
    b = GraphBuilder()
    b.add(IfStmt(BinaryOp("==", x("cond"), c(0))), target="join", name="if")
    b.add(AssignStmt(x("a"), c(1)), name="then")
    b.add(AssignStmt(x("b"), c(2)), name="join")
    b.add(ReturnStmt(), name="ret")
    return fromBuilder(b)


def diamond():
    """
    p := @parameter0
    if p > 0 goto else
    v = 1
    goto join
    else: v = 2
    join: return v
    """
    b = GraphBuilder()
    b.add(IdentityStmt(x("p"), ParameterRef(0)), name="param")
    b.add(IfStmt(BinaryOp(">", x("p"), c(0))), target="else", name="if")
    b.add(AssignStmt(x("v"), c(1)), name="then")
    b.add(GotoStmt(), target="join", name="goto")
    b.add(AssignStmt(x("v"), c(2)), name="else")
    b.add(ReturnStmt(x("v")), name="join")
    return fromBuilder(b)


def for_loop():
    """
    i = 0; sum = 0
    cond: if i >= 10 goto exit
    body: sum = sum + i
    inc:  i = i + 1        (back edge to cond)
    exit: return sum
    """
    return fromEdges(
        [
            ("init", AssignStmt(x("i"), c(0))),
            ("zero", AssignStmt(x("sum"), c(0))),
            ("cond", IfStmt(BinaryOp(">=", x("i"), c(10)))),
            ("body", AssignStmt(x("sum"), plus(x("sum"), x("i")))),
            ("inc", AssignStmt(x("i"), plus(x("i"), c(1)))),
            ("exit", ReturnStmt(x("sum"))),
        ],
        [
            ("init", "zero"),
            ("zero", "cond"),
            ("cond", "body"),
            ("cond", "exit"),
            ("body", "inc"),
            ("inc", "cond"),
        ],
    )


def nested_loops():
    """
    i = 0
    outer: if i >= n goto exit
    j = 0
    inner: if j >= m goto oinc
    body:  s = s + j
    jinc:  j = j + 1        (back edge to inner)
    oinc:  i = i + 1        (back edge to outer)
    exit:  return s
    """
    return fromEdges(
        [
            ("init", AssignStmt(x("i"), c(0))),
            ("outer", IfStmt(BinaryOp(">=", x("i"), x("n")))),
            ("jinit", AssignStmt(x("j"), c(0))),
            ("inner", IfStmt(BinaryOp(">=", x("j"), x("m")))),
            ("body", AssignStmt(x("s"), plus(x("s"), x("j")))),
            ("jinc", AssignStmt(x("j"), plus(x("j"), c(1)))),
            ("oinc", AssignStmt(x("i"), plus(x("i"), c(1)))),
            ("exit", ReturnStmt(x("s"))),
        ],
        [
            ("init", "outer"),
            ("outer", "jinit"),
            ("outer", "exit"),
            ("jinit", "inner"),
            ("inner", "body"),
            ("inner", "oinc"),
            ("body", "jinc"),
            ("jinc", "inner"),
            ("oinc", "outer"),
        ],
    )


def induction_loop():
    """
    k = 0
    head:  if k >= n goto exit
    step:  t = t + 2
    use:   a = t * 3
    reset: t = 0
    kinc:  k = k + 1        (back edge to head)
    exit:  return a
    """
    return fromEdges(
        [
            ("init", AssignStmt(x("k"), c(0))),
            ("head", IfStmt(BinaryOp(">=", x("k"), x("n")))),
            ("step", AssignStmt(x("t"), plus(x("t"), c(2)))),
            ("use", AssignStmt(x("a"), BinaryOp("*", x("t"), c(3)))),
            ("reset", AssignStmt(x("t"), c(0))),
            ("kinc", AssignStmt(x("k"), plus(x("k"), c(1)))),
            ("exit", ReturnStmt(x("a"))),
        ],
        [
            ("init", "head"),
            ("head", "step"),
            ("head", "exit"),
            ("step", "use"),
            ("use", "reset"),
            ("reset", "kinc"),
            ("kinc", "head"),
        ],
    )


def array_loop():
    """
    i = 1
    head:  if i >= n goto exit
    write: a[i] = v
    same:  y = a[i]
    prev:  z = a[i - 1]
    fill:  a[0] = y
    inc:   i = i + 1        (back edge to head)
    exit:  return
    """
    i = x("i")
    return fromEdges(
        [
            ("init", AssignStmt(x("i"), c(1))),
            ("head", IfStmt(BinaryOp(">=", x("i"), x("n")))),
            ("write", AssignStmt(ArrayAccess(x("a"), x("i")), x("v"))),
            ("same", AssignStmt(x("y"), ArrayAccess(x("a"), i))),
            ("prev", AssignStmt(x("z"), ArrayAccess(x("a"), BinaryOp("-", i, c(1))))),
            ("fill", AssignStmt(ArrayAccess(x("a"), c(0)), x("y"))),
            ("inc", AssignStmt(x("i"), plus(x("i"), c(1)))),
            ("exit", ReturnStmt()),
        ],
        [
            ("init", "head"),
            ("head", "write"),
            ("head", "exit"),
            ("write", "same"),
            ("same", "prev"),
            ("prev", "fill"),
            ("fill", "inc"),
            ("inc", "head"),
        ],
    )


def multiple_exits():
    """if x > 0 goto two; return 1; two: return 2"""
    b = GraphBuilder()
    b.add(IfStmt(BinaryOp(">", x("x"), c(0))), target="two", name="if")
    b.add(ReturnStmt(c(1)), name="one")
    b.add(ReturnStmt(c(2)), name="two")
    return fromBuilder(b)


def cycle():
    """Two statements jumping to each other; no entry and no exit."""
    return fromEdges(
        [
            ("a", AssignStmt(x("x"), plus(x("x"), c(1)))),
            ("b", InvokeStmt(Call("println", [x("x")]))),
        ],
        [("a", "b"), ("b", "a")],
    )


def dead_code():
    """x = 1; return x; y = 2 (never executed)"""
    b = GraphBuilder()
    b.add(AssignStmt(x("x"), c(1)), name="def")
    b.add(ReturnStmt(x("x")), name="ret")
    b.add(AssignStmt(x("y"), c(2)), name="dead")
    return fromBuilder(b)


def switch():
    """
    switch k: case 1 -> one, default -> other
    one:   r = 1; goto done
    other: r = 2
    done:  return r
    """
    b = GraphBuilder()
    b.add(SwitchStmt(x("k")), targets=["one", "other"], name="switch")
    b.add(AssignStmt(x("r"), c(1)), name="one")
    b.add(GotoStmt(), target="done", name="goto")
    b.add(AssignStmt(x("r"), c(2)), name="other")
    b.add(ReturnStmt(x("r")), name="done")
    return fromBuilder(b)


def field_write():
    """o.f = v; w = o.f"""
    b = GraphBuilder()
    b.add(AssignStmt(FieldAccess(x("o"), "f"), x("v")), name="store")
    b.add(AssignStmt(x("w"), FieldAccess(x("o"), "f")), name="load")
    return fromBuilder(b)
