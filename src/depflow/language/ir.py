"""Statement-level intermediate representation consumed by depflow.

This module defines the node classes that an IR frontend hands to the
analysis engine. The engine never builds these nodes itself; it only walks
them through the statement graph.

**Expressions** form a closed set of kinds:
- Local: a named local variable
- Constant: a literal value
- BinaryOp / UnaryOp: arithmetic, comparison and logical operators
- FieldAccess: instance or static field reference
- ArrayAccess: array element reference
- Cast / LengthOf: type cast and array length
- Construct: object or array allocation
- Call: method or function invocation, with an optional receiver
- ParameterRef / ThisRef / CaughtExceptionRef: identity binding sources

Expressions are value objects: two expressions with the same kind and the
same children compare equal. Loop analysis relies on this to compare array
subscripts.

**Statements** are identity objects: two statements that print the same are
still different nodes of the graph. Statements expose the queries the
analyses need (isAssignment, isIdentity, isJump, operands) instead of being
inspected by string matching.
"""

__all__ = [
    "Expression",
    "Local",
    "Constant",
    "BinaryOp",
    "UnaryOp",
    "FieldAccess",
    "ArrayAccess",
    "Cast",
    "LengthOf",
    "Construct",
    "Call",
    "ParameterRef",
    "ThisRef",
    "CaughtExceptionRef",
    "Statement",
    "AssignStmt",
    "IdentityStmt",
    "IfStmt",
    "GotoStmt",
    "SwitchStmt",
    "ReturnStmt",
    "InvokeStmt",
    "ThrowStmt",
    "NopStmt",
    "rootName",
]


class Expression(object):
    """Base class for all expression kinds.

    Subclasses list their children in ``__slots__``; equality, hashing and
    ``children()`` are derived from those slots so every expression behaves
    as an immutable value.
    """
    __slots__ = ()

    def fields(self):
        return tuple(getattr(self, name) for name in self.__slots__)

    def children(self):
        """Sub-expressions of this node, in slot order."""
        return tuple(
            child for child in self.fields() if isinstance(child, Expression)
        )

    def __eq__(self, other):
        return type(self) is type(other) and self.fields() == other.fields()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((type(self).__name__,) + self.fields())

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__name__,
            ", ".join(repr(field) for field in self.fields()),
        )


class Local(Expression):
    __slots__ = ("name",)

    def __init__(self, name):
        self.name = name

    def __str__(self):
        return self.name


class Constant(Expression):
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def isInteger(self):
        return isinstance(self.value, int) and not isinstance(self.value, bool)

    def __str__(self):
        return repr(self.value)


class BinaryOp(Expression):
    """Binary operator application, e.g. ``i + 1`` or ``i < n``."""
    __slots__ = ("op", "left", "right")

    def __init__(self, op, left, right):
        self.op = op
        self.left = left
        self.right = right

    def __str__(self):
        return "%s %s %s" % (self.left, self.op, self.right)


class UnaryOp(Expression):
    __slots__ = ("op", "operand")

    def __init__(self, op, operand):
        self.op = op
        self.operand = operand

    def __str__(self):
        return "%s%s" % (self.op, self.operand)


class FieldAccess(Expression):
    """Field reference. ``base`` is None for a static field."""
    __slots__ = ("base", "field")

    def __init__(self, base, field):
        self.base = base
        self.field = field

    def isStatic(self):
        return self.base is None

    def __str__(self):
        if self.base is None:
            return "<static>.%s" % self.field
        return "%s.%s" % (self.base, self.field)


class ArrayAccess(Expression):
    __slots__ = ("base", "index")

    def __init__(self, base, index):
        self.base = base
        self.index = index

    def __str__(self):
        return "%s[%s]" % (self.base, self.index)


class Cast(Expression):
    __slots__ = ("type", "operand")

    def __init__(self, type, operand):
        self.type = type
        self.operand = operand

    def __str__(self):
        return "(%s) %s" % (self.type, self.operand)


class LengthOf(Expression):
    __slots__ = ("operand",)

    def __init__(self, operand):
        self.operand = operand

    def __str__(self):
        return "lengthof %s" % (self.operand,)


class Construct(Expression):
    """Object or array allocation.

    ``sizes`` holds array dimension expressions; it is empty for objects.
    """
    __slots__ = ("type", "sizes")

    def __init__(self, type, sizes=()):
        self.type = type
        self.sizes = tuple(sizes)

    def children(self):
        return tuple(size for size in self.sizes if isinstance(size, Expression))

    def __str__(self):
        if self.sizes:
            return "new %s%s" % (
                self.type,
                "".join("[%s]" % (size,) for size in self.sizes),
            )
        return "new %s" % (self.type,)


class Call(Expression):
    """Invocation. ``receiver`` is None for static and free-function calls."""
    __slots__ = ("name", "args", "receiver")

    def __init__(self, name, args=(), receiver=None):
        self.name = name
        self.args = tuple(args)
        self.receiver = receiver

    def isStatic(self):
        return self.receiver is None

    def children(self):
        children = [arg for arg in self.args if isinstance(arg, Expression)]
        if self.receiver is not None:
            children.append(self.receiver)
        return tuple(children)

    def __str__(self):
        args = ", ".join(str(arg) for arg in self.args)
        if self.receiver is None:
            return "%s(%s)" % (self.name, args)
        return "%s.%s(%s)" % (self.receiver, self.name, args)


class ParameterRef(Expression):
    __slots__ = ("index",)

    def __init__(self, index):
        self.index = index

    def __str__(self):
        return "@parameter%d" % (self.index,)


class ThisRef(Expression):
    __slots__ = ()

    def __str__(self):
        return "@this"


class CaughtExceptionRef(Expression):
    __slots__ = ()

    def __str__(self):
        return "@caughtexception"


def rootName(value):
    """Return the root variable name of an access path, or None.

    ``a`` -> ``"a"``, ``a.f.g`` -> ``"a"``, ``a[i]`` -> ``"a"``,
    ``(T) a`` -> ``"a"``. Static fields, constants and calls have no root.
    """
    while True:
        if isinstance(value, Local):
            return value.name
        elif isinstance(value, (FieldAccess, ArrayAccess)):
            value = value.base
        elif isinstance(value, Cast):
            value = value.operand
        else:
            return None


class Statement(object):
    """Base class for statements.

    Statements use identity equality; ``label`` only affects ``repr``.
    """
    __slots__ = ("label",)

    def __init__(self, label=None):
        self.label = label

    def isAssignment(self):
        return False

    def isIdentity(self):
        return False

    def isJump(self):
        """True for statements that transfer control explicitly."""
        return False

    def isReturn(self):
        return False

    def operands(self):
        """Expressions read by this statement outside of a left-hand side."""
        return ()

    def describe(self):
        return type(self).__name__

    def __repr__(self):
        if self.label is not None:
            return "<%s %s>" % (self.label, self.describe())
        return "<%s>" % (self.describe(),)


class AssignStmt(Statement):
    __slots__ = ("lhs", "rhs")

    def __init__(self, lhs, rhs, label=None):
        Statement.__init__(self, label)
        self.lhs = lhs
        self.rhs = rhs

    def isAssignment(self):
        return True

    def operands(self):
        return (self.rhs,)

    def describe(self):
        return "%s = %s" % (self.lhs, self.rhs)


class IdentityStmt(Statement):
    """Binds a local to a parameter, ``this`` or a caught exception."""
    __slots__ = ("local", "source")

    def __init__(self, local, source, label=None):
        Statement.__init__(self, label)
        self.local = local
        self.source = source

    def isIdentity(self):
        return True

    def describe(self):
        return "%s := %s" % (self.local, self.source)


class IfStmt(Statement):
    __slots__ = ("condition",)

    def __init__(self, condition, label=None):
        Statement.__init__(self, label)
        self.condition = condition

    def isJump(self):
        return True

    def operands(self):
        return (self.condition,)

    def describe(self):
        return "if %s" % (self.condition,)


class GotoStmt(Statement):
    __slots__ = ()

    def isJump(self):
        return True

    def describe(self):
        return "goto"


class SwitchStmt(Statement):
    __slots__ = ("key",)

    def __init__(self, key, label=None):
        Statement.__init__(self, label)
        self.key = key

    def isJump(self):
        return True

    def operands(self):
        return (self.key,)

    def describe(self):
        return "switch %s" % (self.key,)


class ReturnStmt(Statement):
    __slots__ = ("value",)

    def __init__(self, value=None, label=None):
        Statement.__init__(self, label)
        self.value = value

    def isReturn(self):
        return True

    def operands(self):
        if self.value is None:
            return ()
        return (self.value,)

    def describe(self):
        if self.value is None:
            return "return"
        return "return %s" % (self.value,)


class InvokeStmt(Statement):
    """A call evaluated for its side effects only."""
    __slots__ = ("call",)

    def __init__(self, call, label=None):
        Statement.__init__(self, label)
        self.call = call

    def operands(self):
        return (self.call,)

    def describe(self):
        return str(self.call)


class ThrowStmt(Statement):
    __slots__ = ("value",)

    def __init__(self, value, label=None):
        Statement.__init__(self, label)
        self.value = value

    def operands(self):
        return (self.value,)

    def describe(self):
        return "throw %s" % (self.value,)


class NopStmt(Statement):
    __slots__ = ()

    def describe(self):
        return "nop"
