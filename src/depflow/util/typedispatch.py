"""Type-based dispatch system for depflow.

A TypeDispatcher selects a handler method from the runtime type of its
first argument. The def/use walker uses it to pattern-match over the closed
set of expression kinds without chains of isinstance tests.
"""

__all__ = [
    "TypeDispatcher",
    "defaultdispatch",
    "dispatch",
    "TypeDispatchError",
    "TypeDispatchDeclarationError",
]

import inspect


class TypeDispatchError(Exception):
    """Raised when a dispatcher is called with a type it cannot handle."""
    pass


class TypeDispatchDeclarationError(Exception):
    """
    Raised while a dispatcher class is being defined if:
    - two handlers are declared for the same type
    - no default handler is reachable
    - a dispatch declaration names something that is not a type
    """
    pass


def flattenTypesInto(l, result):
    """Flatten nested lists/tuples of types into ``result``.

    Raises:
        TypeDispatchDeclarationError: If a non-type object is found.
    """
    for child in l:
        if isinstance(child, (list, tuple)):
            flattenTypesInto(child, result)
        else:
            if not isinstance(child, type):
                raise TypeDispatchDeclarationError(
                    "Expected a type, got %r instead." % child
                )
            result.append(child)


def dispatch(*types):
    """Mark a method as the handler for the given expression types.

    Types may be given individually or as (nested) tuples, so a handler can
    be shared by several kinds::

        @dispatch(ir.Cast, ir.LengthOf)
        def visitOperand(self, node): ...
    """
    def dispatchF(f):
        def dispatchWrap(*args, **kargs):
            return f(*args, **kargs)

        dispatchWrap.__original__ = f
        dispatchWrap.__dispatch__ = []
        flattenTypesInto(types, dispatchWrap.__dispatch__)
        return dispatchWrap

    return dispatchF


def defaultdispatch(f):
    """Mark a method as the fallback handler for unlisted types."""
    def defaultWrap(*args, **kargs):
        return f(*args, **kargs)

    defaultWrap.__original__ = f
    defaultWrap.__dispatch__ = (None,)
    return defaultWrap


def dispatch__call__(self, p, *args):
    """
    Dispatch on ``type(p)``.

    Exact types hit the table directly. Otherwise the MRO is searched once
    (unless the dispatcher is concrete), falling back to the default
    handler, and the answer is cached under the exact type.
    """
    t = type(p)
    table = self.__typeDispatchTable__

    func = table.get(t)

    if func is None:
        if self.__concrete__:
            possible = (t,)
        else:
            possible = t.mro()

        for supercls in possible:
            func = table.get(supercls)
            if func is not None:
                break

        if func is None:
            func = table.get(None)

        table[t] = func

    return func(self, p, *args)


def exceptionDefault(self, node, *args):
    raise TypeDispatchError("%r cannot handle %r\n%r" % (type(self), type(node), node))


def inlineAncestor(t, lut):
    # Inherit handlers that the subclass did not redefine.
    if hasattr(t, "__typeDispatchTable__"):
        for k, v in t.__typeDispatchTable__.items():
            if k not in lut:
                lut[k] = v


class typedispatcher(type):
    """
    Metaclass that builds ``__typeDispatchTable__`` from the methods
    decorated with @dispatch / @defaultdispatch, inlining the tables of the
    base classes.
    """
    def __new__(self, name, bases, d):
        lut = {}
        restore = {}

        for k, v in d.items():
            if hasattr(v, "__dispatch__") and hasattr(v, "__original__"):
                types = v.__dispatch__
                original = v.__original__

                for t in types:
                    if t in lut:
                        raise TypeDispatchDeclarationError(
                            "%s has declared with multiple handlers for type %s"
                            % (name, "default" if t is None else t.__name__)
                        )
                    else:
                        lut[t] = original

                restore[k] = original

        # Handlers stay callable as plain methods.
        d.update(restore)

        for base in bases:
            for t in inspect.getmro(base):
                inlineAncestor(t, lut)

        if None not in lut:
            raise TypeDispatchDeclarationError("%s has no default dispatch" % (name,))

        d["__typeDispatchTable__"] = lut

        return type.__new__(self, name, bases, d)


class TypeDispatcher(object, metaclass=typedispatcher):
    """
    Base class for type-dispatched visitors.

    Usage:
        >>> class Kind(TypeDispatcher):
        ...     @dispatch(ir.Local)
        ...     def visitLocal(self, node):
        ...         return "local"
        ...     @defaultdispatch
        ...     def visitOther(self, node):
        ...         return "other"
        >>> Kind()(ir.Local("x"))
        'local'

    Attributes:
        __concrete__: If True, only exact type matches are considered.
    """
    __dispatch__ = dispatch__call__
    __call__ = dispatch__call__
    exceptionDefault = defaultdispatch(exceptionDefault)
    __concrete__ = False
