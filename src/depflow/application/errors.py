"""
Error handling for depflow analyses.

This module defines the exception classes raised by the analysis engine.
Structural oddities of the input graph (no entry, several exits,
unreachable statements) are not errors: analyses fall back and record the
degraded confidence in ``Diagnostics`` instead.
"""


class AnalysisError(Exception):
    """Base class for all errors raised by depflow."""
    pass


class UnknownStatementError(AnalysisError, KeyError):
    """
    Raised when a query names a statement that is not part of the analysed
    graph. Statements are identified by object identity, so a structurally
    identical statement from another graph is still unknown.
    """

    def __init__(self, stmt):
        AnalysisError.__init__(self, stmt)
        self.stmt = stmt

    def __str__(self):
        return "statement %r is not part of the analysed graph" % (self.stmt,)


class MalformedGraphError(AnalysisError):
    """
    Raised when the input cannot be turned into a statement graph at all,
    e.g. an edge names a statement that was never added or a jump targets an
    unknown label.
    """
    pass


class InternalError(AnalysisError):
    """
    Raised for internal errors in depflow.

    This exception indicates a bug or unexpected condition in the engine
    itself, as opposed to a problem with the analysed graph.
    """
    pass
