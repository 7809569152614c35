"""Language support for depflow.

This package holds the statement-level IR that frontends produce and the
analyses consume. Statements and expressions are defined in ``ir``.
"""
