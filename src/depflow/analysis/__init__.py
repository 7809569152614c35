"""Analysis modules for depflow.

This package contains the intraprocedural analyses run over a statement
graph: def/use extraction, dominance and post-dominance, reaching
definitions, dependency classification and loop analysis.
"""
