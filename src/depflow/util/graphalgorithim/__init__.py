"""
Graph algorithms for control flow analysis.

The algorithms work on plain directed graphs given as a mapping (or a list
indexed by node) from each node to an iterable of successor nodes, so they
can run both on statement graphs and on their reversals:

- Basic graph operations (reversal, entry and exit point finding)
- Reverse post-order numbering with an explicit stack
- Iterative dominator-set computation
"""
