"""
Utility modules for depflow.

- Type-based dispatch system (typedispatch.py)
- Graph algorithms (graphalgorithim/)
- Application-level utilities (application/)
- Formatting utilities (io/)
"""
