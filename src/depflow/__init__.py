"""depflow - intraprocedural dependency analysis over statement graphs.
"""

__version__ = "0.1.0"

from .application.config import AnalysisConfig
from .application.context import AnalysisContext
from .application.pipeline import DependencyAnalyzer, AnalysisRun, analyze

__all__ = [
    "AnalysisConfig",
    "AnalysisContext",
    "DependencyAnalyzer",
    "AnalysisRun",
    "analyze",
    "__version__",
]
