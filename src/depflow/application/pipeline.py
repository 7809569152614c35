"""Analysis pipeline for depflow.

This module runs the analyses of a statement graph in dependency order and
bundles their results:

1. Def/use extraction
2. Dominators
3. Post-dominators
4. Reaching definitions
5. Data and control dependencies
6. Loops and loop dependencies (if ``AnalysisConfig.track_loops``)

Each phase runs inside a console scope of the context, so a context with a
console reports the time spent per phase.
"""

import logging

from depflow.analysis.defuse import DefUseExtractor
from depflow.analysis.dom import DominatorAnalyzer, PostDominatorAnalyzer
from depflow.analysis.reachingdefs import ReachingDefinitions
from depflow.analysis.dependency import DependencyClassifier, DependencyResult
from depflow.analysis.loops import LoopAnalyzer

from .context import AnalysisContext

LOG = logging.getLogger(__name__)


class AnalysisRun(object):
    """
    The results of one analysis run.

    Attributes:
        graph: The analysed StmtGraph
        context: The AnalysisContext of the run
        defuse: DefUseExtractor
        dominators: DominatorAnalyzer
        postdominators: PostDominatorAnalyzer
        reaching: ReachingDefinitions
        classifier: DependencyClassifier
        loops: LoopAnalyzer, or None if loop tracking is disabled
        result: DependencyResult with data, control and loop dependencies
    """
    __slots__ = (
        "graph",
        "context",
        "defuse",
        "dominators",
        "postdominators",
        "reaching",
        "classifier",
        "loops",
        "result",
    )

    def __init__(self, graph, context):
        self.graph = graph
        self.context = context
        self.defuse = None
        self.dominators = None
        self.postdominators = None
        self.reaching = None
        self.classifier = None
        self.loops = None
        self.result = DependencyResult()

    @property
    def diagnostics(self):
        return self.context.diagnostics

    @property
    def degraded(self):
        return self.context.diagnostics.degraded

    def dependencies_for(self, stmt):
        self.graph.index(stmt)
        return self.result.dependencies_for(stmt)

    def __repr__(self):
        return "AnalysisRun(%r, %r, %s)" % (
            self.graph,
            self.result,
            self.context.diagnostics.statusString(),
        )


class DependencyAnalyzer(object):
    """Runs every analysis over one statement graph.

    Usage:
        run = DependencyAnalyzer(graph).analyze()
        for dep in run.result.of_kind(DependencyKind.RAW):
            ...
    """

    def __init__(self, graph, context=None):
        self.graph = graph
        self.context = context if context is not None else AnalysisContext()

    def analyze(self):
        """
        Run the pipeline.

        The context's diagnostics and statistics are reset first, so a
        context can be reused for several runs but only describes the last.

        Returns:
            AnalysisRun
        """
        graph = self.graph
        context = self.context
        context.reset()

        run = AnalysisRun(graph, context)
        stats = context.stats

        with context.phase("defuse"):
            run.defuse = DefUseExtractor(graph).process()
            stats["defuse"]["statements"] = len(graph)
            stats["defuse"]["variables"] = len(run.defuse.variables())

        with context.phase("dominators"):
            run.dominators = DominatorAnalyzer(graph, context)
            stats["dominators"]["iterations"] = run.dominators.iterations

        with context.phase("post-dominators"):
            run.postdominators = PostDominatorAnalyzer(graph, context)
            stats["post-dominators"]["iterations"] = run.postdominators.iterations
            stats["post-dominators"]["exits"] = len(run.postdominators.exitIndices)

        with context.phase("reaching definitions"):
            run.reaching = ReachingDefinitions(graph, run.defuse, context)
            stats["reaching definitions"]["iterations"] = run.reaching.iterations

        with context.phase("dependencies"):
            run.classifier = DependencyClassifier(
                graph,
                run.defuse,
                run.reaching,
                run.dominators,
                run.postdominators,
                context,
            )
            run.classifier.classify(run.result)

        if context.config.track_loops:
            with context.phase("loops"):
                run.loops = LoopAnalyzer(
                    graph,
                    run.defuse,
                    run.reaching,
                    run.dominators,
                    context,
                )
                run.loops.analyzeLoopDependencies(run.result)
                stats["loops"]["loops"] = len(run.loops.loops)

        stats["dependencies"].update(run.result.stats())

        if context.diagnostics.degraded:
            LOG.warning(
                "analysis of %r finished with degraded confidence (%s)",
                graph,
                context.diagnostics.statusString(),
            )
        else:
            LOG.debug("analysis of %r finished", graph)

        return run


def analyze(graph, config=None, console=None):
    """Analyse ``graph`` with a fresh context and return the AnalysisRun."""
    context = AnalysisContext(config, console)
    return DependencyAnalyzer(graph, context).analyze()
