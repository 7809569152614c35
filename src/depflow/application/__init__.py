"""
depflow Application Layer.

**Core Components:**

1. **Configuration** (`config.py`): `AnalysisConfig`, the settings of a run
2. **Context** (`context.py`): `AnalysisContext`, config + console +
   diagnostics + statistics shared by the analyses of one run
3. **Diagnostics** (`diagnostics.py`): degraded-confidence record
4. **Errors** (`errors.py`): exception taxonomy
5. **Pipeline** (`pipeline.py`): `DependencyAnalyzer`, which runs
   def/use -> dominators -> post-dominators -> reaching definitions ->
   dependencies -> loops and returns an `AnalysisRun`
"""
