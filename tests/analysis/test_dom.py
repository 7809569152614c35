"""
Tests for dominator and post-dominator analysis.

This module tests:
- Dominance reflexivity, antisymmetry and entry dominance
- Immediate dominators and the dominator tree
- Post-dominance and its duality with dominance on the reversed graph
- Entry/exit fallbacks, the virtual exit and unreachable statements
- Non-convergence under a tiny iteration cap
"""

import unittest

import programs

from depflow.analysis.cfg import StmtGraph
from depflow.analysis.dom import DominatorAnalyzer, PostDominatorAnalyzer
from depflow.application.config import AnalysisConfig
from depflow.application.context import AnalysisContext
from depflow.application.errors import UnknownStatementError
from depflow.language import ir

FIXTURES = [
    programs.straight_line,
    programs.branch,
    programs.diamond,
    programs.for_loop,
    programs.nested_loops,
    programs.switch,
]


class TestDominators(unittest.TestCase):
    def test_reflexive_and_antisymmetric(self):
        for fixture in FIXTURES:
            graph = fixture().graph
            dom = DominatorAnalyzer(graph)
            for a in graph:
                self.assertTrue(dom.dominates(a, a))
                for b in graph:
                    if a is not b:
                        self.assertFalse(
                            dom.dominates(a, b) and dom.dominates(b, a),
                            "%s: %r and %r dominate each other" % (fixture.__name__, a, b),
                        )

    def test_entry_dominates_everything(self):
        for fixture in FIXTURES:
            graph = fixture().graph
            dom = DominatorAnalyzer(graph)
            self.assertIs(dom.entry, graph.statement(0))
            for stmt in graph:
                self.assertTrue(dom.dominates(dom.entry, stmt))

    def test_diamond(self):
        prog = programs.diamond()
        dom = DominatorAnalyzer(prog.graph)
        self.assertIs(dom.entry, prog["param"])
        self.assertIsNone(dom.immediate_dominator(prog["param"]))
        self.assertIs(dom.immediate_dominator(prog["then"]), prog["if"])
        self.assertIs(dom.immediate_dominator(prog["else"]), prog["if"])
        self.assertIs(dom.immediate_dominator(prog["join"]), prog["if"])
        self.assertIs(dom.immediate_dominator(prog["goto"]), prog["then"])
        self.assertEqual(dom.dominators(prog["join"]), {prog["param"], prog["if"], prog["join"]})
        self.assertFalse(dom.dominates(prog["then"], prog["join"]))

    def test_tree(self):
        prog = programs.diamond()
        dom = DominatorAnalyzer(prog.graph)
        self.assertEqual(dom.children(prog["if"]), [prog["then"], prog["else"], prog["join"]])
        self.assertEqual(dom.children(prog["join"]), [])
        tree = dom.tree()
        self.assertIs(tree[prog["goto"]], prog["then"])
        self.assertIsNone(tree[prog["param"]])

    def test_loop(self):
        prog = programs.for_loop()
        dom = DominatorAnalyzer(prog.graph)
        self.assertTrue(dom.dominates(prog["cond"], prog["inc"]))
        self.assertFalse(dom.dominates(prog["body"], prog["cond"]))
        self.assertIs(dom.immediate_dominator(prog["cond"]), prog["zero"])
        self.assertIs(dom.immediate_dominator(prog["exit"]), prog["cond"])
        self.assertTrue(dom.converged)
        self.assertGreaterEqual(dom.iterations, 1)

    def test_entry_fallback(self):
        prog = programs.cycle()
        context = AnalysisContext()
        dom = DominatorAnalyzer(prog.graph, context)
        self.assertIs(dom.entry, prog["a"])
        self.assertTrue(dom.dominates(prog["a"], prog["b"]))
        self.assertTrue(context.diagnostics.entry_fallback)
        self.assertTrue(context.diagnostics.degraded)

    def test_unreachable(self):
        prog = programs.dead_code()
        context = AnalysisContext()
        dom = DominatorAnalyzer(prog.graph, context)
        self.assertEqual(dom.dominators(prog["dead"]), {prog["dead"]})
        self.assertIsNone(dom.immediate_dominator(prog["dead"]))
        self.assertFalse(dom.dominates(prog["def"], prog["dead"]))
        self.assertEqual(context.diagnostics.unreachable, [prog["dead"]])

    def test_not_converged(self):
        prog = programs.for_loop()
        context = AnalysisContext(AnalysisConfig(max_iterations=1))
        with self.assertLogs("depflow", level="WARNING") as logs:
            dom = DominatorAnalyzer(prog.graph, context)
        self.assertFalse(dom.converged)
        self.assertEqual(len([line for line in logs.output if "fixpoint" in line]), 1)
        self.assertIn("dominators", context.diagnostics.unconverged)
        # The approximation is still reflexive.
        for stmt in prog.graph:
            self.assertTrue(dom.dominates(stmt, stmt))

    def test_unknown_statement(self):
        prog = programs.straight_line()
        dom = DominatorAnalyzer(prog.graph)
        with self.assertRaises(UnknownStatementError):
            dom.dominates(ir.NopStmt(), prog["def"])

    def test_empty_graph(self):
        dom = DominatorAnalyzer(StmtGraph([]))
        self.assertIsNone(dom.entry)


class TestPostDominators(unittest.TestCase):
    def test_diamond(self):
        prog = programs.diamond()
        pdom = PostDominatorAnalyzer(prog.graph)
        self.assertIs(pdom.exit, prog["join"])
        self.assertEqual(pdom.exits, [prog["join"]])
        self.assertTrue(pdom.post_dominates(prog["join"], prog["if"]))
        self.assertFalse(pdom.post_dominates(prog["then"], prog["if"]))
        self.assertIs(pdom.immediate_post_dominator(prog["if"]), prog["join"])
        self.assertIs(pdom.immediate_post_dominator(prog["then"]), prog["goto"])
        self.assertIsNone(pdom.immediate_post_dominator(prog["join"]))

    def test_branch(self):
        prog = programs.branch()
        pdom = PostDominatorAnalyzer(prog.graph)
        self.assertTrue(pdom.post_dominates(prog["join"], prog["if"]))
        self.assertFalse(pdom.post_dominates(prog["then"], prog["if"]))
        self.assertEqual(pdom.post_dominators(prog["if"]), {prog["if"], prog["join"], prog["ret"]})

    def test_duality(self):
        """Post-dominance equals dominance on the reversed graph."""
        for fixture in (programs.branch, programs.diamond, programs.for_loop, programs.nested_loops):
            graph = fixture().graph
            pdom = PostDominatorAnalyzer(graph)
            dom = DominatorAnalyzer(graph.reversed())
            self.assertIs(dom.entry, pdom.exit)
            for a in graph:
                for b in graph:
                    self.assertEqual(pdom.post_dominates(a, b), dom.dominates(a, b))

    def test_virtual_exit(self):
        prog = programs.multiple_exits()
        context = AnalysisContext()
        pdom = PostDominatorAnalyzer(prog.graph, context)
        self.assertIsNone(pdom.exit)
        self.assertEqual(pdom.exits, [prog["one"], prog["two"]])
        self.assertEqual(pdom.post_dominators(prog["if"]), {prog["if"]})
        self.assertIsNone(pdom.immediate_post_dominator(prog["if"]))
        self.assertIsNone(pdom.immediate_post_dominator(prog["one"]))
        self.assertFalse(pdom.post_dominates(prog["one"], prog["if"]))
        self.assertTrue(context.diagnostics.synthetic_exit)
        self.assertFalse(context.diagnostics.degraded)

    def test_first_exit_without_virtual_exit(self):
        prog = programs.multiple_exits()
        context = AnalysisContext(AnalysisConfig(synthetic_exit=False))
        pdom = PostDominatorAnalyzer(prog.graph, context)
        self.assertIs(pdom.exit, prog["one"])
        self.assertTrue(pdom.post_dominates(prog["one"], prog["if"]))
        self.assertTrue(context.diagnostics.ambiguous_exit)
        self.assertTrue(context.diagnostics.degraded)

    def test_exit_fallback(self):
        prog = programs.cycle()
        context = AnalysisContext()
        pdom = PostDominatorAnalyzer(prog.graph, context)
        self.assertIs(pdom.exit, prog["b"])
        self.assertTrue(pdom.post_dominates(prog["b"], prog["a"]))
        self.assertTrue(context.diagnostics.exit_fallback)

    def test_statements_without_exit_path(self):
        """An endless loop off a branch never reaches the exit."""
        p = ir.IdentityStmt(ir.Local("p"), ir.ParameterRef(0), label="p")
        br = ir.IfStmt(ir.BinaryOp(">", ir.Local("p"), ir.Constant(0)), label="br")
        spin = ir.AssignStmt(ir.Local("x"), ir.BinaryOp("+", ir.Local("x"), ir.Constant(1)), label="spin")
        back = ir.GotoStmt(label="back")
        ret = ir.ReturnStmt(label="ret")
        graph = StmtGraph(
            [p, br, spin, back, ret],
            [(p, br), (br, spin), (br, ret), (spin, back), (back, spin)],
        )
        context = AnalysisContext()
        pdom = PostDominatorAnalyzer(graph, context)

        self.assertIs(pdom.exit, ret)
        self.assertEqual(pdom.post_dominators(spin), {spin})
        self.assertEqual(context.diagnostics.no_exit_path, [spin, back])
        self.assertTrue(context.diagnostics.degraded)
        self.assertEqual(context.diagnostics.warnings[-1][0], "no-exit-path")

    def test_loop(self):
        prog = programs.for_loop()
        pdom = PostDominatorAnalyzer(prog.graph)
        self.assertTrue(pdom.post_dominates(prog["cond"], prog["body"]))
        self.assertTrue(pdom.post_dominates(prog["exit"], prog["init"]))
        self.assertFalse(pdom.post_dominates(prog["body"], prog["cond"]))
        self.assertIs(pdom.immediate_post_dominator(prog["cond"]), prog["exit"])


if __name__ == "__main__":
    unittest.main()
