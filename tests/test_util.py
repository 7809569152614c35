import unittest

from depflow.util.typedispatch import *
from depflow.util.graphalgorithim import basic
from depflow.util.graphalgorithim.dominator import (
    ReversePostorderCrawler,
    dominatorSets,
    immediateDominator,
)
from depflow.util.io.formatting import elapsedTime


class TestTypeDisbatch(unittest.TestCase):
    def testTD(self):
        def visitNumber(self, node):
            return "number"

        def visitDefault(self, node):
            return "default"

        class FooBar(TypeDispatcher):
            num = dispatch(int)(visitNumber)
            default = defaultdispatch(visitDefault)

        self.assertEqual(FooBar.__dict__["num"], visitNumber)
        self.assertEqual(FooBar.__dict__["default"], visitDefault)

        foo = FooBar()

        self.assertEqual(foo(1), "number")
        self.assertEqual(foo(2**70), "number")
        self.assertEqual(foo(1.0), "default")
        # bool finds the int handler through its MRO
        self.assertEqual(foo(True), "number")

    def testSharedHandler(self):
        class Kind(TypeDispatcher):
            @dispatch(int, (float, complex))
            def visitNumber(self, node):
                return "number"

            @dispatch(str)
            def visitString(self, node):
                return "string"

        kind = Kind()
        self.assertEqual(kind(1.5), "number")
        self.assertEqual(kind(1j), "number")
        self.assertEqual(kind("x"), "string")

    def testNoDefault(self):
        class Strict(TypeDispatcher):
            @dispatch(int)
            def visitInt(self, node):
                return node

        with self.assertRaises(TypeDispatchError):
            Strict()("x")

    def testDuplicateHandler(self):
        with self.assertRaises(TypeDispatchDeclarationError):

            class Twice(TypeDispatcher):
                @dispatch(int)
                def visitA(self, node):
                    pass

                @dispatch(int)
                def visitB(self, node):
                    pass

    def testNotAType(self):
        with self.assertRaises(TypeDispatchDeclarationError):
            dispatch(1)(lambda self, node: node)


class TestGraphAlgorithms(unittest.TestCase):
    def setUp(self):
        self.G = {1: [2, 3], 2: [4], 3: [4], 4: []}

    def testReverse(self):
        self.assertEqual(
            basic.reverseDirectedGraph(self.G),
            {1: [], 2: [1], 3: [1], 4: [2, 3]},
        )
        self.assertEqual(basic.reverseDirectedGraph([[1], [0, 2], []]), {0: [1], 1: [0], 2: [1]})

    def testEntryAndExitPoints(self):
        self.assertEqual(basic.findEntryPoints(self.G), [1])
        self.assertEqual(basic.findExitPoints(self.G), [4])
        self.assertEqual(basic.findEntryPoints({1: [2], 2: [1]}), [])

    def testReversePostorder(self):
        self.assertEqual(ReversePostorderCrawler(self.G, 1).order, [1, 3, 2, 4])
        self.assertEqual(ReversePostorderCrawler(self.G, 2).order, [2, 4])

    def testDeepChain(self):
        n = 5000
        G = [[i + 1] for i in range(n - 1)] + [[]]
        order = ReversePostorderCrawler(G, 0).order
        self.assertEqual(order, list(range(n)))

    def testDominatorSets(self):
        solution = dominatorSets(self.G, 1, 100)
        self.assertTrue(solution.converged)
        self.assertEqual(solution.doms[4], {1, 4})
        self.assertEqual(solution.doms[2], {1, 2})
        self.assertEqual(solution.idoms, {1: None, 2: 1, 3: 1, 4: 1})
        self.assertEqual(solution.unreached, [])

    def testUnreached(self):
        G = {0: [1], 1: [], 2: [1]}
        solution = dominatorSets(G, 0, 100)
        self.assertEqual(solution.unreached, [2])
        self.assertNotIn(2, solution.doms)
        self.assertEqual(solution.doms[1], {0, 1})

    def testLoop(self):
        G = [[1], [2, 3], [1], []]
        solution = dominatorSets(G, 0, 100)
        self.assertEqual(solution.idoms, {0: None, 1: 0, 2: 1, 3: 1})
        self.assertEqual(immediateDominator(3, solution.doms), 1)


class TestFormatting(unittest.TestCase):
    def testElapsedTime(self):
        self.assertEqual(elapsedTime(0.05), "   50 ms")
        self.assertEqual(elapsedTime(125.5), "2.092 m")
        self.assertTrue(elapsedTime(2.5).endswith(" s"))
        self.assertTrue(elapsedTime(7200.0).endswith(" h"))


if __name__ == "__main__":
    unittest.main()
