"""
Dominator computation over directed graphs.

A node d dominates a node n if every path from the head to n passes through
d. The immediate dominator (idom) of n is the unique strict dominator of n
that is dominated by every other strict dominator of n.

The computation is the classic iterative data-flow formulation:

    dom(head) = {head}
    dom(n)    = {n} | intersection(dom(p) for p in preds(n))

evaluated in reverse post-order until a full pass changes nothing. Running it
on a reversed graph rooted at an exit yields post-dominators.
"""

from . import basic


class ReversePostorderCrawler(object):
    """
    Depth-first traversal producing a reverse post-order numbering.

    In reverse post-order every node (other than a loop header reached by a
    back edge) comes after all of its predecessors, which lets iterative
    dominance converge in few passes. Only nodes reachable from ``head`` are
    numbered; the rest are left in ``unreached``.
    """

    def __init__(self, G, head):
        """
        Parameters
        ----------
        G : dict or list
            Directed graph mapping nodes to iterables of successor nodes
        head : any
            The node to start traversal from
        """
        self.G = G
        self.head = head

        self.processed = set()
        self.order = []

        self(head)

        self.order.reverse()

    def successors(self, node):
        if isinstance(self.G, dict):
            return self.G.get(node, ())
        return self.G[node]

    def __call__(self, node):
        """
        Depth-first traversal from ``node`` using an explicit stack, so deep
        graphs do not hit Python's recursion limit.
        """
        if node in self.processed:
            return

        # Each stack entry is (node, iterator over its successors).
        self.processed.add(node)
        stack = [(node, iter(self.successors(node)))]
        while stack:
            _parent, children = stack[-1]
            try:
                child = next(children)
                if child not in self.processed:
                    self.processed.add(child)
                    stack.append((child, iter(self.successors(child))))
            except StopIteration:
                self.order.append(stack[-1][0])
                stack.pop()


class DominatorSolution(object):
    """
    Result of an iterative dominator computation.

    Attributes:
        head: The root node.
        doms: Mapping from each reachable node to its dominator set.
        idoms: Mapping from each reachable node to its immediate dominator
            (None for the head).
        order: Reachable nodes in reverse post-order.
        unreached: Nodes of the graph not reachable from the head.
        iterations: Number of full passes performed.
        converged: False if the iteration cap was hit before a fixpoint.
    """
    __slots__ = "head", "doms", "idoms", "order", "unreached", "iterations", "converged"

    def __init__(self, head):
        self.head = head
        self.doms = {}
        self.idoms = {}
        self.order = []
        self.unreached = []
        self.iterations = 0
        self.converged = True


def immediateDominator(node, doms):
    """
    Pick the closest strict dominator of ``node``.

    Strict dominators form a chain, so the closest one is the candidate
    whose own dominator set contains every other candidate. Candidates are
    scanned pairwise: a candidate replaces the current pick when its
    dominator set contains the pick.
    """
    best = None
    for candidate in sorted(doms[node] - {node}, key=_sortKey):
        if best is None or best in doms[candidate]:
            best = candidate
    return best


def _sortKey(node):
    # Deterministic scan order for integer and mixed node ids.
    return (0, node) if isinstance(node, int) else (1, repr(node))


def dominatorSets(G, head, maxIterations):
    """
    Compute dominator sets and immediate dominators by fixed-point iteration.

    Parameters
    ----------
    G : dict or list
        Directed graph mapping nodes to iterables of successor nodes
    head : any
        The entry point of the graph
    maxIterations : int
        Safety cap on the number of full passes

    Returns
    -------
    DominatorSolution
        Nodes unreachable from ``head`` are not part of ``doms``; callers
        decide how to present them. If the cap is hit, ``converged`` is
        False and the last approximation is returned.
    """
    solution = DominatorSolution(head)

    order = ReversePostorderCrawler(G, head).order
    reachable = set(order)
    solution.order = order

    if isinstance(G, dict):
        solution.unreached = [node for node in G if node not in reachable]
    else:
        solution.unreached = [node for node in range(len(G)) if node not in reachable]

    pred = basic.reverseDirectedGraph(G)

    doms = solution.doms
    for node in order:
        if node == head:
            doms[node] = {head}
        else:
            doms[node] = set(reachable)

    changed = True
    while changed:
        if solution.iterations >= maxIterations:
            solution.converged = False
            break

        changed = False
        solution.iterations += 1

        for node in order:
            if node == head:
                continue

            new = None
            for p in pred.get(node, ()):
                # Unreachable predecessors carry no path from the head.
                if p not in reachable:
                    continue
                if new is None:
                    new = set(doms[p])
                else:
                    new &= doms[p]

            if new is None:
                new = set()
            new.add(node)

            if new != doms[node]:
                doms[node] = new
                changed = True

    for node in order:
        if node == head:
            solution.idoms[node] = None
        else:
            solution.idoms[node] = immediateDominator(node, doms)

    return solution
