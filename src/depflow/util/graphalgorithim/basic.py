"""
Basic graph operations for directed graphs.

Graphs are represented as a dictionary mapping each node to an iterable of
successor nodes, or as a list whose positions are the nodes. Nodes that only
appear as successors are still nodes of the graph.
"""


def _items(G):
    if isinstance(G, dict):
        return G.items()
    return enumerate(G)


def reverseDirectedGraph(G):
    """
    Reverse the direction of all edges in a directed graph.

    Parameters
    ----------
    G : dict or list
        Directed graph mapping nodes to iterables of successor nodes.

    Returns
    -------
    dict
        A new graph mapping every node of G (including nodes without
        predecessors) to the list of its predecessors.

    Examples
    --------
    >>> reverseDirectedGraph({1: [2, 3], 2: [3], 3: []})
    {1: [], 2: [1], 3: [1, 2]}
    """
    out = {}
    for node, nexts in _items(G):
        out.setdefault(node, [])
        for next in nexts:
            if next not in out:
                out[next] = [node]
            else:
                out[next].append(node)
    return out


def findEntryPoints(G):
    """
    Find all nodes with no incoming edges, in iteration order of G.

    Examples
    --------
    >>> findEntryPoints({1: [2, 3], 2: [3], 3: []})
    [1]
    >>> findEntryPoints({1: [2], 2: [1]})
    []
    """
    targets = set()
    for _node, nexts in _items(G):
        targets.update(nexts)
    return [node for node, _nexts in _items(G) if node not in targets]


def findExitPoints(G):
    """
    Find all nodes with no outgoing edges, in iteration order of G.

    Examples
    --------
    >>> findExitPoints({1: [2, 3], 2: [3], 3: []})
    [3]
    """
    return [node for node, nexts in _items(G) if not nexts]
