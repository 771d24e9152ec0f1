"""
Shared graphs for GA tests.
"""

from interference.conflict_graph import ConflictGraph
from interference.lifetime import LifetimeTable


def path_graph() -> ConflictGraph:
    """A(0,2), B(1,3), C(3,5), D(4,4): edges A-B, B-C, C-D"""
    return ConflictGraph.build(LifetimeTable.from_mapping(
        5, {"A": (0, 2), "B": (1, 3), "C": (3, 5), "D": (4, 4)}
    ))


def kernel_graph() -> ConflictGraph:
    """Sixteen overlapping lifetimes of an unrolled loop body"""
    return ConflictGraph.build(LifetimeTable.from_mapping(12, {
        "i": (0, 12), "x0": (1, 3), "y0": (1, 3), "p0": (3, 5),
        "x1": (2, 5), "y1": (2, 5), "p1": (5, 7), "s0": (5, 8),
        "x2": (4, 7), "y2": (4, 7), "p2": (7, 9), "s1": (8, 10),
        "x3": (6, 9), "y3": (6, 9), "p3": (9, 11), "sum": (10, 12),
    }))


def assert_proper_coloring(test, graph, coloring):
    test.assertEqual(set(coloring), set(graph))
    for id_a, id_b in graph.edges():
        test.assertNotEqual(coloring[id_a], coloring[id_b], f"{id_a}-{id_b} share a color")


def assert_permutation(test, graph, gene):
    test.assertEqual(len(gene), len(graph))
    test.assertEqual(sorted(map(str, gene)), sorted(map(str, graph)))
