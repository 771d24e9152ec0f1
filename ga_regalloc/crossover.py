"""
Crossover operator for the register allocation GA.

Implements single-point order crossover: the child keeps the dominant
parent's head, passes through the recessive parent's tail genes that both
tails share, and repairs the remaining positions greedily so the child is
again a permutation of every vertex.
"""

from typing import Dict, List, Optional, Tuple

import numpy as np

from interference.conflict_graph import ConflictGraph
from interference.lifetime import VarId
from .data_models import Chromosome, ChromosomeContractError


class EvaluationMatrix:
    """
    Repair weights for every ordered pair of distinct vertices.

    w(a, b) = degree(a) + degree(b) + (N // 2 if a and b are adjacent else 0)

    Built once per graph and read-only afterwards.
    """

    def __init__(self, graph: ConflictGraph):
        self.graph = graph
        self.index: Dict[VarId, int] = {var_id: idx for idx, var_id in enumerate(graph.vertices())}

        degrees = graph.degree_vector()
        penalty = len(graph) // 2
        self.weights = (
            degrees[:, np.newaxis]
            + degrees[np.newaxis, :]
            + penalty * graph.adjacency_matrix().astype(np.int64)
        )

    def weight(self, id_a: VarId, id_b: VarId) -> int:
        if id_a == id_b:
            raise KeyError(f"no repair weight for a vertex paired with itself: {id_a}")
        return int(self.weights[self.index[id_a], self.index[id_b]])

    def __call__(self, id_a: VarId, id_b: VarId) -> int:
        return self.weight(id_a, id_b)


def recombine(
    dominant: Chromosome,
    recessive: Chromosome,
    cross_point: int,
    eval_matrix: EvaluationMatrix
) -> Chromosome:
    """
    Produce one child from a (dominant, recessive) parent pair.

    Args:
        dominant: Parent whose head is copied verbatim
        recessive: Parent whose tail order guides the child's tail
        cross_point: Head/tail split index
        eval_matrix: Repair weights

    Returns:
        Child chromosome sharing the parents' graph
    """
    graph = dominant.graph
    head = list(dominant.gene[:cross_point])
    dominant_tail = dominant.gene[cross_point:]
    recessive_tail = recessive.gene[cross_point:]

    recessive_tail_set = set(recessive_tail)
    tail_intersect = set(dominant_tail) & recessive_tail_set
    # keeps dominant tail order so ties resolve deterministically
    tail_diff = [var_id for var_id in dominant_tail if var_id not in recessive_tail_set]

    child_tail: List[Optional[VarId]] = [
        var_id if var_id in tail_intersect else None
        for var_id in recessive_tail
    ]

    previous_id: Optional[VarId] = None
    for locus, var_id in enumerate(child_tail):
        if var_id is not None:
            continue

        if previous_id is None:
            chosen = min(tail_diff, key=graph.degree)
        else:
            chosen = min(tail_diff, key=lambda candidate: eval_matrix(previous_id, candidate))

        tail_diff.remove(chosen)
        child_tail[locus] = chosen
        previous_id = chosen

    return Chromosome(head + child_tail, graph)


def cross(
    parent_a: Chromosome,
    parent_b: Chromosome,
    eval_matrix: EvaluationMatrix,
    rng: np.random.Generator
) -> Tuple[Chromosome, Chromosome]:
    """
    Cross two parents at one random point, producing two children.

    Args:
        parent_a: First parent
        parent_b: Second parent
        eval_matrix: Repair weights built from the shared graph
        rng: Random number generator

    Returns:
        Tuple of (child_ab, child_ba), decoded lazily

    Raises:
        ChromosomeContractError: If parents differ in length
    """
    if len(parent_a) != len(parent_b):
        raise ChromosomeContractError(
            f"crossing chromosomes with different size: {len(parent_a)} != {len(parent_b)}"
        )

    cross_point = int(rng.integers(0, len(parent_a)))

    return (
        recombine(parent_a, parent_b, cross_point, eval_matrix),
        recombine(parent_b, parent_a, cross_point, eval_matrix),
    )
