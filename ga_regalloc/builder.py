"""
Chromosome builder: degree-stratified random initial orders.
"""

from typing import List

import numpy as np

from interference.conflict_graph import ConflictGraph
from interference.lifetime import VarId
from .data_models import Chromosome, ChromosomeContractError


class ChromosomeBuilder:
    """
    Produces random chromosomes biased towards coloring low-degree vertices first.

    Vertices are split at the median degree: strictly lower degrees form the
    low block, the median and above form the high block. Each block is
    shuffled independently and the low block is placed first.

    Args:
        graph: Shared conflict graph
        rng: Random number generator

    Raises:
        ChromosomeContractError: If the graph has no vertices
    """

    def __init__(self, graph: ConflictGraph, rng: np.random.Generator):
        if len(graph) == 0:
            raise ChromosomeContractError("cannot build chromosomes over an empty graph")

        self.graph = graph
        self.rng = rng

        degrees = sorted(graph.degree(var_id) for var_id in graph)
        self.median_degree = degrees[len(degrees) // 2]

        self.low_degree_ids: List[VarId] = [
            var_id for var_id in graph if graph.degree(var_id) < self.median_degree
        ]
        self.high_degree_ids: List[VarId] = [
            var_id for var_id in graph if graph.degree(var_id) >= self.median_degree
        ]

    def _shuffled(self, ids: List[VarId]) -> List[VarId]:
        return [ids[idx] for idx in self.rng.permutation(len(ids))]

    def build_random(self) -> Chromosome:
        """Shuffle both degree blocks and decode the concatenated order"""
        gene = self._shuffled(self.low_degree_ids) + self._shuffled(self.high_degree_ids)
        chromosome = Chromosome(gene, self.graph)
        chromosome.evaluate()
        return chromosome
