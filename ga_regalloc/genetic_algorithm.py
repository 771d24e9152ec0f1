"""
Generational orchestrator for the register allocation GA.

Owns the population and its staging areas and drives one generation as
select -> cross -> mutate -> accept -> reduce. How many generations to run
is decided by the caller.
"""

from typing import List, Optional, Tuple

import numpy as np

from interference.conflict_graph import ConflictGraph
from .builder import ChromosomeBuilder
from .crossover import EvaluationMatrix, cross
from .data_models import Chromosome
from .mutation import mutate
from .selection import select_elite, select_ranked

Ratio = Tuple[int, int]


def validate_ratio(ratio: Ratio, name: str) -> Ratio:
    """
    Check a probability given as a (numerator, denominator) pair.

    Raises:
        ValueError: If the pair is not a probability in [0, 1]
    """
    try:
        numerator, denominator = (int(value) for value in ratio)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a (numerator, denominator) pair, got {ratio!r}")

    if denominator <= 0 or numerator < 0 or numerator > denominator:
        raise ValueError(f"{name} must satisfy 0 <= numerator <= denominator, got {ratio!r}")

    return numerator, denominator


def gen_ratio(rng: np.random.Generator, ratio: Ratio) -> bool:
    """Return True with probability numerator / denominator"""
    numerator, denominator = ratio
    return int(rng.integers(0, denominator)) < numerator


class GeneticAlgorithm:
    """
    Population state machine for one run.

    Attributes:
        population: Live population
        selection_pool: Chromosomes chosen for reproduction this generation
        next_gen: Offspring produced this generation
        graph: Shared conflict graph
        eval_matrix: Crossover repair weights built from graph
    """

    def __init__(
        self,
        graph: ConflictGraph,
        builder: ChromosomeBuilder,
        mutation_ratio: Ratio,
        cross_ratio: Ratio,
        rng: np.random.Generator
    ):
        self.population: List[Chromosome] = []
        self.selection_pool: List[Chromosome] = []
        self.next_gen: List[Chromosome] = []

        self.graph = graph
        self.eval_matrix = EvaluationMatrix(graph)
        self.builder = builder

        self.mutation_ratio = validate_ratio(mutation_ratio, "mutation_ratio")
        self.cross_ratio = validate_ratio(cross_ratio, "cross_ratio")
        self.rng = rng

    def gen(self, population_size: int) -> None:
        """Replace the population with freshly built random chromosomes"""
        self.population = [self.builder.build_random() for _ in range(population_size)]

    def select(self, target_size: int) -> None:
        self.selection_pool = select_ranked(self.population, target_size, self.rng)

    def cross(self) -> None:
        """Pair each pool member, with cross_ratio probability, with a random pool member"""
        if not self.selection_pool:
            return

        pool_size = len(self.selection_pool)
        self.next_gen.clear()

        for parent_a in self.selection_pool:
            if gen_ratio(self.rng, self.cross_ratio):
                parent_b = self.selection_pool[int(self.rng.integers(0, pool_size))]
                self.next_gen.extend(cross(parent_a, parent_b, self.eval_matrix, self.rng))

        self.selection_pool.clear()

    def mutate(self) -> None:
        for chromosome in self.next_gen:
            if gen_ratio(self.rng, self.mutation_ratio):
                mutate(chromosome, self.rng)

    def accept(self) -> None:
        self.population.extend(self.next_gen)
        self.next_gen = []

    def reduce(self, target_size: int) -> None:
        self.population = select_elite(self.population, target_size)

    def step(self, selection_size: int, population_size: int) -> None:
        """Run one full generation cycle"""
        self.select(selection_size)
        self.cross()
        self.mutate()
        self.accept()
        self.reduce(population_size)

    def pick_winner(self) -> Optional[Chromosome]:
        """Population member with the fewest colors, or None if empty"""
        if not self.population:
            return None
        return min(self.population, key=lambda chromosome: chromosome.phene)
