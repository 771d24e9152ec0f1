"""
Selection operators: rank-based roulette for reproduction and elitist
truncation for survival.
"""

from typing import List

import numpy as np

from .data_models import Chromosome


def select_ranked(
    population: List[Chromosome],
    target_size: int,
    rng: np.random.Generator
) -> List[Chromosome]:
    """
    Draw a selection pool by rank-based roulette, with replacement.

    The population is sorted worst first (descending phene) and the k-th
    position gets weight k, so the best chromosome owns the widest slice of
    the wheel [0, n(n+1)/2).

    Args:
        population: Current population
        target_size: Number of draws (capped at the population size)
        rng: Random number generator

    Returns:
        Copies of the drawn chromosomes
    """
    if not population:
        return []
    if len(population) == 1:
        return [population[0].copy()]

    ranking = sorted(population, key=lambda chromosome: chromosome.phene, reverse=True)

    weights = np.arange(1, len(ranking) + 1)
    upper_limits = np.cumsum(weights)
    total = int(upper_limits[-1])

    pool = []
    for _ in range(min(target_size, len(ranking))):
        selector = rng.integers(0, total)
        bucket = int(np.searchsorted(upper_limits, selector, side='right'))
        pool.append(ranking[bucket].copy())

    return pool


def select_elite(population: List[Chromosome], target_size: int) -> List[Chromosome]:
    """
    Keep the target_size chromosomes with the lowest phene.

    Ties keep population order. The retained maximum phene never exceeds the
    discarded minimum phene.
    """
    if not population:
        return []
    if len(population) == 1:
        return [population[0]]

    ranking = sorted(population, key=lambda chromosome: chromosome.phene)
    return ranking[:min(target_size, len(ranking))]
