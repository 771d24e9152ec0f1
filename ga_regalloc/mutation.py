"""
Mutation operator: locus swap.
"""

import numpy as np

from .data_models import Chromosome


def mutate(chromosome: Chromosome, rng: np.random.Generator) -> Chromosome:
    """
    Swap the genes at two uniformly drawn loci, in place.

    The loci may coincide, in which case the gene is unchanged but the
    decode cache is still invalidated.

    Args:
        chromosome: Chromosome to mutate
        rng: Random number generator

    Returns:
        The same chromosome, for chaining
    """
    size = len(chromosome)
    locus_a = int(rng.integers(0, size))
    locus_b = int(rng.integers(0, size))

    chromosome.swap_genes(locus_a, locus_b)
    return chromosome
