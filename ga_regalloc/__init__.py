"""
Genetic Register Allocation

This package searches for low-register colorings of a variable conflict
graph. A chromosome encodes a visitation order of the variables; a greedy
single-pass decoder turns the order into a coloring whose color count is
the fitness to minimize.

Modules:
- data_models: Chromosome and the greedy decoder
- builder: Degree-stratified random chromosome builder
- selection: Rank-based roulette and elitist truncation
- crossover: Order crossover with evaluation-matrix repair
- mutation: Locus swap mutation
- genetic_algorithm: Generational orchestrator
- io_utils: Lifetime CSV loading, result export
- orchestration: Complete run driver
- cli: Run configuration loading and validation
"""

__version__ = "0.1.0"

from .data_models import Chromosome, ChromosomeContractError, decode
from .builder import ChromosomeBuilder
from .genetic_algorithm import GeneticAlgorithm

__all__ = [
    "Chromosome",
    "ChromosomeContractError",
    "decode",
    "ChromosomeBuilder",
    "GeneticAlgorithm",
]
