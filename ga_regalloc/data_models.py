"""
Data models for the register allocation GA.

A chromosome is a visitation order over every conflict-graph vertex. Its
fitness (phene) is the number of colors produced by a single greedy pass
over that order.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from interference.conflict_graph import ConflictGraph
from interference.lifetime import VarId

Color = int


class ChromosomeContractError(RuntimeError):
    """Raised when operators are composed with broken population invariants."""
    pass


def decode(gene: Sequence[VarId], graph: ConflictGraph) -> Tuple[int, Dict[VarId, Color]]:
    """
    Turn a gene into a proper coloring with one monotonic color counter.

    Each vertex receives the current frontier color, bumped by one first if
    an already colored neighbour holds it. The counter never moves back, so
    a color value is never reused once passed.

    Args:
        gene: Visitation order over the graph vertices
        graph: Conflict graph the gene is ordered over

    Returns:
        Tuple of (color_count, coloring)

    Raises:
        ChromosomeContractError: If the gene is empty
    """
    if not gene:
        raise ChromosomeContractError("cannot decode an empty gene")

    coloring: Dict[VarId, Color] = {}
    current_color = 0

    for var_id in gene:
        neighbour_colors = {
            coloring[adj_id]
            for adj_id in graph.adjacency(var_id)
            if adj_id in coloring
        }
        if current_color in neighbour_colors:
            current_color += 1
        coloring[var_id] = current_color

    return current_color + 1, coloring


class Chromosome:
    """
    One candidate visitation order with a lazily decoded fitness.

    The decode cache is either stale (phene and coloring unknown) or decoded;
    any gene change makes it stale and the next phene/coloring read decodes
    again. The graph is shared, never copied.

    Attributes:
        graph: Shared conflict graph
    """

    def __init__(self, gene: Sequence[VarId], graph: ConflictGraph):
        gene = list(gene)
        if len(gene) != len(graph) or set(gene) != set(graph):
            raise ChromosomeContractError(
                f"gene is not a permutation of the {len(graph)} graph vertices"
            )

        self._gene: List[VarId] = gene
        self.graph = graph
        self._phene: Optional[int] = None
        self._coloring: Optional[Dict[VarId, Color]] = None

    @property
    def gene(self) -> Tuple[VarId, ...]:
        return tuple(self._gene)

    @property
    def is_decoded(self) -> bool:
        return self._phene is not None

    @property
    def phene(self) -> int:
        """Color count of the decoded gene, lower is better"""
        return self.evaluate()

    @property
    def coloring(self) -> Dict[VarId, Color]:
        self.evaluate()
        return dict(self._coloring)

    def evaluate(self) -> int:
        """Decode if stale and return the phene"""
        if self._phene is None:
            self._phene, self._coloring = decode(self._gene, self.graph)
        return self._phene

    def _invalidate(self) -> None:
        self._phene = None
        self._coloring = None

    def swap_genes(self, locus_a: int, locus_b: int) -> None:
        """
        Swap the genes at two loci.

        Raises:
            ChromosomeContractError: If either locus is outside [0, len)
        """
        size = len(self._gene)
        if not (0 <= locus_a < size and 0 <= locus_b < size):
            raise ChromosomeContractError(
                f"locus ({locus_a}, {locus_b}) is out of bounds of chromosome of size {size}"
            )

        self._gene[locus_a], self._gene[locus_b] = self._gene[locus_b], self._gene[locus_a]
        self._invalidate()

    def copy(self) -> 'Chromosome':
        """Copy with its own gene, sharing the graph and the decode cache state"""
        clone = Chromosome.__new__(Chromosome)
        clone._gene = list(self._gene)
        clone.graph = self.graph
        clone._phene = self._phene
        clone._coloring = dict(self._coloring) if self._coloring is not None else None
        return clone

    def __len__(self) -> int:
        return len(self._gene)

    def __repr__(self) -> str:
        phene = self._phene if self._phene is not None else "stale"
        return f"Chromosome(gene={self._gene}, phene={phene})"
