"""
Conflict Graph Builder

Turns a set of variable lifetimes into an undirected interference graph:
two variables are adjacent when their lifetimes overlap and therefore
cannot share a register.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Mapping, Union

import numpy as np

from .lifetime import Lifetime, LifetimeTable, VarId


@dataclass(frozen=True)
class GraphNode:
    """Degree and adjacency set of one vertex"""
    degree: int
    adjacency: FrozenSet[VarId]

    def is_adjacent(self, var_id: VarId) -> bool:
        return var_id in self.adjacency


class ConflictGraph:
    """
    Immutable conflict graph keyed by variable id.

    One instance is shared by every chromosome of a run; nothing mutates it
    after construction.
    """

    def __init__(self, nodes: Dict[VarId, GraphNode]):
        self._nodes = dict(nodes)

    @classmethod
    def build(cls, lifetimes: Union[Mapping[VarId, Lifetime], LifetimeTable]) -> 'ConflictGraph':
        """
        Build the graph with an O(V^2) pairwise overlap scan.

        Every overlapping pair is recorded on both endpoints, so adjacency is
        symmetric regardless of argument order inside overlap().

        Args:
            lifetimes: Mapping VarId -> Lifetime, or a LifetimeTable

        Returns:
            ConflictGraph over all given variables
        """
        if isinstance(lifetimes, LifetimeTable):
            lifetimes = lifetimes.lifetimes

        ids = list(lifetimes.keys())
        adjacency: Dict[VarId, set] = {var_id: set() for var_id in ids}

        for i, id_a in enumerate(ids):
            for id_b in ids[i + 1:]:
                if lifetimes[id_a].overlap(lifetimes[id_b]):
                    adjacency[id_a].add(id_b)
                    adjacency[id_b].add(id_a)

        return cls({
            var_id: GraphNode(degree=len(adj), adjacency=frozenset(adj))
            for var_id, adj in adjacency.items()
        })

    @property
    def nodes(self) -> Dict[VarId, GraphNode]:
        return dict(self._nodes)

    def vertices(self) -> List[VarId]:
        """Vertex ids in construction order"""
        return list(self._nodes.keys())

    def degree(self, var_id: VarId) -> int:
        return self._nodes[var_id].degree

    def adjacency(self, var_id: VarId) -> FrozenSet[VarId]:
        return self._nodes[var_id].adjacency

    def is_adjacent(self, id_a: VarId, id_b: VarId) -> bool:
        return self._nodes[id_a].is_adjacent(id_b)

    def edges(self) -> List[tuple]:
        """Each undirected edge once, ordered by vertex construction order"""
        order = {var_id: idx for idx, var_id in enumerate(self._nodes)}
        return [
            (id_a, id_b)
            for id_a, node in self._nodes.items()
            for id_b in sorted(node.adjacency, key=order.__getitem__)
            if order[id_a] < order[id_b]
        ]

    def adjacency_matrix(self) -> np.ndarray:
        """Boolean adjacency matrix indexed by vertices() order"""
        index = {var_id: idx for idx, var_id in enumerate(self._nodes)}
        matrix = np.zeros((len(index), len(index)), dtype=bool)
        for var_id, node in self._nodes.items():
            for neighbour in node.adjacency:
                matrix[index[var_id], index[neighbour]] = True
        return matrix

    def degree_vector(self) -> np.ndarray:
        """Vertex degrees indexed by vertices() order"""
        return np.array([node.degree for node in self._nodes.values()], dtype=np.int64)

    def __contains__(self, var_id: VarId) -> bool:
        return var_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes)
