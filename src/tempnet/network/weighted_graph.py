"""
Directed weighted graphs for aggregate temporal network representations.

``WeightedGraph`` is used both for the first-order aggregate network (nodes
are node names, edge weights are two-path weights) and for the second-order
network (nodes are ``(source, target)`` edge tokens of the first-order
network, edges are observed two-paths).

The graph keeps successor and predecessor lists in insertion order, so that
matrix row and column indices derived from them are deterministic, and
memoizes the cumulative in/out weight of every vertex. Every mutating call
invalidates the memoized weights of the vertices it touches.
"""

from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple

import numpy as np

from ..common.exceptions import ValidationError, SamplingInvariantError
from ..common.logging_config import get_logger
from . import components

logger = get_logger(__name__)

Edge = Tuple[Hashable, Hashable]


class WeightedGraph:
    """
    Directed weighted graph with adjacency indices.

    A vertex exists if and only if it is the endpoint of at least one edge.
    The weight of an edge is the sum of all contributions ever added to the
    ordered pair.

    Parameters
    ----------
    seed : int, optional
        Seed of the graph's own random generator, used by the sampling
        methods when no generator is passed explicitly

    Examples
    --------
    >>> g = WeightedGraph(seed=42)
    >>> g.add_edge("a", "b", 2.0)
    >>> g.add_edge("a", "b", 0.5)
    >>> g.get_weight("a", "b")
    2.5
    >>> g.successors("a")
    ['b']
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._weights: Dict[Edge, float] = {}
        self._vertices: Dict[Hashable, None] = {}
        self._successors: Dict[Hashable, List[Hashable]] = {}
        self._predecessors: Dict[Hashable, List[Hashable]] = {}
        self._cumulative_in: Dict[Hashable, float] = {}
        self._cumulative_out: Dict[Hashable, float] = {}
        self._rng = np.random.default_rng(seed)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_edge(
        self,
        source: Hashable,
        target: Hashable,
        weight: float = 1.0,
        symmetric: bool = False
    ) -> None:
        """
        Add weight to the edge (source, target), creating it if necessary.

        Parameters
        ----------
        source, target : Hashable
            Endpoints of the edge
        weight : float, default 1.0
            Weight to add
        symmetric : bool, default False
            If True, the same weight is also added to (target, source)
        """
        self._increment(source, target, weight)
        if symmetric:
            self._increment(target, source, weight)

    def add_to_weight(self, source: Hashable, target: Hashable, added_weight: float = 1.0) -> None:
        """
        Change the weight of an edge by ``added_weight`` (which may be negative).

        An edge whose weight drops to exactly zero is removed.
        """
        self._increment(source, target, added_weight)
        if self._weights[(source, target)] == 0.0:
            self.remove_edge(source, target)

    def remove_edge(self, source: Hashable, target: Hashable) -> None:
        """
        Remove an edge and any endpoint left without edges.

        Raises
        ------
        ValidationError
            If the edge does not exist
        """
        edge = (source, target)
        if edge not in self._weights:
            raise ValidationError(
                f"Edge {edge} does not exist",
                field="edge",
                value=edge
            )
        del self._weights[edge]
        self._successors[source].remove(target)
        self._predecessors[target].remove(source)
        self._invalidate(source, target)

        for vertex in (source, target):
            if (vertex in self._vertices
                    and not self._successors.get(vertex)
                    and not self._predecessors.get(vertex)):
                del self._vertices[vertex]
                self._successors.pop(vertex, None)
                self._predecessors.pop(vertex, None)

    def _increment(self, source: Hashable, target: Hashable, weight: float) -> None:
        edge = (source, target)
        if edge in self._weights:
            self._weights[edge] += weight
        else:
            self._weights[edge] = weight
            self._vertices.setdefault(source, None)
            self._vertices.setdefault(target, None)
            self._successors.setdefault(source, []).append(target)
            self._predecessors.setdefault(target, []).append(source)
        self._invalidate(source, target)

    def _invalidate(self, source: Hashable, target: Hashable) -> None:
        self._cumulative_out.pop(source, None)
        self._cumulative_in.pop(target, None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def vertices(self) -> List[Hashable]:
        """All vertices in insertion order."""
        return list(self._vertices)

    @property
    def edges(self) -> List[Edge]:
        """All edges in insertion order."""
        return list(self._weights)

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def edge_count(self) -> int:
        return len(self._weights)

    @property
    def cumulative_weight(self) -> float:
        """Sum over all edge weights."""
        return float(sum(self._weights.values()))

    @property
    def max_weight(self) -> float:
        return max(self._weights.values()) if self._weights else 0.0

    @property
    def min_weight(self) -> float:
        return min(self._weights.values()) if self._weights else 0.0

    @property
    def max_in_degree(self) -> int:
        return max((self.in_degree(v) for v in self._vertices), default=0)

    @property
    def max_out_degree(self) -> int:
        return max((self.out_degree(v) for v in self._vertices), default=0)

    def has_vertex(self, vertex: Hashable) -> bool:
        return vertex in self._vertices

    def has_edge(self, source: Hashable, target: Hashable) -> bool:
        return (source, target) in self._weights

    def get_weight(self, source: Hashable, target: Hashable) -> float:
        """Weight of (source, target), 0.0 if the edge does not exist."""
        return self._weights.get((source, target), 0.0)

    def successors(self, vertex: Hashable) -> List[Hashable]:
        return list(self._successors.get(vertex, ()))

    def predecessors(self, vertex: Hashable) -> List[Hashable]:
        return list(self._predecessors.get(vertex, ()))

    def in_degree(self, vertex: Hashable) -> int:
        return len(self._predecessors.get(vertex, ()))

    def out_degree(self, vertex: Hashable) -> int:
        return len(self._successors.get(vertex, ()))

    def cumulative_in_weight(self, vertex: Hashable) -> float:
        """Total weight of the incoming edges of a vertex (memoized)."""
        if vertex not in self._cumulative_in:
            self._cumulative_in[vertex] = float(sum(
                self._weights[(u, vertex)] for u in self._predecessors.get(vertex, ())
            ))
        return self._cumulative_in[vertex]

    def cumulative_out_weight(self, vertex: Hashable) -> float:
        """Total weight of the outgoing edges of a vertex (memoized)."""
        if vertex not in self._cumulative_out:
            self._cumulative_out[vertex] = float(sum(
                self._weights[(vertex, w)] for w in self._successors.get(vertex, ())
            ))
        return self._cumulative_out[vertex]

    def iter_weighted_edges(self) -> Iterator[Tuple[Hashable, Hashable, float]]:
        for (source, target), weight in self._weights.items():
            yield source, target, weight

    # ------------------------------------------------------------------
    # Random sampling
    # ------------------------------------------------------------------

    def sample_random_vertex(self, rng: Optional[np.random.Generator] = None) -> Optional[Hashable]:
        """Uniformly drawn vertex, None for an empty graph."""
        if not self._vertices:
            return None
        rng = rng or self._rng
        vertices = list(self._vertices)
        return vertices[int(rng.integers(len(vertices)))]

    def sample_random_edge(self, rng: Optional[np.random.Generator] = None) -> Optional[Edge]:
        """Uniformly drawn edge, None for an empty graph."""
        if not self._weights:
            return None
        rng = rng or self._rng
        edges = list(self._weights)
        return edges[int(rng.integers(len(edges)))]

    def sample_random_successor(
        self,
        vertex: Hashable,
        weighted: bool = False,
        rng: Optional[np.random.Generator] = None
    ) -> Optional[Hashable]:
        """
        Draw a random successor of a vertex.

        Parameters
        ----------
        vertex : Hashable
            Vertex whose successors are sampled
        weighted : bool, default False
            If False, successors are drawn uniformly. If True, a successor
            is drawn with probability proportional to the edge weight by
            inverting the cumulative weight distribution.
        rng : np.random.Generator, optional
            Generator to draw from; defaults to the graph's own generator

        Returns
        -------
        Hashable or None
            The drawn successor. None if the vertex has no successors, or if
            ``weighted`` is set and its outgoing weight is not positive

        Raises
        ------
        SamplingInvariantError
            If the cumulative distribution does not cover the drawn value
        """
        successors = self._successors.get(vertex)
        if not successors:
            return None
        rng = rng or self._rng

        if not weighted:
            return successors[int(rng.integers(len(successors)))]

        cumulative = np.cumsum([self._weights[(vertex, w)] for w in successors])
        if cumulative[-1] <= 0:
            return None
        dice = rng.random() * cumulative[-1]
        index = int(np.searchsorted(cumulative, dice, side="right"))
        if index >= len(successors):
            raise SamplingInvariantError(
                "Cumulative weight distribution does not cover the drawn value",
                operation="sample_random_successor",
                details={"vertex": vertex, "dice": dice, "total": float(cumulative[-1])}
            )
        return successors[index]

    # ------------------------------------------------------------------
    # Strong connectivity
    # ------------------------------------------------------------------

    def largest_scc_size(self) -> int:
        """Number of vertices in the largest strongly connected component."""
        return components.largest_scc_size(self)

    def is_strongly_connected(self) -> bool:
        return components.is_strongly_connected(self)

    def require_strongly_connected(self) -> None:
        """Raise ``GraphNotIrreducibleError`` unless the graph is strongly connected."""
        components.require_strongly_connected(self)

    def reduce_to_largest_scc(self) -> int:
        """
        Discard all vertices and edges outside the largest strongly connected component.

        Returns
        -------
        int
            Number of vertices removed
        """
        return components.reduce_to_largest_scc(self)

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def copy(self, seed: Optional[int] = None) -> 'WeightedGraph':
        """Return an independent copy with the same edges and weights."""
        clone = WeightedGraph(seed=seed)
        for source, target, weight in self.iter_weighted_edges():
            clone.add_edge(source, target, weight)
        return clone

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, WeightedGraph):
            return NotImplemented
        return self._weights == other._weights

    __hash__ = None

    def __contains__(self, vertex: Hashable) -> bool:
        return vertex in self._vertices

    def __repr__(self) -> str:
        return f"WeightedGraph(vertices={self.vertex_count}, edges={self.edge_count})"
