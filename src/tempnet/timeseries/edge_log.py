"""
Temporal edge logs.

A ``TemporalEdgeLog`` maps integer time steps to the multiset of directed
edges active at that step. Its derived structures (aggregate networks,
two-path weights and the per-node two-path registry) are computed by
``extract_two_paths`` and cached as a ``TwoPathExtraction`` snapshot together
with a dirty flag; any mutation of the log sets the flag and the next access
to a derived property re-extracts.

Extraction prunes the log by default: afterwards the log holds exactly the
edges that took part in at least one two-path, each once per time step.
Pruning can bring time steps next to each other that were separated by
steps without two-path edges, so re-extracting a pruned log after a mutation
can find two-paths the first extraction did not.

Mutation is not thread-safe. Complete all appends, aggregation and
extraction before sharing a log between threads.
"""

from collections import Counter
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

from .extraction import TwoPathExtraction, TwoPath, extract_two_paths
from ..network.weighted_graph import WeightedGraph
from ..network.export import get_graph_info
from ..common.exceptions import ConfigurationError
from ..common.logging_config import get_logger, log_function_entry

logger = get_logger(__name__)

Edge = Tuple[Hashable, Hashable]


class TemporalEdgeLog:
    """
    Time-stamped sequence of directed edges.

    Parameters
    ----------
    reverse_time : bool, default False
        Extract two-paths walking backwards in time (edges reversed)
    exact_time_adjacency : bool, default False
        Only combine time steps whose numeric distance is exactly one
    prune : bool, default True
        Replace the log's edges by the edges participating in two-paths after
        every extraction

    Examples
    --------
    >>> log = TemporalEdgeLog()
    >>> log.add_edge(1, "a", "b")
    >>> log.add_edge(2, "b", "c")
    >>> log.two_path_count
    1
    >>> log.aggregate_network.get_weight("a", "b")
    1.0
    """

    def __init__(
        self,
        reverse_time: bool = False,
        exact_time_adjacency: bool = False,
        prune: bool = True
    ) -> None:
        self._edges: Dict[int, List[Edge]] = {}
        self._reverse_time = reverse_time
        self._exact_time_adjacency = exact_time_adjacency
        self._prune = prune
        self._extraction: Optional[TwoPathExtraction] = None
        self._dirty = True

    @classmethod
    def from_edge_sequence(cls, edges: Iterable[Edge], **options) -> 'TemporalEdgeLog':
        """
        Create a log with one edge per time step, starting at time 0.

        Parameters
        ----------
        edges : Iterable[Tuple[node, node]]
            Ordered sequence of (source, target) pairs
        **options
            Extraction options passed to the constructor
        """
        log = cls(**options)
        for time, (source, target) in enumerate(edges):
            log.add_edge(time, source, target)
        return log

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_edge(self, time: int, source: Hashable, target: Hashable) -> None:
        """Append the edge (source, target) to time step ``time``."""
        self._edges.setdefault(time, []).append((source, target))
        self._dirty = True

    def remove_edges(self, edges: Iterable[Edge]) -> int:
        """
        Remove every occurrence of the given edges.

        Time steps left without edges are dropped.

        Parameters
        ----------
        edges : Iterable[Tuple[node, node]]
            Ordered (source, target) pairs to remove

        Returns
        -------
        int
            Number of removed edge occurrences
        """
        unwanted = set(edges)
        removed = 0
        for time in list(self._edges):
            kept = [edge for edge in self._edges[time] if edge not in unwanted]
            removed += len(self._edges[time]) - len(kept)
            if kept:
                self._edges[time] = kept
            else:
                del self._edges[time]

        if removed:
            self._dirty = True
        logger.debug(f"Removed {removed} edge occurrences from temporal network")
        return removed

    def aggregate_time(self, window: int) -> None:
        """
        Merge consecutive time steps into windows of the given size.

        Every time step t moves to ``(t - min_t) // window``; within a new
        time step duplicate edges are merged. Two-paths are re-extracted
        afterwards.

        Parameters
        ----------
        window : int
            Number of time steps per window; 1 leaves the log unchanged

        Raises
        ------
        ConfigurationError
            If window is smaller than one
        """
        log_function_entry("aggregate_time", window=window, time_steps=self.length)

        if not isinstance(window, int) or window < 1:
            raise ConfigurationError(
                f"Aggregation window must be a positive integer, got {window}",
                parameter="window",
                value=window,
                function="aggregate_time"
            )
        if window == 1 or not self._edges:
            return

        time_steps_before = self.length
        min_t = min(self._edges)

        aggregated: Dict[int, Dict[Edge, None]] = {}
        for time in sorted(self._edges):
            bucket = aggregated.setdefault((time - min_t) // window, {})
            for edge in self._edges[time]:
                bucket.setdefault(edge, None)

        self._edges = {time: list(bucket) for time, bucket in aggregated.items()}
        self._dirty = True

        logger.info(f"Aggregated time with window {window}: "
                    f"{time_steps_before} -> {self.length} time steps")
        self.extract()

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    @property
    def extraction_options(self) -> Dict[str, bool]:
        return {
            "reverse_time": self._reverse_time,
            "exact_time_adjacency": self._exact_time_adjacency,
            "prune": self._prune,
        }

    @property
    def is_dirty(self) -> bool:
        """True if the log changed since the last extraction."""
        return self._dirty

    def extract(self) -> TwoPathExtraction:
        """
        Extract two-paths with the log's options and cache the result.

        With pruning enabled the log's edges are replaced by the edges that
        participated in a two-path.

        Returns
        -------
        TwoPathExtraction
            Snapshot of the derived structures
        """
        result = extract_two_paths(
            self._edges,
            reverse_time=self._reverse_time,
            exact_time_adjacency=self._exact_time_adjacency
        )

        if self._prune:
            edges_before = self.edge_count
            self._edges = {time: list(edges) for time, edges in result.pruned_edges.items()}
            logger.debug(f"Pruned temporal network: {edges_before} -> {self.edge_count} edges")

        self._extraction = result
        self._dirty = False
        return result

    def _derived(self) -> TwoPathExtraction:
        if self._dirty or self._extraction is None:
            return self.extract()
        return self._extraction

    @property
    def aggregate_network(self) -> WeightedGraph:
        """First-order aggregate network weighted by two-path contributions."""
        return self._derived().aggregate_network

    @property
    def second_order_network(self) -> WeightedGraph:
        return self._derived().second_order_network

    @property
    def two_path_weights(self) -> Dict[TwoPath, float]:
        return self._derived().two_path_weights

    @property
    def two_paths_by_node(self) -> Dict[Hashable, Dict[int, List[Edge]]]:
        return self._derived().two_paths_by_node

    @property
    def two_path_count(self) -> int:
        """Number of two-path occurrences."""
        return self._derived().two_path_count

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_edges(self, time: int) -> List[Edge]:
        """Edges at a time step (empty list if the step is not occupied)."""
        return list(self._edges.get(time, ()))

    @property
    def times(self) -> List[int]:
        """Occupied time steps in ascending order."""
        return sorted(self._edges)

    def iter_edges(self) -> Iterator[Tuple[int, Hashable, Hashable]]:
        """Yield ``(time, source, target)`` in time order."""
        for time in sorted(self._edges):
            for source, target in self._edges[time]:
                yield time, source, target

    @property
    def length(self) -> int:
        """Number of occupied time steps."""
        return len(self._edges)

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._edges.values())

    @property
    def vertex_count(self) -> int:
        vertices = set()
        for edges in self._edges.values():
            for source, target in edges:
                vertices.add(source)
                vertices.add(target)
        return len(vertices)

    @property
    def min_edges_per_step(self) -> int:
        return min((len(edges) for edges in self._edges.values()), default=0)

    @property
    def max_edges_per_step(self) -> int:
        return max((len(edges) for edges in self._edges.values()), default=0)

    def copy(self) -> 'TemporalEdgeLog':
        """Independent copy of the edges and options (derived state is not copied)."""
        clone = TemporalEdgeLog(**self.extraction_options)
        clone._edges = {time: list(edges) for time, edges in self._edges.items()}
        return clone

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TemporalEdgeLog):
            return NotImplemented
        if set(self._edges) != set(other._edges):
            return False
        return all(
            Counter(self._edges[time]) == Counter(other._edges[time])
            for time in self._edges
        )

    __hash__ = None

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return f"TemporalEdgeLog(time_steps={self.length}, edges={self.edge_count})"


def get_temporal_network_info(log: TemporalEdgeLog) -> Dict[str, Any]:
    """
    Summary statistics of a temporal network and its aggregate network.

    Counts of the temporal network are taken before extraction; the
    aggregate statistics come from an extraction of a copy, so the log
    itself is not pruned.

    Parameters
    ----------
    log : TemporalEdgeLog
        Temporal network to describe

    Returns
    -------
    Dict[str, Any]
        Dictionary with keys ``nodes``, ``time_steps``, ``interactions``,
        ``min_edges_per_step``, ``max_edges_per_step``,
        ``two_path_fraction`` and ``aggregate`` (the ``get_graph_info``
        statistics of the aggregate network plus ``two_paths``)
    """
    interactions = log.edge_count
    info = {
        "nodes": log.vertex_count,
        "time_steps": log.length,
        "interactions": interactions,
        "min_edges_per_step": log.min_edges_per_step,
        "max_edges_per_step": log.max_edges_per_step,
    }

    result = log.copy().extract()
    aggregate_info = get_graph_info(result.aggregate_network)
    aggregate_info["two_paths"] = result.two_path_count

    cumulative = aggregate_info["cumulative_weight"]
    info["two_path_fraction"] = cumulative / interactions if interactions else 0.0
    info["aggregate"] = aggregate_info
    return info
