"""
Two-path extraction from temporal edge logs.

A two-path (s, v, d) is an edge (s, v) at time step t_i followed by an edge
(v, d) at the next occupied time step t_{i+1}. If several edges enter or
leave v in these two time steps, every combination is a candidate and each
one contributes ``1 / (indeg_v(t_i) * outdeg_v(t_{i+1}))``, so the total
contribution of a node per pair of time steps never exceeds one.

From the weighted two-paths the extractor derives:

- the first-order aggregate network: every two-path with weight c adds c to
  the edges (s, v) and (v, d)
- the second-order aggregate network, whose vertices are edge tokens
  ``(s, v)``: every two-path with weight c adds c to ``(s, v) -> (v, d)``
- the per-node registry ``node -> {time -> [(s, d), ...]}`` used by the
  betweenness preference analysis, keyed by the time of the outgoing edge

Consecutive two-paths (a, b, c) and (b, c, d) sharing an edge are both
counted.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Tuple

from ..network.weighted_graph import WeightedGraph
from ..common.exceptions import ComputationError
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer

logger = get_logger(__name__)

Edge = Tuple[Hashable, Hashable]
TwoPath = Tuple[Hashable, Hashable, Hashable]
Registry = Dict[Hashable, Dict[int, List[Edge]]]


@dataclass
class TwoPathExtraction:
    """
    Result of a two-path extraction.

    The object is a snapshot: it holds no reference to the log it was
    computed from and is not updated when that log changes.

    Attributes
    ----------
    aggregate_network : WeightedGraph
        First-order aggregate network weighted by two-path contributions
    second_order_network : WeightedGraph
        Aggregate network between edge tokens ``(s, v) -> (v, d)``
    two_path_weights : Dict[TwoPath, float]
        Accumulated weight per distinct ``(s, v, d)`` triple
    two_paths_by_node : Dict[node, Dict[int, List[Tuple[node, node]]]]
        For every node v of the aggregate network the ``(s, d)`` pairs of all
        two-paths through v, grouped by the time step of the outgoing edge.
        Nodes without two-paths map to an empty dict.
    pruned_edges : Dict[int, List[Tuple[node, node]]]
        Edges that took part in at least one two-path, once per time step
    """

    aggregate_network: WeightedGraph = field(default_factory=WeightedGraph)
    second_order_network: WeightedGraph = field(default_factory=WeightedGraph)
    two_path_weights: Dict[TwoPath, float] = field(default_factory=dict)
    two_paths_by_node: Registry = field(default_factory=dict)
    pruned_edges: Dict[int, List[Edge]] = field(default_factory=dict)

    @property
    def two_path_count(self) -> int:
        """Number of recorded two-path occurrences (over all nodes and time steps)."""
        return sum(
            len(pairs)
            for by_time in self.two_paths_by_node.values()
            for pairs in by_time.values()
        )


def extract_two_paths(
    edges_by_time: Dict[int, List[Edge]],
    reverse_time: bool = False,
    exact_time_adjacency: bool = False
) -> TwoPathExtraction:
    """
    Extract weighted two-paths from time-stamped edges.

    Parameters
    ----------
    edges_by_time : Dict[int, List[Tuple[node, node]]]
        Edge multiset per time step
    reverse_time : bool, default False
        Walk time steps in descending order with every edge reversed
    exact_time_adjacency : bool, default False
        Only combine time steps whose numeric distance is exactly one. By
        default any two consecutive occupied time steps are combined.

    Returns
    -------
    TwoPathExtraction
        Aggregate networks, two-path weights and per-node registry. The
        ``pruned_edges`` keep the original edge orientation even when
        ``reverse_time`` is set.

    Raises
    ------
    ComputationError
        If the extraction fails unexpectedly

    Examples
    --------
    >>> result = extract_two_paths({1: [("a", "b")], 2: [("b", "c")]})
    >>> result.two_path_weights
    {('a', 'b', 'c'): 1.0}
    """
    log_function_entry(
        "extract_two_paths",
        time_steps=len(edges_by_time),
        reverse_time=reverse_time,
        exact_time_adjacency=exact_time_adjacency
    )

    try:
        with LoggingTimer("extract_two_paths", {"time_steps": len(edges_by_time)}):
            result = _extract(edges_by_time, reverse_time, exact_time_adjacency)
    except Exception as e:
        raise ComputationError(
            f"Two-path extraction failed: {str(e)}",
            operation="extract_two_paths",
            error_type=type(e).__name__,
            cause=e
        )

    logger.info(
        f"Extracted {len(result.two_path_weights)} distinct two-paths "
        f"({result.two_path_count} occurrences) from {len(edges_by_time)} time steps"
    )
    return result


def _extract(
    edges_by_time: Dict[int, List[Edge]],
    reverse_time: bool,
    exact_time_adjacency: bool
) -> TwoPathExtraction:
    result = TwoPathExtraction()
    times = sorted(edges_by_time, reverse=reverse_time)

    def oriented(edge: Edge) -> Edge:
        return (edge[1], edge[0]) if reverse_time else edge

    participating: Dict[int, Dict[Edge, None]] = defaultdict(dict)
    registry: Registry = {}

    for prev_t, t in zip(times, times[1:]):
        if exact_time_adjacency and abs(t - prev_t) != 1:
            continue

        in_edges = edges_by_time[prev_t]
        out_edges = edges_by_time[t]

        # Degrees are counted over the full multisets of both time steps
        indeg = Counter(oriented(e)[1] for e in in_edges)
        outdeg = Counter(oriented(e)[0] for e in out_edges)

        successors_of = defaultdict(list)
        for out_edge in out_edges:
            successors_of[oriented(out_edge)[0]].append(out_edge)

        for in_edge in in_edges:
            s, v = oriented(in_edge)
            for out_edge in successors_of.get(v, ()):
                d = oriented(out_edge)[1]
                weight = 1.0 / (indeg[v] * outdeg[v])
                result.two_path_weights[(s, v, d)] = (
                    result.two_path_weights.get((s, v, d), 0.0) + weight
                )

                participating[prev_t].setdefault(in_edge, None)
                participating[t].setdefault(out_edge, None)

                registry.setdefault(v, {}).setdefault(t, []).append((s, d))

    for (s, v, d), weight in result.two_path_weights.items():
        result.aggregate_network.add_edge(s, v, weight)
        result.aggregate_network.add_edge(v, d, weight)
        result.second_order_network.add_edge((s, v), (v, d), weight)

    for vertex in result.aggregate_network.vertices:
        registry.setdefault(vertex, {})

    result.two_paths_by_node = registry
    result.pruned_edges = {
        t: list(edges) for t, edges in sorted(participating.items()) if edges
    }

    logger.debug(
        f"Two-path extraction: {result.aggregate_network.edge_count} aggregate edges, "
        f"{sum(len(e) for e in result.pruned_edges.values())} participating edges"
    )
    return result
