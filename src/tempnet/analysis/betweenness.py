"""
Betweenness preference of nodes in temporal networks.

For a node x with predecessors P(x) and successors S(x) in the aggregate
network, the betweenness preference matrix B counts how often x connects a
predecessor p to a successor s in a two-path. Each time step contributes one
unit per node, split evenly across the two-paths through x at that step:

    B[p, s] = sum_t count_t(p, x, s) / total_t(x)

Normalizing B to P = B / sum(B) gives a joint distribution of predecessor and
successor. The betweenness preference I(x) is the mutual information of that
distribution:

    I(x) = sum_{p,s} P[p,s] * log2(P[p,s] / (P[p,.] * P[.,s]))

It is zero exactly when predecessor and successor are independent, as in the
uncorrelated matrix built from the aggregate edge weights alone.

Matrices are numpy arrays with rows indexed by predecessors and columns by
successors, in the order the aggregate network lists them.
"""

import os
import queue
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Hashable, List, Optional, Tuple

import numpy as np
import polars as pl

from ..network.weighted_graph import WeightedGraph
from ..timeseries.edge_log import TemporalEdgeLog
from ..common.exceptions import ValidationError, ComputationError, ConfigurationError
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer

logger = get_logger(__name__)

# -1 uses one worker per CPU
DEFAULT_N_JOBS = -1
OUTPUT_PRECISION = 6
ZERO_TOLERANCE = 1e-12

Index = Dict[Hashable, int]
Registry = Dict[Hashable, Dict[int, List[Tuple[Hashable, Hashable]]]]


def betweenness_preference_matrix(
    log: TemporalEdgeLog,
    x: Hashable,
    normalized: bool = False
) -> Tuple[np.ndarray, Index, Index]:
    """
    Betweenness preference matrix of a node.

    Parameters
    ----------
    log : TemporalEdgeLog
        Temporal network; two-paths are extracted if the log is dirty
    x : Hashable
        Node of the aggregate network
    normalized : bool, default False
        Return the normalized matrix P instead of the raw matrix B

    Returns
    -------
    Tuple[np.ndarray, Dict[node, int], Dict[node, int]]
        Matrix of shape (in-degree, out-degree) of x, and the row index of
        every predecessor and column index of every successor

    Raises
    ------
    ValidationError
        If x is not a node of the aggregate network

    Examples
    --------
    >>> B, pred_index, succ_index = betweenness_preference_matrix(log, "e")
    >>> B[pred_index["c"], succ_index["f"]]
    5.5
    """
    matrix, pred_index, succ_index = _raw_matrix(log.aggregate_network, log.two_paths_by_node, x)
    if normalized:
        matrix = normalize_matrix(matrix)
    return matrix, pred_index, succ_index


def _raw_matrix(
    aggregate: WeightedGraph,
    registry: Registry,
    x: Hashable
) -> Tuple[np.ndarray, Index, Index]:
    if x not in aggregate:
        raise ValidationError(
            f"Node {x!r} is not part of the aggregate network",
            field="node",
            value=x
        )

    pred_index = {p: i for i, p in enumerate(aggregate.predecessors(x))}
    succ_index = {s: j for j, s in enumerate(aggregate.successors(x))}
    matrix = np.zeros((len(pred_index), len(succ_index)))

    # Every time step distributes one unit over its two-paths through x
    for pairs in registry.get(x, {}).values():
        share = 1.0 / len(pairs)
        for p, s in pairs:
            matrix[pred_index[p], succ_index[s]] += share

    return matrix, pred_index, succ_index


def normalize_matrix(matrix: np.ndarray) -> np.ndarray:
    """
    Normalize a matrix to sum to one.

    A matrix whose entries sum to zero (including an empty matrix) yields a
    zero matrix of the same shape.
    """
    total = matrix.sum()
    if total > 0:
        return matrix / total
    return np.zeros_like(matrix, dtype=float)


def mutual_information(P: np.ndarray) -> float:
    """
    Mutual information (in bits) of a normalized joint distribution.

    Zero entries contribute nothing. Values below ``ZERO_TOLERANCE``,
    including negative floating-point residue, are returned as 0.0.

    Parameters
    ----------
    P : np.ndarray
        Matrix whose entries sum to one (or a zero matrix)

    Returns
    -------
    float
        The mutual information of row and column variable
    """
    if P.size == 0:
        return 0.0

    marginal_rows = P.sum(axis=1)
    marginal_cols = P.sum(axis=0)
    rows, cols = np.nonzero(P)
    if rows.size == 0:
        return 0.0

    values = P[rows, cols]
    terms = values * np.log2(values / (marginal_rows[rows] * marginal_cols[cols]))
    value = float(terms.sum())
    # Rounding residue of independent distributions is reported as exactly zero
    return value if value >= ZERO_TOLERANCE else 0.0


def betweenness_preference(log: TemporalEdgeLog, x: Hashable) -> float:
    """
    Betweenness preference I(x) of a node.

    Parameters
    ----------
    log : TemporalEdgeLog
        Temporal network
    x : Hashable
        Node of the aggregate network

    Returns
    -------
    float
        Mutual information between predecessor and successor of the
        two-paths through x, in bits
    """
    return _betweenness_preference(log.aggregate_network, log.two_paths_by_node, x)


def _betweenness_preference(aggregate: WeightedGraph, registry: Registry, x: Hashable) -> float:
    matrix, _, _ = _raw_matrix(aggregate, registry, x)
    return mutual_information(normalize_matrix(matrix))


def uncorrelated_matrix(aggregate: WeightedGraph, x: Hashable) -> Tuple[np.ndarray, Index, Index]:
    """
    Betweenness preference matrix expected without order correlations.

    Entry (p, s) is the product of the normalized weight of (p, x) among
    x's incoming edges and the normalized weight of (x, s) among its
    outgoing edges, so the mutual information of the result is zero.

    Parameters
    ----------
    aggregate : WeightedGraph
        Weighted aggregate network
    x : Hashable
        Node of the aggregate network

    Returns
    -------
    Tuple[np.ndarray, Dict[node, int], Dict[node, int]]
        Normalized matrix with predecessor and successor indices
    """
    if x not in aggregate:
        raise ValidationError(
            f"Node {x!r} is not part of the aggregate network",
            field="node",
            value=x
        )

    predecessors = aggregate.predecessors(x)
    successors = aggregate.successors(x)
    pred_index = {p: i for i, p in enumerate(predecessors)}
    succ_index = {s: j for j, s in enumerate(successors)}

    in_weights = np.array([aggregate.get_weight(p, x) for p in predecessors], dtype=float)
    out_weights = np.array([aggregate.get_weight(x, s) for s in successors], dtype=float)

    if in_weights.sum() > 0:
        in_weights = in_weights / in_weights.sum()
    if out_weights.sum() > 0:
        out_weights = out_weights / out_weights.sum()

    return np.outer(in_weights, out_weights), pred_index, succ_index


def _through_nodes(aggregate: WeightedGraph) -> List[Hashable]:
    """Nodes with at least one predecessor and one successor."""
    return [
        v for v in aggregate.vertices
        if aggregate.in_degree(v) > 0 and aggregate.out_degree(v) > 0
    ]


def _resolve_workers(n_jobs: int, tasks: int) -> int:
    if n_jobs == 0 or n_jobs < -1:
        raise ConfigurationError(
            f"n_jobs must be -1 or a positive integer, got {n_jobs}",
            parameter="n_jobs",
            value=n_jobs
        )
    workers = (os.cpu_count() or 1) if n_jobs == -1 else n_jobs
    return max(1, min(workers, tasks))


def betweenness_preference_distribution(
    log: TemporalEdgeLog,
    n_jobs: int = DEFAULT_N_JOBS
) -> pl.DataFrame:
    """
    Betweenness preference of every node that has predecessors and successors.

    Extraction (and pruning) of the log completes before the worker threads
    start; the workers only read the resulting snapshot.

    Parameters
    ----------
    log : TemporalEdgeLog
        Temporal network
    n_jobs : int, default -1
        Number of worker threads; -1 uses one per CPU

    Returns
    -------
    pl.DataFrame
        Columns ``node`` and ``betweenness_preference``. Row order is not
        defined. Node identifiers of a single scalar type keep that type;
        mixed or composite identifiers are stored in an ``Object`` column.

    Raises
    ------
    ConfigurationError
        If n_jobs is invalid
    ComputationError
        If the computation fails for a node

    Examples
    --------
    >>> dist = betweenness_preference_distribution(log, n_jobs=4)
    >>> dist.sort("betweenness_preference", descending=True).head(10)
    """
    log_function_entry("betweenness_preference_distribution", n_jobs=n_jobs)

    results = []
    with LoggingTimer("betweenness_preference_distribution"):
        for node, value in _iter_distribution(log, n_jobs):
            results.append((node, value))

    logger.info(f"Computed betweenness preference for {len(results)} nodes")
    nodes = [node for node, _ in results]
    return pl.DataFrame([
        _node_series(nodes),
        pl.Series("betweenness_preference", [value for _, value in results], dtype=pl.Float64),
    ])


def _node_series(nodes: List[Hashable]) -> pl.Series:
    """Node column; identifiers of mixed or composite types are kept as Python objects."""
    types = {type(node) for node in nodes}
    if len(types) == 1 and types <= {str, int, float, bool}:
        return pl.Series("node", nodes)
    if not nodes:
        return pl.Series("node", [], dtype=pl.Utf8)
    return pl.Series("node", nodes, dtype=pl.Object)


def _iter_distribution(log: TemporalEdgeLog, n_jobs: int):
    # Force extraction single-threaded before the snapshot is shared
    aggregate = log.aggregate_network
    registry = log.two_paths_by_node
    nodes = _through_nodes(aggregate)
    if not nodes:
        return

    workers = _resolve_workers(n_jobs, len(nodes))
    logger.debug(f"Computing betweenness preference of {len(nodes)} nodes with {workers} workers")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_node = {
            executor.submit(_betweenness_preference, aggregate, registry, v): v
            for v in nodes
        }
        for future in as_completed(future_to_node):
            node = future_to_node[future]
            try:
                yield node, future.result()
            except Exception as e:
                raise ComputationError(
                    f"Betweenness preference failed for node {node!r}: {str(e)}",
                    operation="betweenness_preference",
                    error_type=type(e).__name__,
                    cause=e
                )


def write_betweenness_distribution(
    log: TemporalEdgeLog,
    output_path: str,
    n_jobs: int = DEFAULT_N_JOBS
) -> int:
    """
    Compute the betweenness preference distribution and write it to a file.

    Worker threads put ``(node, value)`` results into a queue which a single
    writer (the calling thread) drains, writing one complete ``node value``
    line per node with six decimals. Lines appear in completion order.

    Parameters
    ----------
    log : TemporalEdgeLog
        Temporal network
    output_path : str
        Output file; overwritten if it exists
    n_jobs : int, default -1
        Number of worker threads; -1 uses one per CPU

    Returns
    -------
    int
        Number of lines written

    Raises
    ------
    ComputationError
        If the computation fails for a node; lines written so far remain in
        the file
    """
    log_function_entry("write_betweenness_distribution", output_path=output_path, n_jobs=n_jobs)

    aggregate = log.aggregate_network
    registry = log.two_paths_by_node
    nodes = _through_nodes(aggregate)
    workers = _resolve_workers(n_jobs, len(nodes))

    results: "queue.Queue[Tuple[Hashable, Optional[float], Optional[Exception]]]" = queue.Queue()

    def produce(node: Hashable) -> None:
        try:
            results.put((node, _betweenness_preference(aggregate, registry, node), None))
        except Exception as e:
            results.put((node, None, e))

    written = 0
    failure: Optional[Tuple[Hashable, Exception]] = None
    last_reported = 0.0

    with LoggingTimer("write_betweenness_distribution", {"nodes": len(nodes)}):
        with open(output_path, "w", encoding="utf-8") as f, \
                ThreadPoolExecutor(max_workers=workers) as executor:
            for v in nodes:
                executor.submit(produce, v)

            for _ in range(len(nodes)):
                node, value, error = results.get()
                if error is not None:
                    failure = failure or (node, error)
                    continue
                f.write(f"{node} {value:.{OUTPUT_PRECISION}f}\n")
                written += 1

                progress = 100.0 * written / len(nodes)
                if progress >= last_reported + 5.0:
                    last_reported = progress
                    logger.debug(f"Completed for {written} nodes [{progress:.1f} %]")

    if failure is not None:
        node, error = failure
        raise ComputationError(
            f"Betweenness preference failed for node {node!r}: {str(error)}",
            operation="write_betweenness_distribution",
            error_type=type(error).__name__,
            cause=error
        )

    logger.info(f"Wrote betweenness preference of {written} nodes to {output_path}")
    return written
