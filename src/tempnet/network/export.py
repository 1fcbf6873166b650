"""
Export module for weighted aggregate networks.

This module writes and reads ``WeightedGraph`` objects as space-separated
weighted edge lists, builds the row-stochastic transition matrix of a
(second-order) aggregate network and derives the second-order null model of a
first-order aggregate network.

Second-order vertices are ``(source, target)`` tuples. In text files they are
rendered as ``(source;target)`` tokens, which contain no spaces and can be
parsed back unambiguously as long as node names contain neither ``;`` nor
parentheses.
"""

import os
from pathlib import Path
from typing import Any, Dict, Hashable, List, Tuple

import numpy as np
import polars as pl
from scipy import sparse

from .weighted_graph import WeightedGraph
from ..common.exceptions import DataFormatError, ComputationError
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer

logger = get_logger(__name__)

WEIGHTED_EDGE_COLUMNS = ["source", "target", "weight"]
TRANSITION_PRECISION = 6


def format_vertex(vertex: Hashable) -> str:
    """
    Render a vertex as a whitespace-free text token.

    Examples
    --------
    >>> format_vertex("a")
    'a'
    >>> format_vertex(("a", "b"))
    '(a;b)'
    """
    if isinstance(vertex, tuple) and len(vertex) == 2:
        return f"({vertex[0]};{vertex[1]})"
    return str(vertex)


def parse_vertex(token: str) -> Hashable:
    """Inverse of ``format_vertex``: ``(a;b)`` becomes ``("a", "b")``."""
    if token.startswith("(") and token.endswith(")") and token.count(";") == 1:
        source, target = token[1:-1].split(";")
        return (source, target)
    return token


def save_weighted_graph(graph: WeightedGraph, output_path: str) -> None:
    """
    Save a weighted graph as a ``source target weight`` edge list.

    Weights are written with Python's shortest round-trip float
    representation, independent of the locale.

    Parameters
    ----------
    graph : WeightedGraph
        Graph to save
    output_path : str
        Path of the output file; parent directories are created
    """
    log_function_entry("save_weighted_graph", output_path=output_path, edges=graph.edge_count)

    path = Path(output_path)
    os.makedirs(path.parent, exist_ok=True)

    rows = [
        (format_vertex(source), format_vertex(target), repr(float(weight)))
        for source, target, weight in graph.iter_weighted_edges()
    ]
    edge_data = pl.DataFrame(
        rows,
        schema={col: pl.Utf8 for col in WEIGHTED_EDGE_COLUMNS},
        orient="row"
    )
    edge_data.write_csv(str(path), separator=" ", quote_style="never")

    logger.info(f"Saved weighted graph with {graph.edge_count} edges to {path}")


def load_weighted_graph(input_path: str) -> WeightedGraph:
    """
    Load a weighted graph written by ``save_weighted_graph``.

    Parameters
    ----------
    input_path : str
        Path of a space-separated ``source target weight`` file

    Returns
    -------
    WeightedGraph
        Graph with one edge per line; ``(a;b)`` tokens become tuple vertices

    Raises
    ------
    DataFormatError
        If the file does not exist, lacks one of the required columns or
        contains a weight that is not a number
    """
    if not os.path.exists(input_path):
        raise DataFormatError(
            f"Weighted edge list not found: {input_path}",
            format_type="weighted edge list",
            file_path=input_path
        )

    try:
        edge_data = pl.read_csv(input_path, separator=" ", infer_schema_length=0)
    except pl.exceptions.NoDataError:
        return WeightedGraph()

    missing = [col for col in WEIGHTED_EDGE_COLUMNS if col not in edge_data.columns]
    if missing:
        raise DataFormatError(
            f"Missing required columns: {missing}",
            format_type="weighted edge list",
            file_path=input_path
        )

    graph = WeightedGraph()
    for line_number, (source, target, weight) in enumerate(
            edge_data.select(WEIGHTED_EDGE_COLUMNS).iter_rows(), start=2):
        try:
            value = float(weight)
        except (TypeError, ValueError) as e:
            raise DataFormatError(
                f"Invalid edge weight '{weight}'",
                format_type="weighted edge list",
                file_path=input_path,
                line_number=line_number,
                cause=e
            )
        graph.add_edge(parse_vertex(source), parse_vertex(target), value)

    logger.info(f"Loaded weighted graph with {graph.vertex_count} vertices and "
                f"{graph.edge_count} edges from {input_path}")
    return graph


def transition_matrix(graph: WeightedGraph) -> Tuple[sparse.csr_matrix, List[Hashable]]:
    """
    Row-stochastic transition matrix of a weighted graph.

    Entry (i, j) is ``w(v_i, v_j) / cumulative_out_weight(v_i)``; rows of
    vertices without outgoing weight are zero.

    Parameters
    ----------
    graph : WeightedGraph
        Graph to convert, typically a second-order aggregate network

    Returns
    -------
    Tuple[sparse.csr_matrix, List[Hashable]]
        Sparse matrix and the vertex order of its rows and columns
    """
    vertices = graph.vertices
    index = {vertex: i for i, vertex in enumerate(vertices)}

    rows, cols, values = [], [], []
    for source, target, weight in graph.iter_weighted_edges():
        out_weight = graph.cumulative_out_weight(source)
        if out_weight == 0:
            continue
        rows.append(index[source])
        cols.append(index[target])
        values.append(weight / out_weight)

    matrix = sparse.csr_matrix(
        (np.asarray(values, dtype=float), (rows, cols)),
        shape=(len(vertices), len(vertices))
    )
    return matrix, vertices


def write_transition_matrix(graph: WeightedGraph, output_path: str) -> None:
    """
    Write the dense transition matrix of a graph as text.

    The first line holds the vertex tokens (column header); every following
    line starts with the row token followed by one entry per column with six
    decimals, all separated by single spaces.

    Parameters
    ----------
    graph : WeightedGraph
        Graph whose transition matrix is written
    output_path : str
        Path of the output file
    """
    log_function_entry("write_transition_matrix", output_path=output_path)

    with LoggingTimer("write_transition_matrix", {"vertices": graph.vertex_count}):
        matrix, vertices = transition_matrix(graph)
        dense = matrix.toarray()
        tokens = [format_vertex(v) for v in vertices]

        path = Path(output_path)
        os.makedirs(path.parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(" ".join(tokens) + "\n")
            for token, row in zip(tokens, dense):
                entries = " ".join(f"{p:.{TRANSITION_PRECISION}f}" for p in row)
                f.write(f"{token} {entries}\n" if entries else f"{token}\n")

    logger.info(f"Wrote {len(vertices)}x{len(vertices)} transition matrix to {output_path}")


def second_order_null_model(first_order: WeightedGraph) -> WeightedGraph:
    """
    Second-order network expected in the absence of order correlations.

    For every pair of adjacent first-order edges (a, b) and (b, d) the
    second-order edge (a, b) -> (b, d) gets the weight
    ``0.5 * w(a, b) * w(b, d) / cumulative_out_weight(b)``.

    Parameters
    ----------
    first_order : WeightedGraph
        Weighted first-order aggregate network

    Returns
    -------
    WeightedGraph
        Second-order null model with ``(a, b)`` tuple vertices

    Raises
    ------
    ComputationError
        If building the null model fails unexpectedly
    """
    log_function_entry("second_order_null_model", edges=first_order.edge_count)

    null_model = WeightedGraph()
    try:
        with LoggingTimer("second_order_null_model", {"edges": first_order.edge_count}):
            for a, b, w_ab in first_order.iter_weighted_edges():
                out_weight = first_order.cumulative_out_weight(b)
                if out_weight == 0:
                    continue
                for d in first_order.successors(b):
                    w_bd = first_order.get_weight(b, d)
                    null_model.add_edge((a, b), (b, d), 0.5 * w_ab * w_bd / out_weight)
    except Exception as e:
        raise ComputationError(
            f"Failed to build second-order null model: {str(e)}",
            operation="second_order_null_model",
            error_type=type(e).__name__,
            cause=e
        )

    logger.info(f"Second-order null model: {null_model.vertex_count} vertices, "
                f"{null_model.edge_count} edges")
    return null_model


def get_graph_info(graph: WeightedGraph) -> Dict[str, Any]:
    """
    Summary statistics of a weighted graph.

    Returns
    -------
    Dict[str, Any]
        Vertex and edge counts, weight statistics and maximum degrees
    """
    cumulative = graph.cumulative_weight
    return {
        "vertices": graph.vertex_count,
        "edges": graph.edge_count,
        "cumulative_weight": cumulative,
        "max_weight": graph.max_weight,
        "min_weight": graph.min_weight,
        "max_relative_weight": graph.max_weight / cumulative if cumulative else 0.0,
        "min_relative_weight": graph.min_weight / cumulative if cumulative else 0.0,
        "max_in_degree": graph.max_in_degree,
        "max_out_degree": graph.max_out_degree,
    }
