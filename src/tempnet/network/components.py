"""
Strongly connected components of weighted graphs.

Random walks on first- or second-order aggregate networks only have a unique
stationary distribution if the transition matrix is irreducible, i.e. if the
graph is strongly connected. This module computes strongly connected
components with NetworkIt and offers the checks consumers need to fail fast:
``is_strongly_connected``, ``largest_scc_size`` and
``require_strongly_connected``.

The functions accept any graph exposing ``vertices``, ``edges``,
``vertex_count`` and ``remove_edge`` (i.e. a ``WeightedGraph``).
"""

from collections import defaultdict
from typing import Any, Hashable, List, Set

import networkit as nk

from ..common.id_mapper import IDMapper
from ..common.exceptions import GraphNotIrreducibleError, GraphConstructionError
from ..common.logging_config import get_logger, LoggingTimer

logger = get_logger(__name__)


def strongly_connected_components(graph: Any) -> List[List[Hashable]]:
    """
    Compute the strongly connected components of a directed graph.

    Parameters
    ----------
    graph : WeightedGraph
        Graph to decompose

    Returns
    -------
    List[List[Hashable]]
        Components as lists of vertices, largest first. Components of equal
        size keep the order in which their first vertex was added to the
        graph.

    Raises
    ------
    GraphConstructionError
        If building or decomposing the NetworkIt copy fails
    """
    vertices = graph.vertices
    if not vertices:
        return []

    id_mapper = IDMapper.from_vertices(vertices)
    try:
        nk_graph = nk.Graph(id_mapper.size(), weighted=False, directed=True)
        for source, target in graph.edges:
            nk_graph.addEdge(id_mapper.get_internal(source), id_mapper.get_internal(target))

        scc = nk.components.StronglyConnectedComponents(nk_graph)
        scc.run()
        nodes = list(range(nk_graph.numberOfNodes()))
        component_ids = [scc.componentOfNode(node) for node in nodes]
    except Exception as e:
        raise GraphConstructionError(
            f"Strongly connected component computation failed: {str(e)}",
            graph_type="networkit",
            node_count=len(vertices),
            edge_count=len(graph.edges),
            operation="strongly_connected_components",
            cause=e
        )

    members = defaultdict(list)
    for component, vertex in zip(component_ids, id_mapper.get_original_batch(nodes)):
        members[component].append(vertex)

    # dicts keep first-seen order, sorted() is stable
    result = sorted(members.values(), key=len, reverse=True)
    logger.debug(f"Found {len(result)} strongly connected components in {len(vertices)} vertices")
    return result


def largest_strongly_connected_component(graph: Any) -> Set[Hashable]:
    """Vertex set of the largest strongly connected component (empty for an empty graph)."""
    comps = strongly_connected_components(graph)
    return set(comps[0]) if comps else set()


def largest_scc_size(graph: Any) -> int:
    """Number of vertices in the largest strongly connected component."""
    return len(largest_strongly_connected_component(graph))


def is_strongly_connected(graph: Any) -> bool:
    """True if the graph is non-empty and consists of a single strongly connected component."""
    return graph.vertex_count > 0 and largest_scc_size(graph) == graph.vertex_count


def require_strongly_connected(graph: Any) -> None:
    """
    Fail fast if a graph is not strongly connected.

    Raises
    ------
    GraphNotIrreducibleError
        If the graph is empty or has more than one strongly connected component
    """
    size = largest_scc_size(graph)
    if graph.vertex_count == 0 or size != graph.vertex_count:
        raise GraphNotIrreducibleError(
            "Graph not irreducible: it is not strongly connected",
            vertex_count=graph.vertex_count,
            largest_component_size=size
        )


def reduce_to_largest_scc(graph: Any) -> int:
    """
    Remove every vertex and edge outside the largest strongly connected component.

    The graph is modified in place.

    Parameters
    ----------
    graph : WeightedGraph
        Graph to reduce

    Returns
    -------
    int
        Number of vertices removed
    """
    vertex_count = graph.vertex_count
    with LoggingTimer("reduce_to_largest_scc", {"vertices": vertex_count}):
        keep = largest_strongly_connected_component(graph)
        for source, target in graph.edges:
            if source not in keep or target not in keep:
                graph.remove_edge(source, target)

    removed = vertex_count - graph.vertex_count
    logger.info(f"Reduced graph to largest strongly connected component: "
                f"{vertex_count} -> {graph.vertex_count} vertices")
    return removed
