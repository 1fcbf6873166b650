"""
Weighted aggregate networks.

- ``WeightedGraph``: directed weighted graph used for first- and second-order
  aggregate networks
- strongly connected components (NetworkIt) and irreducibility checks
- weighted edge list export, transition matrices and the second-order
  null model
"""

from .weighted_graph import WeightedGraph
from .components import (
    strongly_connected_components,
    largest_strongly_connected_component,
    largest_scc_size,
    is_strongly_connected,
    require_strongly_connected,
    reduce_to_largest_scc
)
from .export import (
    format_vertex,
    parse_vertex,
    save_weighted_graph,
    load_weighted_graph,
    transition_matrix,
    write_transition_matrix,
    second_order_null_model,
    get_graph_info
)
