"""
Temporal networks.

- ``TemporalEdgeLog``: time-stamped edge multisets with cached two-path
  extraction
- ``extract_two_paths``: weighted two-path extraction and aggregate networks
- loading and saving of ``time node1 node2`` text files
"""

from .extraction import TwoPathExtraction, extract_two_paths
from .edge_log import TemporalEdgeLog, get_temporal_network_info
from .io import (
    CANDIDATE_DELIMITERS,
    detect_delimiter,
    load_temporal_network,
    save_temporal_network,
    aggregates_match
)
