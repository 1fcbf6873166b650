"""
tempnet: betweenness preference and null models for temporal networks.

A temporal network is a sequence of time-stamped directed interactions.
tempnet extracts the two-paths (a -> b at one time step, b -> c at the next)
of such a network, weights them, and builds first- and second-order
aggregate networks from them. On top of that it measures how strongly a
node's outgoing interactions depend on its incoming ones (betweenness
preference) and samples randomized reference networks that keep or destroy
this dependence.

Main entry points:
- ``TemporalEdgeLog`` and ``load_temporal_network`` / ``save_temporal_network``
- ``betweenness_preference`` and ``betweenness_preference_distribution``
- ``NullModelSampler``
"""

__version__ = "0.1.0"

from .common.exceptions import (
    TempNetError,
    ValidationError,
    DataFormatError,
    ConfigurationError,
    ComputationError,
    GraphNotIrreducibleError,
    SamplingError,
    EmptyPoolError,
    SamplingInvariantError
)
from .common.logging_config import setup_logging, get_logger
from .network import WeightedGraph
from .timeseries import (
    TemporalEdgeLog,
    TwoPathExtraction,
    extract_two_paths,
    load_temporal_network,
    save_temporal_network,
    aggregates_match
)
from .analysis import (
    betweenness_preference,
    betweenness_preference_matrix,
    betweenness_preference_distribution
)
from .nullmodels import NullModelSampler
