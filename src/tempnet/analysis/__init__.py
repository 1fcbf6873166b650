"""
Betweenness preference analysis of temporal networks.
"""

from .betweenness import (
    DEFAULT_N_JOBS,
    betweenness_preference_matrix,
    normalize_matrix,
    mutual_information,
    betweenness_preference,
    uncorrelated_matrix,
    betweenness_preference_distribution,
    write_betweenness_distribution
)
