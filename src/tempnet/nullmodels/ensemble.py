"""
Null models for temporal networks.

``NullModelSampler`` generates random temporal networks that keep selected
statistics of an empirical network while destroying the rest:

- ``shuffle_two_paths`` redraws the observed two-paths in random order. It
  preserves the weighted aggregate network and the betweenness preference
  of every node, and destroys all other temporal correlations.
- ``shuffle_edges`` pairs incoming and outgoing halves of two-paths at
  random. It preserves the weighted aggregate network but removes
  betweenness preference.

Both models sample with replacement from a finite pool in which every item
appears an integer number of times proportional to its (real-valued) weight.
Weights are approximated by mixed fractions whose denominators divide
``precision``; scaling by the least common multiple L of these denominators
turns every weight w into the replica count ``round(w * L)``.
"""

import math
from collections import defaultdict
from typing import Dict, Hashable, List, Optional, Tuple

import numpy as np

from ..timeseries.edge_log import TemporalEdgeLog
from ..analysis.betweenness import betweenness_preference_matrix
from ..common.rational import round_to_mixed_fraction, lcm_of
from ..common.exceptions import (
    EmptyPoolError,
    SamplingInvariantError,
    require_positive,
    validate_parameter
)
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer

logger = get_logger(__name__)

DEFAULT_PRECISION = 1000
DEFAULT_MAX_ATTEMPTS = 10000
SHUFFLE_MODES = ["twopaths", "edges"]

Edge = Tuple[Hashable, Hashable]
TwoPath = Tuple[Hashable, Hashable, Hashable]


class NullModelSampler:
    """
    Sampler of randomized temporal networks.

    Pools are built from the log's two-paths on first use and cached on the
    sampler. Later changes to the log are not reflected; create a new sampler
    instead.

    Parameters
    ----------
    log : TemporalEdgeLog
        Empirical temporal network
    precision : int, default 1000
        Resolution of the rational approximation of weights. Pool sizes grow
        at most linearly with it.
    seed : int, optional
        Seed of the sampler's random generator
    max_attempts : int, default 10000
        Number of incoming halves ``shuffle_edges`` draws for one pair before
        giving up when no outgoing half continues them

    Raises
    ------
    ConfigurationError
        If precision or max_attempts is not positive

    Examples
    --------
    >>> sampler = NullModelSampler(log, seed=42)
    >>> shuffled = sampler.shuffle_two_paths(length=50000)
    >>> randomized = sampler.shuffle_edges(length=50000)
    >>> betweenness_preference(shuffled, "e") > betweenness_preference(randomized, "e")
    True
    """

    def __init__(
        self,
        log: TemporalEdgeLog,
        precision: int = DEFAULT_PRECISION,
        seed: Optional[int] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS
    ) -> None:
        require_positive(precision, "precision")
        require_positive(max_attempts, "max_attempts")

        self.log = log
        self.precision = precision
        self.max_attempts = max_attempts
        self._rng = np.random.default_rng(seed)

        self._matrices: Optional[Dict[Hashable, Tuple[np.ndarray, Dict, Dict]]] = None
        self._two_path_pool: Optional[List[TwoPath]] = None
        self._in_pool: Optional[List[Edge]] = None
        self._out_pool_by_node: Optional[Dict[Hashable, List[Edge]]] = None

    # ------------------------------------------------------------------
    # Pools
    # ------------------------------------------------------------------

    def _scale(self, values: List[float]) -> int:
        """Least common multiple of the denominators approximating the values."""
        scale = lcm_of(
            round_to_mixed_fraction(value, self.precision).denominator
            for value in values
        )
        if scale > self.precision:
            raise SamplingInvariantError(
                f"Common denominator {scale} exceeds precision {self.precision}",
                operation="rational_scaling"
            )
        return scale

    @property
    def betweenness_matrices(self) -> Dict[Hashable, Tuple[np.ndarray, Dict, Dict]]:
        """Raw betweenness preference matrix with indices for every aggregate node."""
        if self._matrices is None:
            self._matrices = {
                x: betweenness_preference_matrix(self.log, x, normalized=False)
                for x in self.log.aggregate_network.vertices
            }
        return self._matrices

    @property
    def two_path_pool(self) -> List[TwoPath]:
        """Two-paths (p, x, s) replicated in proportion to the raw matrix entries."""
        if self._two_path_pool is None:
            matrices = self.betweenness_matrices
            scale = self._scale([
                float(value) for matrix, _, _ in matrices.values() for value in matrix.flat
            ])

            pool = []
            for x, (matrix, pred_index, succ_index) in matrices.items():
                for p, i in pred_index.items():
                    for s, j in succ_index.items():
                        pool.extend([(p, x, s)] * self._replicas(matrix[i, j], scale))
            self._two_path_pool = pool
            logger.debug(f"Two-path pool: {len(pool)} entries, scale {scale}")
        return self._two_path_pool

    @property
    def edge_pools(self) -> Tuple[List[Edge], Dict[Hashable, List[Edge]]]:
        """
        Incoming and outgoing halves of two-paths, replicated by two-path weight.

        Returns
        -------
        Tuple[List[Edge], Dict[node, List[Edge]]]
            Pool of incoming halves (p, x), and the pool of outgoing halves
            (x, s) grouped by x
        """
        if self._in_pool is None:
            weights = self.log.two_path_weights
            scale = self._scale(list(weights.values()))

            in_pool = []
            out_pool = defaultdict(list)
            for (p, x, s), weight in weights.items():
                replicas = self._replicas(weight, scale)
                in_pool.extend([(p, x)] * replicas)
                out_pool[x].extend([(x, s)] * replicas)

            self._in_pool = in_pool
            self._out_pool_by_node = dict(out_pool)
            logger.debug(f"Edge pools: {len(in_pool)} halves, scale {scale}")
        return self._in_pool, self._out_pool_by_node

    @staticmethod
    def _replicas(value: float, scale: int) -> int:
        if value < 0:
            raise SamplingInvariantError(
                f"Negative sampling weight {value}",
                operation="build_pool"
            )
        # round() resolves exact halves to the even neighbour
        return int(round(value * scale))

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def shuffle(self, mode: str = "twopaths", length: int = 0) -> TemporalEdgeLog:
        """
        Generate a randomized temporal network.

        Parameters
        ----------
        mode : str, default "twopaths"
            "twopaths" for ``shuffle_two_paths``, "edges" for ``shuffle_edges``
        length : int, default 0
            Minimum number of edges; 0 uses the mode's default

        Raises
        ------
        ConfigurationError
            If mode is unknown
        """
        validate_parameter(mode, SHUFFLE_MODES, "mode", "shuffle")
        if mode == "twopaths":
            return self.shuffle_two_paths(length)
        return self.shuffle_edges(length)

    def shuffle_two_paths(self, length: int = 0) -> TemporalEdgeLog:
        """
        Random sequence of the network's two-paths.

        Two-paths are drawn uniformly with replacement from the two-path
        pool; each draw (p, x, s) becomes the edges p -> x and x -> s at two
        consecutive time steps, starting at time 0.

        Parameters
        ----------
        length : int, default 0
            Minimum number of edges in the result (pairs are drawn until it
            is reached). 0 uses the number of time steps of the log.

        Returns
        -------
        TemporalEdgeLog
            Network with the same aggregate network and betweenness
            preferences as the log, up to sampling noise

        Raises
        ------
        EmptyPoolError
            If the log has no two-paths
        """
        require_positive(length, "length", allow_zero=True)
        log_function_entry("shuffle_two_paths", length=length, precision=self.precision)

        # Building the pool extracts (and prunes) the log first
        pool = self.two_path_pool
        length = length if length > 0 else self.log.length
        if not pool:
            raise EmptyPoolError(
                "Cannot shuffle two-paths of a network without two-paths",
                mode="twopaths",
                operation="shuffle_two_paths"
            )

        pairs = math.ceil(length / 2)
        output = TemporalEdgeLog()
        with LoggingTimer("shuffle_two_paths", {"pairs": pairs, "pool": len(pool)}):
            time = 0
            for index in self._rng.integers(len(pool), size=pairs):
                p, x, s = pool[index]
                output.add_edge(time, p, x)
                output.add_edge(time + 1, x, s)
                time += 2

        logger.info(f"Shuffled two-paths: {output.edge_count} edges from a pool of {len(pool)}")
        return output

    def shuffle_edges(self, length: int = 0) -> TemporalEdgeLog:
        """
        Random network pairing incoming and outgoing two-path halves.

        Each pair starts with an incoming half (p, x) drawn uniformly from
        the incoming pool, followed by an outgoing half drawn uniformly among
        the pooled outgoing halves that start at x.

        Parameters
        ----------
        length : int, default 0
            Minimum number of edges in the result. 0 uses the cumulative
            weight of the aggregate network.

        Returns
        -------
        TemporalEdgeLog
            Network with the same aggregate network as the log but without
            betweenness preference, up to sampling noise

        Raises
        ------
        EmptyPoolError
            If the log has no two-paths, or no continuation was found for
            ``max_attempts`` consecutive incoming halves
        """
        require_positive(length, "length", allow_zero=True)
        log_function_entry("shuffle_edges", length=length, precision=self.precision)

        in_pool, out_pool_by_node = self.edge_pools
        length = length if length > 0 else int(self.log.aggregate_network.cumulative_weight)
        if not in_pool:
            raise EmptyPoolError(
                "Cannot shuffle edges of a network without two-paths",
                mode="edges",
                operation="shuffle_edges"
            )

        pairs = math.ceil(length / 2)
        output = TemporalEdgeLog()
        with LoggingTimer("shuffle_edges", {"pairs": pairs, "pool": len(in_pool)}):
            time = 0
            for _ in range(pairs):
                p, x, s = self._draw_continued_pair(in_pool, out_pool_by_node)
                output.add_edge(time, p, x)
                output.add_edge(time + 1, x, s)
                time += 2

        logger.info(f"Shuffled edges: {output.edge_count} edges from a pool of {len(in_pool)}")
        return output

    def _draw_continued_pair(
        self,
        in_pool: List[Edge],
        out_pool_by_node: Dict[Hashable, List[Edge]]
    ) -> TwoPath:
        for _ in range(self.max_attempts):
            p, x = in_pool[self._rng.integers(len(in_pool))]
            continuations = out_pool_by_node.get(x)
            if continuations:
                _, s = continuations[self._rng.integers(len(continuations))]
                return p, x, s

        raise EmptyPoolError(
            f"No outgoing edge continues the drawn incoming edges after {self.max_attempts} attempts",
            mode="edges",
            attempts=self.max_attempts,
            operation="shuffle_edges"
        )

    def __repr__(self) -> str:
        return f"NullModelSampler(precision={self.precision}, log={self.log!r})"
