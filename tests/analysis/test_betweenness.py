"""
Tests for betweenness preference computations.
"""

import numpy as np
import polars as pl
import pytest

from tempnet.analysis.betweenness import (
    betweenness_preference_matrix,
    normalize_matrix,
    mutual_information,
    betweenness_preference,
    uncorrelated_matrix,
    betweenness_preference_distribution,
    write_betweenness_distribution
)
from tempnet.timeseries.edge_log import TemporalEdgeLog
from tempnet.common.exceptions import ValidationError, ConfigurationError

REFERENCE_PREFERENCE_E = 1.2954618442383219


class TestBetweennessPreferenceMatrix:
    """Test raw and normalized matrices on the reference network."""

    def test_indices_follow_aggregate_order(self, reference_network):
        _, pred_index, succ_index = betweenness_preference_matrix(reference_network, "e")
        assert list(pred_index) == ["c", "a", "f", "g", "b"]
        assert list(succ_index) == ["f", "g", "b"]
        assert pred_index["g"] == 3

    def test_raw_matrix(self, reference_network):
        B, pred, succ = betweenness_preference_matrix(reference_network, "e")

        assert B.shape == (5, 3)
        assert B[pred["c"], succ["f"]] == pytest.approx(5.5)
        assert B[pred["a"], succ["g"]] == pytest.approx(2.0)
        assert B[pred["f"], succ["b"]] == pytest.approx(1.0)
        assert B[pred["g"], succ["f"]] == pytest.approx(0.5)
        assert B[pred["b"], succ["g"]] == pytest.approx(1.0)
        assert B.sum() == pytest.approx(10.0)
        assert B[pred["c"], succ["g"]] == 0.0

    def test_normalized_matrix(self, reference_network):
        P, pred, succ = betweenness_preference_matrix(reference_network, "e", normalized=True)

        assert P.sum() == pytest.approx(1.0)
        assert P[pred["c"], succ["f"]] == pytest.approx(11 / 20)
        assert P[pred["f"], succ["b"]] == pytest.approx(1 / 10)
        assert P[pred["g"], succ["f"]] == pytest.approx(1 / 20)
        assert P[pred["a"], succ["g"]] == pytest.approx(2 / 10)
        assert P[pred["b"], succ["g"]] == pytest.approx(1 / 10)

    def test_node_with_loop_two_path(self, reference_network):
        P, pred, succ = betweenness_preference_matrix(reference_network, "f", normalized=True)
        assert P.shape == (1, 1)
        assert P[pred["e"], succ["e"]] == pytest.approx(1.0)

    def test_node_without_two_paths(self, reference_network):
        B, pred, succ = betweenness_preference_matrix(reference_network, "g")
        assert B.shape == (1, 1)
        assert B.sum() == 0.0

    def test_source_only_node(self, reference_network):
        B, pred, succ = betweenness_preference_matrix(reference_network, "a")
        assert B.shape == (0, 1)
        assert pred == {}

    def test_unknown_node(self, reference_network):
        with pytest.raises(ValidationError, match="not part of the aggregate network"):
            betweenness_preference_matrix(reference_network, "z")

    def test_extracts_dirty_log(self, reference_network):
        betweenness_preference_matrix(reference_network, "e")
        reference_network.add_edge(22, "f", "z")
        _, _, succ = betweenness_preference_matrix(reference_network, "f")
        assert "z" in succ


class TestNormalizeMatrix:
    """Test normalization helper."""

    def test_sums_to_one(self):
        P = normalize_matrix(np.array([[1.0, 3.0], [0.0, 4.0]]))
        np.testing.assert_allclose(P, [[0.125, 0.375], [0.0, 0.5]])

    def test_zero_matrix(self):
        P = normalize_matrix(np.zeros((2, 3)))
        assert P.shape == (2, 3)
        assert not P.any()

    def test_empty_matrix(self):
        assert normalize_matrix(np.zeros((0, 2))).shape == (0, 2)


class TestMutualInformation:
    """Test mutual information of joint distributions."""

    def test_independent_distribution(self):
        P = np.outer([0.5, 0.5], [0.25, 0.75])
        assert mutual_information(P) == 0.0

    def test_perfect_correlation(self):
        P = np.array([[0.5, 0.0], [0.0, 0.5]])
        assert mutual_information(P) == pytest.approx(1.0)

    def test_zero_and_empty_matrices(self):
        assert mutual_information(np.zeros((2, 2))) == 0.0
        assert mutual_information(np.zeros((0, 3))) == 0.0

    def test_rounding_residue_is_zero(self):
        """Outer products of uneven marginals leave residue of order 1e-16."""
        P = np.outer(np.array([5.5, 2, 2, 0.5, 1]) / 11, np.array([7, 3, 1]) / 11)
        assert mutual_information(P) == 0.0

    def test_small_dependence_is_kept(self):
        P = np.array([[0.2501, 0.2499], [0.2499, 0.2501]])
        assert mutual_information(P) > 0.0

    def test_never_negative(self):
        P = np.outer([1 / 3, 1 / 3, 1 / 3], [1 / 7] * 7)
        assert mutual_information(P) >= 0.0


class TestBetweennessPreference:
    """Test I(x) on example networks."""

    def test_reference_node(self, reference_network):
        assert betweenness_preference(reference_network, "e") == pytest.approx(
            REFERENCE_PREFERENCE_E, abs=1e-12
        )

    @pytest.mark.parametrize("node", ["f", "g", "b"])
    def test_nodes_without_choice(self, reference_network, node):
        assert betweenness_preference(reference_network, node) == 0.0

    def test_biased_node(self, biased_network):
        expected = -(0.75 * np.log2(0.75) + 0.25 * np.log2(0.25))
        assert betweenness_preference(biased_network, "x") == pytest.approx(expected)

    def test_reverse_time_reference(self):
        """Reversing time swaps the roles of predecessors and successors."""
        forward = TemporalEdgeLog()
        backward = TemporalEdgeLog(reverse_time=True)
        for time, source, target in [(1, "a", "x"), (2, "x", "b"),
                                     (3, "c", "x"), (4, "x", "d")]:
            forward.add_edge(time, source, target)
            backward.add_edge(time, source, target)

        assert betweenness_preference(forward, "x") == pytest.approx(1.0)
        assert betweenness_preference(backward, "x") == pytest.approx(1.0)
        _, pred, _ = betweenness_preference_matrix(backward, "x")
        assert set(pred) == {"b", "d"}


class TestUncorrelatedMatrix:
    """Test the betweenness preference matrix expected from weights alone."""

    def test_reference_node(self, reference_network):
        aggregate = reference_network.aggregate_network
        Q, pred, succ = uncorrelated_matrix(aggregate, "e")

        assert Q.shape == (5, 3)
        assert Q.sum() == pytest.approx(1.0)
        assert Q[pred["c"], succ["f"]] == pytest.approx(5.5 / 11 * 7 / 11)
        assert Q[pred["g"], succ["b"]] == pytest.approx(0.5 / 11 * 1 / 11)
        assert Q[pred["a"], succ["g"]] == pytest.approx(2 / 11 * 3 / 11)

    def test_zero_preference(self, reference_network):
        Q, _, _ = uncorrelated_matrix(reference_network.aggregate_network, "e")
        assert mutual_information(Q) == 0.0

    def test_unknown_node(self, reference_network):
        with pytest.raises(ValidationError):
            uncorrelated_matrix(reference_network.aggregate_network, "z")


class TestBetweennessPreferenceDistribution:
    """Test the distribution over all nodes."""

    def test_reference_network(self, reference_network):
        dist = betweenness_preference_distribution(reference_network, n_jobs=2)

        assert isinstance(dist, pl.DataFrame)
        assert dist.columns == ["node", "betweenness_preference"]
        values = dict(zip(dist["node"].to_list(), dist["betweenness_preference"].to_list()))
        assert set(values) == {"e", "f", "g", "b"}
        assert values["e"] == pytest.approx(REFERENCE_PREFERENCE_E)
        assert values["f"] == 0.0

    def test_single_worker_matches_parallel(self, reference_network):
        serial = betweenness_preference_distribution(reference_network, n_jobs=1)
        parallel = betweenness_preference_distribution(reference_network, n_jobs=-1)
        assert serial.sort("node").equals(parallel.sort("node"))

    def test_empty_log(self):
        dist = betweenness_preference_distribution(TemporalEdgeLog())
        assert dist.height == 0

    def test_mixed_node_identifiers(self):
        log = TemporalEdgeLog.from_edge_sequence([(0, 1), (1, "x"), ("x", 2)])
        dist = betweenness_preference_distribution(log, n_jobs=1)

        assert dist.height == 2
        assert dist["node"].dtype == pl.Object
        assert set(dist["node"].to_list()) == {1, "x"}
        assert dist["betweenness_preference"].to_list() == [0.0, 0.0]

    def test_integer_node_identifiers_keep_type(self):
        log = TemporalEdgeLog.from_edge_sequence([(0, 1), (1, 2), (2, 3)])
        dist = betweenness_preference_distribution(log, n_jobs=1)
        assert dist["node"].dtype == pl.Int64
        assert sorted(dist["node"].to_list()) == [1, 2]

    @pytest.mark.parametrize("n_jobs", [0, -2])
    def test_invalid_n_jobs(self, reference_network, n_jobs):
        with pytest.raises(ConfigurationError):
            betweenness_preference_distribution(reference_network, n_jobs=n_jobs)


class TestWriteBetweennessDistribution:
    """Test the queue-backed distribution writer."""

    def test_writes_one_line_per_node(self, tmp_path, reference_network):
        path = tmp_path / "bp.txt"
        written = write_betweenness_distribution(reference_network, str(path), n_jobs=3)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert written == 4
        assert len(lines) == 4
        values = dict(line.split(" ") for line in lines)
        assert values["e"] == f"{REFERENCE_PREFERENCE_E:.6f}"
        assert values["g"] == "0.000000"

    def test_empty_log(self, tmp_path):
        path = tmp_path / "bp.txt"
        assert write_betweenness_distribution(TemporalEdgeLog(), str(path)) == 0
        assert path.read_text(encoding="utf-8") == ""

    def test_invalid_n_jobs(self, tmp_path, reference_network):
        with pytest.raises(ConfigurationError):
            write_betweenness_distribution(reference_network, str(tmp_path / "bp.txt"), n_jobs=0)
