"""
Tests for the tempnet exception hierarchy.
"""

import pytest

from tempnet.common.exceptions import (
    TempNetError,
    ValidationError,
    GraphConstructionError,
    GraphNotIrreducibleError,
    ConfigurationError,
    ComputationError,
    SamplingError,
    EmptyPoolError,
    SamplingInvariantError,
    DataFormatError,
    validate_parameter,
    require_positive
)


class TestHierarchy:
    """Test inheritance between exception classes."""

    @pytest.mark.parametrize("exc_class", [
        ValidationError, GraphConstructionError, GraphNotIrreducibleError,
        ConfigurationError, ComputationError, SamplingError, EmptyPoolError,
        SamplingInvariantError, DataFormatError
    ])
    def test_all_derive_from_base(self, exc_class):
        assert issubclass(exc_class, TempNetError)

    def test_sampling_errors_are_computation_errors(self):
        assert issubclass(EmptyPoolError, SamplingError)
        assert issubclass(SamplingInvariantError, SamplingError)
        assert issubclass(SamplingError, ComputationError)

    def test_expected_and_programmer_errors_are_distinct(self):
        assert not issubclass(EmptyPoolError, SamplingInvariantError)
        assert not issubclass(SamplingInvariantError, EmptyPoolError)

    def test_irreducibility_and_format_errors_are_validation_errors(self):
        assert issubclass(GraphNotIrreducibleError, ValidationError)
        assert issubclass(DataFormatError, ValidationError)


class TestTempNetError:
    """Test message, details, context and cause handling."""

    def test_plain_message(self):
        error = TempNetError("Extraction failed")
        assert str(error) == "Extraction failed"
        assert error.details == {}
        assert error.context == {}

    def test_details_in_message(self):
        error = TempNetError("Invalid network", details={"time_steps": 0})
        assert "time_steps=0" in str(error)

    def test_long_collections_truncated(self):
        error = TempNetError("Too many", details={"nodes": list(range(100))})
        assert "<list with 100 items>" in str(error)

    def test_cause_is_chained(self):
        cause = KeyError("x")
        error = TempNetError("Wrapped", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_add_context(self):
        error = TempNetError("Failed").add_context(node="e", time=3)
        assert error.context == {"node": "e", "time": 3}

    def test_debug_info(self):
        info = TempNetError("Failed", details={"a": 1}).get_debug_info()
        assert info["exception_type"] == "TempNetError"
        assert info["message"] == "Failed"
        assert info["details"] == {"a": 1}
        assert info["cause"] is None


class TestSpecificErrors:
    """Test the structured fields of specific errors."""

    def test_validation_error_field(self):
        error = ValidationError("must be an integer", field="time", value="t1")
        assert error.field == "time"
        assert error.details["invalid_value"] == "t1"
        assert "field 'time'" in str(error)

    def test_graph_not_irreducible(self):
        error = GraphNotIrreducibleError(
            "Graph not irreducible", vertex_count=10, largest_component_size=7
        )
        assert error.vertex_count == 10
        assert error.largest_component_size == 7
        assert error.details["largest_component_size"] == 7
        assert error.field == "graph"

    def test_configuration_error_lists_options(self):
        error = ConfigurationError(
            "Invalid mode", parameter="mode", value="nodes",
            valid_options=["twopaths", "edges"]
        )
        assert "Valid options for 'mode'" in str(error)
        assert error.details["invalid_value"] == "nodes"

    def test_sampling_error_context(self):
        error = EmptyPoolError(
            "Nothing to draw", mode="edges", attempts=5, operation="shuffle_edges"
        )
        assert error.mode == "edges"
        assert error.attempts == 5
        assert error.operation == "shuffle_edges"
        assert error.error_type == "sampling"
        assert error.details["attempts"] == 5

    def test_data_format_error(self):
        error = DataFormatError(
            "Bad weight", format_type="weighted edge list",
            file_path="graph.edges", line_number=4
        )
        assert error.details["line_number"] == 4
        assert error.details["file_path"] == "graph.edges"

    def test_graph_construction_error_context(self):
        error = GraphConstructionError(
            "Failed", graph_type="second_order", node_count=3, operation="add_edge"
        )
        assert error.context["graph_type"] == "second_order"
        assert error.context["node_count"] == 3


class TestValidationHelpers:
    """Test validate_parameter and require_positive."""

    def test_validate_parameter_accepts_valid(self):
        validate_parameter("edges", ["twopaths", "edges"], "mode")

    def test_validate_parameter_rejects_invalid(self):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_parameter("nodes", ["twopaths", "edges"], "mode", "shuffle")
        assert exc_info.value.parameter == "mode"
        assert exc_info.value.function == "shuffle"

    def test_require_positive(self):
        require_positive(1, "precision")
        with pytest.raises(ConfigurationError):
            require_positive(0, "precision")
        with pytest.raises(ConfigurationError):
            require_positive(-1, "precision")

    def test_require_positive_allow_zero(self):
        require_positive(0, "length", allow_zero=True)
        with pytest.raises(ConfigurationError):
            require_positive(-1, "length", allow_zero=True)
