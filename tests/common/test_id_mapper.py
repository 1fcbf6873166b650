"""
Tests for the IDMapper class.

Vertices of weighted graphs are node names or (source, target) edge tokens;
the mapper translates both to consecutive NetworkIt indices and back.
"""

import numpy as np
import pytest

from tempnet.common.id_mapper import IDMapper


class TestIDMapperBasic:
    """Test basic IDMapper functionality."""

    def test_empty_mapper(self):
        mapper = IDMapper()

        assert mapper.size() == 0
        assert len(mapper) == 0
        assert repr(mapper) == "IDMapper(size=0)"

    def test_add_single_mapping(self):
        mapper = IDMapper()
        mapper.add_mapping("e", 0)

        assert mapper.size() == 1
        assert mapper.get_internal("e") == 0
        assert mapper.get_original(0) == "e"
        assert mapper.has_original("e")
        assert "e" in mapper

    def test_from_vertices(self):
        """Indices follow iteration order, tuple vertices included."""
        mapper = IDMapper.from_vertices(["a", "b", ("a", "b")])

        assert mapper.size() == 3
        assert mapper.get_internal("a") == 0
        assert mapper.get_internal(("a", "b")) == 2
        assert mapper.get_original(2) == ("a", "b")

    def test_mapping_consistency(self):
        vertices = ["c", "e", ("c", "e"), ("e", "f"), 42]
        mapper = IDMapper.from_vertices(vertices)

        for internal, original in enumerate(vertices):
            assert mapper.get_original(mapper.get_internal(original)) == original
            assert mapper.get_internal(mapper.get_original(internal)) == internal

    def test_get_original_batch(self):
        mapper = IDMapper.from_vertices(["x", "y", "z"])
        assert mapper.get_original_batch([2, 0]) == ["z", "x"]

    def test_get_original_batch_numpy_indices(self):
        """NetworkIt and numpy return numpy integers."""
        mapper = IDMapper.from_vertices(["x", "y", "z"])
        assert mapper.get_original_batch(np.array([1, 2])) == ["y", "z"]


class TestIDMapperErrors:
    """Test error conditions and edge cases."""

    def test_get_internal_not_found(self):
        mapper = IDMapper.from_vertices(["e"])

        with pytest.raises(KeyError, match="Original ID 'q' not found"):
            mapper.get_internal("q")

    def test_get_original_not_found(self):
        mapper = IDMapper.from_vertices(["e"])

        with pytest.raises(KeyError, match="Internal ID 99 not found"):
            mapper.get_original(99)

    def test_get_original_invalid_type(self):
        mapper = IDMapper()

        with pytest.raises(TypeError, match="Internal ID must be integer"):
            mapper.get_original("not_an_int")

        with pytest.raises(TypeError, match="Internal ID must be integer"):
            mapper.get_original(3.14)

    def test_add_mapping_duplicate_original(self):
        mapper = IDMapper()
        mapper.add_mapping("e", 0)

        with pytest.raises(ValueError, match="Original ID 'e' already mapped"):
            mapper.add_mapping("e", 1)

    def test_add_mapping_duplicate_internal(self):
        mapper = IDMapper()
        mapper.add_mapping("e", 0)

        with pytest.raises(ValueError, match="Internal ID 0 already mapped"):
            mapper.add_mapping("f", 0)

    def test_from_vertices_rejects_duplicates(self):
        with pytest.raises(ValueError, match="already mapped"):
            IDMapper.from_vertices(["a", "b", "a"])

    def test_add_mapping_negative_internal(self):
        mapper = IDMapper()

        with pytest.raises(ValueError, match="Internal ID must be non-negative"):
            mapper.add_mapping("e", -1)

    def test_add_mapping_invalid_internal_type(self):
        mapper = IDMapper()

        with pytest.raises(TypeError, match="Internal ID must be integer"):
            mapper.add_mapping("e", "0")

    def test_add_mapping_unhashable_original(self):
        mapper = IDMapper()

        # Lists are not hashable, tuples are
        with pytest.raises(TypeError, match="Original ID must be hashable"):
            mapper.add_mapping(["a", "b"], 0)
        mapper.add_mapping(("a", "b"), 0)
        assert ("a", "b") in mapper
