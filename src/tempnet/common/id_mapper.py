"""
Node ID mapping between tempnet vertices and NetworkIt node indices.

Vertices of a ``WeightedGraph`` are arbitrary hashable objects: node names
for first-order graphs, ``(source, target)`` tuples for second-order graphs.
NetworkIt needs consecutive integer node IDs (0, 1, 2, ...). ``IDMapper``
keeps the bidirectional mapping so that NetworkIt algorithms (strongly
connected components) can run on a copy of a graph and their results can be
translated back to the original vertices.
"""

from typing import Any, Dict, Iterable, List


class IDMapper:
    """
    Bidirectional mapping between vertices and NetworkIt node indices.

    Attributes
    ----------
    original_to_internal : Dict[Any, int]
        Maps vertices to NetworkIt node indices (0, 1, 2, ...)
    internal_to_original : Dict[int, Any]
        Maps NetworkIt node indices to vertices

    Examples
    --------
    >>> mapper = IDMapper.from_vertices(["a", "b", ("a", "b")])
    >>> mapper.get_internal(("a", "b"))
    2
    >>> mapper.get_original(0)
    'a'

    Notes
    -----
    Thread-safe for read operations, not thread-safe for modifications.
    """

    def __init__(self) -> None:
        self.original_to_internal: Dict[Any, int] = {}
        self.internal_to_original: Dict[int, Any] = {}

    @classmethod
    def from_vertices(cls, vertices: Iterable[Any]) -> 'IDMapper':
        """
        Create a mapper assigning consecutive indices in iteration order.

        Parameters
        ----------
        vertices : Iterable[Any]
            Distinct hashable vertices

        Returns
        -------
        IDMapper
            Mapper with indices 0..n-1
        """
        mapper = cls()
        for internal_id, vertex in enumerate(vertices):
            mapper.add_mapping(vertex, internal_id)
        return mapper

    def get_internal(self, original_id: Any) -> int:
        """
        Get the NetworkIt index of a vertex.

        Raises
        ------
        KeyError
            If the vertex is not mapped
        """
        try:
            return self.original_to_internal[original_id]
        except KeyError:
            raise KeyError(f"Original ID '{original_id}' not found in mapping")

    def get_original(self, internal_id: int) -> Any:
        """
        Get the vertex behind a NetworkIt index.

        Raises
        ------
        KeyError
            If the index is not mapped
        TypeError
            If internal_id is not an integer
        """
        if not isinstance(internal_id, int):
            raise TypeError(f"Internal ID must be integer, got {type(internal_id)}")

        try:
            return self.internal_to_original[internal_id]
        except KeyError:
            raise KeyError(f"Internal ID {internal_id} not found in mapping")

    def get_original_batch(self, internal_ids: Iterable[int]) -> List[Any]:
        """Translate a batch of NetworkIt indices back to vertices."""
        return [self.get_original(int(internal_id)) for internal_id in internal_ids]

    def add_mapping(self, original_id: Any, internal_id: int) -> None:
        """
        Add a new mapping pair.

        Raises
        ------
        ValueError
            If either side is already mapped, or internal_id is negative
        TypeError
            If internal_id is not an integer or original_id is not hashable
        """
        if not isinstance(internal_id, int):
            raise TypeError(f"Internal ID must be integer, got {type(internal_id)}")

        if internal_id < 0:
            raise ValueError(f"Internal ID must be non-negative, got {internal_id}")

        try:
            hash(original_id)
        except TypeError:
            raise TypeError(f"Original ID must be hashable, got {type(original_id)}")

        if original_id in self.original_to_internal:
            raise ValueError(f"Original ID '{original_id}' already mapped")
        if internal_id in self.internal_to_original:
            raise ValueError(f"Internal ID {internal_id} already mapped")

        self.original_to_internal[original_id] = internal_id
        self.internal_to_original[internal_id] = original_id

    def size(self) -> int:
        """Return the number of mapped vertices."""
        return len(self.original_to_internal)

    def has_original(self, original_id: Any) -> bool:
        return original_id in self.original_to_internal

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, item: Any) -> bool:
        return self.has_original(item)

    def __repr__(self) -> str:
        return f"IDMapper(size={self.size()})"
