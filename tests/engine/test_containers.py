# tests/engine/test_containers.py
"""Tests for building containers of declared types."""

import collections.abc as abc
from collections import OrderedDict, defaultdict, deque
from typing import Any

import numpy as np
import pytest


class TestConcreteClasses:
    """Abstract declarations map to concrete defaults."""

    @pytest.mark.parametrize(
        ("declared", "expected"),
        [
            (list[int], list),
            (abc.Sequence[str], list),
            (abc.Iterable[str], list),
            (abc.Set[int], set),
            (abc.MutableSet[int], set),
            (frozenset[str], frozenset),
            (deque, deque),
            (dict, None),
            (tuple[int, ...], None),
            (str, None),
        ],
    )
    def test_collection_class(self, declared: Any, expected: type | None) -> None:
        """Iterable types resolve to an instantiable collection class."""
        from transmute.engine.containers import collection_class

        assert collection_class(declared) is expected

    @pytest.mark.parametrize(
        ("declared", "expected"),
        [
            (dict[str, int], dict),
            (abc.Mapping[str, int], dict),
            (abc.MutableMapping[str, int], dict),
            (OrderedDict, OrderedDict),
            (defaultdict, defaultdict),
            (list, None),
        ],
    )
    def test_map_class(self, declared: Any, expected: type | None) -> None:
        """Mapping types resolve to an instantiable mapping class."""
        from transmute.engine.containers import map_class

        assert map_class(declared) is expected


class TestBuilders:
    """new_collection, new_map and new_array."""

    def test_new_collection(self) -> None:
        """The declared collection is filled with the items."""
        from transmute.engine.containers import new_collection

        assert new_collection(deque[int], [1, 2]) == deque([1, 2])
        assert new_collection(abc.MutableSet[int], [1, 1]) == {1}
        assert new_collection(abc.Sequence[int], iter([3])) == [3]

    def test_new_map(self) -> None:
        """Mappings, including defaultdict, are filled with the entries."""
        from transmute.engine.containers import new_map

        result = new_map(defaultdict, [("a", 1)])

        assert isinstance(result, defaultdict)
        assert result == {"a": 1}
        assert new_map(abc.Mapping[str, int], [("b", 2)]) == {"b": 2}

    def test_new_array(self) -> None:
        """Tuples and ndarrays honour their declared element types."""
        from transmute.engine.containers import new_array

        assert new_array(tuple[int, ...], [1, 2]) == (1, 2)

        array = new_array(np.ndarray[Any, np.dtype[np.float64]], [1, 2])

        assert array.dtype == np.float64
        assert array.tolist() == [1.0, 2.0]


class TestArrayElementType:
    """Element types of declared arrays."""

    def test_homogeneous_tuple(self) -> None:
        """tuple[X, ...] yields X at every index."""
        from transmute.engine.containers import array_element_type

        assert array_element_type(tuple[int, ...]) is int
        assert array_element_type(tuple[int, ...], 5) is int

    def test_positional_tuple(self) -> None:
        """tuple[X, Y] is positional; out of range is Any."""
        from transmute.engine.containers import array_element_type

        assert array_element_type(tuple[int, str], 1) is str
        assert array_element_type(tuple[int, str], 2) is Any

    def test_ndarray_dtype(self) -> None:
        """The dtype argument gives the scalar type."""
        from transmute.engine.containers import array_element_type

        assert array_element_type(np.ndarray[Any, np.dtype[np.int32]]) is np.int32
        assert array_element_type(np.ndarray) is Any


class TestEmptyInstance:
    """empty_instance for unexpanded container fields."""

    @pytest.mark.parametrize(
        ("declared", "expected"),
        [
            (list[int], []),
            (set[str], set()),
            (dict[str, int], {}),
            (tuple[int, ...], ()),
            (int, None),
        ],
    )
    def test_empty_instance(self, declared: Any, expected: Any) -> None:
        """Containers are empty; other types yield None."""
        from transmute.engine.containers import empty_instance

        assert empty_instance(declared) == expected
