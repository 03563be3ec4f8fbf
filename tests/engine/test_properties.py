# tests/engine/test_properties.py
"""Tests for the property flattener and its cycle guard."""

import datetime
import weakref

import numpy as np
import pytest

from tests.fixtures.models import Address, Color, Node


class TestLeafFlattening:
    """Scalars flatten to strings."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (5, "5"),
            (1.5, "1.5"),
            (True, "true"),
            (np.bool_(False), "false"),
            (Color.RED, "RED"),
            (datetime.date(2024, 1, 2), "2024-01-02"),
            (b"raw", "raw"),
            (np.int32(4), "4"),
            ("text", "text"),
        ],
    )
    def test_leaf_values(self, property_engine, value, expected) -> None:  # type: ignore[no-untyped-def]
        """Enums by name, booleans lower-case, dates in ISO format."""
        assert property_engine.convert(value) == expected

    def test_none_stays_none(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """None is not flattened."""
        assert property_engine.convert(None) is None


class TestContainerFlattening:
    """Maps, collections and arrays."""

    def test_map_keys_become_text(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """Keys are stringified and values flattened recursively."""
        assert property_engine.convert({"a": 1, 2: [1, 2]}) == {"a": "1", "2": ["1", "2"]}

    def test_arrays_become_lists(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """Tuples and ndarrays flatten to lists."""
        assert property_engine.convert((1, "x")) == ["1", "x"]
        assert property_engine.convert(np.array([1, 2])) == ["1", "2"]

    def test_sets_become_lists(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """Any element iterable flattens to a list."""
        assert property_engine.convert({7}) == ["7"]

    def test_weak_reference_to_referent(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """A live weak reference flattens as its referent."""
        address = Address(city="Oslo")

        assert property_engine.convert(weakref.ref(address)) == {"city": "Oslo", "zip_code": ""}

    def test_pydantic_model_becomes_map(self) -> None:
        """A pydantic model flattens by field, like any other record."""
        from tests.fixtures.models import UserModel
        from transmute.engine.pipelines import to_properties_map

        assert to_properties_map(UserModel(name="ada", age=3)) == {"name": "ada", "age": "3"}


class TestCycles:
    """Only true cycles are replaced by the sentinel."""

    def test_record_cycle(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """A cycle back to an object on the path is marked with its type name."""
        first = Node()
        second = Node(next=first)
        first.next = second

        assert property_engine.convert(first) == {"next": {"next": {"_cyclic_ref": "Node"}}}

    def test_shared_object_converted_twice(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """An object reached through two independent paths is not a cycle."""
        address = Address(city="Rome")

        result = property_engine.convert({"home": address, "work": address})

        assert result["home"] == {"city": "Rome", "zip_code": ""}
        assert result["work"] == result["home"]

    def test_self_containing_list(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """A list containing itself marks the inner occurrence."""
        items: list = []
        items.append(items)

        assert property_engine.convert(items) == [["_cyclic_ref"]]

    def test_self_containing_dict(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """A dict containing itself marks the inner occurrence."""
        mapping: dict = {}
        mapping["self"] = mapping

        assert property_engine.convert(mapping) == {"self": {"_cyclic_ref": "dict"}}

    def test_context_visit_unwinds(self) -> None:
        """An object leaves the path once its conversion finishes."""
        from transmute.engine.properties import CyclicReferencesContext

        ctx = CyclicReferencesContext()
        marker = object()

        assert ctx.visit(marker, lambda: marker in ctx, lambda: "cycle") is True
        assert marker not in ctx


class TestPropertyConversionEngine:
    """Strategy selection and caching."""

    def test_strategy_cached_per_class(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """The same strategy instance is returned for a class."""
        from transmute.engine.properties import PropertyLeafStrategy

        strategy = property_engine.strategy_for(int)

        assert isinstance(strategy, PropertyLeafStrategy)
        assert property_engine.strategy_for(int) is strategy

    def test_strategy_order(self, property_engine) -> None:  # type: ignore[no-untyped-def]
        """Each value family has its strategy."""
        from transmute.engine.properties import (
            PropertyArrayStrategy,
            PropertyBeanStrategy,
            PropertyCollectionStrategy,
            PropertyMapStrategy,
        )

        assert isinstance(property_engine.strategy_for(dict), PropertyMapStrategy)
        assert isinstance(property_engine.strategy_for(list), PropertyCollectionStrategy)
        assert isinstance(property_engine.strategy_for(tuple), PropertyArrayStrategy)
        assert isinstance(property_engine.strategy_for(Address), PropertyBeanStrategy)

    def test_unsupported_class_raises(self) -> None:
        """Without a matching strategy the engine raises."""
        from transmute.contracts.errors import PropertyConversionError
        from transmute.engine.properties import PropertyConversionEngine, PropertyLeafStrategy

        engine = PropertyConversionEngine([PropertyLeafStrategy()])

        with pytest.raises(PropertyConversionError):
            engine.convert(object())

    def test_default_is_shared(self) -> None:
        """default() returns one engine."""
        from transmute.engine.properties import PropertyConversionEngine

        assert PropertyConversionEngine.default() is PropertyConversionEngine.default()

    def test_shared_engine_across_threads(self) -> None:
        """Threads flattening through default() agree and share one strategy per class."""
        from concurrent.futures import ThreadPoolExecutor

        from transmute.engine.properties import PropertyConversionEngine

        engine = PropertyConversionEngine.default()
        values = [Address(city="Lima"), {"n": 1}, [1.5, None], (Color.GREEN,), datetime.date(2024, 5, 6)]
        expected = [
            {"city": "Lima", "zip_code": ""},
            {"n": "1"},
            ["1.5", None],
            ["GREEN"],
            "2024-05-06",
        ]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: [engine.convert(value) for value in values], range(64)))
            classes = [Address, dict, list, tuple] * 16
            strategies = list(pool.map(engine.strategy_for, classes))

        assert all(result == expected for result in results)
        assert all(strategy is engine.strategy_for(cls) for cls, strategy in zip(classes, strategies, strict=True))
