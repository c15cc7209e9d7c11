"""Tests for the building blocks behind Container.

These tests verify ServiceRegistry, TagIndex and ParameterStore on their own,
without the container facade.
"""

from unittest.mock import MagicMock

import pytest

from servicekit import (
    ParameterStore,
    ServiceAlreadyRegisteredError,
    ServiceDefinition,
    ServiceNotFoundError,
    ServiceRegistry,
    TagIndex,
)


class TestServiceRegistry:
    """Test suite for ServiceRegistry."""

    def test_register_returns_definition(self) -> None:
        """Verify registration stores and returns a definition."""
        # Arrange
        registry = ServiceRegistry()

        def factory(c: object) -> str:
            return "value"

        # Act
        definition = registry.register("service", factory, {"tag": {"a": 1}})

        # Assert
        assert definition == ServiceDefinition("service", factory, {"tag": {"a": 1}})
        assert list(registry.definitions()) == [definition]

    def test_get_passes_owner_to_factory(self) -> None:
        """Verify the object given to get() is passed to the factory."""
        registry = ServiceRegistry()
        factory = MagicMock(return_value="value")
        owner = object()
        registry.register("service", factory)

        assert registry.get("service", owner) == "value"
        assert registry.get("service", owner) == "value"
        factory.assert_called_once_with(owner)

    def test_duplicate_registration_rejected(self) -> None:
        """Verify IDs are unique."""
        registry = ServiceRegistry()
        registry.register("service", lambda c: None)

        with pytest.raises(ServiceAlreadyRegisteredError):
            registry.register("service", lambda c: None)

    def test_invalid_tags_leave_nothing_registered(self) -> None:
        """Verify a registration with malformed tags is not stored."""
        registry = ServiceRegistry()

        with pytest.raises(TypeError):
            registry.register("service", lambda c: None, {"tag": None})

        assert not registry.has("service")
        assert list(registry.definitions()) == []

    def test_factory_returning_none_is_cached(self) -> None:
        """Verify None is a valid service instance and is not recreated."""
        registry = ServiceRegistry()
        factory = MagicMock(return_value=None)
        registry.register("service", factory)

        assert registry.get("service", object()) is None
        assert registry.get("service", object()) is None
        factory.assert_called_once()

    def test_unknown_service_not_found(self) -> None:
        """Verify unknown IDs raise ServiceNotFoundError carrying the ID."""
        with pytest.raises(ServiceNotFoundError) as exc_info:
            ServiceRegistry().get("missing", object())

        assert exc_info.value.service_id == "missing"

    def test_cyclic_factories_end_in_recursion_error(self) -> None:
        """Verify cycles between factories are not detected by the registry."""
        registry = ServiceRegistry()

        class Owner:
            def get(self, service_id: str) -> object:
                return registry.get(service_id, self)

        registry.register("a", lambda c: c.get("b"))
        registry.register("b", lambda c: c.get("a"))

        with pytest.raises(RecursionError):
            registry.get("a", Owner())


class TestTagIndex:
    """Test suite for TagIndex."""

    def test_service_ids_for_tag(self) -> None:
        """Verify only services with the tag are returned."""
        index = TagIndex()
        index.add("one", {"command": {"name": "run"}})
        index.add("two", {})
        index.add("three", {"command": {"name": "report"}, "listener": {}})

        assert index.service_ids_for("command") == {
            "one": {"name": "run"},
            "three": {"name": "report"},
        }
        assert index.service_ids_for("listener") == {"three": {}}

    def test_attributes_copied_on_add(self) -> None:
        """Verify later changes to the given attributes are not reflected."""
        index = TagIndex()
        attributes = {"name": "run"}
        index.add("one", {"command": attributes})

        attributes["name"] = "changed"

        assert index.service_ids_for("command") == {"one": {"name": "run"}}

    def test_returned_attributes_do_not_change_index(self) -> None:
        """Verify changes to returned attributes are not reflected."""
        index = TagIndex()
        index.add("one", {"command": {"name": "run"}})

        index.service_ids_for("command")["one"]["name"] = "changed"

        assert index.service_ids_for("command") == {"one": {"name": "run"}}


class TestParameterStore:
    """Test suite for ParameterStore."""

    def test_initial_parameters_copied(self) -> None:
        """Verify the store does not share the initial mapping."""
        initial = {"foo": "bar"}
        store = ParameterStore(initial)

        store.set("baz", 1)

        assert initial == {"foo": "bar"}
        assert store.all() == {"foo": "bar", "baz": 1}

    def test_replace_discards_previous_parameters(self) -> None:
        """Verify replace() swaps the full set of parameters."""
        store = ParameterStore({"old": 1})

        store.replace({"new": 2})

        assert not store.has("old")
        assert store.get("new") == 2
