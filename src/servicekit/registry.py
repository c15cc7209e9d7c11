"""Service registry with lazily populated singleton instances."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from servicekit.definition import ServiceDefinition, ServiceFactory, TagAttributes
from servicekit.errors import ServiceAlreadyRegisteredError, ServiceNotFoundError

if TYPE_CHECKING:
    from servicekit.container import Container

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Holds service definitions and the instances realised from them.

    Each factory runs at most once: the first ``get()`` for an ID calls the
    factory and caches the result, later calls return the cached instance.
    Instances placed with ``set()`` bypass the factory entirely.
    """

    def __init__(self) -> None:
        """Initialise an empty registry."""
        self._definitions: dict[str, ServiceDefinition] = {}
        self._instances: dict[str, Any] = {}

    def register(
        self,
        service_id: str,
        factory: ServiceFactory,
        tags: Mapping[str, TagAttributes] | None = None,
    ) -> ServiceDefinition:
        """Register a factory for the given service ID.

        Args:
            service_id: Unique identifier of the service
            factory: Callable receiving the container and returning the service
            tags: Optional tag names mapped to their attributes

        Returns:
            The stored service definition

        Raises:
            ServiceAlreadyRegisteredError: If the ID already has a factory

        """
        if service_id in self._definitions:
            raise ServiceAlreadyRegisteredError(service_id)

        normalised = {
            tag: dict(attributes) for tag, attributes in (tags or {}).items()
        }
        definition = ServiceDefinition(service_id, factory, normalised)
        self._definitions[service_id] = definition
        logger.debug("Registered service: %s", service_id)
        return definition

    def get(self, service_id: str, container: Container) -> Any:  # noqa: ANN401
        """Return the instance for a service ID, creating it on first access.

        Factories may call back into the container to fetch their own
        dependencies. Cycles between factories are not detected and end in
        ``RecursionError``.

        Raises:
            ServiceNotFoundError: If there is neither an instance nor a factory

        """
        if service_id in self._instances:
            logger.debug("Returning cached service: %s", service_id)
            return self._instances[service_id]

        definition = self._definitions.get(service_id)
        if definition is None:
            raise ServiceNotFoundError(service_id)

        logger.debug("Creating service: %s", service_id)
        instance = definition.factory(container)
        self._instances[service_id] = instance
        return instance

    def has(self, service_id: str) -> bool:
        """Return True if a factory is registered for the service ID.

        Instances injected with ``set()`` alone are not reported.
        """
        return service_id in self._definitions

    def set(self, service_id: str, instance: Any) -> None:  # noqa: ANN401
        """Place a realised instance in the cache, overriding any factory."""
        self._instances[service_id] = instance
        logger.debug("Set service instance: %s", service_id)

    def definitions(self) -> Iterator[ServiceDefinition]:
        """Iterate over registered definitions in registration order."""
        return iter(self._definitions.values())
