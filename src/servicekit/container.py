"""Service container for dependency injection."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from servicekit.definition import ServiceFactory, TagAttributes
from servicekit.errors import (
    InvalidConfigurationError,
    OptionsResolutionError,
    ServiceTypeError,
)
from servicekit.loader import ExtensionIdentifier, ExtensionLoader
from servicekit.options import OptionsResolver
from servicekit.parameters import ParameterStore
from servicekit.registry import ServiceRegistry
from servicekit.tags import TagIndex

logger = logging.getLogger(__name__)


class Container:
    """Closure based dependency injection container.

    Services are registered as factories receiving the container and are
    created lazily on first access, after which the same instance is always
    returned. Parameters hold configuration readable by factories.

    Extensions passed at construction contribute option defaults and
    services when ``init()`` is called. A container built without extensions
    and without configuration can be used directly as a registry.

    Example:
        ```python
        container = Container([RunnerExtension], {"runner.iterations": 20})
        container.init()

        runner = container.get("runner")
        for service_id, attributes in container.get_service_ids_for_tag(
            "console.command"
        ).items():
            commands[attributes["name"]] = container.get(service_id)
        ```

    """

    def __init__(
        self,
        extensions: Sequence[ExtensionIdentifier] = (),
        config: Mapping[str, Any] | None = None,
        loader: ExtensionLoader | None = None,
    ) -> None:
        """Initialise the container.

        Args:
            extensions: Extensions to load on ``init()``, in load order
            config: User configuration validated against the extension options
            loader: Loader used to resolve extension identifiers

        """
        self._extensions = list(extensions)
        self._parameters = ParameterStore(config)
        self._services = ServiceRegistry()
        self._tags = TagIndex()
        self._loader = loader or ExtensionLoader()
        self._initialised = False
        logger.debug("Container created with %d extensions", len(self._extensions))

    @property
    def extension_identifiers(self) -> list[ExtensionIdentifier]:
        """Extensions as given at construction."""
        return list(self._extensions)

    @property
    def is_initialised(self) -> bool:
        """True once ``init()`` has completed."""
        return self._initialised

    def init(self) -> None:
        """Load extensions and resolve the user configuration.

        Each extension declares its options via ``configure()``, the user
        configuration is validated against them and replaces the container
        parameters, then each extension's ``load()`` registers its services,
        in the order the extensions were given.

        Calling ``init()`` on an initialised container does nothing. A
        failure leaves whatever was registered before it in place.

        Raises:
            InvalidExtensionError: If an extension cannot be resolved or does
                not implement the Extension protocol
            InvalidConfigurationError: If the user configuration is invalid

        """
        if self._initialised:
            logger.debug("Container already initialised, skipping")
            return

        if not self._extensions and not self._parameters.all():
            self._initialised = True
            return

        resolver = OptionsResolver()
        extensions = []
        for identifier in self._extensions:
            extension = self._loader.load(identifier)
            extension.configure(resolver)
            extensions.append(extension)

        try:
            config = resolver.resolve(self._parameters.all())
        except OptionsResolutionError as e:
            raise InvalidConfigurationError(f"Invalid user configuration: {e}") from e

        self._parameters.replace(config)

        for extension in extensions:
            logger.debug("Loading extension: %s", type(extension).__name__)
            extension.load(self)

        self._initialised = True
        logger.info("Container initialised with %d extensions", len(extensions))

    def register(
        self,
        service_id: str,
        factory: ServiceFactory,
        tags: Mapping[str, TagAttributes] | None = None,
    ) -> None:
        """Register a service factory.

        The factory receives this container and returns the service
        instance. It is not called until the service is first requested.

        Args:
            service_id: Unique identifier of the service
            factory: Callable creating the service
            tags: Optional tag names mapped to attribute mappings

        Raises:
            ServiceAlreadyRegisteredError: If the ID is already registered

        """
        definition = self._services.register(service_id, factory, tags)
        self._tags.add(service_id, definition.tags)

    def get(self, service_id: str) -> Any:  # noqa: ANN401
        """Return the service with the given ID.

        The same instance is returned on subsequent calls.

        Raises:
            ServiceNotFoundError: If the service is not registered

        """
        return self._services.get(service_id, self)

    def get_typed[T](self, service_id: str, service_type: type[T]) -> T:
        """Return the service with the given ID, checking its type.

        Raises:
            ServiceNotFoundError: If the service is not registered
            ServiceTypeError: If the service is not an instance of service_type

        """
        service = self.get(service_id)
        if not isinstance(service, service_type):
            raise ServiceTypeError(
                f'Service "{service_id}" is a {type(service).__name__}, '
                f"expected {service_type.__name__}"
            )
        return service

    def has(self, service_id: str) -> bool:
        """Return True if a factory is registered for the service ID.

        Instances placed with ``set()`` alone are retrievable with ``get()``
        but are not reported here.
        """
        return self._services.has(service_id)

    def set(self, service_id: str, instance: Any) -> None:  # noqa: ANN401
        """Set a service instance, bypassing any registered factory."""
        self._services.set(service_id, instance)

    @property
    def service_ids(self) -> list[str]:
        """IDs of every registered service, in registration order."""
        return [definition.service_id for definition in self._services.definitions()]

    def get_service_ids_for_tag(self, tag: str) -> dict[str, TagAttributes]:
        """Return the IDs of services registered with a tag.

        Services are not instantiated.

        Returns:
            Service IDs mapped to the attributes given for the tag

        """
        return self._tags.service_ids_for(tag)

    def set_parameter(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Set the value of the named parameter."""
        self._parameters.set(name, value)

    def merge_parameter(self, name: str, values: Mapping[str, Any]) -> None:
        """Merge values on to a mapping parameter.

        Raises:
            ParameterNotFoundError: If the parameter has not been set
            ParameterTypeError: If the parameter is not a mapping

        """
        self._parameters.merge(name, values)

    def get_parameter(self, name: str) -> Any:  # noqa: ANN401
        """Return the value of the named parameter.

        Raises:
            ParameterNotFoundError: If the parameter has not been set

        """
        return self._parameters.get(name)

    def get_parameters(self) -> dict[str, Any]:
        """Return a copy of every parameter."""
        return self._parameters.all()

    def has_parameter(self, name: str) -> bool:
        """Return True if the named parameter has been set."""
        return self._parameters.has(name)
