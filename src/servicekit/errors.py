"""Error classes for servicekit.

This module provides:
- ServiceKitError: Base exception class for all container errors
- NotFoundError, ServiceNotFoundError, ParameterNotFoundError: Lookup failures
- ServiceAlreadyRegisteredError: Duplicate service registration
- InvalidExtensionError: Extension identifiers that cannot be used
- InvalidConfigurationError, OptionsResolutionError: Configuration validation failures
- TypeMismatchError, ParameterTypeError, ServiceTypeError: Unexpected value types
"""


class ServiceKitError(Exception):
    """Base exception for all servicekit errors."""

    pass


class NotFoundError(ServiceKitError, LookupError):
    """Base exception for lookups of unknown services or parameters."""

    pass


class ServiceNotFoundError(NotFoundError):
    """Raised when no factory or instance exists for a service ID."""

    def __init__(self, service_id: str) -> None:
        super().__init__(
            f'No factory has been registered for requested service "{service_id}"'
        )
        self.service_id = service_id


class ParameterNotFoundError(NotFoundError):
    """Raised when a parameter has never been set."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Parameter "{name}" has not been registered')
        self.name = name


class ServiceAlreadyRegisteredError(ServiceKitError, ValueError):
    """Raised when a service ID is registered a second time."""

    def __init__(self, service_id: str) -> None:
        super().__init__(f'Service with ID "{service_id}" has already been registered')
        self.service_id = service_id


class InvalidExtensionError(ServiceKitError, ValueError):
    """Raised when an extension identifier cannot be resolved or used."""

    pass


class InvalidConfigurationError(ServiceKitError):
    """Raised when user configuration fails validation during initialisation."""

    pass


class OptionsResolutionError(ServiceKitError, ValueError):
    """Raised by the options resolver when a mapping fails validation."""

    pass


class TypeMismatchError(ServiceKitError, TypeError):
    """Base exception for values that are not of the expected type."""

    pass


class ParameterTypeError(TypeMismatchError):
    """Raised when a parameter value cannot be used as requested."""

    pass


class ServiceTypeError(TypeMismatchError):
    """Raised when a service instance is not of the expected type."""

    pass
