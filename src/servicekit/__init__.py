"""servicekit - closure based dependency injection container.

This package provides a container that lazily creates and caches services
from factories, holds configuration parameters with extension-provided
defaults, and indexes services by tag.
"""

__version__ = "0.1.0"

from servicekit.configuration import BaseExtensionConfiguration
from servicekit.container import Container
from servicekit.definition import ServiceDefinition, ServiceFactory, TagAttributes
from servicekit.errors import (
    InvalidConfigurationError,
    InvalidExtensionError,
    NotFoundError,
    OptionsResolutionError,
    ParameterNotFoundError,
    ParameterTypeError,
    ServiceAlreadyRegisteredError,
    ServiceKitError,
    ServiceNotFoundError,
    ServiceTypeError,
    TypeMismatchError,
)
from servicekit.loader import ENTRY_POINT_GROUP, ExtensionIdentifier, ExtensionLoader
from servicekit.options import OptionsResolver
from servicekit.parameters import ParameterStore
from servicekit.protocols import Extension
from servicekit.registry import ServiceRegistry
from servicekit.tags import TagIndex

__all__ = [
    # Version
    "__version__",
    # Container
    "Container",
    "ParameterStore",
    "ServiceDefinition",
    "ServiceFactory",
    "ServiceRegistry",
    "TagAttributes",
    "TagIndex",
    # Extensions
    "ENTRY_POINT_GROUP",
    "BaseExtensionConfiguration",
    "Extension",
    "ExtensionIdentifier",
    "ExtensionLoader",
    "OptionsResolver",
    # Errors
    "ServiceKitError",
    "InvalidConfigurationError",
    "InvalidExtensionError",
    "NotFoundError",
    "OptionsResolutionError",
    "ParameterNotFoundError",
    "ParameterTypeError",
    "ServiceAlreadyRegisteredError",
    "ServiceNotFoundError",
    "ServiceTypeError",
    "TypeMismatchError",
]
