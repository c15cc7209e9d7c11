"""Service definitions for container registration."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from servicekit.container import Container

type ServiceFactory = Callable[[Container], Any]
type TagAttributes = Mapping[str, Any]


@dataclass(frozen=True)
class ServiceDefinition:
    """Registration record for a single service.

    Attributes:
        service_id: Unique identifier of the service
        factory: Callable receiving the container and returning the instance
        tags: Tag names mapped to the attributes attached for that tag

    """

    service_id: str
    factory: ServiceFactory
    tags: Mapping[str, TagAttributes] = field(default_factory=dict)
