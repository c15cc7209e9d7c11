"""Tag index for discovering services by tag without instantiating them."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from servicekit.definition import TagAttributes

logger = logging.getLogger(__name__)


class TagIndex:
    """Index of service IDs to their tags and tag attributes.

    Only registration metadata is stored here. Querying a tag never touches
    the instance cache, so callers decide which tagged services to realise.
    """

    def __init__(self) -> None:
        """Initialise an empty tag index."""
        self._tags: dict[str, dict[str, TagAttributes]] = {}

    def add(self, service_id: str, tags: Mapping[str, TagAttributes]) -> None:
        """Record the tags a service was registered with."""
        self._tags[service_id] = {
            tag: dict(attributes) for tag, attributes in tags.items()
        }
        if tags:
            logger.debug("Tagged service %s with: %s", service_id, ", ".join(tags))

    def service_ids_for(self, tag: str) -> dict[str, TagAttributes]:
        """Return service IDs carrying the tag, mapped to that tag's attributes.

        Services are returned in registration order.
        """
        return {
            service_id: dict(tags[tag])
            for service_id, tags in self._tags.items()
            if tag in tags
        }
