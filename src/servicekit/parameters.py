"""Named configuration parameters held by the container."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from servicekit.errors import ParameterNotFoundError, ParameterTypeError

logger = logging.getLogger(__name__)


class ParameterStore:
    """Key/value store for container parameters.

    Lookups of unknown names raise rather than returning a default, so a
    missing parameter is always reported at the point it is needed.
    """

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        """Initialise the store with optional initial parameters."""
        self._parameters: dict[str, Any] = dict(parameters or {})

    def set(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Set the value of the named parameter, replacing any existing value."""
        self._parameters[name] = value
        logger.debug("Set parameter: %s", name)

    def get(self, name: str) -> Any:  # noqa: ANN401
        """Return the value of the named parameter.

        Raises:
            ParameterNotFoundError: If the parameter has not been set

        """
        if name not in self._parameters:
            raise ParameterNotFoundError(name)
        return self._parameters[name]

    def has(self, name: str) -> bool:
        """Return True if the named parameter has been set."""
        return name in self._parameters

    def merge(self, name: str, values: Mapping[str, Any]) -> None:
        """Shallow-merge values on to an existing mapping parameter.

        Keys in ``values`` win over keys already present.

        Raises:
            ParameterNotFoundError: If the parameter has not been set
            ParameterTypeError: If the existing value is not a mapping

        """
        actual = self.get(name)

        if not isinstance(actual, Mapping):
            raise ParameterTypeError(
                f'Cannot merge values on to a scalar parameter "{name}"'
            )

        self.set(name, {**actual, **values})

    def replace(self, parameters: Mapping[str, Any]) -> None:
        """Replace every parameter with the given mapping."""
        self._parameters = dict(parameters)
        logger.debug("Replaced parameters: %d values", len(self._parameters))

    def all(self) -> dict[str, Any]:
        """Return a copy of every parameter."""
        return dict(self._parameters)
