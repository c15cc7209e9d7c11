"""Extension loading for container initialisation.

Extensions can be given to the container as instances, as classes (or other
zero-argument callables) producing instances, or as strings. Strings are
looked up first among the entry points of the ``servicekit.extensions``
group and then as import paths, either ``package.module:ClassName`` or
``package.module.ClassName``.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from functools import reduce
from importlib.metadata import entry_points
from typing import Any

from servicekit.errors import InvalidExtensionError
from servicekit.protocols import Extension

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "servicekit.extensions"

type ExtensionIdentifier = Extension | type | Callable[[], Any] | str


class ExtensionLoader:
    """Resolves extension identifiers to extension instances."""

    def __init__(self, group: str = ENTRY_POINT_GROUP) -> None:
        """Initialise loader.

        Args:
            group: Entry point group searched for named extensions

        """
        self._group = group

    def load(self, identifier: ExtensionIdentifier) -> Extension:
        """Resolve an identifier to an extension instance.

        Args:
            identifier: Extension instance, class, factory callable, entry
                point name or import path

        Returns:
            Extension instance

        Raises:
            InvalidExtensionError: If the identifier does not resolve, cannot
                be called without arguments, or resolves to something that
                does not implement ``Extension``

        """
        target = self._lookup(identifier) if isinstance(identifier, str) else identifier
        extension = _instantiate(target)

        if not isinstance(extension, Extension):
            raise InvalidExtensionError(
                f'Extension "{type(extension).__name__}" must implement the '
                "servicekit.Extension protocol (configure and load methods)"
            )

        logger.debug("Loaded extension: %s", type(extension).__name__)
        return extension

    def _lookup(self, name: str) -> Any:  # noqa: ANN401
        for ep in entry_points(group=self._group):
            if ep.name == name:
                logger.debug("Resolved extension '%s' from entry point", name)
                return ep.load()

        if ":" in name:
            module_name, _, attribute = name.partition(":")
        else:
            module_name, _, attribute = name.rpartition(".")

        if not module_name or not attribute:
            raise InvalidExtensionError(f'Extension "{name}" does not exist')

        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only a missing target module means the extension does not exist;
            # missing dependencies of an existing module propagate.
            if e.name is None or not (
                module_name == e.name or module_name.startswith(f"{e.name}.")
            ):
                raise
            raise InvalidExtensionError(f'Extension "{name}" does not exist') from e

        try:
            return reduce(getattr, attribute.split("."), module)
        except AttributeError as e:
            raise InvalidExtensionError(f'Extension "{name}" does not exist') from e


def _instantiate(target: Any) -> Any:  # noqa: ANN401
    # Classes satisfy the protocol check themselves, so test for them first.
    if isinstance(target, Extension) and not isinstance(target, type):
        return target
    if not callable(target):
        return target

    try:
        return target()
    except TypeError as e:
        name = getattr(target, "__name__", type(target).__name__)
        raise InvalidExtensionError(
            f'Extension "{name}" could not be instantiated: {e}'
        ) from e
