"""Options resolver used to declare and validate container configuration.

Extensions declare the options they understand (defaults, required options,
allowed types and allowed values) on an ``OptionsResolver`` during
``configure()``. Once every extension has declared its options the container
resolves the user configuration against the accumulated declarations.

Validation is delegated to a pydantic model generated from the declarations.
Option names are used as validation aliases so that any string, including
dotted names such as ``"runner.path"``, can be declared.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    create_model,
)

from servicekit.errors import OptionsResolutionError

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for options without a value."""

    def __repr__(self) -> str:
        return "<unset>"


_UNSET: Any = _Unset()


@dataclass
class _OptionDeclaration:
    name: str
    default: Any = _UNSET
    required: bool = False
    allowed_types: tuple[Any, ...] = ()
    allowed_values: tuple[Any, ...] = ()


def _allowed_values_validator(allowed: tuple[Any, ...]) -> Callable[[Any], Any]:
    def check(value: Any) -> Any:  # noqa: ANN401
        if value not in allowed:
            accepted = ", ".join(repr(item) for item in allowed)
            raise ValueError(f"value must be one of {accepted}")
        return value

    return check


class OptionsResolver:
    """Accumulates option declarations and validates mappings against them.

    Example:
        ```python
        resolver = OptionsResolver()
        resolver.set_defaults({"path": "bench", "retry_threshold": 5})
        resolver.set_allowed_types("retry_threshold", int)
        resolver.set_required("php_binary")

        options = resolver.resolve({"php_binary": "/usr/bin/php"})
        # {"path": "bench", "retry_threshold": 5, "php_binary": "/usr/bin/php"}
        ```

    """

    def __init__(self) -> None:
        """Initialise a resolver with no declared options."""
        self._options: dict[str, _OptionDeclaration] = {}

    @property
    def defined_options(self) -> list[str]:
        """Names of every declared option, in declaration order."""
        return list(self._options)

    def is_defined(self, name: str) -> bool:
        """Return True if the option has been declared."""
        return name in self._options

    def has_default(self, name: str) -> bool:
        """Return True if the option has been declared with a default value."""
        option = self._options.get(name)
        return option is not None and option.default is not _UNSET

    def is_required(self, name: str) -> bool:
        """Return True if the option must be supplied when resolving."""
        option = self._options.get(name)
        return option is not None and option.required

    def set_defined(self, *names: str) -> OptionsResolver:
        """Declare options that are known but have no default value.

        Defined options which are not supplied are left out of the resolved
        mapping.
        """
        for name in names:
            self._declare(name)
        return self

    def set_default(self, name: str, value: Any) -> OptionsResolver:  # noqa: ANN401
        """Declare an option with a default value."""
        option = self._declare(name)
        option.default = value
        option.required = False
        logger.debug("Declared option %s with default %r", name, value)
        return self

    def set_defaults(self, defaults: Mapping[str, Any]) -> OptionsResolver:
        """Declare several options with their default values."""
        for name, value in defaults.items():
            self.set_default(name, value)
        return self

    def set_required(self, *names: str) -> OptionsResolver:
        """Declare options that must be supplied when resolving."""
        for name in names:
            option = self._declare(name)
            option.default = _UNSET
            option.required = True
            logger.debug("Declared required option %s", name)
        return self

    def set_allowed_types(self, name: str, *types: Any) -> OptionsResolver:  # noqa: ANN401
        """Restrict the option to values matching one of the given types.

        Types may be classes or typing constructs such as ``list[str]``. Values
        are checked strictly: ``"5"`` does not match ``int``.

        Raises:
            OptionsResolutionError: If the option has not been declared

        """
        self._get_declared(name).allowed_types = tuple(types)
        return self

    def set_allowed_values(self, name: str, *values: Any) -> OptionsResolver:  # noqa: ANN401
        """Restrict the option to one of the given values.

        Raises:
            OptionsResolutionError: If the option has not been declared

        """
        self._get_declared(name).allowed_values = tuple(values)
        return self

    def declare_model(self, model: type[BaseModel]) -> OptionsResolver:
        """Declare every field of a pydantic model as an option.

        The field alias (or the field name when there is no alias) becomes
        the option name. The field annotation, together with constraints such
        as ``ge`` or ``max_length``, becomes its allowed type. Fields with
        defaults become options with defaults, other fields become required
        options.
        """
        for field_name, info in model.model_fields.items():
            name = info.alias or field_name
            if info.is_required():
                self.set_required(name)
            else:
                self.set_default(name, info.get_default(call_default_factory=True))
            if info.annotation is not None and info.metadata:
                self.set_allowed_types(
                    name, Annotated[info.annotation, *info.metadata]
                )
            elif info.annotation is not None:
                self.set_allowed_types(name, info.annotation)
        return self

    def resolve(self, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Validate options and merge them over the declared defaults.

        Args:
            options: Mapping of option names to values

        Returns:
            The declared defaults updated with the validated options

        Raises:
            OptionsResolutionError: If an option is unknown, a required option
                is missing, or a value fails its type or value constraints

        """
        raw = dict(options or {})
        self._check_unknown(raw)

        model, field_names = self._build_model()
        try:
            validated = model.model_validate(raw)
        except ValidationError as e:
            raise OptionsResolutionError(_describe_errors(e)) from e

        resolved: dict[str, Any] = {}
        for field_name, name in field_names.items():
            value = getattr(validated, field_name)
            if value is not _UNSET:
                resolved[name] = value
        return resolved

    def _declare(self, name: str) -> _OptionDeclaration:
        if name not in self._options:
            self._options[name] = _OptionDeclaration(name)
        return self._options[name]

    def _get_declared(self, name: str) -> _OptionDeclaration:
        if name not in self._options:
            raise OptionsResolutionError(
                f'The option "{name}" does not exist. {self._describe_defined()}'
            )
        return self._options[name]

    def _check_unknown(self, raw: Iterable[str]) -> None:
        unknown = [name for name in raw if name not in self._options]
        if not unknown:
            return

        quoted = ", ".join(f'"{name}"' for name in unknown)
        if len(unknown) == 1:
            message = f"The option {quoted} does not exist."
        else:
            message = f"The options {quoted} do not exist."
        raise OptionsResolutionError(f"{message} {self._describe_defined()}")

    def _describe_defined(self) -> str:
        if not self._options:
            return "No options are defined."
        defined = ", ".join(f'"{name}"' for name in self._options)
        return f"Defined options are: {defined}."

    def _build_model(self) -> tuple[type[BaseModel], dict[str, str]]:
        fields: dict[str, Any] = {}
        field_names: dict[str, str] = {}

        for index, option in enumerate(self._options.values()):
            field_name = f"option_{index}"
            default = ... if option.required else option.default
            fields[field_name] = (
                _annotation_for(option),
                Field(default=default, validation_alias=option.name),
            )
            field_names[field_name] = option.name

        model = create_model(
            "ResolvedOptions",
            __config__=ConfigDict(
                extra="forbid", strict=True, arbitrary_types_allowed=True
            ),
            **fields,
        )
        return model, field_names


def _annotation_for(option: _OptionDeclaration) -> Any:  # noqa: ANN401
    annotation: Any = Any
    if option.allowed_types:
        annotation = Union[option.allowed_types]  # noqa: UP007
    if option.allowed_values:
        annotation = Annotated[
            annotation,
            AfterValidator(
                _allowed_values_validator(option.allowed_values)
            ),
        ]
    return annotation


def _describe_errors(error: ValidationError) -> str:
    messages: list[str] = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        if detail["type"] == "missing":
            messages.append(f'The required option "{location}" is missing.')
        else:
            messages.append(f'The option "{location}" is invalid: {detail["msg"]}.')
    return " ".join(messages)
