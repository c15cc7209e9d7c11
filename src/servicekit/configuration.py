"""Base configuration class for typed extension options."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from servicekit.container import Container


class BaseExtensionConfiguration(BaseModel):
    """Base class for typed views of the options an extension declares.

    Features:
        - Pydantic validation for type safety
        - Immutable (frozen) once created
        - Strict validation (no extra fields allowed)
        - Fields can be declared as options with ``OptionsResolver.declare_model()``

    Example:
        ```python
        class RunnerConfiguration(BaseExtensionConfiguration):
            path: str = "bench"
            iterations: int = Field(default=10, alias="runner.iterations")

        class RunnerExtension:
            def configure(self, resolver: OptionsResolver) -> None:
                resolver.declare_model(RunnerConfiguration)

            def load(self, container: Container) -> None:
                config = RunnerConfiguration.from_parameters(container)
                container.register("runner", lambda c: Runner(config.iterations))
        ```

    """

    model_config = ConfigDict(
        # Immutable - configuration cannot be modified after creation
        frozen=True,
        # Strict - extra fields not in the model are rejected
        extra="forbid",
    )

    @classmethod
    def from_parameters(cls, parameters: Container | Mapping[str, Any]) -> Self:
        """Create configuration from container parameters.

        Only the parameters matching this model's fields are read, so a
        container holding options for several extensions can be passed
        directly.

        Args:
            parameters: Container, or mapping of parameter names to values

        Returns:
            Validated configuration instance

        Raises:
            ValidationError: If a parameter value is invalid or a required
                parameter is missing

        """
        values = (
            parameters if isinstance(parameters, Mapping) else parameters.get_parameters()
        )
        names = {info.alias or name for name, info in cls.model_fields.items()}
        return cls.model_validate(
            {name: value for name, value in values.items() if name in names}
        )
