"""Extension protocol for container initialisation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from servicekit.container import Container
    from servicekit.options import OptionsResolver


@runtime_checkable
class Extension(Protocol):
    """Protocol for extensions that contribute options and services.

    During ``Container.init()`` every extension is first asked to declare the
    options it understands, then, once the user configuration has been
    validated, asked to register its services.

    Example:
        ```python
        class RunnerExtension:
            def configure(self, resolver: OptionsResolver) -> None:
                resolver.set_defaults({"runner.iterations": 10})

            def load(self, container: Container) -> None:
                container.register(
                    "runner",
                    lambda c: Runner(c.get_parameter("runner.iterations")),
                    tags={"console.command": {"name": "run"}},
                )
        ```

    """

    def configure(self, resolver: OptionsResolver) -> None:
        """Declare the options this extension understands and their defaults.

        Must not do anything besides declaring options.
        """
        ...

    def load(self, container: Container) -> None:
        """Register services and parameters with the initialised container.

        Parameters and services registered by extensions loaded earlier are
        already available.
        """
        ...
