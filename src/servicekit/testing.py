"""Testing utilities for servicekit extensions.

This module provides contract tests that extension packages can reuse to
check their extensions work with the container.
"""

import pytest

from servicekit.container import Container
from servicekit.options import OptionsResolver
from servicekit.protocols import Extension


class ExtensionContractTests:
    """Abstract contract tests that all Extension implementations must pass.

    Required Fixtures:
        extension: Extension instance to test

    Contract Requirements:
        1. The extension must implement the Extension protocol
        2. configure() must only declare options
        3. A container holding only this extension must initialise using the
           declared defaults

    Usage Pattern:
        class TestRunnerExtension(ExtensionContractTests):
            @pytest.fixture
            def extension(self) -> Extension:
                return RunnerExtension()

            # All contract tests run automatically

    Extensions with required options should override ``user_config`` to
    supply them.

    """

    @pytest.fixture
    def extension(self) -> Extension:
        """Provide the Extension instance to test.

        Subclasses MUST override this fixture.

        Raises:
            NotImplementedError: If subclass doesn't override this fixture

        """
        raise NotImplementedError(
            "Subclass must provide 'extension' fixture with Extension instance"
        )

    @pytest.fixture
    def user_config(self) -> dict[str, object]:
        """Provide the user configuration used when initialising."""
        return {}

    # CONTRACT TEST 1
    def test_implements_extension_protocol(self, extension: Extension) -> None:
        """Verify the extension provides configure() and load()."""
        assert isinstance(extension, Extension), (
            "Extension must implement configure() and load()"
        )

    # CONTRACT TEST 2
    def test_configure_only_declares_options(self, extension: Extension) -> None:
        """Verify configure() declares options without requiring a container.

        Contract Requirement:
            configure() receives only the resolver and must leave everything
            else untouched, so calling it twice declares the same options.

        """
        first = OptionsResolver()
        second = OptionsResolver()

        extension.configure(first)
        extension.configure(second)

        assert first.defined_options == second.defined_options

    # CONTRACT TEST 3
    def test_container_initialises_with_extension(
        self, extension: Extension, user_config: dict[str, object]
    ) -> None:
        """Verify a container with only this extension initialises.

        Contract Requirement:
            Every declared option with a default must be available as a
            parameter once the container is initialised.

        """
        resolver = OptionsResolver()
        extension.configure(resolver)

        container = Container([extension], user_config)
        container.init()

        assert container.is_initialised
        for name in resolver.defined_options:
            if resolver.has_default(name):
                assert container.has_parameter(name), (
                    f'Declared option "{name}" missing from container parameters'
                )
