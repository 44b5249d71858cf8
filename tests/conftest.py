"""Tests configurations and fixtures."""

import os
from typing import TYPE_CHECKING

import pytest

from options_resolver import OptionsResolver, ResolverSettings
from options_resolver.settings import ENV_PREFIX

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.fixture(autouse=True)
def isolated_environment(mocker: 'MockerFixture') -> None:
    """Hide resolver settings variables of the host environment.

    Settings are read from `OPTIONS_RESOLVER_*` variables; the variables
    of the machine running the tests must not change resolver behavior.
    """
    environment = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith(ENV_PREFIX)
    }

    mocker.patch.dict(os.environ, environment, clear=True)


@pytest.fixture
def resolver() -> OptionsResolver:
    """Provide a resolver with default settings."""
    return OptionsResolver(ResolverSettings())


@pytest.fixture
def counter() -> 'Callable[..., Callable[..., object]]':
    """Provide a factory of lazy computations counting their calls.

    Each produced computation records its arguments in a `calls` list
    attribute, so tests can assert how many times (and with which
    previous value) it was evaluated.
    """
    def make(value: object = None, *, previous: bool = False) -> 'Callable[..., object]':
        """Build a counting computation.

        Args:
            value: Value returned by the computation.
            previous: Build an overload accepting the previous value.

        Returns:
            A computation with a `calls` attribute.
        """
        calls: list[tuple[object, ...]] = []

        if previous:
            def overload(options: object, previous_value: object) -> object:
                calls.append((options, previous_value))
                return value

            overload.calls = calls  # type: ignore[attr-defined]
            return overload

        def lazy(options: object) -> object:
            calls.append((options,))
            return value

        lazy.calls = calls  # type: ignore[attr-defined]
        return lazy

    return make
