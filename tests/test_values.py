"""Tests for value helpers."""

from functools import partial
from typing import Any

import pytest

from options_resolver.values import accepts_previous, is_allowed, is_lazy


def _two_args(options: Any, previous: Any) -> Any:  # noqa: ANN401
    return previous


@pytest.mark.parametrize('value, expected', (
    pytest.param(42, False, id='int'),
    pytest.param('text', False, id='str'),
    pytest.param(None, False, id='none'),
    pytest.param([lambda options: 1], False, id='list of callables'),
    pytest.param(dict, False, id='class'),
    pytest.param(ValueError, False, id='exception class'),
    pytest.param(lambda options: 1, True, id='lambda'),
    pytest.param(_two_args, True, id='function'),
    pytest.param(partial(_two_args, previous=None), True, id='partial'),
    pytest.param(len, True, id='builtin'),
))
def test_is_lazy(value: Any, expected: bool) -> None:  # noqa: ANN401
    """Detect lazy computations among default values."""
    assert is_lazy(value) is expected


@pytest.mark.parametrize('function, expected', (
    pytest.param(lambda options: None, False, id='options only'),
    pytest.param(lambda options, previous: None, True, id='options and previous'),
    pytest.param(lambda options, previous=None: None, True, id='previous with default'),
    pytest.param(lambda *args: None, True, id='variadic'),
    pytest.param(lambda options, *, previous=None: None, False, id='keyword only'),
    pytest.param(lambda options, **kwargs: None, False, id='keyword variadic'),
    pytest.param(partial(_two_args, None), False, id='partial bound'),
    pytest.param(len, False, id='builtin with signature'),
))
def test_accepts_previous(function: Any, expected: bool) -> None:  # noqa: ANN401
    """Detect overloads by their positional parameters."""
    assert accepts_previous(function) is expected


def test_accepts_previous_without_signature() -> None:
    """Treat callables without an inspectable signature as plain computations."""
    class Opaque:
        __signature__ = 42

        def __call__(self, *args: Any) -> None:  # noqa: ANN401
            return None

    assert accepts_previous(Opaque()) is False


@pytest.mark.parametrize('value, allowed, expected', (
    pytest.param(1, 1, True, id='same int'),
    pytest.param('a', 'a', True, id='same str'),
    pytest.param(None, None, True, id='none'),
    pytest.param(1, True, False, id='int and bool'),
    pytest.param(True, 1, False, id='bool and int'),
    pytest.param(1, 1.0, False, id='int and float'),
    pytest.param('1', 1, False, id='str and int'),
    pytest.param([1, 2], [1, 2], True, id='equal lists'),
    pytest.param([1, 2], (1, 2), False, id='list and tuple'),
    pytest.param({'a': 1}, {'a': 1}, True, id='equal dicts'),
))
def test_is_allowed(value: Any, allowed: Any, expected: bool) -> None:  # noqa: ANN401
    """Compare values strictly."""
    assert is_allowed(value, allowed) is expected


def test_is_allowed_identity() -> None:
    """Accept the very same object even if it is not equal to itself."""
    value = float('nan')

    assert is_allowed(value, value) is True
    assert is_allowed(value, float('nan')) is False
