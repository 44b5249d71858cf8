"""Core type definitions for option values.

This module defines the type system used by the resolution engine. It
distinguishes between concrete option values and lazy computations that
must be evaluated against the partially resolved options at runtime.

It also provides the helpers used to tell lazy values apart from concrete
ones and to detect computations that accept the previous value of an
option (overloads).
"""

from collections.abc import Callable, Mapping
from datetime import date, datetime, timedelta
from inspect import Parameter, signature
from typing import Any, TypeAlias

#: A value in runtime represents any Python object supplied by callers
#: or returned from lazy computations. The engine never inspects it
#: beyond allowed-values membership checks.
RuntimeValue: TypeAlias = Any

#: Lazy computations receive the options resolved so far as a read-only
#: mapping. Overloads additionally receive the previous value of the
#: option they replace.
LazyCallable: TypeAlias = Callable[[Mapping[str, RuntimeValue]], RuntimeValue]
OverloadCallable: TypeAlias = Callable[[Mapping[str, RuntimeValue], RuntimeValue], RuntimeValue]

#: A default is either a concrete value or a lazy computation.
Default: TypeAlias = RuntimeValue | LazyCallable | OverloadCallable

MAPPINGS = (dict,)
SCALARS = (date, datetime, timedelta, str, bytes, int, float, bool)
SEQUENCES = (list, tuple, set, frozenset)

_POSITIONAL = (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)


def is_lazy(value: RuntimeValue) -> bool:
    """Check whether a default value must be evaluated lazily.

    Any callable is treated as a lazy computation, except classes:
    a class is a legitimate concrete default (for example, a handler
    type) and is never invoked by the engine.

    Args:
        value: Candidate default value.

    Returns:
        True if the value is a lazy computation.
    """
    return callable(value) and not isinstance(value, type)


def accepts_previous(function: Callable[..., RuntimeValue]) -> bool:
    """Check whether a lazy computation accepts the previous value.

    A computation is an overload if it can be called with two positional
    arguments: the options resolved so far and the previous value.

    Args:
        function: Lazy computation to inspect.

    Returns:
        True if the computation accepts a second positional argument.
    """
    try:
        parameters = signature(function).parameters.values()
    except (TypeError, ValueError):
        return False

    positional = 0
    for parameter in parameters:
        if parameter.kind == Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in _POSITIONAL:
            positional += 1

    return positional >= 2  # noqa: PLR2004


def is_allowed(value: RuntimeValue, allowed: RuntimeValue) -> bool:
    """Compare a value against an allowed value strictly.

    Values match when they are the same object, or when they have
    exactly the same type and compare equal. This rejects the loose
    matches Python equality allows across types, such as `1 == True`
    or `1 == 1.0`, while keeping structural equality for containers
    of the same type.

    Args:
        value: Resolved option value.
        allowed: One of the allowed values of the option.

    Returns:
        True if the value matches.
    """
    if value is allowed:
        return True

    if type(value) is not type(allowed):
        return False

    return bool(value == allowed)
