"""Core exception hierarchy.

This module defines the error and warning types raised by the resolution
engine: schema definition failures (including cyclic lazy defaults),
invalid or missing caller-supplied options, and non-fatal schema issues.

Errors may carry a structured context which is rendered as a YAML snippet
below the message, to show the offending options next to the diagnostic.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

from options_resolver.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Self

if TYPE_CHECKING:
    from pydantic import ValidationError

if TYPE_CHECKING:
    from options_resolver.values import RuntimeValue

SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter renders whatever is present
    in a stable order.
    """

    #: Name of the option the error is about.
    option: str | None
    #: Offending value of the option.
    value: Any
    #: Allowed values of the option.
    allowed: list[Any] | None

    #: Options supplied by the caller.
    options: dict[str, Any] | None
    #: Names known by the resolver.
    known: list[str] | None


class ErrorFormatter:
    """Utility class for formatting resolver errors.

    This formatter produces human-readable messages with an optional
    YAML snippet describing the context of the failure.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        if snippet := cls.get_snippet_string(context, indent=FORMAT_INDENT):
            message += linesep
            message += snippet

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a YAML snippet illustrating the error context.

        Args:
            context: Error context.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if the context holds nothing to show.
        """
        indent = cls._ensure_indent(indent)

        data = {
            key: context[key]  # type: ignore[literal-required]
            for key in ('option', 'value', 'allowed', 'options', 'known')
            if key in context
        }
        if not data:
            return ''

        return cls._make_yaml(data, indent)

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects (for example, lazy
        computations) are replaced with a placeholder.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                str(key): cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to a YAML-formatted string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''

    @staticmethod
    def quote(names: 'Iterable[str]') -> str:
        """Join option names as a quoted, comma-separated list."""
        return ', '.join(f'"{name}"' for name in names)


class OptionsWarning(UserWarning):
    """Warning emitted for non-fatal schema issues.

    This warning is used when a schema declaration is suspicious but
    does not prevent resolution (for example, when running in non-strict
    mode with a default value that is not among the allowed values).
    """


class OptionsResolverError(Exception, ErrorFormatter):
    """Base exception for all options resolver errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context rendered below the message.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class OptionDefinitionError(OptionsResolverError):
    """Error raised when a schema or a lazy default is defined incorrectly.

    This indicates a bug in the schema authoring code rather than in the
    caller-supplied options: default values passed where only names are
    accepted, invalid option names, store modification after options have
    been read, or a cyclic dependency between lazy defaults.
    """

    def __init__(self, message: str, *,
                 options: 'Iterable[str]' = (),
                 context: ErrorContext | None = None) -> None:
        """Initialize a definition error.

        Args:
            message: Human-readable error description.
            options: Names of the options involved, if any.
            context: Error context rendered below the message.
        """
        self.options = list(options)

        super().__init__(message, context=context)

    @classmethod
    def from_cycle(cls, options: 'Iterable[str]') -> 'Self':
        """Create an error for a cyclic dependency between lazy options.

        Args:
            options: Names of the options being resolved when the cycle
                was detected, in resolution order.

        Returns:
            OptionDefinitionError naming every option of the cycle.
        """
        options = list(options)

        if len(options) > 1:
            message = f'The options {cls.quote(options)} have a cyclic dependency.'
        else:
            message = f'The option {cls.quote(options)} has a cyclic dependency.'

        return cls(message, options=options)

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            method: str) -> 'Self':
        """Create a definition error from an option names validation failure.

        Only the first failing name is reported.

        Args:
            error: ValidationError raised by Pydantic.
            method: Name of the resolver method that received the names.

        Returns:
            OptionDefinitionError describing the invalid name.
        """
        for item in error.errors(include_url=False):
            name = item.get('input')
            reason = (item.get('msg') or 'invalid value').splitlines()[0]
            return cls(f'Invalid option name {name!r} passed to {method}(): {reason}')

        return cls(f'Invalid option names passed to {method}()')


class InvalidOptionsError(OptionsResolverError):
    """Error raised for unknown options or disallowed option values.

    Unknown names carry `names` and `known`; disallowed values carry
    `option`, `value` and `allowed`.
    """

    def __init__(self, message: str, *,  # noqa: PLR0913
                 names: 'Iterable[str]' = (),
                 known: 'Iterable[str]' = (),
                 option: str | None = None,
                 value: 'RuntimeValue' = None,
                 allowed: 'Iterable[RuntimeValue]' = (),
                 context: ErrorContext | None = None) -> None:
        """Initialize an invalid options error.

        Args:
            message: Human-readable error description.
            names: Unknown option names.
            known: Names known by the resolver.
            option: Option holding a disallowed value.
            value: The disallowed value.
            allowed: Values allowed for the option.
            context: Error context rendered below the message.
        """
        self.names = list(names)
        self.known = list(known)
        self.option = option
        self.value = value
        self.allowed = list(allowed)

        super().__init__(message, context=context)

    @classmethod
    def from_unknown(cls, names: 'Iterable[str]', known: 'Iterable[str]', *,
                     context: ErrorContext | None = None) -> 'Self':
        """Create an error for option names missing from the schema.

        Args:
            names: Unknown option names.
            known: Names known by the resolver.
            context: Optional error context.

        Returns:
            InvalidOptionsError listing all unknown and known names, sorted
                by their string form.
        """
        names = sorted(names, key=str)
        known = sorted(known, key=str)

        if len(names) > 1:
            message = f'The options {cls.quote(names)} do not exist.'
        else:
            message = f'The option {cls.quote(names)} does not exist.'
        message += f' Known options are: {cls.quote(known)}'

        return cls(message, names=names, known=known, context=context)

    @classmethod
    def from_disallowed(cls, option: str, value: 'RuntimeValue',
                        allowed: 'Iterable[RuntimeValue]', *,
                        with_context: bool = True) -> 'Self':
        """Create an error for a value outside of the allowed values.

        Args:
            option: Option name.
            value: Resolved value of the option.
            allowed: Values allowed for the option.
            with_context: Attach a YAML context snippet.

        Returns:
            InvalidOptionsError describing the offending option.
        """
        allowed = list(allowed)
        expected = ', '.join(repr(item) for item in allowed)

        context = None
        if with_context:
            context = ErrorContext(option=option, value=value, allowed=allowed)

        return cls(
            f'The option "{option}" has the value {value!r}, '
            f'but is expected to be one of {expected}',
            option=option,
            value=value,
            allowed=allowed,
            context=context,
        )


class MissingOptionsError(OptionsResolverError):
    """Error raised when required options are neither supplied nor defaulted."""

    def __init__(self, message: str, *,
                 names: 'Iterable[str]' = (),
                 context: ErrorContext | None = None) -> None:
        """Initialize a missing options error.

        Args:
            message: Human-readable error description.
            names: Missing option names.
            context: Error context rendered below the message.
        """
        self.names = list(names)

        super().__init__(message, context=context)

    @classmethod
    def from_missing(cls, names: 'Iterable[str]', *,
                     context: ErrorContext | None = None) -> 'Self':
        """Create an error listing all missing required options, sorted."""
        names = sorted(names, key=str)

        if len(names) > 1:
            message = f'The required options {cls.quote(names)} are missing.'
        else:
            message = f'The required option {cls.quote(names)} is missing.'

        return cls(message, names=names, context=context)


class NoSuchOptionError(OptionsResolverError, KeyError):
    """Error raised when reading an option that is not defined in a store.

    Inherits from `KeyError`, so `Mapping.get()` and `in` work as expected
    on option stores.
    """

    def __init__(self, option: str) -> None:
        """Initialize the error for an undefined option."""
        self.option = option

        super().__init__(f'The option "{option}" does not exist.')

    def __str__(self) -> str:
        """String representation."""
        return self.message
