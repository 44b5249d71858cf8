"""Options resolution engine.

The `OptionsResolver` holds a schema of option names (known, required,
defaulted) together with allowed-value constraints, and merges
caller-supplied options with the declared defaults:

    >>> resolver = OptionsResolver()
    >>> _ = resolver.set_defaults({
    ...     'width': 10,
    ...     'height': lambda options: options['width'] * 2,
    ... }).set_required(['name'])
    >>> resolver.resolve({'name': 'box', 'width': 3})
    {'width': 3, 'height': 6, 'name': 'box'}

Resolution never modifies the resolver, so the same schema can resolve
any number of independent option sets.
"""

from collections.abc import Mapping, Sequence, Set
from typing import TYPE_CHECKING
from warnings import warn

from options_resolver.errors import (
    ErrorContext,
    InvalidOptionsError,
    MissingOptionsError,
    OptionDefinitionError,
    OptionsWarning,
)
from options_resolver.names import validate_names
from options_resolver.options import Options
from options_resolver.schema import OptionsSchema
from options_resolver.settings import ResolverSettings
from options_resolver.values import is_allowed, is_lazy

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Self

if TYPE_CHECKING:
    from options_resolver.values import Default, RuntimeValue


class OptionsResolver:
    """Helper for merging default and caller-supplied option values.

    Attributes:
        settings: Runtime settings controlling diagnostics.
    """

    def __init__(self, settings: ResolverSettings | None = None) -> None:
        """Initialize an empty schema.

        Args:
            settings: Optional settings. When omitted, settings are read
                from `OPTIONS_RESOLVER_*` environment variables.
        """
        self.settings = settings if settings is not None else ResolverSettings()

        self._defaults = Options()
        self._known: dict[str, None] = {}
        self._required: dict[str, None] = {}
        self._allowed_values: dict[str, list[RuntimeValue]] = {}

    def set_defaults(self, defaults: 'Mapping[str, Default]') -> 'Self':
        """Set default option values.

        Values may be lazy computations of the following signatures:

            - `function(options)`
            - `function(options, previous_value)`

        The second form receives the default previously set for the option,
        resolved if it was lazy, or `None` if there was none.

        Args:
            defaults: Option names mapped to default values.

        Returns:
            The resolver instance.

        Raises:
            OptionDefinitionError: If an option name is invalid, or if a
                concrete default is not allowed on strict mode.
        """
        names = validate_names(defaults.keys(), method='set_defaults')
        for name in names:
            self._check_default(name, defaults[name])

        for name in names:
            self._defaults.overload(name, defaults[name])
            self._declare_default(name)

        return self

    def replace_defaults(self, defaults: 'Mapping[str, Default]') -> 'Self':
        """Replace default option values.

        Previous defaults are erased, so computations passed here can't
        access them. This avoids evaluating a previous default that is
        expensive to compute and no longer needed.

        Args:
            defaults: Option names mapped to default values.

        Returns:
            The resolver instance.

        Raises:
            OptionDefinitionError: If an option name is invalid, or if a
                concrete default is not allowed on strict mode.
        """
        names = validate_names(defaults.keys(), method='replace_defaults')
        for name in names:
            self._check_default(name, defaults[name])

        for name in names:
            self._defaults.set(name, defaults[name])
            self._declare_default(name)

        return self

    def set_optional(self, names: 'Iterable[str]') -> 'Self':
        """Declare optional options.

        Optional options without a default are missing from the resolved
        options unless supplied. Declaring them lets callers pass them
        without triggering an unknown option error.

        Args:
            names: Option names.

        Returns:
            The resolver instance.

        Raises:
            OptionDefinitionError: If default values are passed (as a
                mapping) or if an option name is invalid.
        """
        for name in validate_names(names, method='set_optional'):
            self._known[name] = None

        return self

    def set_required(self, names: 'Iterable[str]') -> 'Self':
        """Declare required options.

        Options that already have a default are known but not required.

        Args:
            names: Option names.

        Returns:
            The resolver instance.

        Raises:
            OptionDefinitionError: If default values are passed (as a
                mapping) or if an option name is invalid.
        """
        for name in validate_names(names, method='set_required'):
            self._known[name] = None
            if not self._defaults.has(name):
                self._required[name] = None

        return self

    def set_allowed_values(self, allowed_values: 'Mapping[str, RuntimeValue]') -> 'Self':
        """Set allowed values for options, replacing previous ones.

        Args:
            allowed_values: Option names mapped to sequences of values
                accepted for the option. A string or non-sequence value
                is a single allowed value; a mapping contributes its values.

        Returns:
            The resolver instance.

        Raises:
            InvalidOptionsError: If any option is not known.
            OptionDefinitionError: If a concrete default is not allowed
                on strict mode.
        """
        self._validate_existence(allowed_values)

        updated = {
            name: self._as_values(values)
            for name, values in allowed_values.items()
        }
        for name, values in updated.items():
            if self._defaults.has(name) and not self._defaults.is_lazy(name):
                self._check_default(name, self._defaults.clone()[name], values)

        self._allowed_values.update(updated)

        return self

    def add_allowed_values(self, allowed_values: 'Mapping[str, RuntimeValue]') -> 'Self':
        """Add allowed values for options.

        The values are appended to the allowed values defined previously,
        duplicates included.

        Args:
            allowed_values: Option names mapped to sequences of values
                accepted for the option.

        Returns:
            The resolver instance.

        Raises:
            InvalidOptionsError: If any option is not known.
            OptionDefinitionError: If a concrete default is not allowed
                on strict mode.
        """
        self._validate_existence(allowed_values)

        updated = {
            name: [*self._allowed_values.get(name, ()), *self._as_values(values)]
            for name, values in allowed_values.items()
        }
        for name, values in updated.items():
            if self._defaults.has(name) and not self._defaults.is_lazy(name):
                self._check_default(name, self._defaults.clone()[name], values)

        self._allowed_values.update(updated)

        return self

    def is_known(self, name: str) -> bool:
        """Check whether an option was declared by any means."""
        return name in self._known

    def is_required(self, name: str) -> bool:
        """Check whether an option is required and has no default."""
        return name in self._required

    def has_default(self, name: str) -> bool:
        """Check whether an option has a default value."""
        return self._defaults.has(name)

    def describe(self) -> OptionsSchema:
        """Take an immutable snapshot of the schema."""
        return OptionsSchema(
            known=list(self._known),
            required=list(self._required),
            defaults=list(self._defaults),
            lazy=[name for name in self._defaults if self._defaults.is_lazy(name)],
            allowed_values={
                name: list(values)
                for name, values in self._allowed_values.items()
            },
        )

    def resolve(self, options: 'Mapping[str, RuntimeValue] | None' = None) -> dict[str, 'RuntimeValue']:
        """Combine the defaults with the supplied options.

        Args:
            options: Caller-supplied option values. They always override
                defaults and are never treated as lazy computations.

        Returns:
            Resolved option values.

        Raises:
            InvalidOptionsError: If any supplied option is not known or
                any resolved value is not allowed.
            MissingOptionsError: If a required option is missing.
            OptionDefinitionError: If lazy defaults depend on each
                other cyclically.
        """
        if options is None:
            options = {}

        self._validate_existence(options)
        self._validate_completeness(options)

        combined = self._defaults.clone()
        for name, value in options.items():
            combined.merge(name, value)

        resolved = combined.all()

        self._validate_values(resolved)

        return resolved

    @staticmethod
    def _as_values(values: 'RuntimeValue') -> list['RuntimeValue']:
        """Normalize allowed values into a list."""
        if isinstance(values, Mapping):
            return list(values.values())

        if isinstance(values, (str, bytes)) or not isinstance(values, (Sequence, Set)):
            return [values]

        return list(values)

    def _declare_default(self, name: str) -> None:
        """Register an option that just received a default."""
        self._known[name] = None
        self._required.pop(name, None)

    def _check_default(self, name: str, default: 'Default',
                       allowed_values: list['RuntimeValue'] | None = None) -> None:
        """Check a concrete default against the allowed values of its option.

        Lazy defaults can't be checked before resolution.

        Args:
            name: Option name.
            default: Candidate default value.
            allowed_values: Allowed values to check against, the current
                allowed values of the option if omitted.

        Raises:
            OptionDefinitionError: If the default is not allowed on strict mode.
        """
        if allowed_values is None:
            allowed_values = self._allowed_values.get(name)

        if allowed_values is None or is_lazy(default):
            return

        if any(is_allowed(default, allowed) for allowed in allowed_values):
            return

        if error := self.emit_schema_issue(
            f'The default value {default!r} of option "{name}" is not '
            f'among its allowed values',
            name,
        ):
            raise error

    def emit_schema_issue(self, message: str, name: str) -> Exception | None:
        """Emit a schema warning or return the exception.

        Args:
            message: Warning message to emit.
            name: Option the issue is about.

        Returns:
            OptionDefinitionError on strict mode, otherwise `None`
                with producing an OptionsWarning.
        """
        if self.settings.strict:
            return OptionDefinitionError(message, options=[name])

        warn(message, category=OptionsWarning, stacklevel=4)

        return None

    def _error_context(self, options: 'Mapping[str, RuntimeValue]') -> ErrorContext | None:
        """Build an error context for the supplied options, if enabled."""
        if not self.settings.error_snippets:
            return None

        return ErrorContext(options=dict(options))

    def _validate_existence(self, options: 'Mapping[str, RuntimeValue]') -> None:
        """Validate that the given option names are known.

        Raises:
            InvalidOptionsError: If any of the options has not been declared.
        """
        unknown = [name for name in options if name not in self._known]
        if unknown:
            raise InvalidOptionsError.from_unknown(
                unknown,
                self._known,
                context=self._error_context(options),
            )

    def _validate_completeness(self, options: 'Mapping[str, RuntimeValue]') -> None:
        """Validate that all required options are supplied.

        Raises:
            MissingOptionsError: If a required option is missing.
        """
        missing = [name for name in self._required if name not in options]
        if missing:
            raise MissingOptionsError.from_missing(
                missing,
                context=self._error_context(options),
            )

    def _validate_values(self, resolved: dict[str, 'RuntimeValue']) -> None:
        """Validate resolved values against the allowed values.

        Options are checked in the order their allowed values were first
        declared. Options absent from the resolved values are checked as
        `None`, so an unsupplied optional option passes only if `None`
        is allowed.

        Raises:
            InvalidOptionsError: On the first value that is not allowed.
        """
        for name, allowed_values in self._allowed_values.items():
            value = resolved.get(name)
            if not any(is_allowed(value, allowed) for allowed in allowed_values):
                raise InvalidOptionsError.from_disallowed(
                    name,
                    value,
                    allowed_values,
                    with_context=self.settings.error_snippets,
                )
