"""Immutable description of a resolver schema.

`OptionsSchema` is produced by `OptionsResolver.describe()`. It reports
the declared option names and constraints without exposing the default
values themselves, which may be lazy computations.
"""

from pydantic import Field

from options_resolver.models import SchemaModel
from options_resolver.names import OptionName  # noqa: TC001
from options_resolver.values import RuntimeValue  # noqa: TC001


class OptionsSchema(SchemaModel):
    """Snapshot of the options declared on a resolver."""

    known: list[OptionName] = Field(
        default_factory=list,
        title='Known options',
        description='Every declared option, in declaration order.',
    )

    required: list[OptionName] = Field(
        default_factory=list,
        title='Required options',
        description='Options that must be supplied because they have no default.',
    )

    defaults: list[OptionName] = Field(
        default_factory=list,
        title='Defaulted options',
        description='Options that have a default value.',
    )

    lazy: list[OptionName] = Field(
        default_factory=list,
        title='Lazy options',
        description='Options whose default is computed at resolution time.',
    )

    allowed_values: dict[OptionName, list[RuntimeValue]] = Field(
        default_factory=dict,
        title='Allowed values',
        description='Values accepted for constrained options.',
    )

    def optional(self) -> list[str]:
        """List known options that are neither required nor defaulted."""
        excluded = {*self.required, *self.defaults}

        return [name for name in self.known if name not in excluded]
