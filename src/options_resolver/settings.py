"""Runtime settings of the resolution engine.

Settings are read from environment variables prefixed with
`OPTIONS_RESOLVER_` unless an explicit settings object is passed
to the resolver.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from options_resolver.models import SettingsModel

ENV_PREFIX = 'OPTIONS_RESOLVER_'


class ResolverSettings(SettingsModel):
    """Settings controlling diagnostics of an `OptionsResolver`."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description=(
            'Raise an `OptionDefinitionError` for suspicious schema '
            'declarations instead of emitting an `OptionsWarning`.'
        ),
    )

    error_snippets: bool = Field(
        default=True,
        title='Error snippets',
        description=(
            'Attach a YAML snippet with the supplied options, known '
            'options or allowed values to resolution errors.'
        ),
    )
