"""Options resolution engine with lazy, overloadable defaults.

The `options_resolver` package merges caller-supplied option values with
a declared schema of required, optional and defaulted options.

Key features:
- defaults computed lazily from other resolved options;
- overloads receiving the previous default of the same option;
- detection of cyclic dependencies between lazy defaults;
- validation of unknown, missing and disallowed option values with
  diagnostics listing every offending name.
"""

from .errors import (
    InvalidOptionsError,
    MissingOptionsError,
    NoSuchOptionError,
    OptionDefinitionError,
    OptionsResolverError,
    OptionsWarning,
)
from .options import Options
from .resolver import OptionsResolver
from .schema import OptionsSchema
from .settings import ResolverSettings

__all__ = (
    'InvalidOptionsError',
    'MissingOptionsError',
    'NoSuchOptionError',
    'OptionDefinitionError',
    'Options',
    'OptionsResolver',
    'OptionsResolverError',
    'OptionsSchema',
    'OptionsWarning',
    'ResolverSettings',
)
