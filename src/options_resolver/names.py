"""Option name primitive type and validation rules.

Option names are plain strings. They must be non-empty and must not carry
leading or trailing whitespace, which almost always indicates a typo in a
schema declaration and leads to confusing "unknown option" diagnostics.
"""

from collections.abc import Iterable, Mapping
from typing import Annotated

from pydantic import Field, TypeAdapter, ValidationError

from options_resolver.errors import OptionDefinitionError

#: Pattern for option names: no surrounding whitespace, at least one character.
_NAME_PATTERN = r'^\S(.*\S)?$'

OptionName = Annotated[
    str, Field(
        min_length=1,
        pattern=_NAME_PATTERN,
        strict=True,
        title='Option name',
        description=(
            'Name of an option declared on a resolver. '
            'Names are non-empty strings without leading or '
            'trailing whitespace.'
        ),
        examples=[
            'timeout',
            'max_retries',
            'data-class',
        ],
    ),
]

_NAMES = TypeAdapter(list[OptionName])


def validate_names(names: Iterable[str], *, method: str) -> list[str]:
    """Validate a sequence of option names.

    Args:
        names: Option names to validate. A single string is treated as
            a single name.
        method: Name of the calling resolver method, used in messages.

    Returns:
        The list of validated names.

    Raises:
        OptionDefinitionError: If names are passed as a mapping (that is,
            with values attached) or if any name is invalid.
    """
    if isinstance(names, Mapping):
        raise OptionDefinitionError(f'You should not pass default values to {method}()')

    if isinstance(names, str):
        names = [names]

    try:
        return _NAMES.validate_python(list(names))
    except ValidationError as error:
        raise OptionDefinitionError.from_pydantic_error(error, method=method) from error
