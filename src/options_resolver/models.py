"""Base Pydantic models for resolver data structures.

This module defines the foundational model classes used for schema
snapshots and runtime settings. Both are immutable, so a snapshot or a
settings object can be shared freely without affecting the resolver
that produced or consumes it.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for schema descriptions.

    Design principles enforced by this model:
        - Immutability: descriptions cannot be modified after creation.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.

    Arbitrary types are allowed because option values are unrestricted.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for resolver runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking settings resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
