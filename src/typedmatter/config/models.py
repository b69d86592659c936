"""Configuration models describing typedmatter settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TypedMatterBaseModel(BaseModel):
    """Shared configuration for typedmatter settings models."""

    model_config = ConfigDict(extra="forbid")


class FrontMatterSettings(TypedMatterBaseModel):
    """Front matter extraction defaults.

    Attributes:
        delimiter: Line content fencing the front matter block.
        smart_parse: Whether values are decoded as text and their types inferred.
        strict: Whether undecodable blocks raise instead of being discarded.
    """

    delimiter: str = "---"
    smart_parse: bool = False
    strict: bool = True

    @field_validator("delimiter")
    @classmethod
    def _delimiter_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("delimiter must contain non-whitespace characters")
        return value.strip()


class LoggingSettings(TypedMatterBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class CLIOptions(TypedMatterBaseModel):
    """CLI presentation defaults.

    Attributes:
        json_default: Whether commands emit JSON unless told otherwise.
    """

    json_default: bool = False


class TypedMatterConfig(TypedMatterBaseModel):
    """Top-level configuration for typedmatter.

    Attributes:
        front_matter: Front matter extraction settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    front_matter: FrontMatterSettings = Field(default_factory=FrontMatterSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "TypedMatterBaseModel",
    "FrontMatterSettings",
    "LoggingSettings",
    "CLIOptions",
    "TypedMatterConfig",
]
