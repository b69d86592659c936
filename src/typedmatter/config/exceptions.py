"""Exceptions raised by configuration loading."""

from typedmatter.errors import TypedMatterError


class ConfigError(TypedMatterError):
    """Raised when configuration data cannot be read or validated."""
