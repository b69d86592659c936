"""Exception hierarchy for typed property handling."""

from __future__ import annotations

from typing import Any, Optional


class TypedMatterError(Exception):
    """Base exception for all typedmatter failures."""


class NilInputError(TypedMatterError):
    """Raised when a required map or byte buffer is missing."""


class PropertyError(TypedMatterError):
    """Base exception for property construction failures."""


class UnsupportedTypeError(PropertyError):
    """Raised when no creator can classify a value.

    Attributes:
        name: Name of the property that could not be created.
        value: The value that was rejected.
    """

    def __init__(self, name: str, value: Any) -> None:
        self.name = name
        self.value = value
        super().__init__(
            f"Unable to add {name!r} property, type {type(value).__name__} is not known: {value!r}"
        )


class InvalidPropertyError(PropertyError):
    """Raised when a property model rejects its name or value."""

    def __init__(self, name: Any, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid property {name!r}: {reason}")


class BulkInsertError(TypedMatterError):
    """Raised when a bulk insertion stops at a failing entry.

    Entries inserted before the failure stay in the collection.

    Attributes:
        name: Name of the entry that failed.
        count: Number of entries accepted before the failure.
        error: The underlying exception (also chained as ``__cause__``).
        properties: The partially filled collection.
        body: Document body when the failure happened during front matter extraction.
    """

    def __init__(
        self,
        name: Any,
        count: int,
        error: BaseException,
        *,
        properties: Any = None,
        body: Optional[bytes] = None,
    ) -> None:
        self.name = name
        self.count = count
        self.error = error
        self.properties = properties
        self.body = body
        super().__init__(f"Bulk insert stopped at {name!r} after {count} accepted: {error}")


class FrontMatterError(TypedMatterError):
    """Base exception for front matter extraction failures."""


class MalformedFrontMatterError(FrontMatterError):
    """Raised when an opening delimiter has no matching closing delimiter."""

    def __init__(
        self, inside_front_matter: bool, yaml_start_index: int, yaml_end_index: int
    ) -> None:
        self.inside_front_matter = inside_front_matter
        self.yaml_start_index = yaml_start_index
        self.yaml_end_index = yaml_end_index
        super().__init__(
            "unexplained front matter parser error; "
            f"inside_front_matter: {inside_front_matter}, "
            f"yaml_start_index: {yaml_start_index}, "
            f"yaml_end_index: {yaml_end_index}"
        )


class FrontMatterDecodeError(FrontMatterError):
    """Raised when the front matter block is not a decodable YAML mapping."""


class ResourceFetchError(TypedMatterError):
    """Raised when a resource fetcher cannot retrieve a URL."""


__all__ = [
    "TypedMatterError",
    "NilInputError",
    "PropertyError",
    "UnsupportedTypeError",
    "InvalidPropertyError",
    "BulkInsertError",
    "FrontMatterError",
    "MalformedFrontMatterError",
    "FrontMatterDecodeError",
    "ResourceFetchError",
]
