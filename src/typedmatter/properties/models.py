"""Typed property models.

Each property is an immutable pydantic model holding a non-empty ``name`` and a
``value`` of a fixed kind. The built-in kinds form a discriminated union on the
``kind`` field so dumped properties can be rebuilt from plain mappings.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, Literal, Mapping, MutableMapping, Optional, Tuple, Union
from urllib.parse import SplitResult, urlsplit

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from typedmatter.errors import InvalidPropertyError

CARDINAL_MIN = -(2**63)
CARDINAL_MAX = 2**63 - 1

PropertyKind = Literal["text", "text_list", "flag", "cardinal", "date_time", "resource"]


class Property(BaseModel):
    """Base model for a named, immutable, typed value.

    Subclasses declare a ``value`` field; custom property types created by
    extension hooks subclass this model as well.

    Attributes:
        name: Property name, unique within a collection.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: StrictStr = Field(min_length=1)

    def any_value(self) -> Any:
        """Return the value without regard to its type."""
        return getattr(self, "value", None)

    def copy_into(self, target: MutableMapping[str, Any]) -> None:
        """Store ``name -> any_value()`` in the given mapping."""
        target[self.name] = self.any_value()


class TextProperty(Property):
    """A named string."""

    kind: Literal["text"] = "text"
    value: StrictStr


class TextListProperty(Property):
    """A named ordered sequence of strings."""

    kind: Literal["text_list"] = "text_list"
    value: Tuple[StrictStr, ...]

    def any_value(self) -> list[str]:
        return list(self.value)


class FlagProperty(Property):
    """A named boolean flag."""

    kind: Literal["flag"] = "flag"
    value: StrictBool


class CardinalProperty(Property):
    """A named signed 64-bit integer."""

    kind: Literal["cardinal"] = "cardinal"
    value: Annotated[StrictInt, Field(ge=CARDINAL_MIN, le=CARDINAL_MAX)]


class DateTimeProperty(Property):
    """A named timestamp."""

    kind: Literal["date_time"] = "date_time"
    value: datetime


class ResourceProperty(Property):
    """A named URL, optionally backed by a locally downloaded copy.

    Attributes:
        value: Absolute URL of the resource.
        local_href: Link to the local copy when one was downloaded.
        local_path: Filesystem path of the local copy when one was downloaded.
    """

    kind: Literal["resource"] = "resource"
    value: StrictStr
    local_href: Optional[str] = None
    local_path: Optional[Path] = None

    @field_validator("value")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"{value!r} is not an absolute URL")
        return value

    @property
    def url(self) -> SplitResult:
        """Return the parsed URL."""
        return urlsplit(self.value)

    @property
    def is_downloaded(self) -> bool:
        return self.local_path is not None


AnyProperty = Annotated[
    Union[
        TextProperty,
        TextListProperty,
        FlagProperty,
        CardinalProperty,
        DateTimeProperty,
        ResourceProperty,
    ],
    Field(discriminator="kind"),
]

_ANY_PROPERTY_ADAPTER: TypeAdapter[Any] = TypeAdapter(AnyProperty)


def property_from_dict(data: Mapping[str, Any]) -> Property:
    """Rebuild a built-in property from its ``model_dump`` output.

    Args:
        data: Mapping holding ``kind``, ``name`` and ``value`` keys.

    Returns:
        Property: The reconstructed property.

    Raises:
        InvalidPropertyError: If the mapping does not describe a built-in property.
    """
    try:
        return _ANY_PROPERTY_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise InvalidPropertyError(data.get("name"), str(exc)) from exc


__all__ = [
    "CARDINAL_MIN",
    "CARDINAL_MAX",
    "PropertyKind",
    "Property",
    "TextProperty",
    "TextListProperty",
    "FlagProperty",
    "CardinalProperty",
    "DateTimeProperty",
    "ResourceProperty",
    "AnyProperty",
    "property_from_dict",
]
