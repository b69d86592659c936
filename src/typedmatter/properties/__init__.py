"""Typed properties, their factory and collections."""

from .collection import (
    AddEvent,
    AddPolicy,
    AddPropertyEvent,
    AddPropertyPolicy,
    MutablePropertyCollection,
    PropertyCollection,
)
from .dates import parse_datetime
from .factory import (
    DEFAULT_OPTIONS,
    AfterCreateHook,
    CreateOptions,
    CustomCreator,
    PropertyFactory,
    PropertyResult,
)
from .models import (
    CARDINAL_MAX,
    CARDINAL_MIN,
    AnyProperty,
    CardinalProperty,
    DateTimeProperty,
    FlagProperty,
    Property,
    PropertyKind,
    ResourceProperty,
    TextListProperty,
    TextProperty,
    property_from_dict,
)
from .resources import FetchedResource, ResourceFetcher, ResourceLinker

__all__ = [
    "AddEvent",
    "AddPolicy",
    "AddPropertyEvent",
    "AddPropertyPolicy",
    "MutablePropertyCollection",
    "PropertyCollection",
    "parse_datetime",
    "DEFAULT_OPTIONS",
    "AfterCreateHook",
    "CreateOptions",
    "CustomCreator",
    "PropertyFactory",
    "PropertyResult",
    "CARDINAL_MAX",
    "CARDINAL_MIN",
    "AnyProperty",
    "CardinalProperty",
    "DateTimeProperty",
    "FlagProperty",
    "Property",
    "PropertyKind",
    "ResourceProperty",
    "TextListProperty",
    "TextProperty",
    "property_from_dict",
    "FetchedResource",
    "ResourceFetcher",
    "ResourceLinker",
]
