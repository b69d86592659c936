"""Typed properties from loosely typed values and document front matter."""

from importlib import metadata as _metadata

from typedmatter.errors import (
    BulkInsertError,
    FrontMatterDecodeError,
    FrontMatterError,
    InvalidPropertyError,
    MalformedFrontMatterError,
    NilInputError,
    PropertyError,
    ResourceFetchError,
    TypedMatterError,
    UnsupportedTypeError,
)
from typedmatter.factory import CollectionFactory
from typedmatter.frontmatter import FrontMatterExtraction, FrontMatterExtractor
from typedmatter.properties import (
    CreateOptions,
    MutablePropertyCollection,
    Property,
    PropertyCollection,
    PropertyFactory,
    PropertyResult,
)

__all__ = [
    "__version__",
    "CollectionFactory",
    "FrontMatterExtraction",
    "FrontMatterExtractor",
    "CreateOptions",
    "MutablePropertyCollection",
    "Property",
    "PropertyCollection",
    "PropertyFactory",
    "PropertyResult",
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


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("typedmatter")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(list(globals().keys()) + ["__version__"])
