"""Resource properties linking URL-valued text to downloaded content.

Downloading is delegated to a caller-supplied :class:`ResourceFetcher`; this
module only decides which properties are resources and records where the
fetched copy lives.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, NamedTuple, Optional, Protocol
from urllib.parse import urlsplit

from typedmatter.errors import ResourceFetchError

from .factory import CreateOptions, PropertyResult
from .models import Property, ResourceProperty, TextProperty

LOGGER = logging.getLogger(__name__)

DEFAULT_SCHEMES = ("http", "https")


class FetchedResource(NamedTuple):
    """Location of a locally stored copy of a resource.

    Attributes:
        local_href: Link callers should use to reference the local copy.
        local_path: Filesystem path of the local copy.
    """

    local_href: Optional[str]
    local_path: Optional[Path]


class ResourceFetcher(Protocol):
    """Capability that retrieves a URL and stores it locally."""

    def fetch(self, url: str) -> FetchedResource:
        """Download ``url`` and return where the copy was stored."""


class ResourceLinker:
    """After-create hook converting URL text properties into resource properties.

    Args:
        fetcher: Optional fetcher used to download each resource.
        schemes: URL schemes treated as resources.
    """

    def __init__(
        self,
        fetcher: ResourceFetcher | None = None,
        *,
        schemes: Iterable[str] = DEFAULT_SCHEMES,
    ) -> None:
        self._fetcher = fetcher
        self._schemes = frozenset(scheme.lower() for scheme in schemes)

    def is_resource_url(self, text: str) -> bool:
        parts = urlsplit(text.strip())
        return parts.scheme.lower() in self._schemes and bool(parts.netloc)

    def after_create(self, prop: Property, options: CreateOptions) -> PropertyResult:
        """Return a resource property for URL text, or ``prop`` unchanged.

        Raises:
            ResourceFetchError: If the fetcher fails to retrieve the URL.
        """
        if not isinstance(prop, TextProperty) or not self.is_resource_url(prop.value):
            return PropertyResult(prop, True)

        url = prop.value.strip()
        if self._fetcher is None:
            return PropertyResult(ResourceProperty(name=prop.name, value=url), True)

        try:
            fetched = self._fetcher.fetch(url)
        except ResourceFetchError:
            raise
        except OSError as exc:
            raise ResourceFetchError(f"Unable to fetch {url} for {prop.name!r}: {exc}") from exc

        LOGGER.debug("Fetched %s for %r into %s", url, prop.name, fetched.local_path)
        return PropertyResult(
            ResourceProperty(
                name=prop.name,
                value=url,
                local_href=fetched.local_href,
                local_path=fetched.local_path,
            ),
            True,
        )


__all__ = [
    "DEFAULT_SCHEMES",
    "FetchedResource",
    "ResourceFetcher",
    "ResourceLinker",
]
