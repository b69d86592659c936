"""Front matter extraction from raw document bytes.

A document may open with a YAML block fenced by delimiter lines::

    ---
    title: Example
    ---
    body text

The scanner walks the buffer line by line; the first line whose stripped
content equals the delimiter opens the block and the next one closes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional

import yaml

from typedmatter.errors import (
    BulkInsertError,
    FrontMatterDecodeError,
    MalformedFrontMatterError,
    NilInputError,
)
from typedmatter.properties import (
    AddEvent,
    AddPolicy,
    CreateOptions,
    MutablePropertyCollection,
    PropertyFactory,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_DELIMITER = "---"


@dataclass(frozen=True)
class FrontMatterExtraction:
    """Result of a front matter extraction.

    Attributes:
        body: Document body with the front matter removed and whitespace trimmed,
            or None when a lenient decode failure discarded the document.
        properties: Properties decoded from the block, or None when the document
            had no front matter.
        count: Number of properties accepted into ``properties``.
    """

    body: Optional[bytes]
    properties: Optional[MutablePropertyCollection]
    count: int = 0

    @property
    def has_front_matter(self) -> bool:
        return self.properties is not None


class FrontMatterBounds(NamedTuple):
    """Byte offsets of a located front matter block.

    Attributes:
        start: Offset just past the opening delimiter line.
        payload_end: Offset where the closing delimiter line begins.
        end: Offset just past the closing delimiter line.
    """

    start: int
    payload_end: int
    end: int


class FrontMatterExtractor:
    """Split documents into a YAML property block and a body.

    Args:
        factory: Property factory used to populate new collections.
        delimiter: Line content marking the block boundaries.
        strict: Raise on undecodable blocks instead of discarding the document.
    """

    def __init__(
        self,
        factory: PropertyFactory,
        *,
        delimiter: str = DEFAULT_DELIMITER,
        strict: bool = True,
    ) -> None:
        if not delimiter.strip():
            raise ValueError("delimiter must contain non-whitespace characters")
        self._factory = factory
        self._delimiter = delimiter.strip().encode("utf-8")
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def locate(self, content: bytes) -> Optional[FrontMatterBounds]:
        """Find the front matter block in ``content``.

        Args:
            content: Raw document bytes.

        Returns:
            Optional[FrontMatterBounds]: Offsets of the block, or None when no
            opening delimiter exists.

        Raises:
            MalformedFrontMatterError: If the block is opened but never closed.
        """
        inside = False
        start = 0
        position = 0
        length = len(content)

        while position < length:
            newline = content.find(b"\n", position)
            next_position = length if newline == -1 else newline + 1
            if content[position:next_position].strip() == self._delimiter:
                if not inside:
                    inside = True
                    start = next_position
                else:
                    return FrontMatterBounds(start, position, next_position)
            position = next_position

        if not inside:
            return None
        raise MalformedFrontMatterError(inside, start, 0)

    def extract(
        self,
        content: bytes,
        smart_parse: bool = False,
        options: CreateOptions | None = None,
        *,
        add_policy: AddPolicy | None = None,
        add_event: AddEvent | None = None,
    ) -> FrontMatterExtraction:
        """Extract the front matter of ``content`` into a property collection.

        Args:
            content: Raw document bytes.
            smart_parse: Decode every value as text and infer its type, instead of
                using the types YAML assigns.
            options: Per-call options forwarded to property creation.
            add_policy: Add policy for the new collection.
            add_event: Add event for the new collection.

        Returns:
            FrontMatterExtraction: Body, properties and accepted count.

        Raises:
            NilInputError: If ``content`` is None.
            MalformedFrontMatterError: If the block is never closed.
            FrontMatterDecodeError: If the block cannot be decoded in strict mode.
            BulkInsertError: If a property cannot be created or stored.
        """
        if content is None:
            raise NilInputError("content is None in FrontMatterExtractor.extract")

        bounds = self.locate(content)
        if bounds is None:
            return FrontMatterExtraction(content, None, 0)

        payload = content[bounds.start : bounds.payload_end]
        try:
            items = self._decode(payload, smart_parse)
        except FrontMatterDecodeError:
            if self._strict:
                raise
            LOGGER.warning("Discarding document with undecodable front matter", exc_info=True)
            return FrontMatterExtraction(None, None, 0)

        body = content[bounds.end :].strip()
        properties = MutablePropertyCollection(
            self._factory, add_policy=add_policy, add_event=add_event
        )
        try:
            if smart_parse:
                count = properties.add_text_map(items, options)
            else:
                count = properties.add_map(items, options)
        except BulkInsertError as exc:
            exc.body = body
            raise

        LOGGER.debug(
            "Extracted %d front matter properties from bytes %d-%d",
            count,
            bounds.start,
            bounds.payload_end,
        )
        return FrontMatterExtraction(body, properties, count)

    def _decode(self, payload: bytes, smart_parse: bool) -> dict[str, Any]:
        loader = yaml.BaseLoader if smart_parse else yaml.SafeLoader
        try:
            data = yaml.load(payload, Loader=loader)
        except yaml.YAMLError as exc:
            raise FrontMatterDecodeError(f"Invalid YAML front matter: {exc}") from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise FrontMatterDecodeError(
                f"Front matter must be a mapping, got {type(data).__name__}"
            )
        for key, value in data.items():
            if not isinstance(key, str):
                raise FrontMatterDecodeError(f"Front matter key {key!r} is not a string")
            if smart_parse and not isinstance(value, str):
                raise FrontMatterDecodeError(
                    f"Front matter value for {key!r} must be a scalar to be smart parsed"
                )
        if smart_parse:
            return data
        return {key: _in_utc(value) for key, value in data.items()}


def _in_utc(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


__all__ = [
    "DEFAULT_DELIMITER",
    "FrontMatterBounds",
    "FrontMatterExtraction",
    "FrontMatterExtractor",
]
