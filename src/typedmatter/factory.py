"""Entry point assembling property factories, collections and extraction."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from typedmatter.config import TypedMatterConfig
from typedmatter.errors import BulkInsertError, NilInputError
from typedmatter.frontmatter import DEFAULT_DELIMITER, FrontMatterExtraction, FrontMatterExtractor
from typedmatter.properties import (
    AddEvent,
    AddPolicy,
    CreateOptions,
    MutablePropertyCollection,
    PropertyCollection,
    PropertyFactory,
)


class CollectionFactory:
    """Create property collections with consistent default wiring.

    Args:
        property_factory: Factory shared by every collection; a default
            :class:`PropertyFactory` is created when omitted.
        delimiter: Front matter delimiter line.
        strict: Whether undecodable front matter raises.
        smart_parse: Default smart-parse mode for front matter extraction.
    """

    def __init__(
        self,
        property_factory: PropertyFactory | None = None,
        *,
        delimiter: str = DEFAULT_DELIMITER,
        strict: bool = True,
        smart_parse: bool = False,
    ) -> None:
        self._property_factory = property_factory or PropertyFactory()
        self._extractor = FrontMatterExtractor(
            self._property_factory, delimiter=delimiter, strict=strict
        )
        self._smart_parse = smart_parse

    @classmethod
    def from_config(
        cls,
        config: TypedMatterConfig,
        property_factory: PropertyFactory | None = None,
    ) -> "CollectionFactory":
        """Build a factory using the front matter settings of ``config``."""
        settings = config.front_matter
        return cls(
            property_factory,
            delimiter=settings.delimiter,
            strict=settings.strict,
            smart_parse=settings.smart_parse,
        )

    @property
    def property_factory(self) -> PropertyFactory:
        return self._property_factory

    @property
    def extractor(self) -> FrontMatterExtractor:
        return self._extractor

    def empty_mutable(
        self,
        *,
        add_policy: AddPolicy | None = None,
        add_event: AddEvent | None = None,
    ) -> MutablePropertyCollection:
        """Return a new, empty mutable collection."""
        return MutablePropertyCollection(
            self._property_factory, add_policy=add_policy, add_event=add_event
        )

    def mutable_from_map(
        self,
        items: Mapping[str, Any],
        *,
        add_policy: AddPolicy | None = None,
        add_event: AddEvent | None = None,
        options: CreateOptions | None = None,
    ) -> Tuple[MutablePropertyCollection, int]:
        """Return a mutable collection filled from ``items`` and the accepted count.

        Raises:
            NilInputError: If ``items`` is None.
            BulkInsertError: If an entry cannot be created or stored.
        """
        if items is None:
            raise NilInputError("items is None in CollectionFactory.mutable_from_map")
        collection = self.empty_mutable(add_policy=add_policy, add_event=add_event)
        count = collection.add_map(items, options)
        return collection, count

    def immutable_from_map(
        self,
        items: Mapping[str, Any],
        *,
        add_policy: AddPolicy | None = None,
        add_event: AddEvent | None = None,
        options: CreateOptions | None = None,
    ) -> Tuple[PropertyCollection, int]:
        """Return a read-only collection filled from ``items`` and the accepted count."""
        try:
            collection, count = self.mutable_from_map(
                items, add_policy=add_policy, add_event=add_event, options=options
            )
        except BulkInsertError as exc:
            if exc.properties is not None:
                exc.properties = exc.properties.freeze()
            raise
        return collection.freeze(), count

    def mutable_from_front_matter(
        self,
        content: bytes,
        smart_parse: Optional[bool] = None,
        *,
        add_policy: AddPolicy | None = None,
        add_event: AddEvent | None = None,
        options: CreateOptions | None = None,
    ) -> FrontMatterExtraction:
        """Extract the front matter of ``content`` into a mutable collection.

        Args:
            content: Raw document bytes.
            smart_parse: Overrides the factory's default smart-parse mode.
            add_policy: Add policy for the new collection.
            add_event: Add event for the new collection.
            options: Per-call options forwarded to property creation.

        Returns:
            FrontMatterExtraction: Body, properties and accepted count.
        """
        return self._extractor.extract(
            content,
            self._smart_parse if smart_parse is None else smart_parse,
            options,
            add_policy=add_policy,
            add_event=add_event,
        )


__all__ = ["CollectionFactory"]
