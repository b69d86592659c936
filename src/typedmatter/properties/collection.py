"""Thread-safe collections of named properties."""

from __future__ import annotations

import logging
import threading
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Union,
)

from typedmatter.errors import BulkInsertError, NilInputError

from .factory import DEFAULT_OPTIONS, CreateOptions, PropertyFactory, PropertyResult, bind_hook
from .models import Property

LOGGER = logging.getLogger(__name__)


class AddPropertyPolicy(Protocol):
    """Gate that may veto or substitute a property right before it is stored."""

    def allow_add(self, prop: Property, options: CreateOptions) -> PropertyResult:
        """Return the property to store and whether storing is allowed."""


class AddPropertyEvent(Protocol):
    """Read-only notification fired after a property was stored."""

    def property_added(self, prop: Property, options: CreateOptions) -> None:
        """Observe the stored property."""


AddPolicyFunc = Callable[[Property, CreateOptions], PropertyResult]
AddEventFunc = Callable[[Property, CreateOptions], None]
AddPolicy = Union[AddPropertyPolicy, AddPolicyFunc]
AddEvent = Union[AddPropertyEvent, AddEventFunc]
ValueFunc = Callable[[Property], Tuple[bool, Any]]


class PropertyCollection:
    """Read-only view over properties keyed by unique name.

    All reads are safe under concurrent use. Enumeration works on a snapshot
    taken under the lock, so callbacks may safely call back into the
    collection.
    """

    def __init__(self, items: Mapping[str, Property] | None = None) -> None:
        self._lock = threading.RLock()
        self._items: dict[str, Property] = dict(items or {})

    def named(self, name: str) -> Optional[Property]:
        """Return the property stored under ``name``, or None when absent."""
        with self._lock:
            return self._items.get(name)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._items

    def size(self) -> int:
        """Return the number of stored properties."""
        with self._lock:
            return len(self._items)

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[Property]:
        return iter(self._snapshot())

    def names(self) -> List[str]:
        with self._lock:
            return list(self._items)

    def list(self) -> List[Property]:
        """Return all properties; order is not guaranteed."""
        return self._snapshot()

    def filter(self, predicate: Callable[[Property], bool]) -> List[Property]:
        """Return the properties for which ``predicate`` is true."""
        return [prop for prop in self._snapshot() if predicate(prop)]

    def range(self, visitor: Callable[[Property], bool]) -> None:
        """Call ``visitor`` for each property until it returns a falsy value."""
        for prop in self._snapshot():
            if not visitor(prop):
                break

    def range_name_value(self, visitor: Callable[[str, Any], None]) -> None:
        """Call ``visitor`` with the name and untyped value of each property."""
        for prop in self._snapshot():
            visitor(prop.name, prop.any_value())

    def to_map(self, value_fn: ValueFunc | None = None) -> dict[str, Any]:
        """Export the collection as a plain ``name -> value`` mapping.

        Args:
            value_fn: Optional callable returning ``(keep, value)`` per property.
                Defaults to keeping every property's untyped value.

        Returns:
            dict[str, Any]: Exported mapping.
        """
        result: dict[str, Any] = {}
        for prop in self._snapshot():
            if value_fn is None:
                prop.copy_into(result)
                continue
            keep, value = value_fn(prop)
            if keep:
                result[prop.name] = value
        return result

    def _snapshot(self) -> List[Property]:
        with self._lock:
            return list(self._items.values())


class MutablePropertyCollection(PropertyCollection):
    """Property collection supporting insertion and deletion.

    Each single-entry insert or delete is atomic. Bulk inserts are not: other
    threads may observe a partially populated collection, and a failing entry
    stops the bulk insert without rolling back earlier entries.

    Args:
        factory: Factory used to build properties from raw values.
        add_policy: Optional gate invoked before each insertion.
        add_event: Optional notification invoked after each insertion.
    """

    def __init__(
        self,
        factory: PropertyFactory,
        *,
        add_policy: AddPolicy | None = None,
        add_event: AddEvent | None = None,
    ) -> None:
        super().__init__()
        self._factory = factory
        self._add_policy = bind_hook(add_policy, "allow_add")
        self._add_event = bind_hook(add_event, "property_added")

    @property
    def factory(self) -> PropertyFactory:
        return self._factory

    def add(self, name: str, value: Any, options: CreateOptions | None = None) -> PropertyResult:
        """Build a property from ``value`` and store it.

        Returns:
            PropertyResult: Stored property and whether it was accepted.
        """
        created, accepted = self._factory.from_any(name, value, options)
        if not accepted or created is None:
            return PropertyResult(created, False)
        return self.add_property(created, options)

    def add_parsed(
        self, name: str, text: str, options: CreateOptions | None = None
    ) -> PropertyResult:
        """Smart parse ``text`` into a property and store it."""
        created, accepted = self._factory.from_text(name, text, options)
        if not accepted or created is None:
            return PropertyResult(created, False)
        return self.add_property(created, options)

    def add_map(self, items: Mapping[str, Any], options: CreateOptions | None = None) -> int:
        """Add every entry of ``items`` and return the number accepted.

        Raises:
            NilInputError: If ``items`` is None.
            BulkInsertError: On the first failing entry, carrying the partial count.
        """
        if items is None:
            raise NilInputError("items is None in MutablePropertyCollection.add_map")
        return self._add_all(items.items(), self.add, options)

    def add_text_map(self, items: Mapping[str, str], options: CreateOptions | None = None) -> int:
        """Smart parse and add every entry of ``items``; return the number accepted.

        Raises:
            NilInputError: If ``items`` is None.
            BulkInsertError: On the first failing entry, carrying the partial count.
        """
        if items is None:
            raise NilInputError("items is None in MutablePropertyCollection.add_text_map")
        return self._add_all(items.items(), self.add_parsed, options)

    def add_property(self, prop: Property, options: CreateOptions | None = None) -> PropertyResult:
        """Store an already built property, honoring the add policy and event.

        Storing a name that already exists replaces the earlier property.

        Returns:
            PropertyResult: Stored property (possibly substituted by the policy)
            and whether it was accepted.
        """
        if prop is None:
            raise NilInputError("property is None in MutablePropertyCollection.add_property")
        options = options or DEFAULT_OPTIONS

        final = prop
        if self._add_policy is not None:
            substitute, allowed = self._add_policy(prop, options)
            if not allowed:
                return PropertyResult(substitute, False)
            if substitute is not None:
                final = substitute

        with self._lock:
            self._items[final.name] = final

        if self._add_event is not None:
            self._add_event(final, options)

        return PropertyResult(final, True)

    def delete(self, name: str) -> bool:
        """Remove the property stored under ``name``; return whether one was removed."""
        with self._lock:
            return self._items.pop(name, None) is not None

    def delete_property(self, prop: Property) -> bool:
        return self.delete(prop.name)

    def freeze(self) -> PropertyCollection:
        """Return a read-only copy of the current contents."""
        with self._lock:
            return PropertyCollection(self._items)

    def _add_all(
        self,
        entries: Iterable[Tuple[str, Any]],
        add: Callable[[str, Any, CreateOptions | None], PropertyResult],
        options: CreateOptions | None,
    ) -> int:
        count = 0
        for name, value in entries:
            try:
                _, accepted = add(name, value, options)
            except Exception as exc:
                raise BulkInsertError(name, count, exc, properties=self) from exc
            if accepted:
                count += 1
        LOGGER.debug("Bulk insert accepted %d entries", count)
        return count


__all__ = [
    "AddPropertyPolicy",
    "AddPropertyEvent",
    "AddPolicyFunc",
    "AddEventFunc",
    "AddPolicy",
    "AddEvent",
    "PropertyCollection",
    "MutablePropertyCollection",
]
