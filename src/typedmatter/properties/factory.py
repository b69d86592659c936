"""Factory turning untyped values and raw text into typed properties."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from types import MappingProxyType
from typing import Any, Callable, Mapping, NamedTuple, Optional, Protocol, Type, Union

from pydantic import ValidationError

from typedmatter.errors import InvalidPropertyError, NilInputError, UnsupportedTypeError

from .dates import parse_datetime
from .models import (
    CARDINAL_MAX,
    CARDINAL_MIN,
    CardinalProperty,
    DateTimeProperty,
    FlagProperty,
    Property,
    TextListProperty,
    TextProperty,
)

_BOOL_LITERALS = {
    "1": True,
    "t": True,
    "T": True,
    "TRUE": True,
    "true": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "FALSE": False,
    "false": False,
    "False": False,
}
_INTEGER = re.compile(r"[+-]?[0-9]+\Z")


class PropertyResult(NamedTuple):
    """Outcome of creating or storing a property.

    ``accepted`` is False when a hook or policy rejected the property; failures
    are raised as exceptions instead.

    Attributes:
        property: The created (possibly substituted) property, if any.
        accepted: Whether the property was accepted.
    """

    property: Optional[Property]
    accepted: bool


class CustomCreator(Protocol):
    """Handler resolving values the factory does not recognize."""

    def from_any(self, name: str, value: Any, options: "CreateOptions") -> Optional[PropertyResult]:
        """Return a result, or None to decline the value."""


class AfterCreateHook(Protocol):
    """Handler that may wrap, replace, or veto freshly built properties."""

    def after_create(self, prop: Property, options: "CreateOptions") -> PropertyResult:
        """Return the final result for ``prop``."""


CustomCreatorFunc = Callable[[str, Any, "CreateOptions"], Optional[PropertyResult]]
AfterCreateFunc = Callable[[Property, "CreateOptions"], PropertyResult]
DateParser = Callable[[str], datetime]


@dataclass(frozen=True)
class CreateOptions:
    """Per-call options forwarded through factories, policies and events.

    Attributes:
        custom_creator: Creator consulted before the factory-level one for unknown types.
        context: Free-form caller data made available to hooks.
    """

    custom_creator: Union[CustomCreator, CustomCreatorFunc, None] = None
    context: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


DEFAULT_OPTIONS = CreateOptions()


def bind_hook(hook: Any, method_name: str) -> Optional[Callable[..., Any]]:
    """Resolve a hook given either as a handler object or as a plain callable.

    A handler's ``method_name`` takes precedence over the object being callable.

    Args:
        hook: Handler, callable, or None.
        method_name: Name of the handler method to look up.

    Returns:
        Optional[Callable[..., Any]]: Bound callable, or None when no hook was given.

    Raises:
        TypeError: If ``hook`` is neither callable nor a handler.
    """
    if hook is None:
        return None
    method = getattr(hook, method_name, None)
    if callable(method):
        return method
    if callable(hook):
        return hook
    raise TypeError(f"{hook!r} is neither callable nor provides {method_name}()")


class PropertyFactory:
    """Create typed properties from untyped values or raw text.

    Args:
        custom_creator: Creator consulted for values of unknown type after any
            per-call creator declined.
        after_create: Hook applied to every successfully created property.
        date_parser: Callable used by smart parsing to recognize date/time text;
            it must raise ``ValueError`` for text it does not recognize.
    """

    def __init__(
        self,
        *,
        custom_creator: Union[CustomCreator, CustomCreatorFunc, None] = None,
        after_create: Union[AfterCreateHook, AfterCreateFunc, None] = None,
        date_parser: DateParser = parse_datetime,
    ) -> None:
        self._custom_creator = bind_hook(custom_creator, "from_any")
        self._after_create = bind_hook(after_create, "after_create")
        self._date_parser = date_parser

    def from_any(
        self, name: str, value: Any, options: CreateOptions | None = None
    ) -> PropertyResult:
        """Create a property by dispatching on the run-time type of ``value``.

        Args:
            name: Property name.
            value: Value to wrap.
            options: Per-call options.

        Returns:
            PropertyResult: Created property and whether it was accepted.

        Raises:
            UnsupportedTypeError: If no creator recognizes the value.
            InvalidPropertyError: If the property model rejects the name or value.
        """
        options = options or DEFAULT_OPTIONS

        if isinstance(value, str):
            return self._finish(self._build(TextProperty, name, value), options)
        if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            return self._finish(self._build(TextListProperty, name, tuple(value)), options)
        if isinstance(value, datetime):
            return self._finish(self._build(DateTimeProperty, name, value), options)
        if isinstance(value, date):
            moment = datetime.combine(value, time(), tzinfo=timezone.utc)
            return self._finish(self._build(DateTimeProperty, name, moment), options)
        # bool is an int subclass, so it must be matched first.
        if isinstance(value, bool):
            return self._finish(self._build(FlagProperty, name, value), options)
        if isinstance(value, int) and CARDINAL_MIN <= value <= CARDINAL_MAX:
            return self._finish(self._build(CardinalProperty, name, int(value)), options)

        return self._from_unknown(name, value, options)

    def from_text(
        self, name: str, text: str, options: CreateOptions | None = None
    ) -> PropertyResult:
        """Create a property by smart parsing ``text``.

        Interpretations are tried in a fixed order: boolean literal, date/time,
        base-10 signed 64-bit integer, and finally plain text.

        Args:
            name: Property name.
            text: Raw text to interpret.
            options: Per-call options.

        Returns:
            PropertyResult: Created property and whether it was accepted.

        Raises:
            NilInputError: If ``text`` is None.
            InvalidPropertyError: If the property model rejects the name or value.
        """
        if text is None:
            raise NilInputError(f"text for property {name!r} is None")

        flag = _BOOL_LITERALS.get(text)
        if flag is not None:
            return self.from_any(name, flag, options)

        try:
            moment = self._date_parser(text)
        except ValueError:
            pass
        else:
            return self.from_any(name, moment, options)

        if _INTEGER.match(text):
            number = int(text)
            if CARDINAL_MIN <= number <= CARDINAL_MAX:
                return self.from_any(name, number, options)

        return self.from_any(name, text, options)

    # Internal helpers -------------------------------------------------

    def _build(self, model: Type[Property], name: str, value: Any) -> Property:
        try:
            return model(name=name, value=value)
        except ValidationError as exc:
            raise InvalidPropertyError(name, str(exc)) from exc

    def _finish(self, prop: Property, options: CreateOptions) -> PropertyResult:
        if self._after_create is None:
            return PropertyResult(prop, True)
        return self._after_create(prop, options)

    def _from_unknown(self, name: str, value: Any, options: CreateOptions) -> PropertyResult:
        per_call = bind_hook(options.custom_creator, "from_any")
        for creator in (per_call, self._custom_creator):
            if creator is None:
                continue
            result = creator(name, value, options)
            if result is None:
                continue
            if result.accepted and result.property is not None:
                return self._finish(result.property, options)
            return result

        raise UnsupportedTypeError(name, value)


__all__ = [
    "PropertyResult",
    "CreateOptions",
    "DEFAULT_OPTIONS",
    "CustomCreator",
    "CustomCreatorFunc",
    "AfterCreateHook",
    "AfterCreateFunc",
    "DateParser",
    "PropertyFactory",
    "bind_hook",
]
