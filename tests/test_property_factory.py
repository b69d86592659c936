"""Tests for PropertyFactory type dispatch, smart parsing and hooks."""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from typedmatter.errors import InvalidPropertyError, NilInputError, UnsupportedTypeError
from typedmatter.properties import (
    CARDINAL_MAX,
    CardinalProperty,
    CreateOptions,
    DateTimeProperty,
    FlagProperty,
    PropertyFactory,
    PropertyResult,
    TextListProperty,
    TextProperty,
)


@pytest.mark.parametrize(
    ("value", "expected_type"),
    [
        ("plain text", TextProperty),
        (["one", "two", "three"], TextListProperty),
        (True, FlagProperty),
        (221, CardinalProperty),
        (datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc), DateTimeProperty),
    ],
)
def test_from_any_round_trips_primitive_values(value, expected_type) -> None:
    prop, accepted = PropertyFactory().from_any("key", value)

    assert accepted
    assert isinstance(prop, expected_type)
    assert prop.any_value() == value


def test_from_any_treats_bool_as_flag_not_cardinal() -> None:
    prop, _ = PropertyFactory().from_any("draft", False)

    assert isinstance(prop, FlagProperty)
    assert prop.value is False


def test_from_any_promotes_bare_date_to_midnight_utc() -> None:
    prop, _ = PropertyFactory().from_any("published", date(2024, 3, 1))

    assert prop.value == datetime(2024, 3, 1, tzinfo=timezone.utc)


def test_from_any_unknown_type_raises() -> None:
    with pytest.raises(UnsupportedTypeError) as excinfo:
        PropertyFactory().from_any("ratio", 0.5)

    assert excinfo.value.name == "ratio"
    assert "float" in str(excinfo.value)


def test_from_any_out_of_range_int_takes_unknown_path() -> None:
    with pytest.raises(UnsupportedTypeError):
        PropertyFactory().from_any("huge", CARDINAL_MAX + 1)


def test_from_any_empty_name_raises_invalid_property() -> None:
    with pytest.raises(InvalidPropertyError):
        PropertyFactory().from_any("", "value")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("true", FlagProperty(name="key", value=True)),
        ("false", FlagProperty(name="key", value=False)),
        ("T", FlagProperty(name="key", value=True)),
        ("1", FlagProperty(name="key", value=True)),
        ("221", CardinalProperty(name="key", value=221)),
        ("-42", CardinalProperty(name="key", value=-42)),
        ("test description", TextProperty(name="key", value="test description")),
        ("yes", TextProperty(name="key", value="yes")),
    ],
)
def test_from_text_precedence(text, expected) -> None:
    prop, accepted = PropertyFactory().from_text("key", text)

    assert accepted
    assert prop == expected


def test_from_text_recognizes_dates() -> None:
    prop, _ = PropertyFactory().from_text("date", "2006-01-02T15:04:05Z07:00")

    assert isinstance(prop, DateTimeProperty)
    assert prop.value.utcoffset() == timedelta(hours=7)


def test_from_text_out_of_range_integer_is_text() -> None:
    text = str(CARDINAL_MAX + 1)

    prop, _ = PropertyFactory().from_text("big", text)

    assert prop == TextProperty(name="big", value=text)


def test_from_text_none_raises_nil_input() -> None:
    with pytest.raises(NilInputError):
        PropertyFactory().from_text("key", None)  # type: ignore[arg-type]


def test_custom_date_parser_is_used() -> None:
    def never_a_date(text: str) -> datetime:
        raise ValueError(text)

    prop, _ = PropertyFactory(date_parser=never_a_date).from_text("d", "2024-01-01")

    assert isinstance(prop, TextProperty)


def test_factory_custom_creator_handles_unknown_values() -> None:
    def decimals(name, value, options):
        if isinstance(value, Decimal):
            return PropertyResult(TextProperty(name=name, value=str(value)), True)
        return None

    factory = PropertyFactory(custom_creator=decimals)

    prop, accepted = factory.from_any("price", Decimal("9.99"))

    assert accepted
    assert prop == TextProperty(name="price", value="9.99")
    with pytest.raises(UnsupportedTypeError):
        factory.from_any("ratio", 0.5)


def test_per_call_creator_runs_before_factory_creator() -> None:
    calls: list[str] = []

    def per_call(name, value, options):
        calls.append("per_call")
        return None

    def fallback(name, value, options):
        calls.append("factory")
        return PropertyResult(TextProperty(name=name, value=repr(value)), True)

    factory = PropertyFactory(custom_creator=fallback)

    prop, _ = factory.from_any("x", 1.5, CreateOptions(custom_creator=per_call))

    assert calls == ["per_call", "factory"]
    assert prop.value == "1.5"


def test_custom_creator_handler_object() -> None:
    class FloatAsText:
        def from_any(self, name, value, options):
            return PropertyResult(TextProperty(name=name, value=f"{value:.2f}"), True)

    prop, _ = PropertyFactory(custom_creator=FloatAsText()).from_any("pi", 3.14159)

    assert prop.value == "3.14"


def test_after_create_hook_can_veto() -> None:
    def no_drafts(prop, options):
        return PropertyResult(prop, prop.name != "draft")

    factory = PropertyFactory(after_create=no_drafts)

    assert factory.from_any("title", "x").accepted
    result = factory.from_any("draft", True)
    assert not result.accepted
    assert result.property == FlagProperty(name="draft", value=True)


def test_after_create_hook_applies_to_custom_created_properties() -> None:
    seen: list[str] = []

    def record(prop, options):
        seen.append(prop.name)
        return PropertyResult(prop, True)

    factory = PropertyFactory(
        custom_creator=lambda name, value, options: PropertyResult(
            TextProperty(name=name, value=str(value)), True
        ),
        after_create=record,
    )

    factory.from_any("ratio", 0.5)

    assert seen == ["ratio"]


def test_hooks_receive_per_call_context() -> None:
    captured: list[object] = []

    def capture(prop, options):
        captured.append(options.context.get("source"))
        return PropertyResult(prop, True)

    factory = PropertyFactory(after_create=capture)
    factory.from_any("a", "b", CreateOptions(context={"source": "index.md"}))

    assert captured == ["index.md"]


def test_default_options_context_is_read_only() -> None:
    contexts: list[object] = []

    def remember(prop, options):
        contexts.append(options.context)
        return PropertyResult(prop, True)

    factory = PropertyFactory(after_create=remember)
    factory.from_any("a", "x")

    with pytest.raises(TypeError):
        contexts[0]["leak"] = True  # type: ignore[index]
    assert dict(CreateOptions().context) == {}


def test_unsupported_type_is_raised_without_logging(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="typedmatter"):
        with pytest.raises(UnsupportedTypeError):
            PropertyFactory().from_any("ratio", 0.5)

    assert caplog.records == []
