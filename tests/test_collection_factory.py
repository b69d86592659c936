"""Tests for the CollectionFactory entry point."""

import pytest

from typedmatter import CollectionFactory
from typedmatter.config import TypedMatterConfig
from typedmatter.errors import BulkInsertError, FrontMatterDecodeError, NilInputError
from typedmatter.properties import (
    DateTimeProperty,
    MutablePropertyCollection,
    PropertyCollection,
    PropertyFactory,
    PropertyResult,
    TextProperty,
)

DOC = b"---\ndate: 2006-01-02T15:04:05Z07:00\n---\nbody\n"


def test_empty_mutable_shares_property_factory() -> None:
    property_factory = PropertyFactory()
    factory = CollectionFactory(property_factory)

    collection = factory.empty_mutable()

    assert isinstance(collection, MutablePropertyCollection)
    assert collection.factory is property_factory
    assert collection.size() == 0


def test_mutable_from_map_returns_collection_and_count() -> None:
    collection, count = CollectionFactory().mutable_from_map({"a": "x", "b": 2})

    assert count == 2
    collection.add("c", True)
    assert collection.size() == 3


def test_immutable_from_map_is_read_only() -> None:
    collection, count = CollectionFactory().immutable_from_map({"a": "x"})

    assert count == 1
    assert type(collection) is PropertyCollection
    assert collection.to_map() == {"a": "x"}


def test_from_map_rejects_none() -> None:
    with pytest.raises(NilInputError):
        CollectionFactory().mutable_from_map(None)  # type: ignore[arg-type]
    with pytest.raises(NilInputError):
        CollectionFactory().immutable_from_map(None)  # type: ignore[arg-type]


def test_from_map_applies_policy() -> None:
    collection, count = CollectionFactory().mutable_from_map(
        {"keep": 1, "drop": 2},
        add_policy=lambda prop, options: PropertyResult(prop, prop.name == "keep"),
    )

    assert count == 1
    assert collection.names() == ["keep"]


def test_front_matter_uses_factory_default_smart_parse() -> None:
    plain = CollectionFactory().mutable_from_front_matter(DOC)
    smart = CollectionFactory(smart_parse=True).mutable_from_front_matter(DOC)

    assert isinstance(plain.properties.named("date"), TextProperty)
    assert isinstance(smart.properties.named("date"), DateTimeProperty)


def test_front_matter_smart_parse_argument_overrides_default() -> None:
    result = CollectionFactory(smart_parse=True).mutable_from_front_matter(DOC, smart_parse=False)

    assert isinstance(result.properties.named("date"), TextProperty)


def test_from_config_applies_front_matter_settings() -> None:
    config = TypedMatterConfig.model_validate(
        {"front_matter": {"delimiter": "+++", "smart_parse": True, "strict": False}}
    )
    factory = CollectionFactory.from_config(config)

    result = factory.mutable_from_front_matter(b"+++\nn: 5\n+++\nbody")
    assert result.properties.named("n").value == 5
    assert not factory.extractor.strict

    broken = factory.mutable_from_front_matter(b"+++\nn: [1\n+++\n")
    assert broken.body is None


def test_strict_factory_raises_on_bad_yaml() -> None:
    with pytest.raises(FrontMatterDecodeError):
        CollectionFactory().mutable_from_front_matter(b"---\nn: [1\n---\n")


def test_failed_mutable_from_map_exposes_partial_collection() -> None:
    with pytest.raises(BulkInsertError) as excinfo:
        CollectionFactory().mutable_from_map({"title": "Hello", "ratio": 0.5})

    partial = excinfo.value.properties
    assert isinstance(partial, MutablePropertyCollection)
    assert partial.named("title") == TextProperty(name="title", value="Hello")


def test_failed_immutable_from_map_exposes_read_only_partial_collection() -> None:
    with pytest.raises(BulkInsertError) as excinfo:
        CollectionFactory().immutable_from_map({"title": "Hello", "ratio": 0.5})

    partial = excinfo.value.properties
    assert type(partial) is PropertyCollection
    assert partial.names() == ["title"]


def test_failed_front_matter_exposes_body_and_properties() -> None:
    content = b"---\ntitle: Hello\nratio: 0.5\n---\nbody\n"

    with pytest.raises(BulkInsertError) as excinfo:
        CollectionFactory().mutable_from_front_matter(content)

    assert excinfo.value.body == b"body"
    assert "title" in excinfo.value.properties
