import dataclasses
from dataclasses import dataclass
from typing import Optional

import pytest

from slugy.core import signals, transliteration
from slugy.core.assigner import ChangeAwareSlugAssigner, MergedView, assign, merged_view, same_value
from slugy.core.composers import ComposerRegistry
from slugy.core.specs import ComposedFields, NestedPath


@dataclass
class Post:
    title: Optional[str] = None
    slug: Optional[str] = None


@dataclass
class Content:
    name: Optional[str] = None
    type: Optional[str] = None
    slug: Optional[str] = None


class Article:
    def __init__(self, name, type):
        self.name = name
        self.type = type


@pytest.fixture(autouse=True)
def german_table():
    transliteration.activate("de")
    yield
    transliteration.reset()


@pytest.fixture
def assigner():
    return ChangeAwareSlugAssigner(composers=ComposerRegistry(), into="slug")


def test_single_field_change_puts_slug(assigner):
    changes = {"title": "A new post"}
    result = assigner.assign(changes, Post(), "title")

    assert result == {"title": "A new post", "slug": "a-new-post"}
    assert changes == {"title": "A new post"}


def test_single_field_without_change_is_noop(assigner):
    changes = {}
    assert assigner.assign(changes, Post(title="Old"), "title") is changes


def test_single_field_changed_to_none_is_noop(assigner):
    changes = {"title": None}
    assert assigner.assign(changes, Post(title="Old"), "title") is changes


def test_unrelated_changes_do_not_add_slug(assigner):
    changes = {"body": "text"}
    result = assigner.assign(changes, {"title": "Old"}, "title")
    assert result is changes
    assert "slug" not in result


def test_composed_fields_mix_prior_and_changed_values(assigner):
    prior = {"name": "Processo Penal", "type": "video"}
    result = assigner.assign({"type": "image"}, prior, {"with": ["name", "type"]})

    assert result["slug"] == "processo-penal-image"


def test_composed_fields_read_attribute_records(assigner):
    prior = Content(name="Processo Penal", type="video")
    result = assigner.assign({"name": "Processo Civil"}, prior, ComposedFields(["name", "type"]))

    assert result["slug"] == "processo-civil-video"


def test_composed_fields_treat_missing_prior_values_as_empty(assigner):
    result = assigner.assign({"type": "image"}, {}, {"with": ["name", "type"]})
    assert result["slug"] == "image"


def test_composed_fields_without_any_change_is_noop(assigner):
    changes = {"body": "x"}
    prior = {"name": "Processo Penal", "type": "video"}
    assert assigner.assign(changes, prior, {"with": ["name", "type"]}) is changes


def test_repeating_prior_values_is_noop(assigner):
    prior = {"name": "Processo Penal", "type": "video"}

    assert "slug" not in assigner.assign({}, prior, {"with": ["name", "type"]})

    changes = dict(prior)
    result = assigner.assign(changes, prior, {"with": ["name", "type"]})
    assert "slug" not in result
    assert result is changes


def test_repeated_single_field_on_attribute_record_is_noop(assigner):
    changes = {"title": "Same title"}
    assert assigner.assign(changes, Post(title="Same title"), "title") is changes


def test_one_real_change_among_repeated_values_triggers(assigner):
    prior = {"name": "Processo Penal", "type": "video"}
    result = assigner.assign({"name": "Processo Penal", "type": "image"}, prior, {"with": ["name", "type"]})

    assert result["slug"] == "processo-penal-image"


def test_assign_changes_counts_every_present_key(assigner):
    prior = {"name": "Processo Penal", "type": "video"}
    result = assigner.assign_changes(dict(prior), prior, {"with": ["name", "type"]})

    assert result["slug"] == "processo-penal-video"


def test_nested_path_resolves_inside_changes(assigner):
    result = assigner.assign({"data": {"title": "A new post"}}, None, ["data", "title"])
    assert result["slug"] == "a-new-post"


@pytest.mark.parametrize(
    "changes",
    [
        {"data": {}},
        {"data": {"title": None}},
        {"data": None},
        {"data": "not a mapping"},
        {"other": {"title": "x"}},
    ],
)
def test_nested_path_failures_are_noops(assigner, changes):
    assert assigner.assign(changes, None, NestedPath(["data", "title"])) is changes


def test_nested_path_ignores_prior_record(assigner):
    changes = {"data": {"body": "x"}}
    prior = {"data": {"title": "Prior title"}}
    assert assigner.assign(changes, prior, ["data", "title"]) is changes


def test_composer_overrides_single_field(assigner):
    assigner.composers.register(Content, lambda record: f"{record.name} {record.type}")

    prior = Content(name="Processo Penal", type="video")
    result = assigner.assign({"name": "Processo Civil"}, prior, "name")

    assert result["slug"] == "processo-civil-video"


def test_composer_sees_merged_view(assigner):
    seen = {}

    def compose(record):
        seen["record"] = record
        return f"{record.name} {record.type}"

    assigner.composers.register(Content, compose)
    prior = Content(name="Processo Penal", type="video")
    result = assigner.assign({"type": "image"}, prior, {"with": ["name", "type"]})

    assert result["slug"] == "processo-penal-image"
    assert isinstance(seen["record"], Content)
    assert seen["record"] is not prior
    assert prior.type == "video"


def test_dataclass_composer_can_use_asdict(assigner):
    assigner.composers.register(
        Content, lambda record: " ".join(str(v) for v in dataclasses.asdict(record).values() if v)
    )
    prior = Content(name="Processo Penal", type="video")
    result = assigner.assign({"type": "image", "body": "ignored"}, prior, "type")

    assert result["slug"] == "processo-penal-image"


def test_composer_on_plain_object_gets_read_only_view(assigner):
    seen = {}

    def compose(record):
        seen["record"] = record
        return f"{record.name} {record.type}"

    assigner.composers.register(Article, compose)
    result = assigner.assign({"type": "image"}, Article("Processo Penal", "video"), "type")

    assert result["slug"] == "processo-penal-image"
    assert isinstance(seen["record"], MergedView)


def test_composer_is_not_called_without_trigger(assigner):
    calls = []
    assigner.composers.register(Content, lambda record: calls.append(record) or "x")

    changes = {"type": "image"}
    assert assigner.assign(changes, Content(name="a"), "name") is changes
    assert calls == []


def test_composer_returning_none_is_noop(assigner):
    assigner.composers.register(Content, lambda record: None)
    changes = {"name": "x"}
    assert assigner.assign(changes, Content(), "name") is changes


def test_into_overrides_output_field(assigner):
    result = assigner.assign({"title": "Hello there"}, None, "title", into="permalink")
    assert result == {"title": "Hello there", "permalink": "hello-there"}


def test_assigner_table_override():
    assigner = ChangeAwareSlugAssigner(composers=ComposerRegistry(), table={})
    result = assigner.assign({"title": "Straße"}, None, "title")
    assert result["slug"] == "strae"


def test_non_string_values_are_stringified(assigner):
    result = assigner.assign({"year": 2024}, None, "year")
    assert result["slug"] == "2024"


def test_slug_assigned_signal(assigner):
    received = []

    def receiver(sender, **kwargs):
        received.append((kwargs["field"], kwargs["slug"]))

    signals.slug_assigned.connect(receiver)
    try:
        assigner.assign({"title": "Signal me"}, None, "title")
        assigner.assign({}, None, "title")
    finally:
        signals.slug_assigned.disconnect(receiver)

    assert received == [("slug", "signal-me")]


def test_module_level_assign_uses_settings_slug_field():
    assert assign({"title": "Default assigner"}, None, "title")["slug"] == "default-assigner"


def test_merged_view_shapes():
    assert merged_view({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}
    assert merged_view(None, {"b": 3}) == {"b": 3}

    prior = Content(name="n", type="t")
    copy = merged_view(prior, {"type": "u", "extra": 1})
    assert copy == Content(name="n", type="u")
    assert prior.type == "t"

    view = merged_view(Article("n", "t"), {"type": "u"})
    assert (view.name, view.type) == ("n", "u")
    with pytest.raises(AttributeError):
        view.name = "other"


def test_same_value_handles_uncomparable_values():
    class NoTruth:
        def __eq__(self, other):
            return self

        def __bool__(self):
            raise ValueError("ambiguous")

    assert not same_value(NoTruth(), 1)
    assert same_value("a", "a")
