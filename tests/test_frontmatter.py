"""Tests for front-matter parsing into DocumentRecord."""

from datetime import datetime, timedelta, timezone

import pytest

from content_store.core.errors import MalformedMetadata
from content_store.core.types import SourceDocument
from content_store.input.frontmatter import parse_source, slug_from_path, split_front_matter


def _doc(front_matter: str, body: str = "Body.\n", path: str = "posts/sample.md") -> SourceDocument:
    return SourceDocument(path=path, text=f"---\n{front_matter.strip()}\n---\n{body}")


def test_parse_source_full_record():
    source = _doc(
        """
title: Testing reducers is enough
description: Why action creators do not need tests
date: 2020-01-01
categories: [testing, redux]
published: false
canonical_link: https://example.com/testing-reducers
redirect_from:
  - /2020/01/testing-reducers.html
  - /testing-reducers/
""",
        body="First paragraph.\n\nSecond paragraph.\n",
    )

    record = parse_source(source)

    assert record.slug == "posts/sample"
    assert record.title == "Testing reducers is enough"
    assert record.description == "Why action creators do not need tests"
    assert record.date == datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert record.categories == frozenset({"testing", "redux"})
    assert record.published is False
    assert record.canonical_link == "https://example.com/testing-reducers"
    assert record.redirect_from == ("2020/01/testing-reducers.html", "testing-reducers")
    assert record.body == "First paragraph.\n\nSecond paragraph.\n"
    assert record.source_path == "posts/sample.md"
    assert record.url == "/posts/sample/"


def test_parse_source_defaults_for_optional_fields():
    record = parse_source(_doc("title: Minimal\ndate: 2021-05-04"))

    assert record.description == ""
    assert record.categories == frozenset()
    assert record.published is True
    assert record.canonical_link is None
    assert record.redirect_from == ()
    assert dict(record.extra) == {}


def test_parse_source_keeps_timezone_offset():
    record = parse_source(_doc('title: Offset\ndate: "2020-01-01T10:30:00+02:00"'))

    assert record.date.utcoffset() == timedelta(hours=2)


def test_parse_source_zulu_timestamp_string():
    record = parse_source(_doc('title: Zulu\ndate: "2020-01-01T10:30:00Z"'))

    assert record.date == datetime(2020, 1, 1, 10, 30, tzinfo=timezone.utc)


def test_parse_source_collects_unknown_keys():
    record = parse_source(_doc("title: Extra\ndate: 2020-01-01\nlayout: post\ncomments: true"))

    assert dict(record.extra) == {"layout": "post", "comments": True}


def test_parse_source_freezes_nested_extra_values():
    record = parse_source(
        _doc("title: Extra\ndate: 2020-01-01\ntags: [a, b]\nseo:\n  keywords: [x]\n  index: true")
    )

    assert record.extra["tags"] == ("a", "b")
    assert record.extra["seo"]["keywords"] == ("x",)
    with pytest.raises(TypeError):
        record.extra["seo"]["index"] = False


def test_parse_source_dedupes_repeated_aliases():
    record = parse_source(
        _doc("title: Aliases\ndate: 2020-01-01\nredirect_from: [/old/, old, /other]")
    )

    assert record.redirect_from == ("old", "other")


def test_parse_source_ignores_byte_order_mark():
    source = SourceDocument(path="bom.md", text="\ufeff---\ntitle: BOM\ndate: 2020-01-01\n---\nBody\n")

    assert parse_source(source).title == "BOM"


@pytest.mark.parametrize(
    "front_matter, field",
    [
        ("date: 2020-01-01", "title"),
        ("title: ''\ndate: 2020-01-01", "title"),
        ("title: No date", "date"),
        ("title: Bad date\ndate: next tuesday", "date"),
        ("title: Cats\ndate: 2020-01-01\ncategories: testing", "categories"),
        ("title: Cats\ndate: 2020-01-01\ncategories: [1, 2]", "categories"),
        ("title: Flag\ndate: 2020-01-01\npublished: 'no'", "published"),
        ("title: Link\ndate: 2020-01-01\ncanonical_link: example.com/post", "canonical_link"),
        ("title: Alias\ndate: 2020-01-01\nredirect_from: /old", "redirect_from"),
        ("title: Alias\ndate: 2020-01-01\nredirect_from: ['/']", "redirect_from"),
        ("title: Desc\ndate: 2020-01-01\ndescription: [a, b]", "description"),
    ],
)
def test_parse_source_rejects_invalid_fields(front_matter, field):
    with pytest.raises(MalformedMetadata) as exc_info:
        parse_source(_doc(front_matter))

    assert exc_info.value.field == field
    assert exc_info.value.path == "posts/sample.md"


def test_parse_source_without_front_matter():
    source = SourceDocument(path="plain.md", text="Just a body.\n")

    with pytest.raises(MalformedMetadata) as exc_info:
        parse_source(source)

    assert exc_info.value.field is None


def test_parse_source_with_invalid_yaml():
    with pytest.raises(MalformedMetadata):
        parse_source(_doc("title: [unclosed\ndate: 2020-01-01"))


def test_parse_source_with_non_mapping_front_matter():
    with pytest.raises(MalformedMetadata):
        parse_source(_doc("- just\n- a list"))


def test_split_front_matter_requires_closing_fence():
    assert split_front_matter("---\ntitle: Open\nBody without fence\n") is None


def test_split_front_matter_keeps_later_fences_in_body():
    meta, body = split_front_matter("---\ntitle: T\n---\nintro\n---\nmore\n")

    assert meta == "title: T\n"
    assert body == "intro\n---\nmore\n"


@pytest.mark.parametrize(
    "path, slug",
    [
        ("hello.md", "hello"),
        ("posts/2020/hello.md", "posts/2020/hello"),
        ("posts/sagas/index.md", "posts/sagas"),
        ("posts/_index.md", "posts"),
        ("index.md", "index"),
        ("posts\\windows\\style.md", "posts/windows/style"),
    ],
)
def test_slug_from_path(path, slug):
    assert slug_from_path(path) == slug
