"""Tests for route resolution and uniqueness."""

from datetime import datetime, timezone

import pytest

from press.config import RoutesConfig
from press.domain.document import Document
from press.errors import RouteConflict
from press.pipeline.index import build_catalog
from press.pipeline.routes import RouteResolver


def doc(slug, tags=(), author="team", series=None, day=1):
    return Document(
        slug=slug,
        path=f"{slug}.mdx",
        title=slug,
        published_at=datetime(2024, 1, day, tzinfo=timezone.utc),
        author=author,
        tags=tuple(sorted(tags)),
        series=series,
    )


@pytest.fixture
def resolver():
    return RouteResolver()


def test_document_route(resolver):
    assert resolver.resolve(doc("hello-world")) == "/blog/hello-world"


def test_listing_routes(resolver):
    assert resolver.resolve_listing() == "/blog"
    assert resolver.resolve_listing(1) == "/blog"
    assert resolver.resolve_listing(3) == "/blog/page/3"


def test_group_routes(resolver):
    assert resolver.resolve_tag("rust") == "/blog/tags/rust"
    assert resolver.resolve_tag("Web Dev", page=2) == "/blog/tags/web-dev/page/2"
    assert resolver.resolve_author("jane") == "/blog/authors/jane"
    assert resolver.resolve_series("rust-101") == "/blog/series/rust-101"


def test_page_numbers_start_at_one(resolver):
    with pytest.raises(ValueError):
        resolver.resolve_listing(0)


def test_custom_templates():
    resolver = RouteResolver(
        RoutesConfig(document="/posts/{slug}/", listing="/", page_suffix="/p{page}")
    )

    assert resolver.resolve(doc("a")) == "/posts/a"
    assert resolver.resolve_listing() == "/"
    assert resolver.resolve_listing(2) == "/p2"


def test_route_table_covers_every_page(resolver):
    documents = [
        doc("a", tags=("rust",), author="jane", day=1),
        doc("b", tags=("rust",), series="intro", day=2),
        doc("c", tags=("rust", "web"), day=3),
    ]
    catalog = build_catalog(documents, page_size=2)

    table = resolver.route_table(catalog)

    assert table["/blog/a"] == "document:a.mdx"
    assert table["/blog"] == "listing:1"
    assert table["/blog/page/2"] == "listing:2"
    assert table["/blog/tags/rust"] == "tag:rust:1"
    assert table["/blog/tags/rust/page/2"] == "tag:rust:2"
    assert "/blog/tags/web/page/2" not in table
    assert table["/blog/authors/jane"] == "author:jane:1"
    assert table["/blog/authors/team"] == "author:team:1"
    assert table["/blog/series/intro"] == "series:intro:1"
    assert len(table) == len(set(table))


def test_route_table_is_deterministic(resolver):
    documents = [doc("a", tags=("x",)), doc("b", tags=("y",), day=2)]

    first = resolver.route_table(build_catalog(documents))
    second = resolver.route_table(build_catalog(list(reversed(documents))))

    assert list(first.items()) == list(second.items())


def test_tags_that_slugify_alike_conflict(resolver):
    catalog = build_catalog([
        doc("a", tags=("web dev",)),
        doc("b", tags=("web-dev",), day=2),
    ])

    with pytest.raises(RouteConflict) as excinfo:
        resolver.validate_uniqueness(catalog)

    assert excinfo.value.route == "/blog/tags/web-dev"
    assert excinfo.value.owners == ("tag:web dev:1", "tag:web-dev:1")
    assert excinfo.value.fatal is True


def test_document_shadowing_a_tag_page_conflicts(resolver):
    # A nested slug lands on the tag listing route
    catalog = build_catalog([doc("tags/rust"), doc("post", tags=("rust",), day=2)])

    with pytest.raises(RouteConflict) as excinfo:
        resolver.route_table(catalog)

    assert excinfo.value.route == "/blog/tags/rust"
    assert excinfo.value.owners == ("document:tags/rust.mdx", "tag:rust:1")
