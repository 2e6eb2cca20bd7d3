"""Catalog building - groups, orders and paginates normalized documents."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence, TypeVar

from press.domain.catalog import Catalog, frozen_mapping
from press.domain.document import Document
from press.domain.taxonomy import Author, Tag
from press.errors import DuplicateSlug
from press.storage.authors import AuthorRegistry

T = TypeVar("T")


def paginate(items: Sequence[T], size: int) -> tuple[tuple[T, ...], ...]:
    """Partition ``items`` into windows of ``size``; the last may be shorter."""
    if size < 1:
        raise ValueError(f"page size must be at least 1, got {size}")
    return tuple(
        tuple(items[start:start + size]) for start in range(0, len(items), size)
    )


def _grouped(
    documents: Sequence[Document],
    keys_of,
    sort_key,
) -> dict[str, tuple[str, ...]]:
    groups: dict[str, list[Document]] = {}
    for document in documents:
        for key in keys_of(document):
            groups.setdefault(key, []).append(document)
    return {
        key: tuple(document.slug for document in sorted(members, key=sort_key))
        for key, members in sorted(groups.items())
        if members
    }


def _reading_order(document: Document) -> tuple[float, str]:
    return (document.published_at.timestamp(), document.slug)


def build_catalog(
    documents: Iterable[Document],
    page_size: int = 10,
    authors: AuthorRegistry | None = None,
    tag_labels: Mapping[str, str] | None = None,
) -> Catalog:
    """Build a Catalog from the complete document set.

    Pure function of its arguments: the same documents always produce an
    identical catalog, whatever order they arrive in.

    Args:
        documents: Every normalized document of the build
        page_size: Window size for listing pages
        authors: Known authors, used to attach display data to bylines
        tag_labels: Display labels per tag id (defaults to the id)

    Raises:
        DuplicateSlug: Two documents share a slug.
        ValueError: ``page_size`` is less than 1.
    """
    if page_size < 1:
        raise ValueError(f"page size must be at least 1, got {page_size}")

    by_slug: dict[str, Document] = {}
    for document in documents:
        existing = by_slug.get(document.slug)
        if existing is not None:
            raise DuplicateSlug(document.slug, [existing.path, document.path])
        by_slug[document.slug] = document

    ordered = sorted(by_slug.values(), key=lambda document: document.sort_key)
    chronological = tuple(document.slug for document in ordered)

    by_tag = _grouped(ordered, lambda document: document.tags, lambda document: document.sort_key)
    by_author = _grouped(ordered, lambda document: (document.author,), lambda document: document.sort_key)
    by_series = _grouped(
        ordered,
        lambda document: (document.series,) if document.series else (),
        _reading_order,
    )

    labels = tag_labels or {}
    tags = {tag_id: Tag(id=tag_id, label=labels.get(tag_id, tag_id)) for tag_id in by_tag}

    registry = authors if authors is not None else AuthorRegistry()
    referenced_authors = {}
    for author_id in by_author:
        author = registry.get(author_id)
        referenced_authors[author_id] = author or Author(id=author_id, display_name=author_id)

    return Catalog(
        documents_by_slug=frozen_mapping({slug: by_slug[slug] for slug in sorted(by_slug)}),
        documents_by_tag=frozen_mapping(by_tag),
        documents_by_author=frozen_mapping(by_author),
        documents_by_series=frozen_mapping(by_series),
        chronological=chronological,
        pages=paginate(chronological, page_size),
        tags=frozen_mapping(tags),
        authors=frozen_mapping(referenced_authors),
        page_size=page_size,
    )
