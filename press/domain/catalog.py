"""Catalog: the immutable, fully indexed snapshot of one build."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from press.domain.document import Document
from press.domain.taxonomy import Author, Tag


def frozen_mapping(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Catalog:
    """Cross-referenced indices over every published document.

    Index values are slug sequences; every slug resolves in
    ``documents_by_slug``. Tag, author and series keys only exist while at
    least one document refers to them.

    Attributes:
        documents_by_slug: slug -> Document
        documents_by_tag: tag id -> slugs, newest first
        documents_by_author: author id -> slugs, newest first
        documents_by_series: series id -> slugs, in reading order (oldest first)
        chronological: every slug, newest first
        pages: fixed-size windows over ``chronological``
        tags: tag id -> Tag
        authors: author id -> Author, only for referenced authors
        page_size: window size used for ``pages``
    """

    documents_by_slug: Mapping[str, Document] = field(default_factory=lambda: frozen_mapping({}))
    documents_by_tag: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: frozen_mapping({}))
    documents_by_author: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: frozen_mapping({}))
    documents_by_series: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: frozen_mapping({}))
    chronological: tuple[str, ...] = ()
    pages: tuple[tuple[str, ...], ...] = ()
    tags: Mapping[str, Tag] = field(default_factory=lambda: frozen_mapping({}))
    authors: Mapping[str, Author] = field(default_factory=lambda: frozen_mapping({}))
    page_size: int = 10

    def __len__(self) -> int:
        return len(self.documents_by_slug)

    def __contains__(self, slug: object) -> bool:
        return slug in self.documents_by_slug

    def get(self, slug: str) -> Document | None:
        return self.documents_by_slug.get(slug)

    def _resolve(self, slugs: tuple[str, ...]) -> tuple[Document, ...]:
        return tuple(self.documents_by_slug[slug] for slug in slugs)

    def latest(self, limit: int | None = None) -> tuple[Document, ...]:
        slugs = self.chronological if limit is None else self.chronological[:limit]
        return self._resolve(slugs)

    def by_tag(self, tag: str) -> tuple[Document, ...]:
        return self._resolve(self.documents_by_tag.get(tag.strip().lower(), ()))

    def by_author(self, author: str) -> tuple[Document, ...]:
        return self._resolve(self.documents_by_author.get(author, ()))

    def by_series(self, series: str) -> tuple[Document, ...]:
        return self._resolve(self.documents_by_series.get(series, ()))

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, number: int) -> tuple[Document, ...]:
        """Return the documents on listing page ``number`` (1-based)."""
        if number < 1 or number > len(self.pages):
            raise IndexError(f"page {number} out of range 1..{len(self.pages)}")
        return self._resolve(self.pages[number - 1])

    def neighbours(self, slug: str) -> tuple[Document | None, Document | None]:
        """Return the (newer, older) documents around ``slug`` in chronological order."""
        if slug not in self.documents_by_slug:
            raise KeyError(slug)
        position = self.chronological.index(slug)
        newer = self.chronological[position - 1] if position > 0 else None
        older = (
            self.chronological[position + 1]
            if position + 1 < len(self.chronological)
            else None
        )
        return (
            self.documents_by_slug[newer] if newer else None,
            self.documents_by_slug[older] if older else None,
        )

    def to_dict(self, include_body: bool = True) -> dict:
        documents = {}
        for slug in sorted(self.documents_by_slug):
            data = self.documents_by_slug[slug].to_dict()
            if not include_body:
                data.pop("body")
            documents[slug] = data
        return {
            "page_size": self.page_size,
            "documents": documents,
            "by_tag": {key: list(value) for key, value in sorted(self.documents_by_tag.items())},
            "by_author": {key: list(value) for key, value in sorted(self.documents_by_author.items())},
            "by_series": {key: list(value) for key, value in sorted(self.documents_by_series.items())},
            "chronological": list(self.chronological),
            "pages": [list(page) for page in self.pages],
            "tags": {key: tag.to_dict() for key, tag in sorted(self.tags.items())},
            "authors": {key: author.to_dict() for key, author in sorted(self.authors.items())},
        }

    def to_json(self, include_body: bool = True) -> str:
        """Canonical JSON form; identical catalogs produce identical bytes."""
        return json.dumps(
            self.to_dict(include_body=include_body),
            sort_keys=True,
            ensure_ascii=False,
            indent=2,
        )
