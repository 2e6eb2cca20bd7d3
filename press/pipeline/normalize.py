"""Turn parsed frontmatter into canonical Document entities."""

from __future__ import annotations

import logging
import re
import unicodedata
from datetime import date, datetime, timezone, tzinfo
from pathlib import PurePosixPath
from typing import Any, Iterable

from press.domain.document import Document
from press.errors import DuplicateSlug, PressError, UnknownAuthor
from press.pipeline.frontmatter import FrontmatterRecord
from press.storage.authors import AuthorRegistry

logger = logging.getLogger(__name__)

_unsafe_re = re.compile(r"[^a-z0-9._\s-]")
_dash_re = re.compile(r"[\s-]+")


def _clean_segment(segment: str) -> str:
    text = unicodedata.normalize("NFKD", segment).encode("ascii", "ignore").decode("ascii")
    text = _unsafe_re.sub("", text.strip().lower())
    return _dash_re.sub("-", text).strip("-.")


def slug_from_path(path: str, separator: str = "-") -> str:
    """Derive the catalog slug from a source path.

    ``blog/Hello World.mdx`` -> ``blog-hello-world``; a trailing ``index``
    file takes its directory's name; ``post.mdx#2`` (second article of a
    split file) -> ``post-2``. Characters outside ``[a-z0-9._-]`` are
    dropped, accents are folded to ASCII.
    """
    path = path.replace("\\", "/")
    head, mark, part = path.rpartition("#")
    if mark and part.isdigit():
        path = head
    else:
        part = ""
    parts = [segment for segment in PurePosixPath(path).parts if segment not in ("", ".", "/")]
    if not parts:
        raise ValueError(f"cannot derive a slug from {path!r}")

    parts[-1] = PurePosixPath(parts[-1]).stem
    parts = [cleaned for cleaned in map(_clean_segment, parts) if cleaned]
    if len(parts) > 1 and parts[-1] == "index":
        parts.pop()

    slug = separator.join(parts) or "untitled"
    if part:
        slug = f"{slug}-{part}"
    return slug


def normalize_tags(tags: Iterable[str]) -> list[tuple[str, str]]:
    """Trim, lower-case and de-duplicate tags.

    Returns:
        (id, label) pairs in first-seen order; the label keeps the first
        spelling encountered.
    """
    seen: dict[str, str] = {}
    for tag in tags:
        label = tag.strip()
        if not label:
            continue
        seen.setdefault(label.lower(), label)
    return list(seen.items())


def _plain(value: Any) -> Any:
    """JSON-friendly copy of a frontmatter value."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_plain(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class DocumentNormalizer:
    """Builds Documents and enforces slug uniqueness across one run."""

    def __init__(
        self,
        authors: AuthorRegistry | None = None,
        default_tz: tzinfo = timezone.utc,
        slug_separator: str = "-",
        include_drafts: bool = False,
    ):
        self._authors = authors if authors is not None else AuthorRegistry()
        self._default_tz = default_tz
        self._separator = slug_separator
        self._include_drafts = include_drafts
        self.warnings: list[PressError] = []
        self.tag_labels: dict[str, str] = {}

    def normalize(
        self,
        path: str,
        record: FrontmatterRecord,
        body: str,
        checksum: str = "",
    ) -> Document:
        """Build the Document for one parsed source.

        An unknown author is not fatal: the document is attributed to the
        fallback author and a warning is recorded.
        """
        author, known = self._authors.resolve(record.author)
        if not known:
            warning = UnknownAuthor(record.author, author.id, path=path)
            logger.warning("%s", warning)
            self.warnings.append(warning)

        tags = normalize_tags(record.tags)
        for tag_id, label in tags:
            self.tag_labels.setdefault(tag_id, label)

        return Document(
            slug=slug_from_path(path, self._separator),
            path=path,
            title=record.title,
            published_at=record.published_at(self._default_tz),
            author=author.id,
            description=record.description,
            tags=tuple(sorted(tag_id for tag_id, _ in tags)),
            body=body,
            checksum=checksum,
            thumb=record.thumb,
            cover=record.cover,
            series=record.series,
            extra=_plain(record.extra_fields),
        )

    def normalize_all(
        self,
        parsed: Iterable[tuple[str, FrontmatterRecord, str, str]],
    ) -> list[Document]:
        """Normalize every parsed source, in the order given.

        Args:
            parsed: (path, record, body, checksum) tuples

        Raises:
            DuplicateSlug: Two sources produced the same slug.
        """
        self.warnings = []
        self.tag_labels = {}
        owners: dict[str, str] = {}
        documents = []
        for path, record, body, checksum in parsed:
            if record.draft and not self._include_drafts:
                logger.info("Skipping draft %s", path)
                continue
            document = self.normalize(path, record, body, checksum)
            if document.slug in owners:
                raise DuplicateSlug(document.slug, [owners[document.slug], path])
            owners[document.slug] = path
            documents.append(document)
        return documents
