"""Document entity for the publication catalog."""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping


def freeze_value(value: Any) -> Any:
    """Read-only copy of a JSON-like value: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(key): freeze_value(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(item) for item in value)
    return value


def thaw_value(value: Any) -> Any:
    """Plain dict/list copy of a frozen value, for serialization."""
    if isinstance(value, Mapping):
        return {key: thaw_value(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw_value(item) for item in value]
    return value


@dataclass(frozen=True, slots=True)
class Document:
    """Immutable document entity.

    Represents a single published article. A content change produces a new
    Document that replaces the old one by slug on the next full rebuild.

    Attributes:
        slug: Unique catalog identifier derived from the source path (e.g., "blog-welcome-post")
        path: Source path relative to the content root (e.g., "blog/welcome-post.mdx")
        title: Document title
        published_at: Timezone-aware publication timestamp
        author: Author identifier (the fallback author when none was declared)
        description: Short summary for listings and meta tags
        tags: Sorted, de-duplicated tag identifiers
        body: Opaque content payload handed to the renderer untouched
        checksum: SHA-256 hash of the raw source for change detection
        thumb: Thumbnail asset identifier (optional)
        cover: Cover asset identifier (optional)
        series: Series identifier (optional)
        extra: Unrecognized frontmatter keys, preserved as declared
    """

    slug: str
    path: str
    title: str
    published_at: datetime
    author: str
    description: str = ""
    tags: tuple[str, ...] = ()
    body: str = ""
    checksum: str = ""
    thumb: str | None = None
    cover: str | None = None
    series: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", freeze_value(self.extra))

    @property
    def sort_key(self) -> tuple[float, str]:
        """Newest first, ties broken by slug ascending."""
        return (-self.published_at.timestamp(), self.slug)

    def to_dict(self) -> dict:
        """Convert document to dictionary for serialization."""
        return {
            "slug": self.slug,
            "path": self.path,
            "title": self.title,
            "published_at": self.published_at.isoformat(),
            "author": self.author,
            "description": self.description,
            "tags": list(self.tags),
            "body": self.body,
            "checksum": self.checksum,
            "thumb": self.thumb,
            "cover": self.cover,
            "series": self.series,
            "extra": thaw_value(self.extra),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        """Create document from dictionary (JSONL format).

        Args:
            data: Dictionary with document fields

        Returns:
            Document instance
        """
        return cls(
            slug=data["slug"],
            path=data["path"],
            title=data["title"],
            published_at=datetime.fromisoformat(data["published_at"]),
            author=data["author"],
            description=data.get("description", ""),
            tags=tuple(data.get("tags", ())),
            body=data.get("body", ""),
            checksum=data.get("checksum", ""),
            thumb=data.get("thumb"),
            cover=data.get("cover"),
            series=data.get("series"),
            extra=data.get("extra") or {},
        )

    def to_frontmatter(self) -> dict:
        """Export the normalized metadata as a frontmatter mapping.

        Optional keys are only emitted when set, so a well-formed source
        block survives a parse/export cycle unchanged.
        """
        data = thaw_value(self.extra)
        data["title"] = self.title
        data["date"] = self.published_at.isoformat()
        if self.description:
            data["description"] = self.description
        data["author"] = self.author
        if self.tags:
            data["tags"] = list(self.tags)
        for key in ("thumb", "cover", "series"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data
