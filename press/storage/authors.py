"""Known-authors registry loaded from a YAML file.

The file maps author ids to their display data::

    jane:
      name: Jane Doe
      bio: Writes about compilers.
      avatar: /images/authors/jane.png
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping

import yaml

from press.domain.taxonomy import Author

logger = logging.getLogger(__name__)


class AuthorRegistry:
    """Lookup of known bylines with a guaranteed fallback author."""

    def __init__(self, authors: Iterable[Author] = (), fallback: Author | None = None):
        self._authors: dict[str, Author] = {author.id: author for author in authors}
        if fallback is None:
            fallback = Author(id="team", display_name="The Team")
        self._fallback = self._authors.setdefault(fallback.id, fallback)

    @property
    def fallback(self) -> Author:
        return self._fallback

    def __contains__(self, author_id: object) -> bool:
        return author_id in self._authors

    def __len__(self) -> int:
        return len(self._authors)

    def get(self, author_id: str) -> Author | None:
        return self._authors.get(author_id)

    def resolve(self, author_id: str | None) -> tuple[Author, bool]:
        """Return (author, known); unknown or absent ids map to the fallback."""
        if author_id is None:
            return self._fallback, True
        author = self._authors.get(author_id)
        if author is None:
            return self._fallback, False
        return author, True

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, object],
        fallback_id: str = "team",
        fallback_name: str = "The Team",
    ) -> "AuthorRegistry":
        authors = []
        for author_id, entry in data.items():
            author_id = str(author_id).strip()
            if isinstance(entry, str):
                authors.append(Author(id=author_id, display_name=entry))
                continue
            if not isinstance(entry, Mapping):
                raise ValueError(f"author '{author_id}' must be a mapping or a display name")
            authors.append(
                Author(
                    id=author_id,
                    display_name=str(entry.get("name") or author_id),
                    bio=entry.get("bio"),
                    avatar=entry.get("avatar"),
                )
            )
        return cls(authors, fallback=Author(id=fallback_id, display_name=fallback_name))


def load_authors(
    path: str | Path | None,
    fallback_id: str = "team",
    fallback_name: str = "The Team",
) -> AuthorRegistry:
    """Load the registry from YAML; with no path only the fallback is known."""
    if path is None:
        return AuthorRegistry.from_mapping({}, fallback_id, fallback_name)

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Authors file not found: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Authors file must be a mapping: {path}")

    registry = AuthorRegistry.from_mapping(data, fallback_id, fallback_name)
    logger.debug("Loaded %d authors from %s", len(registry), path)
    return registry
