"""Error taxonomy for the publication pipeline.

Per-document errors (``LoadError``, ``ParseError``) are collected and reported
as warnings; structural errors (``DuplicateSlug``, ``RouteConflict``) and
``Cancelled`` end the run without publishing anything.
"""

from __future__ import annotations


class PressError(Exception):
    """Base class for all pipeline errors."""

    fatal: bool = False

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def to_dict(self) -> dict:
        return {
            "kind": type(self).__name__,
            "path": self.path,
            "message": self.message,
            "fatal": self.fatal,
        }


class LoadError(PressError):
    """A content source could not be read."""


class ParseError(PressError):
    """Frontmatter is missing, malformed, or lacks a mandatory field."""


class UnknownAuthor(PressError):
    """A byline names an author the registry does not know."""

    def __init__(self, author: str, fallback: str, path: str | None = None):
        self.author = author
        self.fallback = fallback
        super().__init__(f"unknown author '{author}', using fallback '{fallback}'", path=path)


class NormalizeError(PressError):
    """A parsed document cannot be turned into a catalog entry."""

    fatal = True


class DuplicateSlug(NormalizeError):
    """Two source files normalize to the same slug."""

    def __init__(self, slug: str, paths: list[str] | tuple[str, ...]):
        self.slug = slug
        self.paths = tuple(sorted(paths))
        super().__init__(
            f"duplicate slug '{slug}' produced by {', '.join(self.paths)}"
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["slug"] = self.slug
        data["paths"] = list(self.paths)
        return data


class RouteConflict(PressError):
    """Two catalog entries resolve to the same public route."""

    fatal = True

    def __init__(self, route: str, owners: list[str] | tuple[str, ...]):
        self.route = route
        self.owners = tuple(owners)
        super().__init__(f"route '{route}' claimed by {', '.join(self.owners)}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["route"] = self.route
        data["owners"] = list(self.owners)
        return data


class EmptyCatalog(PressError):
    """No document survived parsing and normalization."""

    fatal = True

    def __init__(self, skipped: int = 0):
        self.skipped = skipped
        super().__init__(
            f"no publishable documents ({skipped} skipped with errors)"
        )


class Cancelled(PressError):
    """The run was cancelled between stages."""

    fatal = True

    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"build cancelled before {stage}")
