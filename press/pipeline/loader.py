"""Content discovery: turn a content store into RawSource records."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, Mapping, Protocol, Sequence

from tqdm import tqdm

from press.domain.source import RawSource
from press.errors import LoadError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".md", ".mdx")


class DocumentSource(Protocol):
    """Content store collaborator.

    ``list_paths`` returns POSIX paths relative to the store root;
    ``read`` returns the full text of one of them or raises ``OSError``.
    """

    def list_paths(self) -> Sequence[str]: ...

    def read(self, path: str) -> str: ...


class FileSystemSource:
    """Recursive directory scan restricted to content extensions."""

    def __init__(self, root: str | Path, extensions: Sequence[str] = DEFAULT_EXTENSIONS):
        self._root = Path(root)
        self._extensions = tuple(ext.lower() for ext in extensions)

    @property
    def root(self) -> Path:
        return self._root

    def list_paths(self) -> list[str]:
        if not self._root.is_dir():
            raise FileNotFoundError(f"Content root not found: {self._root}")
        paths = []
        for path in self._root.rglob("*"):
            if path.suffix.lower() in self._extensions and not path.is_dir():
                paths.append(path.relative_to(self._root).as_posix())
        return sorted(paths)

    def read(self, path: str) -> str:
        return (self._root / path).read_text(encoding="utf-8")


class InMemorySource:
    """Fixture-backed source: path -> text, or path -> exception to raise on read."""

    def __init__(self, files: Mapping[str, str | Exception], extensions: Sequence[str] = DEFAULT_EXTENSIONS):
        self._files = dict(files)
        self._extensions = tuple(ext.lower() for ext in extensions)

    def list_paths(self) -> list[str]:
        return sorted(
            path for path in self._files
            if Path(path).suffix.lower() in self._extensions
        )

    def read(self, path: str) -> str:
        if path not in self._files:
            raise FileNotFoundError(path)
        content = self._files[path]
        if isinstance(content, Exception):
            raise content
        return content


def split_articles(raw: RawSource, separator: str | None) -> list[RawSource]:
    """Split a file that packs several articles around separator lines.

    Each part of a split file gets the path ``"<path>#<n>"``; a file without
    the separator is returned unchanged.
    """
    if not separator:
        return [raw]
    parts: list[list[str]] = [[]]
    for line in raw.raw_text.splitlines(keepends=True):
        if line.strip() == separator:
            parts.append([])
        else:
            parts[-1].append(line)
    texts = ["".join(part) for part in parts]
    texts = [text for text in texts if text.strip()]
    if len(texts) <= 1:
        return [raw]
    return [
        RawSource(path=f"{raw.path}#{index}", raw_text=text)
        for index, text in enumerate(texts, start=1)
    ]


def _read_one(source: DocumentSource, path: str) -> RawSource | LoadError:
    try:
        return RawSource(path=path, raw_text=source.read(path))
    except (OSError, UnicodeDecodeError) as exc:
        return LoadError(f"unreadable source: {exc}", path=path)


def iter_raw_sources(
    source: DocumentSource,
    separator: str | None = None,
) -> Iterator[RawSource | LoadError]:
    """Lazily yield sources in stable path order.

    Each call starts a fresh scan, so the sequence can be restarted.
    Unreadable files are yielded as ``LoadError`` values, not raised.
    """
    for path in sorted(source.list_paths()):
        result = _read_one(source, path)
        if isinstance(result, LoadError):
            yield result
        else:
            yield from split_articles(result, separator)


def load_sources(
    source: DocumentSource,
    workers: int = 4,
    separator: str | None = None,
    show_progress: bool = False,
) -> tuple[list[RawSource], list[LoadError]]:
    """Read every source concurrently and return them sorted by path.

    Args:
        source: Content store to read from
        workers: Thread pool size
        separator: Optional in-band article separator line
        show_progress: Display a tqdm progress bar

    Returns:
        (sources, errors), both ordered by path
    """
    paths = sorted(source.list_paths())
    logger.debug("Discovered %d content files", len(paths))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = list(
            tqdm(
                executor.map(lambda path: _read_one(source, path), paths),
                total=len(paths),
                desc="Loading",
                disable=not show_progress,
            )
        )

    sources: list[RawSource] = []
    errors: list[LoadError] = []
    for result in results:
        if isinstance(result, LoadError):
            errors.append(result)
        else:
            sources.extend(split_articles(result, separator))

    sources.sort(key=lambda raw: raw.path)
    errors.sort(key=lambda error: error.path or "")
    return sources, errors
