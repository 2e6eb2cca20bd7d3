"""Tests for content discovery."""

import pytest

from press.domain.source import RawSource
from press.errors import LoadError
from press.pipeline.loader import (
    FileSystemSource,
    InMemorySource,
    iter_raw_sources,
    load_sources,
    split_articles,
)


@pytest.fixture
def content_dir(tmp_path):
    """Create a temporary directory with MDX files."""
    (tmp_path / "doc1.md").write_text("---\ntitle: Document 1\n---\n", encoding="utf-8")
    (tmp_path / "doc2.mdx").write_text("---\ntitle: Document 2\n---\n", encoding="utf-8")
    (tmp_path / "subdir").mkdir()
    (tmp_path / "subdir" / "doc3.MDX").write_text("---\ntitle: Doc 3\n---\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not content", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")
    return tmp_path


class TestFileSystemSource:
    def test_lists_only_content_extensions_sorted(self, content_dir):
        source = FileSystemSource(content_dir)

        assert source.list_paths() == ["doc1.md", "doc2.mdx", "subdir/doc3.MDX"]

    def test_custom_extensions(self, content_dir):
        source = FileSystemSource(content_dir, extensions=[".md"])

        assert source.list_paths() == ["doc1.md"]

    def test_reads_relative_path(self, content_dir):
        source = FileSystemSource(content_dir)

        assert source.read("subdir/doc3.MDX").startswith("---\ntitle: Doc 3")

    def test_missing_root(self, tmp_path):
        source = FileSystemSource(tmp_path / "missing")

        with pytest.raises(FileNotFoundError):
            source.list_paths()


class TestIterRawSources:
    def test_yields_in_path_order(self):
        source = InMemorySource({"b.mdx": "b", "a.md": "a", "c.txt": "c"})

        assert [raw.path for raw in iter_raw_sources(source)] == ["a.md", "b.mdx"]

    def test_is_restartable(self):
        source = InMemorySource({"a.md": "a", "b.md": "b"})

        first = list(iter_raw_sources(source))
        second = list(iter_raw_sources(source))

        assert first == second

    def test_unreadable_file_is_yielded_as_load_error(self):
        source = InMemorySource({"a.md": "a", "b.md": PermissionError("denied")})

        results = list(iter_raw_sources(source))

        assert results[0] == RawSource("a.md", "a")
        assert isinstance(results[1], LoadError)
        assert results[1].path == "b.md"
        assert "denied" in str(results[1])


class TestLoadSources:
    def test_concurrent_load_is_sorted(self):
        files = {f"post-{index:02d}.mdx": f"text {index}" for index in range(25)}
        source = InMemorySource(files)

        sources, errors = load_sources(source, workers=8)

        assert errors == []
        assert [raw.path for raw in sources] == sorted(files)
        assert sources[3].raw_text == "text 3"

    def test_collects_every_load_error(self):
        source = InMemorySource({
            "a.md": "a",
            "b.md": OSError("disk"),
            "c.md": UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
        })

        sources, errors = load_sources(source, workers=2)

        assert [raw.path for raw in sources] == ["a.md"]
        assert [error.path for error in errors] == ["b.md", "c.md"]

    def test_undecodable_file_on_disk(self, tmp_path):
        (tmp_path / "good.md").write_text("ok", encoding="utf-8")
        (tmp_path / "bad.md").write_bytes(b"\xff\xfe\xfa")

        sources, errors = load_sources(FileSystemSource(tmp_path), workers=1)

        assert [raw.path for raw in sources] == ["good.md"]
        assert [error.path for error in errors] == ["bad.md"]


class TestSplitArticles:
    def test_no_separator_keeps_source(self):
        raw = RawSource("a.mdx", "one\n+++\ntwo\n")

        assert split_articles(raw, None) == [raw]

    def test_splits_on_separator_lines(self):
        raw = RawSource("issues.mdx", "---\ntitle: One\n---\n\n+++\n---\ntitle: Two\n---\n")

        parts = split_articles(raw, "+++")

        assert [part.path for part in parts] == ["issues.mdx#1", "issues.mdx#2"]
        assert parts[1].raw_text == "---\ntitle: Two\n---\n"

    def test_single_part_keeps_original_path(self):
        raw = RawSource("a.mdx", "+++\nonly one\n")

        assert split_articles(raw, "+++") == [raw]

    def test_load_sources_applies_separator(self):
        source = InMemorySource({"digest.mdx": "first\n+++\nsecond\n", "z.mdx": "z"})

        sources, _ = load_sources(source, separator="+++")

        assert [raw.path for raw in sources] == ["digest.mdx#1", "digest.mdx#2", "z.mdx"]
