"""Storage adapters for the publication pipeline."""

from press.storage.authors import AuthorRegistry, load_authors
from press.storage.manifest import (
    build_manifest,
    load_documents_jsonl,
    write_documents_jsonl,
    write_manifest,
)

__all__ = [
    "AuthorRegistry",
    "load_authors",
    "build_manifest",
    "load_documents_jsonl",
    "write_documents_jsonl",
    "write_manifest",
]
