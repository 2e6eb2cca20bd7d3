"""Catalog export for renderers: documents JSONL and catalog manifest."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Mapping

from press.domain.catalog import Catalog
from press.domain.document import Document

logger = logging.getLogger(__name__)


def write_documents_jsonl(documents: Iterable[Document], path: str | Path) -> int:
    """Write one ``Document.to_dict`` record per line; returns the count."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8") as handle:
        for document in documents:
            handle.write(json.dumps(document.to_dict(), ensure_ascii=False, sort_keys=True))
            handle.write("\n")
            count += 1
    logger.info("Wrote %d documents to %s", count, path)
    return count


def load_documents_jsonl(path: str | Path) -> Iterator[Document]:
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            yield Document.from_dict(json.loads(line))


def build_manifest(
    catalog: Catalog,
    routes: Mapping[str, str],
    warnings: Iterable = (),
) -> dict:
    manifest = catalog.to_dict(include_body=False)
    manifest["routes"] = dict(sorted(routes.items()))
    manifest["warnings"] = [warning.to_dict() for warning in warnings]
    return manifest


def write_manifest(
    catalog: Catalog,
    routes: Mapping[str, str],
    path: str | Path,
    warnings: Iterable = (),
) -> Path:
    """Write the catalog indices, route table and warnings as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = build_manifest(catalog, routes, warnings)
    path.write_text(
        json.dumps(manifest, ensure_ascii=False, sort_keys=True, indent=2) + "\n",
        encoding="utf-8",
    )
    logger.info("Wrote catalog manifest to %s", path)
    return path
