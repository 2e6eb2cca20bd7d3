"""Domain entities for the publication pipeline.

This module contains immutable data structures that represent the content
catalog: raw sources, normalized documents, bylines, tags and the catalog
snapshot handed to renderers.
"""

from press.domain.source import RawSource
from press.domain.document import Document
from press.domain.taxonomy import Author, Tag
from press.domain.catalog import Catalog

__all__ = ["RawSource", "Document", "Author", "Tag", "Catalog"]
