"""Content ingestion and publication pipeline."""

__version__ = "0.1.0"

# Domain entities
from press.domain import Author, Catalog, Document, RawSource, Tag

# Errors
from press.errors import (
    Cancelled,
    DuplicateSlug,
    EmptyCatalog,
    LoadError,
    NormalizeError,
    ParseError,
    PressError,
    RouteConflict,
    UnknownAuthor,
)

# Configuration
from press.config import AppConfig, load_config

# Pipeline components
from press.pipeline import (
    DocumentSource,
    Failed,
    FileSystemSource,
    InMemorySource,
    PipelineState,
    PublicationPipeline,
    Published,
    RouteResolver,
    build_catalog,
    run_pipeline,
)

# Storage
from press.storage import AuthorRegistry, load_authors

__all__ = [
    # Domain
    "Author",
    "Catalog",
    "Document",
    "RawSource",
    "Tag",
    # Errors
    "Cancelled",
    "DuplicateSlug",
    "EmptyCatalog",
    "LoadError",
    "NormalizeError",
    "ParseError",
    "PressError",
    "RouteConflict",
    "UnknownAuthor",
    # Configuration
    "AppConfig",
    "load_config",
    # Pipeline
    "DocumentSource",
    "Failed",
    "FileSystemSource",
    "InMemorySource",
    "PipelineState",
    "PublicationPipeline",
    "Published",
    "RouteResolver",
    "build_catalog",
    "run_pipeline",
    # Storage
    "AuthorRegistry",
    "load_authors",
]
