"""Publication pipeline components."""

from press.pipeline.loader import (
    DocumentSource,
    FileSystemSource,
    InMemorySource,
    iter_raw_sources,
    load_sources,
)
from press.pipeline.frontmatter import FrontmatterRecord, dump_frontmatter, parse, split_frontmatter
from press.pipeline.normalize import DocumentNormalizer, normalize_tags, slug_from_path
from press.pipeline.index import build_catalog, paginate
from press.pipeline.routes import RouteResolver
from press.pipeline.pipeline import (
    BuildResult,
    Failed,
    PipelineState,
    PublicationPipeline,
    Published,
    run_pipeline,
)

__all__ = [
    # Loading
    "DocumentSource",
    "FileSystemSource",
    "InMemorySource",
    "iter_raw_sources",
    "load_sources",
    # Parsing
    "FrontmatterRecord",
    "dump_frontmatter",
    "parse",
    "split_frontmatter",
    # Normalizing
    "DocumentNormalizer",
    "normalize_tags",
    "slug_from_path",
    # Indexing and routing
    "build_catalog",
    "paginate",
    "RouteResolver",
    # Orchestration
    "BuildResult",
    "Failed",
    "PipelineState",
    "PublicationPipeline",
    "Published",
    "run_pipeline",
]
