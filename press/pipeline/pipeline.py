"""Complete publication pipeline orchestrator."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from tqdm import tqdm

from press.config import AppConfig, get_timezone
from press.domain.catalog import Catalog
from press.domain.source import RawSource
from press.errors import Cancelled, EmptyCatalog, LoadError, ParseError, PressError
from press.pipeline.frontmatter import FrontmatterRecord, parse
from press.pipeline.index import build_catalog
from press.pipeline.loader import DocumentSource, FileSystemSource, load_sources
from press.pipeline.normalize import DocumentNormalizer
from press.pipeline.routes import RouteResolver
from press.storage.authors import AuthorRegistry, load_authors

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PARSING = "parsing"
    NORMALIZING = "normalizing"
    INDEXING = "indexing"
    VALIDATING = "validating"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass(frozen=True)
class Published:
    """Terminal result of a successful build."""

    catalog: Catalog
    routes: Mapping[str, str]
    warnings: tuple[PressError, ...] = ()

    ok = True
    state = PipelineState.PUBLISHED


@dataclass(frozen=True)
class Failed:
    """Terminal result of a build that published nothing."""

    errors: tuple[PressError, ...]
    warnings: tuple[PressError, ...] = ()
    stage: PipelineState = PipelineState.IDLE

    ok = False
    state = PipelineState.FAILED


BuildResult = Published | Failed


@dataclass
class _Run:
    warnings: list[PressError] = field(default_factory=list)
    skipped: int = 0


def _parse_one(raw: RawSource) -> tuple[RawSource, FrontmatterRecord | None, str, ParseError | None]:
    try:
        record, body = parse(raw.raw_text, path=raw.path)
    except ParseError as exc:
        return raw, None, "", exc
    return raw, record, body, None


class PublicationPipeline:
    """Runs Loading -> Parsing -> Normalizing -> Indexing -> Validating.

    Each stage consumes the full output of the previous one. The cancel
    event is checked between stages only; a request applies to the run in
    flight (or the next one) and is cleared when that run ends.
    """

    def __init__(
        self,
        source: DocumentSource,
        config: AppConfig | None = None,
        authors: AuthorRegistry | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self._source = source
        self._config = config or AppConfig()
        if authors is None:
            authors = AuthorRegistry.from_mapping(
                {},
                self._config.authors.fallback,
                self._config.authors.fallback_name,
            )
        self._authors = authors
        self._cancel_event = cancel_event or threading.Event()
        self._resolver = RouteResolver(self._config.routes)
        self.state = PipelineState.IDLE
        self.history: list[PipelineState] = [PipelineState.IDLE]

    @property
    def resolver(self) -> RouteResolver:
        return self._resolver

    def cancel(self) -> None:
        self._cancel_event.set()

    def _enter(self, state: PipelineState) -> None:
        if self._cancel_event.is_set():
            raise Cancelled(state.value)
        logger.info("Stage: %s", state.value)
        self.state = state
        self.history.append(state)

    def _finish(self, result: BuildResult) -> BuildResult:
        self._cancel_event.clear()
        self.state = result.state
        self.history.append(result.state)
        return result

    def _load(self, run: _Run) -> list[RawSource] | Failed:
        self._enter(PipelineState.LOADING)
        try:
            sources, errors = load_sources(
                self._source,
                workers=self._config.pipeline.workers,
                separator=self._config.content.article_separator,
                show_progress=self._config.pipeline.show_progress,
            )
        except OSError as exc:
            # The content store itself is unavailable
            error = LoadError(f"content store unavailable: {exc}")
            error.fatal = True
            logger.error("%s", error)
            return Failed(errors=(error,), stage=PipelineState.LOADING)
        logger.info("Loaded %d sources (%d unreadable)", len(sources), len(errors))
        if not errors:
            return sources
        if self._config.pipeline.on_load_error == "fail":
            for error in errors:
                error.fatal = True
                logger.error("%s", error)
            return Failed(errors=tuple(errors), stage=PipelineState.LOADING)
        for error in errors:
            logger.warning("Skipping %s", error)
        run.warnings.extend(errors)
        run.skipped += len(errors)
        return sources

    def _parse(self, run: _Run, sources: list[RawSource]) -> list[tuple[str, FrontmatterRecord, str, str]]:
        self._enter(PipelineState.PARSING)
        with ThreadPoolExecutor(max_workers=self._config.pipeline.workers) as executor:
            results = list(
                tqdm(
                    executor.map(_parse_one, sources),
                    total=len(sources),
                    desc="Parsing",
                    disable=not self._config.pipeline.show_progress,
                )
            )

        parsed = []
        for raw, record, body, error in sorted(results, key=lambda item: item[0].path):
            if error is not None:
                logger.warning("Excluding %s", error)
                run.warnings.append(error)
                run.skipped += 1
                continue
            parsed.append((raw.path, record, body, raw.checksum))
        return parsed

    def run(self) -> BuildResult:
        """Run a full rebuild and return ``Published`` or ``Failed``."""
        self.state = PipelineState.IDLE
        self.history = [PipelineState.IDLE]
        run = _Run()
        config = self._config

        try:
            loaded = self._load(run)
            if isinstance(loaded, Failed):
                return self._finish(loaded)

            parsed = self._parse(run, loaded)

            self._enter(PipelineState.NORMALIZING)
            normalizer = DocumentNormalizer(
                authors=self._authors,
                default_tz=get_timezone(config.pipeline.timezone),
                slug_separator=config.pipeline.slug_separator,
                include_drafts=config.content.include_drafts,
            )
            documents = normalizer.normalize_all(parsed)
            run.warnings.extend(normalizer.warnings)
            if not documents:
                raise EmptyCatalog(skipped=run.skipped)

            self._enter(PipelineState.INDEXING)
            catalog = build_catalog(
                documents,
                page_size=config.catalog.page_size,
                authors=self._authors,
                tag_labels=normalizer.tag_labels,
            )

            self._enter(PipelineState.VALIDATING)
            routes = self._resolver.route_table(catalog)
        except PressError as exc:
            if not exc.fatal:
                raise
            logger.error("Build failed during %s: %s", self.state.value, exc)
            return self._finish(
                Failed(errors=(exc,), warnings=tuple(run.warnings), stage=self.state)
            )

        logger.info(
            "Published %d documents, %d routes, %d warnings",
            len(catalog),
            len(routes),
            len(run.warnings),
        )
        return self._finish(
            Published(catalog=catalog, routes=routes, warnings=tuple(run.warnings))
        )


def run_pipeline(
    config: AppConfig | None = None,
    source: DocumentSource | None = None,
    authors: AuthorRegistry | None = None,
    cancel_event: threading.Event | None = None,
) -> BuildResult:
    """Run the pipeline with collaborators built from configuration.

    Args:
        config: Application configuration (defaults when omitted)
        source: Content store (filesystem scan of ``content.root`` when omitted)
        authors: Known authors (loaded from ``authors.path`` when omitted)
        cancel_event: Event checked between stages

    Returns:
        ``Published`` or ``Failed``
    """
    config = config or AppConfig()
    if source is None:
        source = FileSystemSource(config.content.root, config.content.file_extensions)
    if authors is None:
        authors = load_authors(
            config.authors.path,
            config.authors.fallback,
            config.authors.fallback_name,
        )
    pipeline = PublicationPipeline(source, config=config, authors=authors, cancel_event=cancel_event)
    return pipeline.run()
