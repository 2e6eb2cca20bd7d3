"""Public URL resolution for documents and listing pages."""

from __future__ import annotations

import logging
import math

from press.config import RoutesConfig
from press.domain.catalog import Catalog
from press.domain.document import Document
from press.errors import RouteConflict
from press.utils import slugify

logger = logging.getLogger(__name__)


def _normalize_route(route: str) -> str:
    route = "/" + route.strip("/")
    while "//" in route:
        route = route.replace("//", "/")
    return route


class RouteResolver:
    """Maps catalog entries to route paths.

    Every route is a deterministic function of a slug, or of a tag/author/
    series identifier plus a 1-based page number. Page 1 of a listing is
    served at the bare listing route.
    """

    def __init__(self, config: RoutesConfig | None = None):
        self._config = config or RoutesConfig()

    def resolve(self, document: Document) -> str:
        return _normalize_route(self._config.document.format(slug=document.slug))

    def _paged(self, base: str, page: int) -> str:
        if page < 1:
            raise ValueError(f"page numbers start at 1, got {page}")
        if page == 1:
            return _normalize_route(base)
        return _normalize_route(base + self._config.page_suffix.format(page=page))

    def resolve_listing(self, page: int = 1) -> str:
        return self._paged(self._config.listing, page)

    def resolve_tag(self, tag: str, page: int = 1) -> str:
        return self._paged(self._config.tag.format(tag=slugify(tag)), page)

    def resolve_author(self, author: str, page: int = 1) -> str:
        return self._paged(self._config.author.format(author=slugify(author)), page)

    def resolve_series(self, series: str, page: int = 1) -> str:
        return self._paged(self._config.series.format(series=slugify(series)), page)

    def _claims(self, catalog: Catalog):
        """Yield (route, owner) for everything the catalog publishes."""
        for slug in sorted(catalog.documents_by_slug):
            document = catalog.documents_by_slug[slug]
            yield self.resolve(document), f"document:{document.path}"

        for page in range(1, max(catalog.page_count, 1) + 1):
            yield self.resolve_listing(page), f"listing:{page}"

        groups = (
            ("tag", catalog.documents_by_tag, self.resolve_tag),
            ("author", catalog.documents_by_author, self.resolve_author),
            ("series", catalog.documents_by_series, self.resolve_series),
        )
        for kind, index, resolve in groups:
            for key in sorted(index):
                page_count = math.ceil(len(index[key]) / catalog.page_size)
                for page in range(1, page_count + 1):
                    yield resolve(key, page), f"{kind}:{key}:{page}"

    def route_table(self, catalog: Catalog) -> dict[str, str]:
        """Return route -> owner for every published route.

        Raises:
            RouteConflict: Two owners claim the same route.
        """
        table: dict[str, str] = {}
        for route, owner in self._claims(catalog):
            if route in table:
                raise RouteConflict(route, [table[route], owner])
            table[route] = owner
        logger.debug("Resolved %d routes", len(table))
        return table

    def validate_uniqueness(self, catalog: Catalog) -> None:
        """Raise ``RouteConflict`` if two catalog entries share a route."""
        self.route_table(catalog)
