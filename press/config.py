from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import json
import os
import re

import yaml


LOAD_ERROR_POLICIES = ("skip", "fail")

_ENV_PATTERN = re.compile(r"\$\{([^:}]+):-?([^}]*)\}")


@dataclass(frozen=True)
class ContentConfig:
    root: str = "content"
    file_extensions: list[str] = field(default_factory=lambda: [".md", ".mdx"])
    article_separator: str | None = None
    include_drafts: bool = False


@dataclass(frozen=True)
class PipelineConfig:
    workers: int = 4
    on_load_error: str = "skip"
    show_progress: bool = False
    timezone: str = "UTC"
    slug_separator: str = "-"


@dataclass(frozen=True)
class CatalogConfig:
    page_size: int = 10


@dataclass(frozen=True)
class AuthorsConfig:
    path: str | None = None
    fallback: str = "team"
    fallback_name: str = "The Team"


@dataclass(frozen=True)
class RoutesConfig:
    document: str = "/blog/{slug}"
    listing: str = "/blog"
    tag: str = "/blog/tags/{tag}"
    author: str = "/blog/authors/{author}"
    series: str = "/blog/series/{series}"
    page_suffix: str = "/page/{page}"


@dataclass(frozen=True)
class OutputConfig:
    directory: str = "build"
    documents_file: str = "documents.jsonl"
    manifest_file: str = "catalog.json"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_dir: str | None = None


@dataclass(frozen=True)
class AppConfig:
    content: ContentConfig = field(default_factory=ContentConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    authors: AuthorsConfig = field(default_factory=AuthorsConfig)
    routes: RoutesConfig = field(default_factory=RoutesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        validate_config(self)


def _expand_env_var(value: str) -> str:
    """Expand environment variables in the form ${VAR:-default}."""

    def replace_env(match):
        return os.environ.get(match.group(1), match.group(2))

    return _ENV_PATTERN.sub(replace_env, value)


def _expand_env(value):
    """Recursively expand env vars in strings inside dicts/lists."""
    if isinstance(value, str):
        return _expand_env_var(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def _coalesce(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _coalesce(merged[key], value)
        else:
            merged[key] = value
    return merged


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _from_dict(data: dict[str, Any]) -> AppConfig:
    pipeline_data = dict(data.get("pipeline", {}))
    pipeline_data["workers"] = _as_int(pipeline_data.get("workers", 4), "pipeline.workers")
    catalog_data = dict(data.get("catalog", {}))
    catalog_data["page_size"] = _as_int(catalog_data.get("page_size", 10), "catalog.page_size")
    return AppConfig(
        content=ContentConfig(**data.get("content", {})),
        pipeline=PipelineConfig(**pipeline_data),
        catalog=CatalogConfig(**catalog_data),
        authors=AuthorsConfig(**data.get("authors", {})),
        routes=RoutesConfig(**data.get("routes", {})),
        output=OutputConfig(**data.get("output", {})),
        logging=LoggingConfig(**data.get("logging", {})),
    )


def validate_config(config: AppConfig) -> None:
    if config.catalog.page_size < 1:
        raise ValueError(f"catalog.page_size must be at least 1, got {config.catalog.page_size}")
    if config.pipeline.workers < 1:
        raise ValueError(f"pipeline.workers must be at least 1, got {config.pipeline.workers}")
    if config.pipeline.on_load_error not in LOAD_ERROR_POLICIES:
        raise ValueError(
            f"pipeline.on_load_error must be one of {', '.join(LOAD_ERROR_POLICIES)}, "
            f"got {config.pipeline.on_load_error!r}"
        )
    if not config.pipeline.slug_separator:
        raise ValueError("pipeline.slug_separator must not be empty")
    if config.content.article_separator is not None and config.content.article_separator.strip() in ("", "---"):
        raise ValueError("content.article_separator must differ from the frontmatter fence")
    if not config.content.file_extensions:
        raise ValueError("content.file_extensions must list at least one extension")
    get_timezone(config.pipeline.timezone)
    if "{slug}" not in config.routes.document:
        raise ValueError("routes.document must contain '{slug}'")
    if "{page}" not in config.routes.page_suffix:
        raise ValueError("routes.page_suffix must contain '{page}'")


def get_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone: {name!r}") from exc


def config_to_dict(config: AppConfig) -> dict[str, Any]:
    return asdict(config)


def load_config(path: str | Path | None) -> AppConfig:
    if path is None:
        return AppConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".json"}:
        data = json.loads(raw)
    else:
        data = yaml.safe_load(raw) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping: {path}")

    # Shorthand top-level keys
    if "content_root" in data:
        content_data = data.setdefault("content", {})
        content_data["root"] = data.pop("content_root")
    if "page_size" in data:
        catalog_data = data.setdefault("catalog", {})
        catalog_data["page_size"] = data.pop("page_size")

    merged = _coalesce(config_to_dict(AppConfig()), _expand_env(data))
    return _from_dict(merged)


def override_config(config: AppConfig, updates: dict[str, Any]) -> AppConfig:
    """Return a new config with nested ``updates`` merged in."""
    if not updates:
        return config
    return _from_dict(_coalesce(config_to_dict(config), updates))


def load_env_overrides(config: AppConfig) -> AppConfig:
    """Apply PRESS_* environment variables on top of a loaded config."""
    variables = {
        "PRESS_CONTENT_ROOT": ("content", "root"),
        "PRESS_OUTPUT_DIR": ("output", "directory"),
        "PRESS_LOG_LEVEL": ("logging", "level"),
        "PRESS_WORKERS": ("pipeline", "workers"),
    }
    updates: dict[str, dict[str, Any]] = {}
    for env_name, (section, key) in variables.items():
        value = os.getenv(env_name)
        if value:
            updates.setdefault(section, {})[key] = value
    return override_config(config, updates)
