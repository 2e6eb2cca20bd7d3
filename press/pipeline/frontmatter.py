"""Frontmatter parsing and validation.

A source starts with a fenced YAML block::

    ---
    title: Hello
    date: 2024-03-05
    tags: [rust, web]
    ---
    body...

``title`` and ``date`` are mandatory. Unknown keys are kept so that newer
content does not break older builds.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone, tzinfo
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from press.errors import ParseError

FENCE = "---"

_FENCE_RE = re.compile(r"^---[ \t]*$")


class FrontmatterRecord(BaseModel):
    """Validated metadata block of one source."""

    model_config = ConfigDict(extra="allow", frozen=True)

    title: str
    date: datetime
    description: str = ""
    author: str | None = None
    tags: list[str] = []
    thumb: str | None = None
    cover: str | None = None
    series: str | None = None
    draft: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def title_must_not_be_empty(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            raise ValueError("title cannot be empty")
        return str(v).strip()

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> datetime:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("date cannot be empty")
        if isinstance(v, datetime):
            return v
        if isinstance(v, date):
            return datetime(v.year, v.month, v.day)
        if isinstance(v, str):
            text = v.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            try:
                return datetime.fromisoformat(text)
            except ValueError as exc:
                raise ValueError(f"unparseable date {v!r}") from exc
        raise ValueError(f"unparseable date {v!r}")

    @field_validator("description", mode="before")
    @classmethod
    def description_to_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("author", mode="before")
    @classmethod
    def first_author(cls, v: Any) -> str | None:
        # A list of bylines keeps the lead author
        if isinstance(v, (list, tuple)):
            v = v[0] if v else None
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    @field_validator("tags", mode="before")
    @classmethod
    def tags_to_list(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if not isinstance(v, (list, tuple, set)):
            raise ValueError("tags must be a list of strings")
        return [str(item) for item in v if item is not None]

    @field_validator("thumb", "cover", "series", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> str | None:
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    @field_validator("draft", mode="before")
    @classmethod
    def draft_flag(cls, v: Any) -> bool:
        return False if v is None else v

    @property
    def extra_fields(self) -> dict[str, Any]:
        """Unrecognized keys, as declared."""
        return dict(self.model_extra or {})

    def published_at(self, default_tz: tzinfo = timezone.utc) -> datetime:
        """Publication timestamp; naive values are read in ``default_tz``."""
        if self.date.tzinfo is None:
            return self.date.replace(tzinfo=default_tz)
        return self.date


def split_frontmatter(raw_text: str) -> tuple[str, str]:
    """Split a source into (metadata block, body).

    Raises:
        ParseError: No opening fence or no closing fence.
    """
    text = raw_text.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start >= len(lines) or not _FENCE_RE.match(lines[start].rstrip("\r\n")):
        raise ParseError("missing frontmatter block")

    for end in range(start + 1, len(lines)):
        if _FENCE_RE.match(lines[end].rstrip("\r\n")):
            block = "".join(lines[start + 1:end])
            body = "".join(lines[end + 1:])
            return block, body.lstrip("\r\n")

    raise ParseError("unterminated frontmatter block")


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "frontmatter"
        if error["type"] == "missing":
            problems.append(f"missing required field '{location}'")
        else:
            message = error["msg"].removeprefix("Value error, ")
            problems.append(f"invalid '{location}': {message}")
    return "; ".join(problems)


def parse(raw_text: str, path: str | None = None) -> tuple[FrontmatterRecord, str]:
    """Parse a raw source into its validated frontmatter and body.

    Args:
        raw_text: Full source text
        path: Source path, attached to errors for reporting

    Returns:
        (record, body)

    Raises:
        ParseError: The document must be excluded from the catalog.
    """
    try:
        block, body = split_frontmatter(raw_text)
    except ParseError as exc:
        raise ParseError(exc.message, path=path) from None

    # Impossible calendar dates (2024-02-30) fail inside the YAML
    # timestamp constructor with a plain ValueError
    try:
        data = yaml.safe_load(block)
    except (yaml.YAMLError, ValueError) as exc:
        raise ParseError(f"malformed frontmatter: {exc}", path=path) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError("frontmatter must be a key/value mapping", path=path)

    data = {str(key): value for key, value in data.items()}
    try:
        record = FrontmatterRecord.model_validate(data)
    except ValidationError as exc:
        raise ParseError(_format_validation_error(exc), path=path) from exc
    return record, body


def dump_frontmatter(metadata: dict[str, Any], body: str = "") -> str:
    """Serialize metadata and body back into a source file."""
    block = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True)
    return f"{FENCE}\n{block}{FENCE}\n{body}"
