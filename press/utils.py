from __future__ import annotations

import re


_slug_re = re.compile(r"[^a-z0-9\s-]")
_space_re = re.compile(r"[\s-]+")


def slugify(text: str) -> str:
    """URL-safe form of an identifier used inside routes."""
    normalized = text.strip().lower()
    normalized = _slug_re.sub("", normalized)
    normalized = _space_re.sub("-", normalized)
    normalized = normalized.strip("-")
    return normalized or "untitled"
