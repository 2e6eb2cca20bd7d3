"""Pytest configuration for publication pipeline tests."""

import logging
import sys
from pathlib import Path

import pytest

# Add repository root to path for imports
repo_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(repo_root))

from press.config import AppConfig, CatalogConfig, PipelineConfig  # noqa: E402
from press.pipeline.loader import InMemorySource  # noqa: E402


def article(title="Untitled", date="2024-01-01", body="Body text.\n", **fields):
    """Build the raw text of one MDX source."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    for key, value in fields.items():
        if isinstance(value, list):
            lines.append(f"{key}: [{', '.join(value)}]")
        else:
            lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n\n" + body


@pytest.fixture
def make_article():
    return article


@pytest.fixture
def sample_files():
    """A small corpus with tags, authors and a series."""
    return {
        "blog/hello-world.mdx": article(
            "Hello World", "2024-01-01", tags=["rust", "Intro"], author="jane"
        ),
        "blog/async-rust.mdx": article(
            "Async Rust", "2024-03-05", tags=["rust", "async"], author="sam", series="rust-101"
        ),
        "blog/shipping.md": article(
            "Shipping Faster", "2024-02-10", tags=["devops"], series="rust-101"
        ),
        "changelog/2024-04/index.mdx": article(
            "April Changelog", "2024-04-01T09:30:00Z", tags=["changelog"], author="jane"
        ),
    }


@pytest.fixture
def sample_source(sample_files):
    return InMemorySource(sample_files)


@pytest.fixture
def small_config():
    return AppConfig(
        pipeline=PipelineConfig(workers=2),
        catalog=CatalogConfig(page_size=2),
    )


@pytest.fixture(autouse=True)
def _reset_press_logging():
    yield
    logger = logging.getLogger("press")
    logger.setLevel(logging.NOTSET)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
