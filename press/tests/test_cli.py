"""Tests for CLI commands."""

from __future__ import annotations

import json

from click.testing import CliRunner

import pytest


@pytest.fixture
def site(tmp_path, sample_files):
    """A content tree, an authors file and a config pointing at both."""
    content = tmp_path / "content"
    for path, text in sample_files.items():
        target = content / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")

    authors = tmp_path / "authors.yaml"
    authors.write_text("jane: Jane Doe\nsam:\n  name: Sam Lee\n", encoding="utf-8")

    config = tmp_path / "press.yaml"
    config.write_text(
        f"content:\n"
        f"  root: {content}\n"
        f"catalog:\n"
        f"  page_size: 2\n"
        f"authors:\n"
        f"  path: {authors}\n"
        f"output:\n"
        f"  directory: {tmp_path / 'build'}\n"
        f"logging:\n"
        f"  level: WARNING\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture(autouse=True)
def _clear_press_env(monkeypatch):
    for name in ("PRESS_CONTENT_ROOT", "PRESS_OUTPUT_DIR", "PRESS_LOG_LEVEL", "PRESS_WORKERS"):
        monkeypatch.delenv(name, raising=False)


class TestValidateCommand:
    """Test CLI validate command."""

    def test_validate_valid_config(self, site):
        """Test validate with valid configuration."""
        from press.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["validate", "--config", str(site / "press.yaml")])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Page size: 2" in result.output

    def test_validate_without_config_uses_defaults(self):
        from press.cli import cli

        result = CliRunner().invoke(cli, ["validate"])

        assert result.exit_code == 0
        assert "Content root: content" in result.output

    def test_validate_invalid_yaml(self, tmp_path):
        """Test validate with malformed YAML."""
        from press.cli import cli

        config_file = tmp_path / "bad.yaml"
        config_file.write_text("catalog: [unclosed\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["validate", "--config", str(config_file)])

        assert result.exit_code != 0
        assert "Configuration error" in result.output

    def test_validate_invalid_value(self, tmp_path):
        from press.cli import cli

        config_file = tmp_path / "bad.yaml"
        config_file.write_text("catalog:\n  page_size: 0\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["validate", "--config", str(config_file)])

        assert result.exit_code != 0
        assert "page_size" in result.output

    def test_validate_missing_file(self, tmp_path):
        from press.cli import cli

        result = CliRunner().invoke(cli, ["validate", "--config", str(tmp_path / "nope.yaml")])

        assert result.exit_code != 0
        assert "Config not found" in result.output


class TestBuildCommand:
    """Test CLI build command."""

    def test_build_writes_catalog(self, site):
        """Test build writes documents.jsonl and catalog.json."""
        from press.cli import cli

        result = CliRunner().invoke(cli, ["build", "--config", str(site / "press.yaml")])

        assert result.exit_code == 0, result.output
        assert "Published: 4 documents" in result.output
        assert "Pages: 2" in result.output
        assert "Catalog saved to" in result.output

        documents = (site / "build" / "documents.jsonl").read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["slug"] for line in documents] == [
            "changelog-2024-04",
            "blog-async-rust",
            "blog-shipping",
            "blog-hello-world",
        ]
        manifest = json.loads((site / "build" / "catalog.json").read_text(encoding="utf-8"))
        assert manifest["routes"]["/blog/blog-async-rust"] == "document:blog/async-rust.mdx"
        assert manifest["authors"]["jane"]["display_name"] == "Jane Doe"
        assert manifest["warnings"] == []

    def test_build_output_override(self, site, tmp_path):
        from press.cli import cli

        out_dir = tmp_path / "elsewhere"
        result = CliRunner().invoke(
            cli, ["build", "--config", str(site / "press.yaml"), "--output", str(out_dir)]
        )

        assert result.exit_code == 0, result.output
        assert (out_dir / "catalog.json").exists()
        assert not (site / "build").exists()

    def test_build_dry_run_writes_nothing(self, site):
        from press.cli import cli

        result = CliRunner().invoke(cli, ["build", "--config", str(site / "press.yaml"), "--dry-run"])

        assert result.exit_code == 0
        assert "Published: 4 documents" in result.output
        assert not (site / "build").exists()

    def test_build_reports_warnings(self, site):
        from press.cli import cli

        (site / "content" / "blog" / "broken.mdx").write_text("no frontmatter here\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["build", "--config", str(site / "press.yaml")])

        assert result.exit_code == 0
        assert "Warnings: 1" in result.output
        assert "blog/broken.mdx: missing frontmatter block" in result.output

    def test_build_duplicate_slug_fails(self, site):
        """Test build exits non-zero and publishes nothing on a slug collision."""
        from press.cli import cli

        (site / "content" / "blog" / "Hello-World.md").write_text(
            "---\ntitle: Again\ndate: 2024-05-01\n---\n", encoding="utf-8"
        )

        result = CliRunner().invoke(cli, ["build", "--config", str(site / "press.yaml")])

        assert result.exit_code == 1
        assert "Build failed during normalizing" in result.output
        assert "duplicate slug 'blog-hello-world'" in result.output
        assert not (site / "build").exists()

    def test_build_missing_content_root(self, tmp_path):
        from press.cli import cli

        result = CliRunner().invoke(cli, ["build", "--content-root", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Build failed during loading" in result.output
        assert "Content root not found" in result.output


class TestRoutesCommand:
    """Test CLI routes command."""

    def test_routes_lists_route_table(self, site):
        from press.cli import cli

        result = CliRunner().invoke(cli, ["routes", "--config", str(site / "press.yaml")])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "/blog\tlisting:1" in lines
        assert "/blog/tags/rust\ttag:rust:1" in lines
        assert "/blog/series/rust-101\tseries:rust-101:1" in lines
        assert lines == sorted(lines)
