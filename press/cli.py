"""press CLI - build the content catalog from MDX sources."""

from __future__ import annotations

from pathlib import Path

import click
import yaml

from press.config import AppConfig, load_config, load_env_overrides, override_config
from press.logging_ import setup_logging

CONFIG_ERRORS = (OSError, ValueError, TypeError, yaml.YAMLError)


def _load(config_path: str | None, content_root: str | None = None) -> AppConfig:
    cfg = load_env_overrides(load_config(config_path))
    if content_root:
        cfg = override_config(cfg, {"content": {"root": content_root}})
    return cfg


def _print_warnings(warnings) -> None:
    if not warnings:
        return
    click.echo(f"  Warnings: {len(warnings)}")
    for warning in warnings:
        click.echo(f"    - {warning}")


@click.group()
def cli():
    """press - content ingestion and publication pipeline."""
    pass


@cli.command()
@click.option("--config", "-c", default=None, help="Configuration file path")
@click.option("--content-root", default=None, help="Content directory (overrides config)")
@click.option("--output", "-o", default=None, help="Output directory (overrides config)")
@click.option("--dry-run", is_flag=True, help="Build and validate without writing output")
def build(config: str | None, content_root: str | None, output: str | None, dry_run: bool):
    """Build the catalog and write it for the renderer.

    Args:
        config: Configuration file path
        content_root: Content directory override
        output: Output directory override
        dry_run: Skip writing output files
    """
    from press.pipeline.pipeline import run_pipeline
    from press.storage.manifest import write_documents_jsonl, write_manifest

    try:
        cfg = _load(config, content_root)
    except CONFIG_ERRORS as e:
        click.echo(f"✗ Configuration error: {e}", err=True)
        raise click.Abort()

    setup_logging(cfg.logging.level, cfg.logging.log_dir)
    click.echo(f"Building catalog from: {cfg.content.root}")

    try:
        result = run_pipeline(cfg)
    except OSError as e:
        click.echo(f"✗ Build failed: {e}", err=True)
        raise click.Abort()

    if not result.ok:
        click.echo(f"✗ Build failed during {result.stage.value}", err=True)
        for error in result.errors:
            click.echo(f"    - {error}", err=True)
        _print_warnings(result.warnings)
        raise SystemExit(1)

    catalog = result.catalog
    click.echo(f"✓ Published: {len(catalog)} documents")
    click.echo(f"  Tags: {len(catalog.documents_by_tag)}")
    click.echo(f"  Authors: {len(catalog.documents_by_author)}")
    click.echo(f"  Pages: {catalog.page_count}")
    click.echo(f"  Routes: {len(result.routes)}")
    _print_warnings(result.warnings)

    if dry_run:
        return

    out_dir = Path(output or cfg.output.directory)
    write_documents_jsonl(catalog.latest(), out_dir / cfg.output.documents_file)
    manifest = write_manifest(
        catalog,
        result.routes,
        out_dir / cfg.output.manifest_file,
        warnings=result.warnings,
    )
    click.echo(f"✓ Catalog saved to: {manifest}")


@cli.command()
@click.option("--config", "-c", default=None, help="Configuration file path")
def validate(config: str | None):
    """Validate configuration file.

    Args:
        config: Configuration file path
    """
    try:
        cfg = _load(config)
    except CONFIG_ERRORS as e:
        click.echo(f"✗ Configuration error: {e}", err=True)
        raise click.Abort()

    click.echo("✓ Configuration is valid")
    click.echo(f"  Content root: {cfg.content.root}")
    click.echo(f"  Extensions: {', '.join(cfg.content.file_extensions)}")
    click.echo(f"  Page size: {cfg.catalog.page_size}")
    click.echo(f"  Output: {cfg.output.directory}")


@cli.command()
@click.option("--config", "-c", default=None, help="Configuration file path")
@click.option("--content-root", default=None, help="Content directory (overrides config)")
def routes(config: str | None, content_root: str | None):
    """Print the route table of a fresh build."""
    from press.pipeline.pipeline import run_pipeline

    try:
        cfg = _load(config, content_root)
    except CONFIG_ERRORS as e:
        click.echo(f"✗ Configuration error: {e}", err=True)
        raise click.Abort()

    setup_logging("WARNING", cfg.logging.log_dir)
    try:
        result = run_pipeline(cfg)
    except OSError as e:
        click.echo(f"✗ Build failed: {e}", err=True)
        raise click.Abort()

    if not result.ok:
        for error in result.errors:
            click.echo(f"✗ {error}", err=True)
        raise SystemExit(1)

    for route, owner in sorted(result.routes.items()):
        click.echo(f"{route}\t{owner}")


def main():
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
