"""Click CLI entry point for the converter."""

from __future__ import annotations

import sys
from pathlib import Path

import click
import yaml

from wordpress_to_markdown.builder import ConversionBuilder
from wordpress_to_markdown.config import Settings
from wordpress_to_markdown.export_parser import ExportError
from wordpress_to_markdown.logging_config import setup_logging


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True}
)
@click.option(
    "--inputfile",
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="WordPress export file (default: export.xml)",
)
@click.option(
    "--outputdir",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Root directory for the Markdown posts (default: output)",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    help="Maximum number of simultaneous image downloads",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def cli(
    input_file: Path | None,
    output_dir: Path | None,
    config_file: Path | None,
    concurrency: int | None,
    verbose: bool,
) -> None:
    """Convert a WordPress export to Markdown posts with their images."""
    try:
        settings = Settings.load(config_file) if config_file else Settings.default()
    except (yaml.YAMLError, ValueError) as e:
        click.echo(f"Unable to load settings: {e}", err=True)
        sys.exit(1)

    if input_file is not None:
        settings.input_file = input_file
    if output_dir is not None:
        settings.output_dir = output_dir
    if concurrency is not None:
        settings.download.max_concurrent = concurrency

    setup_logging(settings, verbose)

    click.echo(f"Converting {settings.input_file} into {settings.output_dir}...")
    try:
        result = ConversionBuilder(settings).run()
    except FileNotFoundError as e:
        click.echo(f"Unable to read file. {e}", err=True)
        sys.exit(1)
    except ExportError as e:
        click.echo(f"Unable to convert export. {e}", err=True)
        sys.exit(1)

    click.echo(f"  Posts written: {result.posts_written}, failed: {result.posts_failed}")
    click.echo(f"  Images saved: {result.images_saved}, failed: {result.images_failed}")

    failures = result.failures
    if failures:
        click.echo()
        click.echo(f"Problems ({len(failures)}):")
        for failure in failures[:10]:
            click.echo(f"  - {failure}")
        if len(failures) > 10:
            click.echo(f"  ... and {len(failures) - 10} more")
        sys.exit(1)

    click.echo()
    click.echo("Done!")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
