"""CLI entry point for listing and extracting EXORMACS volume images."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from exormacs_dump.domain.enums import FormatVariant


@click.command()
@click.option(
    "--config", "-c",
    default=None,
    help="Path to YAML config file",
)
@click.option(
    "--output", "-o",
    default=None,
    help="Output directory; extracted files are appended below it (overrides config/env)",
)
@click.option(
    "--variant",
    type=click.Choice([v.value for v in FormatVariant]),
    default=None,
    help="On-disk format generation of the images (overrides config/env)",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=None,
    help="Enable debug logging (overrides config/env)",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    default=None,
    help="Print hex dumps of raw directory records (overrides config/env)",
)
@click.option(
    "--list-only",
    is_flag=True,
    default=False,
    help="Print the listing without extracting files",
)
@click.argument("images", nargs=-1, required=True, type=click.Path(path_type=Path))
def cli(
    config: str | None,
    output: str | None,
    variant: str | None,
    verbose: bool | None,
    debug: bool | None,
    list_only: bool,
    images: tuple[Path, ...],
) -> None:
    """List and extract files from EXORMACS volume images.

    Images are processed in the order given. Output files are appended to,
    so a file spanning several images is rebuilt when the images are given
    in physical order; start from an empty output directory.

    Configuration priority: YAML config < env vars (EXORMACS_*) < CLI arguments.
    """
    from exormacs_dump.config import load_config
    from exormacs_dump.extractor import create_extractor

    cli_overrides = {
        "output.directory": output,
        "output.extract": False if list_only else None,
        "listing.verbose": verbose or None,
        "listing.debug": debug or None,
        "format.variant": variant,
    }
    app_config = load_config(config_path=config, cli_overrides=cli_overrides)

    log_level = logging.DEBUG if app_config.listing.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if FormatVariant.from_string(app_config.format.variant) is None:
        click.echo(f"Error: unknown format variant '{app_config.format.variant}'", err=True)
        sys.exit(1)

    if app_config.output.extract:
        try:
            Path(app_config.output.directory).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            click.echo(f"Error: cannot create output directory: {e}", err=True)
            sys.exit(1)

    extractor = create_extractor(app_config)
    reports = extractor.process_images(images)

    if any(not report.opened for report in reports):
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
