"""buildlimits CLI: pack a limit spec directory into a Python module."""

from __future__ import annotations

import os
from pathlib import Path

import click
import structlog

from buildlimits.config.logging import setup_logging
from buildlimits.config.settings import get_settings
from buildlimits.exceptions import BuildLimitsError
from buildlimits.generator.module_builder import generate

logger = structlog.get_logger(__name__)

OUTPUT_MODE = 0o640


@click.command()
@click.option(
    "--in",
    "input_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory of YAML limit specs",
)
@click.option("--out", "output", default="-", show_default=True, help='Output path, "-" for stdout')
@click.option("--license", "license_name", default=None, help="License header for the generated file")
def main(input_dir: Path, output: str, license_name: str | None) -> None:
    """Generate a module embedding the limit specs found in --in."""
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_output=settings.json_logs)

    try:
        source = generate(input_dir, license_name or settings.default_license)
    except BuildLimitsError as exc:
        click.echo(f"Error while generating the file: {exc}", err=True)
        raise SystemExit(1) from exc

    if output == "-":
        click.echo(source, nl=False)
        return

    path = Path(output)
    try:
        path.write_text(source, encoding="utf-8")
        os.chmod(path, OUTPUT_MODE)
    except OSError as exc:
        click.echo(f"Error while writing {path}: {exc}", err=True)
        raise SystemExit(1) from exc
    logger.info("module_written", path=str(path), bytes=len(source))


if __name__ == "__main__":
    main()
