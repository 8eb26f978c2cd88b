"""ospkg-sbom command-line interface."""

import json
import os
import sys
from typing import Optional

import click

from .. import __version__
from ..config import load_scanner_config
from ..console import console, print_normalization_summary
from ..exceptions import ConfigurationError, OspkgSbomError
from ..logging_config import logger, setup_logging
from ..normalization import normalize_bom_file, normalize_rootfs, write_result
from ..tool_checks import check_scanner, get_tool_install_message, log_tool_status


def _emit_result(result, output_file: Optional[str], summary: bool) -> None:
    """Write the result to a file or stdout, then print the summary."""
    if output_file:
        write_result(result, output_file)
    else:
        click.echo(json.dumps(result.to_dict(), indent=2))
    if summary:
        print_normalization_summary(result)


@click.group()
@click.version_option(version=__version__, prog_name="ospkg-sbom")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--structured-logs", is_flag=True, help="Emit log records as JSON lines.")
def cli(verbose: bool, structured_logs: bool) -> None:
    """Normalize OS package inventories from container and filesystem scans into SBOM components."""
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "INFO")
    setup_logging(level, structured=structured_logs)


@cli.command()
@click.argument("bom_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--os-release",
    "os_release_file",
    type=click.Path(exists=True, dir_okay=False),
    help="os-release file of the scanned image.",
)
@click.option(
    "--rootfs",
    type=click.Path(exists=True, file_okay=False),
    help="Root filesystem to read os-release from.",
)
@click.option("-o", "--output", "output_file", type=click.Path(dir_okay=False), help="Output file (default: stdout).")
@click.option("--summary/--no-summary", default=True, help="Print a summary table to stderr.")
def normalize(
    bom_file: str,
    os_release_file: Optional[str],
    rootfs: Optional[str],
    output_file: Optional[str],
    summary: bool,
) -> None:
    """Normalize an existing scanner CycloneDX document (BOM_FILE)."""
    if os_release_file and rootfs:
        raise click.UsageError("Use only one of --os-release or --rootfs")

    try:
        result = normalize_bom_file(bom_file, os_release_file=os_release_file, rootfs=rootfs)
        _emit_result(result, output_file, summary)
    except OspkgSbomError as e:
        logger.error(str(e))
        sys.exit(1)


@cli.command()
@click.argument("src")
@click.option("-o", "--output", "output_file", type=click.Path(dir_okay=False), help="Output file (default: stdout).")
@click.option("--summary/--no-summary", default=True, help="Print a summary table to stderr.")
def scan(src: str, output_file: Optional[str], summary: bool) -> None:
    """Scan an image reference or root filesystem (SRC) and normalize its OS packages."""
    try:
        config = load_scanner_config()
        if not log_tool_status(config).available:
            raise ConfigurationError(f"Trivy is not available.\n{get_tool_install_message()}")
        result = normalize_rootfs(src, config)
        _emit_result(result, output_file, summary)
    except OspkgSbomError as e:
        logger.error(str(e))
        sys.exit(1)


@cli.command()
def tools() -> None:
    """Report whether the OS package scanner is available."""
    try:
        config = load_scanner_config()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    status = check_scanner(config)
    if status.available:
        console.print(f"[success]✓ {status.name}[/success] {status.path}")
        return

    console.print(f"[error]✗ {status.name} not found[/error]")
    console.print(get_tool_install_message())
    sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
