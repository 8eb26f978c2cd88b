"""Rich console output for ospkg-sbom.

Console output goes to stderr so the normalized JSON can be piped from stdout.
"""

import os

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from ._normalization.models import NormalizationResult, ReconcileStatus

custom_theme = Theme({"success": "bold green", "warning": "yellow", "error": "bold red"})

console = Console(
    theme=custom_theme,
    stderr=True,
    force_terminal=(os.getenv("GITHUB_ACTIONS") == "true") or None,
)


def print_normalization_summary(result: NormalizationResult, title: str = "OS Package Normalization") -> None:
    """Print a Rich summary table of a normalization run."""
    counts = result.status_counts
    passthrough = counts[ReconcileStatus.PASSTHROUGH.value]

    table = Table(title=title, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Count", justify="right")
    table.add_row("Packages", str(len(result.packages)))
    table.add_row("Source packages", str(result.source_packages))
    table.add_row("Reconciled", str(counts[ReconcileStatus.RECONCILED.value]), style="success")
    table.add_row("Unchanged", str(counts[ReconcileStatus.UNCHANGED.value]))
    table.add_row("Unparseable package-URLs", str(passthrough), style="warning" if passthrough else None)
    table.add_row("Skipped (non-OS)", str(counts[ReconcileStatus.SKIPPED.value]))
    table.add_row("Dependency entries", str(len(result.dependencies)))
    if result.type_tags:
        table.add_row("Types", ", ".join(result.all_types))

    console.print(table)
