"""Rich output formatting helpers for the msbuild-locator CLI.

Discovery types are colored so that a mixed listing (developer shell plus
installer catalog plus SDKs) is easy to scan.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from msbuild_locator.analyzer import LintFinding
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance

_DISCOVERY_STYLES: dict[DiscoveryType, str] = {
    DiscoveryType.DEVELOPER_SHELL: "bold green",
    DiscoveryType.INSTALLER_CATALOG: "cyan",
    DiscoveryType.SDK_RESOLVER: "magenta",
    DiscoveryType.LEGACY_ENVIRONMENT: "yellow",
    DiscoveryType.ALTERNATE_RUNTIME: "blue",
}

console = Console()


def discovery_style(discovery_type: DiscoveryType) -> str:
    """Return the Rich style string for a discovery type."""
    return _DISCOVERY_STYLES.get(discovery_type, "white")


def print_instances(instances: list[MSBuildInstance]) -> None:
    """Print a numbered table of discovered instances."""
    if not instances:
        console.print("[dim]No MSBuild instances found.[/dim]")
        return

    table = Table(title="MSBuild Instances", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Version")
    table.add_column("Discovery", justify="center")
    table.add_column("Toolchain path", style="dim", overflow="fold")

    for number, instance in enumerate(instances, start=1):
        table.add_row(
            str(number),
            instance.name,
            instance.version_text,
            Text(instance.discovery_type.label, style=discovery_style(instance.discovery_type)),
            str(instance.toolchain_path),
        )

    console.print(table)


def instances_to_json(instances: list[MSBuildInstance]) -> list[dict[str, Any]]:
    """Convert instances to JSON-serializable dicts."""
    return [
        {
            "name": i.name,
            "version": str(i.version) if i.version is not None else None,
            "discovery_type": i.discovery_type.label,
            "root_path": str(i.root_path) if i.root_path is not None else None,
            "toolchain_path": str(i.toolchain_path),
        }
        for i in instances
    ]


def print_findings(findings: list[LintFinding]) -> None:
    """Print analyzer findings, one per line, then a summary."""
    for finding in findings:
        location = Text(f"{finding.filename}:{finding.line}:{finding.column}", style="bold")
        console.print(location, Text(finding.message))
    if findings:
        console.print(f"[bold red]{len(findings)} problem(s) found[/bold red]")
    else:
        console.print("[green]No registration-order problems found.[/green]")
