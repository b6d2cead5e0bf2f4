"""``msbuild-locator build PROJECT`` -- Sample builder.

Demonstrates the intended lifecycle: discover instances, pick one, register
it, and only then import the toolchain. The toolchain's primary module must
expose ``build(project_path) -> bool``.

Exit Codes:
    0  -- The toolchain ran (the build result itself is printed).
    -1 -- Bad arguments, no instance found, an invalid selection, or an
          instance that cannot be registered or imported.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

import click

from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance
from msbuild_locator.exceptions import MSBuildLocatorError
from msbuild_locator.locator import get_redirector, query_instances

USAGE = (
    "msbuild-locator build <path>\n"
    "    path = path to the project file to build"
)


def _usage() -> None:
    click.echo(USAGE)
    sys.exit(-1)


def _choose_instance(instances: list[MSBuildInstance], select: bool) -> MSBuildInstance:
    if not instances:
        click.echo("MSBuild not found! Exiting.")
        sys.exit(-1)

    if not select:
        return instances[0]

    for number, instance in enumerate(instances, start=1):
        # The developer shell was opened on purpose, so it is the likely pick.
        recommended = " (Recommended!)" if instance.discovery_type == DiscoveryType.DEVELOPER_SHELL else ""
        click.echo(f"{number}) {instance.name} - {instance.version_text}{recommended}")
    click.echo()

    answer = click.prompt("Select an instance of MSBuild", default="", show_default=False)
    try:
        choice = int(answer)
    except ValueError:
        choice = 0
    if not 1 <= choice <= len(instances):
        click.echo(f"{answer} is not a valid response.")
        sys.exit(-1)
    return instances[choice - 1]


def run_build(project: Path) -> bool:
    """Import the toolchain through the redirector and build *project*.

    Must only be called after registration; the import below is what the
    redirector serves.
    """
    primary = get_redirector().layout.primary_module
    toolchain = importlib.import_module(primary)
    return bool(toolchain.build(str(project)))


@click.command("build")
@click.argument("project", required=False)
@click.option("--select", is_flag=True, help="Prompt for the instance to use.")
def build_command(project: str | None, select: bool) -> None:
    """Build PROJECT with a discovered MSBuild instance."""
    if not project or not Path(project).is_file():
        _usage()

    instance = _choose_instance(query_instances(), select)
    try:
        get_redirector().register_instance(instance)
    except MSBuildLocatorError as exc:
        click.echo(f"Could not register {instance.name}: {exc}")
        sys.exit(-1)
    click.echo(f"Using MSBuild instance: {instance.name} - {instance.version_text}")
    click.echo()

    try:
        result = run_build(Path(project))
    except ImportError as exc:
        click.echo(f"Could not load MSBuild from {instance.toolchain_path}: {exc}")
        sys.exit(-1)
    click.echo()
    click.secho(f"Build result: {result}", fg="green" if result else "red")
