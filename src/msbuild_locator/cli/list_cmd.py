"""``msbuild-locator list`` -- Show the MSBuild instances on this machine.

Exit Codes:
    0 -- At least one instance was found.
    2 -- No instance matched the requested discovery types.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from msbuild_locator.cli.output import instances_to_json, print_instances
from msbuild_locator.discovery.models import DiscoveryType, QueryOptions
from msbuild_locator.locator import query_instances

_TYPE_CHOICES = [member.label for member in DiscoveryType if member is not DiscoveryType.ALL]


@click.command("list")
@click.option(
    "--type", "types", multiple=True,
    type=click.Choice(_TYPE_CHOICES, case_sensitive=False),
    help="Discovery type to include (repeatable). Defaults to all available.",
)
@click.option(
    "--working-dir", type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None, help="Directory whose global.json pins the .NET SDK.",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def list_command(types: tuple[str, ...], working_dir: Path | None, as_json: bool) -> None:
    """List discovered MSBuild instances, best match first per source."""
    options = QueryOptions()
    if types:
        options.discovery_types = DiscoveryType.parse(",".join(types))
    if working_dir is not None:
        options.working_directory = working_dir

    instances = query_instances(options)

    if as_json:
        click.echo(json.dumps({"instances": instances_to_json(instances)}, indent=2))
    else:
        print_instances(instances)

    sys.exit(0 if instances else 2)
