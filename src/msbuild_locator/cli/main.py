"""msbuild-locator CLI -- Find MSBuild installations and load them safely.

Entry point for the ``msbuild-locator`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    list    -- Show discovered MSBuild instances.
    build   -- Sample builder: register an instance, then build a project.
    lint    -- Flag toolchain imports that run before registration.
    doctor  -- Report whether registration is still possible.

Usage::

    msbuild-locator list
    msbuild-locator list --type sdk-resolver --json
    msbuild-locator build ./app.proj --select
    msbuild-locator lint app.py
    msbuild-locator -v doctor
"""

from __future__ import annotations

import click

from msbuild_locator import __version__
from msbuild_locator.cli.build_cmd import build_command
from msbuild_locator.cli.doctor_cmd import doctor_command
from msbuild_locator.cli.lint_cmd import lint_command
from msbuild_locator.cli.list_cmd import list_command
from msbuild_locator.cli.logging_setup import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log discovery details to stderr.")
def cli(verbose: bool) -> None:
    """msbuild-locator: discover MSBuild installations and redirect toolchain imports.

    Finds Visual Studio, .NET SDK, CoreXT and Mono deployments of MSBuild
    and registers one so that later toolchain imports load from it.
    """
    setup_logging(resolve_level(verbose))


# Register all subcommands
cli.add_command(list_command)
cli.add_command(build_command)
cli.add_command(lint_command)
cli.add_command(doctor_command)
