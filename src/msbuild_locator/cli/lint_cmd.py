"""``msbuild-locator lint FILE...`` -- Check registration order statically.

Exit Codes:
    0 -- No toolchain import runs before registration.
    1 -- One or more findings.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from msbuild_locator.analyzer import LintFinding, RegistrationOrderAnalyzer
from msbuild_locator.cli.output import print_findings
from msbuild_locator.exceptions import AnalysisError


@click.command("lint")
@click.argument(
    "files", nargs=-1, required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def lint_command(files: tuple[Path, ...]) -> None:
    """Flag toolchain imports that execute before the locator registers."""
    analyzer = RegistrationOrderAnalyzer()
    findings: list[LintFinding] = []
    for path in files:
        try:
            findings.extend(analyzer.analyze_file(path))
        except AnalysisError as exc:
            raise click.ClickException(str(exc)) from exc

    print_findings(findings)
    sys.exit(1 if findings else 0)
