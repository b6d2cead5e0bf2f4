"""``msbuild-locator doctor`` -- Diagnose why registration may fail.

The redirector's finder sits at the end of ``sys.meta_path``. A toolchain
module that is already loaded, or that a regular finder can import from
``sys.path``, never reaches it.

Exit Codes:
    0 -- Always (informational command).
"""

from __future__ import annotations

from importlib.machinery import PathFinder

import click

from msbuild_locator.cli.output import console
from msbuild_locator.locator import get_redirector


def shadowed_modules(names: tuple[str, ...]) -> dict[str, str]:
    """Return toolchain modules importable from ``sys.path``, with origins."""
    shadowed: dict[str, str] = {}
    for name in names:
        spec = PathFinder.find_spec(name)
        if spec is not None:
            shadowed[name] = spec.origin or "<namespace package>"
    return shadowed


@click.command("doctor")
def doctor_command() -> None:
    """Report whether toolchain registration is still possible."""
    redirector = get_redirector()
    loaded = redirector.loaded_toolchain_modules()
    shadowed = shadowed_modules(redirector.layout.modules)

    status = "[green]yes[/green]" if redirector.can_register() else "[bold red]no[/bold red]"
    console.print(f"Can register: {status}")
    console.print(f"Registered: {'yes' if redirector.is_active else 'no'}")

    if loaded:
        console.print("Already loaded toolchain modules:")
        for name in loaded:
            console.print(f"  - {name}")
    else:
        console.print("Already loaded toolchain modules: [dim]none[/dim]")

    if shadowed:
        console.print("[yellow]Importable from sys.path (bypasses the redirector):[/yellow]")
        for name, origin in shadowed.items():
            console.print(f"  - {name}: {origin}")
    else:
        console.print("Importable from sys.path: [dim]none[/dim]")
