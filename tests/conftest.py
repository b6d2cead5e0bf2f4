"""Shared fixtures for msbuild-locator tests."""

from __future__ import annotations

import sys
import uuid
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from msbuild_locator.toolchain import ToolchainLayout


def write_toolchain(directory: Path, layout: ToolchainLayout, body: str = "") -> Path:
    """Write one module file per whitelisted name into *directory*.

    Every module records the file it was loaded from; the primary module
    also gets a ``build(project_path)`` entry point.
    """
    directory.mkdir(parents=True, exist_ok=True)
    for name in layout.modules:
        source = f"LOADED_FROM = __file__\nNAME = {name!r}\n"
        if name == layout.primary_module:
            source += "\n\ndef build(project_path):\n    return project_path.endswith('.proj')\n"
        (directory / layout.module_file(name)).write_text(source + body)
    return directory


@pytest.fixture
def unique_layout() -> Iterator[ToolchainLayout]:
    """A layout whose module names cannot collide with anything importable.

    Modules loaded under these names are removed from ``sys.modules`` after
    the test.
    """
    suffix = uuid.uuid4().hex[:8]
    layout = ToolchainLayout(
        modules=(
            f"tc_build_{suffix}",
            f"tc_framework_{suffix}",
            f"tc_tasks_{suffix}",
            f"tc_utilities_{suffix}",
        ),
    )
    yield layout
    for name in layout.modules:
        sys.modules.pop(name, None)


@pytest.fixture
def toolchain_factory(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing a toolchain directory under ``tmp_path``."""

    def factory(layout: ToolchainLayout, name: str = "toolchain", body: str = "") -> Path:
        return write_toolchain(tmp_path / name, layout, body)

    return factory
