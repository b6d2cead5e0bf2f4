"""Shared fixtures for CLI tests.

Provides a Click runner and a fresh process-wide redirector so commands
that register never touch the real default one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from click.testing import CliRunner

from msbuild_locator import locator
from msbuild_locator.redirector import ModuleRedirector
from msbuild_locator.toolchain import ToolchainLayout


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """The CLI group installs its own root handler; put the old ones back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def fresh_redirector(
    monkeypatch: pytest.MonkeyPatch, unique_layout: ToolchainLayout,
) -> Iterator[ModuleRedirector]:
    """Swap the process-wide redirector for one serving ``unique_layout``."""
    redirector = ModuleRedirector(unique_layout, environ={})
    monkeypatch.setattr(locator, "_default_redirector", redirector)
    yield redirector
    if redirector.is_active:
        redirector.unregister()
