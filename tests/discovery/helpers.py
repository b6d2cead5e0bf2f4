"""Shared test helpers for creating fake MSBuild installations.

Each helper creates a minimal but realistic directory structure that
simulates one kind of installation. These are used by the per-source tests
and by ``test_instance_registry.py``.
"""

from __future__ import annotations

from pathlib import Path

from msbuild_locator.discovery.installer_catalog import CatalogEntry
from msbuild_locator.toolchain import DEFAULT_LAYOUT, SDK_VERSION_FILE, ToolchainLayout


def create_sdk(
    sdk_root: Path,
    version: str,
    layout: ToolchainLayout = DEFAULT_LAYOUT,
    *,
    with_module: bool = True,
    version_file: str | None = None,
) -> Path:
    """Create ``<sdk_root>/<version>`` shaped like a .NET SDK directory.

    The ``.version`` file mimics the real layout: commit hash, version, RID.
    """
    sdk_dir = sdk_root / version
    sdk_dir.mkdir(parents=True, exist_ok=True)
    if with_module:
        (sdk_dir / layout.primary_module_file).write_text("def build(path):\n    return True\n")
    if version_file is None:
        version_file = f"5f3b3c1a2e\n{version}\nlinux-x64\n"
    (sdk_dir / SDK_VERSION_FILE).write_text(version_file)
    return sdk_dir


def create_mono_prefix(prefix: Path, msbuild_dir: str = "Current") -> Path:
    """Create a Mono prefix bundling MSBuild under ``lib/mono/msbuild``."""
    bin_dir = prefix / "lib" / "mono" / "msbuild" / msbuild_dir / "bin"
    bin_dir.mkdir(parents=True, exist_ok=True)
    (bin_dir / "MSBuild.dll").write_bytes(b"MZ")
    return prefix


def create_dotnet_root(root: Path) -> Path:
    """Create a directory holding a ``dotnet`` executable stub."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "dotnet").write_text("#!/bin/sh\n")
    (root / "dotnet.exe").write_text("")
    return root


class FakeResolver:
    """``SdkResolver`` returning fixed answers and recording its calls."""

    def __init__(
        self,
        best: str | None = None,
        available: list[str] | None = None,
        answers_for: set[Path] | None = None,
    ) -> None:
        self.best = best
        self.available = available or []
        self.answers_for = answers_for
        self.calls: list[tuple[str, Path]] = []

    def _answers(self, exe_dir: Path) -> bool:
        return self.answers_for is None or exe_dir in self.answers_for

    def resolve_best(self, exe_dir: Path, working_dir: Path) -> str | None:
        self.calls.append(("resolve_best", exe_dir))
        return self.best if self._answers(exe_dir) else None

    def list_all(self, exe_dir: Path) -> list[str]:
        self.calls.append(("list_all", exe_dir))
        return list(self.available) if self._answers(exe_dir) else []


class FakeCatalog:
    """``InstallerCatalog`` returning fixed entries and counting queries."""

    def __init__(self, entries: list[tuple[str, str, str]] | None = None) -> None:
        self.entries = [CatalogEntry(*entry) for entry in entries or []]
        self.calls = 0

    def list_installed(self) -> list[CatalogEntry]:
        self.calls += 1
        return list(self.entries)


class BrokenCatalog:
    """``InstallerCatalog`` whose query always fails."""

    def list_installed(self) -> list[CatalogEntry]:
        raise OSError("installer service unavailable")
