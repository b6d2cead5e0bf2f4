"""Shared builders for CLI tests."""

from __future__ import annotations

from pathlib import Path

from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance
from msbuild_locator.version import parse


def make_instance(
    toolchain_path: Path,
    name: str = "Visual Studio Enterprise 2022",
    version: str | None = "17.8.3",
    discovery_type: DiscoveryType = DiscoveryType.INSTALLER_CATALOG,
) -> MSBuildInstance:
    """Build an instance whose root and toolchain are both *toolchain_path*."""
    return MSBuildInstance(
        name=name,
        root_path=toolchain_path,
        toolchain_path=toolchain_path,
        version=parse(version) if version else None,
        discovery_type=discovery_type,
    )
