"""Data models for the discovery package.

Contains the discovery-type flag set, the normalized instance record every
source produces, and the options accepted by ``InstanceRegistry.query()``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from enum import Flag
from pathlib import Path

from msbuild_locator.discovery.platform_info import current_platform
from msbuild_locator.toolchain import ENV_QUERY_ALL_RUNTIMES
from msbuild_locator.version import SemanticVersion


class DiscoveryType(Flag):
    """How an instance was discovered. Combine members with ``|`` to filter."""

    DEVELOPER_SHELL = 1
    """From an activated Visual Studio developer command prompt."""
    INSTALLER_CATALOG = 2
    """From the Visual Studio installer's catalog (vswhere)."""
    SDK_RESOLVER = 4
    """From the .NET SDK resolver (hostfxr / dotnet CLI)."""
    LEGACY_ENVIRONMENT = 8
    """From a CoreXT-style build environment (MsBuildToolset variables)."""
    ALTERNATE_RUNTIME = 16
    """From a Mono installation bundling MSBuild."""
    ALL = 31

    @classmethod
    def available(cls, platform: str | None = None) -> DiscoveryType:
        """Return the discovery types that can produce results on *platform*.

        The Visual Studio based sources (developer shell, installer catalog,
        legacy environment) only exist on Windows.
        """
        platform = platform or current_platform()
        if platform == "windows":
            return cls.ALL
        return cls.SDK_RESOLVER | cls.ALTERNATE_RUNTIME

    @classmethod
    def platform_default(cls, platform: str | None = None) -> DiscoveryType:
        """Return the discovery types ``query_default()`` uses on *platform*."""
        platform = platform or current_platform()
        if platform == "windows":
            return cls.DEVELOPER_SHELL | cls.INSTALLER_CATALOG
        return cls.SDK_RESOLVER | cls.ALTERNATE_RUNTIME

    @classmethod
    def parse(cls, text: str) -> DiscoveryType:
        """Parse a comma-separated list of member names (case-insensitive).

        Raises:
            ValueError: If a name is not a member.
        """
        result = cls(0)
        for raw in text.split(","):
            name = raw.strip().upper().replace("-", "_")
            if not name:
                continue
            try:
                result |= cls[name]
            except KeyError:
                raise ValueError(f"Unknown discovery type: {raw.strip()!r}") from None
        return result

    @property
    def label(self) -> str:
        return (self.name or "").lower().replace("_", "-")


@dataclass(frozen=True)
class MSBuildInstance:
    """A single MSBuild installation discovered on the machine.

    Attributes:
        name: Display label (e.g. the Visual Studio product name,
            ``"DEVCONSOLE"``, ``".NET Core SDK"``).
        root_path: Installation root, or None when the source has no
            meaningful root (legacy environments).
        toolchain_path: Directory holding the loadable toolchain modules.
        version: Installation version, or None when it cannot be determined.
        discovery_type: The single source flag that produced this instance.
    """

    name: str
    root_path: Path | None
    toolchain_path: Path
    version: SemanticVersion | None
    discovery_type: DiscoveryType

    @property
    def version_text(self) -> str:
        return str(self.version) if self.version is not None else "unknown"


def _truthy_flag(value: str | None) -> bool:
    return value == "1"


@dataclass
class QueryOptions:
    """Options accepted by ``InstanceRegistry.query()``.

    Attributes:
        discovery_types: Sources to include. Defaults to every source
            available on the current platform.
        working_directory: Directory used by the SDK resolver to honor a
            project-local ``global.json``. Set it to the project directory.
        allow_all_runtime_versions: Disable the check that rejects SDKs
            newer than the host .NET runtime. Defaults to
            ``DOTNET_MSBUILD_QUERY_ALL_RUNTIMES == "1"``.
        environ: Environment mapping read by every source. Injected by tests.
    """

    discovery_types: DiscoveryType = field(default_factory=DiscoveryType.available)
    working_directory: Path = field(default_factory=Path.cwd)
    allow_all_runtime_versions: bool | None = None
    environ: Mapping[str, str] | MutableMapping[str, str] = field(
        default_factory=lambda: os.environ
    )

    def __post_init__(self) -> None:
        self.working_directory = Path(self.working_directory)
        if self.allow_all_runtime_versions is None:
            self.allow_all_runtime_versions = _truthy_flag(
                self.environ.get(ENV_QUERY_ALL_RUNTIMES)
            )
