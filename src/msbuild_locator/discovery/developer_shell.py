"""Discovery from an activated Visual Studio developer command prompt.

A developer prompt exports ``VSINSTALLDIR`` (the Visual Studio root) and
``VSCMD_VER`` (the full product version, which may carry a ``-preview``
style suffix). ``VisualStudioVersion`` (``"17.0"``) is the fallback version.
The user explicitly opened that prompt, so this instance is always yielded
first by the default registry.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from msbuild_locator.discovery.base import InstanceSource
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance
from msbuild_locator.toolchain import (
    ENV_VS_INSTALL_DIR,
    ENV_VS_VERSION,
    ENV_VSCMD_VERSION,
    vs_toolchain_path,
)
from msbuild_locator.version import SemanticVersion

DEVCONSOLE_NAME = "DEVCONSOLE"


class DeveloperShellSource(InstanceSource):
    """Yields at most one instance describing the active developer shell."""

    discovery_type = DiscoveryType.DEVELOPER_SHELL

    def _version(self) -> SemanticVersion | None:
        vscmd = self.env(ENV_VSCMD_VERSION)
        version = SemanticVersion.coerce(vscmd)
        if version is None and vscmd and "-" in vscmd:
            version = SemanticVersion.coerce(vscmd.split("-", 1)[0])
        if version is None:
            version = SemanticVersion.coerce(self.env(ENV_VS_VERSION))
        return version

    def _discover(self) -> Iterator[MSBuildInstance]:
        install_dir = self.env(ENV_VS_INSTALL_DIR)
        if install_dir is None:
            return

        root = Path(install_dir)
        version = self._version()
        yield MSBuildInstance(
            name=DEVCONSOLE_NAME,
            root_path=root,
            toolchain_path=Path(vs_toolchain_path(root, version.major if version else None)),
            version=version,
            discovery_type=self.discovery_type,
        )
