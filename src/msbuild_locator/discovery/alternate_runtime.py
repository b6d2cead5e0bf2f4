"""Discovery of MSBuild bundled with Mono.

Only meaningful when the host itself runs on Mono: the running prefix is
reported first, then (on macOS) every other framework version installed side
by side under ``/Library/Frameworks/Mono.framework/Versions``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path

from msbuild_locator.discovery.base import InstanceSource
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance
from msbuild_locator.discovery.platform_info import HostRuntime, current_platform, host_runtime
from msbuild_locator.discovery.process import run_tool
from msbuild_locator.toolchain import (
    MONO_CURRENT_SYMLINK,
    MONO_MSBUILD_RELATIVE_PATHS,
    MONO_OSX_BASE_PATH,
)
from msbuild_locator.version import SemanticVersion

logger = logging.getLogger(__name__)

MONO_NAME = "Mono"


def mono_version_number(prefix: Path) -> str | None:
    """Return the output of ``<prefix>/bin/mono --version=number``."""
    return run_tool([prefix / "bin" / "mono", "--version=number"])


def msbuild_entry(prefix: Path) -> Path | None:
    """Return the bundled ``MSBuild.dll`` under a Mono prefix, or None."""
    for relative in MONO_MSBUILD_RELATIVE_PATHS:
        candidate = prefix / relative
        if candidate.is_file():
            return candidate
    return None


class AlternateRuntimeSource(InstanceSource):
    """Yields the Mono installations that bundle MSBuild.

    Args:
        environ: Environment mapping used to detect the host runtime.
        runtime: Host runtime; detected from *environ* when None.
        platform_name: Platform identifier; the side-by-side scan only runs
            on ``macos``.
        versions_root: Directory holding side-by-side Mono versions.
        version_probe: Callable returning ``mono --version=number`` output
            for a prefix.
    """

    discovery_type = DiscoveryType.ALTERNATE_RUNTIME

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        runtime: HostRuntime | None = None,
        platform_name: str | None = None,
        versions_root: Path | str = MONO_OSX_BASE_PATH,
        version_probe: Callable[[Path], str | None] = mono_version_number,
    ) -> None:
        super().__init__(environ)
        self.platform_name = platform_name or current_platform()
        self._runtime = runtime
        self.versions_root = Path(versions_root)
        self.version_probe = version_probe

    @property
    def runtime(self) -> HostRuntime:
        if self._runtime is None:
            self._runtime = host_runtime(self.environ, self.platform_name)
        return self._runtime

    def is_active(self) -> bool:
        return self.runtime.is_alternate

    def _version(self, prefix: Path) -> SemanticVersion:
        output = self.version_probe(prefix)
        version = SemanticVersion.coerce(output)
        if version is None:
            version = SemanticVersion.coerce(prefix.name)
        if version is None:
            logger.debug("Could not determine the Mono version of %s", prefix)
            version = SemanticVersion(0, 0, 0)
        return version

    def _instance(self, prefix: Path) -> MSBuildInstance | None:
        entry = msbuild_entry(prefix)
        if entry is None:
            return None
        return MSBuildInstance(
            name=MONO_NAME,
            root_path=prefix,
            toolchain_path=entry.parent,
            version=self._version(prefix),
            discovery_type=self.discovery_type,
        )

    def _discover(self) -> Iterator[MSBuildInstance]:
        if not self.is_active():
            return

        running: Path | None = None
        if self.runtime.prefix is not None:
            running = Path(os.path.realpath(self.runtime.prefix))
            instance = self._instance(running)
            if instance is not None:
                yield instance

        if self.platform_name != "macos" or not self.versions_root.is_dir():
            return

        for directory in sorted(self.versions_root.iterdir()):
            if directory.name == MONO_CURRENT_SYMLINK or not directory.is_dir():
                continue
            if running is not None and Path(os.path.realpath(directory)) == running:
                continue
            instance = self._instance(directory)
            if instance is not None:
                yield instance
