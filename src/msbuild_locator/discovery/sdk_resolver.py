"""Discovery of MSBuild shipped inside .NET SDKs.

A .NET SDK directory (``<dotnet root>/sdk/<version>``) contains a full
MSBuild deployment plus a ``.version`` file. This source finds the ``dotnet``
installation, asks an ``SdkResolver`` which SDK directories exist, keeps the
valid ones and orders them best-match first.

Components of an SDK are built against the runtime they shipped with, so an
SDK newer (by major/minor) than the host runtime is rejected unless
``allow_all_runtime_versions`` is set.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path

from msbuild_locator.discovery.base import InstanceSource
from msbuild_locator.discovery.hostfxr import DefaultSdkResolver, SdkResolver, newest_runtime_version
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance
from msbuild_locator.discovery.platform_info import find_on_path
from msbuild_locator.toolchain import (
    DEFAULT_LAYOUT,
    ENV_DOTNET_HOST_PATH,
    ENV_DOTNET_ROOT,
    ENV_SDK_RESOLVER_CLI_DIR,
    SDK_DIRECTORY_NAME,
    SDK_VERSION_FILE,
    ToolchainLayout,
)
from msbuild_locator.version import SemanticVersion, try_parse

logger = logging.getLogger(__name__)

_VERSION_LINE_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)", re.MULTILINE)

RuntimeProbe = Callable[[Path], "SemanticVersion | None"]


def read_sdk_version(sdk_dir: Path) -> SemanticVersion | None:
    """Read the version recorded in an SDK's ``.version`` file.

    The file holds a commit hash, the version and a runtime identifier on
    separate lines; the first line starting with ``X.Y.Z`` is the version.
    Pre-release labels on that line are kept when the token parses strictly.
    """
    version_file = sdk_dir / SDK_VERSION_FILE
    if not version_file.is_file():
        return None
    text = version_file.read_text(encoding="utf-8", errors="replace")
    m = _VERSION_LINE_RE.search(text)
    if not m:
        return None
    token = text[m.start():].split(None, 1)[0]
    parsed = try_parse(token)
    if parsed is not None:
        return parsed
    major, minor, patch = (int(g) for g in m.groups())
    return SemanticVersion(major, minor, patch)


def exceeds_runtime(version: SemanticVersion, runtime: SemanticVersion) -> bool:
    return (version.major, version.minor) > (runtime.major, runtime.minor)


class SdkResolverSource(InstanceSource):
    """Yields one ``.NET Core SDK`` instance per usable SDK directory.

    Args:
        environ: Environment mapping to read.
        working_directory: Directory whose ``global.json`` pins the best SDK.
        resolver: SDK resolver collaborator. Defaults to hostfxr with a
            ``dotnet`` CLI fallback.
        allow_all_runtime_versions: Skip the runtime ceiling check.
        runtime_version: Probe returning the host runtime version for an
            ``exe_dir``. Defaults to ``dotnet --list-runtimes``.
        layout: Toolchain layout; its primary module file marks a valid SDK.
        executable: Path of the running executable.
        platform_name: Platform used for the ``PATH`` scan.
    """

    discovery_type = DiscoveryType.SDK_RESOLVER

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        working_directory: Path | None = None,
        resolver: SdkResolver | None = None,
        allow_all_runtime_versions: bool = False,
        runtime_version: RuntimeProbe | None = None,
        layout: ToolchainLayout = DEFAULT_LAYOUT,
        executable: str | None = None,
        platform_name: str | None = None,
    ) -> None:
        super().__init__(environ)
        self.working_directory = Path(working_directory) if working_directory else Path.cwd()
        self.resolver = resolver if resolver is not None else DefaultSdkResolver(platform_name)
        self.allow_all_runtime_versions = allow_all_runtime_versions
        self.runtime_version = runtime_version or (
            lambda exe_dir: newest_runtime_version(exe_dir, platform_name)
        )
        self.layout = layout
        self.executable = sys.executable if executable is None else executable
        self.platform_name = platform_name

    def exe_directories(self) -> list[Path]:
        """Return candidate ``dotnet`` directories in probing order."""
        candidates: list[Path] = []

        dotnet_root = self.env(ENV_DOTNET_ROOT)
        if dotnet_root:
            candidates.append(Path(dotnet_root))

        if self.executable and Path(self.executable).stem.lower() == "dotnet":
            candidates.append(Path(self.executable).parent)

        host_path = self.env(ENV_DOTNET_HOST_PATH)
        if host_path:
            candidates.append(Path(host_path).parent)

        cli_dir = self.env(ENV_SDK_RESOLVER_CLI_DIR)
        if cli_dir:
            candidates.append(Path(cli_dir))

        on_path = find_on_path("dotnet", self.environ, self.platform_name)
        if on_path is not None:
            candidates.append(on_path.parent)

        unique: list[Path] = []
        for candidate in candidates:
            if candidate not in unique:
                unique.append(candidate)
        return unique

    def _resolve(self) -> tuple[Path, str | None, list[str]] | None:
        for exe_dir in self.exe_directories():
            best = self.resolver.resolve_best(exe_dir, self.working_directory)
            available = self.resolver.list_all(exe_dir)
            if best or available:
                logger.debug("Using dotnet at %s (%d SDKs)", exe_dir, len(available))
                return exe_dir, best, available
        return None

    def _validate(self, path: str, runtime: SemanticVersion | None) -> MSBuildInstance | None:
        if not path or not path.strip():
            return None
        sdk_dir = Path(path)
        if not (sdk_dir / self.layout.primary_module_file).is_file():
            logger.debug("%s has no %s", sdk_dir, self.layout.primary_module_file)
            return None
        version = read_sdk_version(sdk_dir)
        if version is None:
            logger.debug("%s has no readable %s", sdk_dir, SDK_VERSION_FILE)
            return None
        if runtime is not None and not self.allow_all_runtime_versions and exceeds_runtime(version, runtime):
            logger.debug("Skipping SDK %s: newer than runtime %s", version, runtime)
            return None
        return MSBuildInstance(
            name=SDK_DIRECTORY_NAME,
            root_path=sdk_dir,
            toolchain_path=sdk_dir,
            version=version,
            discovery_type=self.discovery_type,
        )

    def _discover(self) -> Iterator[MSBuildInstance]:
        resolved = self._resolve()
        if resolved is None:
            return
        exe_dir, best, available = resolved

        runtime = None if self.allow_all_runtime_versions else self.runtime_version(exe_dir)

        seen: set[str] = set()
        best_instance = None
        if best:
            seen.add(os.path.normcase(os.path.normpath(best)))
            best_instance = self._validate(best, runtime)

        others: list[MSBuildInstance] = []
        for path in available:
            key = os.path.normcase(os.path.normpath(path))
            if key in seen:
                continue
            seen.add(key)
            instance = self._validate(path, runtime)
            if instance is not None:
                others.append(instance)

        if best_instance is not None:
            yield best_instance
        yield from sorted(others, key=lambda instance: instance.version, reverse=True)
