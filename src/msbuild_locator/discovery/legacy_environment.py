"""Discovery from a CoreXT-style build environment.

CoreXT enlistments export three variables that together pin the MSBuild to
use: ``MsBuildToolset`` (the toolset number, e.g. ``150``),
``MSBuildToolsPath_<toolset>`` (the directory holding it) and
``VisualStudioVersion``. The toolchain path is taken verbatim from the
environment, so the instance carries no installation root unless a matching
installer catalog entry can supply one.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator, Mapping
from pathlib import Path

from msbuild_locator.discovery.base import InstanceSource
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance
from msbuild_locator.toolchain import (
    ENV_LEGACY_TOOLS_PATH_PREFIX,
    ENV_LEGACY_TOOLSET,
    ENV_VS_VERSION,
    LEGACY_MIN_TOOLSET,
)
from msbuild_locator.version import SemanticVersion

logger = logging.getLogger(__name__)

LEGACY_NAME = "COREXT"


def _parse_toolset(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        toolset = int(value.strip())
    except ValueError:
        logger.debug("%s=%r is not an integer", ENV_LEGACY_TOOLSET, value)
        return None
    if toolset < LEGACY_MIN_TOOLSET:
        logger.debug("%s=%d predates toolset %d", ENV_LEGACY_TOOLSET, toolset, LEGACY_MIN_TOOLSET)
        return None
    return toolset


class LegacyEnvironmentSource(InstanceSource):
    """Yields at most one ``COREXT`` instance described by the environment.

    Args:
        environ: Environment mapping to read.
        directory_exists: Predicate used to check the tools path.
        catalog_instances: Installer catalog instances. When one shares the
            major version of the environment, the newest such instance
            supplies the root path and full version.
    """

    discovery_type = DiscoveryType.LEGACY_ENVIRONMENT

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        directory_exists: Callable[[str], bool] = os.path.isdir,
        catalog_instances: Iterable[MSBuildInstance] | Callable[[], Iterable[MSBuildInstance]] = (),
    ) -> None:
        super().__init__(environ)
        self.directory_exists = directory_exists
        self.catalog_instances = catalog_instances

    def _catalog(self) -> list[MSBuildInstance]:
        source = self.catalog_instances
        return list(source() if callable(source) else source)

    def _matching_catalog_instance(self, version: SemanticVersion) -> MSBuildInstance | None:
        candidates = [
            instance for instance in self._catalog()
            if instance.version is not None and instance.version.major == version.major
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda instance: instance.version)

    def _discover(self) -> Iterator[MSBuildInstance]:
        toolset = _parse_toolset(self.env(ENV_LEGACY_TOOLSET))
        if toolset is None:
            return

        tools_path = self.env(f"{ENV_LEGACY_TOOLS_PATH_PREFIX}{toolset}")
        version = SemanticVersion.coerce(self.env(ENV_VS_VERSION))
        if tools_path is None or version is None:
            return
        if not self.directory_exists(tools_path):
            logger.debug("Legacy tools path %s does not exist", tools_path)
            return

        root_path: Path | None = None
        match = self._matching_catalog_instance(version)
        if match is not None:
            root_path = match.root_path
            version = match.version

        yield MSBuildInstance(
            name=LEGACY_NAME,
            root_path=root_path,
            toolchain_path=Path(tools_path),
            version=version,
            discovery_type=self.discovery_type,
        )
