"""Discovery through the Visual Studio installer catalog.

The Visual Studio installer registers every installation with the operating
system. ``vswhere.exe`` (shipped with the installer since VS 2017 15.2) is the
supported way to query that catalog. The catalog itself is an external
collaborator: anything implementing ``InstallerCatalog`` can stand in for
vswhere, which is how tests feed fixed installations to the source.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import NamedTuple, Protocol

from msbuild_locator.discovery.base import InstanceSource
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance
from msbuild_locator.discovery.platform_info import current_platform
from msbuild_locator.discovery.process import run_tool
from msbuild_locator.toolchain import ENV_PROGRAM_FILES_X86, vs_toolchain_path
from msbuild_locator.version import SemanticVersion

logger = logging.getLogger(__name__)

VSWHERE_RELATIVE_PATH = Path("Microsoft Visual Studio", "Installer", "vswhere.exe")
VSWHERE_ARGS: tuple[str, ...] = (
    "-products", "*",
    "-requires", "Microsoft.Component.MSBuild",
    "-prerelease",
    "-format", "json",
    "-utf8",
)


class CatalogEntry(NamedTuple):
    """One installation registered with the installer.

    Attributes:
        name: Product display name (e.g. "Visual Studio Enterprise 2022").
        path: Installation root.
        version: Installation version as reported (often four components).
    """

    name: str
    path: str
    version: str


class InstallerCatalog(Protocol):
    """Collaborator returning the installations the OS installer knows about."""

    def list_installed(self) -> list[CatalogEntry]:
        ...


class VsWhereCatalog:
    """``InstallerCatalog`` backed by ``vswhere.exe -format json``."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        platform: str | None = None,
    ) -> None:
        self._environ = environ if environ is not None else {}
        self._platform = platform

    def vswhere_path(self) -> Path | None:
        program_files = self._environ.get(ENV_PROGRAM_FILES_X86)
        if not program_files:
            return None
        candidate = Path(program_files) / VSWHERE_RELATIVE_PATH
        return candidate if candidate.is_file() else None

    def list_installed(self) -> list[CatalogEntry]:
        if (self._platform or current_platform()) != "windows":
            return []
        vswhere = self.vswhere_path()
        if vswhere is None:
            logger.debug("vswhere.exe not found; installer catalog is empty")
            return []
        output = run_tool([vswhere, *VSWHERE_ARGS])
        if output is None:
            return []
        return parse_vswhere_output(output)


def parse_vswhere_output(output: str) -> list[CatalogEntry]:
    """Parse ``vswhere -format json`` output into catalog entries.

    Entries missing an installation path are skipped. Malformed JSON yields
    an empty list.
    """
    try:
        payload = json.loads(output)
    except json.JSONDecodeError:
        logger.debug("vswhere produced invalid JSON")
        return []
    if not isinstance(payload, list):
        return []

    entries: list[CatalogEntry] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        path = item.get("installationPath")
        if not path:
            continue
        entries.append(CatalogEntry(
            name=str(item.get("displayName") or item.get("instanceId") or "Visual Studio"),
            path=str(path),
            version=str(item.get("installationVersion") or ""),
        ))
    return entries


class InstallerCatalogSource(InstanceSource):
    """Maps every catalog entry onto an ``MSBuildInstance``.

    Inside ``query_scope()`` the catalog is listed at most once, so the
    legacy environment source can read it without a second vswhere run.
    """

    discovery_type = DiscoveryType.INSTALLER_CATALOG

    def __init__(
        self,
        catalog: InstallerCatalog | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(environ)
        self.catalog = catalog if catalog is not None else VsWhereCatalog(self.environ)
        self._scoped = False
        self._entries: list[CatalogEntry] | None = None

    @contextmanager
    def query_scope(self) -> Iterator[None]:
        self._scoped = True
        try:
            yield
        finally:
            self._scoped = False
            self._entries = None

    def _list_installed(self) -> list[CatalogEntry]:
        if not self._scoped:
            return self.catalog.list_installed()
        if self._entries is None:
            self._entries = self.catalog.list_installed()
        return self._entries

    def _discover(self) -> Iterator[MSBuildInstance]:
        for name, path, version_text in self._list_installed():
            root = Path(path)
            version = SemanticVersion.coerce(version_text)
            yield MSBuildInstance(
                name=name,
                root_path=root,
                toolchain_path=Path(vs_toolchain_path(root, version.major if version else None)),
                version=version,
                discovery_type=self.discovery_type,
            )
