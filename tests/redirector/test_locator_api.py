"""Tests for the module-level registration API in ``msbuild_locator.locator``."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

import msbuild_locator
from msbuild_locator import locator
from msbuild_locator.discovery.base import InstanceSource
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance, QueryOptions
from msbuild_locator.discovery.platform_info import HostRuntime
from msbuild_locator.discovery.registry import InstanceRegistry
from msbuild_locator.exceptions import InstanceNotFoundError, NotActiveError
from msbuild_locator.redirector import ModuleRedirector
from msbuild_locator.version import parse


class ListSource(InstanceSource):
    def __init__(self, discovery_type: DiscoveryType, instances: list[MSBuildInstance]) -> None:
        super().__init__({})
        self.discovery_type = discovery_type
        self.instances = instances

    def _discover(self) -> Iterator[MSBuildInstance]:
        yield from self.instances


def _instance(path: Path, version: str, discovery_type: DiscoveryType) -> MSBuildInstance:
    return MSBuildInstance(
        name=f"toolchain {version}",
        root_path=path,
        toolchain_path=path,
        version=parse(version),
        discovery_type=discovery_type,
    )


@pytest.fixture
def redirector(monkeypatch: pytest.MonkeyPatch) -> ModuleRedirector:
    fresh = ModuleRedirector(meta_path=[], modules={}, environ={})
    monkeypatch.setattr(locator, "_default_redirector", fresh)
    return fresh


@pytest.fixture
def sources(monkeypatch: pytest.MonkeyPatch) -> list[InstanceSource]:
    """Replace the default registry with one built from this list."""
    registered: list[InstanceSource] = []

    def fake_default_registry(options=None, platform_name=None):
        return InstanceRegistry(registered, platform_name="linux", runtime=HostRuntime("dotnet"))

    monkeypatch.setattr(locator, "default_registry", fake_default_registry)
    return registered


class TestRegisterDefaults:
    def test_registers_first_default_instance(
        self, redirector: ModuleRedirector, sources: list, tmp_path: Path,
    ) -> None:
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        sources.append(ListSource(DiscoveryType.SDK_RESOLVER, [
            _instance(first, "8.0.100", DiscoveryType.SDK_RESOLVER),
            _instance(second, "7.0.400", DiscoveryType.SDK_RESOLVER),
        ]))
        instance = locator.register_defaults(QueryOptions(environ={}))
        assert instance.toolchain_path == first
        assert locator.is_registered()
        assert redirector.state.target_path == first

    def test_no_instances(self, redirector: ModuleRedirector, sources: list) -> None:
        with pytest.raises(InstanceNotFoundError, match="No instances of MSBuild could be detected"):
            locator.register_defaults(QueryOptions(environ={}))
        assert not locator.is_registered()

    def test_non_default_types_are_ignored(
        self, redirector: ModuleRedirector, sources: list, tmp_path: Path,
    ) -> None:
        sources.append(ListSource(DiscoveryType.INSTALLER_CATALOG, [
            _instance(tmp_path, "17.8.3", DiscoveryType.INSTALLER_CATALOG),
        ]))
        with pytest.raises(InstanceNotFoundError):
            locator.register_defaults(QueryOptions(environ={}))


class TestModuleLevelFunctions:
    def test_query_instances(self, sources: list, tmp_path: Path) -> None:
        sources.append(ListSource(DiscoveryType.SDK_RESOLVER, [
            _instance(tmp_path, "8.0.100", DiscoveryType.SDK_RESOLVER),
        ]))
        [instance] = locator.query_instances(QueryOptions(environ={}))
        assert instance.version_text == "8.0.100"

    def test_register_path_and_unregister(self, redirector: ModuleRedirector, tmp_path: Path) -> None:
        assert locator.can_register()
        locator.register_path(tmp_path)
        assert locator.is_registered()
        assert not locator.can_register()
        locator.unregister()
        assert not locator.is_registered()

    def test_unregister_without_registration(self, redirector: ModuleRedirector) -> None:
        with pytest.raises(NotActiveError):
            locator.unregister()

    def test_register_instance(self, redirector: ModuleRedirector, tmp_path: Path) -> None:
        locator.register_instance(_instance(tmp_path, "8.0.100", DiscoveryType.SDK_RESOLVER))
        assert redirector.is_active

    def test_get_redirector(self, redirector: ModuleRedirector) -> None:
        assert locator.get_redirector() is redirector

    def test_package_reexports(self) -> None:
        assert msbuild_locator.register_defaults is locator.register_defaults
        assert msbuild_locator.query_instances is locator.query_instances
        assert isinstance(msbuild_locator.__version__, str)
