"""Tests for discovery of MSBuild bundled with Mono."""

from __future__ import annotations

import os
from pathlib import Path

from msbuild_locator.discovery.alternate_runtime import MONO_NAME, AlternateRuntimeSource, msbuild_entry
from msbuild_locator.discovery.models import DiscoveryType
from msbuild_locator.discovery.platform_info import HostRuntime
from tests.discovery.helpers import create_mono_prefix


def _probe(versions: dict[str, str]):
    return lambda prefix: versions.get(prefix.name)


class TestMsbuildEntry:
    def test_current_layout(self, tmp_path: Path) -> None:
        create_mono_prefix(tmp_path)
        assert msbuild_entry(tmp_path) == tmp_path / "lib/mono/msbuild/Current/bin/MSBuild.dll"

    def test_legacy_layout(self, tmp_path: Path) -> None:
        create_mono_prefix(tmp_path, msbuild_dir="15.0")
        assert msbuild_entry(tmp_path) == tmp_path / "lib/mono/msbuild/15.0/bin/MSBuild.dll"

    def test_missing(self, tmp_path: Path) -> None:
        assert msbuild_entry(tmp_path) is None


class TestAlternateRuntimeSource:
    """Running prefix first, then side-by-side versions on macOS."""

    def test_inactive_when_host_is_not_mono(self, tmp_path: Path) -> None:
        prefix = create_mono_prefix(tmp_path / "mono")
        source = AlternateRuntimeSource(
            environ={}, runtime=HostRuntime("dotnet", prefix), platform_name="linux",
        )
        assert source.is_active() is False
        assert list(source.discover()) == []

    def test_running_prefix(self, tmp_path: Path) -> None:
        prefix = create_mono_prefix(tmp_path / "mono")
        source = AlternateRuntimeSource(
            environ={},
            runtime=HostRuntime("mono", prefix),
            platform_name="linux",
            version_probe=lambda _: "6.12.0.182\n",
        )
        [instance] = list(source.discover())
        assert instance.name == MONO_NAME
        assert instance.root_path == Path(os.path.realpath(prefix))
        assert instance.toolchain_path == instance.root_path / "lib/mono/msbuild/Current/bin"
        assert instance.version_text == "6.12.0"
        assert instance.discovery_type == DiscoveryType.ALTERNATE_RUNTIME

    def test_prefix_without_msbuild(self, tmp_path: Path) -> None:
        source = AlternateRuntimeSource(
            environ={}, runtime=HostRuntime("mono", tmp_path), platform_name="linux",
            version_probe=lambda _: None,
        )
        assert list(source.discover()) == []

    def test_version_falls_back_to_directory_name(self, tmp_path: Path) -> None:
        prefix = create_mono_prefix(tmp_path / "6.10.0")
        source = AlternateRuntimeSource(
            environ={}, runtime=HostRuntime("mono", prefix), platform_name="linux",
            version_probe=lambda _: None,
        )
        [instance] = list(source.discover())
        assert instance.version_text == "6.10.0"

    def test_version_unknown_is_zero(self, tmp_path: Path) -> None:
        prefix = create_mono_prefix(tmp_path / "mono")
        source = AlternateRuntimeSource(
            environ={}, runtime=HostRuntime("mono", prefix), platform_name="linux",
            version_probe=lambda _: "garbage",
        )
        [instance] = list(source.discover())
        assert instance.version_text == "0.0.0"

    def test_macos_scans_side_by_side_versions(self, tmp_path: Path) -> None:
        versions = tmp_path / "Versions"
        running = create_mono_prefix(versions / "6.12.0")
        create_mono_prefix(versions / "5.18.1")
        create_mono_prefix(versions / "6.8.0")
        (versions / "empty").mkdir()
        os.symlink(running, versions / "Current")

        source = AlternateRuntimeSource(
            environ={},
            runtime=HostRuntime("mono", versions / "Current"),
            platform_name="macos",
            versions_root=versions,
            version_probe=lambda _: None,
        )
        instances = list(source.discover())
        assert [i.version_text for i in instances] == ["6.12.0", "5.18.1", "6.8.0"]
        assert instances[0].root_path == Path(os.path.realpath(running))

    def test_side_by_side_scan_only_on_macos(self, tmp_path: Path) -> None:
        versions = tmp_path / "Versions"
        running = create_mono_prefix(versions / "6.12.0")
        create_mono_prefix(versions / "5.18.1")
        source = AlternateRuntimeSource(
            environ={},
            runtime=HostRuntime("mono", running),
            platform_name="linux",
            versions_root=versions,
            version_probe=lambda _: None,
        )
        assert len(list(source.discover())) == 1

    def test_runtime_detected_from_environment(self, tmp_path: Path) -> None:
        source = AlternateRuntimeSource(
            environ={"MSBUILD_LOCATOR_HOST_RUNTIME": "dotnet", "PATH": ""}, platform_name="linux",
        )
        assert source.runtime.kind == "dotnet"
        assert source.is_active() is False
