"""Tests for SDK discovery: ``SdkResolverSource`` and ``read_sdk_version``."""

from __future__ import annotations

from pathlib import Path

import pytest

from msbuild_locator.discovery.models import DiscoveryType
from msbuild_locator.discovery.sdk_resolver import SdkResolverSource, exceeds_runtime, read_sdk_version
from msbuild_locator.toolchain import SDK_DIRECTORY_NAME
from msbuild_locator.version import SemanticVersion, parse
from tests.discovery.helpers import FakeResolver, create_dotnet_root, create_sdk


def _source(resolver: FakeResolver, exe_dir: Path, **kwargs) -> SdkResolverSource:
    kwargs.setdefault("runtime_version", lambda _: None)
    return SdkResolverSource(
        environ={"DOTNET_ROOT": str(exe_dir), "PATH": ""},
        working_directory=exe_dir,
        resolver=resolver,
        executable="/usr/bin/python3",
        platform_name="linux",
        **kwargs,
    )


@pytest.fixture
def dotnet_root(tmp_path: Path) -> Path:
    return create_dotnet_root(tmp_path / "dotnet")


@pytest.fixture
def sdk_root(dotnet_root: Path) -> Path:
    return dotnet_root / "sdk"


class TestReadSdkVersion:
    """Parsing the ``.version`` file."""

    def test_release(self, tmp_path: Path) -> None:
        sdk = create_sdk(tmp_path, "8.0.100")
        assert read_sdk_version(sdk) == parse("8.0.100")

    def test_preview_labels_kept(self, tmp_path: Path) -> None:
        sdk = create_sdk(tmp_path, "8.0.100-preview.6.23330.14")
        version = read_sdk_version(sdk)
        assert version is not None
        assert version.release == "preview.6.23330.14"

    def test_unparsable_suffix_keeps_numeric_triple(self, tmp_path: Path) -> None:
        sdk = create_sdk(tmp_path, "x", version_file="abc\n7.0.400+sha.1\n")
        assert read_sdk_version(sdk) == SemanticVersion(7, 0, 400)

    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_sdk_version(tmp_path) is None

    def test_no_version_line(self, tmp_path: Path) -> None:
        sdk = create_sdk(tmp_path, "x", version_file="abcdef\nlinux-x64\n")
        assert read_sdk_version(sdk) is None


class TestExceedsRuntime:
    @pytest.mark.parametrize(
        ("sdk", "runtime", "expected"),
        [
            ("8.0.100", "8.0.0", False),
            ("8.0.400", "8.0.7", False),
            ("8.1.100", "8.0.7", True),
            ("9.0.100", "8.0.7", True),
            ("7.0.400", "8.0.7", False),
        ],
    )
    def test_major_minor_only(self, sdk: str, runtime: str, expected: bool) -> None:
        assert exceeds_runtime(parse(sdk), parse(runtime)) is expected


class TestSdkResolverSource:
    """Ordering, validation and runtime ceiling."""

    def test_best_first_then_descending(self, dotnet_root: Path, sdk_root: Path) -> None:
        paths = [str(create_sdk(sdk_root, v)) for v in ("6.0.400", "7.0.100", "8.0.100", "8.0.300")]
        resolver = FakeResolver(best=paths[1], available=paths)
        instances = list(_source(resolver, dotnet_root).discover())
        assert [i.version_text for i in instances] == ["7.0.100", "8.0.300", "8.0.100", "6.0.400"]
        assert all(i.name == SDK_DIRECTORY_NAME for i in instances)
        assert all(i.discovery_type == DiscoveryType.SDK_RESOLVER for i in instances)
        assert instances[0].toolchain_path == Path(paths[1])
        assert instances[0].root_path == Path(paths[1])

    def test_best_not_duplicated(self, dotnet_root: Path, sdk_root: Path) -> None:
        best = str(create_sdk(sdk_root, "8.0.100"))
        resolver = FakeResolver(best=best, available=[best, best + "/"])
        assert len(list(_source(resolver, dotnet_root).discover())) == 1

    def test_invalid_best_is_skipped(self, dotnet_root: Path, sdk_root: Path) -> None:
        broken = str(create_sdk(sdk_root, "9.0.100", with_module=False))
        good = str(create_sdk(sdk_root, "8.0.100"))
        resolver = FakeResolver(best=broken, available=[good, broken])
        assert [i.version_text for i in _source(resolver, dotnet_root).discover()] == ["8.0.100"]

    def test_missing_version_file_skipped(self, dotnet_root: Path, sdk_root: Path) -> None:
        sdk = create_sdk(sdk_root, "8.0.100")
        (sdk / ".version").unlink()
        resolver = FakeResolver(available=[str(sdk)])
        assert list(_source(resolver, dotnet_root).discover()) == []

    def test_runtime_ceiling(self, dotnet_root: Path, sdk_root: Path) -> None:
        paths = [str(create_sdk(sdk_root, v)) for v in ("7.0.400", "8.0.100", "9.0.100")]
        resolver = FakeResolver(available=paths)
        source = _source(resolver, dotnet_root, runtime_version=lambda _: parse("8.0.7"))
        assert [i.version_text for i in source.discover()] == ["8.0.100", "7.0.400"]

    def test_allow_all_runtime_versions(self, dotnet_root: Path, sdk_root: Path) -> None:
        paths = [str(create_sdk(sdk_root, v)) for v in ("8.0.100", "9.0.100")]
        probed: list[Path] = []

        def probe(exe_dir: Path) -> SemanticVersion:
            probed.append(exe_dir)
            return parse("8.0.7")

        source = _source(
            FakeResolver(available=paths), dotnet_root,
            runtime_version=probe, allow_all_runtime_versions=True,
        )
        assert [i.version_text for i in source.discover()] == ["9.0.100", "8.0.100"]
        assert probed == []

    def test_unknown_runtime_keeps_everything(self, dotnet_root: Path, sdk_root: Path) -> None:
        paths = [str(create_sdk(sdk_root, v)) for v in ("8.0.100", "9.0.100")]
        assert len(list(_source(FakeResolver(available=paths), dotnet_root).discover())) == 2

    def test_preview_sdk_kept_with_labels(self, dotnet_root: Path, sdk_root: Path) -> None:
        paths = [str(create_sdk(sdk_root, v)) for v in ("8.0.100", "8.0.100-rc.2.23502.2")]
        instances = list(_source(FakeResolver(available=paths), dotnet_root).discover())
        assert [i.version_text for i in instances] == ["8.0.100", "8.0.100-rc.2.23502.2"]

    def test_nothing_resolved(self, dotnet_root: Path) -> None:
        assert list(_source(FakeResolver(), dotnet_root).discover()) == []

    def test_blank_paths_ignored(self, dotnet_root: Path) -> None:
        assert list(_source(FakeResolver(best="  ", available=["", " "]), dotnet_root).discover()) == []


class TestExeDirectories:
    """Probing order for the ``dotnet`` installation."""

    def test_probe_order(self, tmp_path: Path) -> None:
        path_dir = create_dotnet_root(tmp_path / "on-path")
        source = SdkResolverSource(
            environ={
                "DOTNET_ROOT": str(tmp_path / "root"),
                "DOTNET_HOST_PATH": str(tmp_path / "host" / "dotnet"),
                "DOTNET_MSBUILD_SDK_RESOLVER_CLI_DIR": str(tmp_path / "cli"),
                "PATH": str(path_dir),
            },
            resolver=FakeResolver(),
            executable=str(tmp_path / "exe" / "dotnet"),
            platform_name="linux",
        )
        assert source.exe_directories() == [
            tmp_path / "root",
            tmp_path / "exe",
            tmp_path / "host",
            tmp_path / "cli",
            path_dir.resolve(),
        ]

    def test_duplicates_removed(self, tmp_path: Path) -> None:
        root = tmp_path / "dotnet"
        source = SdkResolverSource(
            environ={"DOTNET_ROOT": str(root), "DOTNET_MSBUILD_SDK_RESOLVER_CLI_DIR": str(root), "PATH": ""},
            resolver=FakeResolver(),
            executable="/usr/bin/python3",
            platform_name="linux",
        )
        assert source.exe_directories() == [root]

    def test_non_dotnet_executable_ignored(self, tmp_path: Path) -> None:
        source = SdkResolverSource(
            environ={"PATH": ""},
            resolver=FakeResolver(),
            executable=str(tmp_path / "python3"),
            platform_name="linux",
        )
        assert source.exe_directories() == []

    def test_first_directory_with_results_wins(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        full = create_dotnet_root(tmp_path / "full")
        sdk = str(create_sdk(full / "sdk", "8.0.100"))
        resolver = FakeResolver(available=[sdk], answers_for={full})
        source = SdkResolverSource(
            environ={"DOTNET_ROOT": str(empty), "DOTNET_MSBUILD_SDK_RESOLVER_CLI_DIR": str(full), "PATH": ""},
            resolver=resolver,
            runtime_version=lambda _: None,
            executable="/usr/bin/python3",
            platform_name="linux",
        )
        assert [i.version_text for i in source.discover()] == ["8.0.100"]
        assert ("list_all", empty) in resolver.calls
        assert ("list_all", full) in resolver.calls
