"""Resolvers that ask the .NET host which SDKs are installed.

The .NET host exposes SDK resolution through ``hostfxr``, a native library
shipped under ``<dotnet root>/host/fxr/<version>/``. ``HostFxrResolver`` calls
it through ``ctypes``; this honors ``global.json`` pins exactly as
``dotnet build`` would. When the library cannot be loaded (missing, wrong
architecture), ``DotnetCliResolver`` scrapes ``dotnet --list-sdks`` and
``dotnet --info`` instead.

Both implement the ``SdkResolver`` protocol consumed by
``SdkResolverSource``.
"""

from __future__ import annotations

import ctypes
import logging
import os
import re
from pathlib import Path
from typing import Protocol

from msbuild_locator.discovery.platform_info import current_platform, executable_names
from msbuild_locator.discovery.process import run_tool
from msbuild_locator.version import SemanticVersion, max_of, try_parse

logger = logging.getLogger(__name__)

# hostfxr_resolve_sdk2_result_key_t
RESOLVED_SDK_DIR = 0
GLOBAL_JSON_PATH = 1

_SDK_LINE_RE = re.compile(r"(\S+) \[(.*?)]$", re.MULTILINE)
_BASE_PATH_RE = re.compile(r"Base Path:(.*)$", re.MULTILINE)
_RUNTIME_LINE_RE = re.compile(r"^Microsoft\.NETCore\.App (\S+) \[", re.MULTILINE)

# dotnet localizes its output; the scraped labels are English.
_CLI_ENV_OVERRIDES = {"DOTNET_CLI_UI_LANGUAGE": "en-US", "DOTNET_NOLOGO": "1"}


class SdkResolver(Protocol):
    """Collaborator answering "which SDK directories exist for this dotnet"."""

    def resolve_best(self, exe_dir: Path, working_dir: Path) -> str | None:
        """Return the SDK directory ``dotnet`` would pick in *working_dir*."""
        ...

    def list_all(self, exe_dir: Path) -> list[str]:
        """Return every installed SDK directory, ascending by version."""
        ...


def hostfxr_library_name(platform_name: str | None = None) -> str:
    platform_name = platform_name or current_platform()
    if platform_name == "windows":
        return "hostfxr.dll"
    if platform_name == "macos":
        return "libhostfxr.dylib"
    return "libhostfxr.so"


def dotnet_executable(exe_dir: Path, platform_name: str | None = None) -> Path:
    """Return the ``dotnet`` executable inside *exe_dir*."""
    names = executable_names("dotnet", platform_name)
    for name in names:
        candidate = exe_dir / name
        if candidate.is_file():
            return candidate
    return exe_dir / names[0]


class HostFxrResolver:
    """``SdkResolver`` backed by the native ``hostfxr`` library.

    The newest ``host/fxr/<version>`` directory is used. Loaded libraries are
    cached per path for the lifetime of the resolver.
    """

    def __init__(self, platform_name: str | None = None) -> None:
        self.platform_name = platform_name or current_platform()
        self._libraries: dict[Path, ctypes.CDLL] = {}
        if self.platform_name == "windows":
            self._char_p = ctypes.c_wchar_p
        else:
            self._char_p = ctypes.c_char_p

    def library_path(self, exe_dir: Path) -> Path | None:
        """Locate the hostfxr library for *exe_dir*, or None."""
        fxr_root = Path(exe_dir) / "host" / "fxr"
        try:
            directories = [p for p in fxr_root.iterdir() if p.is_dir()]
        except OSError:
            return None
        newest = max_of(p.name for p in directories)
        if newest is None:
            return None
        for directory in directories:
            if try_parse(directory.name) == newest:
                library = directory / hostfxr_library_name(self.platform_name)
                if library.is_file():
                    return library
        return None

    def load(self, exe_dir: Path) -> ctypes.CDLL | None:
        library_path = self.library_path(exe_dir)
        if library_path is None:
            return None
        if library_path not in self._libraries:
            try:
                library = ctypes.CDLL(str(library_path))
            except OSError as exc:
                logger.debug("Could not load %s: %s", library_path, exc)
                return None
            library.hostfxr_resolve_sdk2.restype = ctypes.c_int32
            library.hostfxr_get_available_sdks.restype = ctypes.c_int32
            self._libraries[library_path] = library
        return self._libraries[library_path]

    def is_available(self, exe_dir: Path) -> bool:
        return self.load(exe_dir) is not None

    def _encode(self, value: Path | str) -> str | bytes:
        if self.platform_name == "windows":
            return str(value)
        return os.fsencode(str(value))

    @staticmethod
    def _decode(value: str | bytes | None) -> str | None:
        if value is None:
            return None
        return os.fsdecode(value) if isinstance(value, bytes) else value

    def resolve_best(self, exe_dir: Path, working_dir: Path) -> str | None:
        library = self.load(exe_dir)
        if library is None:
            return None

        result: dict[int, str | None] = {}
        callback_type = ctypes.CFUNCTYPE(None, ctypes.c_int32, self._char_p)

        def on_result(key: int, value: str | bytes | None) -> None:
            result[key] = self._decode(value)

        callback = callback_type(on_result)
        rc = library.hostfxr_resolve_sdk2(
            self._char_p(self._encode(exe_dir)),
            self._char_p(self._encode(working_dir)),
            ctypes.c_int32(0),
            callback,
        )
        if rc != 0:
            logger.debug("hostfxr_resolve_sdk2 returned %d for %s", rc, exe_dir)
            return None
        if result.get(GLOBAL_JSON_PATH):
            logger.debug("SDK pinned by %s", result[GLOBAL_JSON_PATH])
        return result.get(RESOLVED_SDK_DIR)

    def list_all(self, exe_dir: Path) -> list[str]:
        library = self.load(exe_dir)
        if library is None:
            return []

        sdks: list[str] = []
        callback_type = ctypes.CFUNCTYPE(None, ctypes.c_int32, ctypes.POINTER(self._char_p))

        def on_result(count: int, values) -> None:
            for index in range(count):
                decoded = self._decode(values[index])
                if decoded:
                    sdks.append(decoded)

        callback = callback_type(on_result)
        rc = library.hostfxr_get_available_sdks(self._char_p(self._encode(exe_dir)), callback)
        if rc != 0:
            logger.debug("hostfxr_get_available_sdks returned %d for %s", rc, exe_dir)
            return []
        return sdks


def _cli_environment() -> dict[str, str]:
    env = dict(os.environ)
    env.update(_CLI_ENV_OVERRIDES)
    return env


class DotnetCliResolver:
    """``SdkResolver`` that scrapes the ``dotnet`` command line."""

    def __init__(self, platform_name: str | None = None) -> None:
        self.platform_name = platform_name

    def _run(self, exe_dir: Path, *args: str, cwd: Path | None = None) -> str | None:
        dotnet = dotnet_executable(Path(exe_dir), self.platform_name)
        return run_tool([dotnet, *args], env=_cli_environment(), cwd=cwd)

    def resolve_best(self, exe_dir: Path, working_dir: Path) -> str | None:
        cwd = working_dir if Path(working_dir).is_dir() else None
        output = self._run(exe_dir, "--info", cwd=cwd)
        if output is None:
            return None
        return parse_base_path(output)

    def list_all(self, exe_dir: Path) -> list[str]:
        output = self._run(exe_dir, "--list-sdks")
        if output is None:
            return []
        return parse_sdk_list(output)


class DefaultSdkResolver:
    """Uses ``HostFxrResolver`` where hostfxr loads, ``DotnetCliResolver`` elsewhere."""

    def __init__(self, platform_name: str | None = None) -> None:
        self.native = HostFxrResolver(platform_name)
        self.cli = DotnetCliResolver(platform_name)

    def _pick(self, exe_dir: Path) -> SdkResolver:
        if self.native.is_available(exe_dir):
            return self.native
        logger.debug("hostfxr unavailable under %s; using the dotnet CLI", exe_dir)
        return self.cli

    def resolve_best(self, exe_dir: Path, working_dir: Path) -> str | None:
        return self._pick(exe_dir).resolve_best(exe_dir, working_dir)

    def list_all(self, exe_dir: Path) -> list[str]:
        return self._pick(exe_dir).list_all(exe_dir)


def parse_sdk_list(output: str) -> list[str]:
    """Parse ``dotnet --list-sdks`` into SDK directories.

    Each line reads ``8.0.100 [/usr/share/dotnet/sdk]``; the SDK directory is
    the bracketed parent joined with the version.
    """
    return [
        os.path.join(parent, version)
        for version, parent in _SDK_LINE_RE.findall(output.replace("\r\n", "\n"))
    ]


def parse_base_path(output: str) -> str | None:
    """Extract the ``Base Path:`` of the active SDK from ``dotnet --info``."""
    m = _BASE_PATH_RE.search(output.replace("\r\n", "\n"))
    if not m:
        return None
    base_path = m.group(1).strip().rstrip("/\\")
    return base_path or None


def parse_runtime_list(output: str) -> SemanticVersion | None:
    """Return the newest ``Microsoft.NETCore.App`` in ``dotnet --list-runtimes``."""
    return max_of(_RUNTIME_LINE_RE.findall(output.replace("\r\n", "\n")))


def newest_runtime_version(exe_dir: Path, platform_name: str | None = None) -> SemanticVersion | None:
    """Return the newest shared .NET runtime installed under *exe_dir*.

    This is the runtime a ``dotnet``-hosted process would roll forward to,
    and therefore the ceiling for usable SDKs.
    """
    dotnet = dotnet_executable(Path(exe_dir), platform_name)
    output = run_tool([dotnet, "--list-runtimes"], env=_cli_environment())
    if output is None:
        return None
    return parse_runtime_list(output)
