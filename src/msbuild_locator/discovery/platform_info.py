"""Host platform and runtime detection shared by the discovery sources."""

from __future__ import annotations

import logging
import os
import platform
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from msbuild_locator.toolchain import ENV_HOST_RUNTIME

logger = logging.getLogger(__name__)

HOST_RUNTIME_KINDS = ("netfx", "dotnet", "mono")


def current_platform() -> str:
    """Return the current platform identifier: windows, macos or linux."""
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    return "windows" if system == "windows" else "linux"


def executable_names(stem: str, platform_name: str | None = None) -> tuple[str, ...]:
    """Return the file names an executable called *stem* may have."""
    if (platform_name or current_platform()) == "windows":
        return (f"{stem}.exe", stem)
    return (stem,)


def find_on_path(
    stem: str,
    environ: Mapping[str, str] | None = None,
    platform_name: str | None = None,
) -> Path | None:
    """Scan ``PATH`` for an executable and return its real path.

    Both ``;`` and ``:`` separated lists are accepted, matching what a
    Windows or Unix shell exports.
    """
    env = os.environ if environ is None else environ
    raw = env.get("PATH", "")
    separator = ";" if ";" in raw else os.pathsep
    for entry in raw.split(separator):
        if not entry:
            continue
        for name in executable_names(stem, platform_name):
            candidate = Path(entry) / name
            try:
                if candidate.is_file():
                    return Path(os.path.realpath(candidate))
            except OSError:
                continue
    return None


@dataclass(frozen=True)
class HostRuntime:
    """The runtime the toolchain will be loaded into.

    Attributes:
        kind: One of ``netfx`` (Windows .NET Framework), ``dotnet`` or
            ``mono``; None when nothing usable was found.
        prefix: Install prefix of that runtime, when known.
    """

    kind: str | None
    prefix: Path | None = None

    @property
    def is_alternate(self) -> bool:
        return self.kind == "mono"


def _mono_prefix(mono_executable: Path) -> Path:
    # $prefix/bin/mono
    return mono_executable.parent.parent


def host_runtime(
    environ: Mapping[str, str] | None = None,
    platform_name: str | None = None,
) -> HostRuntime:
    """Detect which runtime the host process will load the toolchain into.

    ``MSBUILD_LOCATOR_HOST_RUNTIME`` forces the kind. Otherwise Windows is
    ``netfx``; elsewhere ``dotnet`` wins when it is on ``PATH``, then
    ``mono``.
    """
    env = os.environ if environ is None else environ
    platform_name = platform_name or current_platform()

    forced = env.get(ENV_HOST_RUNTIME, "").strip().lower()
    if forced:
        if forced not in HOST_RUNTIME_KINDS:
            logger.warning("Ignoring unknown %s value %r", ENV_HOST_RUNTIME, forced)
        else:
            prefix = None
            if forced == "mono":
                mono = find_on_path("mono", env, platform_name)
                prefix = _mono_prefix(mono) if mono else None
            return HostRuntime(kind=forced, prefix=prefix)

    if platform_name == "windows":
        return HostRuntime(kind="netfx")

    dotnet = find_on_path("dotnet", env, platform_name)
    if dotnet is not None:
        return HostRuntime(kind="dotnet", prefix=dotnet.parent)

    mono = find_on_path("mono", env, platform_name)
    if mono is not None:
        return HostRuntime(kind="mono", prefix=_mono_prefix(mono))

    logger.debug("No .NET or Mono runtime found on PATH")
    return HostRuntime(kind=None)
