"""Static registry of MSBuild toolchain conventions.

Everything that identifies "the toolchain" on disk and in the environment
lives here: the whitelist of module names the redirector is willing to serve,
the relative paths each discovery source appends to an installation root, and
the environment variable names each source reads or writes.

Keeping the conventions in one module lets the discovery sources, the
redirector and the analyzer agree on names without importing each other, and
lets tests build alternative layouts without patching globals.

Platform Notes:
    Visual Studio 2019 (v16) and later ship MSBuild under ``MSBuild/Current``.
    Visual Studio 2017 (v15) uses ``MSBuild/15.0``. Mono bundles MSBuild under
    ``lib/mono/msbuild/<Current|15.0>/bin``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath


@dataclass(frozen=True)
class ToolchainLayout:
    """Describes which modules belong to the toolchain and how they are stored.

    Attributes:
        modules: Module names the redirector serves. Order is irrelevant,
            but the size is the number of resolutions before auto-retirement.
        extension: File suffix appended to a module name to find it under
            the toolchain directory.
        primary_module: The module whose file marks a directory as a valid
            toolchain deployment. Also the entry point of the sample builder.
    """

    modules: tuple[str, ...]
    extension: str = ".py"
    primary_module: str = ""

    def __post_init__(self) -> None:
        if not self.modules:
            raise ValueError("A toolchain layout needs at least one module")
        if not self.primary_module:
            object.__setattr__(self, "primary_module", self.modules[0])

    def module_file(self, name: str) -> str:
        """Return the on-disk file name for a whitelisted module."""
        return f"{name}{self.extension}"

    @property
    def primary_module_file(self) -> str:
        return self.module_file(self.primary_module)

    def is_toolchain_module(self, name: str) -> bool:
        return name in self.modules


DEFAULT_LAYOUT = ToolchainLayout(
    modules=(
        "msbuild",
        "msbuild_framework",
        "msbuild_tasks_core",
        "msbuild_utilities_core",
    ),
)

# -- Installation layouts -----------------------------------------------------

# Visual Studio (developer shell, installer catalog)
VS_MSBUILD_CURRENT = PurePath("MSBuild", "Current", "Bin")
VS_MSBUILD_LEGACY = PurePath("MSBuild", "15.0", "Bin")
VS_CURRENT_LAYOUT_MAJOR = 16

# .NET SDK
SDK_VERSION_FILE = ".version"
SDK_DIRECTORY_NAME = ".NET Core SDK"
SDK_MSBUILD_ENTRY = "MSBuild.dll"
SDK_SDKS_DIRECTORY = "Sdks"

# Mono
MONO_MSBUILD_RELATIVE_PATHS: tuple[PurePath, ...] = (
    PurePath("lib", "mono", "msbuild", "Current", "bin", "MSBuild.dll"),
    PurePath("lib", "mono", "msbuild", "15.0", "bin", "MSBuild.dll"),
)
MONO_OSX_BASE_PATH = PurePath("/Library/Frameworks/Mono.framework/Versions")
MONO_CURRENT_SYMLINK = "Current"

# -- Environment variables ----------------------------------------------------

# Developer shell
ENV_VS_INSTALL_DIR = "VSINSTALLDIR"
ENV_VSCMD_VERSION = "VSCMD_VER"
ENV_VS_VERSION = "VisualStudioVersion"

# Legacy (CoreXT) build environments
ENV_LEGACY_TOOLSET = "MsBuildToolset"
ENV_LEGACY_TOOLS_PATH_PREFIX = "MSBuildToolsPath_"
LEGACY_MIN_TOOLSET = 150

# .NET SDK resolution
ENV_DOTNET_ROOT = "DOTNET_ROOT"
ENV_DOTNET_HOST_PATH = "DOTNET_HOST_PATH"
ENV_SDK_RESOLVER_CLI_DIR = "DOTNET_MSBUILD_SDK_RESOLVER_CLI_DIR"
ENV_QUERY_ALL_RUNTIMES = "DOTNET_MSBUILD_QUERY_ALL_RUNTIMES"

# Written before registering an SDK instance, mimicking what ``dotnet`` sets
ENV_MSBUILD_EXE_PATH = "MSBUILD_EXE_PATH"
ENV_MSBUILD_EXTENSIONS_PATH = "MSBuildExtensionsPath"
ENV_MSBUILD_SDKS_PATH = "MSBuildSDKsPath"

# Installer catalog
ENV_PROGRAM_FILES_X86 = "ProgramFiles(x86)"

# Locator configuration
ENV_HOST_RUNTIME = "MSBUILD_LOCATOR_HOST_RUNTIME"
ENV_LOG_LEVEL = "MSBUILD_LOCATOR_LOG_LEVEL"


def vs_toolchain_path(root: PurePath, major: int | None) -> PurePath:
    """Return the MSBuild ``Bin`` directory under a Visual Studio root.

    Unknown versions are assumed to use the ``Current`` layout.
    """
    if major is not None and major < VS_CURRENT_LAYOUT_MAJOR:
        return root / VS_MSBUILD_LEGACY
    return root / VS_MSBUILD_CURRENT
