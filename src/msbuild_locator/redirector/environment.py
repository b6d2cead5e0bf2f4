"""Environment variables the ``dotnet`` driver normally sets for MSBuild.

When MSBuild runs through ``dotnet build`` the driver exports where the SDK
lives. A host that loads the SDK's toolchain directly must export the same
variables itself, before registration.
"""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from pathlib import Path

from msbuild_locator.toolchain import (
    ENV_MSBUILD_EXE_PATH,
    ENV_MSBUILD_EXTENSIONS_PATH,
    ENV_MSBUILD_SDKS_PATH,
    SDK_MSBUILD_ENTRY,
    SDK_SDKS_DIRECTORY,
)

logger = logging.getLogger(__name__)


def sdk_environment(sdk_path: Path | str) -> dict[str, str]:
    """Return the variables describing the SDK at *sdk_path*."""
    sdk_path = str(sdk_path)
    return {
        ENV_MSBUILD_EXE_PATH: os.path.join(sdk_path, SDK_MSBUILD_ENTRY),
        ENV_MSBUILD_EXTENSIONS_PATH: sdk_path,
        ENV_MSBUILD_SDKS_PATH: os.path.join(sdk_path, SDK_SDKS_DIRECTORY),
    }


def apply_sdk_environment(
    sdk_path: Path | str,
    environ: MutableMapping[str, str] | None = None,
) -> dict[str, str]:
    """Write the SDK variables into *environ* (``os.environ`` by default).

    Returns:
        The variables that were written.
    """
    target = os.environ if environ is None else environ
    variables = sdk_environment(sdk_path)
    for key, value in variables.items():
        target[key] = value
        logger.debug("Set %s=%s", key, value)
    return variables
