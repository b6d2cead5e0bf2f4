"""Discovery of MSBuild installations.

One source per discovery mechanism, each normalizing its hits into
``MSBuildInstance`` records, plus the registry that runs and filters them.

Public API::

    from msbuild_locator.discovery import QueryOptions, default_registry

    registry = default_registry(QueryOptions())
    for instance in registry.query_default():
        print(f"{instance.name} {instance.version_text}: {instance.toolchain_path}")
"""

from __future__ import annotations

from msbuild_locator.discovery.alternate_runtime import AlternateRuntimeSource
from msbuild_locator.discovery.base import InstanceSource
from msbuild_locator.discovery.developer_shell import DeveloperShellSource
from msbuild_locator.discovery.hostfxr import (
    DefaultSdkResolver,
    DotnetCliResolver,
    HostFxrResolver,
    SdkResolver,
)
from msbuild_locator.discovery.installer_catalog import (
    CatalogEntry,
    InstallerCatalog,
    InstallerCatalogSource,
    VsWhereCatalog,
)
from msbuild_locator.discovery.legacy_environment import LegacyEnvironmentSource
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance, QueryOptions
from msbuild_locator.discovery.platform_info import HostRuntime, current_platform, host_runtime
from msbuild_locator.discovery.registry import InstanceRegistry, default_registry
from msbuild_locator.discovery.sdk_resolver import SdkResolverSource

__all__ = [
    "AlternateRuntimeSource",
    "CatalogEntry",
    "DefaultSdkResolver",
    "DeveloperShellSource",
    "DiscoveryType",
    "DotnetCliResolver",
    "HostFxrResolver",
    "HostRuntime",
    "InstallerCatalog",
    "InstallerCatalogSource",
    "InstanceRegistry",
    "InstanceSource",
    "LegacyEnvironmentSource",
    "MSBuildInstance",
    "QueryOptions",
    "SdkResolver",
    "SdkResolverSource",
    "VsWhereCatalog",
    "current_platform",
    "default_registry",
    "host_runtime",
]
