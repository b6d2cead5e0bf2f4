"""msbuild-locator: discover MSBuild installations and redirect toolchain imports."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance, QueryOptions
from msbuild_locator.exceptions import (
    AlreadyActiveError,
    InstanceNotFoundError,
    InvalidPathError,
    MSBuildLocatorError,
    NotActiveError,
)
from msbuild_locator.locator import (
    can_register,
    get_redirector,
    is_registered,
    query_instances,
    register_defaults,
    register_instance,
    register_path,
    unregister,
)
from msbuild_locator.redirector import ModuleRedirector
from msbuild_locator.version import SemanticVersion

__all__ = [
    "AlreadyActiveError",
    "DiscoveryType",
    "InstanceNotFoundError",
    "InvalidPathError",
    "MSBuildInstance",
    "MSBuildLocatorError",
    "ModuleRedirector",
    "NotActiveError",
    "QueryOptions",
    "SemanticVersion",
    "can_register",
    "get_redirector",
    "is_registered",
    "query_instances",
    "register_defaults",
    "register_instance",
    "register_path",
    "unregister",
]
