"""Import redirection for toolchain modules.

Public API::

    from msbuild_locator.redirector import ModuleRedirector

    redirector = ModuleRedirector()
    redirector.register("/usr/share/dotnet/sdk/8.0.100")
    import msbuild  # served from the registered directory
"""

from __future__ import annotations

from msbuild_locator.redirector.environment import apply_sdk_environment, sdk_environment
from msbuild_locator.redirector.hook import ModuleRedirector
from msbuild_locator.redirector.loader import ModuleLoader, load_module_from_path
from msbuild_locator.redirector.state import RedirectorState

__all__ = [
    "ModuleLoader",
    "ModuleRedirector",
    "RedirectorState",
    "apply_sdk_environment",
    "load_module_from_path",
    "sdk_environment",
]
