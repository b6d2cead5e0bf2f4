"""Process-wide, auto-retiring import redirection for toolchain modules.

``ModuleRedirector.register(path)`` appends a finder to the end of
``sys.meta_path``. Regular finders run first, so the finder only sees imports
that would otherwise fail. For a whitelisted module name it loads
``<path>/<name><extension>`` and hands the module to the import system. Once
every whitelisted module has been served the finder removes itself.

Lifecycle::

    Inactive --register(path)--> Active
    Active --resolve() reaches expected_count--> Inactive (auto-retire)
    Active --unregister()--> Inactive

Import callbacks may arrive from any thread. Every read and write of the
state happens under one re-entrant lock, so each module is loaded at most
once per registration and the auto-retire transition happens exactly once.
The lock is re-entrant because a toolchain module may itself import another
toolchain module while it executes.
"""

from __future__ import annotations

import importlib.abc
import importlib.util
import logging
import os
import sys
import threading
from collections.abc import MutableMapping
from importlib.machinery import ModuleSpec
from pathlib import Path
from types import ModuleType

from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance
from msbuild_locator.exceptions import AlreadyActiveError, InvalidPathError, NotActiveError
from msbuild_locator.redirector.environment import apply_sdk_environment
from msbuild_locator.redirector.loader import ModuleLoader, load_module_from_path
from msbuild_locator.redirector.state import RedirectorState
from msbuild_locator.toolchain import DEFAULT_LAYOUT, ToolchainLayout

logger = logging.getLogger(__name__)


class _PreloadedLoader(importlib.abc.Loader):
    """Loader that hands back a module the redirector already executed."""

    def __init__(self, module: ModuleType) -> None:
        self.module = module

    def create_module(self, spec: ModuleSpec) -> ModuleType:
        return self.module

    def exec_module(self, module: ModuleType) -> None:
        pass


class _RedirectingFinder(importlib.abc.MetaPathFinder):
    """``sys.meta_path`` entry delegating to ``ModuleRedirector.resolve``."""

    def __init__(self, redirector: ModuleRedirector) -> None:
        self.redirector = redirector

    def find_spec(self, fullname, path=None, target=None):
        module = self.redirector.resolve(fullname)
        if module is None:
            return None
        return importlib.util.spec_from_loader(
            fullname,
            _PreloadedLoader(module),
            origin=getattr(module, "__file__", None),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} for {self.redirector.state.target_path}>"


class ModuleRedirector:
    """Installs and retires the toolchain import hook.

    Args:
        layout: Toolchain layout naming the whitelisted modules.
        loader: Callable ``(name, path) -> module`` that loads one file.
        meta_path: Finder list to install into; ``sys.meta_path`` at call
            time when None.
        modules: Loaded-module mapping consulted by ``can_register()``;
            ``sys.modules`` at call time when None.
        environ: Environment written by ``register_instance()`` for SDK
            instances; ``os.environ`` when None.
    """

    def __init__(
        self,
        layout: ToolchainLayout = DEFAULT_LAYOUT,
        *,
        loader: ModuleLoader = load_module_from_path,
        meta_path: list | None = None,
        modules: MutableMapping[str, ModuleType] | None = None,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        self.layout = layout
        self._loader = loader
        self._meta_path = meta_path
        self._modules = modules
        self._environ = environ
        self._lock = threading.RLock()
        self._state = RedirectorState(expected_count=len(layout.modules))
        self._finder: _RedirectingFinder | None = None

    @property
    def meta_path(self) -> list:
        return sys.meta_path if self._meta_path is None else self._meta_path

    @property
    def modules(self) -> MutableMapping[str, ModuleType]:
        return sys.modules if self._modules is None else self._modules

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._state.is_active

    @property
    def state(self) -> RedirectorState:
        """A detached copy of the current state."""
        with self._lock:
            return self._state.snapshot()

    def loaded_toolchain_modules(self) -> list[str]:
        """Return the whitelisted module names already present in ``modules``."""
        loaded = self.modules
        return [name for name in self.layout.modules if name in loaded]

    def can_register(self) -> bool:
        """True when inactive and no toolchain module has been loaded yet."""
        with self._lock:
            return not self._state.is_active and not self.loaded_toolchain_modules()

    def register(self, path: Path | str) -> None:
        """Redirect toolchain imports to the modules under *path*.

        Raises:
            InvalidPathError: If *path* is empty, blank or not a directory.
            AlreadyActiveError: If a registration is active or toolchain
                modules were already loaded.
        """
        if path is None or not str(path).strip():
            raise InvalidPathError("Toolchain path may not be empty or whitespace")
        target = Path(path)
        if not target.is_dir():
            raise InvalidPathError(f'Directory "{target}" does not exist')

        with self._lock:
            if not self.can_register():
                raise AlreadyActiveError(self._already_active_message())

            self._state.reset(target, len(self.layout.modules))
            self._finder = _RedirectingFinder(self)
            self.meta_path.append(self._finder)
        logger.info("Redirecting toolchain imports to %s", target)

    def register_instance(self, instance: MSBuildInstance) -> None:
        """Register a discovered instance.

        SDK instances first export the variables the ``dotnet`` driver would
        set, since the toolchain is loaded without going through it.
        """
        if instance is None:
            raise InvalidPathError("An instance is required")
        if instance.discovery_type == DiscoveryType.SDK_RESOLVER:
            apply_sdk_environment(instance.toolchain_path, self._environ)
        self.register(instance.toolchain_path)

    def unregister(self) -> None:
        """Remove the finder.

        Raises:
            NotActiveError: If no registration is active.
        """
        with self._lock:
            if not self._state.is_active:
                raise NotActiveError(self._not_active_message())

            finder, self._finder = self._finder, None
            if finder in self.meta_path:
                self.meta_path.remove(finder)
            self._state.is_active = False
        logger.info("Stopped redirecting toolchain imports")

    def resolve(self, fullname: str) -> ModuleType | None:
        """Serve *fullname* from the registered directory, or decline.

        Returns:
            The module, or None when the name is not handled here.
        """
        with self._lock:
            cached = self._state.resolved.get(fullname)
            if cached is not None:
                return cached

            if not self._state.is_active or not self.layout.is_toolchain_module(fullname):
                return None

            module_path = self._state.target_path / self.layout.module_file(fullname)
            if not module_path.is_file():
                logger.debug("No %s under %s", fullname, self._state.target_path)
                return None

            module = self._loader(fullname, module_path)
            self._state.resolved[fullname] = module
            self._state.resolved_count += 1
            if self._state.resolved_count == self._state.expected_count:
                logger.info("All %d toolchain modules loaded", self._state.expected_count)
                self.unregister()
            return module

    def _already_active_message(self) -> str:
        if self._state.is_active:
            return (
                "register was called, but a registration is already active for "
                f"{self._state.target_path}. Check is_registered before registering again."
            )
        loaded = os.linesep.join(self.loaded_toolchain_modules())
        return (
            "register was called, but toolchain modules were already loaded." + os.linesep
            + "Ensure that registration happens before any code that imports a toolchain "
            + "module is executed." + os.linesep
            + "Loaded toolchain modules:" + os.linesep + loaded
        )

    def _not_active_message(self) -> str:
        message = "unregister was called, but no toolchain path is registered." + os.linesep
        if self._state.resolved_count == 0:
            message += (
                "Ensure that register_instance, register_path or register_defaults "
                "is called before calling this method."
            )
        else:
            message += (
                "Unregistration happens automatically once every toolchain module "
                "has been loaded, so calling it directly is generally unnecessary."
            )
        return message + os.linesep + "Use is_registered to check whether unregistering is valid."
