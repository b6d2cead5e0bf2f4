"""Module-level API bound to a process-wide default redirector.

Most hosts need exactly one redirector per process, because ``sys.meta_path``
and ``sys.modules`` are themselves process-wide. These functions forward to
the redirector returned by ``get_redirector()``::

    import msbuild_locator

    instance = msbuild_locator.register_defaults()
    import msbuild  # resolved from instance.toolchain_path
"""

from __future__ import annotations

import logging
from pathlib import Path

from msbuild_locator.discovery.models import MSBuildInstance, QueryOptions
from msbuild_locator.discovery.registry import default_registry
from msbuild_locator.exceptions import InstanceNotFoundError
from msbuild_locator.redirector.hook import ModuleRedirector

logger = logging.getLogger(__name__)

_default_redirector = ModuleRedirector()


def get_redirector() -> ModuleRedirector:
    """Return the process-wide redirector used by the module-level API."""
    return _default_redirector


def query_instances(options: QueryOptions | None = None) -> list[MSBuildInstance]:
    """Return the instances discoverable with *options*.

    Args:
        options: Query options. Defaults to every source available on this
            platform.

    Returns:
        Matching instances, each source's results ordered best-first.
    """
    options = options or QueryOptions()
    return default_registry(options).query(options)


def register_defaults(options: QueryOptions | None = None) -> MSBuildInstance:
    """Register the first instance found with the platform default sources.

    Args:
        options: Supplies the environment and working directory. Its
            discovery types are replaced by the platform defaults.

    Returns:
        The instance that was registered.

    Raises:
        InstanceNotFoundError: If no instance could be discovered.
        AlreadyActiveError: If registration is no longer possible.
    """
    options = options or QueryOptions()
    instances = default_registry(options).query_default(options)
    if not instances:
        raise InstanceNotFoundError(
            "No instances of MSBuild could be detected.\n"
            "Try calling register_instance or register_path to manually register one."
        )
    instance = instances[0]
    logger.info("Registering %s %s", instance.name, instance.version_text)
    register_instance(instance)
    return instance


def register_instance(instance: MSBuildInstance) -> None:
    """Register a discovered instance with the default redirector."""
    _default_redirector.register_instance(instance)


def register_path(path: Path | str) -> None:
    """Register a toolchain directory with the default redirector."""
    _default_redirector.register(path)


def unregister() -> None:
    """Unregister the default redirector.

    Raises:
        NotActiveError: If nothing is registered.
    """
    _default_redirector.unregister()


def is_registered() -> bool:
    return _default_redirector.is_active


def can_register() -> bool:
    return _default_redirector.can_register()
