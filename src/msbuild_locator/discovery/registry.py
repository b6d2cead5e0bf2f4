"""Instance registry aggregating every discovery source.

The ``InstanceRegistry`` keeps an ordered list of ``InstanceSource`` objects
and runs the ones a query asks for. The functional ``default_registry()``
factory pre-registers the built-in sources wired to a ``QueryOptions``.

Query Algorithm
---------------
``query(options)``:

1. If ``ALTERNATE_RUNTIME`` is requested and the host runs on Mono, only the
   alternate-runtime sources run. Nothing else can be loaded into Mono.
2. Otherwise every source whose flag is both requested and available on the
   platform runs, in registration order.
3. Outputs are concatenated without a global re-sort; each source already
   orders its own results best-first.
4. The result is filtered by the requested flags.

Source failures are absorbed by ``InstanceSource.discover()``, so a query
never raises.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from contextlib import ExitStack

from msbuild_locator.discovery.alternate_runtime import AlternateRuntimeSource
from msbuild_locator.discovery.base import InstanceSource
from msbuild_locator.discovery.developer_shell import DeveloperShellSource
from msbuild_locator.discovery.installer_catalog import InstallerCatalog, InstallerCatalogSource
from msbuild_locator.discovery.legacy_environment import LegacyEnvironmentSource
from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance, QueryOptions
from msbuild_locator.discovery.platform_info import HostRuntime, current_platform, host_runtime
from msbuild_locator.discovery.sdk_resolver import SdkResolverSource

logger = logging.getLogger(__name__)


class InstanceRegistry:
    """Registry of discovery sources.

    Args:
        sources: Sources to register, in query order.
        platform_name: Platform whose available discovery types gate the
            query. Defaults to the current platform.
        runtime: Host runtime used to decide the Mono shortcut. Detected
            from the query environment when None.

    Attributes:
        sources: Ordered list of registered sources.
    """

    def __init__(
        self,
        sources: Iterable[InstanceSource] = (),
        platform_name: str | None = None,
        runtime: HostRuntime | None = None,
    ) -> None:
        self.sources: list[InstanceSource] = list(sources)
        self.platform_name = platform_name or current_platform()
        self.runtime = runtime

    def register(self, source: InstanceSource) -> None:
        """Append a source; sources are queried in registration order."""
        self.sources.append(source)

    def _host_runtime(self, options: QueryOptions) -> HostRuntime:
        if self.runtime is None:
            self.runtime = host_runtime(options.environ, self.platform_name)
        return self.runtime

    def query(self, options: QueryOptions | None = None) -> list[MSBuildInstance]:
        """Return the instances matching *options*.

        Args:
            options: Query options. Defaults to every available source.

        Returns:
            Matching instances in source order. Empty when nothing matched.
        """
        options = options or QueryOptions()
        requested = options.discovery_types

        if DiscoveryType.ALTERNATE_RUNTIME in requested and self._host_runtime(options).is_alternate:
            alternate = [
                s for s in self.sources if s.discovery_type == DiscoveryType.ALTERNATE_RUNTIME
            ]
            return self._run(alternate)

        enabled = requested & DiscoveryType.available(self.platform_name)
        selected = [s for s in self.sources if s.discovery_type & enabled]
        return [i for i in self._run(selected) if i.discovery_type & requested]

    def _run(self, sources: Iterable[InstanceSource]) -> list[MSBuildInstance]:
        found: list[MSBuildInstance] = []
        # Every source is scoped, not just the selected ones: a selected
        # source may read an unselected one (legacy reads the catalog).
        with ExitStack() as stack:
            for source in self.sources:
                stack.enter_context(source.query_scope())
            for source in sources:
                results = list(source.discover())
                logger.debug("%r found %d instance(s)", source, len(results))
                found.extend(results)
        return found

    def query_default(self, options: QueryOptions | None = None) -> list[MSBuildInstance]:
        """Query with the platform's default discovery types.

        Windows uses the developer shell and installer catalog; elsewhere the
        SDK resolver and alternate runtime are used.
        """
        options = options or QueryOptions()
        defaults = DiscoveryType.platform_default(self.platform_name)
        return self.query(dataclasses.replace(options, discovery_types=defaults))


def default_registry(
    options: QueryOptions | None = None,
    platform_name: str | None = None,
    catalog: InstallerCatalog | None = None,
) -> InstanceRegistry:
    """Create an InstanceRegistry pre-loaded with the built-in sources.

    The default registry includes, in order:
    1. ``DeveloperShellSource``
    2. ``LegacyEnvironmentSource`` (fed by the installer catalog)
    3. ``InstallerCatalogSource``
    4. ``SdkResolverSource``
    5. ``AlternateRuntimeSource``

    Args:
        options: Supplies the environment, working directory and runtime
            policy every source is wired to.
        platform_name: Overrides platform detection.
        catalog: Installer catalog shared by the legacy environment and
            installer catalog sources. Defaults to vswhere.

    Returns:
        A registry with all five built-in sources registered.
    """
    options = options or QueryOptions()
    environ = options.environ
    platform_name = platform_name or current_platform()
    runtime = host_runtime(environ, platform_name)

    catalog_source = InstallerCatalogSource(catalog, environ=environ)
    registry = InstanceRegistry(platform_name=platform_name, runtime=runtime)
    registry.register(DeveloperShellSource(environ))
    registry.register(LegacyEnvironmentSource(
        environ,
        catalog_instances=lambda: list(catalog_source.discover()),
    ))
    registry.register(catalog_source)
    registry.register(SdkResolverSource(
        environ,
        working_directory=options.working_directory,
        allow_all_runtime_versions=bool(options.allow_all_runtime_versions),
        platform_name=platform_name,
    ))
    registry.register(AlternateRuntimeSource(environ, runtime=runtime, platform_name=platform_name))
    return registry
