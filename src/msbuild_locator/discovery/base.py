"""Base class for discovery sources.

Defines the ``InstanceSource`` abstract base class that all concrete sources
(developer shell, installer catalog, SDK resolver, legacy environment,
alternate runtime) implement.

Every source is independently fallible. ``discover()`` wraps the subclass
generator so that an I/O, process or parse failure ends that source's
contribution with a logged warning instead of destabilizing the query.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from msbuild_locator.discovery.models import DiscoveryType, MSBuildInstance

logger = logging.getLogger(__name__)


class InstanceSource(ABC):
    """Abstract base class for a single discovery mechanism.

    Subclasses set ``discovery_type`` and implement ``_discover()`` as a
    generator. Each ``discover()`` call re-queries the environment; the
    returned iterator is lazy and not restartable.

    Attributes:
        environ: Environment mapping consulted by the source.
    """

    discovery_type: DiscoveryType

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.environ: Mapping[str, str] = os.environ if environ is None else environ

    @abstractmethod
    def _discover(self) -> Iterator[MSBuildInstance]:
        """Yield instances found by this source."""

    def discover(self) -> Iterator[MSBuildInstance]:
        """Yield instances, absorbing any failure raised by the source.

        Instances yielded before a failure are kept.
        """
        try:
            yield from self._discover()
        except Exception:
            logger.warning(
                "Discovery source %s failed; skipping its remaining results",
                type(self).__name__,
                exc_info=True,
            )

    @contextmanager
    def query_scope(self) -> Iterator[None]:
        """Bracket one registry query.

        Sources whose results are read by other sources may cache them for
        the duration of the scope. The default does nothing.
        """
        yield

    def env(self, name: str) -> str | None:
        """Return a non-blank environment value, or None."""
        value = self.environ.get(name)
        if value is None or not value.strip():
            return None
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.discovery_type.label})"
