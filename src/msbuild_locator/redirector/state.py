"""Mutable state behind a ``ModuleRedirector``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType


@dataclass
class RedirectorState:
    """Bookkeeping for one redirector.

    After unregistration the state is kept as a historical record: the cache
    and counters still describe the last registration until the next
    ``reset()``.

    Attributes:
        is_active: True while the finder is installed.
        target_path: Toolchain directory of the current (or last)
            registration.
        resolved: Modules served so far, keyed by module name. Only grows
            during a registration.
        resolved_count: Number of distinct modules loaded from disk.
        expected_count: Number of whitelisted modules; reaching it retires
            the finder.
    """

    is_active: bool = False
    target_path: Path | None = None
    resolved: dict[str, ModuleType] = field(default_factory=dict)
    resolved_count: int = 0
    expected_count: int = 0

    def reset(self, target_path: Path, expected_count: int) -> None:
        """Start a new registration against *target_path*."""
        self.is_active = True
        self.target_path = target_path
        self.resolved = {}
        self.resolved_count = 0
        self.expected_count = expected_count

    def snapshot(self) -> RedirectorState:
        """Return a detached copy for diagnostics."""
        return RedirectorState(
            is_active=self.is_active,
            target_path=self.target_path,
            resolved=dict(self.resolved),
            resolved_count=self.resolved_count,
            expected_count=self.expected_count,
        )
