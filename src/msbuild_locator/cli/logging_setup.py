"""Logging configuration for the ``msbuild-locator`` command.

The library itself never configures handlers; only the CLI does. Levels are
resolved in precedence order:

    ``--verbose`` flag  >  MSBUILD_LOCATOR_LOG_LEVEL env var  >  WARNING

Log records go to stderr through ``rich.logging.RichHandler`` so they never
interleave with machine-readable stdout (``list --json``).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from rich.console import Console
from rich.logging import RichHandler

from msbuild_locator.toolchain import ENV_LOG_LEVEL

DEFAULT_LEVEL = "WARNING"


def _parse_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def resolve_level(verbose: bool, environ: Mapping[str, str] | None = None) -> int:
    """Return the numeric log level for this invocation."""
    if verbose:
        return logging.DEBUG
    env = os.environ if environ is None else environ
    return _parse_level(env.get(ENV_LOG_LEVEL, DEFAULT_LEVEL) or DEFAULT_LEVEL)


def setup_logging(level: int) -> None:
    """Route all ``msbuild_locator`` loggers to a rich stderr handler."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=level <= logging.DEBUG,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
