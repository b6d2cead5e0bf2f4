"""Helper for running the external tools discovery shells out to.

vswhere, ``dotnet --list-sdks`` and ``mono --version=number`` are all probes:
a tool that is missing, crashes, exits non-zero or hangs simply means its
source has nothing to report. ``run_tool`` therefore returns None instead of
raising, and bounds every call with a timeout.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

# Timeout for every probe process (seconds).
DEFAULT_TIMEOUT: float = 30.0


def run_tool(
    args: Sequence[str | Path],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    env: dict[str, str] | None = None,
    cwd: str | Path | None = None,
) -> str | None:
    """Run an external tool and return its standard output.

    Args:
        args: Executable followed by its arguments.
        timeout: Seconds to wait before giving up on the process.
        env: Environment for the child; inherits the parent's when None.
        cwd: Working directory for the child.

    Returns:
        Decoded stdout, or None if the tool could not be started, timed
        out, or exited with a non-zero status.
    """
    argv = [str(a) for a in args]
    try:
        completed = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            env=env,
            cwd=cwd,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Timed out after %ss: %s", timeout, argv[0])
        return None
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Could not run %s: %s", argv[0], exc)
        return None

    if completed.returncode != 0:
        logger.debug("%s exited with status %d", argv[0], completed.returncode)
        return None
    return completed.stdout
