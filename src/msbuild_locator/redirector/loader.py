"""Default module loader used by the redirector."""

from __future__ import annotations

import importlib.util
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType

logger = logging.getLogger(__name__)

ModuleLoader = Callable[[str, Path], ModuleType]


def load_module_from_path(name: str, path: Path) -> ModuleType:
    """Load and execute the module at *path* under the name *name*.

    The module is placed in ``sys.modules`` before it executes so that
    circular imports between toolchain modules see the partially initialized
    module, as a regular import would. The entry is removed again if
    execution fails.

    Raises:
        ImportError: If no module spec can be created for *path*.
        Exception: Whatever the module body raises while executing.
    """
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not create module spec for {path}", name=name, path=str(path))

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    logger.debug("Loaded %s from %s", name, path)
    return module
