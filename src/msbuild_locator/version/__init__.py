"""Semantic version parsing and ordering used to rank discovered instances.

Public API::

    from msbuild_locator.version import parse, max_of

    parse("8.0.0") > parse("8.0.0-preview.1")   # True
    max_of(["7.0.7", "dummy", "8.0.100"])        # SemanticVersion 8.0.100
"""

from __future__ import annotations

from msbuild_locator.version.parser import max_of, parse, try_parse
from msbuild_locator.version.semantic import (
    SemanticVersion,
    compare,
    compare_label,
    compare_labels,
)

__all__ = [
    "SemanticVersion",
    "compare",
    "compare_label",
    "compare_labels",
    "max_of",
    "parse",
    "try_parse",
]
