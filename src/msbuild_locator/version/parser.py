"""Strict semantic version parsing and max-reduction.

Grammar accepted by ``parse()``::

    version  := numeric "." numeric "." numeric [ "-" label { "." label } ]
    numeric  := "0" | [1-9][0-9]*
    label    := [0-9A-Za-z-]+

Exactly three numeric components are required. Leading zeros in numeric
components are rejected. Surrounding whitespace is ignored. Build metadata
(``+sha``) is not part of the grammar.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from msbuild_locator.exceptions import VersionParseError
from msbuild_locator.version.semantic import SemanticVersion

_NUMERIC_RE = re.compile(r"0|[1-9][0-9]*")
_LABEL_RE = re.compile(r"[0-9A-Za-z\-]+")


def parse(text: str) -> SemanticVersion:
    """Parse a strict ``major.minor.patch[-labels]`` version string.

    Args:
        text: The version text, e.g. ``"8.0.0-preview.6.23329.7"``.

    Returns:
        The parsed ``SemanticVersion``.

    Raises:
        VersionParseError: If *text* does not follow the grammar.
    """
    if not isinstance(text, str):
        raise VersionParseError(f"Version must be a string, got {type(text).__name__}")

    stripped = text.strip()
    core, has_labels, label_text = stripped.partition("-")

    parts = core.split(".")
    if len(parts) != 3:
        raise VersionParseError(
            f"Invalid version {text!r}: expected exactly three numeric components"
        )
    for part in parts:
        if not _NUMERIC_RE.fullmatch(part):
            raise VersionParseError(
                f"Invalid version {text!r}: bad numeric component {part!r}"
            )

    labels: tuple[str, ...] = ()
    if has_labels:
        labels = tuple(label_text.split("."))
        for label in labels:
            if not _LABEL_RE.fullmatch(label):
                raise VersionParseError(
                    f"Invalid version {text!r}: bad release label {label!r}"
                )

    major, minor, patch = (int(p) for p in parts)
    return SemanticVersion(major, minor, patch, labels, original_text=stripped)


def try_parse(text: str | None) -> SemanticVersion | None:
    """Like ``parse()`` but return None instead of raising."""
    if text is None:
        return None
    try:
        return parse(text)
    except VersionParseError:
        return None


def max_of(texts: Iterable[str]) -> SemanticVersion | None:
    """Return the greatest parsable version among *texts*.

    Unparsable entries are silently skipped, which makes this suitable for
    picking the newest version-named directory out of a listing that may
    contain unrelated folders.

    Returns:
        The greatest version, or None if nothing parsed.
    """
    best: SemanticVersion | None = None
    for text in texts:
        candidate = try_parse(text)
        if candidate is not None and (best is None or candidate > best):
            best = candidate
    return best
