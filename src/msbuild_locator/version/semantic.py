"""SemanticVersion value type and its total order.

Ordering Rules
--------------
Versions compare on ``major``, then ``minor``, then ``patch``. When the
numeric triple is equal, release labels decide:

- A final release (no labels) is newer than any pre-release of the same
  triple: ``8.0.0 > 8.0.0-preview.1``.
- Label sequences compare element by element. Two all-digit labels compare
  as unbounded integers (``preview.10 > preview.9``); two textual labels
  compare ordinally; a numeric label sorts before a textual one.
- When one label sequence is a strict prefix of the other, the shorter one
  is newer: fewer qualifiers means closer to the release.

The last rule is the same as treating "end of labels" as greater than any
label, which is also why the final-release rule holds. The result is a strict
total order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

_DIGITS_RE = re.compile(r"[0-9]+")

# System.Version shapes (2 to 4 numeric parts) with an optional label suffix.
_COERCE_RE = re.compile(
    r"^(?P<major>[0-9]+)\.(?P<minor>[0-9]+)"
    r"(?:\.(?P<patch>[0-9]+))?(?:\.(?P<revision>[0-9]+))?"
    r"(?:-(?P<labels>[0-9A-Za-z.\-]+))?$"
)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_label(left: str, right: str) -> int:
    """Compare two individual release labels, returning -1, 0 or 1."""
    left_numeric = _DIGITS_RE.fullmatch(left) is not None
    right_numeric = _DIGITS_RE.fullmatch(right) is not None
    if left_numeric and right_numeric:
        return _sign(int(left) - int(right))
    if left_numeric:
        return -1
    if right_numeric:
        return 1
    return (left > right) - (left < right)


def compare_labels(left: tuple[str, ...], right: tuple[str, ...]) -> int:
    """Compare two release-label sequences, returning -1, 0 or 1.

    An empty sequence (final release) is greater than any non-empty one.
    """
    for a, b in zip(left, right):
        result = compare_label(a, b)
        if result:
            return result
    if len(left) == len(right):
        return 0
    # Shorter sequence wins, which also covers "final beats pre-release".
    return 1 if len(left) < len(right) else -1


def compare(left: SemanticVersion, right: SemanticVersion) -> int:
    """Totally order two versions, returning -1, 0 or 1."""
    for a, b in (
        (left.major, right.major),
        (left.minor, right.minor),
        (left.patch, right.patch),
    ):
        if a != b:
            return -1 if a < b else 1
    return compare_labels(left.release_labels, right.release_labels)


@total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """An immutable ``major.minor.patch[-labels]`` version.

    Build instances with ``parse()``/``try_parse()`` from
    ``msbuild_locator.version`` for strict input, or ``SemanticVersion.coerce()``
    for the looser shapes installers and environment variables report.

    Equality, hashing and ordering follow ``compare()``; ``original_text`` is
    carried for display only.

    Attributes:
        major: Major version X (X.y.z).
        minor: Minor version Y (x.Y.z).
        patch: Patch version Z (x.y.Z).
        release_labels: Pre-release labels; empty for a final release.
        original_text: The text the version was parsed from.
    """

    major: int
    minor: int
    patch: int
    release_labels: tuple[str, ...] = ()
    original_text: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError("Version components must be non-negative")
        object.__setattr__(self, "release_labels", tuple(self.release_labels))
        if not self.original_text:
            object.__setattr__(self, "original_text", str(self))

    @classmethod
    def coerce(cls, text: str | None) -> SemanticVersion | None:
        """Leniently parse an installer- or environment-reported version.

        Accepts ``a.b``, ``a.b.c`` and ``a.b.c.d`` with an optional
        ``-labels`` suffix; missing components become 0 and a fourth
        component is dropped. Leading zeros are tolerated.

        Returns:
            The version, or None if *text* does not look like a version.
        """
        if text is None:
            return None
        stripped = text.strip()
        m = _COERCE_RE.match(stripped)
        if not m:
            return None
        labels: tuple[str, ...] = ()
        if m.group("labels"):
            labels = tuple(m.group("labels").split("."))
            if any(not label for label in labels):
                return None
        return cls(
            major=int(m.group("major")),
            minor=int(m.group("minor")),
            patch=int(m.group("patch") or 0),
            release_labels=labels,
            original_text=stripped,
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.release_labels)

    @property
    def release(self) -> str:
        """The full pre-release label, e.g. ``preview.6.23329.7``."""
        return ".".join(self.release_labels)

    def _normalized_labels(self) -> tuple[object, ...]:
        return tuple(
            int(label) if _DIGITS_RE.fullmatch(label) else label
            for label in self.release_labels
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) == 0

    def __lt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) < 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self._normalized_labels()))

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.release_labels:
            return f"{core}-{self.release}"
        return core
