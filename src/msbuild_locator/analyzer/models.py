"""Data models for the registration-order analyzer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LintFinding:
    """A toolchain import that executes before the locator registers.

    Attributes:
        filename: File the import was found in.
        line: 1-based line of the import statement.
        column: 0-based column of the import statement.
        module: The toolchain module being imported.
        message: Human-readable description of the problem.
    """

    filename: str
    line: int
    column: int
    module: str
    message: str

    def format(self) -> str:
        """Render as ``file:line:col: message``."""
        return f"{self.filename}:{self.line}:{self.column}: {self.message}"
