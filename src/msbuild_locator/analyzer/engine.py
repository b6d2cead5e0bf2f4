"""Static check that toolchain imports run after registration.

The redirector only serves imports that happen after ``register_*`` was
called. An ``import msbuild`` that executes first either fails or binds a
different copy of the toolchain, and afterwards ``can_register()`` is False
for the rest of the process. This analyzer finds such imports without running
the code.

Rules
-----
A *scope* is the module body or one function body. Class bodies belong to
their enclosing scope, nested functions form their own. Within a scope,
imports and registration calls are ordered by source position.

1. **Module scope.** If the file contains a registration call anywhere, a
   module-level toolchain import is flagged unless a module-level
   registration call precedes it. Module-level imports run at import time,
   before any function gets the chance to register.
2. **Function scope.** In a function that itself calls a registration
   function, toolchain imports placed before the first call are flagged.

Files that never register are not checked: they are presumably imported by
code that registers first.
"""

from __future__ import annotations

import ast
import logging
from pathlib import Path

from msbuild_locator.analyzer.models import LintFinding
from msbuild_locator.exceptions import AnalysisError
from msbuild_locator.toolchain import DEFAULT_LAYOUT, ToolchainLayout

logger = logging.getLogger(__name__)

REGISTRATION_FUNCTIONS = frozenset({"register_defaults", "register_instance", "register_path"})

_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)


def _callee_name(node: ast.Call) -> str | None:
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def is_registration_call(node: ast.AST) -> bool:
    """Return True if *node* calls one of the registration functions."""
    return isinstance(node, ast.Call) and _callee_name(node) in REGISTRATION_FUNCTIONS


def _scope_events(body: list[ast.stmt]) -> list[ast.AST]:
    """Collect imports and registration calls of one scope, in source order."""
    events: list[ast.AST] = []
    stack: list[ast.AST] = list(body)
    while stack:
        node = stack.pop()
        if isinstance(node, _FUNCTION_NODES):
            continue
        if isinstance(node, (ast.Import, ast.ImportFrom)) or is_registration_call(node):
            events.append(node)
        stack.extend(ast.iter_child_nodes(node))
    events.sort(key=lambda n: (n.lineno, n.col_offset))
    return events


class RegistrationOrderAnalyzer:
    """Finds toolchain imports that would execute before registration.

    Usage::

        analyzer = RegistrationOrderAnalyzer()
        for finding in analyzer.analyze_file(Path("app.py")):
            print(finding.format())
    """

    def __init__(self, layout: ToolchainLayout = DEFAULT_LAYOUT) -> None:
        self.layout = layout

    def toolchain_modules_imported(self, node: ast.AST) -> list[str]:
        """Return the toolchain modules an import statement brings in."""
        if isinstance(node, ast.Import):
            names = [alias.name for alias in node.names]
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            names = [node.module]
        else:
            return []
        return [
            name for name in names
            if self.layout.is_toolchain_module(name.split(".")[0])
        ]

    def analyze_source(self, source: str, filename: str = "<string>") -> list[LintFinding]:
        """Analyze Python source text.

        Raises:
            AnalysisError: If *source* is not valid Python.
        """
        try:
            tree = ast.parse(source, filename=filename)
        except SyntaxError as exc:
            raise AnalysisError(f"{filename}: cannot parse: {exc.msg} (line {exc.lineno})") from exc

        findings: list[LintFinding] = []
        if any(is_registration_call(node) for node in ast.walk(tree)):
            findings.extend(self._check_scope(
                tree.body, filename,
                "imported at module level before the toolchain is registered",
            ))

        for node in ast.walk(tree):
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                findings.extend(self._check_scope(
                    node.body, filename,
                    f"imported in {node.name}() before the registration call",
                    require_registration=True,
                ))

        findings.sort(key=lambda f: (f.line, f.column))
        logger.debug("%s: %d finding(s)", filename, len(findings))
        return findings

    def analyze_file(self, path: Path | str) -> list[LintFinding]:
        """Analyze a Python file.

        Raises:
            AnalysisError: If the file cannot be read or parsed.
        """
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise AnalysisError(f"{path}: cannot read: {exc}") from exc
        return self.analyze_source(source, str(path))

    def _check_scope(
        self,
        body: list[ast.stmt],
        filename: str,
        reason: str,
        require_registration: bool = False,
    ) -> list[LintFinding]:
        events = _scope_events(body)
        if require_registration and not any(is_registration_call(e) for e in events):
            return []

        findings: list[LintFinding] = []
        registered = False
        for event in events:
            if is_registration_call(event):
                registered = True
                continue
            if registered:
                continue
            for module in self.toolchain_modules_imported(event):
                findings.append(LintFinding(
                    filename=filename,
                    line=event.lineno,
                    column=event.col_offset,
                    module=module,
                    message=(
                        f"Toolchain module '{module}' is {reason}; "
                        "the import must run after register_defaults, "
                        "register_instance or register_path"
                    ),
                ))
        return findings
