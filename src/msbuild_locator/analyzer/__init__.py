"""Registration-order analyzer.

Public API::

    from msbuild_locator.analyzer import RegistrationOrderAnalyzer

    findings = RegistrationOrderAnalyzer().analyze_file("app.py")
"""

from __future__ import annotations

from msbuild_locator.analyzer.engine import REGISTRATION_FUNCTIONS, RegistrationOrderAnalyzer
from msbuild_locator.analyzer.models import LintFinding

__all__ = [
    "LintFinding",
    "REGISTRATION_FUNCTIONS",
    "RegistrationOrderAnalyzer",
]
