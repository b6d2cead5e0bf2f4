"""msbuild-locator exception hierarchy.

All public exceptions inherit from MSBuildLocatorError, giving callers a single
base class to catch when they want to handle any locator-specific failure
without swallowing unrelated errors.

Only two families ever cross the library boundary: misuse of the redirector
state machine (``RegistrationError`` subclasses) and "nothing found"
(``InstanceNotFoundError``). Probing failures inside discovery sources are
absorbed and logged, never raised.
"""


class MSBuildLocatorError(Exception):
    """Base exception for all msbuild-locator errors."""


class VersionParseError(MSBuildLocatorError, ValueError):
    """Raised when a version string is not a valid semantic version.

    Only ``parse()`` raises this. ``try_parse()``, ``max_of()`` and
    ``SemanticVersion.coerce()`` report failure by returning None.
    """


class InstanceNotFoundError(MSBuildLocatorError):
    """Raised when no MSBuild instance could be discovered.

    Fatal to the calling workflow by convention, not to the library: callers
    can still register an explicit path.
    """


class RegistrationError(MSBuildLocatorError):
    """Base class for misuse of the module redirector state machine."""


class InvalidPathError(RegistrationError, ValueError):
    """Raised when the toolchain path is empty, blank, or not a directory."""


class AlreadyActiveError(RegistrationError):
    """Raised when registering while a registration is active or toolchain
    modules are already loaded into the process."""


class NotActiveError(RegistrationError):
    """Raised when unregistering while no registration is active."""


class AnalysisError(MSBuildLocatorError):
    """Raised when the registration-order analyzer cannot process a file.

    Covers unreadable files and Python sources that fail to parse.
    """
