"""Structured error codes for k8s-bundle.

All errors follow the format KBND-{category}{number}:
- KBND-BND*: Bundle loading errors
- KBND-VER*: Version errors
- KBND-CFG*: Configuration errors

Policy violations found by validation rules are NOT raised; they are
returned as diagnostics. These exceptions cover the layers around the rules.
"""

from __future__ import annotations

from typing import Any


class BundleToolError(Exception):
    """Base class for all k8s-bundle errors.

    All errors have:
    - code: Structured error code (e.g., KBND-BND001)
    - message: Human-readable error message
    """

    code: str = "KBND-000"

    # Reserved attribute names that cannot be overwritten by context
    _RESERVED_ATTRS = frozenset({"code", "message", "context", "args"})

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error message.
            **context: Additional context stored as error attributes.
                Reserved keys (code, message, context, args) are ignored.
        """
        self.message = message
        self.context = context
        for key, value in context.items():
            if key not in self._RESERVED_ATTRS:
                setattr(self, key, value)
        super().__init__(f"[{self.code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert error to JSON-serializable dict."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# Bundle Errors (KBND-BND*)
class BundleError(BundleToolError):
    """Base class for bundle loading errors."""

    code = "KBND-BND000"


class BundleNotFoundError(BundleError):
    """Raised when a bundle path does not exist or is not a directory.

    Error code: KBND-BND001
    """

    code = "KBND-BND001"

    def __init__(self, path: str) -> None:
        super().__init__(f"No bundle directory found at {path}", path=path)


class ManifestParseError(BundleError):
    """Raised when a manifest file cannot be parsed as YAML.

    Error code: KBND-BND002
    """

    code = "KBND-BND002"

    def __init__(self, path: str, parse_error: str) -> None:
        super().__init__(
            f"Failed to parse manifest {path}: {parse_error}",
            path=path,
            parse_error=parse_error,
        )


class MissingCsvError(BundleError):
    """Raised when a bundle has no ClusterServiceVersion manifest.

    Error code: KBND-BND003
    """

    code = "KBND-BND003"

    def __init__(self, path: str) -> None:
        super().__init__(f"No ClusterServiceVersion manifest found in {path}", path=path)


# Version Errors (KBND-VER*)
class VersionError(BundleToolError):
    """Base class for version-related errors."""

    code = "KBND-VER000"


class InvalidVersionError(VersionError):
    """Raised when a version string is not a valid semantic version.

    Error code: KBND-VER002

    The ``reason`` attribute carries the parser's failure text alone, which
    is what diagnostics quote back to bundle authors.
    """

    code = "KBND-VER002"

    def __init__(self, version: str, reason: str) -> None:
        super().__init__(
            f"Invalid semantic version '{version}': {reason}",
            version=version,
            reason=reason,
        )


# Configuration Errors (KBND-CFG*)
class ConfigError(BundleToolError):
    """Base class for configuration-related errors."""

    code = "KBND-CFG000"


class ConfigParseError(ConfigError):
    """Raised when a configuration file cannot be parsed.

    Error code: KBND-CFG001
    """

    code = "KBND-CFG001"

    def __init__(self, path: str, parse_error: str) -> None:
        super().__init__(
            f"Failed to parse config file {path}: {parse_error}",
            path=path,
            parse_error=parse_error,
        )


class ConfigInvalidStructureError(ConfigError):
    """Raised when a configuration file has an invalid structure.

    Error code: KBND-CFG002
    """

    code = "KBND-CFG002"

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(
            f"Invalid config structure in {path}: {detail}",
            path=path,
            detail=detail,
        )


class UnknownSettingError(ConfigError):
    """Raised when setting a key that the tool does not know about.

    Error code: KBND-CFG003
    """

    code = "KBND-CFG003"

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown setting '{key}'", key=key)
