"""Exception classes for bundleconsole.

Version: 0.2.0

Each exception carries a machine readable ``code`` and a ``details`` dict
so the API layer can serialize it without knowing the concrete type.
"""

from __future__ import annotations

from typing import Any, Optional


class BundleConsoleError(Exception):
    """Base exception for all bundleconsole errors.

    Attributes:
        message: Human-readable error description
        code: Stable error code used in API responses
        details: Additional context
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable dict."""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(BundleConsoleError):
    """Raised when the configuration file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="CONFIG_ERROR", details=details)
        self.path = path
        if path:
            self.details["path"] = path


class VersionFormatError(BundleConsoleError, ValueError):
    """Raised when a version or version range string is malformed."""

    def __init__(self, message: str, value: str) -> None:
        super().__init__(message, code="INVALID_VERSION", details={"value": value})
        self.value = value


class HeaderParseError(BundleConsoleError, ValueError):
    """Raised when an Import-Package/Export-Package header is malformed.

    Raised when:
    - A clause is empty
    - A parameter appears before any package name
    - A quoted value is not terminated
    - An attribute or directive is repeated within one clause
    """

    def __init__(
        self,
        message: str,
        header: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="INVALID_HEADER", details=details)
        self.header = header
        self.details["header"] = header


class RegistryError(BundleConsoleError):
    """Raised when the module registry cannot be loaded or queried."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, code="REGISTRY_ERROR", details=details)


class ModuleActionError(BundleConsoleError):
    """Raised by a registry when a lifecycle operation fails.

    Attributes:
        module_id: Id of the module the action was applied to
        action: The lifecycle operation (start, stop, uninstall, ...)
    """

    def __init__(
        self,
        message: str,
        module_id: int,
        action: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="ACTION_FAILED", details=details)
        self.module_id = module_id
        self.action = action
        self.details["module_id"] = module_id
        self.details["action"] = action
