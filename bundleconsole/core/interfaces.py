"""Interface definitions for the module registry seam.

Version: 0.2.0

The console never owns module state. Everything it displays is queried
through the abstract classes below, which an adapter for a concrete module
framework implements.

Key interfaces:
- Module: a deployable unit with a lifecycle state
- ExportedPackage: a package made available by a module
- ServiceReference: a service registered by a module
- ModuleRegistry: the live authority the console queries
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from bundleconsole.core.version import Version


# =============================================================================
# CONSTANTS
# =============================================================================

# Manifest headers
BUNDLE_NAME = "Bundle-Name"
BUNDLE_VERSION = "Bundle-Version"
BUNDLE_DOCURL = "Bundle-DocURL"
BUNDLE_VENDOR = "Bundle-Vendor"
BUNDLE_COPYRIGHT = "Bundle-Copyright"
BUNDLE_DESCRIPTION = "Bundle-Description"
BUNDLE_CLASSPATH = "Bundle-ClassPath"
EXPORT_PACKAGE = "Export-Package"
IMPORT_PACKAGE = "Import-Package"

# Service properties
SERVICE_ID = "service.id"
OBJECTCLASS = "objectClass"
SERVICE_PID = "service.pid"
SERVICE_FACTORYPID = "service.factoryPid"
COMPONENT_NAME = "component.name"
COMPONENT_ID = "component.id"
COMPONENT_FACTORY = "component.factory"
SERVICE_DESCRIPTION = "service.description"
SERVICE_VENDOR = "service.vendor"


# =============================================================================
# ENUMERATIONS
# =============================================================================

class ModuleState(str, Enum):
    """Lifecycle states of a module."""

    INSTALLED = "installed"       # Installed but not wired
    RESOLVED = "resolved"         # Wired, ready to start
    STARTING = "starting"         # Activator running
    ACTIVE = "active"             # Running
    STOPPING = "stopping"         # Deactivator running
    UNINSTALLED = "uninstalled"   # Gone, reference is stale

    @property
    def label(self) -> str:
        return self.value.capitalize()


# =============================================================================
# ABSTRACT BASE CLASSES
# =============================================================================

class ServiceReference(ABC):
    """A service registered by a module."""

    @abstractmethod
    def get_property(self, key: str) -> Any:
        """Return the service property ``key`` or None."""
        ...


class Module(ABC):
    """A module ("bundle") as seen through the registry.

    Implementations are snapshots or live proxies; the console only reads
    them.
    """

    @property
    @abstractmethod
    def module_id(self) -> int:
        """Registry-assigned numeric id, unique per runtime."""
        ...

    @property
    @abstractmethod
    def symbolic_name(self) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def location(self) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def state(self) -> ModuleState:
        ...

    @property
    @abstractmethod
    def last_modified(self) -> int:
        """Last modification time in milliseconds since the epoch."""
        ...

    @property
    @abstractmethod
    def headers(self) -> Dict[str, str]:
        """Raw manifest headers."""
        ...

    @abstractmethod
    def get_registered_services(self) -> Sequence[ServiceReference]:
        ...

    @abstractmethod
    def get_resource(self, path: str) -> Optional[str]:
        """Return a URL for ``path`` inside the module, or None."""
        ...

    @property
    def version_header(self) -> Optional[str]:
        """The declared ``Bundle-Version`` header, verbatim."""
        return self.headers.get(BUNDLE_VERSION)


class ExportedPackage(ABC):
    """A package exported by a module and wired to its importers."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def version(self) -> Version:
        ...

    @property
    @abstractmethod
    def exporting_module(self) -> Optional[Module]:
        ...

    @abstractmethod
    def get_importing_modules(self) -> Sequence[Module]:
        """Modules currently wired to this export (may be empty)."""
        ...


class ModuleRegistry(ABC):
    """The external live authority over module state.

    Lifecycle methods raise ``ModuleActionError`` when the framework refuses
    the transition.
    """

    @abstractmethod
    def get_modules(self) -> List[Module]:
        """All installed modules in the registry's native order."""
        ...

    @abstractmethod
    def get_module(self, module_id: int) -> Optional[Module]:
        ...

    @abstractmethod
    def get_exported_packages(self, module: Optional[Module] = None) -> List[ExportedPackage]:
        """Exports of ``module``, or every export in the runtime when None."""
        ...

    def get_start_level(self, module: Module) -> Optional[int]:
        """Start level of ``module``; None when start levels are unsupported."""
        return None

    def get_initial_start_level(self) -> Optional[int]:
        return None

    @abstractmethod
    def start(self, module: Module) -> None:
        ...

    @abstractmethod
    def stop(self, module: Module) -> None:
        ...

    @abstractmethod
    def uninstall(self, module: Module) -> None:
        ...

    @abstractmethod
    def refresh_packages(self, modules: Optional[Sequence[Module]] = None) -> None:
        """Re-wire ``modules`` (or everything when None)."""
        ...
