"""In-memory registry built from a YAML runtime snapshot.

Version: 0.2.0

Lets the console run without a live framework, e.g. against a dump taken
from a production runtime. The snapshot format::

    start_level: 1
    modules:
      - id: 1
        symbolic_name: com.acme.core
        location: file:/bundles/core.jar
        state: active
        last_modified: 1700000000000
        start_level: 1
        headers:
          Bundle-Version: 1.2.0
          Import-Package: org.slf4j;version="[1.7,2)"
        resources: [com/acme/core]
        services:
          - service.id: 12
            objectClass: [com.acme.Api]
    exports:
      - name: com.acme.api
        version: 1.2.0
        exporter: 1
        importers: [2, 3]

Lifecycle operations change the snapshot in place; no class loading or
wiring resolution takes place.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from bundleconsole.core.exceptions import ModuleActionError, RegistryError, VersionFormatError
from bundleconsole.core.interfaces import (
    ExportedPackage,
    Module,
    ModuleRegistry,
    ModuleState,
    ServiceReference,
)
from bundleconsole.core.version import Version

logger = logging.getLogger(__name__)


class SnapshotService(ServiceReference):
    def __init__(self, properties: Dict[str, Any]) -> None:
        self._properties = dict(properties)

    def get_property(self, key: str) -> Any:
        return self._properties.get(key)


class SnapshotModule(Module):
    """A module record of the snapshot."""

    def __init__(
        self,
        module_id: int,
        symbolic_name: Optional[str] = None,
        location: Optional[str] = None,
        state: ModuleState = ModuleState.INSTALLED,
        last_modified: int = 0,
        headers: Optional[Dict[str, str]] = None,
        resources: Optional[Sequence[str]] = None,
        services: Optional[Sequence[ServiceReference]] = None,
        start_level: Optional[int] = None,
    ) -> None:
        self._module_id = module_id
        self._symbolic_name = symbolic_name
        self._location = location
        self._state = state
        self._last_modified = last_modified
        self._headers = dict(headers) if headers is not None else {}
        self._resources = {r.strip("/") for r in resources or []}
        self._services = list(services) if services is not None else []
        self.start_level = start_level

    @property
    def module_id(self) -> int:
        return self._module_id

    @property
    def symbolic_name(self) -> Optional[str]:
        return self._symbolic_name

    @property
    def location(self) -> Optional[str]:
        return self._location

    @property
    def state(self) -> ModuleState:
        return self._state

    @state.setter
    def state(self, value: ModuleState) -> None:
        self._state = value

    @property
    def last_modified(self) -> int:
        return self._last_modified

    @property
    def headers(self) -> Dict[str, str]:
        return self._headers

    def get_registered_services(self) -> List[ServiceReference]:
        # Stopped modules have unregistered their services
        if self._state not in (ModuleState.ACTIVE, ModuleState.STARTING, ModuleState.STOPPING):
            return []
        return list(self._services)

    def get_resource(self, path: str) -> Optional[str]:
        path = path.strip("/")
        if path in self._resources:
            return f"bundle://{self._module_id}/{path}"
        return None

    def __repr__(self) -> str:
        return f"SnapshotModule(id={self._module_id}, name={self._symbolic_name!r}, state={self._state.value})"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapshotModule":
        try:
            module_id = int(data["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise RegistryError("Module entry needs an integer 'id'", details={"entry": data}) from e

        try:
            state = ModuleState(str(data.get("state", "installed")).lower())
        except ValueError as e:
            raise RegistryError(
                f"Unknown state '{data.get('state')}' for module {module_id}",
                details={"module_id": module_id},
            ) from e

        headers = {str(k): str(v) for k, v in (data.get("headers") or {}).items()}
        return cls(
            module_id=module_id,
            symbolic_name=data.get("symbolic_name"),
            location=data.get("location"),
            state=state,
            last_modified=int(data.get("last_modified", 0)),
            headers=headers,
            resources=data.get("resources") or [],
            services=[SnapshotService(s) for s in data.get("services") or []],
            start_level=data.get("start_level"),
        )


class SnapshotExport(ExportedPackage):
    def __init__(
        self,
        name: str,
        version: Version,
        exporter: Optional[Module],
        importers: Optional[Sequence[Module]] = None,
    ) -> None:
        self._name = name
        self._version = version
        self._exporter = exporter
        self._importers = list(importers) if importers is not None else []

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> Version:
        return self._version

    @property
    def exporting_module(self) -> Optional[Module]:
        return self._exporter

    def get_importing_modules(self) -> List[Module]:
        return list(self._importers)

    def drop_importer(self, module_id: int) -> None:
        self._importers = [m for m in self._importers if m.module_id != module_id]


class SnapshotRegistry(ModuleRegistry):
    """A ModuleRegistry over an in-memory snapshot."""

    def __init__(
        self,
        modules: Optional[Sequence[SnapshotModule]] = None,
        exports: Optional[Sequence[SnapshotExport]] = None,
        initial_start_level: Optional[int] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._modules: List[SnapshotModule] = list(modules or [])
        self._exports: List[SnapshotExport] = list(exports or [])
        self._initial_start_level = initial_start_level

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapshotRegistry":
        modules = [SnapshotModule.from_dict(entry) for entry in data.get("modules") or []]
        by_id = {m.module_id: m for m in modules}
        if len(by_id) != len(modules):
            raise RegistryError("Duplicate module ids in snapshot")

        exports = []
        for entry in data.get("exports") or []:
            try:
                name = str(entry["name"])
                version = Version.parse(str(entry.get("version", "0.0.0")))
            except KeyError as e:
                raise RegistryError("Export entry needs a 'name'", details={"entry": entry}) from e
            except VersionFormatError as e:
                raise RegistryError(e.message, details={"entry": entry}) from e

            exporter = by_id.get(entry.get("exporter"))
            importers = [by_id[i] for i in entry.get("importers") or [] if i in by_id]
            exports.append(SnapshotExport(name, version, exporter, importers))

        return cls(modules, exports, data.get("start_level"))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SnapshotRegistry":
        """Load a snapshot file.

        Raises:
            RegistryError: If the file is missing, unreadable or malformed
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RegistryError(f"Invalid YAML syntax: {e}", details={"path": str(path)}) from e
        except OSError as e:
            raise RegistryError(f"Cannot read snapshot file: {e}", details={"path": str(path)}) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise RegistryError("Snapshot must be a YAML mapping", details={"path": str(path)})

        registry = cls.from_dict(data)
        logger.info("Loaded %d modules and %d exports from %s", len(registry._modules), len(registry._exports), path)
        return registry

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_modules(self) -> List[Module]:
        with self._lock:
            return list(self._modules)

    def get_module(self, module_id: int) -> Optional[Module]:
        with self._lock:
            for module in self._modules:
                if module.module_id == module_id:
                    return module
        return None

    def get_exported_packages(self, module: Optional[Module] = None) -> List[ExportedPackage]:
        with self._lock:
            if module is None:
                return list(self._exports)
            return [
                e for e in self._exports
                if e.exporting_module is not None and e.exporting_module.module_id == module.module_id
            ]

    def get_start_level(self, module: Module) -> Optional[int]:
        if isinstance(module, SnapshotModule):
            return module.start_level
        return None

    def get_initial_start_level(self) -> Optional[int]:
        return self._initial_start_level

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _own(self, module: Module, action: str) -> SnapshotModule:
        own = self.get_module(module.module_id)
        if own is None:
            raise ModuleActionError(f"Module {module.module_id} is not installed", module.module_id, action)
        return own  # type: ignore[return-value]

    def start(self, module: Module) -> None:
        with self._lock:
            own = self._own(module, "start")
            if own.state == ModuleState.ACTIVE:
                return
            own.state = ModuleState.ACTIVE
            logger.info("Started module %d", own.module_id)

    def stop(self, module: Module) -> None:
        with self._lock:
            own = self._own(module, "stop")
            if own.state != ModuleState.ACTIVE:
                return
            own.state = ModuleState.RESOLVED
            logger.info("Stopped module %d", own.module_id)

    def uninstall(self, module: Module) -> None:
        with self._lock:
            own = self._own(module, "uninstall")
            if own.module_id == 0:
                raise ModuleActionError("The system bundle cannot be uninstalled", 0, "uninstall")
            self._modules.remove(own)
            self._exports = [
                e for e in self._exports
                if e.exporting_module is None or e.exporting_module.module_id != own.module_id
            ]
            for export in self._exports:
                export.drop_importer(own.module_id)
            own.state = ModuleState.UNINSTALLED
            logger.info("Uninstalled module %d", own.module_id)

    def refresh_packages(self, modules: Optional[Sequence[Module]] = None) -> None:
        # Wiring is fixed by the snapshot; nothing to recompute
        ids = "all" if modules is None else [m.module_id for m in modules]
        logger.info("Refresh packages requested for %s", ids)
