"""The bundles console: lists, details and actions over a module registry.

Version: 0.3.0

``BundleConsole`` is what the HTTP layer and the CLI talk to. It owns no
module state; every call queries the registry it was built with, so two
calls may observe different snapshots if modules change in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from bundleconsole.core.actions import (
    SYSTEM_BUNDLE_ID,
    REFRESH_PACKAGES,
    action_flags,
    apply_action,
    refresh_all,
)
from bundleconsole.core.boot_delegation import BootDelegationMatcher
from bundleconsole.core.dependencies import DependencyReporter
from bundleconsole.core.display import DisplayRow, add_row, display_name
from bundleconsole.core.interfaces import (
    BUNDLE_CLASSPATH,
    BUNDLE_COPYRIGHT,
    BUNDLE_DESCRIPTION,
    BUNDLE_DOCURL,
    BUNDLE_VENDOR,
    BUNDLE_VERSION,
    Module,
    ModuleRegistry,
    ModuleState,
)
from bundleconsole.core.locator import ModuleLocator
from bundleconsole.core.services import list_services

logger = logging.getLogger(__name__)

NUM_ACTIONS = 4
NO_BUNDLES_MESSAGE = "No Bundles installed currently"


def state_label(state: ModuleState) -> str:
    return state.label


def format_timestamp(millis: int) -> str:
    return datetime.fromtimestamp(millis / 1000).astimezone().strftime("%a %b %d %H:%M:%S %Z %Y")


def _count_text(label: str, count: int) -> str:
    suffix = "" if count == 1 else "s"
    return f"{label} : {count} Bundle{suffix}"


@dataclass(frozen=True)
class BundleSummary:
    """Module counts shown above the bundle list."""

    total: int
    active: int
    resolved: int
    installed: int

    @classmethod
    def of(cls, modules: Sequence[Module]) -> "BundleSummary":
        states = [m.state for m in modules]
        return cls(
            total=len(states),
            active=states.count(ModuleState.ACTIVE),
            resolved=states.count(ModuleState.RESOLVED),
            installed=states.count(ModuleState.INSTALLED),
        )

    def lines(self) -> List[str]:
        return [
            _count_text("Total", self.total),
            _count_text("Active", self.active),
            _count_text("Resolved", self.resolved),
            _count_text("Installed", self.installed),
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "active": self.active,
            "resolved": self.resolved,
            "installed": self.installed,
            "text": self.lines(),
        }


class BundleConsole:
    """Read-and-act view over a module registry."""

    def __init__(
        self,
        registry: ModuleRegistry,
        boot_delegation: Optional[str] = None,
        matcher: Optional[BootDelegationMatcher] = None,
    ) -> None:
        self.registry = registry
        self.matcher = matcher if matcher is not None else BootDelegationMatcher(boot_delegation)
        self.locator = ModuleLocator(registry)
        self.reporter = DependencyReporter(registry, self.matcher)

    def find(self, identifier: Optional[str]) -> Optional[Module]:
        return self.locator.resolve(identifier)

    def sorted_modules(self) -> List[Module]:
        return sorted(self.registry.get_modules(), key=lambda m: display_name(m).lower())

    # -------------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------------

    def details(self, module: Module) -> List[DisplayRow]:
        """All detail rows of ``module``; rows without a value are left out."""
        headers = module.headers
        rows: List[DisplayRow] = []

        add_row(rows, "Symbolic Name", module.symbolic_name)
        add_row(rows, "Version", headers.get(BUNDLE_VERSION))
        add_row(rows, "Location", module.location)
        add_row(rows, "Last Modification", format_timestamp(module.last_modified))

        doc_url = headers.get(BUNDLE_DOCURL)
        if doc_url is not None:
            add_row(rows, "Bundle Documentation", f'<a href="{doc_url}" target="_blank">{doc_url}</a>')

        add_row(rows, "Vendor", headers.get(BUNDLE_VENDOR))
        add_row(rows, "Copyright", headers.get(BUNDLE_COPYRIGHT))
        add_row(rows, "Description", headers.get(BUNDLE_DESCRIPTION))
        add_row(rows, "Start Level", self.registry.get_start_level(module))
        add_row(rows, "Bundle Classpath", headers.get(BUNDLE_CLASSPATH))

        rows.extend(self.reporter.report(module).rows())
        rows.extend(list_services(module))
        return rows

    def bundle_info(self, module: Module, details: bool = False) -> Dict[str, Any]:
        flags = action_flags(module)
        info: Dict[str, Any] = {
            "id": module.module_id,
            "name": display_name(module),
            "state": state_label(module.state),
            "actions": [False] * NUM_ACTIONS if module.module_id == SYSTEM_BUNDLE_ID else flags.to_list(),
        }
        if details:
            info["props"] = [row.to_dict() for row in self.details(module)]
        return info

    def bundle_properties(self, module: Module) -> Dict[str, Any]:
        """The ``.json`` view of one bundle."""
        return {
            "bundleId": module.module_id,
            "props": [row.to_dict() for row in self.details(module)],
        }

    def list_data(self, module: Optional[Module] = None) -> Dict[str, Any]:
        """The bundle list, or only ``module`` with its details."""
        modules = [module] if module is not None else self.sorted_modules()
        data: Dict[str, Any] = {
            "startLevel": self.registry.get_initial_start_level(),
            "numActions": NUM_ACTIONS,
            "status": BundleSummary.of(modules).to_dict(),
        }
        if modules:
            data["data"] = [self.bundle_info(m, details=module is not None) for m in modules]
        else:
            data["error"] = NO_BUNDLES_MESSAGE
        return data

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def perform_action(self, identifier: Optional[str], action: Optional[str]) -> Optional[Dict[str, Any]]:
        """Apply ``action`` to the module named by ``identifier``.

        Returns:
            The refreshed bundle info, ``{"bundleId": id}`` when the module is
            gone, ``{"reload": True}`` after a full package refresh, or None
            when the module does not exist.
        """
        if action == REFRESH_PACKAGES:
            refresh_all(self.registry)
            return {"reload": True}

        module = self.find(identifier)
        if module is None:
            return None

        module_id = module.module_id
        logger.info("Action '%s' on module %d", action, module_id)
        if apply_action(self.registry, module, action):
            current = self.registry.get_module(module_id)
            if current is not None:
                return self.bundle_info(current, details=True)
        return {"bundleId": module_id}
