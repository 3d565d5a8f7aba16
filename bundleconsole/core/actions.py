"""Lifecycle actions triggered from the console.

Version: 0.1.0

Failures reported by the registry are logged and swallowed: the caller
always renders whatever state the module ended up in.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from bundleconsole.core.exceptions import ModuleActionError
from bundleconsole.core.interfaces import Module, ModuleRegistry, ModuleState

logger = logging.getLogger(__name__)

START = "start"
STOP = "stop"
REFRESH = "refresh"
UNINSTALL = "uninstall"
REFRESH_PACKAGES = "refreshPackages"

SYSTEM_BUNDLE_ID = 0


@dataclass(frozen=True)
class ActionFlags:
    """Which per-bundle actions are currently available."""

    start: bool
    stop: bool
    refresh: bool
    uninstall: bool

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)

    def to_list(self) -> List[Dict[str, Any]]:
        """Action descriptors in display order."""
        return [
            {"enabled": self.start, "name": "Start", "link": START},
            {"enabled": self.stop, "name": "Stop", "link": STOP},
            {"enabled": self.refresh, "name": "Refresh", "link": REFRESH, "title": "Refresh Package Imports"},
            {"enabled": self.uninstall, "name": "Uninstall", "link": UNINSTALL},
        ]


NO_ACTIONS = ActionFlags(start=False, stop=False, refresh=False, uninstall=False)


def action_flags(module: Module) -> ActionFlags:
    """Derive the enabled actions from the module's lifecycle state.

    The system bundle cannot be acted upon at all.
    """
    if module.module_id == SYSTEM_BUNDLE_ID:
        return NO_ACTIONS
    state = module.state
    return ActionFlags(
        start=state in (ModuleState.INSTALLED, ModuleState.RESOLVED),
        stop=state == ModuleState.ACTIVE,
        refresh=True,
        uninstall=state in (ModuleState.INSTALLED, ModuleState.RESOLVED, ModuleState.ACTIVE),
    )


def apply_action(registry: ModuleRegistry, module: Module, action: Optional[str]) -> bool:
    """Run ``action`` on ``module``.

    Returns:
        False when the module is known to be gone afterwards, True otherwise
        (including when the registry refused the action).
    """
    if action == START:
        try:
            registry.start(module)
        except ModuleActionError:
            logger.error("Cannot start module %d", module.module_id, exc_info=True)
    elif action == STOP:
        try:
            registry.stop(module)
        except ModuleActionError:
            logger.error("Cannot stop module %d", module.module_id, exc_info=True)
    elif action == REFRESH:
        registry.refresh_packages([module])
    elif action == UNINSTALL:
        try:
            registry.uninstall(module)
        except ModuleActionError:
            logger.error("Cannot uninstall module %d", module.module_id, exc_info=True)
        else:
            return False
    elif action is not None:
        logger.warning("Unknown action '%s' for module %d", action, module.module_id)
    return True


def refresh_all(registry: ModuleRegistry) -> None:
    logger.info("Refreshing packages of all modules")
    registry.refresh_packages(None)
