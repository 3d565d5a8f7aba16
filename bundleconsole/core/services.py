"""Listing of the services a module has registered.

Version: 0.1.0
"""

from __future__ import annotations

from typing import List, Tuple

from bundleconsole.core.display import LINE_BREAK, DisplayRow
from bundleconsole.core.interfaces import (
    COMPONENT_FACTORY,
    COMPONENT_ID,
    COMPONENT_NAME,
    OBJECTCLASS,
    SERVICE_DESCRIPTION,
    SERVICE_FACTORYPID,
    SERVICE_ID,
    SERVICE_PID,
    SERVICE_VENDOR,
    Module,
    ServiceReference,
)

# (property, label) in display order
SERVICE_PROPERTIES: Tuple[Tuple[str, str], ...] = (
    (OBJECTCLASS, "Types"),
    (SERVICE_PID, "PID"),
    (SERVICE_FACTORYPID, "Factory PID"),
    (COMPONENT_NAME, "Component Name"),
    (COMPONENT_ID, "Component ID"),
    (COMPONENT_FACTORY, "Component Factory"),
    (SERVICE_DESCRIPTION, "Description"),
    (SERVICE_VENDOR, "Vendor"),
)


def format_service(reference: ServiceReference) -> str:
    parts = []
    for key, label in SERVICE_PROPERTIES:
        value = reference.get_property(key)
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        parts.append(f"{label}: {value}{LINE_BREAK}")
    return "".join(parts)


def list_services(module: Module) -> List[DisplayRow]:
    """One ``Service ID <id>`` row per service registered by ``module``."""
    return [
        DisplayRow(f"Service ID {reference.get_property(SERVICE_ID)}", format_service(reference))
        for reference in module.get_registered_services()
    ]
