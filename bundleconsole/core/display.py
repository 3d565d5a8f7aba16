"""Display rows and shared formatting helpers.

Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from bundleconsole.core.interfaces import BUNDLE_NAME, Module

LINE_BREAK = "<br/>"
NONE_TEXT = "None"


@dataclass(frozen=True)
class DisplayRow:
    """A (label, value) pair shown in the bundle details table.

    ``value`` is pre-formatted text and may contain simple markup.
    """

    label: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.label, "value": self.value}


def add_row(rows: List[DisplayRow], label: str, value: Any) -> None:
    """Append a row unless ``value`` is None."""
    if value is None:
        return
    rows.append(DisplayRow(label, str(value)))


def join_lines(lines: Iterable[str]) -> str:
    """Join report lines, or return ``None`` text when there are none."""
    text = LINE_BREAK.join(lines)
    return text if text else NONE_TEXT


def module_descriptor(module: Module) -> str:
    """``symbolic-name (id)``, falling back to the location, then the id."""
    if module.symbolic_name is not None:
        return f"{module.symbolic_name} ({module.module_id})"
    if module.location is not None:
        return f"{module.location} ({module.module_id})"
    return f"({module.module_id})"


def display_name(module: Module) -> str:
    """Human readable module name for lists."""
    name: Optional[str] = module.headers.get(BUNDLE_NAME)
    if name:
        return name
    if module.symbolic_name:
        return module.symbolic_name
    if module.location:
        return module.location
    return f"#{module.module_id}"
