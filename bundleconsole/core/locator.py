"""Locating a module from a request path.

Version: 0.1.0
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from bundleconsole.core.interfaces import Module, ModuleRegistry

logger = logging.getLogger(__name__)

_NUMERIC_ID = re.compile(r"[+-]?[0-9]+")


class ModuleLocator:
    """Resolves ``<id>`` or ``<symbolic-name>[:<version>]`` to a module."""

    def __init__(self, registry: ModuleRegistry) -> None:
        self._registry = registry

    def resolve(self, identifier: Optional[str]) -> Optional[Module]:
        """Return the module named by the last path segment of ``identifier``.

        A numeric segment is looked up by id. Anything else is matched
        against symbolic names, and against the ``Bundle-Version`` header
        (as a plain string) when a ``:version`` suffix is present. The first
        match in registry order wins.

        Returns:
            The module, or None when nothing matches
        """
        if identifier is None:
            return None
        segment = identifier[identifier.rfind("/") + 1:]

        if not _NUMERIC_ID.fullmatch(segment):
            return self._find_by_name(segment)

        module_id = int(segment)
        if module_id < 0:
            return None
        return self._registry.get_module(module_id)

    def _find_by_name(self, segment: str) -> Optional[Module]:
        symbolic_name, sep, version = segment.partition(":")
        wanted_version = version if sep else None

        for module in self._registry.get_modules():
            if symbolic_name != module.symbolic_name:
                continue
            if wanted_version is None or wanted_version == module.version_header:
                return module

        logger.debug("No module matches '%s'", segment)
        return None
