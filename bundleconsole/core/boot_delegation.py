"""Boot delegation matching.

Version: 0.1.1

Packages named by the framework's boot delegation property are loaded from
the parent class loader, so whatever a module exports or imports for them is
overridden. The console flags such packages in the dependency report.

The matching rules follow the framework's own class loading policy.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# Always delegated, whatever the configuration says
IMPLICIT_BOOT_DELEGATION = "java.*"

_TOKEN_SEPARATORS = re.compile(r"[ ,]+")


@dataclass(frozen=True)
class BootDelegationRule:
    """A configured package prefix.

    For wildcard entries the trailing ``*`` has been stripped and the rest
    (usually ending in ``.``) kept verbatim.
    """

    prefix: str
    wildcard: bool

    def matches(self, package_name: str) -> bool:
        if not self.wildcard:
            return self.prefix == package_name
        # "foo." must also match "foo": the second check compares the first
        # len(package_name) characters of the prefix.
        return (
            package_name.startswith(self.prefix)
            or (len(self.prefix) >= len(package_name) and self.prefix[:len(package_name)] == package_name)
        )


def parse_boot_delegation(value: Optional[str]) -> Tuple[BootDelegationRule, ...]:
    """Build the rule table from a boot delegation property value."""
    value = IMPLICIT_BOOT_DELEGATION if value is None else f"{value},{IMPLICIT_BOOT_DELEGATION}"

    rules = []
    for token in _TOKEN_SEPARATORS.split(value):
        if not token:
            continue
        if token.endswith("*"):
            rules.append(BootDelegationRule(token[:-1], True))
        else:
            rules.append(BootDelegationRule(token, False))
    return tuple(rules)


class BootDelegationMatcher:
    """Answers whether a package is subject to boot delegation.

    The rule table is an immutable tuple, replaced as a whole by
    ``configure``.
    """

    def __init__(self, value: Optional[str] = None) -> None:
        self._rules: Tuple[BootDelegationRule, ...] = ()
        self.configure(value)

    def configure(self, value: Optional[str]) -> None:
        self._rules = parse_boot_delegation(value)
        logger.debug("Boot delegation rules: %s", [r.prefix + ("*" if r.wildcard else "") for r in self._rules])

    @property
    def rules(self) -> Tuple[BootDelegationRule, ...]:
        return self._rules

    def is_delegated(self, package_name: str) -> bool:
        # The default package is never delegated
        if not package_name:
            return False
        return any(rule.matches(package_name) for rule in self._rules)
