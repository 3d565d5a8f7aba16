"""Core of the bundles console: registry seam, reporting and actions."""

from bundleconsole.core.boot_delegation import BootDelegationMatcher
from bundleconsole.core.console import BundleConsole, BundleSummary
from bundleconsole.core.dependencies import DependencyReport, DependencyReporter
from bundleconsole.core.display import DisplayRow
from bundleconsole.core.interfaces import (
    ExportedPackage,
    Module,
    ModuleRegistry,
    ModuleState,
    ServiceReference,
)
from bundleconsole.core.locator import ModuleLocator
from bundleconsole.core.version import Version, VersionRange

__all__ = [
    "BootDelegationMatcher",
    "BundleConsole",
    "BundleSummary",
    "DependencyReport",
    "DependencyReporter",
    "DisplayRow",
    "ExportedPackage",
    "Module",
    "ModuleLocator",
    "ModuleRegistry",
    "ModuleState",
    "ServiceReference",
    "Version",
    "VersionRange",
]
