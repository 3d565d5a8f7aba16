"""Export/import reporting for a single module.

Version: 0.3.0

Two sources feed the report:

- resolved modules are described from the registry wiring (what the module
  actually exports and which exports it is wired to);
- installed modules have no wiring yet, so their ``Export-Package`` and
  ``Import-Package`` headers are parsed and each import is matched against
  the exports currently available in the runtime.

Both paths produce the same line formats. Packages subject to boot delegation
are flagged with a ``!!`` marker because the parent class loader overrides
them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from bundleconsole.core.boot_delegation import BootDelegationMatcher
from bundleconsole.core.display import (
    LINE_BREAK,
    DisplayRow,
    add_row,
    join_lines,
    module_descriptor,
)
from bundleconsole.core.exceptions import HeaderParseError
from bundleconsole.core.headers import ImportDescriptor, parse_exports, parse_imports
from bundleconsole.core.interfaces import (
    EXPORT_PACKAGE,
    IMPORT_PACKAGE,
    ExportedPackage,
    Module,
    ModuleRegistry,
    ModuleState,
)
from bundleconsole.core.version import Version

logger = logging.getLogger(__name__)

WARNING_MARKER = "!! "
OVERWRITTEN_SUFFIX = " -- Overwritten by Boot Delegation"
UNRESOLVED_SUFFIX = " -- Cannot be resolved"
OPTIONAL_SUFFIX = " but is not required"
UNRESOLVED_OVERWRITTEN_SUFFIX = " and overwritten by Boot Delegation"

EXPORTED_PACKAGES = "Exported Packages"
IMPORTED_PACKAGES = "Imported Packages"
IMPORTING_BUNDLES = "Importing Bundles"


@dataclass
class DependencyReport:
    """The dependency part of a bundle's details.

    Each field is display text, or None when the row is not shown.
    """

    exports: Optional[str] = None
    imports: Optional[str] = None
    importers: Optional[str] = None

    def rows(self) -> List[DisplayRow]:
        rows: List[DisplayRow] = []
        add_row(rows, EXPORTED_PACKAGES, self.exports)
        add_row(rows, IMPORTED_PACKAGES, self.imports)
        add_row(rows, IMPORTING_BUNDLES, self.importers)
        return rows


def _importer_key(module: Module) -> str:
    if module.symbolic_name is not None:
        return module.symbolic_name
    if module.location is not None:
        return module.location
    return str(module.module_id)


class DependencyReporter:
    """Builds export/import reports against a registry snapshot."""

    def __init__(self, registry: ModuleRegistry, matcher: BootDelegationMatcher) -> None:
        self._registry = registry
        self._matcher = matcher

    # -------------------------------------------------------------------------
    # Line formatting
    # -------------------------------------------------------------------------

    def format_export(self, name: str, version: Version) -> str:
        line = f"{name},version={version}"
        if self._matcher.is_delegated(name):
            return f"{WARNING_MARKER}{line}{OVERWRITTEN_SUFFIX}"
        return line

    def format_import(
        self,
        name: str,
        version: Version,
        optional: bool,
        export: Optional[ExportedPackage],
    ) -> str:
        """Format an import wired to ``export``, or unresolved when None."""
        boot_delegated = self._matcher.is_delegated(name)
        line = f"{name},version={version}"

        if export is not None:
            exporter = export.exporting_module
            if exporter is not None:
                line += f" from {module_descriptor(exporter)}"
            if boot_delegated:
                line += OVERWRITTEN_SUFFIX
        else:
            line += UNRESOLVED_SUFFIX
            if optional:
                line += OPTIONAL_SUFFIX
            if boot_delegated:
                line += UNRESOLVED_OVERWRITTEN_SUFFIX

        if boot_delegated or export is None:
            line = WARNING_MARKER + line
        return line

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def report(self, module: Module) -> DependencyReport:
        """Report on ``module``, choosing the source by its state."""
        if module.state == ModuleState.INSTALLED:
            return self.report_unresolved(module)
        return self.report_resolved(module)

    def report_resolved(self, module: Module) -> DependencyReport:
        """Describe a wired module from the registry's package wiring."""
        report = DependencyReport()
        importers: Dict[str, Module] = {}

        lines = []
        for export in sorted(self._registry.get_exported_packages(module), key=lambda p: p.name):
            lines.append(self.format_export(export.name, export.version))
            for importer in export.get_importing_modules():
                importers[_importer_key(importer)] = importer
        report.exports = join_lines(lines)

        # No exports in the runtime at all: the imports row is left out
        all_exports = self._registry.get_exported_packages(None)
        if all_exports:
            wired = [
                export
                for export in all_exports
                if any(m.module_id == module.module_id for m in export.get_importing_modules())
            ]
            wired.sort(key=lambda p: p.name)
            report.imports = join_lines(
                self.format_import(export.name, export.version, False, export) for export in wired
            )

        if importers:
            report.importers = LINE_BREAK.join(
                module_descriptor(importers[key]) for key in sorted(importers)
            )
        return report

    def report_unresolved(self, module: Module) -> DependencyReport:
        """Describe an installed module from its raw manifest headers."""
        report = DependencyReport()
        headers = module.headers

        raw_exports = headers.get(EXPORT_PACKAGE)
        if raw_exports is not None:
            try:
                declared = parse_exports(raw_exports)
            except HeaderParseError as e:
                logger.warning("Ignoring %s of module %d: %s", EXPORT_PACKAGE, module.module_id, e.message)
            else:
                declared.sort(key=lambda d: d.name)
                report.exports = join_lines(self.format_export(d.name, d.version) for d in declared)

        raw_imports = headers.get(IMPORT_PACKAGE)
        if raw_imports is not None:
            try:
                imports = parse_imports(raw_imports)
            except HeaderParseError as e:
                logger.warning("Ignoring %s of module %d: %s", IMPORT_PACKAGE, module.module_id, e.message)
            else:
                if imports:
                    report.imports = self._format_declared_imports(module, imports)

        return report

    def _format_declared_imports(self, module: Module, declared: List[ImportDescriptor]) -> str:
        imports: Dict[str, ImportDescriptor] = {}
        for descriptor in declared:
            imports[descriptor.name] = descriptor

        candidates: Dict[str, ExportedPackage] = {}
        for export in self._registry.get_exported_packages(None):
            descriptor = imports.get(export.name)
            if descriptor is not None and descriptor.is_satisfied_by(export.name, export.version):
                candidates[export.name] = export

        lines = []
        for name in sorted(imports):
            descriptor = imports[name]
            export = candidates.get(name)
            # A module that contains the package itself does not need it wired
            if export is None and module.get_resource(name.replace(".", "/")) is not None:
                continue
            lines.append(self.format_import(name, descriptor.version, descriptor.optional, export))
        return join_lines(lines)
