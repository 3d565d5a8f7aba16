"""Tests for bundleconsole.core.snapshot module.

Version: 0.1.0
"""

from __future__ import annotations

import pytest

from bundleconsole.core.exceptions import ModuleActionError, RegistryError
from bundleconsole.core.interfaces import ModuleState
from bundleconsole.core.snapshot import SnapshotModule, SnapshotRegistry
from bundleconsole.core.version import Version


# =============================================================================
# Loading
# =============================================================================

class TestLoading:
    """Tests for building a registry from data."""

    def test_from_dict(self, registry):
        assert [m.module_id for m in registry.get_modules()] == [0, 1, 2, 3, 4]
        assert registry.get_initial_start_level() == 1
        core = registry.get_module(1)
        assert core.version_header == "1.2.0"
        assert core.last_modified == 1700000000000
        assert registry.get_start_level(core) == 1

    def test_exports_are_linked(self, registry):
        export = registry.get_exported_packages(None)[0]
        assert export.name == "org.osgi.framework"
        assert export.version == Version(1, 4, 0)
        assert export.exporting_module.module_id == 0
        assert [m.module_id for m in export.get_importing_modules()] == [1, 2]

    def test_exports_per_module(self, registry):
        names = [e.name for e in registry.get_exported_packages(registry.get_module(1))]
        assert names == ["com.acme.util", "com.acme.api"]

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "runtime.yaml"
        path.write_text(
            "start_level: 4\n"
            "modules:\n"
            "  - id: 1\n"
            "    symbolic_name: org.a\n"
            "    state: Active\n"
            "    headers:\n"
            "      Bundle-Version: 1.0\n"
            "exports:\n"
            "  - name: org.a.api\n"
            "    exporter: 1\n",
            encoding="utf-8",
        )
        registry = SnapshotRegistry.from_yaml(path)
        module = registry.get_module(1)
        assert module.state == ModuleState.ACTIVE
        assert module.version_header == "1.0"
        assert registry.get_exported_packages(module)[0].version == Version()
        assert registry.get_initial_start_level() == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryError) as exc_info:
            SnapshotRegistry.from_yaml(tmp_path / "missing.yaml")
        assert exc_info.value.code == "REGISTRY_ERROR"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "runtime.yaml"
        path.write_text("modules: [\n", encoding="utf-8")
        with pytest.raises(RegistryError):
            SnapshotRegistry.from_yaml(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "runtime.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(RegistryError):
            SnapshotRegistry.from_yaml(path)

    @pytest.mark.parametrize(
        "data",
        [
            {"modules": [{"id": 1}, {"id": 1}]},
            {"modules": [{"symbolic_name": "org.a"}]},
            {"modules": [{"id": 1, "state": "sleeping"}]},
            {"exports": [{"version": "1.0"}]},
            {"exports": [{"name": "org.a", "version": "x.y"}]},
        ],
    )
    def test_bad_entries(self, data):
        with pytest.raises(RegistryError):
            SnapshotRegistry.from_dict(data)


# =============================================================================
# Modules
# =============================================================================

class TestSnapshotModule:
    """Tests for module records."""

    def test_resources(self):
        module = SnapshotModule(3, "org.a", resources=["/org/a/impl/"])
        assert module.get_resource("org/a/impl") == "bundle://3/org/a/impl"
        assert module.get_resource("org/b") is None

    def test_version_header_absent(self):
        assert SnapshotModule(3).version_header is None


# =============================================================================
# Lifecycle
# =============================================================================

class TestLifecycle:
    """Tests for lifecycle operations on the snapshot."""

    def test_start_and_stop(self, registry):
        module = registry.get_module(3)
        registry.start(module)
        assert module.state == ModuleState.ACTIVE
        registry.stop(module)
        assert module.state == ModuleState.RESOLVED

    def test_stop_only_affects_active_modules(self, registry):
        module = registry.get_module(3)
        registry.stop(module)
        assert module.state == ModuleState.INSTALLED

    def test_uninstall_drops_exports_and_wiring(self, registry):
        core = registry.get_module(1)
        registry.uninstall(core)
        assert core.state == ModuleState.UNINSTALLED
        assert registry.get_module(1) is None
        assert [e.name for e in registry.get_exported_packages(None)] == ["org.osgi.framework"]
        importers = registry.get_exported_packages(None)[0].get_importing_modules()
        assert [m.module_id for m in importers] == [2]

    def test_system_bundle_cannot_be_uninstalled(self, registry):
        with pytest.raises(ModuleActionError) as exc_info:
            registry.uninstall(registry.get_module(0))
        assert exc_info.value.action == "uninstall"

    def test_actions_on_unknown_module(self, registry):
        with pytest.raises(ModuleActionError) as exc_info:
            registry.start(SnapshotModule(42))
        assert exc_info.value.module_id == 42
