"""Shared fixtures: a small runtime snapshot."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from bundleconsole.core.boot_delegation import BootDelegationMatcher
from bundleconsole.core.console import BundleConsole
from bundleconsole.core.snapshot import SnapshotRegistry


@pytest.fixture
def runtime_data() -> Dict[str, Any]:
    """Five modules: system bundle, two resolved/active, two installed."""
    return {
        "start_level": 1,
        "modules": [
            {
                "id": 0,
                "symbolic_name": "system.bundle",
                "location": "System Bundle",
                "state": "active",
                "headers": {"Bundle-Version": "1.0.0", "Bundle-Name": "System Bundle"},
                "start_level": 0,
            },
            {
                "id": 1,
                "symbolic_name": "com.acme.core",
                "location": "file:/bundles/core.jar",
                "state": "active",
                "last_modified": 1700000000000,
                "start_level": 1,
                "headers": {
                    "Bundle-Version": "1.2.0",
                    "Bundle-Vendor": "Acme",
                    "Bundle-DocURL": "http://acme.example/core",
                },
                "services": [
                    {"service.id": 12, "service.pid": "com.acme.core.pid", "service.vendor": "Acme"},
                ],
            },
            {
                "id": 2,
                "symbolic_name": "com.acme.web",
                "location": "file:/bundles/web-2.0.jar",
                "state": "resolved",
                "headers": {"Bundle-Version": "2.0.0"},
            },
            {
                "id": 3,
                "symbolic_name": "com.acme.web",
                "location": "file:/bundles/web-2.1.jar",
                "state": "installed",
                "headers": {
                    "Bundle-Version": "2.1.0",
                    "Export-Package": "com.acme.web.b,com.acme.web.a;version=2.1",
                    "Import-Package": (
                        'com.acme.api;version="[1.0,2.0)",'
                        "org.missing;resolution:=optional,"
                        "com.acme.web.internal"
                    ),
                },
                "resources": ["com/acme/web/internal"],
            },
            {
                "id": 4,
                "location": "file:/bundles/anonymous.jar",
                "state": "installed",
            },
        ],
        "exports": [
            {"name": "org.osgi.framework", "version": "1.4.0", "exporter": 0, "importers": [1, 2]},
            {"name": "com.acme.util", "version": "1.0.0", "exporter": 1, "importers": [2]},
            {"name": "com.acme.api", "version": "1.2.0", "exporter": 1, "importers": [2]},
        ],
    }


@pytest.fixture
def registry(runtime_data) -> SnapshotRegistry:
    return SnapshotRegistry.from_dict(runtime_data)


@pytest.fixture
def matcher() -> BootDelegationMatcher:
    return BootDelegationMatcher("sun.*,com.acme.util")


@pytest.fixture
def console(registry, matcher) -> BundleConsole:
    return BundleConsole(registry, matcher=matcher)
