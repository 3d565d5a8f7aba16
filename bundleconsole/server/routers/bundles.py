"""Bundle routes.

Version: 0.2.0

Exposes REST API endpoints for:
- The bundle list (/bundles)
- One bundle with its details (/bundles/{id or name[:version]})
- Bundle properties as JSON (/bundles/{id or name[:version]}.json)
- Lifecycle actions (POST /bundles/{...}?action=start|stop|refresh|uninstall)
- Full package refresh (POST /bundles?action=refreshPackages)

Unknown bundles are not an error: the JSON view returns an empty object and
the page view falls back to the full list.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from bundleconsole.core.actions import REFRESH_PACKAGES
from bundleconsole.core.console import BundleConsole
from bundleconsole.server.models import (
    ActionResponse,
    BundleListResponse,
    BundlePropertiesResponse,
)
from bundleconsole.server.routers.auth import log_action, verify_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bundles", tags=["bundles"])

JSON_SUFFIX = ".json"


def get_console(request: Request) -> BundleConsole:
    """Get the BundleConsole instance from app state."""
    console = getattr(request.app.state, "console", None)
    if console is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Module registry not available",
        )
    return console


# =============================================================================
# Routes
# =============================================================================

@router.get(
    "",
    response_model=BundleListResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_token)],
)
async def list_bundles(console: BundleConsole = Depends(get_console)) -> Dict[str, Any]:
    """List all installed bundles with their state and available actions."""
    return console.list_data()


@router.post(
    "",
    response_model=ActionResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_token)],
)
async def refresh_packages(
    action: Optional[str] = Query(None, description="Only 'refreshPackages' is accepted here"),
    console: BundleConsole = Depends(get_console),
) -> Dict[str, Any]:
    """Refresh the package wiring of the whole runtime."""
    if action != REFRESH_PACKAGES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported action '{action}'",
        )
    log_action(action)
    return console.perform_action(None, action) or {}


@router.get("/{path:path}", dependencies=[Depends(verify_token)])
async def get_bundle(path: str, console: BundleConsole = Depends(get_console)) -> Dict[str, Any]:
    """Show one bundle.

    ``<identifier>.json`` returns the bundle's properties; a plain identifier
    returns the list view restricted to that bundle, with details.
    """
    if path.endswith(JSON_SUFFIX):
        module = console.find(path[: -len(JSON_SUFFIX)])
        if module is None:
            return {}
        return BundlePropertiesResponse.model_validate(console.bundle_properties(module)).model_dump()

    module = console.find(path)
    if module is None:
        logger.debug("No bundle for '%s', showing the full list", path)
    return BundleListResponse.model_validate(console.list_data(module)).model_dump(exclude_none=True)


@router.post(
    "/{path:path}",
    response_model=ActionResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_token)],
)
async def bundle_action(
    path: str,
    action: Optional[str] = Query(None, description="start, stop, refresh, uninstall or refreshPackages"),
    console: BundleConsole = Depends(get_console),
) -> Dict[str, Any]:
    """Apply a lifecycle action to one bundle and return its new state."""
    log_action(f"{action or 'none'}", {"bundle": path})
    return console.perform_action(path, action) or {}
