"""
API server using FastAPI.

Version: 0.2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bundleconsole import __version__
from bundleconsole.config import ConsoleConfig
from bundleconsole.core.console import BundleConsole
from bundleconsole.core.exceptions import BundleConsoleError, RegistryError
from bundleconsole.core.interfaces import ModuleRegistry
from bundleconsole.core.logging_utils import apply_logging_config
from bundleconsole.core.snapshot import SnapshotRegistry
from bundleconsole.server.routers import bundles

logger = logging.getLogger(__name__)


def create_app(config: Optional[ConsoleConfig] = None, registry: Optional[ModuleRegistry] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Console configuration (defaults when None)
        registry: Module registry to serve; when None the snapshot named in
            ``framework.snapshot`` is loaded, or an empty registry is used

    Raises:
        RegistryError: If the configured snapshot cannot be loaded
    """
    config = config or ConsoleConfig()

    if registry is None:
        if config.framework.snapshot:
            registry = SnapshotRegistry.from_yaml(config.framework.snapshot)
        else:
            logger.warning("No module registry configured, serving an empty runtime")
            registry = SnapshotRegistry()

    app = FastAPI(
        title="Bundle Console",
        description="Administrative API for the modules of a running framework.",
        version=__version__,
    )
    app.state.config = config
    app.state.console = BundleConsole(registry, boot_delegation=config.framework.boot_delegation)

    app.include_router(bundles.router)

    @app.exception_handler(RegistryError)
    async def registry_exception_handler(request: Request, exc: RegistryError):
        return JSONResponse(
            status_code=503,
            content={"error": {"code": exc.code, "message": exc.message, "details": exc.details}},
        )

    @app.exception_handler(BundleConsoleError)
    async def console_exception_handler(request: Request, exc: BundleConsoleError):
        return JSONResponse(
            status_code=500,
            content={"error": {"code": exc.code, "message": exc.message, "details": exc.details}},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


@dataclass
class ConsoleAPIServer:
    """Runs the console application with uvicorn."""

    config: ConsoleConfig
    registry: Optional[ModuleRegistry] = None

    def start(self) -> None:
        level = apply_logging_config(self.config.logging)
        logger.info("Configured logging at %s", level)

        app = create_app(self.config, self.registry)
        server_config = self.config.server
        logger.info("Starting bundle console on %s:%s", server_config.host, server_config.port)
        uvicorn.run(
            app,
            host=server_config.host,
            port=server_config.port,
            log_level=level.lower(),
        )
