# networkcontrol/api/app.py
"""
FastAPI application factory

Wires the factomd client, the roster cache and the NetworkControl service
into one app. Tests pass a prebuilt service and skip the factomd wiring.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from networkcontrol.errors import (
    DecodeError,
    NetworkControlError,
    NetworkError,
    SignatureError,
    ValidationError,
)
from networkcontrol.integrations import FactomdClient, FactomdConfig
from networkcontrol.roster import AuthorityRosterCache
from networkcontrol.service import NetworkControl
from .middleware import RequestIdMiddleware
from .routes import router

logger = logging.getLogger("networkcontrol.api")


def error_status(error: NetworkControlError) -> int:
    """HTTP status for a pipeline error"""
    if isinstance(error, (DecodeError, ValidationError, SignatureError)):
        return 400
    if isinstance(error, NetworkError):
        return 502
    return 500


async def handle_pipeline_error(request: Request, exc: NetworkControlError) -> JSONResponse:
    status_code = error_status(exc)
    logger.warning(f"{request.method} {request.url.path} -> {status_code} {exc.error_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@asynccontextmanager
async def pipeline_lifespan(app: FastAPI):
    """Create the factomd-backed service unless one was injected"""
    client = None
    if app.state.service is None:
        client = FactomdClient(app.state.factomd_config)
        app.state.service = NetworkControl(AuthorityRosterCache(client), client)
        logger.info("NetworkControl service started")
    try:
        yield
    finally:
        if client is not None:
            await client.close()


def create_app(
    service: Optional[NetworkControl] = None,
    factomd_config: Optional[FactomdConfig] = None
) -> FastAPI:
    """Build the app; without a service one is wired to factomd_config (or settings) at startup"""
    app = FastAPI(
        title="Network Control",
        description="Authority set management for factom networks",
        version="1.0.0",
        lifespan=pipeline_lifespan
    )
    app.state.service = service
    app.state.factomd_config = factomd_config

    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(NetworkControlError, handle_pipeline_error)
    app.include_router(router)
    return app
