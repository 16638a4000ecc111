"""Setup shared by the issuance and verification apps.

Both services get the same middleware stack, error envelope, health and
metrics routes; only their domain routers and lifespans differ.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kube_credential.api.errors import install_exception_handlers
from kube_credential.api.health import build_health_router
from kube_credential.api.metrics_endpoint import router as metrics_router
from kube_credential.core.config import SETTINGS
from kube_credential.core.logging import setup_logging
from kube_credential.core.worker import WorkerInfo
from kube_credential.middleware.metrics import MetricsMiddleware
from kube_credential.middleware.request_context import (
    RequestContextMiddleware,
    install_request_context_filter,
)

logger = logging.getLogger(__name__)

Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[Any]]


def configure_logging() -> None:
    setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
    install_request_context_filter()


def build_app(
    *,
    service_name: str,
    display_name: str,
    worker: WorkerInfo,
    default_port: int,
    lifespan: Lifespan,
    routers: Sequence[APIRouter],
) -> FastAPI:
    app = FastAPI(
        title=service_name,
        lifespan=lifespan,
        docs_url="/docs" if SETTINGS.is_dev else None,
        redoc_url="/redoc" if SETTINGS.is_dev else None,
    )
    app.state.worker = worker
    app.state.port = SETTINGS.port or default_port

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(SETTINGS.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )
    # Middleware execution order: last-added runs first (outermost layer).
    # RequestContext (outermost) → Metrics → CORS → route handler
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)

    install_exception_handlers(app)

    app.include_router(metrics_router)
    app.include_router(build_health_router(service_name, display_name))
    for router in routers:
        app.include_router(router)

    logger.info(
        "%s ready  worker=%s env=%s log_level=%s port=%d docs=%s",
        service_name,
        worker.worker_id,
        SETTINGS.app_env,
        SETTINGS.log_level,
        app.state.port,
        "on" if SETTINGS.is_dev else "off",
    )
    return app


def serve(app: FastAPI) -> None:
    """Run ``app`` under uvicorn on the port chosen by build_app."""
    # log_config=None keeps the handlers installed by configure_logging
    uvicorn.run(app, host="0.0.0.0", port=app.state.port, log_config=None)
