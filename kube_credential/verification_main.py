"""Verification service app.

RUN:  ISSUANCE_SERVICE_URL=http://localhost:3001 \\
      python -m kube_credential.verification_main     (PORT overrides 3000)
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from kube_credential.api.verification import router as verification_router
from kube_credential.app_common import build_app, configure_logging, serve
from kube_credential.core.config import SETTINGS
from kube_credential.core.worker import WorkerInfo
from kube_credential.db.engine import lifespan_db
from kube_credential.services.issuance_client import build_issuance_client

SERVICE_NAME = "credential-verification"
DEFAULT_PORT = 3000

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # The issuance client is built with the app (so it exists even when
    # lifespan never runs, e.g. a bare TestClient); it is closed here.
    async with lifespan_db():
        try:
            yield
        finally:
            await app.state.issuance_client.aclose()


def create_app(
    worker: WorkerInfo | None = None,
    issuance_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    app = build_app(
        service_name=SERVICE_NAME,
        display_name="Credential Verification Service",
        worker=worker or WorkerInfo.generate("verifier"),
        default_port=DEFAULT_PORT,
        lifespan=lifespan,
        routers=[verification_router],
    )
    app.state.issuance_client = issuance_client or build_issuance_client(
        SETTINGS.issuance_service_url,
        timeout_seconds=SETTINGS.issuance_timeout_seconds,
    )
    return app


app = create_app()


def main() -> None:
    serve(app)


if __name__ == "__main__":
    main()
