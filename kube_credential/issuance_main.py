"""Issuance service app.

RUN:  python -m kube_credential.issuance_main     (PORT overrides 3001)
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from kube_credential.api.credentials import router as credentials_router
from kube_credential.app_common import build_app, configure_logging, serve
from kube_credential.core.worker import WorkerInfo
from kube_credential.db.engine import lifespan_db

SERVICE_NAME = "credential-issuance"
DEFAULT_PORT = 3001

# Configure logging before anything else runs.
configure_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    async with lifespan_db():
        yield


def create_app(worker: WorkerInfo | None = None) -> FastAPI:
    return build_app(
        service_name=SERVICE_NAME,
        display_name="Credential Issuance Service",
        worker=worker or WorkerInfo.generate("worker"),
        default_port=DEFAULT_PORT,
        lifespan=lifespan,
        routers=[credentials_router],
    )


app = create_app()


def main() -> None:
    serve(app)


if __name__ == "__main__":
    main()
