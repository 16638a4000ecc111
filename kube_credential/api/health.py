"""Liveness and identity endpoints, shared by both services.

  GET /                service banner
  GET /api/v1/health   liveness probe; 200 means the process can answer
  GET /api/v1/worker   which replica answered, for load-balancing checks

Each app builds its own router so the banner and health payload carry
that service's name.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from kube_credential.api.dependencies import get_worker
from kube_credential.api.schemas import ApiResponse, HealthOut, WorkerInfoOut
from kube_credential.core.time import now_utc_iso
from kube_credential.core.worker import WorkerInfo

SERVICE_VERSION = "1.0.0"


def build_health_router(service_name: str, display_name: str) -> APIRouter:
    router = APIRouter(tags=["health"])

    @router.get("/")
    async def root() -> dict:
        return {
            "service": display_name,
            "version": SERVICE_VERSION,
            "status": "running",
            "timestamp": now_utc_iso(),
        }

    @router.get("/api/v1/health", response_model=ApiResponse[HealthOut])
    async def health(
        worker: Annotated[WorkerInfo, Depends(get_worker)],
    ) -> ApiResponse[HealthOut]:
        return ApiResponse[HealthOut](
            success=True,
            message="Service is healthy",
            data=HealthOut(
                service=service_name,
                status="healthy",
                timestamp=now_utc_iso(),
                worker=WorkerInfoOut.from_domain(worker),
            ),
        )

    @router.get("/api/v1/worker", response_model=ApiResponse[WorkerInfoOut])
    async def worker_info(
        worker: Annotated[WorkerInfo, Depends(get_worker)],
    ) -> ApiResponse[WorkerInfoOut]:
        return ApiResponse[WorkerInfoOut](
            success=True,
            message="Worker information retrieved successfully",
            data=WorkerInfoOut.from_domain(worker),
        )

    return router
