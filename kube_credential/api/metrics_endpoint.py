"""Prometheus scrape endpoint.

Returns plain text in Prometheus exposition format, e.g.:

  # TYPE verifications_total counter
  verifications_total{outcome="valid"} 212.0
  verifications_total{outcome="not_found"} 9.0

Both services mount this router; each process reports its own registry.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
