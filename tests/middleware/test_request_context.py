"""Tests for the request context middleware.

Verifies that every response gets an X-Request-ID header (generated or
echoed from the request) and that log records carry the request and
worker IDs.
"""

from __future__ import annotations

import logging
import uuid

import pytest
from fastapi.testclient import TestClient

from kube_credential.middleware.request_context import (
    _RequestContextFilter,
    request_id_var,
    worker_id_var,
)
from tests.conftest import ISSUER_WORKER


def test_request_id_generated_when_not_provided(client: TestClient) -> None:
    """When no X-Request-ID header is sent, one is generated."""
    resp = client.get("/api/v1/health")
    req_id = resp.headers.get("x-request-id")
    assert req_id is not None
    uuid.UUID(req_id)  # raises ValueError if invalid


def test_request_id_echoed_when_provided(client: TestClient) -> None:
    custom_id = "my-custom-request-id-123"
    resp = client.get("/api/v1/health", headers={"X-Request-ID": custom_id})
    assert resp.headers.get("x-request-id") == custom_id


@pytest.mark.parametrize(
    ("method", "path"),
    [("GET", "/api/v1/credentials/missing"), ("POST", "/api/v1/credentials")],
)
def test_request_id_present_on_error_responses(
    client: TestClient, method: str, path: str
) -> None:
    """404 and 400 envelopes carry the header too."""
    resp = client.request(method, path, json={} if method == "POST" else None)
    assert resp.status_code in (400, 404)
    assert resp.headers.get("x-request-id") is not None


def test_summary_line_logged_with_worker_id(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="kube_credential.middleware.request_context")
    client.get("/api/v1/health", headers={"X-Request-ID": "trace-me"})

    records = [r for r in caplog.records if getattr(r, "path", None) == "/api/v1/health"]
    assert records
    assert records[-1].request_id == "trace-me"  # type: ignore[attr-defined]
    assert records[-1].status_code == 200  # type: ignore[attr-defined]


def test_filter_fills_context_without_overriding_extra() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    explicit = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    explicit.worker_id = "explicit-worker"

    req_token = request_id_var.set("req-1")
    worker_token = worker_id_var.set(ISSUER_WORKER.worker_id)
    try:
        _RequestContextFilter().filter(record)
        _RequestContextFilter().filter(explicit)
    finally:
        request_id_var.reset(req_token)
        worker_id_var.reset(worker_token)

    assert record.request_id == "req-1"  # type: ignore[attr-defined]
    assert record.worker_id == ISSUER_WORKER.worker_id  # type: ignore[attr-defined]
    assert explicit.worker_id == "explicit-worker"  # type: ignore[attr-defined]
