from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import ISSUER_WORKER, VERIFIER_WORKER


def test_health_reports_service_and_worker(client: TestClient) -> None:
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Service is healthy"
    data = body["data"]
    assert data["service"] == "credential-issuance"
    assert data["status"] == "healthy"
    assert data["worker"]["workerId"] == ISSUER_WORKER.worker_id


def test_verifier_health_names_its_service(verifier: TestClient) -> None:
    data = verifier.get("/api/v1/health").json()["data"]
    assert data["service"] == "credential-verification"
    assert data["worker"]["workerId"] == VERIFIER_WORKER.worker_id


def test_worker_endpoint(client: TestClient) -> None:
    resp = client.get("/api/v1/worker")
    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "workerId": ISSUER_WORKER.worker_id,
        "hostname": "test-host",
        "timestamp": "2024-01-01T00:00:00.000Z",
    }


def test_root_banner(client: TestClient) -> None:
    data = client.get("/").json()
    assert data["service"] == "Credential Issuance Service"
    assert data["version"] == "1.0.0"
    assert data["status"] == "running"
