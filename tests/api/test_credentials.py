"""Tests for the issuance endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tests.conftest import ISSUER_WORKER, credential_payload

BASE = "/api/v1/credentials"


def test_issue_returns_201_with_issuance_metadata(client: TestClient) -> None:
    resp = client.post(BASE, json=credential_payload())
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == f"credential issued by {ISSUER_WORKER.worker_id}"
    data = body["data"]
    assert data["id"] == "c1"
    assert data["holderName"] == "Ann"
    assert data["data"] == {"grade": "A"}
    assert data["expiryDate"] is None
    assert data["issuedBy"] == ISSUER_WORKER.worker_id
    assert data["timestamp"].endswith("Z")


def test_reissue_returns_200_and_original_record(client: TestClient) -> None:
    first = client.post(BASE, json=credential_payload()).json()["data"]

    resp = client.post(BASE, json=credential_payload(holderName="Mallory"))
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Credential already issued"
    assert body["data"] == first


def test_missing_fields_rejected_with_all_errors(client: TestClient) -> None:
    resp = client.post(BASE, json={"id": "c1"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Invalid credential data"
    assert "Holder name is required and must be a string" in body["error"]
    assert "Credential data is required and must be an object" in body["error"]
    # Nothing stored
    assert client.get(f"{BASE}/c1").status_code == 404


def test_bad_issue_date_rejected(client: TestClient) -> None:
    resp = client.post(BASE, json=credential_payload(issueDate="01/01/2024"))
    assert resp.status_code == 400
    assert resp.json()["error"] == (
        "Issue date must be in ISO format (YYYY-MM-DDTHH:mm:ss.sssZ)"
    )


@pytest.mark.parametrize("body", [b"not json", b""])
def test_unparseable_body_rejected(client: TestClient, body: bytes) -> None:
    resp = client.post(BASE, content=body, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["message"] == "Invalid credential data"


def test_array_body_rejected(client: TestClient) -> None:
    resp = client.post(BASE, json=[credential_payload()])
    assert resp.status_code == 400
    assert resp.json()["error"] == "Credential payload must be a JSON object"


def test_get_by_id(client: TestClient) -> None:
    issued = client.post(BASE, json=credential_payload()).json()["data"]
    resp = client.get(f"{BASE}/c1")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Credential retrieved successfully"
    assert resp.json()["data"] == issued


def test_get_unknown_id_is_404_envelope(client: TestClient) -> None:
    resp = client.get(f"{BASE}/nope")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "message": "Credential not found",
        "data": None,
        "error": "No credential found with ID: nope",
    }


def test_list_is_most_recent_first(client: TestClient) -> None:
    for cid in ("a", "b", "c"):
        assert client.post(BASE, json=credential_payload(id=cid)).status_code == 201
    # Re-issuing does not move a credential to the front.
    client.post(BASE, json=credential_payload(id="a"))

    resp = client.get(BASE)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Credentials retrieved successfully"
    assert [c["id"] for c in resp.json()["data"]] == ["c", "b", "a"]


def test_list_empty(client: TestClient) -> None:
    assert client.get(BASE).json()["data"] == []


def test_unknown_route_is_enveloped(client: TestClient) -> None:
    resp = client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Endpoint not found"
    assert body["error"] == "Cannot GET /api/v1/nothing-here"


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_number_in_data_rejected(client: TestClient, token: str) -> None:
    # Built by hand: httpx refuses to serialize these tokens.
    body = (
        '{"id": "nan1", "holderName": "Ann", "credentialType": "certificate",'
        ' "issueDate": "2024-01-01T00:00:00.000Z", "issuerName": "Acme",'
        f' "data": {{"score": {token}}}}}'
    )
    resp = client.post(
        BASE, content=body.encode(), headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Credential data must contain only JSON values"
    assert client.get(f"{BASE}/nan1").status_code == 404
