from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kube_credential import issuance_main, verification_main
from kube_credential.api import dependencies
from kube_credential.core.errors import IssuanceUnavailableError
from kube_credential.core.worker import WorkerInfo
from kube_credential.models.credential import IssuedCredential

ISSUER_WORKER = WorkerInfo(
    worker_id="worker-test-host-100-abc123",
    hostname="test-host",
    started_at="2024-01-01T00:00:00.000Z",
)
VERIFIER_WORKER = WorkerInfo(
    worker_id="verifier-test-host-200-def456",
    hostname="test-host",
    started_at="2024-01-01T00:00:00.000Z",
)


def credential_payload(**overrides: object) -> dict:
    """The canonical example credential in wire (camelCase) form."""
    payload: dict = {
        "id": "c1",
        "holderName": "Ann",
        "credentialType": "certificate",
        "issueDate": "2024-01-01T00:00:00.000Z",
        "issuerName": "Acme",
        "data": {"grade": "A"},
    }
    payload.update(overrides)
    return payload


def issued_credential(**overrides: object) -> IssuedCredential:
    payload = credential_payload()
    payload.update(
        issuedBy="worker-issuance-service-123",
        timestamp="2024-01-01T00:00:01.000Z",
    )
    payload.update(overrides)
    return IssuedCredential.from_dict(payload)


class FakeLookup:
    """In-process stand-in for the issuance service."""

    def __init__(self, *credentials: IssuedCredential) -> None:
        self.records = {c.id: c for c in credentials}
        self.calls: list[str] = []
        self.fail_with: str | None = None

    async def get_by_id(self, credential_id: str) -> IssuedCredential | None:
        self.calls.append(credential_id)
        if self.fail_with is not None:
            raise IssuanceUnavailableError(self.fail_with)
        return self.records.get(credential_id)


@pytest.fixture(autouse=True)
def reset_repos() -> None:
    """Clear the in-memory stores between tests."""
    dependencies.credential_repo._by_id.clear()
    dependencies.verification_repo._entries.clear()


@pytest.fixture
def issuance_app() -> FastAPI:
    return issuance_main.create_app(worker=ISSUER_WORKER)


@pytest.fixture
def client(issuance_app: FastAPI) -> TestClient:
    return TestClient(issuance_app)


@pytest.fixture
def fake_lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture
def verification_app(fake_lookup: FakeLookup) -> FastAPI:
    app = verification_main.create_app(worker=VERIFIER_WORKER)
    app.dependency_overrides[dependencies.get_credential_lookup] = lambda: fake_lookup
    return app


@pytest.fixture
def verifier(verification_app: FastAPI) -> TestClient:
    return TestClient(verification_app)
