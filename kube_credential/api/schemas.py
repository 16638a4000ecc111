"""Wire schemas shared by both services.

Field names are snake_case in Python and camelCase on the wire
(``holder_name`` <-> ``holderName``) via the alias generator.  FastAPI
serializes response models by alias, so handlers never deal with the
camelCase spelling directly.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from kube_credential.core.worker import WorkerInfo
from kube_credential.models.credential import IssuedCredential, VerificationResult

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IssuedCredentialOut(CamelModel):
    id: str
    holder_name: str
    credential_type: str
    issue_date: str
    expiry_date: str | None = None
    issuer_name: str
    data: dict[str, Any]
    issued_by: str
    timestamp: str

    @staticmethod
    def from_domain(credential: IssuedCredential) -> IssuedCredentialOut:
        return IssuedCredentialOut(
            id=credential.id,
            holder_name=credential.holder_name,
            credential_type=credential.credential_type,
            issue_date=credential.issue_date,
            expiry_date=credential.expiry_date,
            issuer_name=credential.issuer_name,
            data=credential.data,
            issued_by=credential.issued_by,
            timestamp=credential.timestamp,
        )


class VerificationResultOut(CamelModel):
    is_valid: bool
    credential: IssuedCredentialOut | None = None
    verified_by: str
    verification_timestamp: str
    message: str

    @staticmethod
    def from_domain(result: VerificationResult) -> VerificationResultOut:
        return VerificationResultOut(
            is_valid=result.is_valid,
            credential=(
                IssuedCredentialOut.from_domain(result.credential)
                if result.credential is not None
                else None
            ),
            verified_by=result.verified_by,
            verification_timestamp=result.verification_timestamp,
            message=result.message,
        )


class WorkerInfoOut(CamelModel):
    worker_id: str
    hostname: str
    timestamp: str

    @staticmethod
    def from_domain(worker: WorkerInfo) -> WorkerInfoOut:
        return WorkerInfoOut(
            worker_id=worker.worker_id,
            hostname=worker.hostname,
            timestamp=worker.started_at,
        )


class HealthOut(CamelModel):
    service: str
    status: str
    timestamp: str
    worker: WorkerInfoOut


class ApiResponse(CamelModel, Generic[T]):
    """Envelope every service endpoint answers with."""

    success: bool
    message: str
    data: T | None = None
    error: str | None = None
