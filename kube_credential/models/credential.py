from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

# Recursive JSON value: null | bool | number | string | array | object.
JsonValue = Union[
    None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]
]


@dataclass(frozen=True, slots=True)
class Credential:
    """A claim submitted by a caller for issuance or verification."""

    id: str
    holder_name: str
    credential_type: str
    issue_date: str
    issuer_name: str
    data: dict[str, JsonValue] = field(default_factory=dict)
    expiry_date: str | None = None

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> Credential:
        """Build from the camelCase wire shape (already validated)."""
        return Credential(
            id=payload["id"],
            holder_name=payload["holderName"],
            credential_type=payload["credentialType"],
            issue_date=payload["issueDate"],
            issuer_name=payload["issuerName"],
            data=payload["data"],
            expiry_date=payload.get("expiryDate"),
        )


@dataclass(frozen=True, slots=True)
class IssuedCredential:
    """A credential plus issuance audit metadata.  Never mutated."""

    id: str
    holder_name: str
    credential_type: str
    issue_date: str
    issuer_name: str
    data: dict[str, JsonValue]
    issued_by: str  # worker id
    timestamp: str
    expiry_date: str | None = None

    @staticmethod
    def new(*, credential: Credential, issued_by: str, timestamp: str) -> IssuedCredential:
        return IssuedCredential(
            id=credential.id,
            holder_name=credential.holder_name,
            credential_type=credential.credential_type,
            issue_date=credential.issue_date,
            issuer_name=credential.issuer_name,
            data=credential.data,
            expiry_date=credential.expiry_date,
            issued_by=issued_by,
            timestamp=timestamp,
        )

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> IssuedCredential:
        return IssuedCredential(
            id=payload["id"],
            holder_name=payload["holderName"],
            credential_type=payload["credentialType"],
            issue_date=payload["issueDate"],
            issuer_name=payload["issuerName"],
            data=payload["data"],
            expiry_date=payload.get("expiryDate"),
            issued_by=payload["issuedBy"],
            timestamp=payload["timestamp"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "holderName": self.holder_name,
            "credentialType": self.credential_type,
            "issueDate": self.issue_date,
            "expiryDate": self.expiry_date,
            "issuerName": self.issuer_name,
            "data": self.data,
            "issuedBy": self.issued_by,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of one verification attempt.  Appended to history as-is."""

    is_valid: bool
    verified_by: str
    verification_timestamp: str
    message: str
    credential: IssuedCredential | None = None
