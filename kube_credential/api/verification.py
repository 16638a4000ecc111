"""Verification service endpoints.

- POST /api/v1/verify    verify a submitted credential
- GET  /api/v1/history   verification attempts, most recent first

POST /verify answers 200 for every well-formed request, including
"not found", mismatch, and issuance being unreachable; ``success`` and
``data.isValid`` carry the verdict.  Only a malformed credential is a 400.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query

from kube_credential.api.dependencies import get_verification_service
from kube_credential.api.schemas import ApiResponse, VerificationResultOut
from kube_credential.services.validation import validate_credential
from kube_credential.services.verification_service import VerificationService

router = APIRouter(prefix="/api/v1", tags=["verification"])


def _unwrap_candidate(payload: Any) -> Any:
    # Accept both {"credential": {...}} and a bare credential object.
    if isinstance(payload, dict) and payload.get("credential"):
        return payload["credential"]
    return payload


@router.post("/verify", response_model=ApiResponse[VerificationResultOut])
async def verify_credential(
    payload: Annotated[Any, Body()],
    service: Annotated[VerificationService, Depends(get_verification_service)],
) -> ApiResponse[VerificationResultOut]:
    candidate = validate_credential(_unwrap_candidate(payload))
    result = await service.verify(candidate)
    return ApiResponse[VerificationResultOut](
        success=result.is_valid,
        message=result.message,
        data=VerificationResultOut.from_domain(result),
    )


@router.get("/history", response_model=ApiResponse[list[VerificationResultOut]])
async def verification_history(
    service: Annotated[VerificationService, Depends(get_verification_service)],
    credential_id: Annotated[str | None, Query(alias="credentialId")] = None,
) -> ApiResponse[list[VerificationResultOut]]:
    history = await service.history(credential_id or None)
    return ApiResponse[list[VerificationResultOut]](
        success=True,
        message="Verification history retrieved successfully",
        data=[VerificationResultOut.from_domain(r) for r in history],
    )
