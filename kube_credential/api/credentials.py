"""Issuance service endpoints.

- POST /api/v1/credentials        issue (201 new, 200 already issued)
- GET  /api/v1/credentials        list, most recently issued first
- GET  /api/v1/credentials/{id}   fetch one (404 when unknown)

The single-credential GET is what the verification service calls to
resolve the authoritative record.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import JSONResponse

from kube_credential.api.dependencies import get_issuance_service
from kube_credential.api.errors import envelope_response
from kube_credential.api.schemas import ApiResponse, IssuedCredentialOut
from kube_credential.services.issuance_service import IssuanceService
from kube_credential.services.validation import validate_credential

router = APIRouter(prefix="/api/v1/credentials", tags=["credentials"])


@router.post(
    "",
    response_model=ApiResponse[IssuedCredentialOut],
    status_code=status.HTTP_201_CREATED,
)
async def issue_credential(
    payload: Annotated[Any, Body()],
    response: Response,
    service: Annotated[IssuanceService, Depends(get_issuance_service)],
) -> ApiResponse[IssuedCredentialOut]:
    """Issue a credential, or return the existing record for a known id.

    Idempotent by id: repeating the request is safe and never rewrites
    the stored record, so clients may retry freely.
    """
    candidate = validate_credential(payload)
    issued, is_new = await service.issue(candidate)
    if not is_new:
        response.status_code = status.HTTP_200_OK
    return ApiResponse[IssuedCredentialOut](
        success=True,
        message=service.issue_message(is_new),
        data=IssuedCredentialOut.from_domain(issued),
    )


@router.get("", response_model=ApiResponse[list[IssuedCredentialOut]])
async def list_credentials(
    service: Annotated[IssuanceService, Depends(get_issuance_service)],
) -> ApiResponse[list[IssuedCredentialOut]]:
    credentials = await service.get_all()
    return ApiResponse[list[IssuedCredentialOut]](
        success=True,
        message="Credentials retrieved successfully",
        data=[IssuedCredentialOut.from_domain(c) for c in credentials],
    )


@router.get(
    "/{credential_id}",
    response_model=ApiResponse[IssuedCredentialOut],
    responses={404: {"model": ApiResponse[None]}},
)
async def get_credential(
    credential_id: str,
    service: Annotated[IssuanceService, Depends(get_issuance_service)],
) -> ApiResponse[IssuedCredentialOut] | JSONResponse:
    credential = await service.get_by_id(credential_id)
    if credential is None:
        return envelope_response(
            status.HTTP_404_NOT_FOUND,
            message="Credential not found",
            error=f"No credential found with ID: {credential_id}",
        )
    return ApiResponse[IssuedCredentialOut](
        success=True,
        message="Credential retrieved successfully",
        data=IssuedCredentialOut.from_domain(credential),
    )
