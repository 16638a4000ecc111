"""Exception handlers that keep every error inside the response envelope.

  CredentialValidationError, malformed body -> 400
  HTTPException (404 route, 405, ...)       -> same status
  StoreError                                -> 500, generic message
  anything else                             -> 500, generic message

Details of server-side failures go to the log, never to the client.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kube_credential.api.schemas import ApiResponse
from kube_credential.core.errors import CredentialValidationError, StoreError

logger = logging.getLogger(__name__)

INVALID_CREDENTIAL_MESSAGE = "Invalid credential data"


def envelope_response(
    status_code: int, *, message: str, error: str | None = None
) -> JSONResponse:
    body = ApiResponse[None](success=False, message=message, error=error)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(by_alias=True)
    )


async def _credential_validation_handler(
    _request: Request, exc: CredentialValidationError
) -> JSONResponse:
    return envelope_response(
        status.HTTP_400_BAD_REQUEST,
        message=INVALID_CREDENTIAL_MESSAGE,
        error=", ".join(exc.errors),
    )


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Only reachable for bodies that are not JSON at all; field checks
    # happen in services.validation.
    problems = [str(err.get("msg", "invalid request")) for err in exc.errors()]
    return envelope_response(
        status.HTTP_400_BAD_REQUEST,
        message=INVALID_CREDENTIAL_MESSAGE,
        error=", ".join(problems) or "Request body must be JSON",
    )


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return envelope_response(
            exc.status_code,
            message="Endpoint not found",
            error=f"Cannot {request.method} {request.url.path}",
        )
    return envelope_response(exc.status_code, message=str(exc.detail))


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return envelope_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
        error="Storage failure",
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return envelope_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
        error="Something went wrong",
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CredentialValidationError, _credential_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StoreError, _store_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)
