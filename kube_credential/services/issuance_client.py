"""Client side of the verification -> issuance service boundary.

Verification never reads the issuance database directly; it asks the
issuance service over HTTP.  The contract:

  - one attempt per lookup, no automatic retries (callers may resubmit)
  - a hard deadline on the whole call, not just per socket operation
  - HTTP 404 is an ordinary "not found" and returns None
  - anything else that goes wrong (timeout, refused connection, 5xx,
    garbage body) raises IssuanceUnavailableError

Tests substitute any object with a matching ``get_by_id`` coroutine.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Protocol
from urllib.parse import quote

import httpx

from kube_credential.core.errors import IssuanceUnavailableError
from kube_credential.core.metrics import ISSUANCE_LOOKUP_DURATION
from kube_credential.middleware.request_context import request_id_var
from kube_credential.models.credential import IssuedCredential

logger = logging.getLogger(__name__)

CREDENTIALS_PATH = "/api/v1/credentials"


class CredentialLookup(Protocol):
    async def get_by_id(self, credential_id: str) -> IssuedCredential | None: ...


class HttpCredentialLookup:
    """Fetch issued credentials from the issuance service over HTTP."""

    def __init__(self, client: httpx.AsyncClient, *, timeout_seconds: float) -> None:
        self._client = client
        self._timeout = timeout_seconds

    async def get_by_id(self, credential_id: str) -> IssuedCredential | None:
        path = f"{CREDENTIALS_PATH}/{quote(credential_id, safe='')}"
        headers = {"Accept": "application/json"}
        request_id = request_id_var.get()
        if request_id != "-":
            headers["X-Request-ID"] = request_id
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.get(path, headers=headers),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise IssuanceUnavailableError(
                f"Issuance service timed out after {self._timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            raise IssuanceUnavailableError(
                f"Failed to connect to issuance service: {e}"
            ) from e
        finally:
            ISSUANCE_LOOKUP_DURATION.observe(time.monotonic() - start)

        if response.status_code == 404:
            return None
        if response.is_error:
            logger.warning(
                "Issuance service answered %d for id=%s",
                response.status_code,
                credential_id,
                extra={"credential_id": credential_id},
            )
            raise IssuanceUnavailableError(
                f"Issuance service error: {response.status_code} - "
                f"{response.reason_phrase}"
            )

        try:
            body = response.json()
            if not isinstance(body, dict) or not body.get("success") or not body.get("data"):
                return None
            return IssuedCredential.from_dict(body["data"])
        except (ValueError, KeyError, TypeError) as e:
            raise IssuanceUnavailableError(
                f"Issuance service returned an unreadable response: {e}"
            ) from e


def build_issuance_client(base_url: str, *, timeout_seconds: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout_seconds),
    )
