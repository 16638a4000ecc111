"""Verification protocol.

For one submitted candidate:
  1. fetch the authoritative record from issuance (single attempt)
  2. compare field by field (deep comparison for ``data``)
  3. build a VerificationResult and append it to history, whatever
     the outcome

Issuance being unreachable is an outcome, not an error: the caller gets
an invalid result explaining why, and that result is logged to history
like any other.
"""

from __future__ import annotations

import logging

from kube_credential.core.errors import IssuanceUnavailableError
from kube_credential.core.metrics import VERIFICATIONS
from kube_credential.core.time import now_utc_iso
from kube_credential.core.worker import WorkerInfo
from kube_credential.models.credential import (
    Credential,
    IssuedCredential,
    VerificationResult,
)
from kube_credential.repos.verification_repo import VerificationRepo
from kube_credential.services.comparison import mismatched_fields
from kube_credential.services.issuance_client import CredentialLookup

logger = logging.getLogger(__name__)


class VerificationService:
    def __init__(
        self,
        lookup: CredentialLookup,
        history: VerificationRepo,
        worker: WorkerInfo,
    ) -> None:
        self._lookup = lookup
        self._history = history
        self._worker = worker

    async def verify(self, candidate: Credential) -> VerificationResult:
        worker_id = self._worker.worker_id
        log_extra = {"credential_id": candidate.id, "worker_id": worker_id}

        try:
            issued = await self._lookup.get_by_id(candidate.id)
        except IssuanceUnavailableError as e:
            logger.warning(
                "Issuance lookup failed id=%s: %s", candidate.id, e, extra=log_extra
            )
            outcome = "error"
            result = self._result(
                is_valid=False,
                message=f"Verification error by {worker_id}: {e}",
            )
        else:
            outcome, result = self._judge(candidate, issued)

        VERIFICATIONS.labels(outcome=outcome).inc()
        logger.info(
            "Verified id=%s outcome=%s", candidate.id, outcome, extra=log_extra
        )
        await self._history.record(candidate.id, result)
        return result

    def _judge(
        self, candidate: Credential, issued: IssuedCredential | None
    ) -> tuple[str, VerificationResult]:
        worker_id = self._worker.worker_id
        if issued is None:
            return "not_found", self._result(
                is_valid=False,
                message=(
                    "Credential not found in issuance service. "
                    f"Verification failed by {worker_id}"
                ),
            )

        mismatches = mismatched_fields(candidate, issued)
        if mismatches:
            # The issued record is attached even on mismatch.
            return "mismatch", self._result(
                is_valid=False,
                credential=issued,
                message=(
                    f"Credential data mismatch ({', '.join(mismatches)}). "
                    f"Verification failed by {worker_id}"
                ),
            )

        return "valid", self._result(
            is_valid=True,
            credential=issued,
            message=(
                f"Credential verified successfully by {worker_id}. "
                f"Originally issued by {issued.issued_by} at {issued.timestamp}"
            ),
        )

    def _result(
        self,
        *,
        is_valid: bool,
        message: str,
        credential: IssuedCredential | None = None,
    ) -> VerificationResult:
        return VerificationResult(
            is_valid=is_valid,
            credential=credential,
            verified_by=self._worker.worker_id,
            verification_timestamp=now_utc_iso(),
            message=message,
        )

    async def history(self, credential_id: str | None = None) -> list[VerificationResult]:
        return await self._history.query(credential_id)
