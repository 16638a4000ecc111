"""Issuance authority: records each credential id exactly once."""

from __future__ import annotations

import logging

from kube_credential.core.metrics import CREDENTIALS_ISSUED
from kube_credential.core.time import now_utc_iso
from kube_credential.core.worker import WorkerInfo
from kube_credential.models.credential import Credential, IssuedCredential
from kube_credential.repos.credential_repo import CredentialRepo

logger = logging.getLogger(__name__)

ALREADY_ISSUED_MESSAGE = "Credential already issued"


class IssuanceService:
    def __init__(self, repo: CredentialRepo, worker: WorkerInfo) -> None:
        self._repo = repo
        self._worker = worker

    async def issue(self, candidate: Credential) -> tuple[IssuedCredential, bool]:
        """Issue ``candidate`` unless its id is already on record.

        Returns (record, is_new).  A repeat request, including the losing
        side of two concurrent first-time requests, gets the stored record
        back untouched with is_new=False.
        """
        existing = await self._repo.get_by_id(candidate.id)
        if existing is not None:
            CREDENTIALS_ISSUED.labels(outcome="existing").inc()
            logger.info(
                "Credential already issued id=%s",
                candidate.id,
                extra={"credential_id": candidate.id},
            )
            return existing, False

        issued = IssuedCredential.new(
            credential=candidate,
            issued_by=self._worker.worker_id,
            timestamp=now_utc_iso(),
        )
        stored, is_new = await self._repo.add_if_absent(issued)
        CREDENTIALS_ISSUED.labels(outcome="new" if is_new else "existing").inc()
        if is_new:
            logger.info(
                "Issued credential id=%s type=%s",
                stored.id,
                stored.credential_type,
                extra={"credential_id": stored.id, "worker_id": self._worker.worker_id},
            )
        else:
            logger.info(
                "Concurrent issuance lost the race id=%s",
                candidate.id,
                extra={"credential_id": candidate.id},
            )
        return stored, is_new

    def issue_message(self, is_new: bool) -> str:
        if is_new:
            return f"credential issued by {self._worker.worker_id}"
        return ALREADY_ISSUED_MESSAGE

    async def get_by_id(self, credential_id: str) -> IssuedCredential | None:
        return await self._repo.get_by_id(credential_id)

    async def get_all(self) -> list[IssuedCredential]:
        return await self._repo.list_recent_first()
