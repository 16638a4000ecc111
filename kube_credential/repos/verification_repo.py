from __future__ import annotations

from typing import Protocol

from kube_credential.models.credential import VerificationResult


class VerificationRepo(Protocol):
    """Append-only log of verification attempts."""

    async def record(self, credential_id: str, result: VerificationResult) -> None: ...

    async def query(
        self, credential_id: str | None = None
    ) -> list[VerificationResult]: ...


class InMemoryVerificationRepo:
    def __init__(self) -> None:
        self._entries: list[tuple[str, VerificationResult]] = []

    async def record(self, credential_id: str, result: VerificationResult) -> None:
        self._entries.append((credential_id, result))

    async def query(self, credential_id: str | None = None) -> list[VerificationResult]:
        return [
            result
            for cid, result in reversed(self._entries)
            if credential_id is None or cid == credential_id
        ]
