from __future__ import annotations

from typing import Protocol

from kube_credential.models.credential import IssuedCredential


class CredentialRepo(Protocol):
    async def get_by_id(self, credential_id: str) -> IssuedCredential | None: ...
    async def list_recent_first(self) -> list[IssuedCredential]: ...

    async def add_if_absent(
        self, credential: IssuedCredential
    ) -> tuple[IssuedCredential, bool]:
        """Insert unless the id exists.  Returns (stored record, inserted)."""
        ...


class InMemoryCredentialRepo:
    def __init__(self) -> None:
        # dicts keep insertion order, which doubles as creation order
        self._by_id: dict[str, IssuedCredential] = {}

    async def get_by_id(self, credential_id: str) -> IssuedCredential | None:
        return self._by_id.get(credential_id)

    async def list_recent_first(self) -> list[IssuedCredential]:
        return list(reversed(self._by_id.values()))

    async def add_if_absent(
        self, credential: IssuedCredential
    ) -> tuple[IssuedCredential, bool]:
        # No await between the check and the set: atomic on the event loop.
        existing = self._by_id.get(credential.id)
        if existing is not None:
            return existing, False
        self._by_id[credential.id] = credential
        return credential, True
