"""FastAPI dependencies that wire repos and services per request.

With DATABASE_URL unset, the module-level in-memory repos below are the
store for the process lifetime.  With it set, each request gets SQL repos
bound to its own session.  The repo dependencies are function-scoped, so
the session commits (or rolls back) before the response is sent and a
failed commit still becomes a 500.

The worker identity and the issuance HTTP client live on ``app.state``,
set by the app factories.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request

from kube_credential.core.config import SETTINGS
from kube_credential.core.worker import WorkerInfo
from kube_credential.db import engine as db_engine
from kube_credential.repos.credential_repo import CredentialRepo, InMemoryCredentialRepo
from kube_credential.repos.pg_credential_repo import PgCredentialRepo
from kube_credential.repos.pg_verification_repo import PgVerificationRepo
from kube_credential.repos.verification_repo import (
    InMemoryVerificationRepo,
    VerificationRepo,
)
from kube_credential.services.issuance_client import (
    CredentialLookup,
    HttpCredentialLookup,
)
from kube_credential.services.issuance_service import IssuanceService
from kube_credential.services.verification_service import VerificationService

# --- Module-level repo singletons (used when no database is configured) ---
credential_repo = InMemoryCredentialRepo()
verification_repo = InMemoryVerificationRepo()


def get_worker(request: Request) -> WorkerInfo:
    return request.app.state.worker


async def get_credential_repo() -> AsyncGenerator[CredentialRepo, None]:
    if db_engine.async_session_factory is None:
        yield credential_repo
        return
    async with db_engine.session_scope() as session:
        yield PgCredentialRepo(session)


async def get_verification_repo() -> AsyncGenerator[VerificationRepo, None]:
    if db_engine.async_session_factory is None:
        yield verification_repo
        return
    async with db_engine.session_scope() as session:
        yield PgVerificationRepo(session)


def get_credential_lookup(request: Request) -> CredentialLookup:
    return HttpCredentialLookup(
        request.app.state.issuance_client,
        timeout_seconds=SETTINGS.issuance_timeout_seconds,
    )


def get_issuance_service(
    repo: Annotated[CredentialRepo, Depends(get_credential_repo, scope="function")],
    worker: Annotated[WorkerInfo, Depends(get_worker)],
) -> IssuanceService:
    return IssuanceService(repo, worker)


def get_verification_service(
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
    history: Annotated[VerificationRepo, Depends(get_verification_repo, scope="function")],
    worker: Annotated[WorkerInfo, Depends(get_worker)],
) -> VerificationService:
    return VerificationService(lookup, history, worker)
