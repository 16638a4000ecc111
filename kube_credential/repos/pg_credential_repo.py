"""SQL implementation of CredentialRepo (PostgreSQL or SQLite)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kube_credential.core.errors import StoreError
from kube_credential.db.tables import CredentialRow
from kube_credential.models.credential import IssuedCredential

# Dialects that support INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class PgCredentialRepo:
    """Satisfies the CredentialRepo Protocol using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, credential_id: str) -> IssuedCredential | None:
        stmt = select(CredentialRow).where(CredentialRow.id == credential_id)
        try:
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to retrieve credential: {e}") from e
        if row is None:
            return None
        return _row_to_credential(row)

    async def list_recent_first(self) -> list[IssuedCredential]:
        stmt = select(CredentialRow).order_by(
            CredentialRow.created_at.desc(), CredentialRow.id.desc()
        )
        try:
            rows = (await self._session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to retrieve credentials: {e}") from e
        return [_row_to_credential(r) for r in rows]

    async def add_if_absent(
        self, credential: IssuedCredential
    ) -> tuple[IssuedCredential, bool]:
        dialect = self._session.bind.dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise StoreError(f"Unsupported database dialect: {dialect}")

        stmt = (
            insert(CredentialRow)
            .values(
                id=credential.id,
                holder_name=credential.holder_name,
                credential_type=credential.credential_type,
                issue_date=credential.issue_date,
                expiry_date=credential.expiry_date,
                issuer_name=credential.issuer_name,
                data=credential.data,
                issued_by=credential.issued_by,
                timestamp=credential.timestamp,
            )
            .on_conflict_do_nothing(index_elements=[CredentialRow.id])
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to issue credential: {e}") from e

        if result.rowcount == 1:
            return credential, True

        # Lost the race (or a plain re-issue): the stored row wins.
        existing = await self.get_by_id(credential.id)
        if existing is None:
            raise StoreError(
                f"Credential {credential.id!r} conflicted on insert but is missing"
            )
        return existing, False


def _row_to_credential(row: CredentialRow) -> IssuedCredential:
    return IssuedCredential(
        id=row.id,
        holder_name=row.holder_name,
        credential_type=row.credential_type,
        issue_date=row.issue_date,
        expiry_date=row.expiry_date,
        issuer_name=row.issuer_name,
        data=row.data,
        issued_by=row.issued_by,
        timestamp=row.timestamp,
    )
