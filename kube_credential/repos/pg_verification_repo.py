"""SQL implementation of VerificationRepo (PostgreSQL or SQLite)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kube_credential.core.errors import StoreError
from kube_credential.db.tables import VerificationRow
from kube_credential.models.credential import IssuedCredential, VerificationResult


class PgVerificationRepo:
    """Satisfies the VerificationRepo Protocol using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def record(self, credential_id: str, result: VerificationResult) -> None:
        row = VerificationRow(
            credential_id=credential_id,
            is_valid=result.is_valid,
            verified_by=result.verified_by,
            verification_timestamp=result.verification_timestamp,
            message=result.message,
            credential_data=(
                result.credential.to_dict() if result.credential is not None else None
            ),
        )
        self._session.add(row)
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save verification result: {e}") from e

    async def query(self, credential_id: str | None = None) -> list[VerificationResult]:
        stmt = select(VerificationRow).order_by(VerificationRow.id.desc())
        if credential_id is not None:
            stmt = stmt.where(VerificationRow.credential_id == credential_id)
        try:
            rows = (await self._session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to retrieve verification history: {e}") from e
        return [_row_to_result(r) for r in rows]


def _row_to_result(row: VerificationRow) -> VerificationResult:
    return VerificationResult(
        is_valid=row.is_valid,
        verified_by=row.verified_by,
        verification_timestamp=row.verification_timestamp,
        message=row.message,
        credential=(
            IssuedCredential.from_dict(row.credential_data)
            if row.credential_data is not None
            else None
        ),
    )
