"""SQLAlchemy table definitions.

These map to the frozen dataclass domain models in kube_credential/models/.
Repos convert between SQLAlchemy rows and domain dataclasses.

Column types are dialect-neutral so the same tables work on PostgreSQL
and SQLite.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kube_credential.db.engine import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Issuance store ---


class CredentialRow(Base):
    __tablename__ = "credentials"

    # Primary key enforces one issued record per credential id.
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    holder_name: Mapped[str] = mapped_column(Text, nullable=False)
    credential_type: Mapped[str] = mapped_column(String(255), nullable=False)
    issue_date: Mapped[str] = mapped_column(String(64), nullable=False)
    expiry_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    issuer_name: Mapped[str] = mapped_column(Text, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    issued_by: Mapped[str] = mapped_column(String(255), nullable=False)
    timestamp: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


# --- Verification history ---


class VerificationRow(Base):
    __tablename__ = "verifications"
    __table_args__ = (Index("ix_verifications_credential_id", "credential_id"),)

    # Autoincrement id gives a strict append order, even for same-instant rows.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    credential_id: Mapped[str] = mapped_column(String(255), nullable=False)
    is_valid: Mapped[bool] = mapped_column(Boolean, nullable=False)
    verified_by: Mapped[str] = mapped_column(String(255), nullable=False)
    verification_timestamp: Mapped[str] = mapped_column(String(64), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # Snapshot of the authoritative credential the candidate was compared to.
    credential_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
