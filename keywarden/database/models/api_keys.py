"""API Key model."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from keywarden.api.core.constants import ISSUED_KEY_PREFIX
from .base import Base


class ApiKeyStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    REVOKED = "revoked"


class ApiKey(Base):
    __tablename__ = "api_keys"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[str] = mapped_column(String(128), nullable=False)
    label: Mapped[str] = mapped_column(String(256), nullable=False)
    key_hash: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), default=ApiKeyStatus.ACTIVE.value, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    paused_by: Mapped[str | None] = mapped_column(String(256), nullable=True)
    paused_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    resumed_by: Mapped[str | None] = mapped_column(String(256), nullable=True)
    resumed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    revoked_by: Mapped[str | None] = mapped_column(String(256), nullable=True)
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (Index("ix_api_keys_tenant_status", "tenant_id", "status"),)

    @staticmethod
    def compose_plaintext(key_id: UUID, secret: str) -> str:
        """Build the caller-facing key: prefix, record id, random secret."""
        return f"{ISSUED_KEY_PREFIX}{key_id.hex}_{secret}"

    @staticmethod
    def split_plaintext(plain_key: str) -> tuple[UUID, str] | None:
        """Recover ``(key_id, plaintext)`` from a presented key, or None."""
        if not plain_key or not plain_key.startswith(ISSUED_KEY_PREFIX):
            return None
        body = plain_key[len(ISSUED_KEY_PREFIX) :]
        key_hex, sep, secret = body.partition("_")
        if not sep or not secret:
            return None
        try:
            return UUID(hex=key_hex), plain_key
        except ValueError:
            return None
