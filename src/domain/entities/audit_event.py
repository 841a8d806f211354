"""
AuditEvent Entity

Immutable log of account and credential events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of credential events.

    Business Rules:
    - Immutable (never updated or deleted)
    - user_id nullable for events without a resolved account
    - Metadata never contains PINs, reset tokens or passwords
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None)

    action: str = Field(max_length=100)  # e.g., "login", "password_reset_requested"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_user_action", "user_id", "action"),
    )
