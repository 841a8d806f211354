"""
PasswordReset Entity

One record per password reset attempt (PIN by mail, then reset token).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import ResetStatus

# Enum columns store member names
LIVE_STATUS_CLAUSE = text("status IN ('pending', 'verified')")


class PasswordReset(SQLModel, table=True):
    """
    PasswordReset entity - state of a single reset flow.

    Business Rules:
    - id is the opaque requestId handed to the client
    - At most one pending/verified request per user (partial unique index)
    - Only hashes are stored: bcrypt for the PIN, SHA-256 for the reset token
    - attempts_remaining never goes below 0
    - Rows are purged once both expires_at and reset_token_expires_at have passed
    """

    __tablename__ = "password_resets"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id")
    pin_hash: str = Field(max_length=60)

    status: ResetStatus = Field(default=ResetStatus.pending)
    attempts_remaining: int = Field(default=5, ge=0)

    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    verified_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_attempt_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_sent_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    reset_token_hash: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )  # SHA-256 output
    reset_token_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_user_status", "user_id", "status"),
        Index(
            "uq_password_reset_live_user",
            "user_id",
            unique=True,
            sqlite_where=LIVE_STATUS_CLAUSE,
            postgresql_where=LIVE_STATUS_CLAUSE,
        ),
    )
