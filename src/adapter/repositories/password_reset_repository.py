from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import delete, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_repository import (
    IPasswordResetRepository,
    LiveResetConflict,
)
from src.domain.entities import LIVE_RESET_STATUSES, PasswordReset, ResetStatus


class PasswordResetRepository(IPasswordResetRepository):
    """PasswordReset repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, reset: PasswordReset) -> PasswordReset:
        """Create a new password reset request"""
        self.session.add(reset)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise LiveResetConflict(f"User {reset.user_id} already has a live reset request") from e
        await self.session.refresh(reset)
        return reset

    async def get_by_id(self, request_id: UUID) -> Optional[PasswordReset]:
        """Get password reset request by its public id"""
        stmt = select(PasswordReset).where(PasswordReset.id == request_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_reset_token_hash(self, token_hash: str) -> Optional[PasswordReset]:
        """Get password reset request by reset token hash"""
        stmt = select(PasswordReset).where(PasswordReset.reset_token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(
        self,
        request_id: UUID,
        patch: Dict[str, Any],
        expected_status: Optional[ResetStatus] = None,
        expected_attempts: Optional[int] = None,
        expected_pin_hash: Optional[str] = None,
    ) -> bool:
        """Conditional UPDATE; the WHERE clause acts as compare-and-set"""
        stmt = update(PasswordReset).where(PasswordReset.id == request_id)
        if expected_status is not None:
            stmt = stmt.where(PasswordReset.status == expected_status)
        if expected_attempts is not None:
            stmt = stmt.where(PasswordReset.attempts_remaining == expected_attempts)
        if expected_pin_hash is not None:
            stmt = stmt.where(PasswordReset.pin_hash == expected_pin_hash)

        result = await self.session.exec(stmt.values(**patch))
        return result.rowcount == 1

    async def expire_live_for_user(
        self, user_id: UUID, exclude_id: Optional[UUID] = None
    ) -> int:
        """Move every pending/verified request of the user to expired"""
        stmt = update(PasswordReset).where(
            PasswordReset.user_id == user_id,
            PasswordReset.status.in_(LIVE_RESET_STATUSES),
        )
        if exclude_id is not None:
            stmt = stmt.where(PasswordReset.id != exclude_id)

        result = await self.session.exec(stmt.values(status=ResetStatus.expired))
        return result.rowcount

    async def purge_expired(self, now: datetime) -> int:
        """Delete requests whose PIN and reset token have both expired"""
        stmt = delete(PasswordReset).where(
            PasswordReset.expires_at <= now,
            or_(
                PasswordReset.reset_token_expires_at.is_(None),
                PasswordReset.reset_token_expires_at <= now,
            ),
        )
        result = await self.session.exec(stmt)
        return result.rowcount
