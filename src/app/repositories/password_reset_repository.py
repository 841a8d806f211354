from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from src.domain.entities import PasswordReset, ResetStatus


class LiveResetConflict(Exception):
    """The user already has a pending or verified request (written concurrently)"""


class IPasswordResetRepository(ABC):
    """PasswordReset repository interface - application layer"""

    @abstractmethod
    async def create(self, reset: PasswordReset) -> PasswordReset:
        """
        Create a new password reset request.

        Raises:
            LiveResetConflict: another live request exists for the same user
        """
        pass

    @abstractmethod
    async def get_by_id(self, request_id: UUID) -> Optional[PasswordReset]:
        """Get password reset request by its public id"""
        pass

    @abstractmethod
    async def get_by_reset_token_hash(self, token_hash: str) -> Optional[PasswordReset]:
        """Get password reset request by reset token hash"""
        pass

    @abstractmethod
    async def update(
        self,
        request_id: UUID,
        patch: Dict[str, Any],
        expected_status: Optional[ResetStatus] = None,
        expected_attempts: Optional[int] = None,
        expected_pin_hash: Optional[str] = None,
    ) -> bool:
        """
        Apply patch atomically if the row still has the expected status,
        attempt count and PIN hash (each only when given).

        Returns:
            True if a row was updated, False if it is gone or changed meanwhile
        """
        pass

    @abstractmethod
    async def expire_live_for_user(
        self, user_id: UUID, exclude_id: Optional[UUID] = None
    ) -> int:
        """Move every pending/verified request of the user to expired; returns count"""
        pass

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Delete requests whose PIN and reset token have both expired; returns count"""
        pass
