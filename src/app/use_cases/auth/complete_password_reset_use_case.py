"""
Complete Password Reset Use Case

Consumes a reset token issued by PIN verification and sets the new password.
"""

import logging
from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.services.credentials import (
    BCRYPT_MAX_BYTES,
    fits_bcrypt,
    hash_password,
    hash_reset_token,
)
from src.app.services.reset_policy import ResetPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, ResetStatus
from src.domain.password_reset_rules import expired_patch, reset_token_usable, used_patch
from .dtos import CompletePasswordResetResponse

logger = logging.getLogger(__name__)


class CompletePasswordResetUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - New password must be at least policy.min_password_length characters
      and at most 72 bytes (bcrypt input limit)
    - Token is looked up by its SHA-256 hash
    - Request must be verified and the token unexpired; unknown, used and
      expired tokens all return INVALID_TOKEN
    - Password is hashed with bcrypt (cost factor 12) before it is stored
    - verified -> used happens at most once per token (conditional update)
    - Other pending/verified requests of the user are expired
    """

    def __init__(
        self,
        uow: UnitOfWork,
        policy: ResetPolicy,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.policy = policy
        self.clock = clock

    def _validate_password(self, password: str) -> Result[None]:
        if len(password or "") < self.policy.min_password_length:
            return Return.err(
                Error(
                    "INVALID_PASSWORD",
                    f"Password must be at least {self.policy.min_password_length} characters long",
                )
            )
        if not fits_bcrypt(password):
            return Return.err(
                Error("INVALID_PASSWORD", f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")
            )
        return Return.ok(None)

    def _invalid(self) -> Result[CompletePasswordResetResponse]:
        return Return.err(Error("INVALID_TOKEN", "Invalid or expired password reset token"))

    async def execute(
        self, reset_token: str, new_password: str
    ) -> Result[CompletePasswordResetResponse]:
        """
        Execute complete password reset use case.

        Args:
            reset_token: Token returned by the verify-pin step
            new_password: New password to set

        Returns:
            Result with confirmation message, or Error

        Errors:
            - INVALID_PASSWORD: Password does not meet the length policy
            - INVALID_TOKEN: Token unknown, already used or expired
        """
        password_validation = self._validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        token = (reset_token or "").strip()
        if not token:
            return self._invalid()

        async with self.uow:
            now = self.clock()
            reset = await self.uow.password_resets.get_by_reset_token_hash(hash_reset_token(token))
            if reset is None or reset.status != ResetStatus.verified:
                return self._invalid()

            if not reset_token_usable(reset, now):
                await self.uow.password_resets.update(
                    reset.id, expired_patch(), expected_status=ResetStatus.verified
                )
                await self.uow.commit()
                return self._invalid()

            user = await self.uow.users.get_by_id(reset.user_id)
            if user is None:
                logger.error(f"Password reset {reset.id} references missing user {reset.user_id}")
                return self._invalid()

            applied = await self.uow.password_resets.update(
                reset.id, used_patch(reset, now), expected_status=ResetStatus.verified
            )
            if not applied:
                return self._invalid()

            await self.uow.users.set_password_hash(user.id, hash_password(new_password))

            others_expired = await self.uow.password_resets.expire_live_for_user(
                user.id, exclude_id=reset.id
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="password_reset_completed",
                    event_metadata={
                        "request_id": str(reset.id),
                        "other_requests_expired": others_expired,
                    },
                )
            )
            await self.uow.commit()

            logger.info(f"Password reset completed for user {user.id}")
            return Return.ok(CompletePasswordResetResponse(message="Password updated"))
