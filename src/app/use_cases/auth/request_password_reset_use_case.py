"""
Request Password Reset Use Case

Issues a numeric PIN by mail and opens a pending password reset request.
"""

import logging
from datetime import datetime
from typing import Callable, Tuple
from uuid import UUID, uuid4

from libs.result import Error, Result, Return
from src.app.repositories.password_reset_repository import LiveResetConflict
from src.app.services.credentials import generate_pin, hash_pin
from src.app.services.mail_sender import IMailSender, MailDeliveryError
from src.app.services.reset_mail import pin_issued_mail
from src.app.services.reset_policy import ResetPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import normalize_email, utcnow
from src.domain.entities import AuditEvent, PasswordReset, ResetStatus
from src.domain.password_reset_rules import expired_patch
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If the email exists, a PIN has been sent"


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset PIN.

    Business Rules:
    - Email is trimmed and lower-cased before lookup
    - No email enumeration: unknown emails get the same message, a decoy
      requestId and the same PIN hashing work
    - Any pending/verified request of the user is expired first; losing a
      race against a concurrent request retries once so the newest wins
    - PIN is numeric, policy.pin_length digits, hashed with bcrypt
    - Request expires after policy.pin_ttl with policy.max_attempts attempts
    - If the mail cannot be delivered the new request is expired and
      MAIL_DELIVERY_FAILED is returned
    - Expired rows are purged on each call (no TTL index in SQL stores)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        mailer: IMailSender,
        policy: ResetPolicy,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.mailer = mailer
        self.policy = policy
        self.clock = clock

    async def _open_request(
        self, user_id: UUID, pin_hash: str, now: datetime
    ) -> Tuple[PasswordReset, int]:
        superseded = await self.uow.password_resets.expire_live_for_user(user_id)
        reset = PasswordReset(
            user_id=user_id,
            pin_hash=pin_hash,
            status=ResetStatus.pending,
            attempts_remaining=self.policy.max_attempts,
            expires_at=now + self.policy.pin_ttl,
        )
        return await self.uow.password_resets.create(reset), superseded

    async def execute(self, email: str) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: Email address as typed by the user

        Returns:
            Result with message and requestId, or Error

        Errors:
            - VALIDATION_ERROR: Email is empty
            - MAIL_DELIVERY_FAILED: PIN could not be mailed
        """
        normalized_email = normalize_email(email)
        if not normalized_email:
            return Return.err(Error("VALIDATION_ERROR", "Email is required"))

        async with self.uow:
            now = self.clock()
            await self.uow.password_resets.purge_expired(now)

            user = await self.uow.users.get_by_email(normalized_email)

            # Hash before branching so both paths pay the same bcrypt cost
            pin = generate_pin(self.policy.pin_length)
            pin_hash = hash_pin(pin, self.policy.pin_hash_rounds)

            if user is None:
                await self.uow.commit()
                logger.info("Password reset requested for an unknown email")
                return Return.ok(
                    RequestPasswordResetResponse(
                        message=RESET_REQUESTED_MESSAGE,
                        request_id=str(uuid4()),
                    )
                )

            # Plain values; a conflict rollback expires the loaded user
            user_id, user_email = user.id, user.email
            try:
                reset, superseded = await self._open_request(user_id, pin_hash, now)
            except LiveResetConflict:
                # A concurrent request for the same user committed first; supersede it
                logger.warning(f"Concurrent password reset request for user {user_id}, retrying")
                reset, superseded = await self._open_request(user_id, pin_hash, now)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="password_reset_requested",
                    event_metadata={
                        "request_id": str(reset.id),
                        "superseded_requests": superseded,
                    },
                )
            )
            await self.uow.commit()

            subject, body = pin_issued_mail(
                self.policy.app_name, pin, reset.id, self.policy.pin_ttl_minutes
            )
            try:
                await self.mailer.send(user_email, subject, body)
            except MailDeliveryError:
                logger.exception(f"Password reset PIN delivery failed for request {reset.id}")
                await self.uow.password_resets.update(reset.id, expired_patch())
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user_id,
                        action="password_reset_mail_failed",
                        event_metadata={"request_id": str(reset.id)},
                    )
                )
                await self.uow.commit()
                return Return.err(
                    Error("MAIL_DELIVERY_FAILED", "Could not send the password recovery email")
                )

            await self.uow.password_resets.update(reset.id, {"last_sent_at": self.clock()})
            await self.uow.commit()

            logger.info(f"Password reset request {reset.id} issued for user {user_id}")
            return Return.ok(
                RequestPasswordResetResponse(
                    message=RESET_REQUESTED_MESSAGE,
                    request_id=str(reset.id),
                )
            )
