"""
Resend Reset PIN Use Case

Replaces the PIN of a pending request and mails it again.
"""

import logging
from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.services.credentials import generate_pin, hash_pin
from src.app.services.mail_sender import IMailSender, MailDeliveryError
from src.app.services.reset_mail import pin_resent_mail
from src.app.services.reset_policy import ResetPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, ResetStatus
from src.domain.password_reset_rules import reissued_patch, resend_allowed
from .dtos import ResendResetPinResponse
from .verify_reset_pin_use_case import parse_request_id

logger = logging.getLogger(__name__)


class ResendResetPinUseCase:
    """
    Use case for re-issuing a password reset PIN.

    Business Rules:
    - Only pending requests can be resent (verified/used/expired are rejected)
    - A time-expired pending request may be resent; that is the usual case
    - Server-side cooldown of policy.resend_cooldown_seconds per request
    - New PIN hash, expiry and attempt budget; same requestId and status
    - The new PIN is stored only after it was delivered; on mail failure the
      previous PIN stays in force and MAIL_DELIVERY_FAILED is returned
    - The cooldown only starts once a PIN was actually delivered
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

    def _invalid(self) -> Result[ResendResetPinResponse]:
        return Return.err(Error("INVALID_REQUEST", "Invalid password reset request"))

    async def execute(self, request_id: str) -> Result[ResendResetPinResponse]:
        """
        Execute resend reset PIN use case.

        Errors:
            - INVALID_REQUEST: Unknown request or not pending
            - RESEND_TOO_SOON: Cooldown still running
            - MAIL_DELIVERY_FAILED: PIN could not be mailed
        """
        request_uuid = parse_request_id(request_id)
        if request_uuid is None:
            return self._invalid()

        async with self.uow:
            now = self.clock()
            reset = await self.uow.password_resets.get_by_id(request_uuid)
            if reset is None or reset.status != ResetStatus.pending:
                return self._invalid()

            if not resend_allowed(reset, now, self.policy.resend_cooldown_seconds):
                return Return.err(
                    Error("RESEND_TOO_SOON", "Please wait before requesting another PIN")
                )

            user = await self.uow.users.get_by_id(reset.user_id)
            if user is None:
                return self._invalid()

            pin = generate_pin(self.policy.pin_length)
            pin_hash = hash_pin(pin, self.policy.pin_hash_rounds)
            user_id, user_email = user.id, user.email

            subject, body = pin_resent_mail(
                self.policy.app_name, pin, reset.id, self.policy.pin_ttl_minutes
            )
            try:
                await self.mailer.send(user_email, subject, body)
            except MailDeliveryError:
                logger.exception(f"Password reset PIN re-delivery failed for request {reset.id}")
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user_id,
                        action="password_reset_mail_failed",
                        event_metadata={"request_id": str(reset.id), "resend": True},
                    )
                )
                await self.uow.commit()
                return Return.err(Error("MAIL_DELIVERY_FAILED", "Could not resend the PIN"))

            sent_at = self.clock()
            patch = reissued_patch(pin_hash, sent_at, self.policy.pin_ttl, self.policy.max_attempts)
            patch["last_sent_at"] = sent_at
            applied = await self.uow.password_resets.update(
                reset.id,
                patch,
                expected_status=ResetStatus.pending,
                expected_pin_hash=reset.pin_hash,
            )
            if not applied:
                # Verified, expired or resent meanwhile; the mailed PIN never becomes valid
                logger.warning(f"Resend for request {reset.id} lost a concurrent update")
                return self._invalid()

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="password_reset_pin_resent",
                    event_metadata={"request_id": str(reset.id)},
                )
            )
            await self.uow.commit()

            return Return.ok(ResendResetPinResponse(message="PIN resent"))
