"""
Verify Reset PIN Use Case

Checks a mailed PIN and, on success, issues the reset token that authorizes
the password change.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.credentials import (
    burn_hash_time,
    check_pin,
    generate_reset_token,
    is_well_formed_pin,
)
from src.app.services.reset_policy import ResetPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, ResetStatus
from src.domain.password_reset_rules import (
    can_attempt,
    consume_attempt_patch,
    expired_patch,
    verified_patch,
)
from .dtos import VerifyResetPinResponse

logger = logging.getLogger(__name__)


def parse_request_id(request_id: str) -> Optional[UUID]:
    try:
        return UUID((request_id or "").strip())
    except ValueError:
        return None


class VerifyResetPinUseCase:
    """
    Use case for verifying a password reset PIN.

    Business Rules:
    - Whitespace inside the submitted PIN is ignored
    - Unknown request, wrong state, expiry, exhausted attempts and wrong PIN
      all return the same INVALID_PIN error
    - A pending request that can no longer be attempted is expired
    - Every PIN comparison consumes one attempt, including the successful one
    - A candidate that is not policy.pin_length ASCII digits is a mismatch
    - A wrong PIN that leaves 0 attempts (or arrives after expiry) expires
      the request
    - State changes are conditional on the status, attempt count and PIN hash
      that were read, so concurrent attempts cannot both succeed and a PIN
      replaced by a resend cannot verify
    - On success: status verified, reset token issued (SHA-256 stored),
      valid for policy.reset_token_ttl
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

    def _invalid(self) -> Result[VerifyResetPinResponse]:
        return Return.err(Error("INVALID_PIN", "Invalid or expired PIN"))

    async def execute(self, request_id: str, pin: str) -> Result[VerifyResetPinResponse]:
        """
        Execute verify reset PIN use case.

        Args:
            request_id: Public id returned by the forgot-password step
            pin: PIN as typed by the user

        Returns:
            Result with the reset token, or Error(INVALID_PIN)
        """
        candidate = "".join((pin or "").split())
        request_uuid = parse_request_id(request_id)
        if request_uuid is None or not candidate:
            return self._invalid()

        async with self.uow:
            now = self.clock()
            reset = await self.uow.password_resets.get_by_id(request_uuid)

            if reset is None:
                burn_hash_time(self.policy.pin_hash_rounds)
                return self._invalid()

            if not can_attempt(reset, now):
                if reset.status == ResetStatus.pending:
                    await self.uow.password_resets.update(
                        reset.id, expired_patch(), expected_status=ResetStatus.pending
                    )
                    await self.uow.commit()
                return self._invalid()

            # Malformed candidates never reach bcrypt but still cost an attempt
            matched = is_well_formed_pin(candidate, self.policy.pin_length) and check_pin(
                candidate, reset.pin_hash
            )

            reset_token = None
            if matched:
                reset_token, reset_token_hash = generate_reset_token()
                patch = verified_patch(reset, now, reset_token_hash, self.policy.reset_token_ttl)
            else:
                patch = consume_attempt_patch(reset, now, matched=False)

            applied = await self.uow.password_resets.update(
                reset.id,
                patch,
                expected_status=ResetStatus.pending,
                expected_attempts=reset.attempts_remaining,
                expected_pin_hash=reset.pin_hash,
            )
            if not applied:
                logger.warning(f"Concurrent PIN attempt lost the race on request {reset.id}")
                return self._invalid()

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=reset.user_id,
                    action="password_reset_pin_verified" if matched else "password_reset_pin_failed",
                    event_metadata={
                        "request_id": str(reset.id),
                        "attempts_remaining": patch["attempts_remaining"],
                    },
                )
            )
            await self.uow.commit()

            if not matched:
                logger.info(
                    f"Wrong PIN for request {reset.id}, {patch['attempts_remaining']} attempts left"
                )
                return self._invalid()

            logger.info(f"PIN verified for request {reset.id}")
            return Return.ok(VerifyResetPinResponse(reset_token=reset_token))
