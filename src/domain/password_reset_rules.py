"""
Password Reset Rules

Pure functions over a PasswordReset snapshot. Nothing here touches storage:
predicates return bool, transitions return a patch dict that the caller hands
to the repository's conditional update.
"""

from datetime import datetime, timedelta
from typing import Any, Dict

from src.domain.entities import PasswordReset, ResetStatus


def is_expired(reset: PasswordReset, now: datetime) -> bool:
    """Expired by status or by time, whichever comes first"""
    return reset.status == ResetStatus.expired or reset.expires_at <= now


def can_attempt(reset: PasswordReset, now: datetime) -> bool:
    return (
        reset.status == ResetStatus.pending
        and not is_expired(reset, now)
        and reset.attempts_remaining > 0
    )


def expired_patch() -> Dict[str, Any]:
    return {"status": ResetStatus.expired}


def consume_attempt_patch(
    reset: PasswordReset, now: datetime, matched: bool
) -> Dict[str, Any]:
    """
    One PIN comparison happened. Every comparison costs an attempt.

    A mismatch that leaves no attempts, or lands after expires_at,
    terminates the request.
    """
    attempts = max(0, reset.attempts_remaining - 1)
    patch: Dict[str, Any] = {"attempts_remaining": attempts, "last_attempt_at": now}

    if matched:
        patch["status"] = ResetStatus.verified
        patch["verified_at"] = now
    elif attempts <= 0 or reset.expires_at <= now:
        patch["status"] = ResetStatus.expired

    return patch


def verified_patch(
    reset: PasswordReset, now: datetime, reset_token_hash: str, token_ttl: timedelta
) -> Dict[str, Any]:
    patch = consume_attempt_patch(reset, now, matched=True)
    patch["reset_token_hash"] = reset_token_hash
    patch["reset_token_expires_at"] = now + token_ttl
    return patch


def reissued_patch(
    pin_hash: str, now: datetime, pin_ttl: timedelta, max_attempts: int
) -> Dict[str, Any]:
    """Fresh PIN on the same request; status stays pending"""
    return {
        "pin_hash": pin_hash,
        "expires_at": now + pin_ttl,
        "attempts_remaining": max_attempts,
        "last_attempt_at": None,
    }


def resend_allowed(reset: PasswordReset, now: datetime, cooldown_seconds: int) -> bool:
    if reset.last_sent_at is None or cooldown_seconds <= 0:
        return True
    return now - reset.last_sent_at >= timedelta(seconds=cooldown_seconds)


def reset_token_usable(reset: PasswordReset, now: datetime) -> bool:
    return (
        reset.status == ResetStatus.verified
        and reset.reset_token_expires_at is not None
        and reset.reset_token_expires_at > now
    )


def used_patch(reset: PasswordReset, now: datetime) -> Dict[str, Any]:
    """verified -> used; only legal while the reset token is still valid"""
    if not reset_token_usable(reset, now):
        raise ValueError(f"Password reset {reset.id} is not in a usable state")
    return {"status": ResetStatus.used, "used_at": now}
