from typing import Tuple
from uuid import UUID


def pin_issued_mail(app_name: str, pin: str, request_id: UUID, ttl_minutes: int) -> Tuple[str, str]:
    """Subject and HTML body for a new password reset PIN"""
    subject = f"{app_name} · Password recovery"
    body = f"""
        <p>We received a request to reset the password of your account.</p>
        <p>Your PIN is: <b style="font-size:20px">{pin}</b></p>
        <p>Request ID: <code>{request_id}</code></p>
        <p>This code expires in {ttl_minutes} minutes.</p>
        <p>If this wasn't you, you can ignore this email.</p>
    """
    return subject, body


def pin_resent_mail(app_name: str, pin: str, request_id: UUID, ttl_minutes: int) -> Tuple[str, str]:
    """Subject and HTML body for a re-issued PIN"""
    subject = f"{app_name} · New recovery PIN"
    body = f"""
        <p>Your new PIN is: <b style="font-size:20px">{pin}</b></p>
        <p>Request ID: <code>{request_id}</code></p>
        <p>This code expires in {ttl_minutes} minutes. Previous PINs no longer work.</p>
    """
    return subject, body
