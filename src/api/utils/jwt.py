from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(user_id: UUID, email: str, role: str, name: str) -> str:
    """
    Generate JWT access token

    Args:
        user_id: User UUID
        email: Normalized email
        role: employee, candidate or company
        name: Display name

    Returns:
        JWT token string (HS256, JWT_EXPIRE_DAYS expiry)
    """
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "email": email,
        "role": role,
        "name": name,
        "exp": now + timedelta(days=ApplicationConfig.JWT_EXPIRE_DAYS),
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        return jwt.decode(token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"])
    except JWTError:
        return None
