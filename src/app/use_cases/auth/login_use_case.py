"""
Login Use Case

Handles user authentication and returns a signed JWT.
"""

from libs.result import Error, Result, Return
from src.app.services.credentials import (
    PASSWORD_HASH_ROUNDS,
    burn_hash_time,
    check_password,
    fits_bcrypt,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import normalize_email, utcnow
from src.domain.entities import AuditEvent
from src.api.utils.jwt import generate_jwt
from .dtos import LoginResponse, UserInfo


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Email is trimmed and lower-cased before lookup
    - Same error and comparable bcrypt work for unknown email and wrong password
    - JWT carries user_id, email, role and name
    - Updates user.last_login_at
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with LoginResponse containing token and user info, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))

            # Always perform hash work even if user not found or the password cannot match
            if user is None or not fits_bcrypt(password):
                burn_hash_time(PASSWORD_HASH_ROUNDS)
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            if not check_password(password, user.password_hash):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            user.last_login_at = utcnow()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(user_id=user.id, action="login", event_metadata={"email": user.email})
            )
            await self.uow.commit()

            token = generate_jwt(
                user_id=user.id, email=user.email, role=user.role.value, name=user.name
            )

            return Return.ok(
                LoginResponse(message="Login successful", token=token, user=UserInfo.from_user(user))
            )
