"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
JSON keys are camelCase on the wire; snake_case is accepted on input.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.entities import User, UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterUserCommand(CamelModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    """

    id_number: str
    name: str
    email: str
    password: str
    role: UserRole
    birth_date: Optional[date] = None
    description: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(CamelModel):
    """Public user information (never includes the password hash)"""

    id: str
    id_number: str
    name: str
    email: str
    role: UserRole
    birth_date: Optional[date] = None
    description: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            id=str(user.id),
            id_number=user.id_number,
            name=user.name,
            email=user.email,
            role=user.role,
            birth_date=user.birth_date,
            description=user.description,
        )


class RegisterUserResponse(CamelModel):
    """Response for register use case"""

    message: str
    user: UserInfo


class LoginResponse(CamelModel):
    """Response for user login use case"""

    message: str
    token: str
    user: UserInfo


class RequestPasswordResetResponse(CamelModel):
    """Response for request password reset use case"""

    message: str
    request_id: str


class VerifyResetPinResponse(CamelModel):
    """Response for verify reset PIN use case"""

    reset_token: str


class ResendResetPinResponse(CamelModel):
    """Response for resend reset PIN use case"""

    message: str


class CompletePasswordResetResponse(CamelModel):
    """Response for complete password reset use case"""

    message: str
