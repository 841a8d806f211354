"""
Authentication Use Cases

Account registration, login and the PIN based password reset flow.
"""

from .register_user_use_case import RegisterUserUseCase
from .login_use_case import LoginUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .verify_reset_pin_use_case import VerifyResetPinUseCase
from .resend_reset_pin_use_case import ResendResetPinUseCase
from .complete_password_reset_use_case import CompletePasswordResetUseCase
from .dtos import (
    RegisterUserCommand,
    RegisterUserResponse,
    LoginResponse,
    UserInfo,
    RequestPasswordResetResponse,
    VerifyResetPinResponse,
    ResendResetPinResponse,
    CompletePasswordResetResponse,
)

__all__ = [
    # Use Cases
    "RegisterUserUseCase",
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "VerifyResetPinUseCase",
    "ResendResetPinUseCase",
    "CompletePasswordResetUseCase",
    # DTOs - Commands
    "RegisterUserCommand",
    # DTOs - Responses
    "RegisterUserResponse",
    "LoginResponse",
    "RequestPasswordResetResponse",
    "VerifyResetPinResponse",
    "ResendResetPinResponse",
    "CompletePasswordResetResponse",
    # DTOs - Nested Models
    "UserInfo",
]
