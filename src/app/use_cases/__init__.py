"""
Use Cases

Organized by domain folder:
- auth/: Registration, login and password reset

Import from subdirectories for better organization.
"""

from .auth import (
    RegisterUserUseCase,
    LoginUseCase,
    RequestPasswordResetUseCase,
    VerifyResetPinUseCase,
    ResendResetPinUseCase,
    CompletePasswordResetUseCase,
)

__all__ = [
    "RegisterUserUseCase",
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "VerifyResetPinUseCase",
    "ResendResetPinUseCase",
    "CompletePasswordResetUseCase",
]
