from datetime import date, datetime
from typing import Callable, Optional

from fastapi import APIRouter, Depends, status
from pydantic import EmailStr, Field

from src.api.error import ClientError, ServerError
from src.app.services.mail_sender import IMailSender
from src.app.services.reset_policy import ResetPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    CompletePasswordResetResponse,
    CompletePasswordResetUseCase,
    LoginResponse,
    LoginUseCase,
    RegisterUserCommand,
    RegisterUserResponse,
    RegisterUserUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    ResendResetPinResponse,
    ResendResetPinUseCase,
    VerifyResetPinResponse,
    VerifyResetPinUseCase,
)
from src.app.use_cases.auth.dtos import CamelModel
from src.depends import (
    get_clock,
    get_current_user,
    get_mail_sender,
    get_reset_policy,
    get_unit_of_work,
)
from src.domain.entities import UserRole

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(CamelModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterUserCommand.
    """

    id_number: str = Field(..., min_length=1, max_length=64, description="National id / tax id")
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, max_length=128, description="User password (8-72 bytes)")
    role: UserRole
    birth_date: Optional[date] = Field(default=None, description="Required for employee and candidate")
    description: Optional[str] = Field(default=None, max_length=2000)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterUserResponse)
async def register(request: RegisterRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Register a new employee, candidate or company account.

    Raises:
        - 400 Bad Request: Invalid payload, password over 72 bytes or missing birthDate for a person
        - 409 Conflict: Email or identification number already registered
    """
    command = RegisterUserCommand(**request.model_dump())

    use_case = RegisterUserUseCase(uow)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "USER_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        if error.code in ("VALIDATION_ERROR", "INVALID_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1, description="User email address")
    password: str = Field(..., min_length=1, max_length=128, description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(request: LoginRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Authenticate by email + password and return a signed JWT.

    Raises:
        - 401 Unauthorized: Invalid credentials
    """
    use_case = LoginUseCase(uow)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class MeResponse(CamelModel):
    user_id: str
    email: str
    role: UserRole
    name: str


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def me(current_user: dict = Depends(get_current_user)):
    """Claims of the bearer token"""
    return MeResponse(
        user_id=current_user["user_id"],
        email=current_user["email"],
        role=current_user["role"],
        name=current_user["name"],
    )


class ForgotPasswordRequest(CamelModel):
    email: str = Field(..., description="Account email; trimmed and lower-cased")


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: IMailSender = Depends(get_mail_sender),
    policy: ResetPolicy = Depends(get_reset_policy),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Request Password Reset

    Mails a numeric PIN and returns the requestId needed by the next steps.

    Security:
        - No email enumeration (same response shape and message for unknown emails)
        - PIN stored as bcrypt hash only

    Raises:
        - 400 Bad Request: Missing email
        - 500 Internal Server Error: PIN could not be mailed
    """
    use_case = RequestPasswordResetUseCase(uow, mailer, policy, clock)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class VerifyPinRequest(CamelModel):
    request_id: str = Field(..., description="requestId from forgot-password")
    pin: str = Field(..., description="PIN received by email")


@router.post("/verify-pin", status_code=status.HTTP_200_OK, response_model=VerifyResetPinResponse)
async def verify_pin(
    request: VerifyPinRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    policy: ResetPolicy = Depends(get_reset_policy),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Verify Reset PIN

    Exchanges a correct PIN for a single-use reset token.

    Raises:
        - 400 Bad Request: Invalid, expired or exhausted PIN (single generic error)
    """
    use_case = VerifyResetPinUseCase(uow, policy, clock)
    result = await use_case.execute(request.request_id, request.pin)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_PIN":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class ResendPinRequest(CamelModel):
    request_id: str = Field(..., description="requestId from forgot-password")


@router.post("/resend-pin", status_code=status.HTTP_200_OK, response_model=ResendResetPinResponse)
async def resend_pin(
    request: ResendPinRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: IMailSender = Depends(get_mail_sender),
    policy: ResetPolicy = Depends(get_reset_policy),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Resend Reset PIN

    Raises:
        - 400 Bad Request: Unknown or non-pending request
        - 429 Too Many Requests: Resend cooldown still running
        - 500 Internal Server Error: PIN could not be mailed
    """
    use_case = ResendResetPinUseCase(uow, mailer, policy, clock)
    result = await use_case.execute(request.request_id)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_REQUEST":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "RESEND_TOO_SOON":
            raise ClientError(
                error,
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={"Retry-After": str(policy.resend_cooldown_seconds)},
            )
        raise ServerError(error)

    return result.value


class ResetPasswordRequest(CamelModel):
    reset_token: str = Field(..., description="Token returned by verify-pin")
    new_password: str = Field(..., max_length=128, description="New password (8-72 bytes)")


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=CompletePasswordResetResponse,
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    policy: ResetPolicy = Depends(get_reset_policy),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Complete Password Reset

    Raises:
        - 400 Bad Request: Invalid, used or expired token, or weak password
    """
    use_case = CompletePasswordResetUseCase(uow, policy, clock)
    result = await use_case.execute(request.reset_token, request.new_password)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_TOKEN", "INVALID_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
