from libs.result import Error, Result, Return

from src.app.services.credentials import BCRYPT_MAX_BYTES, fits_bcrypt, hash_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import normalize_email
from src.domain.entities import AuditEvent, User, UserRole
from .dtos import RegisterUserCommand, RegisterUserResponse, UserInfo

PERSON_ROLES = (UserRole.employee, UserRole.candidate)


class RegisterUserUseCase:
    """
    Register Use Case

    Business Logic:
    1. Normalize email (trim + lower-case)
    2. Employees and candidates must give a birth date
    3. Password must fit bcrypt (72 bytes)
    4. Reject duplicate email or id number
    5. Hash password with bcrypt cost factor 12
    6. Create User and AuditEvent, commit atomically
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: RegisterUserCommand) -> Result[RegisterUserResponse]:
        email = normalize_email(command.email)

        if command.role in PERSON_ROLES and command.birth_date is None:
            return Return.err(
                Error("VALIDATION_ERROR", "birthDate is required for employees and candidates")
            )

        if not fits_bcrypt(command.password):
            return Return.err(
                Error("INVALID_PASSWORD", f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")
            )

        async with self.uow:
            if await self.uow.users.get_by_email(email):
                return Return.err(Error("USER_ALREADY_EXISTS", "Email already registered"))

            if await self.uow.users.get_by_id_number(command.id_number.strip()):
                return Return.err(
                    Error("USER_ALREADY_EXISTS", "Identification number already registered")
                )

            user = User(
                id_number=command.id_number.strip(),
                name=command.name.strip(),
                email=email,
                password_hash=hash_password(command.password),
                role=command.role,
                birth_date=command.birth_date,
                description=command.description,
            )
            user = await self.uow.users.create(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="user_registered",
                    event_metadata={"email": email, "role": command.role.value},
                )
            )

            await self.uow.commit()

            return Return.ok(
                RegisterUserResponse(
                    message="User registered successfully",
                    user=UserInfo.from_user(user),
                )
            )
