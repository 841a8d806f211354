from uuid import uuid4

import pytest

from src.api.utils.jwt import verify_jwt
from src.app.services.credentials import hash_password
from src.app.use_cases.auth import LoginUseCase
from src.domain.entities import User, UserRole


@pytest.fixture
def user():
    return User(
        id=uuid4(),
        id_number="777",
        name="Sofía",
        email="sofia@example.com",
        password_hash=hash_password("SecurePass123!"),
        role=UserRole.candidate,
    )


@pytest.mark.asyncio
async def test_successful_login(mock_uow, user):
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow).execute("SOFIA@example.com", "SecurePass123!")

    assert result.is_ok()
    mock_uow.users.get_by_email.assert_awaited_once_with("sofia@example.com")
    assert user.last_login_at is not None

    payload = verify_jwt(result.value.token)
    assert payload["user_id"] == str(user.id)
    assert payload["role"] == "candidate"
    assert result.value.user.email == "sofia@example.com"


@pytest.mark.asyncio
async def test_wrong_password(mock_uow, user):
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow).execute("sofia@example.com", "WrongPassword!")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_email_same_error(mock_uow):
    result = await LoginUseCase(mock_uow).execute("ghost@example.com", "whatever")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_password_over_bcrypt_limit_is_invalid_credentials(mock_uow, user):
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow).execute("sofia@example.com", "x" * 80)

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.users.update.assert_not_awaited()
