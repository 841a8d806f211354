import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.mail_sender import IMailSender
from src.app.services.reset_policy import ResetPolicy
from tests.utils.clock import FakeClock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_id_number = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.set_password_hash = AsyncMock(return_value=True)

    uow.password_resets = MagicMock()
    uow.password_resets.create = AsyncMock(side_effect=lambda reset: reset)
    uow.password_resets.get_by_id = AsyncMock(return_value=None)
    uow.password_resets.get_by_reset_token_hash = AsyncMock(return_value=None)
    uow.password_resets.update = AsyncMock(return_value=True)
    uow.password_resets.expire_live_for_user = AsyncMock(return_value=0)
    uow.password_resets.purge_expired = AsyncMock(return_value=0)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock(side_effect=lambda event: event)
    return uow


@pytest.fixture
def policy():
    # Low bcrypt cost keeps the suite fast
    return ResetPolicy(
        pin_length=6,
        pin_ttl_minutes=1,
        reset_token_ttl_minutes=15,
        max_attempts=5,
        resend_cooldown_seconds=60,
        pin_hash_rounds=4,
    )


@pytest.fixture
def mailer():
    sender = MagicMock(spec=IMailSender)
    sender.send = AsyncMock()
    return sender


@pytest.fixture
def clock():
    return FakeClock()
