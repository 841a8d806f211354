import pytest
from httpx import AsyncClient

from tests.utils.mail import extract_pin

GENERIC_MESSAGE = "If the email exists, a PIN has been sent"


async def request_pin(client: AsyncClient, mailer, email="user@example.com"):
    response = await client.post("/auth/forgot-password", json={"email": email})
    assert response.status_code == 200
    return response.json()["requestId"], extract_pin(mailer.outbox[-1].body_html)


@pytest.mark.asyncio
async def test_full_reset_flow(client: AsyncClient, mailer, registered_user):
    """Request, verify, reset, then log in with the new password"""
    response = await client.post("/auth/forgot-password", json={"email": "  USER@example.com "})
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == GENERIC_MESSAGE
    assert data["requestId"]

    assert len(mailer.outbox) == 1
    mail = mailer.outbox[0]
    assert mail.to == "user@example.com"
    pin = extract_pin(mail.body_html)
    assert data["requestId"] in mail.body_html

    response = await client.post("/auth/verify-pin", json={"requestId": data["requestId"], "pin": pin})
    assert response.status_code == 200
    reset_token = response.json()["resetToken"]

    response = await client.post("/auth/reset-password", json={
        "resetToken": reset_token,
        "newPassword": "NewPassword1!",
    })
    assert response.status_code == 200
    assert response.json()["message"] == "Password updated"

    old_login = await client.post("/auth/login", json={
        "email": "user@example.com",
        "password": "OldPassword1!",
    })
    assert old_login.status_code == 401

    new_login = await client.post("/auth/login", json={
        "email": "user@example.com",
        "password": "NewPassword1!",
    })
    assert new_login.status_code == 200


@pytest.mark.asyncio
async def test_unknown_email_is_indistinguishable(client: AsyncClient, mailer, registered_user):
    known = await client.post("/auth/forgot-password", json={"email": "user@example.com"})
    unknown = await client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert set(known.json()) == set(unknown.json()) == {"message", "requestId"}
    assert known.json()["message"] == unknown.json()["message"]
    assert len(mailer.outbox) == 1

    # A decoy requestId behaves like any other invalid request
    response = await client.post("/auth/verify-pin", json={
        "requestId": unknown.json()["requestId"],
        "pin": "123456",
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PIN"


@pytest.mark.asyncio
async def test_missing_email_is_validation_error(client: AsyncClient):
    response = await client.post("/auth/forgot-password", json={})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    response = await client.post("/auth/forgot-password", json={"email": "   "})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_pin_expires_after_ttl(client: AsyncClient, mailer, clock, registered_user):
    """PIN TTL of 1 minute: the correct PIN fails 61 seconds later"""
    request_id, pin = await request_pin(client, mailer)

    clock.advance(seconds=61)

    response = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PIN"


@pytest.mark.asyncio
async def test_five_wrong_pins_exhaust_request(client: AsyncClient, mailer, registered_user):
    request_id, pin = await request_pin(client, mailer)
    wrong = "000000" if pin != "000000" else "111111"

    for _ in range(5):
        response = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": wrong})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PIN"

    response = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_new_request_supersedes_previous(client: AsyncClient, mailer, registered_user):
    first_id, first_pin = await request_pin(client, mailer)
    second_id, second_pin = await request_pin(client, mailer)
    assert first_id != second_id

    response = await client.post("/auth/verify-pin", json={"requestId": first_id, "pin": first_pin})
    assert response.status_code == 400

    response = await client.post("/auth/verify-pin", json={"requestId": second_id, "pin": second_pin})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_verified_pin_cannot_be_reused(client: AsyncClient, mailer, registered_user):
    request_id, pin = await request_pin(client, mailer)

    first = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})
    second = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})

    assert first.status_code == 200
    assert second.status_code == 400


@pytest.mark.asyncio
async def test_reset_token_is_single_use(client: AsyncClient, mailer, registered_user):
    request_id, pin = await request_pin(client, mailer)
    verify = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})
    reset_token = verify.json()["resetToken"]

    first = await client.post("/auth/reset-password", json={
        "resetToken": reset_token,
        "newPassword": "NewPassword1!",
    })
    second = await client.post("/auth/reset-password", json={
        "resetToken": reset_token,
        "newPassword": "AnotherPass1!",
    })

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_reset_token_expires(client: AsyncClient, mailer, clock, registered_user):
    request_id, pin = await request_pin(client, mailer)
    verify = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})

    clock.advance(minutes=16)

    response = await client.post("/auth/reset-password", json={
        "resetToken": verify.json()["resetToken"],
        "newPassword": "NewPassword1!",
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_weak_password_rejected(client: AsyncClient, mailer, registered_user):
    request_id, pin = await request_pin(client, mailer)
    verify = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})

    response = await client.post("/auth/reset-password", json={
        "resetToken": verify.json()["resetToken"],
        "newPassword": "short",
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"


@pytest.mark.asyncio
async def test_resend_pin_cooldown_and_reissue(client: AsyncClient, mailer, clock, registered_user):
    request_id, old_pin = await request_pin(client, mailer)

    too_soon = await client.post("/auth/resend-pin", json={"requestId": request_id})
    assert too_soon.status_code == 429
    assert too_soon.json()["error"]["code"] == "RESEND_TOO_SOON"
    assert too_soon.headers["retry-after"] == "60"

    clock.advance(seconds=61)
    response = await client.post("/auth/resend-pin", json={"requestId": request_id})
    assert response.status_code == 200
    assert response.json()["message"] == "PIN resent"
    assert len(mailer.outbox) == 2

    new_pin = extract_pin(mailer.outbox[-1].body_html)
    if new_pin != old_pin:
        stale = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": old_pin})
        assert stale.status_code == 400

    response = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": new_pin})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_resend_rejected_for_unknown_or_verified(client: AsyncClient, mailer, clock, registered_user):
    response = await client.post("/auth/resend-pin", json={"requestId": "not-a-request"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"

    request_id, pin = await request_pin(client, mailer)
    await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})
    clock.advance(seconds=61)

    response = await client.post("/auth/resend-pin", json={"requestId": request_id})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


@pytest.mark.asyncio
async def test_overlong_pin_counts_as_wrong_pin(client: AsyncClient, mailer, registered_user):
    request_id, pin = await request_pin(client, mailer)

    response = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": "1" * 80})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PIN"

    # One attempt is gone, the real PIN still works
    response = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_overlong_new_password_rejected(client: AsyncClient, mailer, registered_user):
    request_id, pin = await request_pin(client, mailer)
    verify = await client.post("/auth/verify-pin", json={"requestId": request_id, "pin": pin})
    reset_token = verify.json()["resetToken"]

    response = await client.post("/auth/reset-password", json={
        "resetToken": reset_token,
        "newPassword": "a" * 80,
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"

    # The token was not consumed by the rejected attempt
    response = await client.post("/auth/reset-password", json={
        "resetToken": reset_token,
        "newPassword": "NewPassword1!",
    })
    assert response.status_code == 200
