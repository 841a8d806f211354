import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.mail_sender import OutboxMailSender
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.reset_policy import ResetPolicy
from src.depends import get_clock, get_mail_sender, get_reset_policy, get_unit_of_work
from tests.utils.clock import FakeClock


class TestConfig(ApplicationConfig):
    __test__ = False

    ENABLE_DEBUG_ROUTES = True


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
def mailer():
    return OutboxMailSender()


@pytest_asyncio.fixture
def policy():
    return ResetPolicy(pin_ttl_minutes=1, pin_hash_rounds=4)


@pytest_asyncio.fixture
async def client(db_session, clock, mailer, policy):
    from src.api.app import create_app

    app = create_app(TestConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_mail_sender] = lambda: mailer
    app.dependency_overrides[get_reset_policy] = lambda: policy
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def registered_user(client):
    response = await client.post("/auth/register", json={
        "idNumber": "1020304050",
        "name": "Marta Gómez",
        "email": "user@example.com",
        "password": "OldPassword1!",
        "role": "employee",
        "birthDate": "1990-05-17",
    })
    assert response.status_code == 201
    return response.json()["user"]
