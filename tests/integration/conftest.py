import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.mailer import MailDispatcher
from src.depends import get_unit_of_work
from src.domain.entities import User
from tests.fixtures.mailers import RecordingMailer

ADMIN_API_KEY = "integration-admin-key"


class IntegrationConfig(ApplicationConfig):
    BCRYPT_ROUNDS = 4
    ADMIN_API_KEY = ADMIN_API_KEY
    DEBUG_ENDPOINTS_ENABLED = True
    PUBLIC_BASE_URL = "https://careers.example.com"
    RESET_TOKEN_STORE = "memory"
    AUTO_CREATE_TABLES = False


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
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest_asyncio.fixture
async def app(db_session, mailer):
    from src.api.app import create_app

    app = create_app(IntegrationConfig)
    app.state.mail_dispatcher = MailDispatcher(mailer, timeout_seconds=5)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def create_user(db_session, app):
    """Factory: insert an account with a known password"""

    async def _create(email: str = "user@example.com", password: str = "OldPass123!") -> User:
        user = User(
            email=email,
            password_hash=app.state.password_hasher.hash(password),
            name="Test User",
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ADMIN_API_KEY}
