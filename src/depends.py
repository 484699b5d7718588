from datetime import timedelta

from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.in_memory_reset_token_store import InMemoryResetTokenStore
from src.adapter.repositories.sql_reset_token_store import SqlResetTokenStore
from src.adapter.services.smtp_mailer import LogOnlyMailer, SmtpMailer
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.mailer import IMailer, MailDispatcher
from src.app.services.passwords import PasswordHasher
from src.app.services.reset_link import ResetLinkBuilder, resolve_base_url
from src.app.services.reset_token_manager import ResetTokenManager

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


# ============================================================================
# Application-scoped services (built once per app, kept on app.state)
# ============================================================================


def build_reset_token_manager(config, session_factory=AsyncSessionLocal) -> ResetTokenManager:
    if config.RESET_TOKEN_STORE == "database":
        store = SqlResetTokenStore(session_factory)
    elif config.RESET_TOKEN_STORE == "memory":
        store = InMemoryResetTokenStore()
    else:
        raise ValueError(f"Unknown RESET_TOKEN_STORE: {config.RESET_TOKEN_STORE}")

    return ResetTokenManager(store, ttl=timedelta(minutes=config.RESET_TOKEN_TTL_MINUTES))


def build_mailer(config) -> IMailer:
    if config.SMTP_HOST and config.SMTP_USER and config.SMTP_PASS:
        return SmtpMailer(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USER,
            password=config.SMTP_PASS,
            secure=config.SMTP_SECURE,
            timeout_seconds=config.SMTP_TIMEOUT_SECONDS,
        )
    return LogOnlyMailer()


def build_mail_dispatcher(config) -> MailDispatcher:
    return MailDispatcher(build_mailer(config), timeout_seconds=config.MAIL_SEND_TIMEOUT_SECONDS)


def build_reset_link_builder(config) -> ResetLinkBuilder:
    return ResetLinkBuilder(resolve_base_url(config))


def build_password_hasher(config) -> PasswordHasher:
    return PasswordHasher(rounds=config.BCRYPT_ROUNDS)


def get_reset_token_manager(request: Request) -> ResetTokenManager:
    return request.app.state.reset_token_manager


def get_mail_dispatcher(request: Request) -> MailDispatcher:
    return request.app.state.mail_dispatcher


def get_reset_link_builder(request: Request) -> ResetLinkBuilder:
    return request.app.state.reset_link_builder


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher
