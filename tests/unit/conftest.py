import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.repositories.in_memory_reset_token_store import InMemoryResetTokenStore
from src.app.services.reset_token_manager import ResetTokenManager
from tests.fixtures.clock import FakeClock


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all required repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock()
    uow.users.update = AsyncMock()
    uow.users.update_password = AsyncMock(return_value=True)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()

    return uow


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_manager(clock):
    return ResetTokenManager(InMemoryResetTokenStore(), clock=clock)
