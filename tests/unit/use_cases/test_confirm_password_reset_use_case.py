"""
Unit tests for ConfirmPasswordResetUseCase

Tokens live in the in-memory store driven by a fake clock; bcrypt runs at
minimum cost.
"""
import asyncio

import pytest

from src.app.services.passwords import PasswordHasher
from src.app.services.reset_token_manager import hash_token
from src.app.use_cases.auth.confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from src.domain.entities import User


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def use_case(mock_uow, token_manager, hasher):
    return ConfirmPasswordResetUseCase(mock_uow, token_manager, hasher)


@pytest.fixture
def user(mock_uow):
    user = User(email="user@example.com", password_hash="old_hashed_password")
    mock_uow.users.get_by_email.return_value = user
    return user


@pytest.mark.asyncio
async def test_successful_password_reset_confirmation(use_case, mock_uow, token_manager, hasher, user):
    """Valid token sets a new bcrypt hash and is consumed"""
    # Arrange
    await token_manager.store_token("reset_token_12345", "user@example.com")

    # Act
    result = await use_case.execute("reset_token_12345", "NewSecurePass123!", ip_address="10.0.0.1")

    # Assert
    assert result.is_ok()
    assert result.value.success is True
    assert result.value.message == "Password has been successfully reset"

    mock_uow.users.update_password.assert_called_once()
    email, password_hash = mock_uow.users.update_password.call_args[0]
    assert email == "user@example.com"
    assert hasher.verify("NewSecurePass123!", password_hash)

    assert (await token_manager.verify_token("reset_token_12345")).valid is False

    audit_event = mock_uow.audit_events.create.call_args[0][0]
    assert audit_event.action == "password_reset_confirmed"
    assert audit_event.email == "user@example.com"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_token_cannot_be_reused(use_case, mock_uow, token_manager, user):
    # Arrange
    await token_manager.store_token("reset_token_12345", "user@example.com")
    await use_case.execute("reset_token_12345", "NewSecurePass123!")

    # Act
    result = await use_case.execute("reset_token_12345", "AnotherPass456!")

    # Assert
    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    assert result.error.message == "Invalid or expired reset token"
    assert mock_uow.users.update_password.call_count == 1


@pytest.mark.asyncio
async def test_expired_token_rejected(use_case, mock_uow, token_manager, clock, user):
    await token_manager.store_token("reset_token_12345", "user@example.com")
    clock.advance(minutes=16)

    result = await use_case.execute("reset_token_12345", "NewSecurePass123!")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    mock_uow.users.update_password.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_token_rejected(use_case, mock_uow, user):
    result = await use_case.execute("never-issued", "NewSecurePass123!")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    mock_uow.users.get_by_email.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "token,password",
    [(None, "NewSecurePass123!"), ("", "NewSecurePass123!"), ("abc", None), ("abc", "")],
)
async def test_missing_fields(use_case, token, password):
    result = await use_case.execute(token, password)

    assert result.is_err()
    assert result.error.code == "MISSING_FIELDS"
    assert result.error.message == "Token and password are required"


@pytest.mark.asyncio
async def test_weak_password_keeps_token_valid(use_case, mock_uow, token_manager, user):
    """Policy failure is checked before the token is touched"""
    await token_manager.store_token("reset_token_12345", "user@example.com")

    result = await use_case.execute("reset_token_12345", "abc")

    assert result.is_err()
    assert result.error.code == "INVALID_PASSWORD"
    assert (await token_manager.verify_token("reset_token_12345")).valid is True


@pytest.mark.asyncio
async def test_account_removed_after_request(use_case, mock_uow, token_manager):
    # Arrange
    await token_manager.store_token("reset_token_12345", "gone@example.com")
    mock_uow.users.get_by_email.return_value = None

    # Act
    result = await use_case.execute("reset_token_12345", "NewSecurePass123!")

    # Assert
    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"
    mock_uow.users.update_password.assert_not_called()


@pytest.mark.asyncio
async def test_concurrent_confirmations_single_winner(use_case, mock_uow, token_manager, user):
    """Two confirmations racing on one token: exactly one password write"""
    # Arrange
    await token_manager.store_token("reset_token_12345", "user@example.com")

    # Act
    results = await asyncio.gather(
        use_case.execute("reset_token_12345", "FirstPass123!"),
        use_case.execute("reset_token_12345", "SecondPass456!"),
    )

    # Assert
    assert sum(1 for r in results if r.is_ok()) == 1
    loser = next(r for r in results if r.is_err())
    assert loser.error.code == "INVALID_TOKEN"
    mock_uow.users.update_password.assert_called_once()


@pytest.mark.asyncio
async def test_storage_failure_returns_internal_error(use_case, mock_uow, token_manager, user):
    # Arrange
    await token_manager.store_token("reset_token_12345", "user@example.com")
    mock_uow.users.update_password.side_effect = RuntimeError("database down")

    # Act
    result = await use_case.execute("reset_token_12345", "NewSecurePass123!")

    # Assert
    assert result.is_err()
    assert result.error.code == "INTERNAL_ERROR"
    assert result.error.message == "An error occurred while resetting password. Please try again."
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_audit_records_hash_prefix(use_case, mock_uow, token_manager, user):
    """Confirmation audit uses the same hash prefix as the request audit and token listing"""
    # Arrange
    await token_manager.store_token("reset_token_12345", "user@example.com")
    listed = (await token_manager.get_all_tokens())[0].token

    # Act
    await use_case.execute("reset_token_12345", "NewSecurePass123!")

    # Assert
    audit_event = mock_uow.audit_events.create.call_args[0][0]
    assert audit_event.event_metadata["token"] == hash_token("reset_token_12345")[:8] + "..."
    assert audit_event.event_metadata["token"] == listed
    assert "reset_to" not in audit_event.event_metadata["token"]
