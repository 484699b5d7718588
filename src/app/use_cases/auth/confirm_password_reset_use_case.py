"""
Confirm Password Reset Use Case

Sets a new password for the account bound to a valid reset token.
"""

import asyncio
import logging
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.passwords import PasswordHasher
from src.app.services.reset_token_manager import ResetTokenManager, hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validation import validate_password
from src.domain.entities import AuditEvent
from .dtos import PasswordResetResponse

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired reset token"


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - Missing, expired and already used tokens all fail with the same
      INVALID_TOKEN error
    - New password must pass the password policy
    - The token is consumed atomically before the new password is stored, so
      two concurrent confirmations of one token cannot both succeed
    - Audit event created for security tracking
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_manager: ResetTokenManager,
        hasher: PasswordHasher,
    ):
        self.uow = uow
        self.token_manager = token_manager
        self.hasher = hasher

    async def execute(
        self,
        token: Optional[str],
        new_password: Optional[str],
        ip_address: Optional[str] = None,
    ) -> Result[PasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Reset token from the emailed link
            new_password: New password to set
            ip_address: Client address, recorded in the audit log

        Returns:
            Result with success response, or Error

        Errors:
            - MISSING_FIELDS: Token or password not provided
            - INVALID_PASSWORD: Password does not meet the policy
            - INVALID_TOKEN: Token missing, expired, or already used
            - USER_NOT_FOUND: No account for the token's email
            - INTERNAL_ERROR: Storage or hashing failure
        """
        if not token or not new_password:
            return Return.err(Error("MISSING_FIELDS", "Token and password are required"))

        password_validation = validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        try:
            verification = await self.token_manager.verify_token(token)
            if not verification.valid:
                return Return.err(Error("INVALID_TOKEN", INVALID_TOKEN_MESSAGE))

            async with self.uow:
                user = await self.uow.users.get_by_email(verification.email)
                if user is None:
                    # Only possible if the account was removed after the token was issued
                    return Return.err(Error("USER_NOT_FOUND", "User not found"))

                password_hash = await asyncio.to_thread(self.hasher.hash, new_password)

                # Atomic invalidate - a concurrent confirmation of the same token loses here
                claim = await self.token_manager.consume_token(token)
                if not claim.valid:
                    return Return.err(Error("INVALID_TOKEN", INVALID_TOKEN_MESSAGE))

                updated = await self.uow.users.update_password(claim.email, password_hash)
                if not updated:
                    return Return.err(Error("USER_NOT_FOUND", "User not found"))

                audit_event = AuditEvent(
                    email=claim.email,
                    action="password_reset_confirmed",
                    success=True,
                    ip_address=ip_address,
                    event_metadata={"token": f"{hash_token(token)[:8]}..."},
                )
                await self.uow.audit_events.create(audit_event)

                await self.uow.commit()
        except Exception:
            logger.exception("Password reset confirmation failed")
            return Return.err(
                Error(
                    "INTERNAL_ERROR",
                    "An error occurred while resetting password. Please try again.",
                )
            )

        logger.info(f"Password reset successful for {claim.email}")
        return Return.ok(
            PasswordResetResponse(success=True, message="Password has been successfully reset")
        )
