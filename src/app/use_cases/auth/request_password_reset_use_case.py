"""
Request Password Reset Use Case

Issues a reset token for a known account and mails the reset link.
"""

import logging
import secrets
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.mailer import MailDispatcher
from src.app.services.password_reset_email import build_password_reset_email
from src.app.services.reset_link import ResetLinkBuilder
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validation import validate_email_address
from src.domain.entities import AuditEvent, PasswordResetToken
from .dtos import PasswordResetResponse

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = (
    "If an account with that email exists, we have sent you a password reset link."
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Only a syntactically invalid email is rejected; that reveals nothing
      about which accounts exist
    - Token is 32 random bytes (256 bits), hex encoded
    - A token is issued and mailed only when the account exists
    - Mail goes out in the background; delivery failures are logged and
      never change the response
    - Known and unknown emails get the same response, also when the audit
      write fails
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_manager: ResetTokenManager,
        link_builder: ResetLinkBuilder,
        mail_dispatcher: MailDispatcher,
    ):
        self.uow = uow
        self.token_manager = token_manager
        self.link_builder = link_builder
        self.mail_dispatcher = mail_dispatcher

    async def execute(
        self, email: Optional[str], ip_address: Optional[str] = None
    ) -> Result[PasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: Email address as submitted
            ip_address: Client address, recorded in the audit log

        Returns:
            Result with the generic success response, or Error
            (INVALID_EMAIL, INTERNAL_ERROR)
        """
        email_validation = validate_email_address(email)
        if email_validation.is_err():
            return Return.err(email_validation.error)
        normalized_email = email_validation.value

        try:
            async with self.uow:
                user = await self.uow.users.get_by_email(normalized_email)

                # No enumeration - same response, but no token and no mail
                if user is None:
                    logger.info("Password reset requested for unknown account")
                    return Return.ok(self._response())

                reset_token = secrets.token_hex(32)
                record = await self.token_manager.store_token(reset_token, normalized_email)

                await self._record_audit(record, ip_address)
        except Exception:
            logger.exception("Password reset request failed")
            return Return.err(
                Error("INTERNAL_ERROR", "An error occurred. Please try again later.")
            )

        reset_url = self.link_builder.build(reset_token)
        expires_in_minutes = int(self.token_manager.ttl.total_seconds() // 60)
        self.mail_dispatcher.dispatch(
            build_password_reset_email(normalized_email, reset_url, expires_in_minutes)
        )

        return Return.ok(self._response())

    async def _record_audit(self, record: PasswordResetToken, ip_address: Optional[str]) -> None:
        """
        Best-effort audit write.

        A failure here must not turn into an error response: unknown emails
        never reach the audit write, so the response would reveal the account.
        """
        try:
            audit_event = AuditEvent(
                email=record.email,
                action="password_reset_requested",
                success=True,
                ip_address=ip_address,
                event_metadata={
                    "token": f"{record.token_hash[:8]}...",
                    "expires_at": record.expires_at.isoformat(),
                },
            )
            await self.uow.audit_events.create(audit_event)
            await self.uow.commit()
        except Exception:
            logger.exception("Failed to write password reset audit event")

    @staticmethod
    def _response() -> PasswordResetResponse:
        return PasswordResetResponse(success=True, message=RESET_REQUESTED_MESSAGE)
