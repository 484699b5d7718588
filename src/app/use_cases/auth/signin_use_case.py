"""
Signin Use Case

Authenticates a user by email and password and issues a JWT access token.
"""

import asyncio
from datetime import timedelta
from typing import Optional

from libs.result import Error, Result, Return
from src.api.utils.jwt import create_access_token
from src.app.services.passwords import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validation import validate_email_address
from src.domain.base import utcnow
from src.domain.entities import AuditEvent
from .dtos import SigninResponse, UserInfo


class SigninUseCase:
    """
    Use case for user sign-in.

    Business Rules:
    - Unknown emails still run a bcrypt check so timing does not reveal
      which accounts exist
    - Unknown email and wrong password fail with the same error
    - Every attempt, successful or not, is written to the audit log
    - Updates user.last_login_at
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        access_token_ttl: timedelta = timedelta(minutes=60),
    ):
        self.uow = uow
        self.hasher = hasher
        self.access_token_ttl = access_token_ttl

    async def execute(
        self,
        email: Optional[str],
        password: Optional[str],
        ip_address: Optional[str] = None,
    ) -> Result[SigninResponse]:
        """
        Execute signin use case.

        Returns:
            Result with SigninResponse, or Error
            (MISSING_FIELDS, INVALID_EMAIL, INVALID_CREDENTIALS)
        """
        if not email or not password:
            return Return.err(Error("MISSING_FIELDS", "Email and password are required"))

        email_validation = validate_email_address(email)
        if email_validation.is_err():
            return Return.err(
                Error("INVALID_EMAIL", "Please enter a valid email address")
            )
        normalized_email = email_validation.value

        async with self.uow:
            user = await self.uow.users.get_by_email(normalized_email)

            if user is None:
                await asyncio.to_thread(self.hasher.burn, password)
                password_valid = False
            else:
                password_valid = await asyncio.to_thread(
                    self.hasher.verify, password, user.password_hash
                )

            if not password_valid:
                await self.uow.audit_events.create(
                    AuditEvent(
                        email=normalized_email,
                        action="user_signin",
                        success=False,
                        ip_address=ip_address,
                        event_metadata={"reason": "authentication_failed"},
                    )
                )
                await self.uow.commit()
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            user.last_login_at = utcnow()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    email=normalized_email,
                    action="user_signin",
                    success=True,
                    ip_address=ip_address,
                )
            )
            await self.uow.commit()

            access_token = create_access_token(
                user_id=str(user.id),
                email=user.email,
                expires_delta=self.access_token_ttl,
            )

            return Return.ok(
                SigninResponse(
                    success=True,
                    message="Sign-in successful!",
                    access_token=access_token,
                    user=UserInfo(id=str(user.id), email=user.email, name=user.name),
                )
            )
