"""
Reset Token Manager

Authoritative owner of password reset tokens and the single source of truth
for token validity.
"""

import hashlib
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from pydantic import BaseModel

from src.app.repositories.reset_token_store import IResetTokenStore
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(minutes=15)


class TokenVerification(BaseModel):
    """Outcome of a token check; email is only set when valid"""

    valid: bool
    email: Optional[str] = None


class ResetTokenInfo(BaseModel):
    """Diagnostic view of a stored token"""

    token: str
    email: str
    created_at: datetime
    expires_at: datetime
    used: bool


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def normalize_email(email: str) -> str:
    return email.strip().lower()


class ResetTokenManager:
    """
    Issues, checks and retires password reset tokens.

    Business Rules:
    - A token is valid iff it is unused and now < expires_at
    - Lifetime is fixed at issuance (15 minutes by default)
    - "Not found", "expired" and "used" are reported as valid=False,
      never as exceptions; only storage faults raise
    - consume_token is the atomic verify + invalidate: of several concurrent
      callers on one token at most one sees valid=True
    """

    def __init__(
        self,
        store: IResetTokenStore,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.ttl = ttl
        self.clock = clock

    async def store_token(self, token: str, email: str) -> PasswordResetToken:
        now = self.clock()
        record = PasswordResetToken(
            token_hash=hash_token(token),
            email=normalize_email(email),
            used=False,
            created_at=now,
            expires_at=now + self.ttl,
        )
        await self.store.add(record)
        logger.info(
            f"Reset token {record.token_hash[:8]}... stored for {record.email}, "
            f"expires at {record.expires_at.isoformat()}"
        )
        return record

    async def verify_token(self, token: str) -> TokenVerification:
        """Read-only validity check"""
        token_hash = hash_token(token)
        record = await self.store.get(token_hash)
        if record is None:
            logger.info(f"Reset token {token_hash[:8]}... not found")
            return TokenVerification(valid=False)

        if record.used:
            logger.info(f"Reset token {token_hash[:8]}... already used")
            return TokenVerification(valid=False)

        if not record.is_valid(self.clock()):
            logger.info(f"Reset token {token_hash[:8]}... expired for {record.email}")
            return TokenVerification(valid=False)

        return TokenVerification(valid=True, email=record.email)

    async def consume_token(self, token: str) -> TokenVerification:
        token_hash = hash_token(token)
        record = await self.store.claim(token_hash, self.clock())
        if record is None:
            return TokenVerification(valid=False)

        logger.info(f"Reset token {token_hash[:8]}... consumed for {record.email}")
        return TokenVerification(valid=True, email=record.email)

    async def invalidate_token(self, token: str) -> None:
        """Mark token as used; a no-op for missing or already invalid tokens"""
        token_hash = hash_token(token)
        record = await self.store.claim(token_hash, self.clock())
        if record is not None:
            logger.info(f"Invalidated reset token {token_hash[:8]}... for {record.email}")

    async def cleanup_expired_tokens(self) -> int:
        cleaned = await self.store.delete_expired(self.clock())
        if cleaned > 0:
            logger.info(f"Cleaned up {cleaned} expired reset tokens")
        return cleaned

    async def get_all_tokens(self) -> List[ResetTokenInfo]:
        records = await self.store.list_all()
        return [
            ResetTokenInfo(
                token=f"{record.token_hash[:8]}...",
                email=record.email,
                created_at=record.created_at,
                expires_at=record.expires_at,
                used=record.used,
            )
            for record in records
        ]

    async def get_token_count(self) -> int:
        return await self.store.count()
