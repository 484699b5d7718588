"""
PasswordResetToken Entity

Single-use password reset tokens.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - single-use password reset tokens.

    Business Rules:
    - Expires 15 minutes after issuance
    - Keyed by the SHA-256 hash of the random token; the plain token only
      travels inside the reset link
    - Single-use: marked as used when a reset is confirmed
    - Several outstanding tokens per email are tolerated
    """

    __tablename__ = "password_reset_tokens"

    token_hash: str = Field(primary_key=True, max_length=64)  # SHA-256 output
    email: str = Field(max_length=255)

    used: bool = Field(default=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_email", "email"),
    )

    def is_valid(self, now: datetime) -> bool:
        return not self.used and now < self.expires_at
