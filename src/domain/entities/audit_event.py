"""
AuditEvent Entity

Immutable log of authentication and password reset events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of security relevant events.

    Business Rules:
    - Immutable (never updated or deleted)
    - email nullable for events without a resolved account
    - Metadata stores additional context (token prefix, reason, etc.)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    email: Optional[str] = Field(default=None, index=True, max_length=255)
    action: str = Field(max_length=100)  # e.g., "user_signin", "password_reset_requested"
    success: bool = Field(default=True)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_email_action", "email", "action"),
    )
