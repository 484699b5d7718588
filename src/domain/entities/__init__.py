"""
Career Assistant Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

from .user import User
from .audit_event import AuditEvent
from .password_reset_token import PasswordResetToken

__all__ = [
    "User",
    "AuditEvent",
    "PasswordResetToken",
]
