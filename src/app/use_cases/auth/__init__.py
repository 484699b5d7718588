"""
Authentication Use Cases

All authentication-related business logic.
"""

from .signin_use_case import SigninUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .dtos import (
    PasswordResetResponse,
    SigninResponse,
    UserInfo,
)

__all__ = [
    # Use Cases
    "SigninUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # DTOs - Responses
    "PasswordResetResponse",
    "SigninResponse",
    # DTOs - Nested Models
    "UserInfo",
]
