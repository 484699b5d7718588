"""
Authentication Use Case DTOs (Data Transfer Objects)

All Response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional

from pydantic import BaseModel


# ============================================================================
# Response DTOs
# ============================================================================


class PasswordResetResponse(BaseModel):
    """Response for the request and confirm password reset use cases"""

    success: bool
    message: str


class UserInfo(BaseModel):
    """Public account fields returned after sign-in"""

    id: str
    email: str
    name: Optional[str] = None


class SigninResponse(BaseModel):
    """Response for user sign-in use case"""

    success: bool
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserInfo
