from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field, field_validator

from src.api.error import ClientError, ServerError
from src.app.services.mailer import MailDispatcher
from src.app.services.passwords import PasswordHasher
from src.app.services.reset_link import ResetLinkBuilder
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ConfirmPasswordResetUseCase,
    PasswordResetResponse,
    RequestPasswordResetUseCase,
    SigninResponse,
    SigninUseCase,
)
from src.depends import (
    get_mail_dispatcher,
    get_password_hasher,
    get_reset_link_builder,
    get_reset_token_manager,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _string_or_none(value):
    # Non-string JSON values are treated as absent so the use case answers with its 400
    return value if isinstance(value, str) else None


class SigninRequest(BaseModel):
    """
    Sign-in HTTP request payload

    Fields are optional here so that missing values get the 400 response of
    the use case instead of FastAPI's 422.
    """

    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")

    strings_only = field_validator("email", "password", mode="before")(_string_or_none)


@router.post("/signin", status_code=status.HTTP_200_OK, response_model=SigninResponse)
async def signin(
    payload: SigninRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    User Sign-in

    Authenticates user and returns a JWT access token.

    Raises:
        - 400 Bad Request: Missing fields or malformed email
        - 401 Unauthorized: Invalid credentials
        - 500 Internal Server Error: Server error
    """
    ttl = timedelta(minutes=request.app.state.config.ACCESS_TOKEN_MINUTES)
    use_case = SigninUseCase(uow, hasher, access_token_ttl=ttl)
    result = await use_case.execute(payload.email, payload.password, client_ip(request))

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code in ("MISSING_FIELDS", "INVALID_EMAIL"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class ForgotPasswordRequest(BaseModel):
    """
    Forgot password HTTP request payload

    Email syntax is checked by the use case so a malformed address is a 400.
    """

    email: Optional[str] = Field(None, description="Account email address")

    strings_only = field_validator("email", mode="before")(_string_or_none)


@router.post(
    "/forgot-password", status_code=status.HTTP_200_OK, response_model=PasswordResetResponse
)
async def forgot_password(
    payload: ForgotPasswordRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_manager: ResetTokenManager = Depends(get_reset_token_manager),
    link_builder: ResetLinkBuilder = Depends(get_reset_link_builder),
    mail_dispatcher: MailDispatcher = Depends(get_mail_dispatcher),
):
    """
    Request Password Reset

    Issues a 15-minute reset token and mails the reset link.

    Security:
        - No email enumeration (same response for known and unknown emails)
        - Token is 32 random bytes, stored only as its SHA-256 hash
        - Mail delivery runs in the background; its outcome never changes the response

    Returns:
        - 200 OK: Always, for any well-formed email
        - 400 Bad Request: Missing or malformed email
        - 500 Internal Server Error: Server error
    """
    use_case = RequestPasswordResetUseCase(uow, token_manager, link_builder, mail_dispatcher)
    result = await use_case.execute(payload.email, client_ip(request))

    if result.is_err():
        error = result.error
        if error.code == "INVALID_EMAIL":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error, public_message=error.message)

    return result.value


class ResetPasswordRequest(BaseModel):
    """
    Reset password HTTP request payload

    Validates incoming password reset confirmation.
    """

    token: Optional[str] = Field(None, description="Password reset token from email")
    password: Optional[str] = Field(None, description="New password")

    strings_only = field_validator("token", "password", mode="before")(_string_or_none)


@router.post(
    "/reset-password", status_code=status.HTTP_200_OK, response_model=PasswordResetResponse
)
async def reset_password(
    payload: ResetPasswordRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_manager: ResetTokenManager = Depends(get_reset_token_manager),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Confirm Password Reset

    Validates the reset token and sets the new password.

    Security:
        - Expired, used and unknown tokens get the same error
        - Token is single-use; replays are rejected
        - Password must meet the password policy

    Raises:
        - 400 Bad Request: Missing fields, invalid password, invalid or expired token
        - 404 Not Found: No account for the token's email
        - 500 Internal Server Error: Server error
    """
    use_case = ConfirmPasswordResetUseCase(uow, token_manager, hasher)
    result = await use_case.execute(payload.token, payload.password, client_ip(request))

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code in ("MISSING_FIELDS", "INVALID_PASSWORD", "INVALID_TOKEN"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error, public_message=error.message)

    return result.value
