"""
Input validation for the auth flows.
"""

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from libs.result import Error, Result, Return

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
_NUMBER_OR_SPECIAL = re.compile(r"[0-9!@#$%^&*]")


def validate_email_address(email: Optional[str]) -> Result[str]:
    """
    Check email syntax (no DNS lookups).

    Returns:
        Result with the normalized (stripped, lower-cased) email, or
        INVALID_EMAIL
    """
    if not email or not email.strip():
        return Return.err(Error("INVALID_EMAIL", "Please provide a valid email address"))

    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return Return.err(Error("INVALID_EMAIL", "Please provide a valid email address"))

    return Return.ok(email.strip().lower())


def validate_password(password: str) -> Result[None]:
    if len(password) < PASSWORD_MIN_LENGTH:
        return Return.err(
            Error(
                "INVALID_PASSWORD",
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
            )
        )

    if len(password) > PASSWORD_MAX_LENGTH:
        return Return.err(
            Error(
                "INVALID_PASSWORD",
                f"Password must be less than {PASSWORD_MAX_LENGTH} characters",
            )
        )

    if not _NUMBER_OR_SPECIAL.search(password):
        return Return.err(
            Error(
                "INVALID_PASSWORD",
                "Password must contain at least one number or special character",
            )
        )

    return Return.ok(None)
