from datetime import UTC, datetime, timedelta

from jose import jwt

from config import ApplicationConfig


def create_access_token(user_id: str, email: str, expires_delta: timedelta) -> str:
    """
    Create JWT access token

    Args:
        user_id: User UUID as string
        email: Account email
        expires_delta: Token expiration duration

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "email": email,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")
