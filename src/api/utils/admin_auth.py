"""
Admin API Key Authentication

Guards operational endpoints such as the reset token listing.
"""

import secrets

from fastapi import Header, Request, status
from libs.result import Error
from src.api.error import ClientError


async def verify_admin_api_key(request: Request, x_admin_api_key: str = Header(None)):
    """
    Verify admin API key from X-Admin-API-Key header.

    Args:
        x_admin_api_key: API key from X-Admin-API-Key header

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    valid_admin_key = request.app.state.config.ADMIN_API_KEY

    if not secrets.compare_digest(x_admin_api_key, valid_admin_key):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True


async def require_debug_endpoints(request: Request):
    """Hide diagnostic endpoints (404) unless DEBUG_ENDPOINTS_ENABLED is set"""
    if not request.app.state.config.DEBUG_ENDPOINTS_ENABLED:
        raise ClientError(
            Error("NOT_FOUND", "Not found"),
            status_code=status.HTTP_404_NOT_FOUND,
        )
