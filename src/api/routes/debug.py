"""
Debug API Routes

Operational introspection. Disabled unless DEBUG_ENDPOINTS_ENABLED is set,
and always behind the admin API key.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import ServerError
from src.api.utils.admin_auth import require_debug_endpoints, verify_admin_api_key
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.use_cases.debug import InspectResetTokensUseCase, ResetTokensReport
from src.depends import get_reset_token_manager

router = APIRouter(prefix="/debug", tags=["Debug"])


@router.get(
    "/tokens",
    status_code=status.HTTP_200_OK,
    response_model=ResetTokensReport,
    dependencies=[Depends(require_debug_endpoints), Depends(verify_admin_api_key)],
)
async def list_reset_tokens(
    token_manager: ResetTokenManager = Depends(get_reset_token_manager),
):
    """
    List Reset Tokens

    Lists outstanding reset tokens (masked), then removes expired ones.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: Debug endpoints disabled
        - 500 Internal Server Error: Token store unavailable
    """
    use_case = InspectResetTokensUseCase(token_manager)
    result = await use_case.execute()

    if result.is_err():
        error = result.error
        raise ServerError(error, public_message=error.message)

    return result.value
