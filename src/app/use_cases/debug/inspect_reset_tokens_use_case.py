"""
Inspect Reset Tokens Use Case

Operational view of outstanding reset tokens. Also sweeps expired tokens.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.reset_token_manager import ResetTokenManager
from .dtos import ResetTokensReport

logger = logging.getLogger(__name__)


class InspectResetTokensUseCase:
    """
    Use case for the diagnostic token listing.

    Business Rules:
    - Tokens are listed and counted before the cleanup sweep runs
    - Token values are masked to the first 8 hash characters
    """

    def __init__(self, token_manager: ResetTokenManager):
        self.token_manager = token_manager

    async def execute(self) -> Result[ResetTokensReport]:
        try:
            tokens = await self.token_manager.get_all_tokens()
            count = await self.token_manager.get_token_count()
            cleaned = await self.token_manager.cleanup_expired_tokens()
        except Exception:
            logger.exception("Failed to inspect reset tokens")
            return Return.err(
                Error("INTERNAL_ERROR", "Failed to get token information")
            )

        return Return.ok(
            ResetTokensReport(
                token_count=count,
                tokens_cleaned_up=cleaned,
                tokens=tokens,
            )
        )
