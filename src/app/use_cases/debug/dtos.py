"""
Diagnostic Use Case DTOs
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from src.app.services.reset_token_manager import ResetTokenInfo


class ResetTokensReport(BaseModel):
    """Snapshot of the reset token store (serialized with camelCase keys)"""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    token_count: int = Field(alias="tokenCount")
    tokens_cleaned_up: int = Field(alias="tokensCleanedUp")
    tokens: List[ResetTokenInfo]
