"""
Diagnostic Use Cases
"""

from .inspect_reset_tokens_use_case import InspectResetTokensUseCase
from .dtos import ResetTokensReport

__all__ = [
    "InspectResetTokensUseCase",
    "ResetTokensReport",
]
