from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.domain.entities import PasswordResetToken


class IResetTokenStore(ABC):
    """
    Reset token store interface - application layer

    Only ResetTokenManager talks to a store. Implementations never hand out
    the records they hold, only copies.
    """

    @abstractmethod
    async def add(self, record: PasswordResetToken) -> None:
        """Insert a new token record"""
        pass

    @abstractmethod
    async def get(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get a copy of the record for token_hash"""
        pass

    @abstractmethod
    async def claim(self, token_hash: str, now: datetime) -> Optional[PasswordResetToken]:
        """
        Atomically flip used=False -> True if the record is still valid at now.

        Returns:
            Copy of the claimed record, or None if it was missing, expired,
            already used, or claimed concurrently by another caller
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete records with expires_at < now, return how many were removed"""
        pass

    @abstractmethod
    async def list_all(self) -> List[PasswordResetToken]:
        """Copies of all records, oldest first"""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of records currently held"""
        pass
