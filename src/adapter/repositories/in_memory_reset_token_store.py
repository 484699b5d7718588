import threading
from datetime import datetime
from typing import Dict, List, Optional

from src.app.repositories.reset_token_store import IResetTokenStore
from src.domain.entities import PasswordResetToken


def _copy(record: PasswordResetToken) -> PasswordResetToken:
    return PasswordResetToken(
        token_hash=record.token_hash,
        email=record.email,
        used=record.used,
        expires_at=record.expires_at,
        created_at=record.created_at,
    )


class InMemoryResetTokenStore(IResetTokenStore):
    """
    Process-local reset token store.

    Every read-modify-write happens under one mutex with no awaits inside,
    so claim() is a true compare-and-swap. Records do not survive a restart
    and are not shared between worker processes.
    """

    def __init__(self):
        self._records: Dict[str, PasswordResetToken] = {}
        self._lock = threading.Lock()

    async def add(self, record: PasswordResetToken) -> None:
        with self._lock:
            self._records[record.token_hash] = _copy(record)

    async def get(self, token_hash: str) -> Optional[PasswordResetToken]:
        with self._lock:
            record = self._records.get(token_hash)
            return _copy(record) if record is not None else None

    async def claim(self, token_hash: str, now: datetime) -> Optional[PasswordResetToken]:
        with self._lock:
            record = self._records.get(token_hash)
            if record is None or not record.is_valid(now):
                return None
            record.used = True
            return _copy(record)

    async def delete_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [h for h, r in self._records.items() if r.expires_at < now]
            for token_hash in expired:
                del self._records[token_hash]
            return len(expired)

    async def list_all(self) -> List[PasswordResetToken]:
        with self._lock:
            records = sorted(self._records.values(), key=lambda r: r.created_at)
            return [_copy(r) for r in records]

    async def count(self) -> int:
        with self._lock:
            return len(self._records)
