from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import delete, func, update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.reset_token_store import IResetTokenStore
from src.domain.entities import PasswordResetToken


class SqlResetTokenStore(IResetTokenStore):
    """
    Reset token store backed by the password_reset_tokens table.

    Each call runs in its own short session and commits immediately, so token
    state is independent of any request's unit of work. claim() is a single
    conditional UPDATE; the row count decides which concurrent caller won.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def add(self, record: PasswordResetToken) -> None:
        async with self.session_factory() as session:
            session.add(
                PasswordResetToken(
                    token_hash=record.token_hash,
                    email=record.email,
                    used=record.used,
                    expires_at=record.expires_at,
                    created_at=record.created_at,
                )
            )
            await session.commit()

    async def get(self, token_hash: str) -> Optional[PasswordResetToken]:
        async with self.session_factory() as session:
            stmt = select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
            result = await session.exec(stmt)
            record = result.one_or_none()
            if record is not None:
                session.expunge(record)
            return record

    async def claim(self, token_hash: str, now: datetime) -> Optional[PasswordResetToken]:
        async with self.session_factory() as session:
            stmt = (
                update(PasswordResetToken)
                .where(
                    col(PasswordResetToken.token_hash) == token_hash,
                    col(PasswordResetToken.used).is_(False),
                    col(PasswordResetToken.expires_at) > now,
                )
                .values(used=True)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            await session.commit()
            claimed = result.rowcount == 1

        if not claimed:
            return None
        return await self.get(token_hash)

    async def delete_expired(self, now: datetime) -> int:
        async with self.session_factory() as session:
            stmt = delete(PasswordResetToken).where(col(PasswordResetToken.expires_at) < now)
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount or 0

    async def list_all(self) -> List[PasswordResetToken]:
        async with self.session_factory() as session:
            stmt = select(PasswordResetToken).order_by(col(PasswordResetToken.created_at))
            result = await session.exec(stmt)
            records = list(result.all())
            for record in records:
                session.expunge(record)
            return records

    async def count(self) -> int:
        async with self.session_factory() as session:
            stmt = select(func.count()).select_from(PasswordResetToken)
            result = await session.exec(stmt)
            return result.one()
