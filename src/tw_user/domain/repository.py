"""Repository Protocol for tw_user."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_user.domain.models import BettingRecord, User


class UserRepositoryProtocol(Protocol):
    async def get_or_create(self, db: AsyncSession, wallet: str) -> int: ...

    async def get_by_wallet(self, db: AsyncSession, wallet: str) -> User | None: ...

    async def get_record(self, db: AsyncSession, wallet: str) -> BettingRecord | None: ...

    async def username_owner(self, db: AsyncSession, username: str) -> str | None: ...

    async def set_username(
        self, db: AsyncSession, wallet: str, username: str
    ) -> User | None: ...

    async def leaderboard(
        self, db: AsyncSession, since: datetime | None, limit: int
    ) -> list[BettingRecord]: ...
