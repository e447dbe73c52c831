"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_war.domain.models import PoolAudit, War, WarStats


class WarRepositoryProtocol(Protocol):
    async def get_war(self, db: AsyncSession, war_id: int) -> War | None: ...

    async def get_war_for_update(self, db: AsyncSession, war_id: int) -> War | None: ...

    async def list_wars(
        self,
        db: AsyncSession,
        status: str | None,
        active_at: datetime | None,
        limit: int,
    ) -> list[War]: ...

    async def list_by_creator(
        self, db: AsyncSession, wallet: str, status: str | None
    ) -> list[War]: ...

    async def create_war(
        self,
        db: AsyncSession,
        token_a_id: int,
        token_b_id: int,
        status: str,
        duration_hours: int,
        min_bet_amount: int,
        description: str | None,
        creator_wallet: str | None,
        start_time: datetime | None,
        end_time: datetime | None,
        token_a_start_price: Decimal | None,
        token_b_start_price: Decimal | None,
    ) -> int: ...

    async def increment_pool(
        self, db: AsyncSession, war_id: int, side: str, amount: int, now: datetime
    ) -> bool: ...

    async def mark_settled(
        self,
        db: AsyncSession,
        war_id: int,
        winner: str,
        token_a_end_price: Decimal,
        token_b_end_price: Decimal,
        platform_fee: int,
        distributable_pool: int,
        settled_at: datetime,
    ) -> bool: ...

    async def moderate(
        self,
        db: AsyncSession,
        war_id: int,
        status: str,
        admin: str,
        now: datetime,
        token_a_start_price: Decimal | None,
        token_b_start_price: Decimal | None,
    ) -> bool: ...

    async def get_stats(self, db: AsyncSession, war_id: int) -> WarStats | None: ...

    async def list_pool_audits(self, db: AsyncSession) -> list[PoolAudit]: ...
