"""Repository Protocol for tw_bet."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_bet.domain.models import Bet


class BetRepositoryProtocol(Protocol):
    async def insert_bet(
        self,
        db: AsyncSession,
        user_id: int,
        war_id: int,
        amount: int,
        token_choice: str,
        transaction_signature: str,
    ) -> int | None:
        """Returns the new bet id, or None if the signature was already used."""
        ...

    async def get_bet(self, db: AsyncSession, bet_id: int) -> Bet | None: ...

    async def list_by_wallet(
        self, db: AsyncSession, wallet: str, limit: int
    ) -> list[Bet]: ...

    async def list_by_war(self, db: AsyncSession, war_id: int, limit: int) -> list[Bet]: ...

    async def mark_claimed(self, db: AsyncSession, bet_id: int, payout: int) -> bool: ...
