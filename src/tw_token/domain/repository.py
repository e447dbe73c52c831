"""Repository Protocols for tw_token.

TokenRepositoryProtocol is the registry used by the API.
PriceSourceProtocol is the narrow view the settlement engine needs: the
latest price pushed by the external price feed for each token.
"""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_token.domain.models import PricePoint, Token


class PriceSourceProtocol(Protocol):
    async def get_current_prices(
        self, db: AsyncSession, token_ids: list[int]
    ) -> dict[int, Decimal]: ...


class TokenRepositoryProtocol(PriceSourceProtocol, Protocol):
    async def list_tokens(self, db: AsyncSession) -> list[Token]: ...

    async def get_by_symbol(self, db: AsyncSession, symbol: str) -> Token | None: ...

    async def get_by_id(self, db: AsyncSession, token_id: int) -> Token | None: ...

    async def upsert_price(
        self,
        db: AsyncSession,
        symbol: str,
        name: str,
        price: Decimal,
        market_cap: int | None,
        contract_address: str | None,
    ) -> Token: ...

    async def list_history(
        self, db: AsyncSession, token_id: int, limit: int
    ) -> list[PricePoint]: ...
