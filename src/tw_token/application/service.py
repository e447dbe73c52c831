"""TokenApplicationService — token registry reads and price-feed writes."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_common.errors import TokenNotFoundError
from src.tw_token.application.schemas import (
    PriceHistoryResponse,
    PricePointOut,
    PriceUpdateRequest,
    TokenOut,
    normalize_symbol,
)
from src.tw_token.domain.repository import TokenRepositoryProtocol
from src.tw_token.infrastructure.persistence import TokenRepository

logger = logging.getLogger(__name__)


class TokenApplicationService:
    def __init__(self, repo: TokenRepositoryProtocol | None = None) -> None:
        self._repo: TokenRepositoryProtocol = repo or TokenRepository()

    async def list_tokens(self, db: AsyncSession) -> list[TokenOut]:
        return [TokenOut.from_domain(t) for t in await self._repo.list_tokens(db)]

    async def get_token(self, db: AsyncSession, symbol: str) -> TokenOut:
        token = await self._repo.get_by_symbol(db, normalize_symbol(symbol))
        if token is None:
            raise TokenNotFoundError(symbol)
        return TokenOut.from_domain(token)

    async def get_history(
        self, db: AsyncSession, symbol: str, limit: int
    ) -> PriceHistoryResponse:
        token = await self._repo.get_by_symbol(db, normalize_symbol(symbol))
        if token is None:
            raise TokenNotFoundError(symbol)
        points = await self._repo.list_history(db, token.id, limit)
        return PriceHistoryResponse(
            symbol=token.symbol,
            points=[PricePointOut.from_domain(p) for p in points],
        )

    async def record_price(
        self, db: AsyncSession, symbol: str, req: PriceUpdateRequest
    ) -> TokenOut:
        try:
            token = await self._repo.upsert_price(
                db,
                normalize_symbol(symbol),
                req.name,
                req.price,
                req.market_cap,
                req.contract_address,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Price recorded: %s = %s", token.symbol, token.price)
        return TokenOut.from_domain(token)
