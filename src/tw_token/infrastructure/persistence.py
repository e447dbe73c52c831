"""TokenRepository — concrete implementation of TokenRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Prices are NUMERIC in Postgres and arrive as Decimal through asyncpg.
"""

from decimal import Decimal

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_token.domain.models import PricePoint, Token

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_TOKEN_COLUMNS = "id, symbol, name, contract_address, price, market_cap, updated_at"

_LIST_TOKENS_SQL = text(f"SELECT {_TOKEN_COLUMNS} FROM tokens ORDER BY symbol")

_GET_BY_SYMBOL_SQL = text(f"SELECT {_TOKEN_COLUMNS} FROM tokens WHERE symbol = :symbol")

_GET_BY_ID_SQL = text(f"SELECT {_TOKEN_COLUMNS} FROM tokens WHERE id = :token_id")

_CURRENT_PRICES_SQL = text(
    "SELECT id, price FROM tokens WHERE id IN :token_ids"
).bindparams(bindparam("token_ids", expanding=True))

_UPSERT_PRICE_SQL = text(f"""
    INSERT INTO tokens (symbol, name, contract_address, price, market_cap)
    VALUES (:symbol, :name, :contract_address, :price, :market_cap)
    ON CONFLICT (symbol) DO UPDATE
        SET price = EXCLUDED.price,
            name = EXCLUDED.name,
            market_cap = COALESCE(EXCLUDED.market_cap, tokens.market_cap),
            contract_address = COALESCE(EXCLUDED.contract_address, tokens.contract_address),
            updated_at = NOW()
    RETURNING {_TOKEN_COLUMNS}
""")

_INSERT_HISTORY_SQL = text("""
    INSERT INTO price_history (token_id, price, market_cap)
    VALUES (:token_id, :price, :market_cap)
""")

_LIST_HISTORY_SQL = text("""
    SELECT token_id, price, market_cap, recorded_at
    FROM price_history
    WHERE token_id = :token_id
    ORDER BY recorded_at DESC, id DESC
    LIMIT :limit
""")


def _row_to_token(row: object) -> Token:
    return Token(
        id=row.id,  # type: ignore[attr-defined]
        symbol=row.symbol,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        contract_address=row.contract_address,  # type: ignore[attr-defined]
        price=row.price,  # type: ignore[attr-defined]
        market_cap=row.market_cap,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class TokenRepository:
    async def list_tokens(self, db: AsyncSession) -> list[Token]:
        rows = (await db.execute(_LIST_TOKENS_SQL)).fetchall()
        return [_row_to_token(r) for r in rows]

    async def get_by_symbol(self, db: AsyncSession, symbol: str) -> Token | None:
        row = (await db.execute(_GET_BY_SYMBOL_SQL, {"symbol": symbol})).fetchone()
        return _row_to_token(row) if row else None

    async def get_by_id(self, db: AsyncSession, token_id: int) -> Token | None:
        row = (await db.execute(_GET_BY_ID_SQL, {"token_id": token_id})).fetchone()
        return _row_to_token(row) if row else None

    async def get_current_prices(
        self, db: AsyncSession, token_ids: list[int]
    ) -> dict[int, Decimal]:
        rows = (await db.execute(_CURRENT_PRICES_SQL, {"token_ids": token_ids})).fetchall()
        return {r.id: r.price for r in rows if r.price is not None}

    async def upsert_price(
        self,
        db: AsyncSession,
        symbol: str,
        name: str,
        price: Decimal,
        market_cap: int | None,
        contract_address: str | None,
    ) -> Token:
        row = (
            await db.execute(
                _UPSERT_PRICE_SQL,
                {
                    "symbol": symbol,
                    "name": name,
                    "contract_address": contract_address,
                    "price": price,
                    "market_cap": market_cap,
                },
            )
        ).fetchone()
        token = _row_to_token(row)
        await db.execute(
            _INSERT_HISTORY_SQL,
            {"token_id": token.id, "price": price, "market_cap": market_cap},
        )
        return token

    async def list_history(
        self, db: AsyncSession, token_id: int, limit: int
    ) -> list[PricePoint]:
        rows = (
            await db.execute(_LIST_HISTORY_SQL, {"token_id": token_id, "limit": limit})
        ).fetchall()
        return [
            PricePoint(
                token_id=r.token_id,
                price=r.price,
                market_cap=r.market_cap,
                recorded_at=r.recorded_at,
            )
            for r in rows
        ]
