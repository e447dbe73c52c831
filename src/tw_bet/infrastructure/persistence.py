"""BetRepository — raw SQL over the bets table.

transaction_signature is UNIQUE; inserts use ON CONFLICT DO NOTHING so a
replayed signature yields no row instead of an IntegrityError that would
poison the surrounding transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_bet.domain.models import Bet

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_BET_SELECT = """
    SELECT b.id, b.user_id, b.war_id, u.wallet_address, b.amount, b.token_choice,
           b.transaction_signature, b.is_claimed, b.payout_amount, b.created_at
    FROM bets b
    JOIN users u ON u.id = b.user_id
"""

_INSERT_BET_SQL = text("""
    INSERT INTO bets (user_id, war_id, amount, token_choice, transaction_signature)
    VALUES (:user_id, :war_id, :amount, :token_choice, :transaction_signature)
    ON CONFLICT (transaction_signature) DO NOTHING
    RETURNING id
""")

_GET_BET_SQL = text(_BET_SELECT + " WHERE b.id = :bet_id")

_LIST_BY_WALLET_SQL = text(_BET_SELECT + """
    WHERE u.wallet_address = :wallet
    ORDER BY b.created_at DESC, b.id DESC
    LIMIT :limit
""")

_LIST_BY_WAR_SQL = text(_BET_SELECT + """
    WHERE b.war_id = :war_id
    ORDER BY b.created_at DESC, b.id DESC
    LIMIT :limit
""")

_MARK_CLAIMED_SQL = text("""
    UPDATE bets
    SET is_claimed = TRUE, payout_amount = :payout
    WHERE id = :bet_id AND is_claimed = FALSE
    RETURNING id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_bet(row: object) -> Bet:
    return Bet(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        war_id=row.war_id,  # type: ignore[attr-defined]
        wallet_address=row.wallet_address,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        token_choice=row.token_choice,  # type: ignore[attr-defined]
        transaction_signature=row.transaction_signature,  # type: ignore[attr-defined]
        is_claimed=row.is_claimed,  # type: ignore[attr-defined]
        payout_amount=row.payout_amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BetRepository:
    async def insert_bet(
        self,
        db: AsyncSession,
        user_id: int,
        war_id: int,
        amount: int,
        token_choice: str,
        transaction_signature: str,
    ) -> int | None:
        result = await db.execute(
            _INSERT_BET_SQL,
            {
                "user_id": user_id,
                "war_id": war_id,
                "amount": amount,
                "token_choice": token_choice,
                "transaction_signature": transaction_signature,
            },
        )
        row = result.fetchone()
        return int(row.id) if row else None

    async def get_bet(self, db: AsyncSession, bet_id: int) -> Bet | None:
        row = (await db.execute(_GET_BET_SQL, {"bet_id": bet_id})).fetchone()
        return _row_to_bet(row) if row else None

    async def list_by_wallet(
        self, db: AsyncSession, wallet: str, limit: int
    ) -> list[Bet]:
        rows = (
            await db.execute(_LIST_BY_WALLET_SQL, {"wallet": wallet, "limit": limit})
        ).fetchall()
        return [_row_to_bet(r) for r in rows]

    async def list_by_war(self, db: AsyncSession, war_id: int, limit: int) -> list[Bet]:
        rows = (
            await db.execute(_LIST_BY_WAR_SQL, {"war_id": war_id, "limit": limit})
        ).fetchall()
        return [_row_to_bet(r) for r in rows]

    async def mark_claimed(self, db: AsyncSession, bet_id: int, payout: int) -> bool:
        result = await db.execute(_MARK_CLAIMED_SQL, {"bet_id": bet_id, "payout": payout})
        return result.fetchone() is not None
