"""UserRepository — raw SQL over users / bets / wars.

Users are keyed by wallet address and created implicitly by the first bet
(INSERT ... ON CONFLICT DO UPDATE ... RETURNING id, so the id comes back
whether or not the row already existed).
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_user.domain.models import BettingRecord, User

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_OR_CREATE_SQL = text("""
    INSERT INTO users (wallet_address)
    VALUES (:wallet)
    ON CONFLICT (wallet_address) DO UPDATE SET updated_at = users.updated_at
    RETURNING id
""")

_GET_BY_WALLET_SQL = text("""
    SELECT id, wallet_address, username, created_at, updated_at
    FROM users WHERE wallet_address = :wallet
""")

_USERNAME_OWNER_SQL = text(
    "SELECT wallet_address FROM users WHERE username = :username"
)

_SET_USERNAME_SQL = text("""
    UPDATE users
    SET username = :username, updated_at = NOW()
    WHERE wallet_address = :wallet
    RETURNING id, wallet_address, username, created_at, updated_at
""")

_RECORD_COLUMNS = """
    u.wallet_address, u.username,
    COUNT(b.id) AS total_bets,
    COALESCE(SUM(b.amount), 0) AS total_wagered,
    COUNT(b.id) FILTER (
        WHERE w.is_settled AND w.winner = b.token_choice
    ) AS wins,
    COUNT(b.id) FILTER (
        WHERE w.is_settled AND w.winner IN ('A', 'B') AND w.winner <> b.token_choice
    ) AS losses,
    COALESCE(SUM(b.payout_amount) FILTER (WHERE b.is_claimed), 0) AS total_claimed
"""

_GET_RECORD_SQL = text(f"""
    SELECT {_RECORD_COLUMNS}
    FROM users u
    LEFT JOIN bets b ON b.user_id = u.id
    LEFT JOIN wars w ON w.id = b.war_id
    WHERE u.wallet_address = :wallet
    GROUP BY u.id, u.wallet_address, u.username
""")

_LEADERBOARD_SQL = text(f"""
    SELECT {_RECORD_COLUMNS}
    FROM users u
    JOIN bets b ON b.user_id = u.id
        AND (CAST(:since AS TIMESTAMPTZ) IS NULL OR b.created_at >= CAST(:since AS TIMESTAMPTZ))
    JOIN wars w ON w.id = b.war_id
    GROUP BY u.id, u.wallet_address, u.username
    ORDER BY
        COALESCE(
            COUNT(b.id) FILTER (WHERE w.is_settled AND w.winner = b.token_choice)::NUMERIC
            / NULLIF(COUNT(b.id) FILTER (WHERE w.is_settled AND w.winner IN ('A', 'B')), 0),
            0
        ) DESC,
        total_wagered DESC,
        u.wallet_address
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        wallet_address=row.wallet_address,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_record(row: object) -> BettingRecord:
    return BettingRecord(
        wallet_address=row.wallet_address,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        total_bets=int(row.total_bets),  # type: ignore[attr-defined]
        total_wagered=int(row.total_wagered),  # type: ignore[attr-defined]
        wins=int(row.wins),  # type: ignore[attr-defined]
        losses=int(row.losses),  # type: ignore[attr-defined]
        total_claimed=int(row.total_claimed),  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserRepository:
    async def get_or_create(self, db: AsyncSession, wallet: str) -> int:
        result = await db.execute(_GET_OR_CREATE_SQL, {"wallet": wallet})
        return int(result.scalar_one())

    async def get_by_wallet(self, db: AsyncSession, wallet: str) -> User | None:
        row = (await db.execute(_GET_BY_WALLET_SQL, {"wallet": wallet})).fetchone()
        return _row_to_user(row) if row else None

    async def get_record(self, db: AsyncSession, wallet: str) -> BettingRecord | None:
        row = (await db.execute(_GET_RECORD_SQL, {"wallet": wallet})).fetchone()
        return _row_to_record(row) if row else None

    async def username_owner(self, db: AsyncSession, username: str) -> str | None:
        row = (await db.execute(_USERNAME_OWNER_SQL, {"username": username})).fetchone()
        return row.wallet_address if row else None

    async def set_username(
        self, db: AsyncSession, wallet: str, username: str
    ) -> User | None:
        row = (
            await db.execute(_SET_USERNAME_SQL, {"wallet": wallet, "username": username})
        ).fetchone()
        return _row_to_user(row) if row else None

    async def leaderboard(
        self, db: AsyncSession, since: datetime | None, limit: int
    ) -> list[BettingRecord]:
        rows = (
            await db.execute(_LEADERBOARD_SQL, {"since": since, "limit": limit})
        ).fetchall()
        return [_row_to_record(r) for r in rows]
