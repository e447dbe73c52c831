"""WarRepository — concrete implementation of WarRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Pool totals are only ever changed by single-statement increments
(total = total + :amount) and settlement is a compare-and-set on is_settled,
so concurrent requests can never lose an update or settle twice.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tw_common.enums import Side, WarStatus
from src.tw_war.domain.models import PoolAudit, War, WarStats

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_WAR_SELECT = """
    SELECT w.id, w.token_a_id, w.token_b_id,
           ta.symbol AS token_a_symbol, tb.symbol AS token_b_symbol,
           w.status, w.start_time, w.end_time, w.duration_hours, w.min_bet_amount,
           w.description, w.creator_wallet,
           w.total_bets_a, w.total_bets_b, w.is_settled, w.winner,
           w.token_a_start_price, w.token_b_start_price,
           w.token_a_end_price, w.token_b_end_price,
           w.platform_fee, w.distributable_pool, w.settled_at,
           w.moderated_by, w.moderated_at, w.created_at, w.updated_at
    FROM wars w
    JOIN tokens ta ON ta.id = w.token_a_id
    JOIN tokens tb ON tb.id = w.token_b_id
"""

_GET_WAR_SQL = text(_WAR_SELECT + " WHERE w.id = :war_id")

_GET_WAR_FOR_UPDATE_SQL = text(_WAR_SELECT + " WHERE w.id = :war_id FOR UPDATE OF w")

_LIST_WARS_SQL = text(_WAR_SELECT + """
    WHERE
        (CAST(:status AS TEXT) IS NULL OR w.status = CAST(:status AS TEXT))
        AND (
            CAST(:active_at AS TIMESTAMPTZ) IS NULL
            OR (
                w.status = 'ACTIVE'
                AND w.is_settled = FALSE
                AND w.start_time <= CAST(:active_at AS TIMESTAMPTZ)
                AND w.end_time > CAST(:active_at AS TIMESTAMPTZ)
            )
        )
    ORDER BY w.created_at DESC, w.id DESC
    LIMIT :limit
""")

_LIST_BY_CREATOR_SQL = text(_WAR_SELECT + """
    WHERE w.creator_wallet = :wallet
      AND (CAST(:status AS TEXT) IS NULL OR w.status = CAST(:status AS TEXT))
    ORDER BY w.created_at DESC, w.id DESC
""")

_INSERT_WAR_SQL = text("""
    INSERT INTO wars (
        token_a_id, token_b_id, status, duration_hours, min_bet_amount,
        description, creator_wallet, start_time, end_time,
        token_a_start_price, token_b_start_price
    )
    VALUES (
        :token_a_id, :token_b_id, :status, :duration_hours, :min_bet_amount,
        :description, :creator_wallet, :start_time, :end_time,
        :token_a_start_price, :token_b_start_price
    )
    RETURNING id
""")

_ACTIVE_PREDICATE = """
      AND status = 'ACTIVE'
      AND is_settled = FALSE
      AND start_time <= :now
      AND end_time > :now
"""

_INCREMENT_A_SQL = text("""
    UPDATE wars
    SET total_bets_a = total_bets_a + :amount,
        updated_at = NOW()
    WHERE id = :war_id
""" + _ACTIVE_PREDICATE + " RETURNING id")

_INCREMENT_B_SQL = text("""
    UPDATE wars
    SET total_bets_b = total_bets_b + :amount,
        updated_at = NOW()
    WHERE id = :war_id
""" + _ACTIVE_PREDICATE + " RETURNING id")

_MARK_SETTLED_SQL = text("""
    UPDATE wars
    SET is_settled = TRUE,
        winner = :winner,
        token_a_end_price = :token_a_end_price,
        token_b_end_price = :token_b_end_price,
        platform_fee = :platform_fee,
        distributable_pool = :distributable_pool,
        settled_at = :settled_at,
        updated_at = NOW()
    WHERE id = :war_id
      AND is_settled = FALSE
      AND end_time <= :settled_at
    RETURNING id
""")

_APPROVE_SQL = text("""
    UPDATE wars
    SET status = 'ACTIVE',
        start_time = :now,
        end_time = CAST(:now AS TIMESTAMPTZ) + make_interval(hours => duration_hours),
        token_a_start_price = :token_a_start_price,
        token_b_start_price = :token_b_start_price,
        moderated_by = :admin,
        moderated_at = :now,
        updated_at = NOW()
    WHERE id = :war_id AND status = 'PENDING'
    RETURNING id
""")

_REJECT_SQL = text("""
    UPDATE wars
    SET status = 'REJECTED',
        moderated_by = :admin,
        moderated_at = :now,
        updated_at = NOW()
    WHERE id = :war_id AND status = 'PENDING'
    RETURNING id
""")

_STATS_SQL = text("""
    SELECT w.id AS war_id, w.total_bets_a, w.total_bets_b,
           COUNT(b.id) AS bet_count,
           COUNT(DISTINCT b.user_id) AS unique_bettors
    FROM wars w
    LEFT JOIN bets b ON b.war_id = w.id
    WHERE w.id = :war_id
    GROUP BY w.id, w.total_bets_a, w.total_bets_b
""")

_POOL_AUDIT_SQL = text("""
    SELECT w.id AS war_id, w.total_bets_a, w.total_bets_b,
           w.is_settled, w.platform_fee, w.distributable_pool,
           COALESCE(SUM(b.amount) FILTER (WHERE b.token_choice = 'A'), 0) AS bets_sum_a,
           COALESCE(SUM(b.amount) FILTER (WHERE b.token_choice = 'B'), 0) AS bets_sum_b
    FROM wars w
    LEFT JOIN bets b ON b.war_id = w.id
    GROUP BY w.id, w.total_bets_a, w.total_bets_b,
             w.is_settled, w.platform_fee, w.distributable_pool
    ORDER BY w.id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_war(row: object) -> War:
    return War(
        id=row.id,  # type: ignore[attr-defined]
        token_a_id=row.token_a_id,  # type: ignore[attr-defined]
        token_b_id=row.token_b_id,  # type: ignore[attr-defined]
        token_a_symbol=row.token_a_symbol,  # type: ignore[attr-defined]
        token_b_symbol=row.token_b_symbol,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        start_time=row.start_time,  # type: ignore[attr-defined]
        end_time=row.end_time,  # type: ignore[attr-defined]
        duration_hours=row.duration_hours,  # type: ignore[attr-defined]
        min_bet_amount=row.min_bet_amount,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        creator_wallet=row.creator_wallet,  # type: ignore[attr-defined]
        total_bets_a=row.total_bets_a,  # type: ignore[attr-defined]
        total_bets_b=row.total_bets_b,  # type: ignore[attr-defined]
        is_settled=row.is_settled,  # type: ignore[attr-defined]
        winner=row.winner,  # type: ignore[attr-defined]
        token_a_start_price=row.token_a_start_price,  # type: ignore[attr-defined]
        token_b_start_price=row.token_b_start_price,  # type: ignore[attr-defined]
        token_a_end_price=row.token_a_end_price,  # type: ignore[attr-defined]
        token_b_end_price=row.token_b_end_price,  # type: ignore[attr-defined]
        platform_fee=row.platform_fee,  # type: ignore[attr-defined]
        distributable_pool=row.distributable_pool,  # type: ignore[attr-defined]
        settled_at=row.settled_at,  # type: ignore[attr-defined]
        moderated_by=row.moderated_by,  # type: ignore[attr-defined]
        moderated_at=row.moderated_at,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class WarRepository:
    """Concrete repository. Callers own the transaction (commit/rollback)."""

    async def get_war(self, db: AsyncSession, war_id: int) -> War | None:
        row = (await db.execute(_GET_WAR_SQL, {"war_id": war_id})).fetchone()
        return _row_to_war(row) if row else None

    async def get_war_for_update(self, db: AsyncSession, war_id: int) -> War | None:
        row = (await db.execute(_GET_WAR_FOR_UPDATE_SQL, {"war_id": war_id})).fetchone()
        return _row_to_war(row) if row else None

    async def list_wars(
        self,
        db: AsyncSession,
        status: str | None,
        active_at: datetime | None,
        limit: int,
    ) -> list[War]:
        rows = (
            await db.execute(
                _LIST_WARS_SQL,
                {"status": status, "active_at": active_at, "limit": limit},
            )
        ).fetchall()
        return [_row_to_war(r) for r in rows]

    async def list_by_creator(
        self, db: AsyncSession, wallet: str, status: str | None
    ) -> list[War]:
        rows = (
            await db.execute(_LIST_BY_CREATOR_SQL, {"wallet": wallet, "status": status})
        ).fetchall()
        return [_row_to_war(r) for r in rows]

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
    ) -> int:
        result = await db.execute(
            _INSERT_WAR_SQL,
            {
                "token_a_id": token_a_id,
                "token_b_id": token_b_id,
                "status": status,
                "duration_hours": duration_hours,
                "min_bet_amount": min_bet_amount,
                "description": description,
                "creator_wallet": creator_wallet,
                "start_time": start_time,
                "end_time": end_time,
                "token_a_start_price": token_a_start_price,
                "token_b_start_price": token_b_start_price,
            },
        )
        return int(result.scalar_one())

    async def increment_pool(
        self, db: AsyncSession, war_id: int, side: str, amount: int, now: datetime
    ) -> bool:
        """Atomically add amount to one side. False if the war is not active."""
        sql = _INCREMENT_A_SQL if Side(side) == Side.A else _INCREMENT_B_SQL
        result = await db.execute(sql, {"war_id": war_id, "amount": amount, "now": now})
        return result.fetchone() is not None

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
    ) -> bool:
        """Compare-and-set is_settled FALSE -> TRUE. False if already settled."""
        result = await db.execute(
            _MARK_SETTLED_SQL,
            {
                "war_id": war_id,
                "winner": winner,
                "token_a_end_price": token_a_end_price,
                "token_b_end_price": token_b_end_price,
                "platform_fee": platform_fee,
                "distributable_pool": distributable_pool,
                "settled_at": settled_at,
            },
        )
        return result.fetchone() is not None

    async def moderate(
        self,
        db: AsyncSession,
        war_id: int,
        status: str,
        admin: str,
        now: datetime,
        token_a_start_price: Decimal | None,
        token_b_start_price: Decimal | None,
    ) -> bool:
        if WarStatus(status) == WarStatus.ACTIVE:
            params = {
                "war_id": war_id,
                "admin": admin,
                "now": now,
                "token_a_start_price": token_a_start_price,
                "token_b_start_price": token_b_start_price,
            }
            result = await db.execute(_APPROVE_SQL, params)
        else:
            result = await db.execute(
                _REJECT_SQL, {"war_id": war_id, "admin": admin, "now": now}
            )
        return result.fetchone() is not None

    async def get_stats(self, db: AsyncSession, war_id: int) -> WarStats | None:
        row = (await db.execute(_STATS_SQL, {"war_id": war_id})).fetchone()
        if row is None:
            return None
        return WarStats(
            war_id=row.war_id,
            total_bets_a=row.total_bets_a,
            total_bets_b=row.total_bets_b,
            bet_count=row.bet_count,
            unique_bettors=row.unique_bettors,
        )

    async def list_pool_audits(self, db: AsyncSession) -> list[PoolAudit]:
        rows = (await db.execute(_POOL_AUDIT_SQL)).fetchall()
        return [
            PoolAudit(
                war_id=r.war_id,
                total_bets_a=r.total_bets_a,
                total_bets_b=r.total_bets_b,
                bets_sum_a=int(r.bets_sum_a),
                bets_sum_b=int(r.bets_sum_b),
                is_settled=r.is_settled,
                platform_fee=r.platform_fee,
                distributable_pool=r.distributable_pool,
            )
            for r in rows
        ]
