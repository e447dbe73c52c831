"""Unit tests for the raw-SQL repositories using a MagicMock AsyncSession."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.tw_bet.infrastructure.persistence import BetRepository
from src.tw_user.infrastructure.persistence import UserRepository
from src.tw_war.infrastructure.persistence import (
    _INCREMENT_A_SQL,
    _INCREMENT_B_SQL,
    WarRepository,
)

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)


def _result(row=None, rows=None, scalar=None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    result.fetchall.return_value = rows or []
    result.scalar_one.return_value = scalar
    return result


class TestWarRepository:
    @pytest.mark.asyncio
    async def test_increment_uses_side_statement(self, db) -> None:
        db.execute.return_value = _result(row=MagicMock(id=1))
        repo = WarRepository()

        assert await repo.increment_pool(db, 1, "A", 500, NOW) is True
        assert db.execute.call_args.args[0] is _INCREMENT_A_SQL
        await repo.increment_pool(db, 1, "B", 500, NOW)
        assert db.execute.call_args.args[0] is _INCREMENT_B_SQL
        assert db.execute.call_args.args[1] == {"war_id": 1, "amount": 500, "now": NOW}

    @pytest.mark.asyncio
    async def test_increment_inactive_war(self, db) -> None:
        db.execute.return_value = _result(row=None)
        assert await WarRepository().increment_pool(db, 1, "A", 500, NOW) is False

    @pytest.mark.asyncio
    async def test_mark_settled_cas(self, db) -> None:
        db.execute.return_value = _result(row=None)
        won = await WarRepository().mark_settled(
            db, 1, "A", Decimal("2"), Decimal("1"), 30, 970, NOW
        )
        assert won is False
        sql = str(db.execute.call_args.args[0])
        assert "is_settled = FALSE" in sql

    @pytest.mark.asyncio
    async def test_get_war_for_update_locks_row(self, db) -> None:
        db.execute.return_value = _result(row=None)
        assert await WarRepository().get_war_for_update(db, 1) is None
        assert "FOR UPDATE" in str(db.execute.call_args.args[0])

    @pytest.mark.asyncio
    async def test_pool_audit_rows(self, db) -> None:
        row = MagicMock(
            war_id=3, total_bets_a=10, total_bets_b=20, bets_sum_a=Decimal("10"),
            bets_sum_b=Decimal("20"), is_settled=False, platform_fee=None,
            distributable_pool=None,
        )
        db.execute.return_value = _result(rows=[row])
        audits = await WarRepository().list_pool_audits(db)
        assert audits[0].bets_sum_a == 10
        assert isinstance(audits[0].bets_sum_b, int)


class TestBetRepository:
    @pytest.mark.asyncio
    async def test_insert_returns_id(self, db) -> None:
        db.execute.return_value = _result(row=MagicMock(id=77))
        bet_id = await BetRepository().insert_bet(db, 5, 1, 200, "A", "sig")
        assert bet_id == 77
        assert "ON CONFLICT (transaction_signature) DO NOTHING" in str(db.execute.call_args.args[0])

    @pytest.mark.asyncio
    async def test_insert_duplicate_returns_none(self, db) -> None:
        db.execute.return_value = _result(row=None)
        assert await BetRepository().insert_bet(db, 5, 1, 200, "A", "sig") is None

    @pytest.mark.asyncio
    async def test_mark_claimed_cas(self, db) -> None:
        db.execute.return_value = _result(row=None)
        assert await BetRepository().mark_claimed(db, 100, 388) is False
        assert db.execute.call_args.args[1] == {"bet_id": 100, "payout": 388}


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_get_or_create_returns_id(self, db) -> None:
        db.execute.return_value = _result(scalar=5)
        assert await UserRepository().get_or_create(db, "wallet") == 5
        assert "ON CONFLICT (wallet_address)" in str(db.execute.call_args.args[0])
