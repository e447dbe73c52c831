"""Unit tests for WarApplicationService using mock repositories."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from src.tw_common.enums import ModerationAction, WarStatus
from src.tw_common.errors import (
    BetBelowMinimumError,
    InvalidStartPriceError,
    TokenNotFoundError,
    WarNotFoundError,
    WarNotModeratableError,
)
from src.tw_token.domain.models import Token
from src.tw_war.application.schemas import AdminCreateWarRequest, CreateWarRequest
from src.tw_war.application.service import WarApplicationService
from src.tw_war.domain.models import WarStats

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)
WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


def _token(id: int, symbol: str, price: str | None = "0.001") -> Token:
    return Token(
        id=id, symbol=symbol, name=symbol.title(), contract_address=None,
        price=Decimal(price) if price is not None else None, market_cap=None,
        updated_at=NOW,
    )


@pytest.fixture
def war_repo(make_war):
    repo = MagicMock()
    repo.get_war = AsyncMock(return_value=make_war())
    repo.create_war = AsyncMock(return_value=1)
    repo.moderate = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def token_repo():
    tokens = {"PEPE": _token(10, "PEPE"), "BONK": _token(20, "BONK")}
    by_id = {t.id: t for t in tokens.values()}
    repo = MagicMock()
    repo.get_by_symbol = AsyncMock(side_effect=lambda db, s: tokens.get(s))
    repo.get_by_id = AsyncMock(side_effect=lambda db, i: by_id.get(i))
    return repo


@pytest.fixture
def svc(war_repo, token_repo, clock):
    return WarApplicationService(
        300, 1_000_000, war_repo=war_repo, token_repo=token_repo, clock=clock
    )


class TestReads:
    @pytest.mark.asyncio
    async def test_active_only_passes_now(self, svc, war_repo, db, make_war) -> None:
        war_repo.list_wars = AsyncMock(return_value=[make_war()])
        out = await svc.list_wars(db, None, True)
        assert out[0].is_active is True
        assert war_repo.list_wars.call_args.args[1:] == (None, NOW, 100)

    @pytest.mark.asyncio
    async def test_status_filter_passes_value(self, svc, war_repo, db) -> None:
        war_repo.list_wars = AsyncMock(return_value=[])
        await svc.list_wars(db, WarStatus.PENDING, False, 20)
        assert war_repo.list_wars.call_args.args[1:] == ("PENDING", None, 20)

    @pytest.mark.asyncio
    async def test_get_war_missing(self, svc, war_repo, db) -> None:
        war_repo.get_war = AsyncMock(return_value=None)
        with pytest.raises(WarNotFoundError):
            await svc.get_war(db, 42)

    @pytest.mark.asyncio
    async def test_stats_odds(self, svc, war_repo, db) -> None:
        war_repo.get_stats = AsyncMock(
            return_value=WarStats(war_id=1, total_bets_a=500, total_bets_b=0,
                                  bet_count=3, unique_bettors=2)
        )
        out = await svc.get_stats(db, 1)
        # pool 500, fee 15, distributable 485
        assert out.odds_a == "0.9700"
        assert out.odds_b is None
        assert out.total_pool == 500


class TestSubmitWar:
    def _req(self, **kwargs) -> CreateWarRequest:
        defaults = dict(
            token_a_symbol="pepe", token_b_symbol="BONK", duration_hours=24,
            creator_wallet=WALLET, min_bet_amount=1_000_000,
        )
        defaults.update(kwargs)
        return CreateWarRequest(**defaults)

    @pytest.mark.asyncio
    async def test_pending_without_times(self, svc, war_repo, db) -> None:
        await svc.submit_war(db, self._req())
        args = war_repo.create_war.call_args.args
        assert args[1:4] == (10, 20, "PENDING")
        assert args[8:] == (None, None, None, None)
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_min_bet_floor(self, svc, db) -> None:
        with pytest.raises(BetBelowMinimumError):
            await svc.submit_war(db, self._req(min_bet_amount=999))

    @pytest.mark.asyncio
    async def test_unknown_token(self, svc, war_repo, db) -> None:
        with pytest.raises(TokenNotFoundError):
            await svc.submit_war(db, self._req(token_b_symbol="NOPE"))
        war_repo.create_war.assert_not_called()
        db.rollback.assert_awaited_once()

    def test_same_token_twice_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._req(token_a_symbol="PEPE", token_b_symbol="pepe")

    @pytest.mark.parametrize("hours", [0, 169])
    def test_duration_bounds(self, hours: int) -> None:
        with pytest.raises(ValidationError):
            self._req(duration_hours=hours)


class TestCreateActiveWar:
    @pytest.mark.asyncio
    async def test_snapshots_start_prices(self, svc, war_repo, db) -> None:
        req = AdminCreateWarRequest(token_a_symbol="PEPE", token_b_symbol="BONK", duration_hours=6)
        await svc.create_active_war(db, req, "admin")
        args = war_repo.create_war.call_args.args
        assert args[3] == "ACTIVE"
        assert args[8:] == (NOW, NOW + timedelta(hours=6), Decimal("0.001"), Decimal("0.001"))

    @pytest.mark.asyncio
    async def test_unpriced_token_cannot_start(self, svc, token_repo, db) -> None:
        token_repo.get_by_symbol = AsyncMock(
            side_effect=lambda db, s: _token(10, "PEPE", None) if s == "PEPE" else _token(20, "BONK")
        )
        req = AdminCreateWarRequest(token_a_symbol="PEPE", token_b_symbol="BONK")
        with pytest.raises(InvalidStartPriceError):
            await svc.create_active_war(db, req, "admin")


class TestModerate:
    @pytest.mark.asyncio
    async def test_approve_snapshots_prices(self, svc, war_repo, db, make_war) -> None:
        war_repo.get_war_for_update = AsyncMock(
            return_value=make_war(status="PENDING", start_time=None, end_time=None,
                                  token_a_start_price=None, token_b_start_price=None)
        )
        await svc.moderate(db, 1, ModerationAction.APPROVE, "admin")
        war_repo.moderate.assert_awaited_once_with(
            db, 1, "ACTIVE", "admin", NOW, Decimal("0.001"), Decimal("0.001")
        )
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reject(self, svc, war_repo, db, make_war) -> None:
        war_repo.get_war_for_update = AsyncMock(return_value=make_war(status="PENDING"))
        await svc.moderate(db, 1, ModerationAction.REJECT, "admin")
        war_repo.moderate.assert_awaited_once_with(db, 1, "REJECTED", "admin", NOW, None, None)

    @pytest.mark.asyncio
    async def test_active_war_not_moderatable(self, svc, war_repo, db, make_war) -> None:
        war_repo.get_war_for_update = AsyncMock(return_value=make_war(status="ACTIVE"))
        with pytest.raises(WarNotModeratableError):
            await svc.moderate(db, 1, ModerationAction.APPROVE, "admin")
        war_repo.moderate.assert_not_called()
        db.rollback.assert_awaited_once()
