"""Unit tests for BetApplicationService using mock repositories."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from src.tw_bet.application.schemas import PlaceBetRequest
from src.tw_bet.application.service import WAR_BETS_LIMIT, BetApplicationService
from src.tw_common.enums import Side
from src.tw_common.errors import (
    BetAlreadyClaimedError,
    BetBelowMinimumError,
    BetNotFoundError,
    BetOwnershipError,
    DuplicateBetError,
    WarAlreadySettledError,
    WarNotActiveError,
    WarNotFoundError,
    WarNotSettledError,
)

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)
WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
OTHER_WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


def _request(**kwargs) -> PlaceBetRequest:
    defaults = dict(
        war_id=1, user_wallet=WALLET, amount=200, token_choice="A",
        transaction_signature="5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb",
    )
    defaults.update(kwargs)
    return PlaceBetRequest(**defaults)


@pytest.fixture
def repos(make_war, make_bet):
    bet_repo, war_repo, user_repo = MagicMock(), MagicMock(), MagicMock()
    war_repo.get_war = AsyncMock(return_value=make_war())
    war_repo.increment_pool = AsyncMock(return_value=True)
    user_repo.get_or_create = AsyncMock(return_value=5)
    bet_repo.insert_bet = AsyncMock(return_value=100)
    bet_repo.get_bet = AsyncMock(return_value=make_bet())
    bet_repo.mark_claimed = AsyncMock(return_value=True)
    return bet_repo, war_repo, user_repo


@pytest.fixture
def svc(repos, clock):
    bet_repo, war_repo, user_repo = repos
    return BetApplicationService(
        300, bet_repo=bet_repo, war_repo=war_repo, user_repo=user_repo, clock=clock
    )


class TestPlaceBetRequest:
    def test_whitespace_in_signature_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _request(transaction_signature="abc def")

    def test_choice_must_be_a_or_b(self) -> None:
        with pytest.raises(ValidationError):
            _request(token_choice="C")

    def test_non_positive_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _request(amount=0)

    def test_missing_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PlaceBetRequest(war_id=1, user_wallet=WALLET, amount=5, token_choice="A")


class TestPlaceBet:
    @pytest.mark.asyncio
    async def test_happy_path(self, svc, repos, db) -> None:
        bet_repo, war_repo, user_repo = repos

        out = await svc.place_bet(db, _request())

        assert out.id == 100
        assert out.amount == 200
        user_repo.get_or_create.assert_awaited_once_with(db, WALLET)
        bet_repo.insert_bet.assert_awaited_once()
        war_repo.increment_pool.assert_awaited_once_with(db, 1, "A", 200, NOW)
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_signature(self, svc, repos, db) -> None:
        bet_repo, war_repo, _ = repos
        bet_repo.insert_bet = AsyncMock(return_value=None)

        with pytest.raises(DuplicateBetError):
            await svc.place_bet(db, _request())
        war_repo.increment_pool.assert_not_called()
        db.rollback.assert_awaited_once()
        db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_war_not_found(self, svc, repos, db) -> None:
        repos[1].get_war = AsyncMock(return_value=None)
        with pytest.raises(WarNotFoundError):
            await svc.place_bet(db, _request())

    @pytest.mark.asyncio
    async def test_ended_war_rejected(self, svc, repos, db, make_war) -> None:
        repos[1].get_war = AsyncMock(return_value=make_war(end_time=NOW))
        with pytest.raises(WarNotActiveError):
            await svc.place_bet(db, _request())
        repos[0].insert_bet.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_started_war_rejected(self, svc, repos, db, make_war) -> None:
        repos[1].get_war = AsyncMock(
            return_value=make_war(start_time=NOW + timedelta(minutes=1))
        )
        with pytest.raises(WarNotActiveError):
            await svc.place_bet(db, _request())

    @pytest.mark.asyncio
    async def test_pending_war_rejected(self, svc, repos, db, make_war) -> None:
        repos[1].get_war = AsyncMock(
            return_value=make_war(status="PENDING", start_time=None, end_time=None)
        )
        with pytest.raises(WarNotActiveError):
            await svc.place_bet(db, _request())

    @pytest.mark.asyncio
    async def test_below_minimum(self, svc, repos, db, make_war) -> None:
        repos[1].get_war = AsyncMock(return_value=make_war(min_bet_amount=1_000_000))
        with pytest.raises(BetBelowMinimumError):
            await svc.place_bet(db, _request(amount=999_999))

    @pytest.mark.asyncio
    async def test_war_closed_between_read_and_increment(self, svc, repos, db) -> None:
        repos[1].increment_pool = AsyncMock(return_value=False)

        with pytest.raises(WarNotActiveError):
            await svc.place_bet(db, _request())
        db.rollback.assert_awaited_once()
        db.commit.assert_not_called()


class TestPreview:
    @pytest.mark.asyncio
    async def test_preview(self, svc, repos, db, make_war) -> None:
        repos[1].get_war = AsyncMock(
            return_value=make_war(total_bets_a=400, total_bets_b=500)
        )
        resp = await svc.preview(db, 1, Side.A, 100)
        assert resp.potential_winnings == 194
        assert resp.current_odds == "1.9400"
        assert resp.is_estimate is True

    @pytest.mark.asyncio
    async def test_preview_settled_war(self, svc, repos, db, make_war) -> None:
        repos[1].get_war = AsyncMock(return_value=make_war(is_settled=True, winner="A"))
        with pytest.raises(WarAlreadySettledError):
            await svc.preview(db, 1, Side.A, 100)


def _settled_war(make_war, winner: str = "A"):
    return make_war(
        total_bets_a=500, total_bets_b=500, is_settled=True, winner=winner,
        end_time=NOW - timedelta(hours=1),
        token_a_end_price=Decimal("0.00012"), token_b_end_price=Decimal("0.0000198"),
        platform_fee=30, distributable_pool=970,
    )


class TestClaim:
    @pytest.mark.asyncio
    async def test_winner_claim(self, svc, repos, db, make_war) -> None:
        bet_repo, war_repo, _ = repos
        war_repo.get_war = AsyncMock(return_value=_settled_war(make_war))

        resp = await svc.claim(db, 100, WALLET)

        assert resp.payout_amount == 388
        assert resp.winner == "A"
        bet_repo.mark_claimed.assert_awaited_once_with(db, 100, 388)
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_loser_claim_closes_bet_with_zero(self, svc, repos, db, make_war, make_bet) -> None:
        bet_repo, war_repo, _ = repos
        bet_repo.get_bet = AsyncMock(return_value=make_bet(amount=300, token_choice="B"))
        war_repo.get_war = AsyncMock(return_value=_settled_war(make_war))

        resp = await svc.claim(db, 100, WALLET)
        assert resp.payout_amount == 0

    @pytest.mark.asyncio
    async def test_unsettled_war(self, svc, repos, db) -> None:
        with pytest.raises(WarNotSettledError):
            await svc.claim(db, 100, WALLET)
        repos[0].mark_claimed.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrong_wallet(self, svc, repos, db) -> None:
        with pytest.raises(BetOwnershipError):
            await svc.claim(db, 100, OTHER_WALLET)

    @pytest.mark.asyncio
    async def test_missing_bet(self, svc, repos, db) -> None:
        repos[0].get_bet = AsyncMock(return_value=None)
        with pytest.raises(BetNotFoundError):
            await svc.claim(db, 100, WALLET)

    @pytest.mark.asyncio
    async def test_already_claimed_flag(self, svc, repos, db, make_bet) -> None:
        repos[0].get_bet = AsyncMock(return_value=make_bet(is_claimed=True, payout_amount=388))
        with pytest.raises(BetAlreadyClaimedError):
            await svc.claim(db, 100, WALLET)

    @pytest.mark.asyncio
    async def test_concurrent_claim_loses_cas(self, svc, repos, db, make_war) -> None:
        bet_repo, war_repo, _ = repos
        war_repo.get_war = AsyncMock(return_value=_settled_war(make_war))
        bet_repo.mark_claimed = AsyncMock(return_value=False)

        with pytest.raises(BetAlreadyClaimedError):
            await svc.claim(db, 100, WALLET)
        db.rollback.assert_awaited_once()


class TestReads:
    @pytest.mark.asyncio
    async def test_war_bets_capped(self, svc, repos, db, make_bet) -> None:
        repos[0].list_by_war = AsyncMock(return_value=[make_bet()])
        out = await svc.list_war_bets(db, 1)
        assert len(out) == 1
        repos[0].list_by_war.assert_awaited_once_with(db, 1, WAR_BETS_LIMIT)

    @pytest.mark.asyncio
    async def test_user_bets(self, svc, repos, db, make_bet) -> None:
        repos[0].list_by_wallet = AsyncMock(return_value=[make_bet(), make_bet(id=101)])
        out = await svc.list_user_bets(db, WALLET, 50)
        assert [b.id for b in out] == [100, 101]
        assert out[0].amount_display == "0.0000002 SOL"
