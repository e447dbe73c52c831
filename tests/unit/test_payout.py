"""Unit tests for pari-mutuel payouts and the winnings preview."""

import copy
from decimal import Decimal

import pytest

from src.tw_clearing.domain.models import WinnerDetermination
from src.tw_clearing.domain.payout import (
    compute_payout,
    preview_winnings,
    settlement_from_war,
)
from src.tw_clearing.domain.pool import build_settlement
from src.tw_common.enums import Outcome, TiePolicy
from src.tw_common.errors import (
    DegeneratePoolError,
    InternalError,
    WarAlreadySettledError,
    WarNotSettledError,
)


def _settle(war, winner: Outcome, policy: TiePolicy = TiePolicy.REFUND):
    det = WinnerDetermination(winner=winner, change_a=Decimal("0"), change_b=Decimal("0"))
    return build_settlement(war.id, war.total_bets_a, war.total_bets_b, det, 300, policy)


class TestComputePayout:
    def test_reference_winner(self, make_war, make_bet) -> None:
        war = make_war(total_bets_a=500, total_bets_b=500)
        s = _settle(war, Outcome.A)
        # floor(200 * 970 / 500) = 388
        assert compute_payout(make_bet(amount=200, token_choice="A"), war, s) == 388

    def test_reference_loser(self, make_war, make_bet) -> None:
        war = make_war(total_bets_a=500, total_bets_b=500)
        s = _settle(war, Outcome.A)
        assert compute_payout(make_bet(amount=300, token_choice="B"), war, s) == 0

    def test_winning_side_empty_is_degenerate(self, make_war, make_bet) -> None:
        war = make_war(total_bets_a=0, total_bets_b=500)
        s = _settle(war, Outcome.A)
        with pytest.raises(DegeneratePoolError):
            compute_payout(make_bet(amount=100, token_choice="A"), war, s)

    def test_losing_side_empty_winners_share_pool_after_fee(self, make_war, make_bet) -> None:
        war = make_war(total_bets_a=1000, total_bets_b=0)
        s = _settle(war, Outcome.A)
        assert compute_payout(make_bet(amount=1000, token_choice="A"), war, s) == 970

    def test_tie_refund_returns_stake(self, make_war, make_bet) -> None:
        war = make_war(total_bets_a=400, total_bets_b=600)
        s = _settle(war, Outcome.TIE, TiePolicy.REFUND)
        assert compute_payout(make_bet(amount=250, token_choice="A"), war, s) == 250
        assert compute_payout(make_bet(amount=600, token_choice="B"), war, s) == 600

    def test_tie_after_fee_pro_rata(self, make_war, make_bet) -> None:
        war = make_war(total_bets_a=400, total_bets_b=600)
        s = _settle(war, Outcome.TIE, TiePolicy.REFUND_AFTER_FEE)
        # floor(250 * 970 / 1000) = 242
        assert compute_payout(make_bet(amount=250, token_choice="A"), war, s) == 242

    def test_bet_from_other_war_rejected(self, make_war, make_bet) -> None:
        war = make_war(total_bets_a=500, total_bets_b=500)
        s = _settle(war, Outcome.A)
        with pytest.raises(ValueError):
            compute_payout(make_bet(war_id=99), war, s)

    def test_sum_of_winner_payouts_bounded_by_distributable(self, make_war, make_bet) -> None:
        stakes = [1, 2, 3, 333, 1_000_003, 77]
        war = make_war(total_bets_a=sum(stakes), total_bets_b=9_999_991)
        s = _settle(war, Outcome.A)
        payouts = [
            compute_payout(make_bet(id=i, amount=amt, token_choice="A"), war, s)
            for i, amt in enumerate(stakes)
        ]
        residual = s.distributable_pool - sum(payouts)
        assert 0 <= residual < len(stakes)


class TestSettlementFromWar:
    def test_rebuilds_stored_settlement(self, make_war) -> None:
        war = make_war(
            total_bets_a=500, total_bets_b=500, is_settled=True, winner="A",
            token_a_end_price=Decimal("0.00012"), token_b_end_price=Decimal("0.0000198"),
            platform_fee=30, distributable_pool=970,
        )
        s = settlement_from_war(war)
        assert s.winner == Outcome.A
        assert s.total_pool == 1000
        assert s.distributable_pool == 970
        assert s.change_a == Decimal("20")

    def test_unsettled_war_rejected(self, make_war) -> None:
        with pytest.raises(WarNotSettledError):
            settlement_from_war(make_war())

    @pytest.mark.parametrize(
        "missing", ["token_a_end_price", "token_b_end_price", "platform_fee", "distributable_pool"]
    )
    def test_settled_row_missing_columns_rejected(self, make_war, missing: str) -> None:
        fields = dict(
            total_bets_a=500, total_bets_b=500, is_settled=True, winner="A",
            token_a_end_price=Decimal("0.00012"), token_b_end_price=Decimal("0.0000198"),
            platform_fee=30, distributable_pool=970,
        )
        fields[missing] = None
        with pytest.raises(InternalError):
            settlement_from_war(make_war(**fields))


class TestPreviewWinnings:
    def test_inflates_pool_with_hypothetical_bet(self, make_war) -> None:
        war = make_war(total_bets_a=400, total_bets_b=500)
        p = preview_winnings(war, "A", 100, 300)
        # pool 1000, fee 30, A side 500 -> floor(100 * 970 / 500) = 194
        assert p.total_pool == 1000
        assert p.platform_fee == 30
        assert p.potential_winnings == 194
        assert p.potential_profit == 94
        assert p.current_odds == Decimal("1.94")

    def test_first_bet_on_empty_war(self, make_war) -> None:
        p = preview_winnings(make_war(), "B", 1000, 300)
        assert p.potential_winnings == 970
        assert p.potential_profit == -30

    def test_does_not_mutate_war(self, make_war) -> None:
        war = make_war(total_bets_a=400, total_bets_b=500)
        before = copy.deepcopy(war)
        preview_winnings(war, "B", 10_000, 300)
        assert war == before

    def test_settled_war_rejected(self, make_war) -> None:
        with pytest.raises(WarAlreadySettledError):
            preview_winnings(make_war(is_settled=True, winner="A"), "A", 100, 300)

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_amount_rejected(self, make_war, amount: int) -> None:
        with pytest.raises(ValueError):
            preview_winnings(make_war(), "A", amount, 300)
