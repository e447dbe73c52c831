"""Pari-mutuel payouts and the pre-settlement winnings preview.

Winning bet:  floor(amount * distributable / winning_side_total)
Losing bet:   0
Tie:          floor(amount * distributable / total_pool)
              (== amount when the tie was settled without a fee)

Per-bet flooring means the winners together receive at most
`distributable`, short by less than one lamport per winning bet.
"""

from decimal import Decimal

from src.tw_bet.domain.models import Bet
from src.tw_clearing.domain.models import SettlementResult, WinningsPreview
from src.tw_clearing.domain.outcome import price_change_pct
from src.tw_clearing.domain.pool import apply_fee
from src.tw_common.enums import Outcome, Side
from src.tw_common.errors import (
    DegeneratePoolError,
    InternalError,
    WarAlreadySettledError,
    WarNotSettledError,
)
from src.tw_common.lamports import validate_amount
from src.tw_war.domain.models import War
from src.tw_war.domain.rules import side_total, total_pool


def settlement_from_war(war: War) -> SettlementResult:
    """Rebuild the frozen settlement parameters stored on a settled war row."""
    if not war.is_settled or war.winner is None:
        raise WarNotSettledError(str(war.id))
    if (
        war.token_a_end_price is None
        or war.token_b_end_price is None
        or war.platform_fee is None
        or war.distributable_pool is None
    ):
        raise InternalError(f"Settled war {war.id} is missing its settlement columns")
    return SettlementResult(
        war_id=war.id,
        winner=Outcome(war.winner),
        change_a=price_change_pct(war.token_a_start_price, war.token_a_end_price, Side.A),
        change_b=price_change_pct(war.token_b_start_price, war.token_b_end_price, Side.B),
        total_bets_a=war.total_bets_a,
        total_bets_b=war.total_bets_b,
        total_pool=total_pool(war),
        platform_fee=war.platform_fee,
        distributable_pool=war.distributable_pool,
    )


def compute_payout(bet: Bet, war: War, settlement: SettlementResult) -> int:
    if bet.war_id != war.id or settlement.war_id != war.id:
        raise ValueError(
            f"Bet {bet.id} (war {bet.war_id}) does not match war {war.id} "
            f"/ settlement {settlement.war_id}"
        )

    if settlement.winner == Outcome.TIE:
        if settlement.total_pool == 0:
            raise DegeneratePoolError(f"war {war.id} has an empty pool")
        return bet.amount * settlement.distributable_pool // settlement.total_pool

    if Side(bet.token_choice).value != settlement.winner.value:
        return 0

    winning_total = side_total(war, settlement.winner.value)
    if winning_total == 0:
        raise DegeneratePoolError(f"war {war.id} has no stake on winning side {settlement.winner.value}")
    return bet.amount * settlement.distributable_pool // winning_total


def preview_winnings(
    war: War, choice: Side | str, amount: int, fee_rate_bps: int
) -> WinningsPreview:
    """Estimate the payout of a hypothetical `amount` on `choice` right now.

    Pure projection: the war passed in is never modified.
    """
    if war.is_settled:
        raise WarAlreadySettledError(str(war.id))
    validate_amount(amount)

    split = apply_fee(total_pool(war) + amount, fee_rate_bps)
    winning_total = side_total(war, choice) + amount
    potential = amount * split.distributable_pool // winning_total
    return WinningsPreview(
        potential_winnings=potential,
        potential_profit=potential - amount,
        current_odds=Decimal(split.distributable_pool) / Decimal(winning_total),
        total_pool=split.total_pool,
        platform_fee=split.platform_fee,
    )
