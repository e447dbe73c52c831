"""Prize pool and platform fee.

total_pool    = total_bets_a + total_bets_b
platform_fee  = floor(total_pool * fee_rate_bps / 10000)
distributable = total_pool - platform_fee

platform_fee + distributable == total_pool holds exactly for every input.
"""

from src.tw_clearing.domain.models import PoolSplit, SettlementResult, WinnerDetermination
from src.tw_common.enums import Outcome, TiePolicy
from src.tw_common.lamports import calculate_fee, validate_fee_bps


def apply_fee(total_pool: int, fee_rate_bps: int) -> PoolSplit:
    if total_pool < 0:
        raise ValueError(f"Pool total must be non-negative, got {total_pool}")
    validate_fee_bps(fee_rate_bps)
    fee = calculate_fee(total_pool, fee_rate_bps)
    return PoolSplit(
        total_pool=total_pool,
        platform_fee=fee,
        distributable_pool=total_pool - fee,
    )


def split_pool(total_bets_a: int, total_bets_b: int, fee_rate_bps: int) -> PoolSplit:
    if total_bets_a < 0 or total_bets_b < 0:
        raise ValueError(
            f"Side totals must be non-negative, got A={total_bets_a} B={total_bets_b}"
        )
    return apply_fee(total_bets_a + total_bets_b, fee_rate_bps)


def effective_fee_bps(winner: Outcome, fee_rate_bps: int, tie_policy: TiePolicy) -> int:
    """A refunded tie carries no fee; every other outcome pays the canonical rate."""
    if winner == Outcome.TIE and tie_policy == TiePolicy.REFUND:
        return 0
    return fee_rate_bps


def build_settlement(
    war_id: int,
    total_bets_a: int,
    total_bets_b: int,
    determination: WinnerDetermination,
    fee_rate_bps: int,
    tie_policy: TiePolicy,
) -> SettlementResult:
    split = split_pool(
        total_bets_a,
        total_bets_b,
        effective_fee_bps(determination.winner, fee_rate_bps, tie_policy),
    )
    return SettlementResult(
        war_id=war_id,
        winner=determination.winner,
        change_a=determination.change_a,
        change_b=determination.change_b,
        total_bets_a=total_bets_a,
        total_bets_b=total_bets_b,
        total_pool=split.total_pool,
        platform_fee=split.platform_fee,
        distributable_pool=split.distributable_pool,
    )
