"""Value objects produced by the settlement engine."""

from dataclasses import dataclass
from decimal import Decimal

from src.tw_common.enums import Outcome


@dataclass(frozen=True)
class WinnerDetermination:
    winner: Outcome
    change_a: Decimal  # percent, e.g. Decimal("20") for +20%
    change_b: Decimal


@dataclass(frozen=True)
class PoolSplit:
    total_pool: int
    platform_fee: int
    distributable_pool: int


@dataclass(frozen=True)
class SettlementResult:
    war_id: int
    winner: Outcome
    change_a: Decimal
    change_b: Decimal
    total_bets_a: int
    total_bets_b: int
    total_pool: int
    platform_fee: int
    distributable_pool: int


@dataclass(frozen=True)
class WinningsPreview:
    """Projection for a hypothetical bet. Other bets can still move the pool,
    so the real payout may differ."""

    potential_winnings: int
    potential_profit: int
    current_odds: Decimal
    total_pool: int
    platform_fee: int
