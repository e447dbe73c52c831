"""Domain models for tw_war — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class War:
    id: int
    token_a_id: int
    token_b_id: int
    token_a_symbol: str
    token_b_symbol: str
    status: str
    start_time: datetime | None
    end_time: datetime | None
    duration_hours: int
    min_bet_amount: int
    description: str | None
    creator_wallet: str | None
    total_bets_a: int
    total_bets_b: int
    is_settled: bool
    winner: str | None
    token_a_start_price: Decimal | None
    token_b_start_price: Decimal | None
    token_a_end_price: Decimal | None
    token_b_end_price: Decimal | None
    platform_fee: int | None
    distributable_pool: int | None
    settled_at: datetime | None
    moderated_by: str | None
    moderated_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass
class WarStats:
    war_id: int
    total_bets_a: int
    total_bets_b: int
    bet_count: int
    unique_bettors: int


@dataclass
class PoolAudit:
    """Stored pool totals next to the sums recomputed from the bets table."""

    war_id: int
    total_bets_a: int
    total_bets_b: int
    bets_sum_a: int
    bets_sum_b: int
    is_settled: bool = False
    platform_fee: int | None = None
    distributable_pool: int | None = None
