"""Pydantic schemas for tw_war requests and responses."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from src.tw_common.enums import ModerationAction
from src.tw_war.domain.models import War, WarStats
from src.tw_war.domain.rules import is_accepting_bets, total_pool


def _price_str(p: Decimal | None) -> str | None:
    return str(p) if p is not None else None


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


class _WarCreateBase(BaseModel):
    token_a_symbol: str = Field(..., min_length=1, max_length=20)
    token_b_symbol: str = Field(..., min_length=1, max_length=20)
    duration_hours: int = Field(24, ge=1, le=168)
    description: str | None = Field(None, max_length=500)

    @field_validator("token_a_symbol", "token_b_symbol")
    @classmethod
    def upper_symbol(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def distinct_tokens(self) -> "_WarCreateBase":
        if self.token_a_symbol == self.token_b_symbol:
            raise ValueError("token_a_symbol and token_b_symbol must differ")
        return self


class CreateWarRequest(_WarCreateBase):
    """User-submitted war. Starts PENDING until an admin approves it."""

    creator_wallet: str = Field(..., min_length=32, max_length=44)
    min_bet_amount: int = Field(..., gt=0, description="Lamports")


class AdminCreateWarRequest(_WarCreateBase):
    """Admin-created war. ACTIVE immediately, start prices snapshotted now."""

    min_bet_amount: int = Field(1, gt=0, description="Lamports")


class ModerateWarRequest(BaseModel):
    action: ModerationAction


class WarOut(BaseModel):
    id: int
    token_a_id: int
    token_b_id: int
    token_a_symbol: str
    token_b_symbol: str
    status: str
    is_active: bool
    start_time: str | None
    end_time: str | None
    duration_hours: int
    min_bet_amount: int
    description: str | None
    creator_wallet: str | None
    total_bets_a: int
    total_bets_b: int
    total_pool: int
    is_settled: bool
    winner: str | None
    token_a_start_price: str | None
    token_b_start_price: str | None
    token_a_end_price: str | None
    token_b_end_price: str | None
    platform_fee: int | None
    distributable_pool: int | None
    settled_at: str | None
    moderated_by: str | None
    moderated_at: str | None
    created_at: str

    @classmethod
    def from_domain(cls, w: War, now: datetime) -> "WarOut":
        return cls(
            id=w.id,
            token_a_id=w.token_a_id,
            token_b_id=w.token_b_id,
            token_a_symbol=w.token_a_symbol,
            token_b_symbol=w.token_b_symbol,
            status=w.status,
            is_active=is_accepting_bets(w, now),
            start_time=_iso(w.start_time),
            end_time=_iso(w.end_time),
            duration_hours=w.duration_hours,
            min_bet_amount=w.min_bet_amount,
            description=w.description,
            creator_wallet=w.creator_wallet,
            total_bets_a=w.total_bets_a,
            total_bets_b=w.total_bets_b,
            total_pool=total_pool(w),
            is_settled=w.is_settled,
            winner=w.winner,
            token_a_start_price=_price_str(w.token_a_start_price),
            token_b_start_price=_price_str(w.token_b_start_price),
            token_a_end_price=_price_str(w.token_a_end_price),
            token_b_end_price=_price_str(w.token_b_end_price),
            platform_fee=w.platform_fee,
            distributable_pool=w.distributable_pool,
            settled_at=_iso(w.settled_at),
            moderated_by=w.moderated_by,
            moderated_at=_iso(w.moderated_at),
            created_at=w.created_at.isoformat(),
        )


class WarStatsOut(BaseModel):
    """Pool snapshot. Odds are distributable / side total, None for an empty side."""

    war_id: int
    total_bets_a: int
    total_bets_b: int
    total_pool: int
    bet_count: int
    unique_bettors: int
    odds_a: str | None
    odds_b: str | None

    @classmethod
    def from_domain(
        cls, s: WarStats, odds_a: Decimal | None, odds_b: Decimal | None
    ) -> "WarStatsOut":
        return cls(
            war_id=s.war_id,
            total_bets_a=s.total_bets_a,
            total_bets_b=s.total_bets_b,
            total_pool=s.total_bets_a + s.total_bets_b,
            bet_count=s.bet_count,
            unique_bettors=s.unique_bettors,
            odds_a=f"{odds_a:.4f}" if odds_a is not None else None,
            odds_b=f"{odds_b:.4f}" if odds_b is not None else None,
        )
