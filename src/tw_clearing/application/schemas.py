"""Pydantic schemas for settlement responses."""

from pydantic import BaseModel

from src.tw_clearing.domain.models import SettlementResult


class SettlementResponse(BaseModel):
    war_id: int
    winner: str
    token_a_change_pct: str
    token_b_change_pct: str
    token_a_end_price: str
    token_b_end_price: str
    total_bets_a: int
    total_bets_b: int
    total_pool: int
    platform_fee: int
    distributable_pool: int
    fee_rate_bps: int
    settled_at: str

    @classmethod
    def from_result(
        cls,
        result: SettlementResult,
        token_a_end_price: object,
        token_b_end_price: object,
        fee_rate_bps: int,
        settled_at: str,
    ) -> "SettlementResponse":
        return cls(
            war_id=result.war_id,
            winner=result.winner.value,
            token_a_change_pct=f"{result.change_a:.4f}",
            token_b_change_pct=f"{result.change_b:.4f}",
            token_a_end_price=str(token_a_end_price),
            token_b_end_price=str(token_b_end_price),
            total_bets_a=result.total_bets_a,
            total_bets_b=result.total_bets_b,
            total_pool=result.total_pool,
            platform_fee=result.platform_fee,
            distributable_pool=result.distributable_pool,
            fee_rate_bps=fee_rate_bps,
            settled_at=settled_at,
        )
