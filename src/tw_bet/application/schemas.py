"""Pydantic schemas for tw_bet."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from src.tw_bet.domain.models import Bet
from src.tw_clearing.domain.models import WinningsPreview
from src.tw_common.lamports import lamports_to_display


def _no_whitespace(v: str, field: str) -> str:
    if not v or v != v.strip() or any(c.isspace() for c in v):
        raise ValueError(f"{field} must not contain whitespace")
    return v


class PlaceBetRequest(BaseModel):
    war_id: int = Field(..., gt=0)
    user_wallet: str = Field(..., min_length=32, max_length=44)
    amount: int = Field(..., gt=0, description="Stake in lamports")
    token_choice: Literal["A", "B"]
    transaction_signature: str = Field(..., min_length=1, max_length=128)

    @field_validator("user_wallet")
    @classmethod
    def wallet_no_whitespace(cls, v: str) -> str:
        return _no_whitespace(v, "user_wallet")

    @field_validator("transaction_signature")
    @classmethod
    def signature_no_whitespace(cls, v: str) -> str:
        return _no_whitespace(v, "transaction_signature")


class ClaimRequest(BaseModel):
    user_wallet: str = Field(..., min_length=32, max_length=44)


class BetOut(BaseModel):
    id: int
    war_id: int
    user_wallet: str
    amount: int
    amount_display: str
    token_choice: str
    transaction_signature: str
    is_claimed: bool
    payout_amount: int | None
    created_at: str

    @classmethod
    def from_domain(cls, b: Bet) -> "BetOut":
        return cls(
            id=b.id,
            war_id=b.war_id,
            user_wallet=b.wallet_address,
            amount=b.amount,
            amount_display=lamports_to_display(b.amount),
            token_choice=b.token_choice,
            transaction_signature=b.transaction_signature,
            is_claimed=b.is_claimed,
            payout_amount=b.payout_amount,
            created_at=b.created_at.isoformat(),
        )


class PreviewResponse(BaseModel):
    war_id: int
    token_choice: str
    amount: int
    potential_winnings: int
    potential_profit: int
    current_odds: str
    total_pool: int
    platform_fee: int
    is_estimate: bool = True

    @classmethod
    def from_domain(
        cls, war_id: int, choice: str, amount: int, p: WinningsPreview
    ) -> "PreviewResponse":
        return cls(
            war_id=war_id,
            token_choice=choice,
            amount=amount,
            potential_winnings=p.potential_winnings,
            potential_profit=p.potential_profit,
            current_odds=f"{p.current_odds:.4f}",
            total_pool=p.total_pool,
            platform_fee=p.platform_fee,
        )


class ClaimResponse(BaseModel):
    bet_id: int
    war_id: int
    winner: str
    payout_amount: int
    payout_display: str
