"""Domain models for tw_bet — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Bet:
    id: int
    user_id: int
    war_id: int
    wallet_address: str
    amount: int
    token_choice: str
    transaction_signature: str
    is_claimed: bool
    payout_amount: int | None
    created_at: datetime
