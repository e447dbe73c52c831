"""Domain models for tw_token — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Token:
    id: int
    symbol: str
    name: str
    contract_address: str | None
    price: Decimal | None
    market_cap: int | None
    updated_at: datetime


@dataclass
class PricePoint:
    token_id: int
    price: Decimal
    market_cap: int | None
    recorded_at: datetime
