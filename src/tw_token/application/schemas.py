"""Pydantic schemas for tw_token requests and responses.

Prices travel as decimal strings so tiny meme-coin prices (1e-8 and below)
survive JSON without float rounding.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.tw_token.domain.models import PricePoint, Token


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


class TokenOut(BaseModel):
    id: int
    symbol: str
    name: str
    contract_address: str | None
    price: str | None
    market_cap: int | None
    updated_at: str

    @classmethod
    def from_domain(cls, t: Token) -> "TokenOut":
        return cls(
            id=t.id,
            symbol=t.symbol,
            name=t.name,
            contract_address=t.contract_address,
            price=str(t.price) if t.price is not None else None,
            market_cap=t.market_cap,
            updated_at=t.updated_at.isoformat(),
        )


class PricePointOut(BaseModel):
    price: str
    market_cap: int | None
    recorded_at: str

    @classmethod
    def from_domain(cls, p: PricePoint) -> "PricePointOut":
        return cls(
            price=str(p.price),
            market_cap=p.market_cap,
            recorded_at=p.recorded_at.isoformat(),
        )


class PriceHistoryResponse(BaseModel):
    symbol: str
    points: list[PricePointOut]


class PriceUpdateRequest(BaseModel):
    """Pushed by the price-feed collaborator (admin-authenticated)."""

    name: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., gt=0, max_digits=30, decimal_places=12)
    market_cap: int | None = Field(None, ge=0)
    contract_address: str | None = Field(None, max_length=44)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()
