"""Pydantic schemas for tw_user."""

import re

from pydantic import BaseModel, Field, field_validator

from src.tw_user.domain.models import BettingRecord, User

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class UsernameUpdateRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)

    @field_validator("username")
    @classmethod
    def username_charset(cls, v: str) -> str:
        v = v.strip()
        if not v or not _USERNAME_RE.match(v):
            raise ValueError(
                "Username may only contain letters, digits, '_', '.' and '-'"
            )
        return v


class UserOut(BaseModel):
    id: int
    wallet_address: str
    username: str | None
    created_at: str

    @classmethod
    def from_domain(cls, u: User) -> "UserOut":
        return cls(
            id=u.id,
            wallet_address=u.wallet_address,
            username=u.username,
            created_at=u.created_at.isoformat(),
        )


class UserProfileResponse(BaseModel):
    wallet_address: str
    username: str | None
    member_since: str
    total_bets: int
    total_wagered: int
    wins: int
    losses: int
    win_rate: str
    total_claimed: int

    @classmethod
    def from_domain(cls, u: User, r: BettingRecord) -> "UserProfileResponse":
        return cls(
            wallet_address=u.wallet_address,
            username=u.username,
            member_since=u.created_at.isoformat(),
            total_bets=r.total_bets,
            total_wagered=r.total_wagered,
            wins=r.wins,
            losses=r.losses,
            win_rate=str(r.win_rate),
            total_claimed=r.total_claimed,
        )


class LeaderboardEntry(BaseModel):
    rank: int
    wallet_address: str
    username: str
    total_bets: int
    total_wagered: int
    wins: int
    settled_bets: int
    win_rate: str

    @classmethod
    def from_domain(cls, rank: int, r: BettingRecord) -> "LeaderboardEntry":
        return cls(
            rank=rank,
            wallet_address=r.wallet_address,
            username=r.username or "Anonymous",
            total_bets=r.total_bets,
            total_wagered=r.total_wagered,
            wins=r.wins,
            settled_bets=r.settled_bets,
            win_rate=str(r.win_rate),
        )
