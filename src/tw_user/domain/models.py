"""Domain models for tw_user — wallet-identified bettors."""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal


@dataclass
class User:
    id: int
    wallet_address: str
    username: str | None
    created_at: datetime
    updated_at: datetime


@dataclass
class BettingRecord:
    """Aggregated bet history of one wallet.

    wins / losses only count bets on wars settled with a winner; bets on
    tied or unsettled wars count toward total_bets alone.
    """

    wallet_address: str
    username: str | None
    total_bets: int
    total_wagered: int
    wins: int
    losses: int
    total_claimed: int

    @property
    def settled_bets(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> Decimal:
        """Percentage of decided bets won, two decimal places."""
        if self.settled_bets == 0:
            return Decimal("0.00")
        rate = Decimal(self.wins) * 100 / Decimal(self.settled_bets)
        return rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
