"""Winner determination from start/end token prices.

change(token) = (end - start) / start * 100

Computed in Decimal so equal relative moves compare exactly equal
regardless of the absolute price scale.
"""

from decimal import Decimal

from src.tw_clearing.domain.models import WinnerDetermination
from src.tw_common.enums import Outcome, Side
from src.tw_common.errors import InvalidStartPriceError

_HUNDRED = Decimal(100)

PriceLike = Decimal | int | float | str


def _to_decimal(value: PriceLike) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # repr() keeps the shortest round-tripping form: 0.0001 -> "0.0001"
        return Decimal(repr(value))
    return Decimal(value)


def price_change_pct(start: PriceLike | None, end: PriceLike, side: Side) -> Decimal:
    """Percentage move from start to end. Non-positive start is rejected."""
    if start is None:
        raise InvalidStartPriceError(side.value, None)
    start_d = _to_decimal(start)
    if start_d <= 0:
        raise InvalidStartPriceError(side.value, start_d)
    return (_to_decimal(end) - start_d) / start_d * _HUNDRED


def determine_winner(
    token_a_start: PriceLike | None,
    token_a_end: PriceLike,
    token_b_start: PriceLike | None,
    token_b_end: PriceLike,
) -> WinnerDetermination:
    change_a = price_change_pct(token_a_start, token_a_end, Side.A)
    change_b = price_change_pct(token_b_start, token_b_end, Side.B)
    if change_a > change_b:
        winner = Outcome.A
    elif change_b > change_a:
        winner = Outcome.B
    else:
        winner = Outcome.TIE
    return WinnerDetermination(winner=winner, change_a=change_a, change_b=change_b)
