"""War lifecycle rules.

Active:  status ACTIVE, not settled, start_time <= now < end_time
Ended:   end_time <= now (bets closed, settlement allowed)
Settled: is_settled (terminal, pool totals frozen)
"""

from datetime import datetime

from src.tw_common.enums import Side, WarStatus
from src.tw_war.domain.models import War


def is_accepting_bets(war: War, now: datetime) -> bool:
    if war.status != WarStatus.ACTIVE or war.is_settled:
        return False
    if war.start_time is None or war.end_time is None:
        return False
    return war.start_time <= now < war.end_time


def has_ended(war: War, now: datetime) -> bool:
    return war.end_time is not None and war.end_time <= now


def side_total(war: War, side: Side | str) -> int:
    return war.total_bets_a if Side(side) == Side.A else war.total_bets_b


def total_pool(war: War) -> int:
    return war.total_bets_a + war.total_bets_b
