"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class Side(str, Enum):
    """Which token of a war a bet backs."""
    A = "A"
    B = "B"


class Outcome(str, Enum):
    """Settled winner of a war. TIE means neither side outperformed."""
    A = "A"
    B = "B"
    TIE = "TIE"


class WarStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"


class ModerationAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class TiePolicy(str, Enum):
    """How stakes are returned when a war ends in a tie.

    REFUND: no fee is charged, every bet gets its amount back.
    REFUND_AFTER_FEE: the normal fee is charged, the rest is returned pro rata.
    """
    REFUND = "REFUND"
    REFUND_AFTER_FEE = "REFUND_AFTER_FEE"


class LeaderboardPeriod(str, Enum):
    ALL = "all"
    WEEK = "7d"
    MONTH = "30d"
