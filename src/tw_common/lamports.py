"""Integer arithmetic utilities for lamport-denominated stakes.

All bet amounts, pool totals, fees and payouts are int lamports
(1 SOL = 1_000_000_000 lamports). No float, no Decimal.
Fee rates are integer basis points (10000 bps = 100%).
"""

LAMPORTS_PER_SOL = 1_000_000_000
BPS_DENOMINATOR = 10_000


def validate_amount(amount: int) -> None:
    """Validate that a stake is a positive whole number of lamports."""
    if amount <= 0:
        raise ValueError(f"Amount must be a positive number of lamports, got {amount}")


def validate_fee_bps(fee_rate_bps: int) -> None:
    if not (0 <= fee_rate_bps <= BPS_DENOMINATOR):
        raise ValueError(f"Fee rate must be between 0 and 10000 bps, got {fee_rate_bps}")


def lamports_to_display(lamports: int) -> str:
    """Convert lamports to a display string: 1_500_000_000 -> '1.5 SOL'."""
    sign = "-" if lamports < 0 else ""
    whole, frac = divmod(abs(lamports), LAMPORTS_PER_SOL)
    frac_str = f"{frac:09d}".rstrip("0")
    if frac_str:
        return f"{sign}{whole:,}.{frac_str} SOL"
    return f"{sign}{whole:,} SOL"


def calculate_fee(amount: int, fee_rate_bps: int) -> int:
    """Calculate fee with floor division (fee never exceeds amount * rate).

    fee = floor(amount * fee_rate_bps / 10000)
    """
    if amount == 0 or fee_rate_bps == 0:
        return 0
    return (amount * fee_rate_bps) // BPS_DENOMINATOR
