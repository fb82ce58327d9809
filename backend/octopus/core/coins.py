"""Coin Formatting - base-unit integer amounts rendered for humans.

Invariants:
    - Input amounts are integers (or integer strings) in base units
    - Output never has trailing zeros or a dangling decimal point
"""

from decimal import Decimal

from octopus.core.domain_types import COIN_PRECISION


def human_readable(amount: int | str) -> str:
    """Render base units as TRU, e.g. 1500000000 -> "1.5"."""
    value = Decimal(int(amount)) / Decimal(COIN_PRECISION)
    text = f"{value:.9f}".rstrip("0").rstrip(".")
    return text or "0"
