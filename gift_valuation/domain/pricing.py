"""
Price arithmetic for valuations.

Floats coming from the market data provider are converted through their
shortest ``repr`` so that a price printed as ``151.005`` rounds to ``151.01``.
Zero external dependencies.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext

_CENT = Decimal("0.01")


def to_decimal(value: float) -> Decimal:
    return Decimal(repr(float(value)))


def round2(value: float | Decimal) -> float:
    """Round to two decimal places, ties away from zero.

    >>> round2(151.005)
    151.01
    >>> round2(-0.005)
    -0.01
    """
    amount = value if isinstance(value, Decimal) else to_decimal(value)
    with localcontext() as ctx:
        # room for every integer digit plus the two cent digits
        ctx.prec = max(28, amount.adjusted() + 3)
        return float(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def average_price(open_price: float, close_price: float) -> Decimal:
    """Midpoint of the day's open and close, used as fair market value."""
    return (to_decimal(open_price) + to_decimal(close_price)) / 2
