"""
Domain entities for a stock gift valuation.
All entities are request-scoped and immutable.
Zero external dependencies: pure Python dataclasses only.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ValuationRequest:
    ticker: str
    receipt_date: date
    sale_date: date
    shares: float


@dataclass(frozen=True)
class DailyBar:
    open: float
    close: float


@dataclass(frozen=True)
class PriceSummary:
    open: float
    close: float
    avg: float


@dataclass(frozen=True)
class ValuationValues:
    fair_market_value_per_share_on_receipt: float
    total_gift_value: float
    sale_price_per_share: float
    total_proceeds: float
    gain_or_loss: float


@dataclass(frozen=True)
class ValuationResult:
    ticker: str
    shares: float
    receipt_date: date
    sale_date: date
    receipt: PriceSummary
    sale: PriceSummary
    values: ValuationValues
