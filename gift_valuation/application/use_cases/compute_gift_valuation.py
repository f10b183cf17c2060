"""
Use-case: value a stock gift on its receipt date and compute the gain or loss at sale.
Depends only on Domain ports, entities and pricing helpers; no infrastructure imports.
"""

import asyncio
import logging
import math
import re
from datetime import date
from typing import Any

from gift_valuation.domain.entities.valuation import (
    DailyBar,
    PriceSummary,
    ValuationRequest,
    ValuationResult,
    ValuationValues,
)
from gift_valuation.domain.exceptions import GatewayError, InvalidInputError
from gift_valuation.domain.ports.market_data_port import IMarketDataGateway
from gift_valuation.domain.pricing import average_price, round2, to_decimal

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_valuation_request(
    ticker: Any, receipt_date: Any, sale_date: Any, shares: Any
) -> ValuationRequest:
    """Validate raw caller input and build a ValuationRequest.

    Raises:
        InvalidInputError: on any missing or malformed field.
    """
    if any(_is_missing(value) for value in (ticker, receipt_date, sale_date, shares)):
        raise InvalidInputError("ticker, receiptDate, saleDate and shares are all required.")
    if not isinstance(ticker, str):
        raise InvalidInputError("ticker must be a string.")
    return ValuationRequest(
        ticker=ticker.strip().upper(),
        receipt_date=_parse_date("receiptDate", receipt_date),
        sale_date=_parse_date("saleDate", sale_date),
        shares=_parse_shares(shares),
    )


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_date(field: str, value: Any) -> date:
    if not isinstance(value, str) or not _ISO_DATE.match(value.strip()):
        raise InvalidInputError(f"{field} must be a date in YYYY-MM-DD format.")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidInputError(f"{field} is not a valid calendar date: {value!r}.") from exc


def _parse_shares(value: Any) -> float:
    # bool is an int subclass; true/false must not count as 1/0 shares
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidInputError("shares must be a positive number.")
    try:
        shares = float(value)
    except (ValueError, OverflowError) as exc:
        raise InvalidInputError("shares must be a positive number.") from exc
    if not math.isfinite(shares) or shares <= 0:
        raise InvalidInputError("shares must be a positive number.")
    return shares


class ComputeGiftValuationUseCase:
    def __init__(self, gateway: IMarketDataGateway, timeout_seconds: float | None = 10.0) -> None:
        """
        Args:
            gateway:         IMarketDataGateway implementation (e.g. MassiveMarketDataGateway).
            timeout_seconds: Upper bound for each gateway call; None disables it.
        """
        self._gateway = gateway
        self._timeout = timeout_seconds

    async def execute(
        self, ticker: Any, receipt_date: Any, sale_date: Any, shares: Any
    ) -> ValuationResult:
        """Value *shares* of *ticker* received on *receipt_date* and sold on *sale_date*.

        Both daily bars are fetched concurrently; if either fetch fails the
        other is cancelled and the whole valuation fails.

        Raises:
            InvalidInputError:  raised before any gateway call.
            NoTradingDataError: a requested date has no bar.
            GatewayError:       provider failure or timeout.
        """
        request = parse_valuation_request(ticker, receipt_date, sale_date, shares)
        receipt_bar, sale_bar = await self._fetch_both(request)
        result = compute_valuation(request, receipt_bar, sale_bar)
        logger.info(
            "Valued %s x%s: gift %.2f on %s, proceeds %.2f on %s",
            result.ticker,
            result.shares,
            result.values.total_gift_value,
            result.receipt_date,
            result.values.total_proceeds,
            result.sale_date,
        )
        return result

    async def _fetch_both(self, request: ValuationRequest) -> tuple[DailyBar, DailyBar]:
        try:
            async with asyncio.TaskGroup() as group:
                receipt_task = group.create_task(
                    self._fetch(request.ticker, request.receipt_date)
                )
                sale_task = group.create_task(self._fetch(request.ticker, request.sale_date))
        except ExceptionGroup as failure:
            # receipt-date failure wins when both fetches failed
            errors = [
                task.exception()
                for task in (receipt_task, sale_task)
                if task.done() and not task.cancelled() and task.exception() is not None
            ]
            error = errors[0] if errors else failure.exceptions[0]
            logger.warning("Valuation for %s failed: %s", request.ticker, error)
            raise error
        return receipt_task.result(), sale_task.result()

    async def _fetch(self, ticker: str, day: date) -> DailyBar:
        try:
            async with asyncio.timeout(self._timeout):
                return await self._gateway.fetch_daily_bar(ticker, day)
        except TimeoutError as exc:
            raise GatewayError(
                f"Market data request for {ticker} on {day.isoformat()} timed out."
            ) from exc


def compute_valuation(
    request: ValuationRequest, receipt_bar: DailyBar, sale_bar: DailyBar
) -> ValuationResult:
    """Pure arithmetic: averages, per-share and total values, gain or loss."""
    shares = to_decimal(request.shares)
    avg_receipt = average_price(receipt_bar.open, receipt_bar.close)
    avg_sale = average_price(sale_bar.open, sale_bar.close)

    fair_market_value = round2(avg_receipt)
    total_gift_value = round2(avg_receipt * shares)
    sale_price = round2(avg_sale)
    total_proceeds = round2(avg_sale * shares)
    gain_or_loss = round2(to_decimal(total_proceeds) - to_decimal(total_gift_value))

    return ValuationResult(
        ticker=request.ticker,
        shares=request.shares,
        receipt_date=request.receipt_date,
        sale_date=request.sale_date,
        receipt=PriceSummary(
            open=receipt_bar.open, close=receipt_bar.close, avg=fair_market_value
        ),
        sale=PriceSummary(open=sale_bar.open, close=sale_bar.close, avg=sale_price),
        values=ValuationValues(
            fair_market_value_per_share_on_receipt=fair_market_value,
            total_gift_value=total_gift_value,
            sale_price_per_share=sale_price,
            total_proceeds=total_proceeds,
            gain_or_loss=gain_or_loss,
        ),
    )
