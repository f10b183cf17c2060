"""
Infrastructure adapter: yfinance -> IMarketDataGateway.
All yfinance-specific details (Ticker.history, DataFrame columns) are confined here.
yfinance is blocking, so each lookup runs in a worker thread.
"""

import asyncio
from datetime import date, timedelta

import yfinance as yf

from gift_valuation.domain.entities.valuation import DailyBar
from gift_valuation.domain.exceptions import GatewayError, NoTradingDataError
from gift_valuation.domain.ports.market_data_port import IMarketDataGateway


class YFinanceMarketDataGateway(IMarketDataGateway):
    """Fetches unadjusted daily open/close prices from Yahoo Finance via yfinance."""

    async def fetch_daily_bar(self, ticker: str, day: date) -> DailyBar:
        return await asyncio.to_thread(self._fetch_sync, ticker, day)

    def _fetch_sync(self, ticker: str, day: date) -> DailyBar:
        try:
            # end is exclusive in yfinance
            history = yf.Ticker(ticker).history(
                start=day.isoformat(),
                end=(day + timedelta(days=1)).isoformat(),
                interval="1d",
                auto_adjust=False,
            )
        except Exception as exc:
            raise GatewayError(f"yfinance lookup for {ticker} failed: {exc}") from exc

        if history is None or history.empty:
            raise NoTradingDataError(ticker, day)

        row = history.iloc[0]
        return DailyBar(
            open=round(float(row["Open"]), 4),
            close=round(float(row["Close"]), 4),
        )
