import asyncio
import inspect
from datetime import date

import pytest

from gift_valuation.domain.entities.valuation import DailyBar
from gift_valuation.domain.exceptions import NoTradingDataError
from gift_valuation.domain.ports.market_data_port import IMarketDataGateway


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**pyfuncitem.funcargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


class FakeGateway(IMarketDataGateway):
    """In-memory gateway keyed by ISO date; missing dates raise NoTradingDataError."""

    def __init__(
        self,
        bars: dict[str, DailyBar] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self.bars = bars or {}
        self.errors = errors or {}
        self.calls: list[tuple[str, date]] = []
        self.closed = False

    async def fetch_daily_bar(self, ticker: str, day: date) -> DailyBar:
        self.calls.append((ticker, day))
        key = day.isoformat()
        if key in self.errors:
            raise self.errors[key]
        if key not in self.bars:
            raise NoTradingDataError(ticker, day)
        return self.bars[key]

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def aapl_gateway() -> FakeGateway:
    return FakeGateway(
        bars={
            "2024-03-01": DailyBar(open=150.00, close=152.00),
            "2024-09-03": DailyBar(open=160.00, close=158.00),
        }
    )
