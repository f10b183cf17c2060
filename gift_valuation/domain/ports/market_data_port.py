"""
Port (interface) for market data gateways.
Infrastructure adapters (e.g. MassiveMarketDataGateway) must implement this interface.
"""

from abc import ABC, abstractmethod
from datetime import date

from gift_valuation.domain.entities.valuation import DailyBar


class IMarketDataGateway(ABC):
    @abstractmethod
    async def fetch_daily_bar(self, ticker: str, day: date) -> DailyBar:
        """Return the open/close bar for *ticker* on *day*.

        Raises:
            NoTradingDataError: the provider has no bar for that exact date.
            GatewayError:       transport, auth, rate-limit or payload failure.
        """
        ...

    async def aclose(self) -> None:
        """Release any pooled connections. No-op by default."""
        return None
