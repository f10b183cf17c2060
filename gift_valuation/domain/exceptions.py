"""
Exception hierarchy for gift valuations.

    ValuationError(Exception)           base; never raised directly
      InvalidInputError                 request rejected before any I/O
      NoTradingDataError                no daily bar for (ticker, date)
      GatewayError                      market data provider unreachable or misbehaving

``status_code`` is the HTTP status the API boundary answers with.
"""

from datetime import date


class ValuationError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ValuationError):
    status_code = 400


class NoTradingDataError(ValuationError):
    def __init__(self, ticker: str, day: date) -> None:
        super().__init__(
            f"No Trading data for {ticker} on {day.isoformat()} (possible weekend or holiday)."
        )
        self.ticker = ticker
        self.day = day


class GatewayError(ValuationError):
    pass
