"""
Infrastructure adapter: Massive (formerly Polygon.io) aggregates REST API -> IMarketDataGateway.
All endpoint, auth and payload details are confined here; the rest of the
codebase depends only on IMarketDataGateway.
"""

import logging
from datetime import date
from typing import Any
from urllib.parse import quote

import httpx

from gift_valuation.domain.entities.valuation import DailyBar
from gift_valuation.domain.exceptions import GatewayError, NoTradingDataError
from gift_valuation.domain.ports.market_data_port import IMarketDataGateway

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.massive.com"

_OK_STATUSES = {"OK", "DELAYED"}


class MassiveMarketDataGateway(IMarketDataGateway):
    """Fetches one daily aggregate bar per (ticker, date) from the Massive REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            api_key:         Massive API key, sent as the ``apiKey`` query parameter.
            base_url:        REST root, overridable for proxies and tests.
            timeout_seconds: httpx timeout for each request.
            client:          Optional pre-built AsyncClient (e.g. with a MockTransport).
        """
        if not api_key:
            raise ValueError("api_key must be a non-empty string")
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds
        )

    async def fetch_daily_bar(self, ticker: str, day: date) -> DailyBar:
        iso_day = day.isoformat()
        path = f"/v2/aggs/ticker/{quote(ticker, safe='')}/range/1/day/{iso_day}/{iso_day}"
        params = {"adjusted": "true", "sort": "asc", "limit": 1, "apiKey": self._api_key}

        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise GatewayError(f"Market data request for {ticker} on {iso_day} timed out.") from exc
        except httpx.HTTPError as exc:
            raise GatewayError(f"Market data request failed: {exc.__class__.__name__}") from exc

        payload = self._decode(response)
        results = payload.get("results") or []
        if not isinstance(results, list):
            raise GatewayError("Market data provider returned malformed results.")
        if not results:
            raise NoTradingDataError(ticker, day)

        bar = results[0]
        try:
            return DailyBar(open=float(bar["o"]), close=float(bar["c"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GatewayError(
                f"Market data response for {ticker} on {iso_day} is missing open/close prices."
            ) from exc

    def _decode(self, response: httpx.Response) -> dict[str, Any]:
        if response.status_code in (401, 403):
            raise GatewayError("Market data provider rejected the API key.")
        if response.status_code == 429:
            raise GatewayError("Market data provider rate limit exceeded; try again later.")
        if response.status_code != 200:
            logger.warning(
                "Market data provider returned HTTP %s: %s",
                response.status_code,
                response.text[:200],
            )
            raise GatewayError(f"Market data provider error (HTTP {response.status_code}).")

        try:
            payload = response.json()
        except ValueError as exc:
            raise GatewayError("Market data provider returned invalid JSON.") from exc
        if not isinstance(payload, dict):
            raise GatewayError("Market data provider returned an unexpected payload.")

        status = payload.get("status")
        if status not in _OK_STATUSES:
            message = payload.get("error") or payload.get("message") or f"unexpected status {status!r}"
            raise GatewayError(f"Market data provider error: {message}")
        return payload

    async def aclose(self) -> None:
        await self._client.aclose()
