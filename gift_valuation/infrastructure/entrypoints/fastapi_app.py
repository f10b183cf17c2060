"""
FastAPI HTTP surface for gift valuations.

create_app() only wires routes and error handlers around an already-built
use case; reading the environment and choosing adapters happens in
gift_valuation.infrastructure.entrypoints.server (the Composition Root).
"""

import logging
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from gift_valuation.application.use_cases.compute_gift_valuation import (
    ComputeGiftValuationUseCase,
)
from gift_valuation.domain.entities.valuation import PriceSummary, ValuationResult
from gift_valuation.domain.exceptions import ValuationError

logger = logging.getLogger(__name__)

INDEX_HTML = Path(__file__).parent / "static" / "index.html"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GiftValuationRequest(CamelModel):
    # raw JSON values, validated by the use case
    ticker: Any = None
    receipt_date: Any = None
    sale_date: Any = None
    shares: Any = None


class PriceSummaryOut(CamelModel):
    open: float
    close: float
    avg: float


class PricesOut(CamelModel):
    receipt: PriceSummaryOut
    sale: PriceSummaryOut


class ValuesOut(CamelModel):
    fair_market_value_per_share_on_receipt: float
    total_gift_value: float
    sale_price_per_share: float
    total_proceeds: float
    gain_or_loss: float


class GiftValuationResponse(CamelModel):
    ticker: str
    shares: float
    receipt_date: str
    sale_date: str
    prices: PricesOut
    values: ValuesOut

    @classmethod
    def from_result(cls, result: ValuationResult) -> "GiftValuationResponse":
        values = result.values
        return cls(
            ticker=result.ticker,
            shares=result.shares,
            receipt_date=result.receipt_date.isoformat(),
            sale_date=result.sale_date.isoformat(),
            prices=PricesOut(receipt=_summary(result.receipt), sale=_summary(result.sale)),
            values=ValuesOut(
                fair_market_value_per_share_on_receipt=values.fair_market_value_per_share_on_receipt,
                total_gift_value=values.total_gift_value,
                sale_price_per_share=values.sale_price_per_share,
                total_proceeds=values.total_proceeds,
                gain_or_loss=values.gain_or_loss,
            ),
        )


def _summary(summary: PriceSummary) -> PriceSummaryOut:
    return PriceSummaryOut(open=summary.open, close=summary.close, avg=summary.avg)


def create_app(
    use_case: ComputeGiftValuationUseCase,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    """Build the FastAPI app around *use_case*.

    Args:
        use_case:    ComputeGiftValuationUseCase wired with a market data gateway.
        on_shutdown: Optional coroutine function run when the app stops
                     (e.g. the gateway's aclose).
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        if on_shutdown is not None:
            await on_shutdown()

    app = FastAPI(title="Stock Gift Valuation API", lifespan=lifespan)

    @app.exception_handler(ValuationError)
    async def valuation_error_handler(_: Request, exc: ValuationError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Request body must be a JSON object with "
                "ticker, receiptDate, saleDate and shares."
            },
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Unexpected server error."})

    @app.post("/api/gift-valuation", response_model=GiftValuationResponse)
    async def gift_valuation(body: GiftValuationRequest) -> GiftValuationResponse:
        """Value a stock gift on its receipt date and the gain or loss at sale."""
        result = await use_case.execute(
            ticker=body.ticker,
            receipt_date=body.receipt_date,
            sale_date=body.sale_date,
            shares=body.shares,
        )
        return GiftValuationResponse.from_result(result)

    @app.get("/", include_in_schema=False)
    async def index() -> FileResponse:
        return FileResponse(INDEX_HTML, media_type="text/html")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
