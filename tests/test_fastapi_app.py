"""HTTP surface tests."""

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from conftest import FakeGateway

from gift_valuation.application.use_cases.compute_gift_valuation import (
    ComputeGiftValuationUseCase,
)
from gift_valuation.domain.exceptions import GatewayError
from gift_valuation.infrastructure.entrypoints.fastapi_app import create_app

VALID_BODY = {"ticker": "aapl", "receiptDate": "2024-03-01", "saleDate": "2024-09-03", "shares": 100}


def _app(gateway: FakeGateway) -> FastAPI:
    return create_app(ComputeGiftValuationUseCase(gateway), on_shutdown=gateway.aclose)


async def _post(app: FastAPI, body, raise_app_exceptions: bool = True):
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post("/api/gift-valuation", json=body)


async def test_valuation_response_shape(aapl_gateway):
    response = await _post(_app(aapl_gateway), VALID_BODY)

    assert response.status_code == 200
    assert response.json() == {
        "ticker": "AAPL",
        "shares": 100.0,
        "receiptDate": "2024-03-01",
        "saleDate": "2024-09-03",
        "prices": {
            "receipt": {"open": 150.0, "close": 152.0, "avg": 151.0},
            "sale": {"open": 160.0, "close": 158.0, "avg": 159.0},
        },
        "values": {
            "fairMarketValuePerShareOnReceipt": 151.0,
            "totalGiftValue": 15100.0,
            "salePricePerShare": 159.0,
            "totalProceeds": 15900.0,
            "gainOrLoss": 800.0,
        },
    }


async def test_string_shares_are_accepted(aapl_gateway):
    response = await _post(_app(aapl_gateway), {**VALID_BODY, "shares": "2.5"})

    assert response.status_code == 200
    assert response.json()["values"]["totalGiftValue"] == 377.5


async def test_invalid_shares_is_400(aapl_gateway):
    for shares in (0, -5, "abc", "-1"):
        response = await _post(_app(aapl_gateway), {**VALID_BODY, "shares": shares})

        assert response.status_code == 400
        assert response.json() == {"error": "shares must be a positive number."}
    assert aapl_gateway.calls == []


async def test_missing_field_is_400(aapl_gateway):
    body = {key: value for key, value in VALID_BODY.items() if key != "saleDate"}

    response = await _post(_app(aapl_gateway), body)

    assert response.status_code == 400
    assert "required" in response.json()["error"]


async def test_non_object_body_is_400(aapl_gateway):
    response = await _post(_app(aapl_gateway), ["AAPL", "2024-03-01"])

    assert response.status_code == 400
    assert "error" in response.json()


async def test_no_trading_data_is_500(aapl_gateway):
    response = await _post(_app(aapl_gateway), {**VALID_BODY, "receiptDate": "2024-03-02"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "No Trading data for AAPL on 2024-03-02 (possible weekend or holiday)."
    }


async def test_gateway_failure_is_500(aapl_gateway):
    aapl_gateway.errors["2024-09-03"] = GatewayError("Market data provider rejected the API key.")

    response = await _post(_app(aapl_gateway), VALID_BODY)

    assert response.status_code == 500
    assert response.json() == {"error": "Market data provider rejected the API key."}


async def test_unexpected_error_is_generic_500(aapl_gateway):
    aapl_gateway.errors["2024-03-01"] = RuntimeError("boom")

    response = await _post(_app(aapl_gateway), VALID_BODY, raise_app_exceptions=False)

    assert response.status_code == 500
    assert response.json() == {"error": "Unexpected server error."}


async def test_index_serves_form(aapl_gateway):
    transport = ASGITransport(app=_app(aapl_gateway))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "/api/gift-valuation" in response.text


async def test_health(aapl_gateway):
    transport = ASGITransport(app=_app(aapl_gateway))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")

    assert response.json() == {"status": "ok"}


async def test_huge_share_count_is_valued(aapl_gateway):
    response = await _post(_app(aapl_gateway), {**VALID_BODY, "shares": 1e27})

    assert response.status_code == 200
    assert response.json()["values"]["gainOrLoss"] == 8e27


async def test_share_count_beyond_float_range_is_400(aapl_gateway):
    transport = ASGITransport(app=_app(aapl_gateway))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/gift-valuation",
            content=(
                '{"ticker": "AAPL", "receiptDate": "2024-03-01", '
                '"saleDate": "2024-09-03", "shares": 1' + "0" * 400 + "}"
            ),
            headers={"Content-Type": "application/json"},
        )

    assert response.status_code == 400
    assert response.json() == {"error": "shares must be a positive number."}
    assert aapl_gateway.calls == []


async def test_shutdown_closes_gateway(aapl_gateway):
    app = _app(aapl_gateway)

    async with app.router.lifespan_context(app):
        assert aapl_gateway.closed is False

    assert aapl_gateway.closed is True
