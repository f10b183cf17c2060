"""
Composition Root for the HTTP service.

Importing this module reads the environment and wires the market data gateway
into the use case, so a missing MASSIVE_API_KEY stops the process before any
request is served.

When MARKET_DATA_SECRET_ARN is set, the secret is fetched from AWS Secrets
Manager and exported to the environment before settings are read.

Run locally:
    uvicorn gift_valuation.infrastructure.entrypoints.server:app --reload --port 8000
or, once installed:
    gift-valuation
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

from gift_valuation.application.use_cases.compute_gift_valuation import (  # noqa: E402
    ComputeGiftValuationUseCase,
)
from gift_valuation.domain.ports.market_data_port import IMarketDataGateway  # noqa: E402
from gift_valuation.infrastructure.config.logging import setup_logging  # noqa: E402
from gift_valuation.infrastructure.config.settings import Settings  # noqa: E402
from gift_valuation.infrastructure.entrypoints.fastapi_app import create_app  # noqa: E402
from gift_valuation.infrastructure.market_data.massive_adapter import (  # noqa: E402
    MassiveMarketDataGateway,
)

logger = logging.getLogger(__name__)


def build_gateway(settings: Settings) -> IMarketDataGateway:
    if settings.market_data_provider == "yfinance":
        from gift_valuation.infrastructure.market_data.yfinance_adapter import (
            YFinanceMarketDataGateway,
        )

        return YFinanceMarketDataGateway()
    return MassiveMarketDataGateway(
        api_key=settings.market_data_api_key,
        base_url=settings.market_data_base_url,
        timeout_seconds=settings.market_data_timeout_seconds,
    )


# ---------------------------------------------------------------------------
# Secret bootstrap: must run before settings are read
# ---------------------------------------------------------------------------
_secret_arn = os.environ.get("MARKET_DATA_SECRET_ARN")
if _secret_arn:
    from gift_valuation.infrastructure.secrets.secrets_manager_adapter import (
        SecretsManagerAdapter,
    )

    SecretsManagerAdapter().load_into_env(_secret_arn)

# ---------------------------------------------------------------------------
# Composition Root: wire all dependencies once at startup
# ---------------------------------------------------------------------------
settings = Settings.from_env()
setup_logging(settings.log_level)
logger.info("Starting with settings: %s", settings.dict_for_logging())

_gateway = build_gateway(settings)
_use_case = ComputeGiftValuationUseCase(
    _gateway, timeout_seconds=settings.market_data_timeout_seconds
)
app = create_app(_use_case, on_shutdown=_gateway.aclose)


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
