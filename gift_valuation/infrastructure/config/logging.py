import logging
import sys

HANDLER_NAME = "gift_valuation.stdout"


def setup_logging(level: str = "INFO") -> None:
    """Configure logging to output to stdout with proper formatting.

    Safe to call more than once; the stdout handler is only installed the first time.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # httpx logs every request URL at INFO, which would include the apiKey parameter
    for noisy in ("httpx", "httpcore", "yfinance", "botocore", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    if any(handler.get_name() == HANDLER_NAME for handler in root_logger.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
