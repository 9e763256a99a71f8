"""
Logging configuration for the scanner CLI.

Usage:
    import logging_config
    logging_config.setup()
"""

import logging
import sys

# Third-party loggers that only matter when something breaks
NOISY_LOGGERS = ("aiohttp", "asyncio", "web3", "urllib3")

APP_LOGGERS = (
    "__main__",
    "dex",
    "dex.evaluator",
    "dex.presentation",
    "dex.quote_client",
    "dex.runner",
    "roundtrip_arbitrage",
)

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
DEBUG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def setup(level=logging.INFO, stream=None):
    """
    Route all scanner logging through one console handler.

    - Short HH:MM:SS timestamps
    - Library chatter held back to warnings
    - Application loggers follow the requested level
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(stream or sys.stdout)
    console.setLevel(level)
    console.setFormatter(
        logging.Formatter(
            fmt=DEBUG_FORMAT if level <= logging.DEBUG else LOG_FORMAT,
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(console)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # utils.get_logger() may have attached its own handler before setup ran
    for name in APP_LOGGERS:
        app_logger = logging.getLogger(name)
        app_logger.setLevel(level)
        app_logger.handlers.clear()


def setup_debug():
    """
    Verbose logging for debugging.
    Shows every quote request with its amount.
    """
    setup(level=logging.DEBUG)
