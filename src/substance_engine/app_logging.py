"""Logging configuration helpers."""

import logging


def configure_logging() -> None:
    """Configure engine logging with a single stream handler."""
    logger = logging.getLogger("substance_engine")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
