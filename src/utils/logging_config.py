"""Structured logger setup shared across Lambdas."""

import logging
from pythonjsonlogger import jsonlogger


def get_logger(name: str) -> logging.Logger:
    """
    Configure a JSON logger once and reuse it.

    Context such as customer and order ids goes in ``extra`` so every
    qualification decision can be traced in CloudWatch.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        "%(levelname)s %(name)s %(message)s %(asctime)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def mask_secret(value: str | None, visible: int = 4) -> str:
    """Render a credential for logs, keeping only the last few characters."""
    if not value:
        return "MISSING"
    return "***" + value[-visible:]
