"""
Observability: structured logging and request IDs.

Usage:
    import logging
    from timeline.observability import configure_logging, request_scope

    configure_logging("INFO")
    logger = logging.getLogger(__name__)

    with request_scope():
        logger.info("Timeline built", extra={"tasks": 42})
"""

from .logging import (
    CorrelationIdMiddleware,
    HumanFormatter,
    JSONFormatter,
    configure_logging,
    configure_logging_from_env,
    current_request_id,
    request_scope,
)

__all__ = [
    "configure_logging",
    "configure_logging_from_env",
    "JSONFormatter",
    "HumanFormatter",
    "CorrelationIdMiddleware",
    "request_scope",
    "current_request_id",
]
