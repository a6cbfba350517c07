"""Shared HTTP client with connection pooling for service checks."""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

_shared_client: Optional[httpx.Client] = None


def get_shared_client(timeout: float = DEFAULT_TIMEOUT_SECONDS) -> httpx.Client:
    """Get or create a shared httpx.Client with connection pooling.

    The timeout only applies when the client is first created.
    """
    global _shared_client
    if _shared_client is None:
        _shared_client = httpx.Client(
            timeout=timeout,
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0,
            ),
            http2=True,
        )
        logger.debug("Created shared HTTP client (timeout=%.1fs)", timeout)
    return _shared_client


def close_shared_client():
    """Close the shared client. Call on app shutdown."""
    global _shared_client
    if _shared_client is not None:
        _shared_client.close()
        _shared_client = None
        logger.debug("Closed shared HTTP client")
