"""Factory for the async transport used by API clients."""

import logging
import ssl

import httpx

from heroku_api_core.transport.tracing import TracingTransport

logger = logging.getLogger(__name__)


def create_transport(
    *,
    verify: ssl.SSLContext | bool = True,
    debug: bool = False,
    wrapped_transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncBaseTransport:
    """Create the transport stack for API requests.

    Args:
        verify: SSL context holding the bootstrapped trust store, True for
            default trust, or False to skip peer verification.
        debug: Wrap the transport in a TracingTransport.
        wrapped_transport: Base transport to use instead of a fresh
            AsyncHTTPTransport (tests pass a MockTransport here).

    Returns:
        The outermost transport of the stack.
    """
    if verify is False:
        logger.warning("TLS peer verification is disabled for API requests")

    transport = wrapped_transport or httpx.AsyncHTTPTransport(verify=verify)
    if debug:
        transport = TracingTransport(wrapped_transport=transport)
    return transport
