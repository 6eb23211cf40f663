"""Debug tracing transport (enabled with HEROKU_DEBUG).

Wraps another async transport and logs each request line and response
status, including the pagination headers, at DEBUG level.

```python
from heroku_api_core.transport.tracing import TracingTransport
import httpx

transport = TracingTransport(wrapped_transport=httpx.AsyncHTTPTransport())

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("https://api.heroku.com/apps")
```
"""

import logging
import time

import httpx

logger = logging.getLogger(__name__)

# Headers whose values never appear in logs
SENSITIVE_HEADERS: frozenset[str] = frozenset(["authorization", "cookie", "set-cookie"])


def redact_headers(headers: httpx.Headers) -> dict[str, str]:
    """Return headers as a dict with sensitive values masked."""
    return {name: "***" if name.lower() in SENSITIVE_HEADERS else value for name, value in headers.items()}


class TracingTransport(httpx.AsyncBaseTransport):
    """Log every request and response passing through the wrapped transport.

    Args:
        wrapped_transport: The underlying transport to wrap
        log_level: Level used for trace lines (default: DEBUG)
    """

    def __init__(self, *, wrapped_transport: httpx.AsyncBaseTransport, log_level: int = logging.DEBUG) -> None:
        self._wrapped_transport = wrapped_transport
        self.log_level = log_level

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Forward the request, logging it and its outcome."""
        logger.log(self.log_level, f"--> {request.method} {request.url} {redact_headers(request.headers)}")
        started = time.monotonic()

        try:
            response = await self._wrapped_transport.handle_async_request(request)
        except Exception as e:
            logger.log(self.log_level, f"<-- {request.method} {request.url} failed: {e!r}")
            raise

        elapsed_ms = (time.monotonic() - started) * 1000
        next_range = response.headers.get("Next-Range")
        suffix = f" Next-Range={next_range}" if next_range else ""
        logger.log(
            self.log_level,
            f"<-- {response.status_code} {request.method} {request.url} ({elapsed_ms:.0f}ms){suffix}",
        )
        return response
