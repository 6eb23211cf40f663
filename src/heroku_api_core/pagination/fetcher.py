"""Range-based pagination for list endpoints.

The API returns large collections as a chain of responses. ``206 Partial
Content`` means more data follows, and its ``Next-Range`` header must be
sent back as ``Range`` on the next request. ``200 OK`` ends the chain. Any
other status ends it with an error.

Two entry points share one implementation:

- ``fetch_all_pages``: calls a handler once per page and returns the page count
- ``iter_pages``: async generator yielding each page for the caller to consume

Pages arrive strictly in server order. Each request needs the previous
response's continuation value, so there is no prefetching.

Example:
    ```python
    def on_page(page: httpx.Response) -> None:
        apps.extend(page.json())

    await fetch_all_pages(client, token, "/apps", on_page)

    async with aclosing(iter_pages(client, token, "/apps")) as pages:
        async for page in pages:
            await page.aread()
            print(page.json())
    ```
"""

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from enum import Enum
from typing import Any

import httpx

from heroku_api_core.client import APIClient
from heroku_api_core.errors.exceptions import (
    HandlerError,
    PageLimitExceededError,
    PaginationCancelledError,
    TransportError,
    UnexpectedStatusError,
)
from heroku_api_core.errors.handler import raise_for_page_status, status_line

logger = logging.getLogger(__name__)

RANGE_HEADER = "Range"
NEXT_RANGE_HEADER = "Next-Range"

PageHandler = Callable[[httpx.Response], Awaitable[Any] | Any]

# Sentinel: take the page cap from the client settings
_FROM_SETTINGS: Any = object()


class PaginationState(Enum):
    """Lifecycle of one traversal."""

    AWAITING_FIRST_PAGE = "awaiting_first_page"
    HAVE_PARTIAL_PAGE = "have_partial_page"
    DONE = "done"
    FAILED = "failed"


class Paginator:
    """One traversal of a range-paginated resource.

    A paginator is single use: continuation values belong to one traversal,
    so a failed or finished sequence must be restarted with a new instance.

    Args:
        client: Client used to send each page request.
        token: Bearer token; empty or None sends no Authorization header.
        resource_path: Path appended to the API base URL, e.g. ``/apps``.
        cancel_event: When set, no further request is issued.
        max_pages: Page cap; None is unbounded. Defaults to the settings value.
    """

    def __init__(
        self,
        client: APIClient,
        token: str | None,
        resource_path: str,
        *,
        cancel_event: asyncio.Event | None = None,
        max_pages: int | None = _FROM_SETTINGS,
    ) -> None:
        self.client = client
        self.token = token
        self.resource_path = resource_path
        self.cancel_event = cancel_event
        self.max_pages = client.config.settings.max_pages if max_pages is _FROM_SETTINGS else max_pages

        self.state = PaginationState.AWAITING_FIRST_PAGE
        self.pages_delivered = 0
        self.next_range: str | None = None
        self._started = False

    def fail(self) -> None:
        self.state = PaginationState.FAILED

    def _raise_if_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise PaginationCancelledError(
                f"Pagination of {self.resource_path} cancelled after {self.pages_delivered} pages",
                pages_delivered=self.pages_delivered,
            )

    def _check_can_continue(self) -> None:
        self._raise_if_cancelled()

        if self.max_pages is not None and self.pages_delivered >= self.max_pages:
            raise PageLimitExceededError(
                f"Pagination of {self.resource_path} exceeded {self.max_pages} pages",
                max_pages=self.max_pages,
            )

    async def _request_page(self) -> httpx.Response:
        template = self.client.request_template(self.token).with_method("GET").with_path(self.resource_path)
        if self.next_range is not None:
            template = template.with_header(RANGE_HEADER, self.next_range)

        logger.debug(f"Requesting page {self.pages_delivered + 1} of {self.resource_path} (Range: {self.next_range})")
        return await self.client.send(template, stream=True)

    async def pages(self, *, read_body: bool = False) -> AsyncIterator[httpx.Response]:
        """Yield each page in order; the response is closed once the caller moves on.

        Args:
            read_body: Read each body before yielding it instead of leaving
                it streamed.

        Raises:
            UnexpectedStatusError: Status outside {200, 206}, or a 206 without Next-Range.
            TransportError: Network failure on any request.
            PaginationCancelledError: The cancel event was set.
            PageLimitExceededError: More partial pages than ``max_pages``.
        """
        if self._started:
            raise RuntimeError("Paginator has already been used; start a new traversal")
        self._started = True

        try:
            while True:
                self._check_can_continue()
                response = await self._request_page()
                try:
                    raise_for_page_status(response)
                    # Cancelled while the request was in flight
                    self._raise_if_cancelled()
                    if read_body:
                        await _read_body(response)

                    self.pages_delivered += 1
                    if response.status_code == 200:
                        self.state = PaginationState.DONE
                    else:
                        self.state = PaginationState.HAVE_PARTIAL_PAGE
                        self.next_range = response.headers.get(NEXT_RANGE_HEADER)

                    yield response

                    if self.state is PaginationState.DONE:
                        logger.debug(f"Fetched {self.pages_delivered} pages of {self.resource_path}")
                        return

                    if not self.next_range:
                        raise UnexpectedStatusError(
                            f"{status_line(response)} (missing {NEXT_RANGE_HEADER} header)",
                            status_code=response.status_code,
                            response=response,
                        )
                finally:
                    await response.aclose()
        except GeneratorExit:
            raise
        except BaseException:
            self.fail()
            raise


def iter_pages(
    client: APIClient,
    token: str | None,
    resource_path: str,
    *,
    cancel_event: asyncio.Event | None = None,
    max_pages: int | None = _FROM_SETTINGS,
) -> AsyncIterator[httpx.Response]:
    """Iterate the pages of ``resource_path`` as streamed responses.

    Wrap the iterator in ``contextlib.aclosing`` when you may stop early, so
    the open response is released promptly.
    """
    paginator = Paginator(client, token, resource_path, cancel_event=cancel_event, max_pages=max_pages)
    return paginator.pages()


async def _read_body(page: httpx.Response) -> None:
    try:
        await page.aread()
    except httpx.TransportError as e:
        raise TransportError(f"Reading {page.request.url} failed: {e}", url=str(page.request.url)) from e


async def _invoke_handler(on_page: PageHandler, page: httpx.Response) -> None:
    result = on_page(page)
    if inspect.isawaitable(result):
        await result


async def fetch_all_pages(
    client: APIClient,
    token: str | None,
    resource_path: str,
    on_page: PageHandler,
    *,
    cancel_event: asyncio.Event | None = None,
    max_pages: int | None = _FROM_SETTINGS,
) -> int:
    """Drain a paginated resource into ``on_page``, one call per page.

    Args:
        client: Client used to send each page request.
        token: Bearer token; empty or None sends no Authorization header.
        resource_path: Path appended to the API base URL.
        on_page: Called with each page response in order. May be sync or
            async. Async handlers receive an unread, streamed body.
        cancel_event: When set, stops before the next request.
        max_pages: Page cap; None is unbounded. Defaults to the settings value.

    Returns:
        Number of pages delivered to the handler.

    Raises:
        HandlerError: ``on_page`` raised; the original error is ``__cause__``.
        UnexpectedStatusError, TransportError, PaginationCancelledError,
        PageLimitExceededError: As for ``Paginator.pages``.
    """
    paginator = Paginator(client, token, resource_path, cancel_event=cancel_event, max_pages=max_pages)

    # Sync handlers cannot stream, so hand them a fully read body
    read_body = not inspect.iscoroutinefunction(on_page)

    async with aclosing(paginator.pages(read_body=read_body)) as pages:
        async for page in pages:
            try:
                await _invoke_handler(on_page, page)
            except Exception as e:
                paginator.fail()
                raise HandlerError(
                    f"Page handler failed on page {paginator.pages_delivered} of {resource_path}: {e}",
                    page_number=paginator.pages_delivered,
                ) from e

    return paginator.pages_delivered
