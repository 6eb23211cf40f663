"""Testing utilities for code built on heroku_api_core.

Provides scripted page sequences served through ``httpx.MockTransport``,
so pagination can be exercised without a network.

Example:
    ```python
    from heroku_api_core.testing import make_page, paged_transport

    script = paged_transport([
        make_page(206, [{"name": "a"}], next_range="]a..; max=1"),
        make_page(200, [{"name": "b"}]),
    ])
    client = APIClient(config, transport=script.transport)
    await fetch_all_pages(client, "token", "/apps", on_page)

    assert script.requests[1].headers["Range"] == "]a..; max=1"
    ```
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx


def make_page(status_code: int, body: Any = None, *, next_range: str | None = None) -> httpx.Response:
    """Build a page response with a JSON body and optional Next-Range header."""
    headers = {"Next-Range": next_range} if next_range is not None else {}
    if body is None:
        return httpx.Response(status_code, headers=headers)
    return httpx.Response(status_code, headers=headers, json=body)


@dataclass
class PageScript:
    """Answer requests with ``pages`` in order, recording every request.

    A request past the end of the script raises AssertionError, which makes
    a runaway pagination loop fail loudly.
    """

    pages: Sequence[httpx.Response]
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = len(self.requests) - 1
        if index >= len(self.pages):
            raise AssertionError(f"Unexpected request #{index + 1}: {request.method} {request.url}")
        return self.pages[index]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def range_headers(self) -> list[str | None]:
        """The Range header sent with each recorded request (None when absent)."""
        return [request.headers.get("Range") for request in self.requests]


def paged_transport(pages: Sequence[httpx.Response]) -> PageScript:
    return PageScript(list(pages))


__all__ = ["PageScript", "make_page", "paged_transport"]
