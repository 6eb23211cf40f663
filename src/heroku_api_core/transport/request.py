"""Outbound request templates for the Heroku API."""

from dataclasses import dataclass, replace

import httpx

from heroku_api_core.config.settings import ClientSettings

ACCEPT_HEADER = "application/vnd.heroku+json; version=3"


@dataclass(frozen=True)
class RequestTemplate:
    """Immutable description of one outbound request.

    Attributes:
        url: Absolute request URL.
        method: HTTP method.
        header_items: Header pairs, in the order they were layered.
        verify: False when TLS peer verification is skipped for this host.
    """

    url: str
    method: str = "GET"
    header_items: tuple[tuple[str, str], ...] = ()
    verify: bool = True

    @property
    def headers(self) -> httpx.Headers:
        return httpx.Headers(list(self.header_items))

    def with_header(self, name: str, value: str) -> "RequestTemplate":
        """Return a copy with ``name`` set to ``value``, replacing any earlier value."""
        headers = self.headers
        headers[name] = value
        return replace(self, header_items=tuple(headers.multi_items()))

    def with_path(self, path: str) -> "RequestTemplate":
        return replace(self, url=self.url + path)

    def with_method(self, method: str) -> "RequestTemplate":
        return replace(self, method=method.upper())

    def to_request(self) -> httpx.Request:
        return httpx.Request(self.method, self.url, headers=self.headers)


def build_request_template(settings: ClientSettings, token: str | None = None) -> RequestTemplate:
    """Build the base template for an API call.

    Headers are layered in order: bearer authorization (when a token is
    given), the versioned Accept header, then operator headers from
    HEROKU_HEADERS, which override anything set before them.
    """
    headers = httpx.Headers()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    headers["Accept"] = ACCEPT_HEADER
    for name, value in settings.extra_headers.items():
        headers[name] = value

    return RequestTemplate(
        url=settings.api_url,
        header_items=tuple(headers.multi_items()),
        verify=settings.should_verify_host(settings.api_url),
    )
