"""Structured exceptions for the Heroku API client layer."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class HerokuAPIError(Exception):
    """Base exception for every error raised by this library."""

    pass


class ConfigurationError(HerokuAPIError):
    """Raised when an environment toggle holds a value that cannot be used."""

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class TrustBootstrapError(HerokuAPIError):
    """Base class for failures while building the custom trust store.

    These never escape ``TrustBootstrapper.load_trust_store``; they are
    logged as warnings and the client falls back to default trust.
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class BundleReadError(TrustBootstrapError):
    """The cached certificate bundle is missing or unreadable."""

    pass


class BundleFetchError(TrustBootstrapError):
    """The certificate bundle could not be downloaded or written."""

    pass


class BundleParseError(TrustBootstrapError):
    """The certificate bundle contained no usable certificates."""

    pass


class TransportError(HerokuAPIError):
    """Network-level failure (DNS, connect, TLS handshake) during a page fetch."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class UnexpectedStatusError(HerokuAPIError):
    """A page response had a status outside {200, 206}.

    The message is the literal HTTP status line, e.g. ``"404 Not Found"``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response

    @property
    def status_line(self) -> str:
        return str(self)


class HandlerError(HerokuAPIError):
    """The caller's per-page handler failed; ``__cause__`` holds its exception."""

    def __init__(self, message: str, page_number: int):
        super().__init__(message)
        self.page_number = page_number


class PaginationCancelledError(HerokuAPIError):
    """Pagination stopped because the caller's cancel event was set."""

    def __init__(self, message: str, pages_delivered: int = 0):
        super().__init__(message)
        self.pages_delivered = pages_delivered


class PageLimitExceededError(HerokuAPIError):
    """The server kept sending partial pages past the configured page cap."""

    def __init__(self, message: str, max_pages: int):
        super().__init__(message)
        self.max_pages = max_pages
