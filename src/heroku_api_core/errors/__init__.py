"""Error taxonomy for the Heroku API client layer."""

from heroku_api_core.errors.exceptions import (
    BundleFetchError,
    BundleParseError,
    BundleReadError,
    ConfigurationError,
    HandlerError,
    HerokuAPIError,
    PageLimitExceededError,
    PaginationCancelledError,
    TransportError,
    TrustBootstrapError,
    UnexpectedStatusError,
)
from heroku_api_core.errors.handler import PAGE_STATUS_CODES, raise_for_page_status, status_line

__all__ = [
    "PAGE_STATUS_CODES",
    "BundleFetchError",
    "BundleParseError",
    "BundleReadError",
    "ConfigurationError",
    "HandlerError",
    "HerokuAPIError",
    "PageLimitExceededError",
    "PaginationCancelledError",
    "TransportError",
    "TrustBootstrapError",
    "UnexpectedStatusError",
    "raise_for_page_status",
    "status_line",
]
