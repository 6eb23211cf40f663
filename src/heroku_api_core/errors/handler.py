"""Status handling for paginated responses."""

import httpx

from heroku_api_core.errors.exceptions import UnexpectedStatusError

# Status codes that carry a page body
PAGE_STATUS_CODES: frozenset[int] = frozenset([200, 206])


def status_line(response: httpx.Response) -> str:
    """Render the HTTP status line of a response, e.g. ``"503 Service Unavailable"``.

    httpx substitutes the standard reason phrase when the server sent none;
    unknown codes render without a phrase.
    """
    return f"{response.status_code} {response.reason_phrase}".rstrip()


def raise_for_page_status(response: httpx.Response) -> None:
    """Raise UnexpectedStatusError unless the response is a final or partial page.

    Args:
        response: HTTP response object

    Raises:
        UnexpectedStatusError: For any status other than 200 or 206
    """
    if response.status_code in PAGE_STATUS_CODES:
        return

    raise UnexpectedStatusError(
        status_line(response),
        status_code=response.status_code,
        response=response,
    )
