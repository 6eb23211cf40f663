"""Heroku API Core - TLS trust bootstrap and range pagination for the Heroku API.

This library provides the pieces every Heroku API client needs:
- Environment-driven client settings, read once at startup
- A curated CA bundle as an opt-in trust store, fetched on first use
- Request templates carrying the API's versioned Accept and bearer headers
- Transparent ``206``/``Next-Range`` pagination with per-page callbacks

Example:
    ```python
    from heroku_api_core import APIClient, ClientConfig, fetch_all_pages, resolve_token

    config = ClientConfig.bootstrap()
    apps = []

    async with APIClient(config) as client:
        await fetch_all_pages(client, resolve_token(), "/apps", lambda page: apps.extend(page.json()))
    ```
"""

from heroku_api_core.client import APIClient, ClientConfig
from heroku_api_core.config import ClientSettings, resolve_token
from heroku_api_core.pagination import fetch_all_pages, iter_pages

__version__ = "0.1.0"

__all__ = [
    "APIClient",
    "ClientConfig",
    "ClientSettings",
    "__version__",
    "fetch_all_pages",
    "iter_pages",
    "resolve_token",
]
