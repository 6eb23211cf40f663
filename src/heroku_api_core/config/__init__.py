"""Configuration for the Heroku API client layer.

Environment toggles are read once, at startup, into an immutable
``ClientSettings`` value:

- ``HEROKU_USE_SYSTEM_CERTS``: ``false``/``0`` selects the bundled CA file
- ``HEROKU_SSL_VERIFY``: ``disable`` skips TLS peer verification
- ``HEROKU_DEBUG``: request/response tracing
- ``HEROKU_HEADERS``: JSON object of extra request headers
- ``HEROKU_API_URL``, ``HEROKU_MAX_PAGES``, ``HEROKU_API_KEY``

Example:
    ```python
    from heroku_api_core.config import ClientSettings, resolve_token

    settings = ClientSettings.from_env()
    token = resolve_token()
    ```
"""

from heroku_api_core.config.environment import EnvironmentReader
from heroku_api_core.config.settings import ClientSettings, application_data_dir, resolve_token

__all__ = [
    "ClientSettings",
    "EnvironmentReader",
    "application_data_dir",
    "resolve_token",
]
