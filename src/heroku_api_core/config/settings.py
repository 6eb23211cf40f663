"""Process-wide client settings, populated once from the environment."""

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import httpx

from heroku_api_core.config.environment import EnvironmentReader

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.heroku.com"
DEFAULT_BUNDLE_URL = "https://cli-assets.heroku.com/cacert.pem"
DEFAULT_CONNECT_TIMEOUT = 15.0
DEFAULT_MAX_PAGES = 1000
BUNDLE_FILE_NAME = "cacert.pem"
APP_NAME = "heroku"

# Hosts matching these suffixes are never verified (development stacks)
UNVERIFIED_HOST_SUFFIXES: tuple[str, ...] = ("herokudev.com",)

USE_SYSTEM_CERTS_ENV = "HEROKU_USE_SYSTEM_CERTS"
SSL_VERIFY_ENV = "HEROKU_SSL_VERIFY"
DEBUG_ENV = "HEROKU_DEBUG"
HEADERS_ENV = "HEROKU_HEADERS"
API_URL_ENV = "HEROKU_API_URL"
MAX_PAGES_ENV = "HEROKU_MAX_PAGES"
API_KEY_ENV = "HEROKU_API_KEY"


def application_data_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the per-user data directory for the client.

    Windows uses ``%LOCALAPPDATA%\\heroku``; everything else follows the XDG
    base directory layout (``$XDG_DATA_HOME/heroku`` or ``~/.local/share/heroku``).
    """
    env = os.environ if environ is None else environ

    if sys.platform == "win32" and env.get("LOCALAPPDATA"):
        return Path(env["LOCALAPPDATA"]) / APP_NAME

    xdg_data_home = env.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home) / APP_NAME

    return Path.home() / ".local" / "share" / APP_NAME


@dataclass(frozen=True)
class ClientSettings:
    """Environment-driven toggles, fixed for the lifetime of the process.

    Build one with ``ClientSettings.from_env()`` at startup and pass it down;
    nothing else in the library reads the environment ad hoc.
    """

    use_system_trust: bool = True
    ssl_verify_disabled: bool = False
    unverified_host_suffixes: tuple[str, ...] = UNVERIFIED_HOST_SUFFIXES
    extra_headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    debug: bool = False
    api_url: str = DEFAULT_API_URL
    bundle_url: str = DEFAULT_BUNDLE_URL
    data_dir: Path = field(default_factory=application_data_dir)
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    max_pages: int | None = DEFAULT_MAX_PAGES

    def __post_init__(self):
        # Freeze caller-supplied header dicts
        if not isinstance(self.extra_headers, MappingProxyType):
            object.__setattr__(self, "extra_headers", MappingProxyType(dict(self.extra_headers)))

    @property
    def bundle_cache_path(self) -> Path:
        return self.data_dir / BUNDLE_FILE_NAME

    def should_verify_host(self, url: str | httpx.URL) -> bool:
        """Return False when TLS peer verification is skipped for ``url``."""
        if self.ssl_verify_disabled:
            return False

        host = httpx.URL(str(url)).host
        return not any(host.endswith(suffix) for suffix in self.unverified_host_suffixes)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        load_dotenv: bool = True,
        dotenv_path: str | None = None,
    ) -> "ClientSettings":
        """Populate settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            load_dotenv: Whether to load a .env file first (ignored when
                ``environ`` is given).
            dotenv_path: Explicit .env location.

        Raises:
            ConfigurationError: If HEROKU_HEADERS or HEROKU_MAX_PAGES is malformed.
        """
        reader = EnvironmentReader(environ, dotenv_path=dotenv_path, load_dotenv=load_dotenv)

        max_pages = reader.get_int(MAX_PAGES_ENV, DEFAULT_MAX_PAGES)
        settings = cls(
            use_system_trust=reader.get_flag(USE_SYSTEM_CERTS_ENV, default=True),
            ssl_verify_disabled=reader.get(SSL_VERIFY_ENV) == "disable",
            extra_headers=reader.get_json_object(HEADERS_ENV),
            debug=reader.get_flag(DEBUG_ENV, default=False),
            api_url=(reader.get(API_URL_ENV) or DEFAULT_API_URL).rstrip("/"),
            data_dir=application_data_dir(reader.environ),
            max_pages=max_pages or None,
        )

        logger.debug(
            f"Client settings: api_url={settings.api_url} system_trust={settings.use_system_trust} "
            f"ssl_verify_disabled={settings.ssl_verify_disabled} debug={settings.debug} "
            f"extra_headers={sorted(settings.extra_headers)} max_pages={settings.max_pages}"
        )
        return settings


def resolve_token(value: str | None = None, *, reader: EnvironmentReader | None = None) -> str | None:
    """Resolve the bearer token: explicit value first, then HEROKU_API_KEY.

    Returns None when no token is available; unauthenticated requests are
    allowed, so a missing token is not an error.
    """
    if value is not None:
        logger.debug("Resolved API token from explicit parameter: ***")
        return value

    reader = reader or EnvironmentReader()
    token = reader.get(API_KEY_ENV, mask_in_logs=True)
    if token:
        logger.debug(f"Resolved API token from environment variable '{API_KEY_ENV}': ***")
        return token
    return None
