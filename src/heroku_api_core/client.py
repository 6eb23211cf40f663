"""Client configuration and the async API client."""

import logging
import ssl
from dataclasses import dataclass

import httpx

from heroku_api_core.config.settings import ClientSettings
from heroku_api_core.errors.exceptions import TransportError
from heroku_api_core.tls.bootstrap import TrustBootstrapper
from heroku_api_core.transport.factory import create_transport
from heroku_api_core.transport.request import RequestTemplate, build_request_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    """Settings plus the trust store bootstrapped for them.

    Build exactly one per process with ``ClientConfig.bootstrap()`` and hand
    it to every ``APIClient``. A ``trust_store`` of None means the transport
    uses its default trust roots.
    """

    settings: ClientSettings
    trust_store: ssl.SSLContext | None = None

    @classmethod
    def bootstrap(
        cls,
        settings: ClientSettings | None = None,
        *,
        bundle_transport: httpx.BaseTransport | None = None,
    ) -> "ClientConfig":
        """Read settings (if not given) and load the trust store once.

        Args:
            settings: Pre-built settings; read from the environment when None.
            bundle_transport: Sync transport for the bundle download (tests).
        """
        settings = settings or ClientSettings.from_env()

        if settings.use_system_trust:
            logger.debug("Using default TLS trust roots")
            return cls(settings=settings)

        bootstrapper = TrustBootstrapper(
            settings.bundle_cache_path,
            settings.bundle_url,
            debug=settings.debug,
            timeout=settings.connect_timeout,
            transport=bundle_transport,
        )
        return cls(settings=settings, trust_store=bootstrapper.load_trust_store())

    def verify_for(self, url: str | httpx.URL) -> ssl.SSLContext | bool:
        """TLS verification setting for connections to ``url``."""
        if not self.settings.should_verify_host(url):
            return False
        if self.trust_store is not None:
            return self.trust_store
        return True

    def request_template(self, token: str | None = None) -> RequestTemplate:
        return build_request_template(self.settings, token)


class APIClient:
    """Async client for the API host named in the settings.

    The underlying connection pool and TLS configuration are shared by every
    request, so one client may serve concurrent paginations. A template whose
    ``verify`` flag is False is sent through a second, unverified pool that
    is created on first use.

    Example:
        ```python
        config = ClientConfig.bootstrap()

        async with APIClient(config) as client:
            response = await client.send(client.request_template(token).with_path("/account"))
        ```
    """

    def __init__(self, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport
        self._verify = config.verify_for(config.settings.api_url)
        self._client = self._build_client(self._verify)
        self._unverified_client: httpx.AsyncClient | None = None

    def _build_client(self, verify: ssl.SSLContext | bool) -> httpx.AsyncClient:
        settings = self.config.settings
        return httpx.AsyncClient(
            transport=create_transport(verify=verify, debug=settings.debug, wrapped_transport=self._transport),
            timeout=httpx.Timeout(None, connect=settings.connect_timeout),
        )

    def _client_for(self, template: RequestTemplate) -> httpx.AsyncClient:
        if template.verify or self._verify is False:
            return self._client
        if self._unverified_client is None:
            self._unverified_client = self._build_client(False)
        return self._unverified_client

    async def __aenter__(self) -> "APIClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            await self._client.__aexit__(exc_type, exc_val, exc_tb)
        finally:
            await self._close_unverified()

    async def aclose(self) -> None:
        try:
            await self._client.aclose()
        finally:
            await self._close_unverified()

    async def _close_unverified(self) -> None:
        if self._unverified_client is not None:
            await self._unverified_client.aclose()
            self._unverified_client = None

    def request_template(self, token: str | None = None) -> RequestTemplate:
        return self.config.request_template(token)

    async def send(self, template: RequestTemplate, *, stream: bool = False) -> httpx.Response:
        """Send a templated request.

        TLS peer verification follows ``template.verify``.

        Args:
            template: Request to send.
            stream: Leave the body unread; the caller must close the response.

        Raises:
            TransportError: On DNS, connect, TLS or other network failures.
        """
        request = template.to_request()
        try:
            return await self._client_for(template).send(request, stream=stream)
        except httpx.TransportError as e:
            raise TransportError(f"{template.method} {template.url} failed: {e}", url=template.url) from e
