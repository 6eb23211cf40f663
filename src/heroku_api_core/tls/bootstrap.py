"""Bootstrapped TLS trust for the Heroku API.

By default the client trusts whatever roots the default transport trusts.
Setting ``HEROKU_USE_SYSTEM_CERTS=false`` switches to a curated CA bundle
kept at ``<data dir>/cacert.pem``. When that file is missing it is fetched
once from the distribution endpoint, using default trust for that single
request.

Every failure on this path is logged as a warning and the bootstrapper
returns ``None``, which leaves the transport on default trust. Startup is
never aborted because the bundle is unreachable or corrupt.

Example:
    ```python
    from heroku_api_core.tls import TrustBootstrapper

    bootstrapper = TrustBootstrapper(settings.bundle_cache_path, settings.bundle_url)
    trust_store = bootstrapper.load_trust_store()  # ssl.SSLContext or None
    ```
"""

import logging
import re
import ssl
from collections.abc import Mapping
from pathlib import Path

import httpx

from heroku_api_core.config.environment import EnvironmentReader
from heroku_api_core.config.settings import DEFAULT_BUNDLE_URL, DEFAULT_CONNECT_TIMEOUT, USE_SYSTEM_CERTS_ENV
from heroku_api_core.errors.exceptions import (
    BundleFetchError,
    BundleParseError,
    BundleReadError,
    TrustBootstrapError,
)

logger = logging.getLogger(__name__)

PEM_CERTIFICATE_RE = re.compile(rb"-----BEGIN CERTIFICATE-----.+?-----END CERTIFICATE-----", re.DOTALL)


def should_use_system_trust(environ: Mapping[str, str] | None = None) -> bool:
    """Return False only when HEROKU_USE_SYSTEM_CERTS is ``false`` or ``0``."""
    reader = EnvironmentReader(environ, load_dotenv=False)
    return reader.get_flag(USE_SYSTEM_CERTS_ENV, default=True)


def certificate_count(context: ssl.SSLContext) -> int:
    """Number of certificates loaded into a trust store."""
    return context.cert_store_stats()["x509"]


def extract_pem_certificates(data: bytes) -> list[str]:
    """Return the PEM certificate blocks in ``data``, ignoring comments around them."""
    return [block.decode("ascii") for block in PEM_CERTIFICATE_RE.findall(data)]


def build_trust_store(data: bytes, source: str = "<bundle>") -> ssl.SSLContext:
    """Parse concatenated PEM certificates into a client-side SSL context.

    Only the given certificates are trusted; system roots are not added.
    Blocks that fail to decode are skipped with a warning.

    Raises:
        BundleParseError: If no certificate could be decoded.
    """
    try:
        blocks = extract_pem_certificates(data)
    except UnicodeDecodeError as e:
        raise BundleParseError(f"Error parsing {source}: {e}", path=source) from e

    if not blocks:
        raise BundleParseError(f"Error parsing {source}: no certificates found", path=source)

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    for index, block in enumerate(blocks, start=1):
        try:
            context.load_verify_locations(cadata=block)
        except (ssl.SSLError, ValueError) as e:
            logger.warning(f"Skipping certificate {index} of {len(blocks)} in {source}: {e}")

    if certificate_count(context) == 0:
        raise BundleParseError(f"Error parsing {source}: no certificates found", path=source)
    return context


class TrustBootstrapper:
    """Produce the custom trust store from the cached or downloaded bundle.

    Args:
        cache_path: Location of the cached PEM bundle.
        bundle_url: Distribution endpoint for the bundle.
        debug: Log the bundle request and response.
        timeout: Connect timeout for the bundle download, in seconds.
        transport: Optional sync httpx transport (tests inject a MockTransport).
    """

    def __init__(
        self,
        cache_path: Path,
        bundle_url: str = DEFAULT_BUNDLE_URL,
        *,
        debug: bool = False,
        timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.cache_path = Path(cache_path)
        self.bundle_url = bundle_url
        self.debug = debug
        self._timeout = httpx.Timeout(None, connect=timeout)
        self._transport = transport

    def load_trust_store(self) -> ssl.SSLContext | None:
        """Return an SSL context trusting the curated bundle, or None on failure.

        Reads the cache file, downloading it once if the read fails. Errors
        are logged and never raised.
        """
        try:
            data = self._read_or_fetch()
            context = build_trust_store(data, source=str(self.cache_path))
        except TrustBootstrapError as e:
            logger.warning(f"{e}; falling back to default TLS trust")
            return None

        logger.debug(f"Loaded {certificate_count(context)} CA certificates from {self.cache_path}")
        return context

    def _read_or_fetch(self) -> bytes:
        try:
            return self._read_bundle()
        except BundleReadError as e:
            logger.info(f"{e}; downloading certificate bundle from {self.bundle_url}")

        self.fetch_bundle()
        return self._read_bundle()

    def _read_bundle(self) -> bytes:
        try:
            return self.cache_path.read_bytes()
        except OSError as e:
            path = str(self.cache_path)
            raise BundleReadError(f"Cannot read certificate bundle {path}: {e}", path=path) from e

    def fetch_bundle(self) -> None:
        """Download the bundle and write it to the cache path.

        The download is validated before it is written, so a bad response
        never poisons the cache.

        Raises:
            BundleFetchError: On network errors, non-2xx responses, or write failures.
            BundleParseError: If the downloaded bundle holds no certificates.
        """
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(self.bundle_url)
                if self.debug:
                    logger.debug(f"GET {self.bundle_url} -> {response.status_code} ({len(response.content)} bytes)")
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise BundleFetchError(f"Failed to download {self.bundle_url}: {e}", path=str(self.cache_path)) from e

        build_trust_store(response.content, source=self.bundle_url)

        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            self.cache_path.write_bytes(response.content)
        except OSError as e:
            raise BundleFetchError(f"Failed to write {self.cache_path}: {e}", path=str(self.cache_path)) from e

        logger.info(f"Saved certificate bundle to {self.cache_path}")
