"""TLS trust bootstrap for outbound API connections."""

from heroku_api_core.tls.bootstrap import (
    TrustBootstrapper,
    build_trust_store,
    certificate_count,
    extract_pem_certificates,
    should_use_system_trust,
)

__all__ = [
    "TrustBootstrapper",
    "build_trust_store",
    "certificate_count",
    "extract_pem_certificates",
    "should_use_system_trust",
]
