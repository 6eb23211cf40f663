"""Transport layer components for outbound API requests.

Modules:
    request: Immutable request templates with the API's wire headers
    tracing: Debug tracing transport (HEROKU_DEBUG)
    factory: Factory function for the transport stack

Example:
    ```python
    from heroku_api_core.transport import build_request_template, create_transport

    template = build_request_template(settings, token).with_path("/apps")
    transport = create_transport(verify=trust_store or True, debug=settings.debug)
    ```
"""

from heroku_api_core.transport.factory import create_transport
from heroku_api_core.transport.request import ACCEPT_HEADER, RequestTemplate, build_request_template
from heroku_api_core.transport.tracing import TracingTransport, redact_headers

__all__ = [
    "ACCEPT_HEADER",
    "RequestTemplate",
    "TracingTransport",
    "build_request_template",
    "create_transport",
    "redact_headers",
]
