"""Tests for the debug tracing transport and transport factory."""

import logging

import httpx
import pytest

from heroku_api_core.transport import TracingTransport, create_transport, redact_headers


class TestTracingTransport:
    """Test request/response tracing."""

    @pytest.mark.unit
    async def test_logs_request_and_response(self, caplog):
        caplog.set_level(logging.DEBUG, logger="heroku_api_core.transport.tracing")

        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(206, headers={"Next-Range": "]app-2..; max=1"})

        transport = TracingTransport(wrapped_transport=httpx.MockTransport(handler))
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get(
                "https://api.heroku.com/apps",
                headers={"Authorization": "Bearer hrku-secret", "Range": "]app-1..; max=1"},
            )

        assert response.status_code == 206
        assert "--> GET https://api.heroku.com/apps" in caplog.text
        assert "<-- 206 GET https://api.heroku.com/apps" in caplog.text
        assert "Next-Range=]app-2..; max=1" in caplog.text
        assert "]app-1..; max=1" in caplog.text
        assert "hrku-secret" not in caplog.text

    @pytest.mark.unit
    async def test_logs_and_reraises_transport_errors(self, caplog):
        caplog.set_level(logging.DEBUG, logger="heroku_api_core.transport.tracing")

        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        transport = TracingTransport(wrapped_transport=httpx.MockTransport(handler))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(httpx.ConnectTimeout):
                await client.get("https://api.heroku.com/apps")

        assert "failed" in caplog.text

    @pytest.mark.unit
    def test_redact_headers(self):
        headers = httpx.Headers({"Authorization": "Bearer x", "Accept": "application/json", "Cookie": "s=1"})

        redacted = redact_headers(headers)

        assert redacted["authorization"] == "***"
        assert redacted["cookie"] == "***"
        assert redacted["accept"] == "application/json"


class TestCreateTransport:
    """Test the transport factory."""

    @pytest.mark.unit
    def test_plain_transport_without_debug(self):
        transport = create_transport()

        assert isinstance(transport, httpx.AsyncHTTPTransport)

    @pytest.mark.unit
    def test_debug_wraps_with_tracing(self):
        wrapped = httpx.MockTransport(lambda request: httpx.Response(200))

        transport = create_transport(debug=True, wrapped_transport=wrapped)

        assert isinstance(transport, TracingTransport)
        assert transport._wrapped_transport is wrapped

    @pytest.mark.unit
    def test_disabled_verification_is_logged(self, caplog):
        caplog.set_level(logging.WARNING)

        create_transport(verify=False)

        assert "verification is disabled" in caplog.text
