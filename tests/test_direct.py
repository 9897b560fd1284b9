"""Tests for HttpDirectTransport."""
import asyncio
import json

import httpx
import pytest
from scrapecall.errors import ApplicationError, CallTimeoutError, ConfigurationError, TransportError
from scrapecall.rpc.direct import HttpDirectTransport
from scrapecall.rpc.request import CallRequest

from conftest import ENDPOINT, TIMESTAMP


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_unknown_mode():
    with pytest.raises(ConfigurationError):
        HttpDirectTransport(mode="jsonp")


@pytest.mark.asyncio
async def test_body_mode_posts_function_and_data(endpoint, stub_http):
    transport = HttpDirectTransport("body", http_client=stub_http)
    request = CallRequest("scrapeAndSave", {"url": "https://a.com", "options": {"extractTitle": True}})

    response = await transport.call(ENDPOINT, request, timeout=5)

    assert response["success"] is True
    assert response["data"]["url"] == "https://a.com"
    assert response["timestamp"] == TIMESTAMP
    assert endpoint.requests == [{
        "method": "POST",
        "body": {"function": "scrapeAndSave", "data": {"url": "https://a.com", "options": {"extractTitle": True}}},
    }]


@pytest.mark.asyncio
async def test_query_mode_gets_with_params(endpoint, stub_http):
    transport = HttpDirectTransport("query", http_client=stub_http)
    request = CallRequest("scrapeAndSave", {"url": "https://a.com", "options": {"extractLinks": False}})

    response = await transport.call(ENDPOINT, request, timeout=5)

    assert response["data"]["title"] == "A"
    params = endpoint.requests[0]["params"]
    assert endpoint.requests[0]["method"] == "GET"
    assert params["function"] == "scrapeAndSave"
    assert params["url"] == "https://a.com"
    assert json.loads(params["options"]) == {"extractLinks": False}
    assert params["_t"].isdigit()
    assert "callback" not in params


@pytest.mark.asyncio
async def test_application_error(stub_http):
    transport = HttpDirectTransport(http_client=stub_http)
    with pytest.raises(ApplicationError, match="invalid url"):
        await transport.call(ENDPOINT, CallRequest("scrapeAndSave", {"url": "nope"}), timeout=5)


@pytest.mark.asyncio
async def test_non_2xx_is_transport_error_even_with_error_body():
    def handler(request):
        return httpx.Response(500, json={"success": False, "error": "server exploded"})

    async with mock_client(handler) as client:
        transport = HttpDirectTransport(http_client=client)
        with pytest.raises(TransportError, match="status: 500") as exc_info:
            await transport.call(ENDPOINT, CallRequest("testConnection"), timeout=5)
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [b"<html>Sign in</html>", b"[1, 2]"])
async def test_malformed_body_is_transport_error(content):
    def handler(request):
        return httpx.Response(200, content=content)

    async with mock_client(handler) as client:
        transport = HttpDirectTransport(http_client=client)
        with pytest.raises(TransportError, match="malformed response body"):
            await transport.call(ENDPOINT, CallRequest("testConnection"), timeout=5)


@pytest.mark.asyncio
async def test_connection_refused_is_transport_error(blocked_http):
    transport = HttpDirectTransport(http_client=blocked_http)
    with pytest.raises(TransportError, match="ConnectError"):
        await transport.call(ENDPOINT, CallRequest("testConnection"), timeout=5)


@pytest.mark.asyncio
async def test_follows_redirects():
    def handler(request):
        if request.url.host == "script.test":
            return httpx.Response(302, headers={"Location": "http://content.test/echo"})
        return httpx.Response(200, json={"success": True, "data": {"ok": 1}})

    async with mock_client(handler) as client:
        transport = HttpDirectTransport("query", http_client=client)
        response = await transport.call("http://script.test/exec", CallRequest("testConnection"), timeout=5)
    assert response["data"] == {"ok": 1}


@pytest.mark.asyncio
async def test_slow_endpoint_times_out():
    async def handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, json={"success": True})

    async with mock_client(handler) as client:
        transport = HttpDirectTransport(http_client=client)
        with pytest.raises(CallTimeoutError):
            await transport.call(ENDPOINT, CallRequest("testConnection"), timeout=0.05)


@pytest.mark.asyncio
async def test_httpx_timeout_is_call_timeout():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    async with mock_client(handler) as client:
        transport = HttpDirectTransport(http_client=client)
        with pytest.raises(CallTimeoutError):
            await transport.call(ENDPOINT, CallRequest("testConnection"), timeout=5)
