"""Shared fixtures: a Starlette app emulating the remote scraping endpoint, and a fake script injector."""
import asyncio
import json

import httpx
import pytest
import pytest_asyncio
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

ENDPOINT = "http://scraper.test/exec"
TIMESTAMP = 1690000000000


def scrape_response(url: str) -> dict:
    return {
        "success": True,
        "data": {
            "url": url,
            "statusCode": 200,
            "title": "A",
            "metaDescription": "About A",
            "textPreview": "Hello from A",
            "links": [
                {"text": "one", "url": "https://a.com/1"},
                {"text": "", "url": "https://a.com/2"},
                {"text": "three", "url": "https://a.com/3"},
                {"text": "four", "url": "https://a.com/4"},
            ],
        },
        "timestamp": TIMESTAMP,
    }


class StubEndpoint:
    """Remote endpoint: POST {function, data} -> JSON; GET ?function=...[&callback=cb] -> JSON or cb(JSON)."""

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.app = Starlette(routes=[Route("/exec", self.handle, methods=["GET", "POST"])])

    def dispatch(self, function: str | None, data: dict) -> dict:
        if function == "testConnection":
            return {"success": True, "message": "connected", "timestamp": TIMESTAMP}
        if function == "scrapeAndSave":
            url = data.get("url", "")
            if not str(url).startswith("https://"):
                return {"success": False, "error": "invalid url"}
            return scrape_response(url)
        return {"success": False, "error": f"unknown function {function}"}

    async def handle(self, request: Request) -> Response:
        callback = None
        if request.method == "POST":
            body = await request.json()
            function, data = body.get("function"), body.get("data") or {}
            self.requests.append({"method": "POST", "body": body})
        else:
            params = dict(request.query_params)
            self.requests.append({"method": "GET", "params": dict(params)})
            function = params.pop("function", None)
            callback = params.pop("callback", None)
            params.pop("_t", None)
            data = params
        result = self.dispatch(function, data)
        if callback:
            return Response(f"{callback}({json.dumps(result)});", media_type="application/javascript")
        return JSONResponse(result)


class FakeScript:
    def __init__(self, injector: "FakeInjector", url: str, on_load, on_error) -> None:
        self.url = url
        self.on_load = on_load
        self.on_error = on_error
        self._injector = injector

    @property
    def callback_id(self) -> str:
        return httpx.URL(self.url).params["callback"]

    def remove(self) -> None:
        if self in self._injector.active:
            self._injector.active.remove(self)


class FakeInjector:
    """Records injections; the test decides when (and whether) the script loads."""

    def __init__(self) -> None:
        self.active: list[FakeScript] = []
        self.injected: list[FakeScript] = []

    def inject(self, url, on_load, on_error) -> FakeScript:
        script = FakeScript(self, url, on_load, on_error)
        self.active.append(script)
        self.injected.append(script)
        return script

    async def wait_for(self, count: int = 1) -> list[FakeScript]:
        for _ in range(200):
            if len(self.injected) >= count:
                return self.injected
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} injections, got {len(self.injected)}")


def blocked_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("blocked by cross-origin policy", request=request)


@pytest.fixture
def endpoint() -> StubEndpoint:
    return StubEndpoint()


@pytest_asyncio.fixture
async def stub_http(endpoint):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=endpoint.app)) as client:
        yield client


@pytest_asyncio.fixture
async def blocked_http():
    async with httpx.AsyncClient(transport=httpx.MockTransport(blocked_handler)) as client:
        yield client


@pytest.fixture
def injector() -> FakeInjector:
    return FakeInjector()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "SCRAPECALL_ENDPOINT",
        "SCRAPECALL_TIMEOUT",
        "SCRAPECALL_FALLBACK",
        "SCRAPECALL_DIRECT_MODE",
        "SCRAPECALL_CALLBACK_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SCRAPECALL_CONFIG_DIR", str(tmp_path / "config"))
