import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pagebolt_mcp import server
from pagebolt_mcp.config import PageBoltConfig
from pagebolt_mcp.http import PageBoltClient

BASE_URL = "https://api.pagebolt.test"


class FakePageBolt:
    """Stand-in for the PageBolt API: records requests, answers from canned responses."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Tuple[int, Optional[Any], str]] = {}

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Optional[Any] = None,
        text: str = "",
    ) -> None:
        self.routes[(method, path)] = (status_code, json, text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": f"no route for {request.url.path}"})

        status_code, body, text = route
        if body is not None:
            return httpx.Response(status_code, json=body)
        return httpx.Response(status_code, text=text)

    def json_body(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from real credentials, .env files and the repo tree."""
    for name in ("PAGEBOLT_API_KEY", "PAGEBOLT_BASE_URL", "PAGEBOLT_TIMEOUT", "PAGEBOLT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def config():
    return PageBoltConfig(api_key="test-key", base_url=BASE_URL)


@pytest.fixture
def fake_api():
    return FakePageBolt()


@pytest.fixture
def client(config, fake_api):
    return PageBoltClient(config, transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def server_client(monkeypatch, config, client):
    """Point the MCP tools at the fake API."""
    monkeypatch.setattr(server, "_config", config)
    monkeypatch.setattr(server, "_client", client)
    return client
