"""
HTTP client for the PageBolt API.

Provides authenticated async requests against the fixed set of PageBolt
endpoints and turns non-success responses into a single error type.
"""

import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx

from . import __version__
from .config import PageBoltConfig
from .models import (
    CaptureResult,
    DevicesResult,
    Envelope,
    InspectResult,
    SequenceResult,
    UsageResult,
    VideoResult,
)

logger = logging.getLogger(__name__)

USER_AGENT = f"pagebolt-mcp/{__version__}"

ENDPOINTS = {
    "screenshot": "/api/v1/screenshot",
    "pdf": "/api/v1/pdf",
    "og_image": "/api/v1/og-image",
    "sequence": "/api/v1/sequence",
    "video": "/api/v1/video",
    "inspect": "/api/v1/inspect",
    "devices": "/api/v1/devices",
    "usage": "/api/v1/usage",
    "docs": "/llms-full.txt",
}

EnvelopeT = TypeVar("EnvelopeT", bound=Envelope)


class PageBoltError(Exception):
    """Base error for failed PageBolt calls."""


class PageBoltAPIError(PageBoltError):
    """The PageBolt API answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(f"PageBolt API error: {message}")
        self.status_code = status_code


def extract_error_message(response: httpx.Response) -> str:
    """
    Pull a human readable error out of a failed response.

    Uses the JSON body's ``error`` field when present, the whole JSON body
    otherwise, and the HTTP status line when the body is not JSON.
    """
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code} {response.reason_phrase}".rstrip()

    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return json.dumps(body, separators=(",", ":"))


class PageBoltClient:
    """Async HTTP client for the PageBolt API."""

    def __init__(self, config: PageBoltConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize HTTP client with configuration."""
        self.config = config
        self.base_url = config.base_url
        self.client = httpx.AsyncClient(
            timeout=config.timeout,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers with authentication."""
        try:
            api_key = self.config.get_api_key()
        except ValueError as e:
            raise PageBoltError(str(e)) from e
        return {"x-api-key": api_key}

    async def request(
        self, method: str, endpoint: str, body: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """Make an authenticated request; raise PageBoltError unless it succeeds."""
        headers = self._get_headers()
        url = f"{self.base_url}{endpoint}"

        logger.debug(f"{method} {url}")
        try:
            response = await self.client.request(method, url, headers=headers, json=body)
        except httpx.RequestError as e:
            raise PageBoltError(f"Request to {url} failed: {e}") from e

        if response.is_error:
            message = extract_error_message(response)
            logger.warning(f"{method} {endpoint} returned {response.status_code}: {message}")
            raise PageBoltAPIError(message, status_code=response.status_code)

        return response

    async def _call(
        self,
        model: Type[EnvelopeT],
        name: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> EnvelopeT:
        method = "GET" if body is None else "POST"
        response = await self.request(method, ENDPOINTS[name], body)
        try:
            data = response.json()
        except ValueError as e:
            raise PageBoltError(f"Invalid JSON in response from {ENDPOINTS[name]}") from e
        return model.model_validate(data)

    async def screenshot(self, payload: Dict[str, Any]) -> CaptureResult:
        return await self._call(CaptureResult, "screenshot", {**payload, "response_type": "json"})

    async def pdf(self, payload: Dict[str, Any]) -> CaptureResult:
        return await self._call(CaptureResult, "pdf", {**payload, "response_type": "json"})

    async def og_image(self, payload: Dict[str, Any]) -> CaptureResult:
        return await self._call(CaptureResult, "og_image", {**payload, "response_type": "json"})

    async def sequence(self, payload: Dict[str, Any]) -> SequenceResult:
        return await self._call(SequenceResult, "sequence", payload)

    async def video(self, payload: Dict[str, Any]) -> VideoResult:
        return await self._call(VideoResult, "video", {**payload, "response_type": "json"})

    async def inspect(self, payload: Dict[str, Any]) -> InspectResult:
        return await self._call(InspectResult, "inspect", payload)

    async def list_devices(self) -> DevicesResult:
        return await self._call(DevicesResult, "devices")

    async def get_usage(self) -> UsageResult:
        return await self._call(UsageResult, "usage")

    async def fetch_docs(self) -> str:
        """Fetch the plain-text API reference. No API key needed."""
        response = await self.client.get(f"{self.base_url}{ENDPOINTS['docs']}")
        response.raise_for_status()
        return response.text

    async def aclose(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "PageBoltClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
