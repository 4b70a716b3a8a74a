"""
DigitalOcean API v2 client.

A thin async wrapper around ``httpx`` that every tool and resource handler
goes through. It adds Bearer authentication, parses API error bodies and
retries rate-limited or 5xx responses.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import USER_AGENT

logger = logging.getLogger(__name__)

BASE_URL = "https://api.digitalocean.com/v2"
MAX_RETRIES = 4
MAX_RETRY_WAIT = 30.0
RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class DigitalOceanAPIError(Exception):
    """An error response returned by the DigitalOcean API."""

    def __init__(self, method: str, url: str, status_code: int, message: str,
                 error_id: str = "", request_id: str = ""):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.message = message
        self.error_id = error_id
        self.request_id = request_id
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"{self.method} {self.url}: {self.status_code}"
        if self.request_id:
            text += f' (request "{self.request_id}")'
        return f"{text} {self.message}"

    @classmethod
    def from_response(cls, response: httpx.Response) -> "DigitalOceanAPIError":
        error_id = ""
        request_id = ""
        message = response.text
        try:
            data = response.json()
            if isinstance(data, dict):
                error_id = data.get("id", "") or ""
                message = data.get("message", message) or message
                request_id = data.get("request_id", "") or ""
        except json.JSONDecodeError:
            pass
        return cls(
            method=response.request.method,
            url=str(response.request.url),
            status_code=response.status_code,
            message=message,
            error_id=error_id,
            request_id=request_id,
        )


class DigitalOceanClient:
    """DigitalOcean API v2 client using Bearer token authentication."""

    def __init__(self, token: str, base_url: str = BASE_URL, timeout: float = 30.0,
                 max_retries: int = MAX_RETRIES,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _retry_wait(self, response: httpx.Response, attempt: int) -> float:
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return min(float(retry_after), MAX_RETRY_WAIT)
            except ValueError:
                pass
        return min(float(2 ** attempt), MAX_RETRY_WAIT)

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
    ) -> Any:
        """Make an API request and return the decoded JSON body.

        Returns None for empty (204) responses. Raises DigitalOceanAPIError
        for any 4xx/5xx response once retries are exhausted.
        """
        url = f"{self.base_url}{endpoint}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            attempt = 0
            while True:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self.headers,
                    params=params,
                    json=json_body,
                )

                if response.status_code in RETRYABLE_STATUSES and attempt < self.max_retries:
                    wait = self._retry_wait(response, attempt)
                    attempt += 1
                    logger.warning(
                        f"DigitalOcean API returned {response.status_code} for {method} {endpoint}, "
                        f"retry {attempt}/{self.max_retries} in {wait:.0f}s"
                    )
                    await asyncio.sleep(wait)
                    continue

                if response.status_code >= 400:
                    raise DigitalOceanAPIError.from_response(response)

                if response.status_code == 204 or not response.content:
                    return None

                return response.json()

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, json_body: Any = None) -> Any:
        return await self.request("POST", endpoint, json_body=json_body)

    async def put(self, endpoint: str, json_body: Any = None) -> Any:
        return await self.request("PUT", endpoint, json_body=json_body)

    async def patch(self, endpoint: str, json_body: Any = None) -> Any:
        return await self.request("PATCH", endpoint, json_body=json_body)

    async def delete(self, endpoint: str, json_body: Any = None) -> Any:
        return await self.request("DELETE", endpoint, json_body=json_body)
