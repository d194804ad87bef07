"""
Outbound HTTP client for Shopify Admin endpoints.

A thin wrapper over httpx.AsyncClient that fixes the base URL to one
shop, sets the library User-Agent and turns transport failures and
non-2xx answers into library errors. It does not retry: callers decide.
"""

import json
import logging
import platform
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from shopify_app_auth.config import ShopifyConfig
from shopify_app_auth.errors import HttpRequestError, HttpResponseError, MissingRequiredArgument
from shopify_app_auth.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


@dataclass
class RequestReturn:
    """A completed request: status, headers and decoded JSON body."""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None


class ShopifyHttpClient:
    """
    HTTP client bound to one shop domain.

    Usage:
        async with ShopifyHttpClient(domain="mystore.myshopify.com", config=config) as client:
            result = await client.post("/admin/oauth/access_token", data={...})
    """

    def __init__(
        self,
        domain: str,
        config: ShopifyConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT
    ):
        if not domain:
            raise MissingRequiredArgument("domain is required")

        self.domain = domain.replace("https://", "").replace("http://", "").rstrip("/")
        self.config = config

        self._client = httpx.AsyncClient(
            base_url=f"https://{self.domain}",
            timeout=timeout,
            transport=transport,
            headers={
                "User-Agent": self.user_agent(),
                "Accept": "application/json",
            }
        )

    def user_agent(self) -> str:
        agent = f"Shopify App Auth Library v{__version__} | Python {platform.python_version()}"
        if self.config.user_agent_prefix:
            agent = f"{self.config.user_agent_prefix} | {agent}"
        return agent

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Any] = None,
        extra_headers: Optional[Dict[str, str]] = None
    ) -> RequestReturn:
        """
        Send a request and decode the JSON response.

        Raises:
            HttpRequestError: If the request could not be completed
            HttpResponseError: If Shopify answered with a non-2xx status
        """
        try:
            response = await self._client.request(
                method,
                path,
                json=data,
                headers=extra_headers,
            )
        except httpx.TimeoutException as e:
            logger.error("Shopify request timeout", extra={
                "shop": self.domain,
                "path": path,
                "error": str(e)
            })
            raise HttpRequestError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error("Shopify request error", extra={
                "shop": self.domain,
                "path": path,
                "error": str(e)
            })
            raise HttpRequestError(f"Request error: {e}") from e

        try:
            body = response.json() if response.content else None
        except json.JSONDecodeError:
            body = response.text

        if response.status_code >= 400:
            logger.error("Shopify API error", extra={
                "shop": self.domain,
                "path": path,
                "status_code": response.status_code,
            })
            raise HttpResponseError(
                f"Shopify API error: {response.status_code}",
                status_code=response.status_code,
                body=body
            )

        return RequestReturn(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
        )

    async def post(
        self,
        path: str,
        data: Optional[Any] = None,
        extra_headers: Optional[Dict[str, str]] = None
    ) -> RequestReturn:
        return await self.request("POST", path, data=data, extra_headers=extra_headers)

    async def get(self, path: str, extra_headers: Optional[Dict[str, str]] = None) -> RequestReturn:
        return await self.request("GET", path, extra_headers=extra_headers)
