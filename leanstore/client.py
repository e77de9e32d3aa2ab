"""
HTTP client for the LeanCloud REST API
"""

import logging
from typing import Any, Dict, Optional, Type

import httpx

from .config import Configuration
from .exceptions import ConfigurationInvalid, RequestFailed

logger = logging.getLogger(__name__)


class LeanCloudClient:
    """Low-level async HTTP client for LeanCloud"""

    def __init__(self, config: Configuration, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initialize LeanCloud client

        Args:
            config: Client configuration
            http_client: Optional shared httpx.AsyncClient. When omitted the
                client creates one and closes it in ``aclose()``.
        """
        self.config = config
        self._owns_http_client = http_client is None
        self.http = http_client or httpx.AsyncClient(timeout=config.http_timeout)

    def headers(self, write: bool = False) -> Dict[str, str]:
        """
        Build request headers

        Args:
            write: Add the user session header required by create/update

        Raises:
            ConfigurationInvalid: If a write is requested without a session token
        """
        headers = {
            "Content-Type": "application/json",
            "X-LC-Id": self.config.app_id,
            "X-LC-Key": self.config.app_key,
        }
        if write:
            if not self.config.write_session_token:
                raise ConfigurationInvalid(
                    "Write operations require a write session token",
                    missing=["write_session_token"],
                )
            headers["X-LC-Session"] = self.config.write_session_token
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        error_class: Type[RequestFailed],
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        write: bool = False
    ) -> Any:
        """
        Make HTTP request to API

        Transport errors (httpx.HTTPError) are not caught here.

        Returns:
            Decoded JSON body

        Raises:
            error_class: If the body is not JSON or carries a top-level ``error``
        """
        headers = self.headers(write=write)
        description = {"method": method}
        if params is not None:
            description["params"] = params
        if json is not None:
            description["body"] = json

        # keep query parameters already part of the endpoint (search ?clazz=)
        request_url = httpx.URL(url)
        if params:
            request_url = request_url.copy_merge_params(params)

        logger.debug("%s %s %s", method, url, description)
        response = await self.http.request(
            method,
            request_url,
            json=json,
            headers=headers,
        )
        logger.debug("%s %s -> %s", method, url, response.status_code)

        try:
            body = response.json()
        except ValueError:
            raise error_class(
                "Malformed response",
                url=str(response.request.url),
                request=description,
                body=response.text,
                status_code=response.status_code,
            )

        if isinstance(body, dict) and "error" in body:
            raise error_class(
                "Request error met",
                url=str(response.request.url),
                request=description,
                body=body,
                status_code=response.status_code,
            )

        return body

    async def get(
        self,
        url: str,
        error_class: Type[RequestFailed],
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make GET request"""
        return await self._request("GET", url, error_class, params=params)

    async def post(
        self,
        url: str,
        error_class: Type[RequestFailed],
        json: Optional[Dict[str, Any]] = None,
        write: bool = False
    ) -> Any:
        """Make POST request"""
        return await self._request("POST", url, error_class, json=json, write=write)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http.aclose()
