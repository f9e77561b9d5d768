# src/utils/api/api_client.py
# Created: 2026-10-19 09:12:40
# Author: accounts-client

from typing import Dict, Any, Optional, Union
from dataclasses import dataclass
from enum import Enum
import asyncio
import logging
import aiohttp
import yarl
from datetime import datetime, UTC

from src.core.exceptions import AccountsError
from .response_handler import ErrorPayload, classify_error, decode_body, no_response

logger = logging.getLogger(__name__)

class APIError(AccountsError):
    """Base exception for API-related errors"""
    pass

class RequestError(APIError):
    """Raised when an API request fails, carrying the classified failure body"""

    def __init__(self, message: str, payload: Optional[ErrorPayload] = None):
        self.payload = payload or no_response()
        super().__init__(message, details={"status": self.payload.status})

class RequestMethod(Enum):
    """HTTP request methods"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

@dataclass
class APIConfig:
    """Configuration for API client"""
    base_url: str
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = "accounts-client/1.0"

@dataclass
class APIResponse:
    """Container for API response data"""
    status: int
    data: Any
    headers: Dict[str, str]
    timestamp: datetime
    duration: float

def bearer(token: str) -> Dict[str, str]:
    """Authorization header for a bearer token"""
    return {"Authorization": f"Bearer {token}"}

class APIClient:
    """
    Sends JSON requests to a single base URL.

    The client:
    - Joins endpoints onto the configured base URL
    - Decodes JSON (or text) bodies
    - Raises RequestError with a classified ErrorPayload for failed calls
    - Uses an injected aiohttp session, or owns one it creates lazily
    """

    def __init__(
        self,
        config: APIConfig,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.config = config
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent}
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it"""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    def build_url(self, endpoint: str) -> yarl.URL:
        """Join an endpoint onto the base URL, keeping its trailing slash"""
        return yarl.URL(self.config.base_url.rstrip("/") + "/" + endpoint.lstrip("/"))

    async def request(
        self,
        method: RequestMethod,
        endpoint: str,
        params: Optional[Dict[str, Union[str, int, float, bool]]] = None,
        data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> APIResponse:
        """
        Make an API request

        Args:
            method: HTTP method to use
            endpoint: API endpoint to call
            params: Query parameters
            data: Request body, sent as JSON
            headers: Additional headers

        Returns:
            APIResponse object containing response data

        Raises:
            RequestError: On a status >= 400 or when no response was received
        """
        url = self.build_url(endpoint)
        session = await self._get_session()
        request_headers = dict(headers or {})
        if data is not None:
            request_headers.setdefault("Content-Type", "application/json")

        start_time = datetime.now(UTC)
        try:
            async with session.request(
                method.value,
                url,
                params=params,
                json=data,
                headers=request_headers,
                ssl=self.config.verify_ssl
            ) as response:
                duration = (datetime.now(UTC) - start_time).total_seconds()
                body = decode_body(await response.read(), response.charset)
                logger.info(f"{method.value} {url} -> {response.status} ({duration:.3f}s)")

                if response.status >= 400:
                    payload = classify_error(body, response.status)
                    logger.warning(
                        f"{method.value} {url} failed with {response.status} ({payload.kind.value} payload)"
                    )
                    raise RequestError(
                        f"API request failed: {response.status}",
                        payload=payload
                    )

                return APIResponse(
                    status=response.status,
                    data=body,
                    headers=dict(response.headers),
                    timestamp=datetime.now(UTC),
                    duration=duration
                )

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{method.value} {url} got no response: {str(e)}")
            raise RequestError(f"No response from {url}: {str(e)}", payload=no_response()) from e

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Union[str, int, float, bool]]] = None,
        **kwargs: Any
    ) -> APIResponse:
        """Perform GET request"""
        return await self.request(RequestMethod.GET, endpoint, params=params, **kwargs)

    async def post(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        **kwargs: Any
    ) -> APIResponse:
        """Perform POST request"""
        return await self.request(RequestMethod.POST, endpoint, data=data, **kwargs)

    async def put(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        **kwargs: Any
    ) -> APIResponse:
        """Perform PUT request"""
        return await self.request(RequestMethod.PUT, endpoint, data=data, **kwargs)

    async def delete(
        self,
        endpoint: str,
        **kwargs: Any
    ) -> APIResponse:
        """Perform DELETE request"""
        return await self.request(RequestMethod.DELETE, endpoint, **kwargs)

    async def patch(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        **kwargs: Any
    ) -> APIResponse:
        """Perform PATCH request"""
        return await self.request(RequestMethod.PATCH, endpoint, data=data, **kwargs)
