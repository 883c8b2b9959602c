"""
Async drive API client.

The authenticated transport every collection and service goes through.
"""
import json
import asyncio
import logging
from typing import Optional, Any, Mapping, Union

import aiohttp

from .config import APIConfig
from .errors import DriveAPIError, APIErrorCodes
from .request import RequestBuilder, ResponseHandler
from ..logging import get_logger, mask_token


Body = Union[Mapping[str, Any], aiohttp.FormData, None]


class AsyncAPIClient:
    """
    Asynchronous drive API client.

    Features:
    - Full async/await support
    - Bearer authentication with lazy token refresh
    - Configurable proxy, SSL, timeouts
    - Connection pooling
    - Envelope normalization ({'data': ...} or bare values)

    Requests are never retried; errors surface as DriveAPIError.

    Example:
        >>> config = APIConfig(api_key="...")
        >>> async with AsyncAPIClient(config) as client:
        ...     item = await client.get('/drive/abc/item/123')
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize async API client.

        Args:
            config: API configuration (uses defaults if not provided)
            session: Optional externally managed aiohttp session
        """
        self._config = config or APIConfig.default()
        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._builder = RequestBuilder(self._config.base_url)
        self._refresh_lock = asyncio.Lock()
        self._closed = False

        self._logger = get_logger('drivepy.api')
        # Only set level if root logger has no handlers (basicConfig not called)
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def builder(self) -> RequestBuilder:
        """Request builder bound to the configured base URL."""
        return self._builder

    async def __aenter__(self) -> 'AsyncAPIClient':
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close client and release resources."""
        self._closed = True

        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    # HTTP verbs

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Issue a GET request and return the unwrapped payload."""
        return await self.request('GET', path, params=params)

    async def post(self, path: str, body: Body = None) -> Any:
        """Issue a POST request with a JSON or multipart body."""
        return await self.request('POST', path, body=body)

    async def put(self, path: str, body: Body = None) -> Any:
        """Issue a PUT request with a JSON or multipart body."""
        return await self.request('PUT', path, body=body)

    async def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Issue a DELETE request."""
        return await self.request('DELETE', path, params=params)

    async def request(
        self,
        method: str,
        path: str,
        body: Body = None,
        params: Optional[Mapping[str, Any]] = None,
        authenticate: bool = True
    ) -> Any:
        """
        Make an authenticated request to the platform.

        Args:
            method: HTTP method
            path: API path relative to the versioned base URL
            body: JSON mapping or aiohttp.FormData (ignored for GET)
            params: Optional query parameters (None values are dropped)
            authenticate: Refresh an expired session before dispatch

        Returns:
            Response payload with the {'data': ...} envelope removed,
            or None for 204 responses

        Raises:
            DriveAPIError: On non-2xx responses, embedded errors and network failures
        """
        if self._closed:
            raise DriveAPIError("Client is closed", code=APIErrorCodes.UNKNOWN_ERROR)

        if authenticate:
            await self._ensure_fresh_credentials()

        method = method.upper()
        url = self._builder.build_url(path, params)
        is_form = isinstance(body, aiohttp.FormData)
        headers = self._builder.build_headers(
            self._config.bearer_token,
            json_body=body is not None and not is_form
        )

        data: Any = None
        if body is not None and method != 'GET':
            data = body if is_form else json.dumps(body)

        self._logger.debug(f"{method} {url}")
        if self._config.verbose:
            self._logger.debug(f"Authorization: Bearer {mask_token(self._config.bearer_token)}")
            if data is not None and not is_form:
                self._logger.debug(f"Request body: {data[:300] if len(data) > 300 else data}")

        session = await self._ensure_session()

        try:
            async with session.request(
                method,
                url,
                data=data,
                headers=headers,
                proxy=self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
            ) as response:
                return await self._handle_response(method, path, response)
        except DriveAPIError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error: {method} {path}: {e}")
            raise DriveAPIError(
                f"Network error: {e}",
                code=APIErrorCodes.NETWORK_ERROR
            ) from e

    async def _handle_response(self, method: str, path: str, response) -> Any:
        """Turn an HTTP response into a payload or a DriveAPIError."""
        status = response.status
        self._logger.debug(f"HTTP {status} {method} {path}")

        if status == 204:
            return None

        payload = await self._read_payload(response)

        if self._config.verbose:
            text = payload if isinstance(payload, str) else json.dumps(payload, default=str)
            self._logger.debug(f"Response data: {text[:1000] if len(text) > 1000 else text}")

        if status < 200 or status >= 300:
            message = ResponseHandler.error_message(payload, response.reason or '')
            self._logger.warning(f"HTTP error {status} {method} {path}: {message}")
            raise DriveAPIError(message, status=status, details=payload)

        embedded = ResponseHandler.embedded_error(payload)
        if embedded:
            message, details = embedded
            self._logger.warning(f"Error in response body {method} {path}: {message}")
            raise DriveAPIError(message, status=status, details=details)

        return ResponseHandler.unwrap(payload)

    @staticmethod
    async def _read_payload(response) -> Any:
        """Decode a JSON body, falling back to text."""
        content_type = response.headers.get('Content-Type', '') if response.headers else ''
        if 'json' in content_type:
            try:
                return await response.json(content_type=None)
            except (json.JSONDecodeError, aiohttp.ContentTypeError, ValueError):
                return await response.text()
        text = await response.text()
        if not text:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text

    async def _ensure_fresh_credentials(self) -> None:
        """Refresh the held session when its expiry has passed."""
        session = self._config.session
        if session is None or not session.is_expired():
            return

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited
            session = self._config.session
            if session is None or not session.is_expired():
                return

            from .async_auth import AsyncAuthService
            self._logger.info("Session expired, refreshing access token")
            await AsyncAuthService(self).refresh()
