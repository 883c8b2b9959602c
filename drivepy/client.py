"""
DriveClient - High-level async client for drive storage.

Example:
    >>> async with DriveClient(api_key="...") as drive:
    ...     items = drive.items("drive-123")
    ...     result = await items.upload_many(["a.txt", "b.txt"])
    ...     job = await items.get_upload_status(result.upload_job.id)
"""
from dataclasses import replace
from typing import Optional

from .core.api import (
    AsyncAPIClient,
    AsyncAuthService,
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    SessionCredentials,
)
from .core.exceptions import DriveException
from .core.logging import get_logger
from .drive_items import DriveItems


class DriveClient:
    """
    High-level async client.

    Owns one AsyncAPIClient built from an explicit APIConfig and hands
    out per-drive item collections.

    Authentication:
        >>> async with DriveClient(api_key="key") as drive:
        ...     ...
        >>> async with DriveClient(config=config) as drive:
        ...     await drive.sign_in("user@example.com", "secret")

    With custom configuration:
        >>> config = DriveClient.create_config(proxy="http://proxy:8080")
        >>> client = DriveClient(config=config)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        config: Optional[APIConfig] = None
    ):
        """
        Initialize client.

        Args:
            api_key: API key (overrides the one in config)
            config: Optional API configuration
        """
        self._config = config or APIConfig.default()
        if api_key:
            self._config = replace(self._config, api_key=api_key)
        self._logger = get_logger('drivepy.client')

        self._api: Optional[AsyncAPIClient] = None
        self._auth: Optional[AsyncAuthService] = None

    # =========================================================================
    # Configuration helpers
    # =========================================================================

    @staticmethod
    def create_config(
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        proxy: Optional[str] = None,
        proxy_user: Optional[str] = None,
        proxy_pass: Optional[str] = None,
        timeout: float = 300,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None
    ) -> APIConfig:
        """
        Create API configuration with common options.

        Args:
            api_url: Platform URL (without version)
            api_key: API key
            proxy: Proxy URL (e.g., "http://proxy:8080")
            proxy_user: Proxy username
            proxy_pass: Proxy password
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            user_agent: Custom user agent string

        Returns:
            APIConfig instance
        """
        proxy_config = None
        if proxy:
            proxy_config = ProxyConfig(
                url=proxy,
                username=proxy_user,
                password=proxy_pass
            )

        config = APIConfig(
            api_key=api_key,
            proxy=proxy_config,
            timeout=TimeoutConfig(total=timeout),
            ssl=SSLConfig(verify=verify_ssl),
        )
        if api_url:
            config.api_url = api_url.rstrip('/')
        if user_agent:
            config.user_agent = user_agent
        return config

    @property
    def config(self) -> APIConfig:
        return self._config

    @property
    def api(self) -> AsyncAPIClient:
        """
        Underlying transport.

        Raises:
            DriveException: If the client is not connected
        """
        if self._api is None:
            raise DriveException("Client is not connected; use 'async with' or connect()")
        return self._api

    # =========================================================================
    # Context manager
    # =========================================================================

    async def connect(self) -> 'DriveClient':
        """Open the transport."""
        if self._api is None:
            self._api = AsyncAPIClient(self._config)
            await self._api.__aenter__()
            self._auth = AsyncAuthService(self._api)
            self._logger.debug(f"Connected to {self._config.base_url}")
        return self

    async def __aenter__(self) -> 'DriveClient':
        return await self.connect()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the client and release resources."""
        if self._api:
            await self._api.close()
            self._api = None
            self._auth = None

    # =========================================================================
    # Authentication
    # =========================================================================

    async def sign_in(
        self,
        email: str,
        password: str,
        client_id: Optional[str] = None
    ) -> SessionCredentials:
        """Sign in with a user's password; the session is kept on the config."""
        await self.connect()
        return await self._auth.sign_in_with_password(
            email, password, client_id or self._config.client_id
        )

    async def sign_in_with_client(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None
    ) -> SessionCredentials:
        """Sign in with client credentials."""
        await self.connect()
        return await self._auth.sign_in_with_client(
            client_id or self._config.client_id,
            client_secret or self._config.client_secret
        )

    async def sign_out(self) -> None:
        """End the current session."""
        if self._auth:
            await self._auth.sign_out()

    @property
    def is_signed_in(self) -> bool:
        """Check if a session is held."""
        return self._config.session is not None

    # =========================================================================
    # Drives
    # =========================================================================

    def items(self, drive_id: str) -> DriveItems:
        """
        Item collection of a drive.

        Raises:
            DriveException: If the client is not connected
            DriveInputError: If drive_id is empty
        """
        api = self.api
        return DriveItems(api, drive_id, relative_path=api.builder.relative_path)
