"""
Async authentication service.

Handles sign-in and token refresh asynchronously.
"""
from typing import Optional, Dict, Any

from .async_client import AsyncAPIClient
from .config import SessionCredentials
from .errors import DriveAPIError
from ..exceptions import DriveAuthError
from ..logging import get_logger


class AsyncAuthService:
    """
    Asynchronous authentication service.

    Every successful call installs the resulting SessionCredentials on
    the configuration the client was built from.
    """

    SIGNIN_PATH = '/auth/signin'
    SIGNOUT_PATH = '/auth/signout'

    def __init__(self, client: AsyncAPIClient):
        """
        Initialize auth service.

        Args:
            client: Async API client
        """
        self._client = client
        self._logger = get_logger('drivepy.auth')

    async def sign_in_with_password(
        self,
        email: str,
        password: str,
        client_id: Optional[str] = None
    ) -> SessionCredentials:
        """
        Sign in with user credentials.

        Args:
            email: User email
            password: User password
            client_id: OAuth client id (defaults to the configured one)

        Returns:
            SessionCredentials installed on the client configuration

        Raises:
            DriveAuthError: If the platform rejects the credentials
        """
        return await self._sign_in({
            'grant_type': 'password',
            'email': email,
            'password': password,
            'client_id': client_id or self._client.config.client_id,
        })

    async def sign_in_with_client(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None
    ) -> SessionCredentials:
        """Sign in with client credentials."""
        config = self._client.config
        return await self._sign_in({
            'grant_type': 'client',
            'client_id': client_id or config.client_id,
            'client_secret': client_secret or config.client_secret,
        })

    async def refresh(self, refresh_token: Optional[str] = None) -> SessionCredentials:
        """
        Exchange a refresh token for a new access token.

        Args:
            refresh_token: Token to use (defaults to the held session's)

        Returns:
            New SessionCredentials

        Raises:
            DriveAuthError: If no refresh token is available or refresh fails
        """
        session = self._client.config.session
        token = refresh_token or (session.refresh_token if session else None)
        if not token:
            raise DriveAuthError("Refresh token is required and not found in config")

        return await self._sign_in({
            'grant_type': 'refresh',
            'refresh_token': token,
        })

    async def sign_out(self) -> None:
        """Invalidate the held session."""
        config = self._client.config
        try:
            if config.session:
                await self._client.request(
                    'DELETE',
                    self.SIGNOUT_PATH,
                    authenticate=False
                )
        finally:
            config.session = None

    async def _sign_in(self, request: Dict[str, Any]) -> SessionCredentials:
        grant_type = request.get('grant_type')
        try:
            data = await self._client.request(
                'POST',
                self.SIGNIN_PATH,
                body={k: v for k, v in request.items() if v is not None},
                authenticate=False
            )
        except DriveAPIError as e:
            self._logger.warning(f"Sign-in ({grant_type}) rejected: {e}")
            raise DriveAuthError(str(e), error_code=e.code) from e

        credentials = SessionCredentials.from_dict(data) if isinstance(data, dict) else None
        if credentials is None or not credentials.access_token:
            raise DriveAuthError("Sign-in response did not contain an access token")

        self._client.config.session = credentials
        self._logger.info(f"Signed in ({grant_type}) as {credentials.sub or 'unknown subject'}")
        return credentials
