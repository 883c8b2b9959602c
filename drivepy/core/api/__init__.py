"""Drive API module - authenticated transport and configuration."""
from .errors import DriveAPIError, APIErrorCodes
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, SessionCredentials
from .async_client import AsyncAPIClient
from .async_auth import AsyncAuthService

__all__ = [
    # Async client
    'AsyncAPIClient',
    'AsyncAuthService',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'SessionCredentials',
    
    # Errors
    'DriveAPIError',
    'APIErrorCodes',
]
