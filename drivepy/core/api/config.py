"""
API configuration module.

Provides an explicit configuration object for the drive API client.
The object is passed to the transport at construction; nothing is
held in process-wide state.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import ssl
import time


@dataclass
class ProxyConfig:
    """
    Proxy configuration.

    Supports HTTP and HTTPS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Convert to aiohttp proxy format."""
        if not self.url:
            return None

        if self.username and self.password:
            # Insert credentials into URL
            if '://' in self.url:
                protocol, rest = self.url.split('://', 1)
                return f"{protocol}://{self.username}:{self.password}@{rest}"

        return self.url


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration.

    Allows customization of SSL behavior for security requirements.
    """
    verify: bool = True
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self):
        """Create SSL context from configuration (False disables verification)."""
        if not self.verify:
            return False

        context = ssl.create_default_context()

        if self.ca_file:
            context.load_verify_locations(self.ca_file)

        if self.cert_file:
            context.load_cert_chain(
                self.cert_file,
                keyfile=self.key_file
            )

        context.check_hostname = self.check_hostname

        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Granular control over different timeout types.
    """
    total: float = 300.0  # Total request timeout
    connect: float = 30.0  # Connection timeout
    sock_read: float = 60.0  # Socket read timeout
    sock_connect: float = 30.0  # Socket connect timeout

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class SessionCredentials:
    """
    Token credentials obtained from sign-in.

    Attributes:
        access_token: Bearer token sent with every request
        refresh_token: Token used to obtain a new access token
        sub: Subject (user or client) the token was issued for
        iat: Issued-at time, epoch seconds
        exp: Expiry time, epoch seconds
    """
    access_token: str
    refresh_token: Optional[str] = None
    sub: Optional[str] = None
    iat: Optional[int] = None
    exp: Optional[int] = None

    def is_expired(self, now: Optional[float] = None) -> bool:
        """True if the token carries an expiry that lies in the past."""
        if self.exp is None:
            return False
        current = time.time() if now is None else now
        return int(self.exp) < current

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionCredentials':
        """Create from a sign-in response."""
        return cls(
            access_token=data.get('access_token', data.get('accessToken', '')),
            refresh_token=data.get('refresh_token', data.get('refreshToken')),
            sub=data.get('sub'),
            iat=data.get('iat'),
            exp=data.get('exp'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'sub': self.sub,
            'iat': self.iat,
            'exp': self.exp,
        }


@dataclass
class APIConfig:
    """
    Complete API configuration.

    Centralizes all configuration options for the drive API client.
    A held session takes precedence over the static API key when
    building the Authorization header.
    """
    # Endpoint settings
    api_url: str = 'https://api.mosaia.ai'
    version: str = '1'

    # Credentials
    api_key: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    session: Optional[SessionCredentials] = None

    # User agent
    user_agent: str = 'drivepy/1.0.0'

    # Log request/response bodies at DEBUG level
    verbose: bool = False

    # Sub-configurations
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    # Additional headers
    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Logging
    log_level: int = 20  # logging.INFO

    # Connection pool settings
    limit_per_host: int = 10
    limit: int = 100

    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        """Create configuration with proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url),
            **kwargs
        )

    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Create configuration with SSL verification disabled."""
        return cls(
            ssl=SSLConfig(verify=False, check_hostname=False),
            **kwargs
        )

    @property
    def base_url(self) -> str:
        """Versioned base URL every request path is appended to."""
        return f"{self.api_url.rstrip('/')}/v{self.version}"

    @property
    def bearer_token(self) -> str:
        """Token for the Authorization header."""
        if self.session and self.session.access_token:
            return self.session.access_token
        return self.api_key or ''

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            'Accept': 'application/json',
            **self.extra_headers
        }

        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
