"""Request builder for API requests."""
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode, urlsplit

from ...exceptions import DriveResponseError


class RequestBuilder:
    """Builds request URLs and headers for the versioned API."""
    
    TOKEN_PREFIX = 'Bearer'
    
    def __init__(self, base_url: str):
        """Initializes request builder."""
        self.base_url = base_url.rstrip('/')
    
    def build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Builds request URL from an API path and optional query parameters."""
        if not path.startswith('/'):
            path = f"/{path}"
        url = f"{self.base_url}{path}"
        query = self.build_query(params)
        if query:
            url = f"{url}?{query}"
        return url
    
    @staticmethod
    def build_query(params: Optional[Mapping[str, Any]] = None) -> str:
        """Encodes query parameters, dropping None values."""
        if not params:
            return ''
        encoded: Dict[str, str] = {}
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, bool):
                encoded[key] = 'true' if value else 'false'
            else:
                encoded[key] = str(value)
        return urlencode(encoded)
    
    def build_headers(self, token: str, json_body: bool = False) -> Dict[str, str]:
        """Builds request headers."""
        headers = {'Authorization': f"{self.TOKEN_PREFIX} {token}"}
        if json_body:
            headers['Content-Type'] = 'application/json'
        return headers
    
    def relative_path(self, target: str) -> str:
        """
        Turn a platform-provided action URL into a path for this builder.
        
        Action URLs may be absolute, or carry the API version prefix
        ('/v1/drive/...') that the base URL already contains.
        
        Raises:
            DriveResponseError: If an absolute URL points at another host
        """
        parts = urlsplit(target)
        base = urlsplit(self.base_url)
        if parts.scheme or parts.netloc:
            if (parts.scheme, parts.netloc) != (base.scheme, base.netloc):
                raise DriveResponseError(
                    f"Action URL {target!r} is not on {self.base_url}",
                    payload=target,
                    error_code='FOREIGN_ACTION_URL'
                )
            path = parts.path
        else:
            path = parts.path if parts.path.startswith('/') else f"/{parts.path}"
        
        base_path = base.path.rstrip('/')
        if base_path and (path == base_path or path.startswith(f"{base_path}/")):
            path = path[len(base_path):] or '/'
        if parts.query:
            path = f"{path}?{parts.query}"
        return path
