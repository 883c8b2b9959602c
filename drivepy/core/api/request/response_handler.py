"""Response handler for API responses."""
from typing import Any, Optional, Tuple


class ResponseHandler:
    """Normalizes platform payloads at the transport boundary."""
    
    @staticmethod
    def unwrap(payload: Any) -> Any:
        """
        Strips the response envelope.
        
        The platform answers either with {'data': ..., 'paging': ...}
        or with the bare value. Only the value is returned.
        """
        if isinstance(payload, dict) and 'data' in payload:
            return payload['data']
        return payload
    
    @staticmethod
    def embedded_error(payload: Any) -> Optional[Tuple[str, Any]]:
        """Returns (message, details) if a 2xx body carries an error member."""
        if not isinstance(payload, dict):
            return None
        error = payload.get('error')
        if not error:
            return None
        if isinstance(error, dict):
            return str(error.get('message') or 'Unknown Error'), error
        return str(error), error
    
    @staticmethod
    def error_message(payload: Any, fallback: str) -> str:
        """Extracts a human-readable message from an error body."""
        if isinstance(payload, dict):
            message = payload.get('message')
            if message:
                return str(message)
            error = payload.get('error')
            if isinstance(error, dict) and error.get('message'):
                return str(error['message'])
            if isinstance(error, str) and error:
                return error
        if isinstance(payload, str) and payload.strip():
            return payload.strip()
        return fallback or 'Unknown Error'
