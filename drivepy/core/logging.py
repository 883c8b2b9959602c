"""Logging utilities for drivepy modules."""

import logging


PACKAGE_LOGGERS = (
    'drivepy',
    'drivepy.api',
    'drivepy.auth',
    'drivepy.client',
    'drivepy.upload',
    'drivepy.upload.status',
    'drivepy.upload.failure',
    'drivepy.storage.resolver',
    'drivepy.cli',
)


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.
    
    This ensures that loggers work with basicConfig() without needing
    explicit setup_logging() calls. The logger will:
    - Propagate to root logger (default behavior)
    - Only set a default level if root logger has no handlers
    
    Args:
        name: Logger name (typically a 'drivepy.*' component name)
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    
    # Only set default level if root logger has no handlers
    # (i.e., basicConfig hasn't been called yet)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)
    
    return logger


def mask_token(token: str) -> str:
    """Shorten a credential so it can appear in debug output."""
    if not token:
        return ''
    if len(token) <= 8:
        return '***'
    return f"{token[:4]}...{token[-2:]}"
