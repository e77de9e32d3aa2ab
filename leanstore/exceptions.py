"""
Custom exceptions for LeanStore
"""

from typing import Any, Dict, Optional


class LeanStoreError(Exception):
    """Base exception for all LeanStore errors"""
    def __init__(self, message: str, status_code: int = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigurationInvalid(LeanStoreError):
    """Raised when required configuration values are missing"""
    def __init__(self, message: str, missing: Optional[list] = None):
        self.missing = missing or []
        super().__init__(message)


class ValidationError(LeanStoreError):
    """Raised when caller input validation fails"""
    pass


class RequestFailed(LeanStoreError):
    """
    A whole request was rejected by the API or answered with
    an unusable body.

    Attributes:
        url: Requested URL
        request: Request description (method, params or body; never credentials)
        body: Error body returned by the server, or the raw text when it was not JSON
    """
    def __init__(
        self,
        message: str,
        url: str,
        request: Optional[Dict[str, Any]] = None,
        body: Any = None,
        status_code: int = None
    ):
        self.url = url
        self.request = request or {}
        self.body = body
        super().__init__(
            f"{message} for request: {url}, {self.request}, body: {body}",
            status_code=status_code
        )


class BatchRequestFailed(RequestFailed):
    """Raised when a batch call is rejected as a whole or its response is malformed"""
    pass


class QueryFailed(RequestFailed):
    """Raised when a collection query returns a top-level error"""
    pass


class SearchFailed(RequestFailed):
    """Raised when a full-text search returns a top-level error"""
    pass
