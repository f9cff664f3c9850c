"""
Exceptions raised by the fetch layer and configuration loading.

A missing element or pattern in scraped markup is not an error: extractors
return empty fields for it. Only fetch failures and bad configuration are
represented here.
"""

from typing import Any, Optional


class FaselError(Exception):
    """Base exception class for all fasel-cli errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigurationError(FaselError):
    """Raised when the config file cannot be read or fails validation."""

    def __init__(self, message: str, config_path: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.config_path = config_path


class FetchError(FaselError):
    """Raised when the site answers with a non-success HTTP status."""

    def __init__(self, status: int, url: str):
        super().__init__(f"HTTP {status} for {url}")
        self.status = status
        self.url = url


class TransportError(FaselError):
    """Raised on DNS, TLS, connection or timeout failures."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Request to {url} failed: {reason}")
        self.url = url
        self.reason = reason
