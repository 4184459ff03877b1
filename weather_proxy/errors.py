"""Error taxonomy. Each type is turned into a JSON envelope by server.py."""

from typing import Any


class WeatherProxyError(Exception):
    """Base class for failures the proxy knows how to report."""


class ConfigurationError(WeatherProxyError):
    """The upstream credential is missing. Raised before any network call."""


class UpstreamError(WeatherProxyError):
    """CWA answered with an HTTP error status."""

    def __init__(self, status_code: int, body: Any, message: Any = None):
        self.status_code = status_code
        self.body = body
        self.message = message
        super().__init__(f"upstream returned HTTP {status_code}")


class TransportError(WeatherProxyError):
    """No usable response reached the proxy (DNS, refused, timeout, bad JSON)."""
