"""
CWA open-data client.

One call shape: GET {api_url}?Authorization=<key>[&locationName=<name>].
Failures are translated into UpstreamError (CWA answered with an error
status) or TransportError (nothing usable came back). No retries.
"""

import logging
from typing import Any, Optional

import httpx

from .config import Settings
from .errors import TransportError, UpstreamError

logger = logging.getLogger("weather_proxy.upstream")


def build_http_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Create the shared AsyncClient used for every upstream call."""
    return httpx.AsyncClient(
        timeout=settings.timeout,
        follow_redirects=True,
        headers={"Accept": "application/json"},
        transport=transport,
    )


def _decode_body(response: httpx.Response) -> Any:
    """Parse an error body as JSON, falling back to raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text


def _upstream_message(body: Any) -> Any:
    # Any truthy value is passed through unchanged, not only strings
    if isinstance(body, dict):
        return body.get("message") or None
    return None


class CWAClient:
    """Thin wrapper around the F-C0032-001 datastore endpoint."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.http_client = http_client

    async def fetch_forecast(self, location_name: Optional[str] = None) -> Any:
        """
        Fetch the 36 hour forecast.

        Args:
            location_name: County/city filter, sent verbatim. None means all
                locations.

        Returns:
            The decoded JSON document, untouched.
        """
        params = {"Authorization": self.settings.api_key}
        if location_name is not None:
            params["locationName"] = location_name

        try:
            response = await self.http_client.get(self.settings.api_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = _decode_body(e.response)
            raise UpstreamError(e.response.status_code, body, _upstream_message(body)) from e
        except httpx.HTTPError as e:
            # Timeouts, DNS failures, refused connections, protocol errors
            raise TransportError(str(e) or type(e).__name__) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError(f"upstream returned a non-JSON body: {e}") from e

        logger.debug(f"Upstream OK ({response.status_code}) location={location_name!r}")
        return payload
