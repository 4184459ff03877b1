"""CWA Weather Proxy - forwards browser requests to the CWA open-data API."""

__version__ = "1.0.0"
