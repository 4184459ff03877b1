"""
Process configuration for the weather proxy.

Everything is read once from environment variables at startup and passed
to create_app() as a frozen Settings object. Handlers never touch os.environ.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

# CWA open data - 36 hour forecast for every county/city
DEFAULT_CWA_API_URL = "https://opendata.cwa.gov.tw/api/v1/rest/datastore/F-C0032-001"
DEFAULT_PORT = 3000
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = field(default=None, repr=False)
    api_url: str = DEFAULT_CWA_API_URL
    timeout: float = DEFAULT_TIMEOUT
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    environment: str = "development"
    cors_origins: tuple = ("*",)
    log_level: str = "INFO"

    @property
    def credential_configured(self) -> bool:
        """True when the upstream API key is a non-blank string."""
        return isinstance(self.api_key, str) and bool(self.api_key.strip())

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """
        Build settings from environment variables.

        A missing CWA_API_KEY is allowed (weather endpoints report it per
        request). A PORT or CWA_TIMEOUT that is not a number raises ValueError.
        """
        env = os.environ if environ is None else environ

        origins = tuple(
            origin.strip()
            for origin in env.get("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        )

        return cls(
            api_key=env.get("CWA_API_KEY") or None,
            api_url=env.get("CWA_API_URL") or DEFAULT_CWA_API_URL,
            timeout=float(env.get("CWA_TIMEOUT") or DEFAULT_TIMEOUT),
            host=env.get("HOST") or "0.0.0.0",
            port=int(env.get("PORT") or DEFAULT_PORT),
            environment=env.get("APP_ENV") or "development",
            cors_origins=origins or ("*",),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
