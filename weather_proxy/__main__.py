#!/usr/bin/env python3
"""Run the weather proxy: python -m weather_proxy [--host HOST] [--port PORT]"""

import argparse
import logging

import uvicorn
from dotenv import load_dotenv

from .config import Settings
from .server import configure_logging, create_app

logger = logging.getLogger("weather_proxy")


def main(argv=None):
    # .env is optional; real deployments inject the environment directly
    load_dotenv()
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="CWA Weather Proxy")
    parser.add_argument("--host", default=settings.host, help="Bind host")
    parser.add_argument("--port", type=int, default=settings.port, help="Bind port (default: $PORT or 3000)")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    logger.info(f"Starting weather proxy on {args.host}:{args.port} (environment: {settings.environment})")

    uvicorn.run(
        create_app(settings),
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
