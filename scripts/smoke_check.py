#!/usr/bin/env python3
"""
Weather Proxy - Smoke Check
===========================

Hits a running proxy and checks the response shapes.

Checks:
1. GET /             - discovery document lists the endpoints
2. GET /health       - status OK with an ISO timestamp
3. GET /nonexistent  - 404 {"error": ...}
4. GET /weather      - success envelope (or a well-formed error envelope)
5. GET /weather/city/<SMOKE_CITY> - same, filtered to one city

Usage:
    PROXY_URL=http://localhost:3000 python scripts/smoke_check.py
"""

import os
import sys
from typing import Any, Dict, List
from urllib.parse import quote

import requests

PROXY_URL = os.environ.get("PROXY_URL", "http://localhost:3000").rstrip("/")
SMOKE_CITY = os.environ.get("SMOKE_CITY", "臺中市")
TIMEOUT = 30


class SmokeResult:
    def __init__(self):
        self.checks: List[Dict[str, Any]] = []

    def record(self, name: str, passed: bool, detail: str = ""):
        self.checks.append({"name": name, "passed": passed, "detail": detail})
        mark = "✓" if passed else "✗"
        print(f"  {mark} {name}" + (f" - {detail}" if detail else ""))

    @property
    def failed(self) -> int:
        return sum(1 for c in self.checks if not c["passed"])


def get(path: str) -> requests.Response:
    return requests.get(f"{PROXY_URL}{path}", timeout=TIMEOUT)


def check_envelope(result: SmokeResult, name: str, response: requests.Response):
    body = response.json()
    if response.status_code == 200:
        ok = body.get("success") is True or body.get("success") == "true"
        result.record(name, ok, f"top-level keys: {sorted(body)}")
    else:
        # A missing key or an upstream outage still has to come back as an envelope
        ok = "error" in body and "message" in body
        result.record(name, ok, f"HTTP {response.status_code}: {body.get('error')} / {body.get('message')}")


def main():
    print("=" * 60)
    print("WEATHER PROXY - SMOKE CHECK")
    print("=" * 60)
    print(f"Proxy URL: {PROXY_URL}")

    result = SmokeResult()

    try:
        body = get("/").json()
        endpoints = body.get("endpoints", {})
        result.record("discovery document", {"allCities", "cityByName", "health"} <= set(endpoints))

        response = get("/health")
        body = response.json()
        result.record(
            "health",
            response.status_code == 200 and body.get("status") == "OK" and "timestamp" in body,
            body.get("timestamp", ""),
        )

        response = get("/nonexistent")
        result.record("unknown route", response.status_code == 404 and "error" in response.json())

        check_envelope(result, "all locations", get("/weather"))
        check_envelope(result, f"single location ({SMOKE_CITY})", get(f"/weather/city/{quote(SMOKE_CITY)}"))
    except requests.RequestException as e:
        result.record("proxy reachable", False, str(e))

    print(f"\nPassed: {len(result.checks) - result.failed}/{len(result.checks)}")
    sys.exit(0 if result.failed == 0 else 1)


if __name__ == "__main__":
    main()
