from __future__ import annotations

import httpx

from weatherapp.core.config import Settings


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)
    timeout = httpx.Timeout(settings.http_timeout_seconds)
    return httpx.AsyncClient(
        timeout=timeout,
        limits=limits,
        headers={"User-Agent": "weatherapp/0.1", "Accept": "application/json"},
        follow_redirects=True,
    )

