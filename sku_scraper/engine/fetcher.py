"""HTTP fetching of catalog filter pages."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass

import httpx
import structlog

from ..config import FetchSettings
from ..errors import FetchError


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    status_code: int
    text: str


class Fetcher:
    """Retrieve raw page markup; any failure surfaces as ``FetchError``."""

    def __init__(
        self,
        settings: FetchSettings | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings or FetchSettings()
        self.logger = logger or structlog.get_logger("sku_scraper.fetcher")
        headers = {"User-Agent": self.settings.user_agent} if self.settings.user_agent else None
        self._client = httpx.Client(
            follow_redirects=self.settings.follow_redirects,
            timeout=self.settings.timeout,
            headers=headers,
        )

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self, url: str) -> FetchResponse:
        self._pause()
        self.logger.debug("fetch_start", url=url)
        try:
            response = self._client.request("GET", url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self.logger.warning("fetch_error", url=url, error=str(exc))
            raise FetchError(url, f"Failed to fetch site ({exc.__class__.__name__})") from exc
        if self._is_failure(response):
            self.logger.warning("fetch_bad_status", url=url, status=response.status_code)
            raise FetchError(url, f"Unexpected status {response.status_code}")
        self.logger.debug("fetch_done", url=url, status=response.status_code)
        return FetchResponse(
            url=str(response.url),
            status_code=response.status_code,
            text=response.text,
        )

    def _pause(self) -> None:
        low, high = self.settings.delay_range
        if high <= 0:
            return
        time.sleep(random.uniform(low, high))

    @staticmethod
    def _is_failure(response: httpx.Response) -> bool:
        return response.status_code >= 400


__all__ = ["FetchResponse", "Fetcher"]
