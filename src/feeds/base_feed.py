# src/feeds/base_feed.py

"""Abstract base class for the XML feed loaders."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings


class FeedFetchError(Exception):
    """The feed could not be downloaded."""


class FeedStructureError(Exception):
    """The feed was downloaded but its record list is missing."""


class BaseFeedLoader(ABC):
    """Download a feed once and build an EAN-keyed index from it."""

    def __init__(
        self,
        source_name: str,
        url: str | None,
        session: curl_requests.Session | None = None,
    ) -> None:
        self.source_name = source_name
        self.url = url
        self.logger = logging.getLogger(f"stock_sync.{source_name}")
        self.settings = Settings()
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _fetch_text(self) -> str:
        """GET the feed as text; no retry, non-200 is an error."""
        self.logger.info("[%s] Fetching feed %s", self.source_name, self.url)
        resp = self.session.get(
            self.url,
            timeout=self.settings.FEED_TIMEOUT,
        )
        if resp.status_code != 200:
            raise FeedFetchError(
                f"{self.source_name} feed returned HTTP {resp.status_code}"
            )
        self.logger.debug(
            "[%s] Downloaded %d characters",
            self.source_name,
            len(resp.text),
        )
        return resp.text

    @abstractmethod
    def load(self) -> Any:
        """Fetch, parse and index the feed."""
        ...
