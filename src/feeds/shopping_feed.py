# src/feeds/shopping_feed.py

"""Shopping feed (marketplace B): RSS items with an availability flag."""

import logging

from bs4 import Tag
from curl_cffi import requests as curl_requests

from src.config.settings import SyncConfig
from src.feeds.base_feed import BaseFeedLoader, FeedStructureError
from src.feeds.xml_records import children, field_map, first_child, parse_xml
from src.models.feed_entry import ShoppingFeedIndex, ShoppingItem

logger = logging.getLogger("stock_sync.shopping_feed")


def _item_list(text: str) -> list[Tag] | None:
    """Locate ``rss/channel/item`` nodes; ``None`` when absent."""
    soup = parse_xml(text)
    rss = soup.find("rss")
    channel = first_child(rss if isinstance(rss, Tag) else None, "channel")
    items = children(channel, "item")
    return items or None


def _google_field(fields: dict[str, str], name: str) -> str:
    """Read a ``g:`` field, or its bare name when the prefix is undeclared."""
    return fields.get(f"g:{name}") or fields.get(name, "")


def _to_item(tag: Tag) -> ShoppingItem:
    fields = field_map(tag)
    return ShoppingItem(
        ean=_google_field(fields, "gtin"),
        availability=_google_field(fields, "availability").lower(),
        price=_google_field(fields, "price"),
        title=fields.get("title", ""),
        link=fields.get("link", ""),
    )


def parse_shopping_feed(text: str) -> ShoppingFeedIndex:
    """Build the EAN index from a shopping feed document.

    A document without an item list yields an empty index: this feed
    is a secondary source and never blocks a run.
    """
    items = _item_list(text)
    if items is None:
        logger.warning("Could not find rss/channel/item in the shopping feed")
        return ShoppingFeedIndex()

    index = ShoppingFeedIndex(total_items=len(items))
    for tag in items:
        item = _to_item(tag)
        if not item.ean:
            continue
        index.by_ean[item.ean] = item

    logger.info(
        "Shopping feed: %d items, %d EANs",
        index.total_items,
        len(index.by_ean),
    )
    return index


def find_item(text: str, ean: str) -> ShoppingItem | None:
    """First item in the document carrying *ean*.

    Raises:
        FeedStructureError: the document has no ``rss/channel/item`` list.
    """
    items = _item_list(text)
    if items is None:
        raise FeedStructureError(
            "Could not find rss/channel/item in the shopping feed"
        )
    for tag in items:
        item = _to_item(tag)
        if item.ean == ean:
            return item
    return None


class ShoppingFeedLoader(BaseFeedLoader):
    """Loads the optional shopping feed."""

    def __init__(
        self,
        config: SyncConfig,
        session: curl_requests.Session | None = None,
    ) -> None:
        super().__init__("shopping_feed", config.shopping_feed_url, session)

    def load(self) -> ShoppingFeedIndex:
        """Fetch and index the feed, or return an empty index if unset."""
        if not self.url:
            self.logger.info(
                "[%s] No feed URL configured, skipping", self.source_name
            )
            return ShoppingFeedIndex()
        return parse_shopping_feed(self._fetch_text())

    def find(self, ean: str) -> ShoppingItem | None:
        """Fetch the feed and return the first item for *ean*."""
        if not self.url:
            return None
        return find_item(self._fetch_text(), ean)
