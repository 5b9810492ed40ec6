# src/feeds/offer_feed.py

"""Offer feed (marketplace A): ``offers/o`` documents with stock counts."""

import logging

from bs4 import Tag
from curl_cffi import requests as curl_requests

from src.config.settings import SyncConfig
from src.feeds.base_feed import BaseFeedLoader, FeedStructureError
from src.feeds.xml_records import (
    children,
    element_text,
    first_child,
    parse_xml,
)
from src.models.feed_entry import OfferEntry, OfferFeedIndex
from src.models.quantity import shop_quantity, to_int

logger = logging.getLogger("stock_sync.offer_feed")

EAN_ATTRIBUTE = "EAN"


def _offer_list(text: str) -> list[Tag]:
    """Locate the ``o`` nodes under the ``offers`` root."""
    soup = parse_xml(text)
    offers = soup.find("offers")
    offer_tags = children(offers if isinstance(offers, Tag) else None, "o")
    if not offer_tags:
        raise FeedStructureError(
            "Could not find the offer list (offers/o) in the offer feed"
        )
    return offer_tags


def _offer_ean(offer: Tag) -> str:
    """Text of the first ``attrs/a`` whose name is ``EAN``."""
    for attr in children(first_child(offer, "attrs"), "a"):
        if attr.get("name") == EAN_ATTRIBUTE:
            return element_text(attr)
    return ""


def _to_entry(offer: Tag, ean: str) -> OfferEntry:
    feed_qty = to_int(offer.get("stock"))
    return OfferEntry(
        ean=ean,
        feed_qty=feed_qty,
        shop_qty=shop_quantity(feed_qty),
        offer_id=str(offer.get("id", "")),
        name=element_text(first_child(offer, "name")),
    )


def parse_offer_feed(text: str) -> OfferFeedIndex:
    """Build the EAN index from an offer feed document.

    Offers without an ``EAN`` attribute are skipped.  When an EAN
    repeats, the last offer wins and the EAN is recorded as duplicated.

    Raises:
        FeedStructureError: the document has no ``offers/o`` list.
    """
    offer_tags = _offer_list(text)
    index = OfferFeedIndex(total_offers=len(offer_tags))

    skipped = 0
    for offer in offer_tags:
        ean = _offer_ean(offer)
        if not ean:
            skipped += 1
            continue
        if ean in index.by_ean:
            index.duplicated_eans.add(ean)
        index.by_ean[ean] = _to_entry(offer, ean)

    logger.info(
        "Offer feed: %d offers, %d EANs, %d duplicated, %d without EAN",
        index.total_offers,
        len(index.by_ean),
        len(index.duplicated_eans),
        skipped,
    )
    return index


def find_offer(text: str, ean: str) -> OfferEntry | None:
    """First offer in the document carrying *ean*."""
    for offer in _offer_list(text):
        if _offer_ean(offer) == ean:
            return _to_entry(offer, ean)
    return None


class OfferFeedLoader(BaseFeedLoader):
    """Loads the mandatory offer feed."""

    def __init__(
        self,
        config: SyncConfig,
        session: curl_requests.Session | None = None,
    ) -> None:
        super().__init__("offer_feed", config.offer_feed_url, session)

    def load(self) -> OfferFeedIndex:
        """Fetch and index the feed; any failure aborts the run."""
        return parse_offer_feed(self._fetch_text())

    def find(self, ean: str) -> OfferEntry | None:
        """Fetch the feed and return the first offer for *ean*."""
        return find_offer(self._fetch_text(), ean)
