# src/services/ean_inspector.py

"""Looks up a single EAN in the store and in both feeds."""

import asyncio
import logging
from dataclasses import dataclass, field

from src.clients.store_client import StoreClient
from src.feeds.base_feed import FeedStructureError
from src.feeds.offer_feed import OfferFeedLoader
from src.feeds.shopping_feed import ShoppingFeedLoader
from src.models.feed_entry import OfferEntry, ShoppingItem
from src.models.product import StockRecord, StoreProduct

logger = logging.getLogger("stock_sync.inspect")


@dataclass
class StoreMatch:
    """A catalog product carrying the EAN, with its stock row."""

    product: StoreProduct
    stock: StockRecord | None


@dataclass
class EanInspection:
    """What each source reports for one EAN."""

    ean: str
    store_matches: list[StoreMatch] = field(
        default_factory=lambda: list[StoreMatch]()
    )
    offer: OfferEntry | None = None
    offer_feed_error: str = ""
    shopping_item: ShoppingItem | None = None
    shopping_feed_error: str = ""


class EanInspector:
    """Runs the store and feed lookups for one EAN, one after another."""

    def __init__(
        self,
        store: StoreClient,
        offer_loader: OfferFeedLoader,
        shopping_loader: ShoppingFeedLoader,
    ) -> None:
        self.store = store
        self.offer_loader = offer_loader
        self.shopping_loader = shopping_loader

    def check_store(self, ean: str) -> list[StoreMatch]:
        """Products with this EAN and their stock records."""
        matches = [
            StoreMatch(
                product=product,
                stock=self.store.find_stock_for_product(product.id),
            )
            for product in self.store.find_products_by_ean(ean)
        ]
        logger.info("Store: %d products with EAN %s", len(matches), ean)
        return matches

    async def inspect(self, ean: str) -> EanInspection:
        """Collect the store, offer feed and shopping feed view of *ean*."""
        result = EanInspection(ean=ean)
        result.store_matches = await asyncio.to_thread(
            self.check_store, ean
        )
        try:
            result.offer = await asyncio.to_thread(
                self.offer_loader.find, ean
            )
        except FeedStructureError as exc:
            logger.warning("Offer feed unusable: %s", exc)
            result.offer_feed_error = str(exc)
        try:
            result.shopping_item = await asyncio.to_thread(
                self.shopping_loader.find, ean
            )
        except FeedStructureError as exc:
            logger.warning("Shopping feed unusable: %s", exc)
            result.shopping_feed_error = str(exc)
        return result
