# tests/test_ean_inspector.py

"""Tests for the single-EAN inspector."""

import unittest
from unittest.mock import MagicMock

from src.feeds.base_feed import FeedStructureError
from src.models.feed_entry import OfferEntry, ShoppingItem
from src.models.product import StockRecord, StoreProduct
from src.services.ean_inspector import EanInspector

EAN = "5901234123457"


class TestEanInspector(unittest.IsolatedAsyncioTestCase):
    """EanInspector.inspect collects every source's view."""

    def _make(self) -> tuple[EanInspector, MagicMock, MagicMock, MagicMock]:
        store = MagicMock()
        store.find_products_by_ean.return_value = [
            StoreProduct(id=1, ean=EAN),
            StoreProduct(id=2, ean=EAN),
        ]
        store.find_stock_for_product.side_effect = [
            StockRecord(id=10, product_id=1, quantity=5),
            None,
        ]
        offer_loader = MagicMock()
        offer_loader.find.return_value = OfferEntry(
            ean=EAN, feed_qty=7, shop_qty=5, offer_id="101", name="Train"
        )
        shopping_loader = MagicMock()
        shopping_loader.find.return_value = ShoppingItem(
            ean=EAN, availability="in_stock"
        )
        inspector = EanInspector(store, offer_loader, shopping_loader)
        return inspector, store, offer_loader, shopping_loader

    async def test_collects_all_sources(self) -> None:
        """Store matches, offer and shopping item are all returned."""
        inspector, store, offer_loader, shopping_loader = self._make()

        result = await inspector.inspect(EAN)

        self.assertEqual(len(result.store_matches), 2)
        self.assertEqual(result.store_matches[0].stock.quantity, 5)
        self.assertIsNone(result.store_matches[1].stock)
        self.assertEqual(result.offer.shop_qty, 5)
        self.assertEqual(result.shopping_item.availability, "in_stock")
        store.find_products_by_ean.assert_called_once_with(EAN)
        offer_loader.find.assert_called_once_with(EAN)
        shopping_loader.find.assert_called_once_with(EAN)

    async def test_offer_feed_structure_error_reported(self) -> None:
        """A broken offer feed is reported, the shopping feed still runs."""
        inspector, _store, offer_loader, shopping_loader = self._make()
        offer_loader.find.side_effect = FeedStructureError("no offers/o")

        result = await inspector.inspect(EAN)

        self.assertIsNone(result.offer)
        self.assertIn("no offers/o", result.offer_feed_error)
        shopping_loader.find.assert_called_once_with(EAN)

    async def test_shopping_feed_structure_error_reported(self) -> None:
        """A shopping feed with no item list is reported, not 'not found'."""
        inspector, _store, _offer, shopping_loader = self._make()
        shopping_loader.find.side_effect = FeedStructureError(
            "no rss/channel/item"
        )

        result = await inspector.inspect(EAN)

        self.assertIsNone(result.shopping_item)
        self.assertIn("no rss/channel/item", result.shopping_feed_error)
        self.assertIsNotNone(result.offer)

    async def test_store_error_propagates(self) -> None:
        """Store failures are not swallowed."""
        inspector, store, _offer, _shopping = self._make()
        store.find_products_by_ean.side_effect = ConnectionError("down")

        with self.assertRaises(ConnectionError):
            await inspector.inspect(EAN)


if __name__ == "__main__":
    unittest.main()
