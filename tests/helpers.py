# tests/helpers.py

"""Builders and fake responses shared by the test modules."""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

from src.config.settings import SyncConfig
from src.models.change import ChangeRecord, StockSource
from src.models.feed_entry import (
    OfferEntry,
    OfferFeedIndex,
    ShoppingFeedIndex,
    ShoppingItem,
)
from src.models.product import ProductIndex, StockRecord
from src.models.quantity import shop_quantity

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    """Return the text of a file in tests/fixtures."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def make_config(**overrides: Any) -> SyncConfig:
    """A fully populated config for tests."""
    values: dict[str, Any] = {
        "store_url": "https://shop.example.com",
        "api_key": "KEY123",
        "offer_feed_url": "https://feeds.example.com/offers.xml",
        "shopping_feed_url": "https://feeds.example.com/google.xml",
    }
    values.update(overrides)
    return SyncConfig(**values)


def make_response(
    status_code: int = 200,
    text: str = "",
    json_data: Any = None,
) -> MagicMock:
    """A mock HTTP response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.json.return_value = json_data
    return resp


def products(by_ean: dict[str, int]) -> ProductIndex:
    """ProductIndex from an EAN → product id mapping."""
    return ProductIndex(by_ean=dict(by_ean), total=len(by_ean))


def stock(quantities: dict[int, int]) -> dict[int, StockRecord]:
    """Stock table from a product id → quantity mapping.

    Stock record ids are the product id times ten.
    """
    return {
        pid: StockRecord(id=pid * 10, product_id=pid, quantity=qty)
        for pid, qty in quantities.items()
    }


def offers(feed_qtys: dict[str, int]) -> OfferFeedIndex:
    """Offer feed index from an EAN → raw feed stock mapping."""
    return OfferFeedIndex(
        by_ean={
            ean: OfferEntry(
                ean=ean, feed_qty=qty, shop_qty=shop_quantity(qty)
            )
            for ean, qty in feed_qtys.items()
        },
        total_offers=len(feed_qtys),
    )


def shopping(availability: dict[str, str]) -> ShoppingFeedIndex:
    """Shopping feed index from an EAN → availability mapping."""
    return ShoppingFeedIndex(
        by_ean={
            ean: ShoppingItem(ean=ean, availability=value)
            for ean, value in availability.items()
        },
        total_items=len(availability),
    )


def change(
    ean: str,
    product_id: int,
    current_qty: int = 5,
    target_qty: int = 0,
    source: StockSource = StockSource.OFFER_FEED,
) -> ChangeRecord:
    """A ChangeRecord with sensible defaults."""
    return ChangeRecord(
        ean=ean,
        product_id=product_id,
        current_qty=current_qty,
        target_qty=target_qty,
        source=source,
    )
