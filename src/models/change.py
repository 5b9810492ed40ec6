# src/models/change.py

"""Reconciliation output: per-product decisions and required changes."""

from dataclasses import dataclass
from enum import Enum


class StockSource(str, Enum):
    """Which data source decided a product's target quantity."""

    OFFER_FEED = "offer_feed"
    SHOPPING_FEED = "shopping_feed"
    NONE = "none"


@dataclass(frozen=True)
class ProductDecision:
    """Target quantity computed for one catalog product."""

    ean: str
    product_id: int
    current_qty: int | None
    target_qty: int
    source: StockSource


@dataclass(frozen=True)
class ChangeRecord:
    """A product whose stored quantity differs from its target."""

    ean: str
    product_id: int
    current_qty: int
    target_qty: int
    source: StockSource


@dataclass(frozen=True)
class OrphanOffer:
    """An offer feed EAN that matches no catalog product."""

    ean: str
    feed_qty: int
    shop_qty: int
