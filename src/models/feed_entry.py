# src/models/feed_entry.py

"""Feed-side records keyed by EAN."""

from dataclasses import dataclass, field


@dataclass
class OfferEntry:
    """One offer from the offer feed (marketplace A)."""

    ean: str
    feed_qty: int
    shop_qty: int
    offer_id: str = ""
    name: str = ""


@dataclass
class ShoppingItem:
    """One item from the shopping feed (marketplace B)."""

    ean: str
    availability: str = ""
    price: str = ""
    title: str = ""
    link: str = ""


@dataclass
class OfferFeedIndex:
    """Offer feed entries by EAN; the last offer for an EAN wins."""

    by_ean: dict[str, OfferEntry] = field(
        default_factory=lambda: dict[str, OfferEntry]()
    )
    duplicated_eans: set[str] = field(
        default_factory=lambda: set[str]()
    )
    total_offers: int = 0


@dataclass
class ShoppingFeedIndex:
    """Shopping feed items by EAN; the last item for an EAN wins."""

    by_ean: dict[str, ShoppingItem] = field(
        default_factory=lambda: dict[str, ShoppingItem]()
    )
    total_items: int = 0
