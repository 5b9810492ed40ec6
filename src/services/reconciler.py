# src/services/reconciler.py

"""Joins catalog, stock and both feeds on EAN and computes changes."""

import logging
from dataclasses import dataclass, field

from src.config.settings import Settings
from src.models.change import (
    ChangeRecord,
    OrphanOffer,
    ProductDecision,
    StockSource,
)
from src.models.feed_entry import OfferFeedIndex, ShoppingFeedIndex
from src.models.product import ProductIndex, StockRecord

logger = logging.getLogger("stock_sync.reconciler")


@dataclass
class ReconciliationResult:
    """Everything one reconciliation pass produces."""

    changes: list[ChangeRecord] = field(
        default_factory=lambda: list[ChangeRecord]()
    )
    decisions: list[ProductDecision] = field(
        default_factory=lambda: list[ProductDecision]()
    )
    not_in_offer_feed: list[ProductDecision] = field(
        default_factory=lambda: list[ProductDecision]()
    )
    from_shopping_feed: list[ProductDecision] = field(
        default_factory=lambda: list[ProductDecision]()
    )
    no_source: list[ProductDecision] = field(
        default_factory=lambda: list[ProductDecision]()
    )
    orphan_offers: list[OrphanOffer] = field(
        default_factory=lambda: list[OrphanOffer]()
    )
    used_offer_feed: int = 0
    used_shopping_feed: int = 0
    used_none: int = 0


def decide_target(
    ean: str,
    offers: OfferFeedIndex,
    shopping: ShoppingFeedIndex,
    fallback_qty: int,
) -> tuple[int, StockSource]:
    """Target quantity for *ean* by strict source priority.

    1. Offer feed entry → its shop quantity.
    2. Shopping feed entry → *fallback_qty* when ``in_stock``, else 0.
    3. Neither → 0.
    """
    offer = offers.by_ean.get(ean)
    if offer is not None:
        return offer.shop_qty, StockSource.OFFER_FEED

    item = shopping.by_ean.get(ean)
    if item is not None:
        if item.availability == Settings.IN_STOCK_VALUE:
            return fallback_qty, StockSource.SHOPPING_FEED
        return 0, StockSource.SHOPPING_FEED

    return 0, StockSource.NONE


def reconcile(
    products: ProductIndex,
    stock: dict[int, StockRecord],
    offers: OfferFeedIndex,
    shopping: ShoppingFeedIndex,
    fallback_qty: int = Settings.DEFAULT_FALLBACK_QTY,
) -> ReconciliationResult:
    """Compute a decision per catalog EAN and the resulting change list.

    A change is recorded only when the product has a stock record and
    its quantity differs from the target.  The buckets and counters
    are informational and never alter the change list.
    """
    result = ReconciliationResult()

    for ean, product_id in products.by_ean.items():
        record = stock.get(product_id)
        current_qty = record.quantity if record is not None else None
        target_qty, source = decide_target(
            ean, offers, shopping, fallback_qty
        )
        decision = ProductDecision(
            ean=ean,
            product_id=product_id,
            current_qty=current_qty,
            target_qty=target_qty,
            source=source,
        )
        result.decisions.append(decision)

        if source is StockSource.OFFER_FEED:
            result.used_offer_feed += 1
        else:
            result.not_in_offer_feed.append(decision)
            if source is StockSource.SHOPPING_FEED:
                result.used_shopping_feed += 1
                result.from_shopping_feed.append(decision)
            else:
                result.used_none += 1
                result.no_source.append(decision)

        if current_qty is None:
            continue
        if current_qty != target_qty:
            result.changes.append(
                ChangeRecord(
                    ean=ean,
                    product_id=product_id,
                    current_qty=current_qty,
                    target_qty=target_qty,
                    source=source,
                )
            )

    for ean, offer in offers.by_ean.items():
        if ean not in products.by_ean:
            result.orphan_offers.append(
                OrphanOffer(
                    ean=ean,
                    feed_qty=offer.feed_qty,
                    shop_qty=offer.shop_qty,
                )
            )

    logger.info(
        "Reconciled %d products: %d changes (offer=%d shopping=%d none=%d), "
        "%d orphan offers",
        len(result.decisions),
        len(result.changes),
        result.used_offer_feed,
        result.used_shopping_feed,
        result.used_none,
        len(result.orphan_offers),
    )
    return result
