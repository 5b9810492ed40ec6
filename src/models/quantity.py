# src/models/quantity.py

"""Quantity coercion shared by the store client and the feeds."""

import math

from src.config.settings import Settings


def to_int(value: object) -> int:
    """Coerce a raw quantity to a non-negative integer.

    Anything that is not a finite number (``None``, ``""``, ``"abc"``)
    normalises to 0.  Fractional values are truncated.
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return max(int(number), 0)


def shop_quantity(feed_qty: int) -> int:
    """Quantity to publish in the store for a given offer feed count."""
    return max(feed_qty - Settings.OFFER_SAFETY_MARGIN, 0)
