# src/filters/ean_filter.py

"""Narrow the computed change list to an explicit EAN allow-list."""

import logging
from collections.abc import Iterable

from src.models.change import ChangeRecord

logger = logging.getLogger("stock_sync.filters")


class EanAllowList:
    """Keep only changes whose EAN was explicitly allowed."""

    @staticmethod
    def filter(
        changes: list[ChangeRecord],
        allowed_eans: Iterable[str],
    ) -> tuple[list[ChangeRecord], int]:
        """Return the allowed changes and how many were excluded.

        An empty allow-list disables filtering.
        """
        allowed = {e.strip() for e in allowed_eans if e.strip()}
        if not allowed:
            return changes, 0

        kept = [c for c in changes if c.ean in allowed]
        excluded = len(changes) - len(kept)
        logger.info(
            "Allow-list of %d EANs kept %d of %d changes",
            len(allowed),
            len(kept),
            len(changes),
        )
        return kept, excluded
