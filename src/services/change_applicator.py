# src/services/change_applicator.py

"""Writes a bounded number of computed changes back to the store."""

import logging
from dataclasses import dataclass, field

from src.clients.store_client import StoreClient, UpdateOutcome
from src.config.settings import SyncConfig
from src.models.change import ChangeRecord
from src.models.product import StockRecord

logger = logging.getLogger("stock_sync.apply")


@dataclass
class ApplyReport:
    """Outcome of one apply phase."""

    dry_run: bool
    would_change: int = 0
    attempted: int = 0
    updated: list[ChangeRecord] = field(
        default_factory=lambda: list[ChangeRecord]()
    )
    skipped_no_stock: list[ChangeRecord] = field(
        default_factory=lambda: list[ChangeRecord]()
    )
    skipped_no_field: list[ChangeRecord] = field(
        default_factory=lambda: list[ChangeRecord]()
    )
    failed: list[tuple[ChangeRecord, str]] = field(
        default_factory=lambda: list[tuple[ChangeRecord, str]]()
    )
    overflow: int = 0


def _status_of(exc: Exception) -> int | None:
    """HTTP status carried by a store or transport error, if any."""
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(getattr(exc, "response", None), "status_code", None)
    return status


class ChangeApplicator:
    """Applies changes one read-patch-write round trip at a time.

    Nothing is written unless the config's apply gate is on.  At most
    ``max_updates`` changes are attempted, in list order, and a failure
    on one change never stops the next.
    """

    def __init__(self, store: StoreClient, config: SyncConfig) -> None:
        self.store = store
        self.apply_changes = config.apply_changes
        self.max_updates = max(config.max_updates, 0)

    def _apply_one(
        self,
        change: ChangeRecord,
        stock: dict[int, StockRecord],
        report: ApplyReport,
    ) -> None:
        record = stock.get(change.product_id)
        if record is None:
            logger.info(
                "Skipping product %d (EAN %s): no stock record",
                change.product_id,
                change.ean,
            )
            report.skipped_no_stock.append(change)
            return

        report.attempted += 1
        try:
            raw = self.store.get_stock_record_raw(record.id)
            outcome = self.store.update_stock_quantity(
                record.id, raw, change.target_qty
            )
        except Exception as exc:
            logger.error(
                "Update failed for stock %d (product %d): %s %s",
                record.id,
                change.product_id,
                _status_of(exc) or "",
                exc,
                exc_info=True,
            )
            report.failed.append((change, str(exc)))
            return

        if outcome is UpdateOutcome.SKIPPED_NO_FIELD:
            logger.warning(
                "Skipping stock %d (product %d): quantity field not found",
                record.id,
                change.product_id,
            )
            report.skipped_no_field.append(change)
            return

        logger.info(
            "Updated product %d (EAN %s) qty %d -> %d",
            change.product_id,
            change.ean,
            change.current_qty,
            change.target_qty,
        )
        report.updated.append(change)

    def apply(
        self,
        changes: list[ChangeRecord],
        stock: dict[int, StockRecord],
    ) -> ApplyReport:
        """Apply (or, in dry-run mode, only count) *changes*."""
        if not self.apply_changes:
            logger.info(
                "Dry-run: %d changes would be applied", len(changes)
            )
            return ApplyReport(dry_run=True, would_change=len(changes))

        report = ApplyReport(dry_run=False, would_change=len(changes))
        for change in changes[: self.max_updates]:
            self._apply_one(change, stock, report)

        report.overflow = max(len(changes) - self.max_updates, 0)
        if report.overflow:
            logger.warning(
                "%d changes computed, only the first %d applied",
                len(changes),
                self.max_updates,
            )
        return report
