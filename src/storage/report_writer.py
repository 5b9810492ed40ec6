# src/storage/report_writer.py

"""Saves the outcome of a run to a timestamped JSON file."""

import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.models.change import ChangeRecord
from src.services.change_applicator import ApplyReport
from src.services.reconciler import ReconciliationResult

logger = logging.getLogger("stock_sync.storage")


def _change_to_dict(change: ChangeRecord) -> dict[str, Any]:
    data = asdict(change)
    data["source"] = change.source.value
    return data


class ReportWriter:
    """Writes run reports under ``reports/``."""

    def __init__(self, reports_dir: Path | None = None) -> None:
        self.reports_dir: Path = reports_dir or Settings.REPORTS_DIR
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("ReportWriter initialised, reports_dir=%s", self.reports_dir)

    def save(
        self,
        result: ReconciliationResult,
        final_changes: list[ChangeRecord],
        apply_report: ApplyReport,
    ) -> Path:
        """Write summary counters, the final change list and apply outcome."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.reports_dir / f"changes_{timestamp}.json"

        data = {
            "generated_at": datetime.now().isoformat(timespec="seconds"),
            "summary": {
                "products": len(result.decisions),
                "changes": len(result.changes),
                "final_changes": len(final_changes),
                "not_in_offer_feed": len(result.not_in_offer_feed),
                "used_offer_feed": result.used_offer_feed,
                "used_shopping_feed": result.used_shopping_feed,
                "used_none": result.used_none,
                "orphan_offers": len(result.orphan_offers),
            },
            "changes": [_change_to_dict(c) for c in final_changes],
            "apply": {
                "dry_run": apply_report.dry_run,
                "attempted": apply_report.attempted,
                "updated": [c.ean for c in apply_report.updated],
                "skipped_no_stock": [
                    c.ean for c in apply_report.skipped_no_stock
                ],
                "skipped_no_field": [
                    c.ean for c in apply_report.skipped_no_field
                ],
                "failed": [
                    {"ean": c.ean, "error": err}
                    for c, err in apply_report.failed
                ],
                "overflow": apply_report.overflow,
            },
        }

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info(
            "Saved report with %d changes to %s",
            len(final_changes),
            filepath,
        )
        return filepath
