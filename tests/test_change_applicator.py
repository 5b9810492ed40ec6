# tests/test_change_applicator.py

"""Tests for the bounded, error-isolated change applicator."""

import unittest
from unittest.mock import MagicMock

from src.clients.store_client import StoreRequestError, UpdateOutcome
from src.services.change_applicator import ChangeApplicator
from tests.helpers import change, make_config, stock


def _store() -> MagicMock:
    store = MagicMock()
    store.get_stock_record_raw.side_effect = (
        lambda stock_id: f"<quantity>{stock_id}</quantity>"
    )
    store.update_stock_quantity.return_value = UpdateOutcome.UPDATED
    return store


class TestDryRun(unittest.TestCase):
    """Gate off: nothing is read or written."""

    def test_no_store_calls(self) -> None:
        """Zero reads and writes regardless of list size."""
        store = _store()
        changes = [change(f"E{i}", i) for i in range(1, 30)]
        applicator = ChangeApplicator(
            store, make_config(apply_changes=False)
        )

        report = applicator.apply(changes, stock({i: 5 for i in range(1, 30)}))

        self.assertTrue(report.dry_run)
        self.assertEqual(report.would_change, 29)
        self.assertEqual(report.attempted, 0)
        store.get_stock_record_raw.assert_not_called()
        store.update_stock_quantity.assert_not_called()


class TestApply(unittest.TestCase):
    """Gate on: bounded, ordered, isolated."""

    def test_bounded_to_max_updates(self) -> None:
        """MAX_UPDATES=2 with 5 changes attempts the first 2."""
        store = _store()
        changes = [change(f"E{i}", i, target_qty=i) for i in range(1, 6)]
        applicator = ChangeApplicator(
            store, make_config(apply_changes=True, max_updates=2)
        )

        report = applicator.apply(changes, stock({i: 5 for i in range(1, 6)}))

        self.assertFalse(report.dry_run)
        self.assertEqual(report.attempted, 2)
        self.assertEqual([c.ean for c in report.updated], ["E1", "E2"])
        self.assertEqual(report.overflow, 3)
        self.assertEqual(
            [c.args[0] for c in store.get_stock_record_raw.call_args_list],
            [10, 20],
        )

    def test_read_then_write_with_target(self) -> None:
        """Each change reads its record and writes the target qty."""
        store = _store()
        applicator = ChangeApplicator(
            store, make_config(apply_changes=True)
        )

        applicator.apply([change("E1", 1, target_qty=7)], stock({1: 5}))

        store.get_stock_record_raw.assert_called_once_with(10)
        store.update_stock_quantity.assert_called_once_with(
            10, "<quantity>10</quantity>", 7
        )

    def test_missing_stock_record_skipped(self) -> None:
        """A change without a stock record is skipped, not failed."""
        store = _store()
        applicator = ChangeApplicator(
            store, make_config(apply_changes=True)
        )

        report = applicator.apply(
            [change("E1", 1), change("E2", 2)], stock({2: 5})
        )

        self.assertEqual([c.ean for c in report.skipped_no_stock], ["E1"])
        self.assertEqual([c.ean for c in report.updated], ["E2"])
        self.assertEqual(report.failed, [])

    def test_field_not_found_reported(self) -> None:
        """An unpatchable record is reported as skipped."""
        store = _store()
        store.update_stock_quantity.return_value = (
            UpdateOutcome.SKIPPED_NO_FIELD
        )
        applicator = ChangeApplicator(
            store, make_config(apply_changes=True)
        )

        report = applicator.apply([change("E1", 1)], stock({1: 5}))

        self.assertEqual([c.ean for c in report.skipped_no_field], ["E1"])
        self.assertEqual(report.updated, [])

    def test_errors_isolated_per_change(self) -> None:
        """A failing read or write does not stop the next change."""
        store = _store()
        store.get_stock_record_raw.side_effect = [
            StoreRequestError(404, "not found"),
            "<quantity>5</quantity>",
            "<quantity>5</quantity>",
        ]
        store.update_stock_quantity.side_effect = [
            ConnectionError("reset by peer"),
            UpdateOutcome.UPDATED,
        ]
        applicator = ChangeApplicator(
            store, make_config(apply_changes=True)
        )

        report = applicator.apply(
            [change("E1", 1), change("E2", 2), change("E3", 3)],
            stock({1: 5, 2: 5, 3: 5}),
        )

        self.assertEqual(report.attempted, 3)
        self.assertEqual([c.ean for c, _ in report.failed], ["E1", "E2"])
        self.assertIn("404", report.failed[0][1])
        self.assertEqual([c.ean for c in report.updated], ["E3"])

    def test_no_overflow_when_within_limit(self) -> None:
        """Overflow is zero when every change fits."""
        applicator = ChangeApplicator(
            _store(), make_config(apply_changes=True, max_updates=10)
        )

        report = applicator.apply([change("E1", 1)], stock({1: 5}))

        self.assertEqual(report.overflow, 0)


if __name__ == "__main__":
    unittest.main()
