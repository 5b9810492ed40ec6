# tests/test_ean_filter.py

"""Tests for the EAN allow-list filter."""

import unittest

from src.filters.ean_filter import EanAllowList
from tests.helpers import change


class TestEanAllowList(unittest.TestCase):
    """EanAllowList.filter behaviour."""

    def setUp(self) -> None:
        self.changes = [change("A", 1), change("B", 2), change("C", 3)]

    def test_empty_allow_list_keeps_all(self) -> None:
        """No allow-list disables filtering."""
        kept, excluded = EanAllowList.filter(self.changes, ())
        self.assertIs(kept, self.changes)
        self.assertEqual(excluded, 0)

    def test_intersection_in_list_order(self) -> None:
        """Kept changes are the intersection, in change-list order."""
        kept, excluded = EanAllowList.filter(self.changes, ("C", "A", "Z"))
        self.assertEqual([c.ean for c in kept], ["A", "C"])
        self.assertEqual(excluded, 1)

    def test_allow_list_trimmed(self) -> None:
        """Whitespace around allowed EANs is ignored."""
        kept, _ = EanAllowList.filter(self.changes, (" B ",))
        self.assertEqual([c.ean for c in kept], ["B"])


if __name__ == "__main__":
    unittest.main()
