"""Tests for the filtered, paginated catalogue projection."""

from __future__ import annotations

import unittest

from models.item_entry import UNAVAILABLE_DETAIL, DetailRecord, ListingEntry
from services.view_projector import matches, project


def _entries(count: int, prefix: str = "item") -> list[ListingEntry]:
    return [ListingEntry(f"{prefix}-{i}", f"https://api.test/item/{i}/") for i in range(count)]


def _details(entries, category: str = "misc") -> dict:
    return {e.name: DetailRecord(id=i, sprite="", category_name=category) for i, e in enumerate(entries)}


class MatchesTests(unittest.TestCase):
    def test_search_is_case_insensitive_substring(self) -> None:
        entry = ListingEntry("Master-Ball", "u")
        self.assertTrue(matches(entry, None, "ball", None))
        self.assertTrue(matches(entry, None, "TER-B", None))
        self.assertFalse(matches(entry, None, "potion", None))

    def test_absent_detail_never_matches_category(self) -> None:
        entry = ListingEntry("potion", "u")
        self.assertFalse(matches(entry, None, "", "healing"))
        self.assertTrue(matches(entry, None, "", None))

    def test_sentinel_matches_only_unknown(self) -> None:
        entry = ListingEntry("potion", "u")
        self.assertTrue(matches(entry, UNAVAILABLE_DETAIL, "", "Unknown"))
        self.assertFalse(matches(entry, UNAVAILABLE_DETAIL, "", "healing"))


class ProjectTests(unittest.TestCase):
    def test_total_pages_boundaries(self) -> None:
        for count, pages in ((0, 0), (1, 1), (100, 1), (101, 2), (250, 3)):
            with self.subTest(count=count):
                view = project(_entries(count), {}, "", None, 0)
                self.assertEqual(view.total_pages, pages)
                self.assertEqual(view.match_count, count)

    def test_slices_page_in_listing_order(self) -> None:
        entries = _entries(250)
        view = project(entries, {}, "", None, 2)
        self.assertEqual([e.name for e, _ in view.page_items], [f"item-{i}" for i in range(200, 250)])

        view = project(entries, {}, "", None, 1)
        self.assertEqual(len(view.page_items), 100)
        self.assertEqual(view.page_items[0][0].name, "item-100")

    def test_out_of_range_page_is_empty(self) -> None:
        entries = _entries(50)
        self.assertEqual(project(entries, {}, "", None, 1).page_items, ())
        self.assertEqual(project(entries, {}, "", None, -1).page_items, ())
        self.assertEqual(project(entries, {}, "", None, 7).total_pages, 1)

    def test_pairs_entries_with_cached_detail(self) -> None:
        entries = _entries(3)
        details = {"item-1": DetailRecord(1, "s.png", "misc")}
        view = project(entries, details, "", None, 0)
        self.assertEqual([d for _, d in view.page_items], [None, details["item-1"], None])

    def test_every_projected_entry_matches_query(self) -> None:
        entries = _entries(150, "poke-ball") + _entries(150, "potion")
        view = project(entries, {}, "BALL", None, 0)
        self.assertEqual(view.match_count, 150)
        self.assertEqual(view.total_pages, 2)
        self.assertTrue(all("ball" in e.name.lower() for e, _ in view.page_items))

    def test_category_filter_drops_unhydrated_entries(self) -> None:
        entries = _entries(10)
        details = _details(entries[:4], "healing")
        view = project(entries, details, "", "healing", 0)
        self.assertEqual([e.name for e, _ in view.page_items], ["item-0", "item-1", "item-2", "item-3"])
        self.assertTrue(all(d is not None and d.category_name == "healing" for _, d in view.page_items))

    def test_failed_entry_counts_only_under_unknown(self) -> None:
        entries = _entries(100)
        details = _details(entries, "misc")
        details["item-42"] = UNAVAILABLE_DETAIL

        all_view = project(entries, details, "", None, 0)
        self.assertEqual(all_view.match_count, 100)

        misc_view = project(entries, details, "", "misc", 0)
        self.assertEqual(misc_view.match_count, 99)
        self.assertNotIn("item-42", [e.name for e, _ in misc_view.page_items])

        unknown_view = project(entries, details, "", "Unknown", 0)
        self.assertEqual([e.name for e, _ in unknown_view.page_items], ["item-42"])
        self.assertEqual(unknown_view.total_pages, 1)

    def test_inputs_are_not_mutated(self) -> None:
        entries = _entries(5)
        details = _details(entries)
        before = (list(entries), dict(details))
        project(entries, details, "item", "misc", 0)
        self.assertEqual((entries, details), before)


if __name__ == "__main__":
    unittest.main()
