"""
services/view_projector.py – Filtered, paginated view over the catalogue.

Pure functions: nothing here mutates its inputs or touches the network, so the
projection can be recomputed on every state change.
"""

from typing import Mapping, Optional, Sequence

from models.item_entry import DetailRecord, ListingEntry, ProjectedView
from services.listing_service import PAGE_SIZE, page_count


def matches(
    entry: ListingEntry,
    detail: Optional[DetailRecord],
    search_query: str,
    selected_category: Optional[str],
) -> bool:
    """
    True when *entry* passes both the search and the category filter.

    An entry without a cached detail never matches a category filter.
    """
    if search_query.lower() not in entry.name.lower():
        return False
    if selected_category is None:
        return True
    return detail is not None and detail.category_name == selected_category


def project(
    entries: Sequence[ListingEntry],
    details: Mapping[str, DetailRecord],
    search_query: str,
    selected_category: Optional[str],
    current_page: int,
) -> ProjectedView:
    """
    Compute the page to render.

    Parameters
    ----------
    entries           : Full listing, in listing order.
    details           : Snapshot of the detail cache.
    search_query      : Case-insensitive substring matched against names.
    selected_category : Exact category name, or None for all categories.
    current_page      : Zero-based page index; out of range gives an empty page.

    Returns
    -------
    ProjectedView with the page's (entry, detail) pairs and the page count of
    the filtered listing.
    """
    filtered = [
        entry
        for entry in entries
        if matches(entry, details.get(entry.name), search_query, selected_category)
    ]

    page_items = ()
    if current_page >= 0:
        offset = current_page * PAGE_SIZE
        page_items = tuple(
            (entry, details.get(entry.name))
            for entry in filtered[offset:offset + PAGE_SIZE]
        )

    return ProjectedView(
        page_items=page_items,
        total_pages=page_count(len(filtered)),
        match_count=len(filtered),
    )
