"""
models/item_entry.py – Immutable data models for catalogue listing entries,
their detail records, and the projected page handed to the view.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ListingEntry:
    """
    Represents one item in the bulk catalogue listing.

    Attributes
    ----------
    name : Unique item name within the listing (e.g. "master-ball").
    url  : Absolute URL of the item's detail record.
    """

    name: str
    url: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class DetailRecord:
    """
    Normalised per-item detail fetched after the listing loads.

    Attributes
    ----------
    id            : Numeric item id; -1 marks the "unavailable" sentinel.
    sprite        : URL of the item's display sprite ("" when missing).
    category_name : Name of the item's category (e.g. "standard-balls").
    """

    id: int
    sprite: str
    category_name: str

    @property
    def is_available(self) -> bool:
        return self.id != -1

    def __str__(self) -> str:
        return f"#{self.id}  [{self.category_name}]"


# Stored in place of a detail record whose fetch failed.
UNAVAILABLE_DETAIL = DetailRecord(id=-1, sprite="", category_name="Unknown")


@dataclass(frozen=True)
class ListingResult:
    """
    Outcome of a successful bulk listing load.

    Attributes
    ----------
    entries     : Full listing, in server order.
    total_count : Item count reported by the server.
    total_pages : Page count derived from total_count.
    """

    entries: Tuple[ListingEntry, ...]
    total_count: int
    total_pages: int


PageItem = Tuple[ListingEntry, Optional[DetailRecord]]


@dataclass(frozen=True)
class ProjectedView:
    """
    One rendered page of the filtered catalogue.

    Attributes
    ----------
    page_items  : (entry, detail) pairs; detail is None while not yet fetched.
    total_pages : Page count of the filtered catalogue.
    match_count : Number of entries passing the active filters.
    """

    page_items: Tuple[PageItem, ...] = ()
    total_pages: int = 0
    match_count: int = 0
