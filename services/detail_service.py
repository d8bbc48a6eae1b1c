"""
services/detail_service.py – Per-item detail fetching and incremental hydration.

Each listing entry's detail is fetched on its own so the view can render
while details are still arriving. A failure on one entry is logged, replaced
by the unavailable sentinel, and never stops the others.
"""

import asyncio
import logging
from typing import Callable, Iterable, Optional

import httpx

from models.item_entry import UNAVAILABLE_DETAIL, DetailRecord, ListingEntry
from services.detail_cache import DetailCache
from services.exceptions import DetailFetchError

logger = logging.getLogger(__name__)

# ── Configuration ────────────────────────────────────────────────────────────

# Maximum number of detail requests in flight at once.
MAX_CONCURRENT_DETAILS: int = 8

InsertedCallback = Callable[[str, DetailRecord], None]

# ── Public API ───────────────────────────────────────────────────────────────


async def fetch_detail(client: httpx.AsyncClient, entry: ListingEntry) -> DetailRecord:
    """
    Fetch and normalise the detail record of one listing entry.

    Raises
    ------
    DetailFetchError
        On network failure, non-success status or a malformed body.
    """
    try:
        response = await client.get(entry.url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DetailFetchError(
            entry.name,
            f"Failed to fetch details for {entry.name}: "
            f"HTTP {exc.response.status_code}",
        ) from exc
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        raise DetailFetchError(
            entry.name, f"Failed to fetch details for {entry.name}: {exc}"
        ) from exc

    try:
        data = response.json()
    except ValueError as exc:
        raise DetailFetchError(
            entry.name, f"Details for {entry.name} are not valid JSON."
        ) from exc

    return normalize_detail(entry.name, data)


def normalize_detail(name: str, data: object) -> DetailRecord:
    """
    Map a raw detail body onto DetailRecord.

    The category name is read from ``category.name``; when the category object
    wraps another one (``category.category.name``) the inner name is used.
    """
    if not isinstance(data, dict):
        raise DetailFetchError(name, f"Details for {name} are not an object.")

    item_id = data.get("id")
    if not isinstance(item_id, int) or isinstance(item_id, bool):
        raise DetailFetchError(name, f"Details for {name} have no numeric id.")

    sprites = data.get("sprites")
    sprite = sprites.get("default") if isinstance(sprites, dict) else None

    category_name = _category_name(data.get("category"))
    if category_name is None:
        raise DetailFetchError(name, f"Details for {name} have no category name.")

    return DetailRecord(
        id=item_id,
        sprite=sprite if isinstance(sprite, str) else "",
        category_name=category_name,
    )


async def hydrate(
    client: httpx.AsyncClient,
    entries: Iterable[ListingEntry],
    cache: DetailCache,
    *,
    on_inserted: Optional[InsertedCallback] = None,
    is_alive: Callable[[], bool] = lambda: True,
    max_concurrency: int = MAX_CONCURRENT_DETAILS,
) -> int:
    """
    Fetch details for every entry not yet present in *cache*.

    Fetches are dispatched in listing order with at most *max_concurrency*
    in flight; they may complete in any order. Entries already cached
    (including sentinels) are skipped. Once *is_alive* returns False no new
    fetch is started and no result is written.

    Parameters
    ----------
    client          : Async HTTP client.
    entries         : Listing entries, in listing order.
    cache           : Cache to populate.
    on_inserted     : Called with (name, record) after each successful insert.
    is_alive        : Predicate checked before each fetch and each write.
    max_concurrency : Upper bound on simultaneous requests.

    Returns
    -------
    Number of records inserted by this call.
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    inserted = 0

    async def _hydrate_one(entry: ListingEntry) -> None:
        nonlocal inserted
        async with semaphore:
            if not is_alive() or entry.name in cache:
                return
            try:
                record = await fetch_detail(client, entry)
            except DetailFetchError as exc:
                logger.warning("Error fetching details for %s: %s", entry.name, exc)
                record = UNAVAILABLE_DETAIL
        if not is_alive():
            return
        if cache.insert(entry.name, record):
            inserted += 1
            if on_inserted is not None:
                on_inserted(entry.name, record)

    pending = [entry for entry in entries if entry.name not in cache]
    if pending:
        logger.info("Hydrating details for %d entries", len(pending))
        await asyncio.gather(*(_hydrate_one(entry) for entry in pending))
    return inserted


# ── Private helpers ───────────────────────────────────────────────────────────


def _category_name(category: object) -> Optional[str]:
    if not isinstance(category, dict):
        return None
    name = category.get("name")
    if isinstance(name, str):
        return name
    return _category_name(category.get("category"))
