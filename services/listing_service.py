"""
services/listing_service.py – Bulk download of the full item listing.

One request retrieves the whole catalogue; there is no paging against the
server. Failures are fatal for the view and are never retried automatically.
"""

import logging
import math
import os
from typing import List

import httpx

from models.item_entry import ListingEntry, ListingResult
from services.exceptions import BulkLoadError

logger = logging.getLogger(__name__)

# ── Configuration ────────────────────────────────────────────────────────────

# REST API root; override with ITEMDEX_API_URL to point at a mirror.
API_BASE_URL: str = os.environ.get("ITEMDEX_API_URL", "https://pokeapi.co/api/v2").rstrip("/")

# Upper bound large enough to return the entire dataset in one call.
LISTING_LIMIT: int = 100000

# Items shown per page.
PAGE_SIZE: int = 100

# HTTP timeout (seconds)
HTTP_TIMEOUT: float = 30.0

# ── Public API ───────────────────────────────────────────────────────────────


def listing_url() -> str:
    return f"{API_BASE_URL}/item"


def page_count(item_count: int) -> int:
    """Number of PAGE_SIZE pages needed for *item_count* items (0 for none)."""
    if item_count <= 0:
        return 0
    return math.ceil(item_count / PAGE_SIZE)


def make_client() -> httpx.AsyncClient:
    """Build the shared async client used for the listing and detail calls."""
    return httpx.AsyncClient(timeout=HTTP_TIMEOUT, follow_redirects=True)


async def load_listing(client: httpx.AsyncClient) -> ListingResult:
    """
    Download and parse the full item listing.

    Parameters
    ----------
    client : Async HTTP client used for the request.

    Returns
    -------
    ListingResult
        Entries in server order, the server's item count and the page count.

    Raises
    ------
    BulkLoadError
        On any network failure, non-success status or unparseable body.
    """
    logger.info("Fetching item listing from %s", listing_url())
    try:
        response = await client.get(
            listing_url(), params={"offset": 0, "limit": LISTING_LIMIT}
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise BulkLoadError(
            f"Item listing server returned HTTP {exc.response.status_code}."
        ) from exc
    except httpx.RequestError as exc:
        raise BulkLoadError(f"Network error while fetching item listing: {exc}") from exc
    except httpx.InvalidURL as exc:
        raise BulkLoadError(f"Item listing URL is invalid: {exc}") from exc

    try:
        data = response.json()
    except ValueError as exc:
        raise BulkLoadError("Item listing response is not valid JSON.") from exc

    entries = _parse_results(data)
    count = data.get("count")
    if not isinstance(count, int) or isinstance(count, bool):
        count = len(entries)

    logger.info("Item listing loaded: %d entries (server count %d)", len(entries), count)
    return ListingResult(
        entries=tuple(entries),
        total_count=count,
        total_pages=page_count(count),
    )


# ── Private helpers ───────────────────────────────────────────────────────────


def _parse_results(data: object) -> List[ListingEntry]:
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise BulkLoadError(
            "Item listing was retrieved but has no 'results' array. "
            "The API format may have changed."
        )

    entries: List[ListingEntry] = []
    for raw in data["results"]:
        if not isinstance(raw, dict):
            raise BulkLoadError("Item listing contains a malformed entry.")
        name = raw.get("name")
        url = raw.get("url")
        if not isinstance(name, str) or not isinstance(url, str) or not name:
            raise BulkLoadError(f"Item listing entry is missing a name or url: {raw!r}")
        entries.append(ListingEntry(name=name, url=url))
    return entries
