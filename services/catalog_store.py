"""
services/catalog_store.py – Owned state of the catalogue view.

Holds the listing, the detail cache, the navigation state and the load status,
and runs the load → hydrate lifecycle. The presentation layer subscribes for
change notifications, reads project() to render, and calls the on_* intent
methods. Nothing here depends on Qt.

Threading
---------
start()/reload() may run on a worker thread's event loop; listeners are then
called from that thread. The listing tuple is replaced atomically, the cache
is lock-guarded, and the navigation state is only changed by the intent
methods, which the GUI thread calls.
"""

import asyncio
import logging
import threading
from typing import Callable, List, Literal, Optional, Tuple

import httpx

from models.item_entry import DetailRecord, ListingEntry, ProjectedView
from services import detail_service, listing_service, view_projector
from services.detail_cache import DetailCache
from services.exceptions import BulkLoadError
from services.navigation import NavigationController, ViewState

logger = logging.getLogger(__name__)

# ── Types ────────────────────────────────────────────────────────────────────

LoadStatus = Literal["loading", "ready", "error"]
Listener = Callable[[], None]


class CatalogStore:
    """Single source of truth for the listing, details and view state."""

    def __init__(
        self,
        client_factory: Callable[[], httpx.AsyncClient] = listing_service.make_client,
    ) -> None:
        self._client_factory = client_factory
        self._entries: Tuple[ListingEntry, ...] = ()
        self._cache = DetailCache()
        self._navigation = NavigationController()
        self._status: LoadStatus = "loading"
        self._error: Optional[str] = None
        self._listeners: List[Listener] = []
        self._listeners_lock = threading.Lock()
        self._disposed = False
        self._run_lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional["asyncio.Future[None]"] = None

    # ── Read access ───────────────────────────────────────────────────────────

    @property
    def status(self) -> LoadStatus:
        return self._status

    @property
    def error_message(self) -> Optional[str]:
        return self._error

    @property
    def entries(self) -> Tuple[ListingEntry, ...]:
        return self._entries

    @property
    def cache(self) -> DetailCache:
        return self._cache

    @property
    def view_state(self) -> ViewState:
        return self._navigation.state

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def project(self) -> ProjectedView:
        """Page to render for the current listing, cache and view state."""
        state = self._navigation.state
        return view_projector.project(
            self._entries,
            self._cache.snapshot(),
            state.search_query,
            state.selected_category,
            state.current_page,
        )

    def category_options(self) -> List[str]:
        """Sorted distinct category names among the details fetched so far."""
        return sorted({record.category_name for record in self._cache.snapshot().values()})

    def hydration_progress(self) -> Tuple[int, int]:
        """(entries with a cached detail, entries in the listing)"""
        snapshot = self._cache.snapshot()
        hydrated = sum(1 for entry in self._entries if entry.name in snapshot)
        return hydrated, len(self._entries)

    # ── Subscription ──────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        with self._listeners_lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        if self._disposed:
            return
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener()

    # ── Intents ───────────────────────────────────────────────────────────────

    def on_search_changed(self, query: str) -> None:
        self._navigation.on_search_changed(query)
        self._notify()

    def on_category_changed(self, category: Optional[str]) -> None:
        self._navigation.on_category_changed(category)
        self._notify()

    def on_page_changed(self, page: int) -> None:
        self._navigation.on_page_changed(page)
        self._notify()

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    async def start(self) -> None:
        """
        Load the listing, then hydrate every detail not yet cached.

        A BulkLoadError moves the store to the "error" status and no detail is
        fetched. Per-entry failures never surface here. dispose() cancels a
        running lifecycle, in-flight requests included; start() then returns
        normally.
        """
        with self._run_lock:
            if self._disposed:
                return
            task = asyncio.ensure_future(self._run())
            self._loop = asyncio.get_running_loop()
            self._task = task
        try:
            await task
        except asyncio.CancelledError:
            if not (task.cancelled() and self._disposed):
                raise
        finally:
            with self._run_lock:
                self._loop = None
                self._task = None

    async def _run(self) -> None:
        self._status = "loading"
        self._error = None
        self._notify()

        async with self._client_factory() as client:
            try:
                result = await listing_service.load_listing(client)
            except BulkLoadError as exc:
                logger.error("Item listing failed to load: %s", exc)
                if not self._disposed:
                    self._status = "error"
                    self._error = str(exc)
                    self._notify()
                return

            if self._disposed:
                return
            self._entries = result.entries
            self._status = "ready"
            self._notify()

            await detail_service.hydrate(
                client,
                self._entries,
                self._cache,
                on_inserted=self._on_detail_inserted,
                is_alive=lambda: not self._disposed,
            )

    async def reload(self) -> None:
        """Re-fetch the listing wholesale; cached details are kept."""
        await self.start()

    def dispose(self) -> None:
        """
        Stop all further state writes and notifications.

        Safe to call from any thread: a lifecycle running on another thread's
        event loop is cancelled on that loop.
        """
        with self._run_lock:
            self._disposed = True
            loop, task = self._loop, self._task
        with self._listeners_lock:
            self._listeners.clear()
        if loop is not None and task is not None and not task.done():
            try:
                loop.call_soon_threadsafe(task.cancel)
            except RuntimeError:
                # Loop already closed: the lifecycle has finished.
                logger.debug("Catalogue lifecycle already finished at dispose")

    def _on_detail_inserted(self, name: str, record: DetailRecord) -> None:
        self._notify()
