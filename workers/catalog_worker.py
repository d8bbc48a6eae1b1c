"""
workers/catalog_worker.py – Background QThread that runs the catalogue
load → hydrate lifecycle on its own asyncio event loop.

Signal contract
---------------
  changed()     : Store state changed (listing, details, status) — re-render
  error(str)    : User-friendly message when the lifecycle itself crashes

Store notifications arrive on the worker thread; emitting a signal hands them
to the GUI thread through Qt's queued connections.
"""

import asyncio
import logging

from PySide6.QtCore import QThread, Signal

from services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


class CatalogWorker(QThread):
    """
    Loads the catalogue for *store* on a background thread.

    Instantiate, connect signals, then call start(). Pass reload=True to
    re-fetch the listing of an already-loaded store.
    """

    # ── Signals ───────────────────────────────────────────────────────────────
    changed = Signal()
    error   = Signal(str)

    def __init__(self, store: CatalogStore, *, reload: bool = False, parent=None) -> None:
        super().__init__(parent)
        self._store  = store
        self._reload = reload

    # ── QThread entry point ───────────────────────────────────────────────────

    def run(self) -> None:
        unsubscribe = self._store.subscribe(self.changed.emit)
        try:
            if self._reload:
                asyncio.run(self._store.reload())
            else:
                asyncio.run(self._store.start())
        except Exception as exc:  # noqa: BLE001
            # Catch-all so the worker thread never silently dies.
            logger.exception("Catalogue worker crashed")
            self.error.emit(f"Unexpected error:\n{type(exc).__name__}: {exc}")
        finally:
            unsubscribe()
