"""
main_window.py – ItemDex main window.

Layout
------
  ┌──────────────────────────────────────────────────────┐
  │  [Search bar]          [Category ▾]       [Reload]   │  ← TOP
  ├──────────────────────────────────────────────────────┤
  │  [‹ Prev]        Page 1 of 21          [Next ›]      │
  │                                                      │
  │  Item list (QListWidget)                             │
  │    – or a full-view loading / error message          │
  ├──────────────────────────────────────────────────────┤
  │  Status log (QPlainTextEdit, read-only)              │  ← BOTTOM
  └──────────────────────────────────────────────────────┘

The window holds no catalogue state of its own: it renders
CatalogStore.project() and forwards user intents to the store.
"""

from __future__ import annotations

import datetime
from typing import Optional

from PySide6.QtCore import Qt, QTimer, Slot
from PySide6.QtGui import QColor, QFont
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QStackedWidget,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from models.item_entry import DetailRecord, ListingEntry
from services.catalog_store import CatalogStore
from workers.catalog_worker import CatalogWorker

# ── Colour palette ─────────────────────────────────────────────────────────────
_BG         = "#0f1117"
_BG2        = "#1a1d27"
_BG3        = "#22263a"
_ACCENT     = "#4f8ef7"
_ACCENT2    = "#7c5af0"
_TEXT       = "#e2e8f0"
_TEXT_DIM   = "#718096"
_SUCCESS    = "#48bb78"
_ERROR      = "#fc8181"
_BORDER     = "#2d3748"

_STYLESHEET = f"""
QMainWindow, QWidget {{
    background-color: {_BG};
    color: {_TEXT};
    font-family: 'Segoe UI', 'Consolas', monospace;
    font-size: 13px;
}}

/* ── Search bar / category dropdown ─────────────────────────────────────── */
QLineEdit#searchBar, QComboBox#categoryBox {{
    background-color: {_BG2};
    border: 1px solid {_BORDER};
    border-radius: 6px;
    padding: 8px 14px;
    font-size: 14px;
    color: {_TEXT};
    selection-background-color: {_ACCENT};
}}
QLineEdit#searchBar:focus, QComboBox#categoryBox:focus {{
    border-color: {_ACCENT};
}}

/* ── Item list ──────────────────────────────────────────────────────────── */
QListWidget#itemList {{
    background-color: {_BG2};
    border: 1px solid {_BORDER};
    border-radius: 6px;
    outline: none;
    padding: 4px;
}}
QListWidget#itemList::item {{
    padding: 8px 12px;
    border-radius: 4px;
}}
QListWidget#itemList::item:selected {{
    background-color: {_ACCENT};
    color: white;
}}
QListWidget#itemList::item:hover {{
    background-color: {_BG3};
}}

/* ── Full-view messages ─────────────────────────────────────────────────── */
QLabel#loader {{
    color: {_TEXT_DIM};
    font-size: 18px;
}}
QLabel#errorMessage {{
    color: {_ERROR};
    font-size: 16px;
}}

/* ── Buttons ────────────────────────────────────────────────────────────── */
QPushButton {{
    background-color: {_BG3};
    border: 1px solid {_BORDER};
    border-radius: 5px;
    padding: 7px 14px;
    color: {_TEXT};
}}
QPushButton:hover {{
    background-color: {_ACCENT};
    border-color: {_ACCENT};
    color: white;
}}
QPushButton:pressed {{
    background-color: {_ACCENT2};
}}
QPushButton:disabled {{
    background: {_BG3};
    color: {_TEXT_DIM};
}}

/* ── Log area ───────────────────────────────────────────────────────────── */
QPlainTextEdit#logArea {{
    background-color: {_BG};
    border: 1px solid {_BORDER};
    border-radius: 6px;
    padding: 6px;
    font-family: 'Consolas', 'Courier New', monospace;
    font-size: 12px;
    color: {_TEXT_DIM};
}}

/* ── Status bar ─────────────────────────────────────────────────────────── */
QStatusBar {{
    background: {_BG2};
    color: {_TEXT_DIM};
    border-top: 1px solid {_BORDER};
    font-size: 11px;
}}
"""

_ALL_CATEGORIES = "All categories"

# Coalesces bursts of detail arrivals into one re-render.
_RENDER_DELAY_MS = 80

# Indices of the central stacked widget.
_PAGE_LOADING = 0
_PAGE_ERROR   = 1
_PAGE_ITEMS   = 2


class MainWindow(QMainWindow):
    """Primary application window."""

    def __init__(self, store: Optional[CatalogStore] = None) -> None:
        super().__init__()
        self.setWindowTitle("ItemDex")
        self.setMinimumSize(860, 640)
        self.resize(1100, 780)
        self.setStyleSheet(_STYLESHEET)

        self._store = store or CatalogStore()
        self._worker: Optional[CatalogWorker] = None
        self._last_status = ""
        self._hydration_logged = False

        self._render_timer = QTimer(self)
        self._render_timer.setSingleShot(True)
        self._render_timer.setInterval(_RENDER_DELAY_MS)

        self._build_ui()
        self._connect_signals()
        self._set_status("Loading item listing…")
        self._start_worker(reload=False)

    # ── UI construction ───────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QWidget()
        self.setCentralWidget(root)
        root_layout = QVBoxLayout(root)
        root_layout.setContentsMargins(24, 24, 24, 16)
        root_layout.setSpacing(16)

        # ── Zone A: Top bar ────────────────────────────────────────────────
        top = QHBoxLayout()
        top.setSpacing(16)

        self._search_bar = QLineEdit()
        self._search_bar.setObjectName("searchBar")
        self._search_bar.setPlaceholderText("Search items by name...")
        self._search_bar.setClearButtonEnabled(True)
        self._search_bar.setMinimumHeight(40)
        self._search_bar.setFont(QFont('Segoe UI', 15))

        self._category_box = QComboBox()
        self._category_box.setObjectName("categoryBox")
        self._category_box.setMinimumHeight(40)
        self._category_box.setMinimumWidth(200)
        self._category_box.addItem(_ALL_CATEGORIES, None)

        self._reload_btn = QPushButton("⟳  Reload")
        self._reload_btn.setFixedHeight(40)
        self._reload_btn.setMinimumWidth(110)

        top.addWidget(self._search_bar, 6)
        top.addWidget(self._category_box, 2)
        top.addWidget(self._reload_btn, 1)
        root_layout.addLayout(top)

        # ── Zone B: Pagination + items ─────────────────────────────────────
        pager = QHBoxLayout()
        self._prev_btn = QPushButton("‹  Prev")
        self._next_btn = QPushButton("Next  ›")
        self._page_label = QLabel("")
        self._page_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        pager.addWidget(self._prev_btn)
        pager.addWidget(self._page_label, 1)
        pager.addWidget(self._next_btn)
        root_layout.addLayout(pager)

        self._stack = QStackedWidget()

        self._loader = QLabel("Loading...")
        self._loader.setObjectName("loader")
        self._loader.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._stack.addWidget(self._loader)

        self._error_label = QLabel("")
        self._error_label.setObjectName("errorMessage")
        self._error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._error_label.setWordWrap(True)
        self._stack.addWidget(self._error_label)

        self._item_list = QListWidget()
        self._item_list.setObjectName("itemList")
        self._item_list.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self._item_list.setStyleSheet("font-size: 15px; font-family: 'Segoe UI';")
        self._stack.addWidget(self._item_list)

        root_layout.addWidget(self._stack, stretch=1)

        # ── Zone C: Status & Monitoring ─────────────────────────────────────
        self._log_area = QPlainTextEdit()
        self._log_area.setObjectName("logArea")
        self._log_area.setReadOnly(True)
        self._log_area.setMaximumBlockCount(500)
        self._log_area.setFixedHeight(120)
        root_layout.addWidget(self._log_area)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)

    # ── Signal wiring ─────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._search_bar.textChanged.connect(self._on_search_changed)
        self._category_box.currentIndexChanged.connect(self._on_category_changed)
        self._reload_btn.clicked.connect(self._on_reload)
        self._prev_btn.clicked.connect(self._on_prev_page)
        self._next_btn.clicked.connect(self._on_next_page)
        self._item_list.itemDoubleClicked.connect(self._on_item_activated)
        self._render_timer.timeout.connect(self._render)

    # ── Slots ─────────────────────────────────────────────────────────────────

    @Slot(str)
    def _on_search_changed(self, text: str) -> None:
        self._store.on_search_changed(text)
        self._render()

    @Slot(int)
    def _on_category_changed(self, index: int) -> None:
        self._store.on_category_changed(self._category_box.itemData(index))
        self._render()

    @Slot()
    def _on_prev_page(self) -> None:
        self._store.on_page_changed(self._store.view_state.current_page - 1)
        self._render()

    @Slot()
    def _on_next_page(self) -> None:
        self._store.on_page_changed(self._store.view_state.current_page + 1)
        self._render()

    @Slot()
    def _on_reload(self) -> None:
        if self._worker is not None and self._worker.isRunning():
            return
        self._log("Reloading item listing…")
        self._hydration_logged = False
        self._start_worker(reload=True)

    @Slot()
    def _on_store_changed(self) -> None:
        if not self._render_timer.isActive():
            self._render_timer.start()

    @Slot(str)
    def _on_worker_error(self, msg: str) -> None:
        self._reload_btn.setEnabled(True)
        self._log(msg, error=True)
        self._set_status("Error – see log.")
        QMessageBox.critical(self, "Error", msg)

    @Slot()
    def _on_worker_finished(self) -> None:
        self._reload_btn.setEnabled(True)
        self._render()

    @Slot(QListWidgetItem)
    def _on_item_activated(self, item: QListWidgetItem) -> None:
        payload = item.data(Qt.ItemDataRole.UserRole)
        if payload is None:
            return
        entry, detail = payload
        self._show_details(entry, detail)

    # ── Rendering ─────────────────────────────────────────────────────────────

    def _render(self) -> None:
        self._render_timer.stop()
        status = self._store.status
        self._log_status_change(status)

        if status == "loading":
            self._stack.setCurrentIndex(_PAGE_LOADING)
            self._set_pager_enabled(False)
            return
        if status == "error":
            self._error_label.setText(f"Error: {self._store.error_message}")
            self._stack.setCurrentIndex(_PAGE_ERROR)
            self._set_pager_enabled(False)
            return

        self._refresh_categories()
        view = self._store.project()
        page = self._store.view_state.current_page

        self._item_list.clear()
        if not view.page_items:
            placeholder = QListWidgetItem("No items found")
            placeholder.setFlags(Qt.ItemFlag.NoItemFlags)
            self._item_list.addItem(placeholder)
        for entry, detail in view.page_items:
            if detail is not None and detail.is_available:
                item = QListWidgetItem(f"{entry.name}    {detail}")
                item.setData(Qt.ItemDataRole.UserRole, (entry, detail))
            else:
                item = QListWidgetItem(f"Details not available for {entry.name}")
                item.setForeground(QColor(_TEXT_DIM))
            self._item_list.addItem(item)
        self._stack.setCurrentIndex(_PAGE_ITEMS)

        self._page_label.setText(
            f"Page {page + 1} of {view.total_pages}" if view.total_pages else "No pages"
        )
        self._prev_btn.setEnabled(page > 0)
        self._next_btn.setEnabled(page + 1 < view.total_pages)

        hydrated, total = self._store.hydration_progress()
        self._set_status(f"{view.match_count} matching items  ·  details {hydrated} / {total}")
        if total and hydrated == total and not self._hydration_logged:
            self._hydration_logged = True
            self._log(f"All {total} item details fetched.", success=True)

    def _refresh_categories(self) -> None:
        options = self._store.category_options()
        current = [self._category_box.itemData(i) for i in range(1, self._category_box.count())]
        if options == current:
            return
        selected = self._store.view_state.selected_category
        self._category_box.blockSignals(True)
        self._category_box.clear()
        self._category_box.addItem(_ALL_CATEGORIES, None)
        for name in options:
            self._category_box.addItem(name, name)
        index = self._category_box.findData(selected) if selected is not None else 0
        self._category_box.setCurrentIndex(max(index, 0))
        self._category_box.blockSignals(False)

    def _show_details(self, entry: ListingEntry, detail: DetailRecord) -> None:
        QMessageBox.information(
            self,
            entry.name,
            f"Name: {entry.name}\n"
            f"Id: {detail.id}\n"
            f"Category: {detail.category_name}\n"
            f"Sprite: {detail.sprite or '–'}",
        )

    # ── UI helpers ────────────────────────────────────────────────────────────

    def _start_worker(self, *, reload: bool) -> None:
        self._reload_btn.setEnabled(False)
        self._worker = CatalogWorker(self._store, reload=reload, parent=self)
        self._worker.changed.connect(self._on_store_changed)
        self._worker.error.connect(self._on_worker_error)
        self._worker.finished.connect(self._on_worker_finished)
        self._worker.start()

    def _log_status_change(self, status: str) -> None:
        if status == self._last_status:
            return
        self._last_status = status
        if status == "loading":
            self._log("Loading item listing…")
            self._set_status("Loading item listing…")
        elif status == "error":
            self._log(f"ERROR: {self._store.error_message}", error=True)
            self._set_status("Item listing failed to load.")
        else:
            self._log(f"Item listing loaded: {len(self._store.entries)} items.")

    def _set_pager_enabled(self, enabled: bool) -> None:
        self._prev_btn.setEnabled(enabled)
        self._next_btn.setEnabled(enabled)
        if not enabled:
            self._page_label.setText("")

    def _set_status(self, msg: str) -> None:
        self._status_bar.showMessage(msg)

    def _log(self, msg: str, *, error: bool = False, success: bool = False) -> None:
        ts = datetime.datetime.now().strftime("%H:%M:%S")
        if error:
            prefix = f'<span style="color:{_ERROR}">[{ts}] ✗  {msg}</span>'
        elif success:
            prefix = f'<span style="color:{_SUCCESS}">[{ts}] ✓  {msg}</span>'
        else:
            prefix = f'<span style="color:{_TEXT_DIM}">[{ts}]  {msg}</span>'
        self._log_area.appendHtml(prefix)
        sb = self._log_area.verticalScrollBar()
        sb.setValue(sb.maximum())

    # ── Teardown ──────────────────────────────────────────────────────────────

    def closeEvent(self, event) -> None:
        self._render_timer.stop()
        # Cancels in-flight requests, so the worker exits promptly.
        self._store.dispose()
        if self._worker is not None and self._worker.isRunning():
            self._worker.wait()
        super().closeEvent(event)
