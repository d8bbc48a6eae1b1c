"""Tests for the catalogue store lifecycle: load, hydrate, project, dispose."""

from __future__ import annotations

import asyncio
import unittest

import httpx

from models.item_entry import UNAVAILABLE_DETAIL
from services import listing_service
from services.catalog_store import CatalogStore


class _FakeApi:
    """In-memory stand-in for the listing and detail endpoints."""

    def __init__(self, count: int, *, listing_status: int = 200, failing=(), categories=None) -> None:
        self.count = count
        self.listing_status = listing_status
        self.failing = set(failing)
        self.categories = categories or {}
        self.listing_calls = 0
        self.detail_calls: list[int] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.rstrip("/").endswith("/item"):
            self.listing_calls += 1
            if self.listing_status != 200:
                return httpx.Response(self.listing_status)
            return httpx.Response(
                200,
                json={
                    "count": self.count,
                    "results": [
                        {"name": f"item-{i}", "url": f"https://api.test/item/{i}/"}
                        for i in range(self.count)
                    ],
                },
            )
        index = int(request.url.path.rstrip("/").rsplit("/", 1)[-1])
        self.detail_calls.append(index)
        if index in self.failing:
            return httpx.Response(500)
        return httpx.Response(
            200,
            json={
                "id": index,
                "sprites": {"default": f"https://img.test/{index}.png"},
                "category": {"name": self.categories.get(index, "misc")},
            },
        )

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class CatalogStoreTests(unittest.IsolatedAsyncioTestCase):
    async def test_initial_state_is_loading_and_empty(self) -> None:
        store = CatalogStore(client_factory=_FakeApi(0).client)
        self.assertEqual(store.status, "loading")
        self.assertEqual(store.project().page_items, ())
        self.assertEqual(store.hydration_progress(), (0, 0))

    async def test_bulk_failure_sets_error_and_fetches_no_details(self) -> None:
        api = _FakeApi(10, listing_status=500)
        store = CatalogStore(client_factory=api.client)

        with self.assertLogs("services.catalog_store", level="ERROR"):
            await store.start()

        self.assertEqual(store.status, "error")
        self.assertIn("500", store.error_message)
        self.assertEqual(store.entries, ())
        self.assertEqual(api.listing_calls, 1)
        self.assertEqual(api.detail_calls, [])

    async def test_load_then_hydrate_every_entry(self) -> None:
        api = _FakeApi(150, failing={42}, categories={7: "healing"})
        store = CatalogStore(client_factory=api.client)

        await store.start()

        self.assertEqual(store.status, "ready")
        self.assertIsNone(store.error_message)
        self.assertEqual(len(store.entries), 150)
        self.assertEqual(store.hydration_progress(), (150, 150))
        self.assertIs(store.cache.get("item-42"), UNAVAILABLE_DETAIL)
        self.assertEqual(store.category_options(), ["Unknown", "healing", "misc"])

        view = store.project()
        self.assertEqual(view.total_pages, 2)
        self.assertEqual(len(view.page_items), 100)

    async def test_intents_drive_projection(self) -> None:
        api = _FakeApi(250, categories={7: "healing", 207: "healing"})
        store = CatalogStore(client_factory=api.client)
        await store.start()

        store.on_page_changed(2)
        self.assertEqual(store.project().page_items[0][0].name, "item-200")

        store.on_search_changed("item-7")
        self.assertEqual(store.view_state.current_page, 0)
        names = [e.name for e, _ in store.project().page_items]
        self.assertTrue(all("item-7" in name for name in names))

        store.on_category_changed("healing")
        self.assertEqual([e.name for e, _ in store.project().page_items], ["item-7"])

        store.on_search_changed("")
        self.assertEqual(store.view_state.current_page, 2)
        self.assertEqual(store.project().page_items, ())

        store.on_page_changed(0)
        self.assertEqual([e.name for e, _ in store.project().page_items], ["item-7", "item-207"])

    async def test_listeners_are_notified_and_can_unsubscribe(self) -> None:
        store = CatalogStore(client_factory=_FakeApi(3).client)
        calls: list[str] = []
        unsubscribe = store.subscribe(lambda: calls.append("changed"))

        await store.start()
        # loading, ready, then one per hydrated detail
        self.assertEqual(len(calls), 5)

        unsubscribe()
        store.on_page_changed(1)
        self.assertEqual(len(calls), 5)

    async def test_reload_keeps_cache_and_fetches_only_missing_details(self) -> None:
        api = _FakeApi(5)
        store = CatalogStore(client_factory=api.client)
        await store.start()
        self.assertEqual(sorted(api.detail_calls), [0, 1, 2, 3, 4])

        api.count = 7
        await store.reload()

        self.assertEqual(api.listing_calls, 2)
        self.assertEqual(sorted(api.detail_calls), [0, 1, 2, 3, 4, 5, 6])
        self.assertEqual(store.hydration_progress(), (7, 7))

    async def test_dispose_stops_hydration_writes(self) -> None:
        api = _FakeApi(20)
        store = CatalogStore(client_factory=api.client)

        def on_change() -> None:
            if len(store.cache) >= 3:
                store.dispose()

        store.subscribe(on_change)
        await store.start()

        self.assertTrue(store.is_disposed)
        self.assertLess(len(store.cache), 20)
        self.assertLess(len(api.detail_calls), 20)

    async def test_start_after_dispose_is_a_no_op(self) -> None:
        api = _FakeApi(5)
        store = CatalogStore(client_factory=api.client)
        store.dispose()
        await store.start()
        self.assertEqual(api.listing_calls, 0)


class StalledDetailsTests(unittest.IsolatedAsyncioTestCase):
    """Detail requests that never answer, as on a dead network."""

    def setUp(self) -> None:
        self.started: list[str] = []

    async def _handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.rstrip("/").endswith("/item"):
            return httpx.Response(
                200,
                json={
                    "count": 3,
                    "results": [
                        {"name": f"item-{i}", "url": f"https://api.test/item/{i}/"}
                        for i in range(3)
                    ],
                },
            )
        self.started.append(request.url.path)
        await asyncio.Event().wait()
        return httpx.Response(500)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handler))

    async def _start_until_stalled(self, store: CatalogStore) -> "asyncio.Future[None]":
        run = asyncio.ensure_future(store.start())
        for _ in range(200):
            if len(self.started) == 3:
                break
            await asyncio.sleep(0)
        self.assertEqual(len(self.started), 3)
        return run

    async def test_dispose_from_another_thread_cancels_in_flight_requests(self) -> None:
        store = CatalogStore(client_factory=self._client)
        run = await self._start_until_stalled(store)

        await asyncio.to_thread(store.dispose)
        await asyncio.wait_for(run, timeout=5)

        self.assertIsNone(run.exception())
        self.assertEqual(len(store.cache), 0)
        self.assertEqual(store.status, "ready")

    async def test_cancelling_the_caller_still_propagates(self) -> None:
        store = CatalogStore(client_factory=self._client)
        run = await self._start_until_stalled(store)

        run.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await run
        self.assertFalse(store.is_disposed)


class PageSizeTests(unittest.TestCase):
    def test_page_size_is_fixed_at_one_hundred(self) -> None:
        self.assertEqual(listing_service.PAGE_SIZE, 100)


if __name__ == "__main__":
    unittest.main()
