"""End-to-end workflows across profiles, feeds, swaps, and the ledger."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from skillswap.infrastructure.store import Store
from skillswap.services.feed import FeedService
from skillswap.services.reputation import ReputationService
from skillswap.services.swap import SwapService
from tests.conftest import register_user, request_swap, set_counters


class TestMatchToRating:
    def test_match_swap_complete_rate(self, store: Store) -> None:
        a = register_user(store, "Ann", skills_teach=["python", "guitar"])
        b = register_user(store, "Bob", skills_learn=["python"], skills_teach=["chess"])

        matches = FeedService(store).list_matches(b["id"])
        assert [(u["id"], u["overlap"]) for u in matches.data["items"]] == [(a["id"], 1)]
        own = FeedService(store).list_matches(a["id"])
        assert a["id"] not in [u["id"] for u in own.data["items"]]

        swaps = SwapService(store)
        swap = request_swap(store, b["id"], a["id"], offered="chess", requested="python")
        assert swaps.respond(swap["id"], a["id"], "accept").ok
        done = swaps.complete(swap["id"], b["id"])
        assert done.ok
        assert done.data["status"] == "completed"
        assert store.users.get_counters(a["id"]) == (0.0, 1)
        assert store.users.get_counters(b["id"]) == (0.0, 1)

        set_counters(store, a["id"], rating=4.0, swaps_done=3)
        rated = ReputationService(store).submit_rating(b["id"], a["id"], 5)
        assert rated.ok
        assert rated.data["rating"] == 4.25
        assert store.users.get_counters(a["id"]) == (4.25, 3)

    def test_rated_user_climbs_the_feed(self, store: Store) -> None:
        viewer = register_user(store, "Viewer", skills_learn=["python"])
        first = register_user(store, "First", skills_teach=["python"])
        second = register_user(store, "Second", skills_teach=["python"])
        set_counters(store, second["id"], rating=4.5, swaps_done=2)
        items = FeedService(store).list_matches(viewer["id"]).data["items"]
        assert [u["id"] for u in items] == [second["id"], first["id"]]


class TestConcurrentLifecycle:
    def test_racing_accept_and_reject(self, store: Store) -> None:
        a = register_user(store, "Ann")
        b = register_user(store, "Bob")
        swap = request_swap(store, a["id"], b["id"])
        svc = SwapService(store)
        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(
                pool.map(lambda act: svc.respond(swap["id"], b["id"], act), ["accept", "reject"])
            )
        assert sum(r.ok for r in results) == 1
        assert store.swaps.get(swap["id"])["status"] in ("active", "rejected")

    def test_racing_completions_credit_once(self, store: Store) -> None:
        a = register_user(store, "Ann")
        b = register_user(store, "Bob")
        swap = request_swap(store, a["id"], b["id"])
        svc = SwapService(store)
        assert svc.respond(swap["id"], b["id"], "accept").ok
        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(
                pool.map(lambda actor: svc.complete(swap["id"], actor), [a["id"], b["id"]])
            )
        assert sum(r.ok for r in results) == 1
        assert store.users.get_counters(a["id"]) == (0.0, 1)
        assert store.users.get_counters(b["id"]) == (0.0, 1)

    def test_many_swaps_completing_for_one_user(self, store: Store) -> None:
        hub = register_user(store, "Hub")
        svc = SwapService(store)
        swap_ids = []
        for i in range(10):
            peer = register_user(store, f"Peer {i}")
            swap = request_swap(store, peer["id"], hub["id"])
            assert svc.respond(swap["id"], hub["id"], "accept").ok
            swap_ids.append(swap["id"])

        with ThreadPoolExecutor(max_workers=5) as pool:
            results = list(pool.map(lambda sid: svc.complete(sid, hub["id"]), swap_ids))

        assert all(r.ok for r in results)
        assert store.users.get_counters(hub["id"]) == (0.0, 10)

    def test_settle_after_completion_is_a_no_op(self, store: Store) -> None:
        a = register_user(store, "Ann")
        b = register_user(store, "Bob")
        swap = request_swap(store, a["id"], b["id"])
        svc = SwapService(store)
        assert svc.respond(swap["id"], b["id"], "accept").ok
        assert svc.complete(swap["id"], a["id"]).ok
        for _ in range(3):
            assert svc.settle(swap["id"]).ok
        assert store.users.get_counters(a["id"]) == (0.0, 1)
        assert store.users.get_counters(b["id"]) == (0.0, 1)
