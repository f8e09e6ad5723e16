import threading
import time

import pytest

from crypto_dashboard.backend.models import MarketDataError
from crypto_dashboard.backend.polling import MarketFeed, QueryClient, RefreshScheduler, ScheduledTask


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FakeMarketClient:
    def __init__(self) -> None:
        self.calls = []

    def fetch_quotes(self, asset_ids):
        self.calls.append(("quotes", tuple(asset_ids)))
        return [f"quote-{len(self.calls)}"]

    def fetch_history(self, asset_id, days):
        self.calls.append(("history", asset_id, days))
        return [asset_id, days]

    def fetch_news(self):
        self.calls.append(("news",))
        return ["news"]


def test_fetch_retries_once_then_succeeds():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise MarketDataError("temporary")
        return "ok"

    assert QueryClient().fetch("k", flaky) == "ok"
    assert len(attempts) == 2


def test_fetch_surfaces_failure_after_one_retry():
    attempts = []

    def broken():
        attempts.append(1)
        raise MarketDataError("down")

    client = QueryClient()
    with pytest.raises(MarketDataError):
        client.fetch("k", broken)
    assert len(attempts) == 2
    assert client.age("k") is None


def test_fetch_without_retry():
    attempts = []

    def broken():
        attempts.append(1)
        raise MarketDataError("down")

    with pytest.raises(MarketDataError):
        QueryClient(retry=0).fetch("k", broken)
    assert len(attempts) == 1


def test_identical_in_flight_requests_are_shared():
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow():
        calls.append(1)
        started.set()
        release.wait(5)
        return "shared"

    client = QueryClient()
    results = []
    first = threading.Thread(target=lambda: results.append(client.fetch(("quotes",), slow)))
    first.start()
    assert started.wait(5)

    second = threading.Thread(target=lambda: results.append(client.fetch(("quotes",), slow)))
    second.start()
    second.join(0.3)
    assert len(calls) == 1

    release.set()
    first.join(5)
    second.join(5)
    assert results == ["shared", "shared"]
    assert len(calls) == 1


def test_waiters_see_the_owner_failure():
    started = threading.Event()
    release = threading.Event()

    def failing():
        started.set()
        release.wait(5)
        raise MarketDataError("boom")

    client = QueryClient(retry=0)
    errors = []

    def call():
        try:
            client.fetch("k", failing)
        except MarketDataError as exc:
            errors.append(str(exc))

    first = threading.Thread(target=call)
    first.start()
    assert started.wait(5)
    second = threading.Thread(target=call)
    second.start()
    second.join(0.3)
    release.set()
    first.join(5)
    second.join(5)
    assert errors == ["boom", "boom"]


def test_get_serves_fresh_results_and_refetches_stale():
    clock = FakeClock()
    client = QueryClient(clock=clock)
    values = iter(["a", "b"])

    assert client.get("k", lambda: next(values), max_age=30) == "a"
    clock.now = 29
    assert client.get("k", lambda: next(values), max_age=30) == "a"
    clock.now = 30
    assert client.get("k", lambda: next(values), max_age=30) == "b"


def test_distinct_keys_do_not_share_results():
    client = QueryClient()
    assert client.get(("history", "bitcoin", 7), lambda: 7) == 7
    assert client.get(("history", "bitcoin", 30), lambda: 30) == 30


def test_invalidate():
    client = QueryClient()
    client.fetch("a", lambda: 1)
    client.fetch("b", lambda: 2)
    client.invalidate("a")
    assert client.age("a") is None
    assert client.age("b") is not None
    client.invalidate()
    assert client.age("b") is None


def test_scheduled_task_runs_until_cancelled():
    done = threading.Event()
    ticks = []

    def tick():
        ticks.append(1)
        if len(ticks) >= 3:
            done.set()

    task = ScheduledTask("tick", 0.01, tick).start()
    assert done.wait(5)
    task.cancel()
    task.join(5)
    assert task.cancelled
    count = task.runs
    time.sleep(0.05)
    assert task.runs == count >= 3


def test_scheduled_task_survives_errors():
    done = threading.Event()
    ticks = []

    def tick():
        ticks.append(1)
        if len(ticks) == 1:
            raise MarketDataError("first run fails")
        done.set()

    task = ScheduledTask("flaky", 0.01, tick).start()
    assert done.wait(5)
    task.cancel()
    task.join(5)
    assert len(ticks) >= 2


def test_scheduled_task_run_immediately():
    done = threading.Event()
    task = ScheduledTask("now", 60, done.set, run_immediately=True).start()
    assert done.wait(5)
    task.cancel()
    task.join(5)
    assert task.runs == 1


def test_scheduler_replaces_and_cancels_tasks():
    scheduler = RefreshScheduler()
    first = scheduler.schedule("quotes", 60, lambda: None)
    second = scheduler.schedule("quotes", 60, lambda: None)
    assert first.cancelled and not second.cancelled
    news = scheduler.schedule("news", 60, lambda: None)
    scheduler.cancel_all(timeout=5)
    assert second.cancelled and news.cancelled
    scheduler.cancel("quotes")


def test_market_feed_caches_quotes_for_refresh_interval():
    clock = FakeClock()
    client = FakeMarketClient()
    feed = MarketFeed(client, asset_ids=["ethereum", "bitcoin"], query_client=QueryClient(clock=clock))

    assert feed.quotes_age() is None
    assert feed.quotes() == ["quote-1"]
    clock.now = 10
    assert feed.quotes() == ["quote-1"]
    assert feed.quotes_age() == 10
    clock.now = 31
    assert feed.quotes() == ["quote-2"]
    assert client.calls[0] == ("quotes", ("bitcoin", "ethereum"))


def test_market_feed_history_refetches_after_max_age():
    clock = FakeClock()
    client = FakeMarketClient()
    feed = MarketFeed(client, asset_ids=["bitcoin"], query_client=QueryClient(clock=clock))
    assert feed.history_max_age == 30

    assert feed.history("bitcoin", 1) == ["bitcoin", 1]
    clock.now = 10
    feed.history("bitcoin", 1)
    assert client.calls == [("history", "bitcoin", 1)]

    clock.now = 3 * 24 * 3600
    feed.history("bitcoin", 1)
    assert client.calls == [("history", "bitcoin", 1), ("history", "bitcoin", 1)]


def test_market_feed_history_windows_cached_separately():
    client = FakeMarketClient()
    feed = MarketFeed(client, asset_ids=["bitcoin"])
    assert feed.history("bitcoin", 7) == ["bitcoin", 7]
    assert feed.history("bitcoin", 30) == ["bitcoin", 30]
    assert feed.news() == ["news"]
    assert feed.refresh_news() == ["news"]
    assert client.calls == [("history", "bitcoin", 7), ("history", "bitcoin", 30), ("news",), ("news",)]


def test_market_feed_polling_schedule():
    feed = MarketFeed(FakeMarketClient(), asset_ids=["bitcoin"])
    assert feed.quotes_interval == 30
    assert feed.news_interval == 300
    tasks = feed.start_polling()
    assert sorted((t.name, t.interval) for t in tasks) == [("news", 300), ("quotes", 30)]
    assert not any(t.cancelled for t in tasks)
    feed.stop(timeout=5)
    assert all(t.cancelled for t in tasks)
