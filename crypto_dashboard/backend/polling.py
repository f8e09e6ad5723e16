"""
Polling and request caching for the Crypto Juice Exchange dashboard
Provides a keyed query cache with in-flight de-duplication and retry, and
scheduled background refresh tasks with cancellation.
"""

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple

from .. import config
from .market_data import MarketDataClient
from .models import HistoricalPoint, NewsItem, PriceQuote

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    data: Any
    updated_at: float


class QueryClient:
    """Caches query results by key and shares identical in-flight requests."""

    def __init__(self, retry: int = config.QUERY_RETRY, clock: Callable[[], float] = time.monotonic) -> None:
        self._retry = max(0, retry)
        self._clock = clock
        self._lock = threading.Lock()
        self._in_flight: Dict[Hashable, Future] = {}
        self._results: Dict[Hashable, QueryResult] = {}

    def _run(self, key: Hashable, fn: Callable[[], Any]) -> Any:
        attempts = self._retry + 1
        for attempt in range(attempts):
            try:
                return fn()
            except Exception as exc:
                if attempt + 1 >= attempts:
                    raise
                logger.warning("Query %r failed (attempt %d/%d): %s", key, attempt + 1, attempts, exc)

    def fetch(self, key: Hashable, fn: Callable[[], Any]) -> Any:
        with self._lock:
            future = self._in_flight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._in_flight[key] = future
        if not owner:
            return future.result()

        try:
            data = self._run(key, fn)
        except Exception as exc:
            future.set_exception(exc)
            raise
        else:
            with self._lock:
                self._results[key] = QueryResult(data=data, updated_at=self._clock())
            future.set_result(data)
            return data
        finally:
            with self._lock:
                self._in_flight.pop(key, None)

    def get(self, key: Hashable, fn: Callable[[], Any], max_age: Optional[float] = None) -> Any:
        with self._lock:
            cached = self._results.get(key)
        if cached is not None and (max_age is None or self._clock() - cached.updated_at < max_age):
            return cached.data
        return self.fetch(key, fn)

    def age(self, key: Hashable) -> Optional[float]:
        """Seconds since the last successful result for ``key``, or None."""
        with self._lock:
            cached = self._results.get(key)
        return None if cached is None else self._clock() - cached.updated_at

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        with self._lock:
            if key is None:
                self._results.clear()
            else:
                self._results.pop(key, None)


class ScheduledTask:
    """Runs a callable every ``interval`` seconds until cancelled."""

    def __init__(self, name: str, interval: float, fn: Callable[[], Any], run_immediately: bool = False) -> None:
        self.name = name
        self.interval = interval
        self._fn = fn
        self._run_immediately = run_immediately
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._loop, name=f"poll-{name}", daemon=True)
        self.runs = 0

    def start(self) -> "ScheduledTask":
        self._thread.start()
        return self

    def _tick(self) -> None:
        try:
            self._fn()
        except Exception:
            logger.exception("Scheduled task %s failed", self.name)
        finally:
            self.runs += 1

    def _loop(self) -> None:
        if self._run_immediately and not self._cancelled.is_set():
            self._tick()
        while not self._cancelled.wait(self.interval):
            self._tick()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread.is_alive():
            self._thread.join(timeout)


class RefreshScheduler:
    def __init__(self) -> None:
        self._tasks: Dict[str, ScheduledTask] = {}

    def schedule(self, name: str, interval: float, fn: Callable[[], Any], run_immediately: bool = False) -> ScheduledTask:
        self.cancel(name)
        task = ScheduledTask(name, interval, fn, run_immediately=run_immediately).start()
        self._tasks[name] = task
        return task

    def cancel(self, name: str) -> None:
        task = self._tasks.pop(name, None)
        if task is not None:
            task.cancel()

    def cancel_all(self, timeout: Optional[float] = None) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            self.cancel(task.name)
        if timeout is not None:
            for task in tasks:
                task.join(timeout)


class MarketFeed:
    """Market data behind a query cache with periodic background refresh."""

    def __init__(
        self,
        client: MarketDataClient,
        asset_ids: Iterable[str] = tuple(config.ASSETS),
        query_client: Optional[QueryClient] = None,
        scheduler: Optional[RefreshScheduler] = None,
        quotes_interval: float = config.QUOTES_REFRESH_MS / 1000,
        news_interval: float = config.NEWS_REFRESH_MS / 1000,
        history_max_age: float = config.HISTORY_MAX_AGE,
    ) -> None:
        self.client = client
        self.asset_ids: Tuple[str, ...] = tuple(sorted(set(asset_ids)))
        self.queries = query_client or QueryClient()
        self.scheduler = scheduler or RefreshScheduler()
        self.quotes_interval = quotes_interval
        self.news_interval = news_interval
        self.history_max_age = history_max_age

    @property
    def quotes_key(self) -> Tuple:
        return ("quotes", self.asset_ids)

    def quotes(self) -> List[PriceQuote]:
        return self.queries.get(
            self.quotes_key, lambda: self.client.fetch_quotes(self.asset_ids), max_age=self.quotes_interval
        )

    def history(self, asset_id: str, days: int) -> List[HistoricalPoint]:
        return self.queries.get(
            ("history", asset_id, days), lambda: self.client.fetch_history(asset_id, days), max_age=self.history_max_age
        )

    def quotes_age(self) -> Optional[float]:
        return self.queries.age(self.quotes_key)

    def news(self) -> List[NewsItem]:
        return self.queries.get(("news",), self.client.fetch_news, max_age=self.news_interval)

    def refresh_quotes(self) -> List[PriceQuote]:
        return self.queries.fetch(self.quotes_key, lambda: self.client.fetch_quotes(self.asset_ids))

    def refresh_news(self) -> List[NewsItem]:
        return self.queries.fetch(("news",), self.client.fetch_news)

    def start_polling(self) -> List[ScheduledTask]:
        tasks = [
            self.scheduler.schedule("quotes", self.quotes_interval, self.refresh_quotes),
            self.scheduler.schedule("news", self.news_interval, self.refresh_news),
        ]
        logger.info("Polling quotes every %ss and news every %ss", self.quotes_interval, self.news_interval)
        return tasks

    def stop(self, timeout: Optional[float] = None) -> None:
        self.scheduler.cancel_all(timeout)
