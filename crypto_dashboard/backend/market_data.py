"""
Market data access for the Crypto Juice Exchange dashboard
Fetches quotes and price history from CoinGecko and news from CryptoCompare.
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

import requests

from .. import config
from .models import HistoricalPoint, MarketDataError, NewsItem, PriceQuote

logger = logging.getLogger(__name__)

ASSETS = config.ASSETS
HISTORY_WINDOWS = config.HISTORY_WINDOWS

FALLBACK_NEWS = [
    {
        "id": "1",
        "title": "Bitcoin reaches new milestone in adoption",
        "body": "Major institutions continue to embrace cryptocurrency as a legitimate asset class.",
        "source": "Crypto Daily",
        "categories": "BTC",
    },
    {
        "id": "2",
        "title": "Ethereum upgrade brings major improvements",
        "body": "Network enhancements lead to faster transactions and lower fees.",
        "source": "Blockchain News",
        "categories": "ETH",
    },
    {
        "id": "3",
        "title": "Cryptocurrency market shows strong momentum",
        "body": "Trading volumes surge as investor interest reaches new highs.",
        "source": "Market Watch",
        "categories": "Trading",
    },
]


def _float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def parse_quote(coin: Dict[str, Any]) -> PriceQuote:
    asset_id = coin.get("id", "")
    asset = ASSETS.get(asset_id, {})
    return PriceQuote(
        asset_id=asset_id,
        symbol=str(coin.get("symbol", "")).upper(),
        name=asset.get("name") or coin.get("name", asset_id),
        current_price=_float(coin.get("current_price")),
        price_change_percentage_24h=_float(coin.get("price_change_percentage_24h")),
        high_24h=_float(coin.get("high_24h")),
        low_24h=_float(coin.get("low_24h")),
        market_cap=_float(coin.get("market_cap")),
        total_volume=_float(coin.get("total_volume")),
        image=coin.get("image") or "",
    )


def parse_article(article: Dict[str, Any]) -> NewsItem:
    return NewsItem(
        id=str(article.get("id", "")),
        title=article.get("title", ""),
        body=article.get("body", ""),
        url=article.get("url", ""),
        source=article.get("source", ""),
        published_on=_float(article.get("published_on")),
        categories=article.get("categories") or "",
        image_url=article.get("imageurl") or "",
    )


def fallback_news() -> List[NewsItem]:
    now = time.time()
    return [
        NewsItem(
            id=item["id"],
            title=item["title"],
            body=item["body"],
            url="#",
            source=item["source"],
            published_on=now,
            categories=item["categories"],
        )
        for item in FALLBACK_NEWS
    ]


class MarketDataClient:
    """Thin wrapper around the CoinGecko and CryptoCompare REST endpoints."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        coingecko_url: str = config.COINGECKO_API,
        cryptocompare_url: str = config.CRYPTOCOMPARE_API,
        timeout: float = config.HTTP_TIMEOUT,
    ) -> None:
        self._session = session or requests.Session()
        self._coingecko_url = coingecko_url.rstrip("/")
        self._cryptocompare_url = cryptocompare_url.rstrip("/")
        self._timeout = timeout

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._session.get(url, params=params, timeout=self._timeout)
        response.raise_for_status()
        return response.json()

    def fetch_quotes(self, asset_ids: Iterable[str]) -> List[PriceQuote]:
        """Fetch current market data for the given asset ids."""
        ids = sorted(set(asset_ids))
        if not ids:
            return []
        params = {
            "vs_currency": config.VS_CURRENCY,
            "ids": ",".join(ids),
            "order": "market_cap_desc",
            "per_page": config.QUOTES_PER_PAGE,
            "page": 1,
            "sparkline": "false",
        }
        try:
            data = self._get_json(f"{self._coingecko_url}/coins/markets", params)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error fetching crypto prices: %s", exc)
            raise MarketDataError(f"Failed to fetch prices: {exc}") from exc
        if not isinstance(data, list):
            raise MarketDataError("Unexpected price payload")
        return [parse_quote(coin) for coin in data if isinstance(coin, dict)]

    def fetch_history(self, asset_id: str, window_days: int) -> List[HistoricalPoint]:
        """Fetch the price series for one asset over 1, 7, 30 or 365 days."""
        if window_days not in HISTORY_WINDOWS:
            raise ValueError(f"window_days must be one of {HISTORY_WINDOWS}, got {window_days}")
        params = {
            "vs_currency": config.VS_CURRENCY,
            "days": window_days,
            "interval": "hourly" if window_days == 1 else "daily",
        }
        try:
            data = self._get_json(f"{self._coingecko_url}/coins/{asset_id}/market_chart", params)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error fetching historical data for %s: %s", asset_id, exc)
            raise MarketDataError(f"Failed to fetch history for {asset_id}: {exc}") from exc

        prices = data.get("prices", []) if isinstance(data, dict) else []
        points = [
            HistoricalPoint(timestamp=int(row[0]), price=float(row[1]))
            for row in prices
            if isinstance(row, (list, tuple)) and len(row) >= 2
        ]
        return sorted(points, key=lambda p: p.timestamp)

    def fetch_news(self) -> List[NewsItem]:
        """Fetch the latest articles; falls back to a fixed list on failure."""
        try:
            data = self._get_json(f"{self._cryptocompare_url}/news/", {"lang": config.NEWS_LANGUAGE})
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Error fetching crypto news, using fallback: %s", exc)
            return fallback_news()

        articles = data.get("Data") if isinstance(data, dict) else None
        if not articles or not isinstance(articles, list):
            return []
        return [parse_article(a) for a in articles[: config.NEWS_LIMIT] if isinstance(a, dict)]
