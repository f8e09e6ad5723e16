"""
Data models for the Crypto Juice Exchange dashboard
Provides typed records for quotes, price history, news and holdings.
"""

from dataclasses import dataclass, field
from typing import List


class MarketDataError(RuntimeError):
    """Raised when a price or history request cannot be completed."""


@dataclass(frozen=True)
class Holding:
    asset_id: str
    amount: float
    average_cost: float


@dataclass
class PriceQuote:
    asset_id: str
    symbol: str
    name: str
    current_price: float
    price_change_percentage_24h: float
    high_24h: float
    low_24h: float
    market_cap: float
    total_volume: float
    image: str = ""


@dataclass(frozen=True)
class HistoricalPoint:
    timestamp: int
    price: float


@dataclass
class NewsItem:
    id: str
    title: str
    body: str
    url: str
    source: str
    published_on: float
    categories: str = ""
    image_url: str = ""

    @property
    def primary_category(self) -> str:
        return self.categories.split("|")[0] if self.categories else ""


@dataclass
class HoldingPerformance:
    asset_id: str
    name: str
    symbol: str
    amount: float
    average_cost: float
    current_price: float
    current_value: float
    cost_basis: float
    profit: float
    profit_pct: float


@dataclass
class PortfolioSummary:
    total_value: float
    total_cost: float
    total_profit: float
    total_profit_pct: float
    holdings: List[HoldingPerformance] = field(default_factory=list)


@dataclass
class MarketStats:
    total_market_cap: float
    total_volume: float
    average_change_pct: float
