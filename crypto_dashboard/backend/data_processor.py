"""
Data processing and calculation functions for the Crypto Juice Exchange dashboard
Handles market totals, portfolio valuation and chart transformations.
"""

from datetime import datetime, timezone
from typing import Dict, List, Mapping, Sequence

import pandas as pd

from .. import config
from .models import (
    Holding,
    HistoricalPoint,
    HoldingPerformance,
    MarketStats,
    PortfolioSummary,
    PriceQuote,
)

ASSETS = config.ASSETS


def quotes_by_id(quotes: Sequence[PriceQuote]) -> Dict[str, PriceQuote]:
    return {q.asset_id: q for q in quotes or []}


def compute_market_stats(quotes: Sequence[PriceQuote]) -> MarketStats:
    if not quotes:
        return MarketStats(total_market_cap=0.0, total_volume=0.0, average_change_pct=0.0)
    total_cap = sum(q.market_cap for q in quotes)
    total_volume = sum(q.total_volume for q in quotes)
    avg_change = sum(q.price_change_percentage_24h for q in quotes) / len(quotes)
    return MarketStats(total_market_cap=total_cap, total_volume=total_volume, average_change_pct=avg_change)


def compute_holding_performance(holding: Holding, quote: PriceQuote) -> HoldingPerformance:
    current_value = holding.amount * quote.current_price
    cost_basis = holding.amount * holding.average_cost
    profit = current_value - cost_basis
    profit_pct = (profit / cost_basis * 100) if cost_basis else 0.0
    return HoldingPerformance(
        asset_id=holding.asset_id,
        name=quote.name,
        symbol=quote.symbol,
        amount=holding.amount,
        average_cost=holding.average_cost,
        current_price=quote.current_price,
        current_value=current_value,
        cost_basis=cost_basis,
        profit=profit,
        profit_pct=profit_pct,
    )


def compute_portfolio_summary(ledger: Mapping[str, Holding], quotes: Sequence[PriceQuote]) -> PortfolioSummary:
    prices = quotes_by_id(quotes)

    total_value = 0.0
    total_cost = 0.0
    rows: List[HoldingPerformance] = []
    for asset_id, holding in ledger.items():
        quote = prices.get(asset_id)
        current_price = quote.current_price if quote else 0.0
        total_value += holding.amount * current_price
        total_cost += holding.amount * holding.average_cost
        # holdings without a quote count towards cost but get no row
        if quote is not None:
            rows.append(compute_holding_performance(holding, quote))

    total_profit = total_value - total_cost
    total_profit_pct = (total_profit / total_cost * 100) if total_cost > 0 else 0.0
    return PortfolioSummary(
        total_value=total_value,
        total_cost=total_cost,
        total_profit=total_profit,
        total_profit_pct=total_profit_pct,
        holdings=rows,
    )


def compute_window_change(points: Sequence[HistoricalPoint]) -> float:
    if not points:
        return 0.0
    first = points[0].price
    last = points[-1].price
    if not first:
        return 0.0
    return (last - first) / first * 100


def history_to_frame(points: Sequence[HistoricalPoint]) -> pd.DataFrame:
    if not points:
        return pd.DataFrame(columns=["datetime", "price"])
    df = pd.DataFrame({
        "datetime": pd.to_datetime([p.timestamp for p in points], unit="ms", utc=True),
        "price": [float(p.price) for p in points],
    })
    return df.dropna(subset=["price"]).sort_values("datetime").reset_index(drop=True)


def price_axis_range(points: Sequence[HistoricalPoint]) -> List[float]:
    if not points:
        return [0.0, 0.0]
    prices = [p.price for p in points]
    return [min(prices) * 0.99, max(prices) * 1.01]


def format_price(value: float) -> str:
    decimals = 6 if abs(value) < 1 else 2
    return f"${value:,.{decimals}f}"


def format_billions(value: float) -> str:
    return f"${value / 1e9:,.2f}B"


def format_change(value: float, decimals: int = 2) -> str:
    return f"{'+' if value >= 0 else ''}{value:.{decimals}f}%"


def format_published(published_on: float) -> str:
    if not published_on:
        return ""
    return datetime.fromtimestamp(published_on, tz=timezone.utc).strftime("%b %d, %H:%M UTC")


def asset_display_name(asset_id: str) -> str:
    return ASSETS.get(asset_id, {}).get("name", asset_id)


def asset_color(asset_id: str) -> str:
    return ASSETS.get(asset_id, {}).get("color", config.COLORS["line"])
