"""
UI Components for the Crypto Juice Exchange dashboard
Contains reusable Streamlit components and layout elements.
"""

from html import escape
from typing import Callable, Optional, Sequence, Tuple

import streamlit as st

from .. import config
from ..backend.data_processor import (
    format_billions,
    format_change,
    format_price,
    format_published,
)
from ..backend.models import Holding, HoldingPerformance, MarketStats, NewsItem, PortfolioSummary, PriceQuote

ASSETS = config.ASSETS
COLORS = config.COLORS
TIME_RANGES = config.TIME_RANGES


def get_global_styles() -> str:
    return f"""
    <style>
    @import url('https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@400;500;600;700&display=swap');
    html, body, [class*="css"] {{ font-family: 'Space Grotesk', sans-serif; }}
    .card-flat {{ background:{COLORS['surface']};border:1px solid {COLORS['border']};padding:16px;margin-bottom:12px; }}
    .card-label {{ color:{COLORS['text_secondary']};font-size:0.75rem;letter-spacing:0.05em;text-transform:uppercase; }}
    .card-value {{ color:{COLORS['text']};font-weight:600; }}
    .metrics-card {{ display:flex;flex-wrap:wrap;gap:24px; }}
    .news-card a {{ color:{COLORS['text']};text-decoration:none; }}
    </style>
    """


def _change_color(value: float) -> str:
    return COLORS["positive"] if value >= 0 else COLORS["negative"]


def build_market_stats_html(stats: MarketStats) -> str:
    items = [
        ("Market Cap", format_billions(stats.total_market_cap), COLORS["text"]),
        ("24H Volume", format_billions(stats.total_volume), COLORS["text"]),
        ("Avg Change", format_change(stats.average_change_pct), _change_color(stats.average_change_pct)),
    ]
    cells = "".join(
        f'<div><div class="card-label">{label}</div>'
        f'<div class="card-value" style="color:{color};">{value}</div></div>'
        for label, value, color in items
    )
    return f'<div class="card-flat metrics-card">{cells}</div>'


def build_price_card_html(quote: PriceQuote) -> str:
    change = quote.price_change_percentage_24h
    return f"""
    <div class="card-flat">
        <div style="display:flex;justify-content:space-between;border-bottom:1px solid {COLORS['border']};padding-bottom:8px;margin-bottom:12px;">
            <div><div class="card-value">{escape(quote.name)}</div><div class="card-label">{escape(quote.symbol)}</div></div>
            <div class="card-label" style="border:1px solid {COLORS['border']};padding:0 6px;height:fit-content;">Crypto</div>
        </div>
        <div class="card-value" style="font-size:1.5rem;">{format_price(quote.current_price)}</div>
        <div class="card-label">USD</div>
        <div style="color:{_change_color(change)};font-weight:500;margin:6px 0 10px;">{format_change(change)}</div>
        <div style="display:flex;justify-content:space-between;font-size:0.8rem;"><span class="card-label">24H High</span><span>{format_price(quote.high_24h)}</span></div>
        <div style="display:flex;justify-content:space-between;font-size:0.8rem;"><span class="card-label">24H Low</span><span>{format_price(quote.low_24h)}</span></div>
        <div style="display:flex;justify-content:space-between;font-size:0.8rem;"><span class="card-label">Market Cap</span><span>{format_billions(quote.market_cap)}</span></div>
    </div>
    """


def build_news_card_html(item: NewsItem) -> str:
    category = item.primary_category
    meta = f'<span style="font-weight:500;">{escape(item.source)}</span>'
    if category:
        meta += f' <span style="border-left:1px solid {COLORS["border"]};padding-left:8px;">{escape(category)}</span>'
    published = format_published(item.published_on)
    if published:
        meta += f' <span style="padding-left:8px;">{published}</span>'
    return f"""
    <div class="card-flat news-card">
        <a href="{escape(item.url, quote=True)}" target="_blank" rel="noopener noreferrer">
            <div class="card-value" style="font-size:0.95rem;margin-bottom:6px;">{escape(item.title)}</div>
        </a>
        <div style="color:{COLORS['text_secondary']};font-size:0.8rem;margin-bottom:6px;">{escape(item.body)}</div>
        <div class="card-label" style="text-transform:none;">{meta}</div>
    </div>
    """


def build_portfolio_header_html(summary: PortfolioSummary) -> str:
    profit = summary.total_profit
    return f"""
    <div class="card-flat" style="display:flex;justify-content:space-between;align-items:center;">
        <div><div class="card-value" style="font-size:1.1rem;">Total Value</div><div class="card-label">Portfolio Summary</div></div>
        <div style="text-align:right;">
            <div class="card-value" style="font-size:1.5rem;">${summary.total_value:,.2f}</div>
            <div style="color:{_change_color(profit)};font-weight:500;">{'+' if profit >= 0 else ''}{profit:,.2f} ({summary.total_profit_pct:.2f}%)</div>
        </div>
    </div>
    """


def build_holding_row_html(row: HoldingPerformance) -> str:
    return f"""
    <div class="card-flat">
        <div class="card-value">{escape(row.name)}</div>
        <div class="card-label" style="text-transform:none;">{row.amount:g} {escape(row.symbol)} @ ${row.average_cost:,.2f}</div>
        <div style="display:flex;justify-content:space-between;margin-top:10px;">
            <div><div class="card-label">Current Value</div><div class="card-value">${row.current_value:,.2f}</div></div>
            <div style="text-align:right;"><div class="card-label">P/L</div>
            <div style="color:{_change_color(row.profit)};font-weight:500;">{'+' if row.profit >= 0 else ''}{row.profit:,.2f} ({row.profit_pct:.1f}%)</div></div>
        </div>
    </div>
    """


def render_header() -> None:
    st.markdown(get_global_styles(), unsafe_allow_html=True)
    st.markdown("## CRYPTO JUICE EXCHANGE")
    st.caption("Live crypto prices & news")


def render_market_stats(stats: MarketStats) -> None:
    st.markdown(build_market_stats_html(stats), unsafe_allow_html=True)


def render_price_cards(quotes: Sequence[PriceQuote], on_add: Optional[Callable[[PriceQuote], None]] = None) -> None:
    if not quotes:
        st.info("No prices available")
        return
    columns = st.columns(config.PRICE_CARD_COLUMNS)
    for idx, quote in enumerate(quotes):
        with columns[idx % len(columns)]:
            st.markdown(build_price_card_html(quote), unsafe_allow_html=True)
            if on_add is not None and st.button("ADD", key=f"add-{quote.asset_id}", use_container_width=True):
                on_add(quote)


def render_news_cards(items: Sequence[NewsItem]) -> None:
    if not items:
        st.info("No news right now")
        return
    for item in items:
        st.markdown(build_news_card_html(item), unsafe_allow_html=True)


def render_portfolio(summary: PortfolioSummary, on_remove: Optional[Callable[[str], None]] = None) -> None:
    st.markdown(build_portfolio_header_html(summary), unsafe_allow_html=True)
    for row in summary.holdings:
        col_card, col_action = st.columns([6, 1])
        with col_card:
            st.markdown(build_holding_row_html(row), unsafe_allow_html=True)
        with col_action:
            if on_remove is not None and st.button("Remove", key=f"remove-{row.asset_id}"):
                on_remove(row.asset_id)


def render_empty_portfolio() -> None:
    st.markdown(
        f"""
        <div class="card-flat" style="text-align:center;padding:32px;">
            <div class="card-value" style="font-size:1.1rem;">No Holdings</div>
            <div style="color:{COLORS['text_secondary']};font-size:0.85rem;">Add cryptocurrencies to your portfolio to track performance</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def build_added_message(quote: PriceQuote, holding: Holding) -> str:
    return (
        f"Added 1 {quote.symbol}. Holdings tab now shows {holding.amount:g} {quote.symbol} "
        f"at {format_price(holding.average_cost)} average cost"
    )


def default_unit_price(quotes: Sequence[PriceQuote], asset_id: str) -> float:
    for quote in quotes or []:
        if quote.asset_id == asset_id:
            return float(quote.current_price)
    return 0.0


def render_add_holding_form(quotes: Sequence[PriceQuote]) -> Optional[Tuple[str, float, float]]:
    # outside the form: the price default has to follow the selected asset
    asset_id = st.selectbox("Asset", list(ASSETS), format_func=lambda a: ASSETS[a]["name"], key="add-holding-asset")
    with st.form("add-holding", clear_on_submit=True):
        quantity = st.number_input("Quantity", min_value=0.0, value=1.0, step=0.1, format="%.8f")
        unit_price = st.number_input(
            "Unit price (USD)",
            min_value=0.0,
            value=default_unit_price(quotes, asset_id),
            key=f"add-holding-price-{asset_id}",
        )
        submitted = st.form_submit_button("Add to holdings")
    if not submitted:
        return None
    if quantity <= 0:
        st.warning("Quantity must be greater than zero")
        return None
    return asset_id, float(quantity), float(unit_price)


def render_asset_selector(current: str) -> str:
    options = list(ASSETS)
    index = options.index(current) if current in options else 0
    return st.radio(
        "Asset",
        options,
        index=index,
        format_func=lambda a: ASSETS[a]["name"],
        horizontal=True,
        label_visibility="collapsed",
    )


def render_time_range_selector() -> str:
    options = list(TIME_RANGES)
    return st.radio(
        "Range",
        options,
        index=options.index(config.DEFAULT_TIME_RANGE),
        format_func=lambda r: TIME_RANGES[r][0],
        horizontal=True,
        label_visibility="collapsed",
    )


def render_settings_panel() -> Tuple[bool, int, bool]:
    with st.expander("Settings", expanded=False):
        auto_refresh = st.checkbox("Auto-Refresh", value=False)
        refresh_rate = st.slider("Rate (s)", 5, 120, config.DEFAULT_REFRESH_RATE)
        manual_refresh = st.button("Manual Refresh", use_container_width=True)
    return auto_refresh, refresh_rate, manual_refresh

