"""
Main Streamlit application for the Crypto Juice Exchange dashboard
"""

import logging
import os
import sys
import time

import streamlit as st

try:
    from . import config
    from .backend.data_processor import (
        asset_color,
        asset_display_name,
        compute_market_stats,
        compute_portfolio_summary,
        compute_window_change,
        format_change,
    )
    from .backend.ledger import PortfolioLedger
    from .backend.market_data import MarketDataClient
    from .backend.models import MarketDataError, PriceQuote
    from .backend.polling import MarketFeed
    from .backend.storage import LocalStorage
    from .frontend import components
    from .frontend.charts import render_price_chart
    from .frontend.tables import render_holdings_table, render_quotes_table
except ImportError:
    sys.path.append(os.path.dirname(os.path.dirname(__file__)))
    from crypto_dashboard import config
    from crypto_dashboard.backend.data_processor import (
        asset_color,
        asset_display_name,
        compute_market_stats,
        compute_portfolio_summary,
        compute_window_change,
        format_change,
    )
    from crypto_dashboard.backend.ledger import PortfolioLedger
    from crypto_dashboard.backend.market_data import MarketDataClient
    from crypto_dashboard.backend.models import MarketDataError, PriceQuote
    from crypto_dashboard.backend.polling import MarketFeed
    from crypto_dashboard.backend.storage import LocalStorage
    from crypto_dashboard.frontend import components
    from crypto_dashboard.frontend.charts import render_price_chart
    from crypto_dashboard.frontend.tables import render_holdings_table, render_quotes_table

logger = logging.getLogger(__name__)


@st.cache_resource
def get_market_feed() -> MarketFeed:
    config.configure_logging()
    feed = MarketFeed(MarketDataClient())
    feed.start_polling()
    return feed


def get_ledger() -> PortfolioLedger:
    if "ledger" not in st.session_state:
        st.session_state["ledger"] = PortfolioLedger.open(LocalStorage(config.STORAGE_PATH))
    return st.session_state["ledger"]


def load_quotes(feed: MarketFeed):
    try:
        return feed.quotes(), None
    except MarketDataError as exc:
        return [], str(exc)


def render_prices_tab(feed: MarketFeed, ledger: PortfolioLedger) -> None:
    quotes, error = load_quotes(feed)
    if error:
        st.error(f"Could not load prices: {error}")
        return

    components.render_market_stats(compute_market_stats(quotes))
    st.markdown("#### Spot Prices")

    age = feed.quotes_age()
    if age is not None:
        st.caption(f"Updated {age:.0f}s ago")

    def add_one(quote: PriceQuote) -> None:
        holding = ledger.add_holding(quote.asset_id, 1, quote.current_price)
        st.success(components.build_added_message(quote, holding))

    components.render_price_cards(quotes, on_add=add_one)
    with st.expander("Table view", expanded=False):
        render_quotes_table(quotes)


def render_charts_tab(feed: MarketFeed) -> None:
    st.markdown("#### Historical Charts")
    selected = components.render_asset_selector(st.session_state.get("selected_asset", config.DEFAULT_ASSET))
    st.session_state["selected_asset"] = selected
    range_key = components.render_time_range_selector()
    _, days = config.TIME_RANGES[range_key]
    name = asset_display_name(selected)

    try:
        points = feed.history(selected, days)
    except MarketDataError as exc:
        st.markdown(f"##### {name}")
        st.error("Failed to load chart data")
        logger.debug("History load failed: %s", exc)
        return

    st.markdown(f"##### {name}")
    st.caption(config.ASSETS.get(selected, {}).get("description", ""))
    if points:
        st.caption(f"{format_change(compute_window_change(points))} ({range_key})")
    render_price_chart(points, name, range_key, asset_color(selected))


def render_news_tab(feed: MarketFeed) -> None:
    st.markdown("#### Market News")
    with st.spinner("Loading news..."):
        items = feed.news()
    components.render_news_cards(items)


def render_holdings_tab(feed: MarketFeed, ledger: PortfolioLedger) -> None:
    st.markdown("#### Portfolio Holdings")
    quotes, error = load_quotes(feed)
    if error:
        st.warning("Prices unavailable, values shown at zero")

    added = components.render_add_holding_form(quotes)
    if added is not None:
        ledger.add_holding(*added)

    holdings = ledger.get_ledger()
    if not holdings:
        components.render_empty_portfolio()
        return

    def remove(asset_id: str) -> None:
        ledger.remove_holding(asset_id)
        st.rerun()

    summary = compute_portfolio_summary(holdings, quotes)
    components.render_portfolio(summary, on_remove=remove)
    with st.expander("Table view", expanded=False):
        render_holdings_table(summary.holdings)
    if st.button("Clear all holdings"):
        ledger.clear()
        st.rerun()


def main() -> None:
    st.set_page_config(**config.PAGE_CONFIG)
    feed = get_market_feed()
    ledger = get_ledger()

    col_head1, col_head2 = st.columns([6, 1])
    with col_head1:
        components.render_header()
    with col_head2:
        auto_refresh, refresh_rate, manual_refresh = components.render_settings_panel()
        if manual_refresh:
            feed.queries.invalidate()
            st.rerun()

    tabs = st.tabs(config.TABS)
    with tabs[0]:
        render_prices_tab(feed, ledger)
    with tabs[1]:
        render_charts_tab(feed)
    with tabs[2]:
        render_news_tab(feed)
    with tabs[3]:
        render_holdings_tab(feed, ledger)

    st.markdown("---")
    st.caption("Data: CoinGecko & CryptoCompare APIs")

    if auto_refresh:
        time.sleep(refresh_rate)
        st.rerun()


if __name__ == "__main__":
    main()
