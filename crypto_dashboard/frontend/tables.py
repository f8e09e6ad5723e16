"""
Table rendering functions for the Crypto Juice Exchange dashboard
Handles DataFrame display and formatting.
"""

from typing import Sequence

import pandas as pd
import streamlit as st

from ..backend.models import HoldingPerformance, PriceQuote


def build_holdings_dataframe(rows: Sequence[HoldingPerformance]) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "Asset": r.name,
            "Symbol": r.symbol,
            "Qty": r.amount,
            "Avg Cost": r.average_cost,
            "Current": r.current_price,
            "Value": r.current_value,
            "P&L $": r.profit,
            "P&L %": r.profit_pct,
        }
        for r in rows
    ])


def build_quotes_dataframe(quotes: Sequence[PriceQuote]) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "Asset": q.name,
            "Symbol": q.symbol,
            "Price": q.current_price,
            "24h %": q.price_change_percentage_24h,
            "24h High": q.high_24h,
            "24h Low": q.low_24h,
            "Market Cap": q.market_cap,
            "Volume": q.total_volume,
        }
        for q in quotes
    ])


def render_holdings_table(rows: Sequence[HoldingPerformance]) -> None:
    df = build_holdings_dataframe(rows)
    if df.empty:
        st.info("No Current Holdings")
        return
    st.dataframe(df, use_container_width=True, hide_index=True)


def render_quotes_table(quotes: Sequence[PriceQuote]) -> None:
    df = build_quotes_dataframe(quotes)
    if df.empty:
        st.info("No prices available")
        return
    st.dataframe(df, use_container_width=True, hide_index=True)
