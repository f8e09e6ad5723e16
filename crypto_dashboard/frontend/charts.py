"""
Chart rendering functions for the Crypto Juice Exchange dashboard
Handles Plotly chart creation and rendering.
"""

from typing import Sequence

import plotly.graph_objects as go
import streamlit as st

from .. import config
from ..backend.data_processor import history_to_frame, price_axis_range
from ..backend.models import HistoricalPoint

CHART_HEIGHTS = config.CHART_HEIGHTS
COLORS = config.COLORS


def build_price_figure(
    points: Sequence[HistoricalPoint],
    name: str,
    range_key: str = config.DEFAULT_TIME_RANGE,
    color: str = COLORS["line"],
) -> go.Figure:
    df = history_to_frame(points)
    tick_format = "%H:%M" if range_key == "24h" else "%b %d"

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=df["datetime"],
            y=df["price"],
            mode="lines",
            name=name,
            line=dict(color=color, width=1.5),
            hovertemplate="%{x}<br>$%{y:,.6~f}<extra>Price</extra>",
        )
    )
    fig.update_layout(
        height=CHART_HEIGHTS["price"],
        margin=dict(l=10, r=10, t=10, b=10),
        plot_bgcolor=COLORS["surface"],
        paper_bgcolor=COLORS["surface"],
        showlegend=False,
        xaxis=dict(tickformat=tick_format, linecolor=COLORS["grid"], tickfont=dict(color=COLORS["axis"], size=11)),
        yaxis=dict(
            range=price_axis_range(points),
            tickprefix="$",
            linecolor=COLORS["grid"],
            gridcolor=COLORS["border"],
            tickfont=dict(color=COLORS["axis"], size=11),
        ),
    )
    return fig


def render_price_chart(points: Sequence[HistoricalPoint], name: str, range_key: str, color: str = COLORS["line"]) -> None:
    if not points:
        st.info("No price history for this window")
        return
    st.plotly_chart(build_price_figure(points, name, range_key, color), use_container_width=True)
