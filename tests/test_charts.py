import pytest

from crypto_dashboard.backend.models import HistoricalPoint
from crypto_dashboard.frontend.charts import build_price_figure


def _points():
    return [HistoricalPoint(1700000000000 + i * 3600000, 100.0 + i) for i in range(5)]


def test_price_figure_has_single_line():
    fig = build_price_figure(_points(), "Bitcoin Brew", "7d")
    assert len(fig.data) == 1
    assert fig.data[0].mode == "lines"
    assert list(fig.data[0].y) == [100.0, 101.0, 102.0, 103.0, 104.0]


def test_price_figure_axis_padding():
    fig = build_price_figure(_points(), "Bitcoin Brew", "7d")
    low, high = fig.layout.yaxis.range
    assert low == pytest.approx(99.0)
    assert high == pytest.approx(105.04)


@pytest.mark.parametrize("range_key, fmt", [("24h", "%H:%M"), ("7d", "%b %d"), ("1y", "%b %d")])
def test_price_figure_tick_format(range_key, fmt):
    assert build_price_figure(_points(), "x", range_key).layout.xaxis.tickformat == fmt


def test_price_figure_line_color():
    assert build_price_figure(_points(), "x").data[0].line.color == "#000000"
    assert build_price_figure(_points(), "x", "7d", color="#F7931A").data[0].line.color == "#F7931A"
