"""
Configuration constants for the Crypto Juice Exchange dashboard
"""

import logging
import os
from pathlib import Path

STORAGE_PATH = Path(
    os.getenv("DASHBOARD_STORAGE_PATH", str(Path.home() / ".crypto_dashboard" / "local_storage.json"))
)
PORTFOLIO_STORAGE_KEY = "crypto-juice-portfolio"

COINGECKO_API = "https://api.coingecko.com/api/v3"
CRYPTOCOMPARE_API = "https://min-api.cryptocompare.com/data/v2"
VS_CURRENCY = "usd"
QUOTES_PER_PAGE = 10
NEWS_LANGUAGE = "EN"
NEWS_LIMIT = 10
HTTP_TIMEOUT = float(os.getenv("DASHBOARD_HTTP_TIMEOUT", "10"))

QUOTES_REFRESH_MS = 30000
NEWS_REFRESH_MS = 300000
QUERY_RETRY = 1
HISTORY_MAX_AGE = 30

LOG_LEVEL = os.getenv("DASHBOARD_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ASSETS = {
    "bitcoin": {
        "name": "Bitcoin Brew",
        "symbol": "BTC",
        "color": "#F7931A",
        "description": "The OG crypto juice",
    },
    "ethereum": {
        "name": "Ethereum Elixir",
        "symbol": "ETH",
        "color": "#627EEA",
        "description": "Smart contract smoothie",
    },
    "cardano": {
        "name": "Cardano Cocktail",
        "symbol": "ADA",
        "color": "#0033AD",
        "description": "Proof-of-stake potion",
    },
    "solana": {
        "name": "Solana Soda",
        "symbol": "SOL",
        "color": "#14F195",
        "description": "High-speed hydration",
    },
    "ripple": {
        "name": "XRP Xtreme",
        "symbol": "XRP",
        "color": "#23292F",
        "description": "Banking blend",
    },
    "polkadot": {
        "name": "Polkadot Punch",
        "symbol": "DOT",
        "color": "#E6007A",
        "description": "Interoperability infusion",
    },
    "dogecoin": {
        "name": "Doge Drink",
        "symbol": "DOGE",
        "color": "#C2A633",
        "description": "Much wow, very refresh",
    },
}
DEFAULT_ASSET = "bitcoin"

# value -> (label, days)
TIME_RANGES = {
    "24h": ("24H", 1),
    "7d": ("7D", 7),
    "30d": ("30D", 30),
    "1y": ("1Y", 365),
}
DEFAULT_TIME_RANGE = "7d"
HISTORY_WINDOWS = (1, 7, 30, 365)

TABS = ["Market Prices", "Charts", "News", "Holdings"]

PAGE_CONFIG = {
    "page_title": "Crypto Juice Exchange",
    "page_icon": None,
    "layout": "wide",
    "initial_sidebar_state": "collapsed",
}

CHART_HEIGHTS = {
    "price": 320,
}

DEFAULT_REFRESH_RATE = 30
PRICE_CARD_COLUMNS = 3

COLORS = {
    "positive": "#1f7a6d",
    "negative": "#b42318",
    "neutral": "#9a9a9a",
    "line": "#000000",
    "grid": "#d4d4d4",
    "axis": "#737373",
    "background": "#fafafa",
    "surface": "#ffffff",
    "border": "#e5e5e5",
    "text": "#171717",
    "text_secondary": "#737373",
}


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
