"""
Portfolio ledger for the Crypto Juice Exchange dashboard
Tracks holdings per asset with weighted-average cost and mirrors every change
to local storage.
"""

import json
import logging
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .. import config
from .models import Holding
from .storage import LocalStorage

logger = logging.getLogger(__name__)

PORTFOLIO_STORAGE_KEY = config.PORTFOLIO_STORAGE_KEY


def snapshot(holdings: Mapping[str, Holding]) -> str:
    """Serialize holdings to the stored JSON document."""
    return json.dumps({
        asset_id: {"amount": h.amount, "averagePrice": h.average_cost}
        for asset_id, h in holdings.items()
    })


def from_snapshot(raw: Optional[str]) -> Dict[str, Holding]:
    """Parse a stored document; absent or corrupt input gives an empty ledger."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError as exc:
        logger.warning("Discarding corrupt portfolio snapshot: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Discarding portfolio snapshot of type %s", type(data).__name__)
        return {}

    holdings: Dict[str, Holding] = {}
    for asset_id, entry in data.items():
        if not isinstance(entry, dict):
            continue
        try:
            amount = float(entry["amount"])
            average_cost = float(entry["averagePrice"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed holding for %s", asset_id)
            continue
        holdings[asset_id] = Holding(asset_id=asset_id, amount=amount, average_cost=average_cost)
    return holdings


class PortfolioLedger:
    """Holdings keyed by asset id, persisted on every mutation."""

    def __init__(self, storage: LocalStorage, key: str = PORTFOLIO_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._holdings: Dict[str, Holding] = {}

    @classmethod
    def open(cls, storage: LocalStorage, key: str = PORTFOLIO_STORAGE_KEY) -> "PortfolioLedger":
        ledger = cls(storage, key)
        ledger.load()
        return ledger

    def load(self) -> None:
        self._holdings = from_snapshot(self._storage.get_item(self._key))

    def _write(self, holdings: Mapping[str, Holding]) -> None:
        self._storage.set_item(self._key, snapshot(holdings))

    def persist(self) -> None:
        self._write(self._holdings)

    def get_ledger(self) -> Mapping[str, Holding]:
        return MappingProxyType(self._holdings)

    def add_holding(self, asset_id: str, quantity: float, unit_price: float) -> Holding:
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")
        if unit_price < 0:
            raise ValueError(f"unit price must not be negative, got {unit_price}")

        existing = self._holdings.get(asset_id)
        if existing is None:
            holding = Holding(asset_id=asset_id, amount=quantity, average_cost=unit_price)
        else:
            amount = existing.amount + quantity
            total_cost = existing.amount * existing.average_cost + quantity * unit_price
            holding = Holding(asset_id=asset_id, amount=amount, average_cost=total_cost / amount)
        # memory changes only after a successful write
        self._write({**self._holdings, asset_id: holding})
        self._holdings[asset_id] = holding
        logger.info("Added %s %s at %s (now %s @ %s)", quantity, asset_id, unit_price, holding.amount, holding.average_cost)
        return holding

    def remove_holding(self, asset_id: str) -> None:
        remaining = {k: h for k, h in self._holdings.items() if k != asset_id}
        self._write(remaining)
        if self._holdings.pop(asset_id, None) is not None:
            logger.info("Removed holding %s", asset_id)

    def clear(self) -> None:
        """Drop every holding and delete the stored snapshot."""
        self._storage.remove_item(self._key)
        self._holdings.clear()
        logger.info("Cleared all holdings")

    def __len__(self) -> int:
        return len(self._holdings)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._holdings
