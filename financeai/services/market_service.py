"""Synthetic market figures for the landing page (no live data source)."""

from __future__ import annotations

import random
from typing import Optional

# name -> (value, change, change_percent, value_jitter, change_jitter, percent_jitter)
INDEX_BASELINES = {
    "nifty": (19745.25, 125.30, 0.64, 100, 50, 0.5),
    "sensex": (66382.10, 421.85, 0.64, 500, 200, 0.5),
    "bankNifty": (45234.75, -78.25, -0.17, 300, 100, 0.3),
}

GAINER_BASELINES = [
    ("TATAMOTORS", "Tata Motors Ltd.", 785.40, 47.20, 6.39, 50, 20, 2),
    ("ADANIGREEN", "Adani Green Energy", 1234.60, 65.80, 5.63, 100, 30, 2),
    ("BHARTIARTL", "Bharti Airtel Ltd.", 987.30, 42.15, 4.46, 50, 20, 1),
]


class MarketService:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def _jitter(self, base: float, spread: float) -> float:
        return round(base + (self._rng.random() - 0.5) * spread, 2)

    def indices(self) -> dict:
        return {
            name: {
                "value": self._jitter(value, v_spread),
                "change": self._jitter(change, c_spread),
                "changePercent": self._jitter(pct, p_spread),
            }
            for name, (value, change, pct, v_spread, c_spread, p_spread) in INDEX_BASELINES.items()
        }

    def top_gainers(self) -> list[dict]:
        return [
            {
                "symbol": symbol,
                "name": name,
                "price": self._jitter(price, p_spread),
                "change": self._jitter(change, c_spread),
                "changePercent": self._jitter(pct, pct_spread),
            }
            for symbol, name, price, change, pct, p_spread, c_spread, pct_spread in GAINER_BASELINES
        ]
