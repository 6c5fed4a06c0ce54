"""Ticker -> asset class lookup.

The lookup ships as a two-column CSV (``ticker,asset_class``). Every held fund
must be listed; an unknown ticker is an error, never silently dropped.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import pandas as pd

from common.exceptions import ClassificationError, ConfigurationError
from common.logging_utils import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("ticker", "asset_class")


@dataclass(frozen=True)
class Classifications:
    mapping: Dict[str, str]

    @classmethod
    def from_csv(cls, path: str | Path) -> "Classifications":
        """Load classifications from CSV.

        Args:
            path: CSV file with ``ticker`` and ``asset_class`` columns.

        Raises:
            ConfigurationError: If a required column is missing or a ticker is
                listed twice with different classes.
        """
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        df.columns = [c.strip().lower() for c in df.columns]
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ConfigurationError(f"Classification file {path} missing columns: {missing}")

        mapping: Dict[str, str] = {}
        for row in df.itertuples(index=False):
            ticker = row.ticker.strip().upper()
            asset_class = row.asset_class.strip()
            if not ticker:
                continue
            if ticker in mapping and mapping[ticker] != asset_class:
                raise ConfigurationError(
                    f"Ticker {ticker} classified as both {mapping[ticker]!r} and {asset_class!r}"
                )
            mapping[ticker] = asset_class
        logger.debug("Loaded %d classifications from %s", len(mapping), path)
        return cls(mapping=mapping)

    def classify(self, ticker: str) -> str:
        try:
            return self.mapping[ticker.upper()]
        except KeyError:
            raise ClassificationError(ticker) from None

    def __contains__(self, ticker: str) -> bool:
        return ticker.upper() in self.mapping
