"""Fund records from YAML or CSV.

The ledger itself is parsed elsewhere; these files carry the resolved output:
one record per fund with share count and last price.

YAML layout::

    funds:
      - {ticker: VTSAX, asset_class: US Stocks, shares: "120.5", price: "98.12"}

CSV layout: ``ticker,shares,price[,asset_class]``. Quantities may be written as
ledger fractions such as ``12050/100``.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from common.config_loader import load_yaml
from common.exceptions import DataError
from common.logging_utils import get_logger

logger = get_logger(__name__)

FundRecord = Dict[str, Any]


def _normalize(record: Dict[str, Any], source: str, index: int) -> FundRecord:
    ticker = str(record.get("ticker") or "").strip()
    if not ticker:
        raise DataError(f"{source}: record {index} has no ticker")
    for key in ("shares", "price"):
        if record.get(key) in (None, ""):
            raise DataError(f"{source}: fund {ticker} has no {key}")
    out: FundRecord = {
        "ticker": ticker.upper(),
        "shares": record["shares"],
        "price": record["price"],
    }
    asset_class = record.get("asset_class")
    if asset_class not in (None, ""):
        out["asset_class"] = str(asset_class).strip()
    return out


def load_holdings_yaml(path: str | Path) -> List[FundRecord]:
    raw = load_yaml(path)
    funds = raw.get("funds") or []
    if not isinstance(funds, list):
        raise DataError(f"{path}: 'funds' must be a list")
    return [_normalize(dict(r), str(path), i) for i, r in enumerate(funds)]


def load_holdings_csv(path: str | Path) -> List[FundRecord]:
    # dtype=str keeps quantities exact until they become Decimal
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip().lower() for c in df.columns]
    return [_normalize(r, str(path), i) for i, r in enumerate(df.to_dict(orient="records"))]


def load_holdings(path: str | Path) -> List[FundRecord]:
    """Load fund records, picking the parser from the file extension."""
    p = Path(path)
    if p.suffix.lower() == ".csv":
        records = load_holdings_csv(p)
    else:
        records = load_holdings_yaml(p)
    logger.info("Loaded %d fund records from %s", len(records), p)
    return records
