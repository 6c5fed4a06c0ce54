"""Presentation-boundary views of an allocation result.

This is the only place ratios become floats: percentages are rounded to two
decimals here and nowhere earlier.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import pandas as pd

from common.money import HUNDRED, quantize_cents
from engine.deviation import AllocationResult

TABLE_COLUMNS = [
    "asset_class",
    "value",
    "ratio_pct",
    "target_pct",
    "delta",
    "new_value",
    "new_ratio_pct",
    "deviation_before_pct",
    "deviation_after_pct",
]


def _pct(r: Optional[Decimal]) -> Optional[float]:
    if r is None:
        return None
    return round(float(r * HUNDRED), 2)


def allocation_rows(result: AllocationResult) -> List[Dict[str, Any]]:
    return [
        {
            "asset_class": c.name,
            "value": float(quantize_cents(c.value_before)),
            "ratio_pct": _pct(c.before_ratio),
            "target_pct": _pct(c.target_ratio),
            "delta": float(quantize_cents(c.delta)),
            "new_value": float(quantize_cents(c.value_after)),
            "new_ratio_pct": _pct(c.after_ratio),
            "deviation_before_pct": _pct(c.before_deviation),
            "deviation_after_pct": _pct(c.after_deviation),
        }
        for c in result.classes.values()
    ]
