"""Minimum contribution that brings every class back to target.

Buying can never lower the most overweight class's level, so the best a
buy-only transaction can reach is every class at that maximum level. The
cost of getting there is the waterfall run with an unbounded budget.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional

from common.money import ZERO, quantize_cents
from engine.waterfall import cost_to_level
from portfolio.portfolio import Portfolio


def max_level(portfolio: Portfolio) -> Optional[Decimal]:
    levels = [c.level for c in portfolio.eligible()]
    return max(levels) if levels else None


def equalized_levels(portfolio: Portfolio) -> Dict[str, Decimal]:
    top = max_level(portfolio)
    if top is None:
        return {}
    return {c.name: top for c in portfolio.eligible()}


def minimum_to_equalize(portfolio: Portfolio) -> Decimal:
    """Smallest contribution (in cents) that equalizes every class's level.

    Returns zero for an already balanced portfolio.
    """
    top = max_level(portfolio)
    if top is None:
        return ZERO
    return quantize_cents(cost_to_level(portfolio.eligible(), top))
