"""Before/after ratios and relative deviations for an allocation.

Relative deviation is ``(target - actual) / target``: positive means the class
is underweight, negative overweight. It is undefined (``None``) for a
zero-target class.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Mapping, Optional, Tuple

from common.money import ZERO
from portfolio.asset_class import AssetClass
from portfolio.portfolio import Portfolio


@dataclass(frozen=True)
class ClassAllocation:
    """Outcome of one allocation for a single asset class."""

    name: str
    target_ratio: Decimal
    value_before: Decimal
    delta: Decimal
    value_after: Decimal
    before_ratio: Decimal
    after_ratio: Decimal
    before_deviation: Optional[Decimal]
    after_deviation: Optional[Decimal]
    funds: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AllocationResult:
    """Per-class allocation plus portfolio totals before and after."""

    amount: Decimal
    total_before: Decimal
    new_total: Decimal
    classes: Dict[str, ClassAllocation]

    def deltas(self) -> Dict[str, Decimal]:
        return {name: c.delta for name, c in self.classes.items()}

    def __getitem__(self, name: str) -> ClassAllocation:
        return self.classes[name]


def ratio(value: Decimal, total: Decimal) -> Decimal:
    if total <= 0:
        return ZERO
    return value / total


def relative_deviation(target: Decimal, actual: Decimal) -> Optional[Decimal]:
    if target <= 0:
        return None
    return (target - actual) / target


def report_class(
    before: AssetClass,
    after: AssetClass,
    total_before: Decimal,
    total_after: Decimal,
) -> ClassAllocation:
    before_ratio = ratio(before.current_value, total_before)
    after_ratio = ratio(after.current_value, total_after)
    return ClassAllocation(
        name=before.name,
        target_ratio=before.target_ratio,
        value_before=before.current_value,
        delta=after.current_value - before.current_value,
        value_after=after.current_value,
        before_ratio=before_ratio,
        after_ratio=after_ratio,
        before_deviation=relative_deviation(before.target_ratio, before_ratio),
        after_deviation=relative_deviation(before.target_ratio, after_ratio),
        funds=before.tickers,
    )


def build_result(portfolio: Portfolio, amount: Decimal, deltas: Mapping[str, Decimal]) -> AllocationResult:
    """Derive the reported figures from a snapshot and its deltas."""
    after = portfolio.with_deltas(deltas)
    total_before = portfolio.total_value()
    total_after = after.total_value()
    classes = {
        b.name: report_class(b, a, total_before, total_after)
        for b, a in zip(portfolio.asset_classes, after.asset_classes)
    }
    return AllocationResult(
        amount=amount,
        total_before=total_before,
        new_total=total_after,
        classes=classes,
    )
