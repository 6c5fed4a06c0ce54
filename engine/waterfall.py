"""Waterfall (water-filling) allocation of a contribution or withdrawal.

Each eligible class has a *level*: its value divided by its target ratio. A
lower level means the class is further underweight.

Contribution:
1. Sort classes by level, most underweight first (ties keep declaration order).
2. Fill the first class until its level ties the next one.
3. Fill the tied group together, in proportion to target, until it ties the
   next class; repeat until the money runs out.

Withdrawal mirrors this from the top: the most overweight classes are drawn
down first. No class gives more than it holds.

The exact split is rounded to whole cents by handing cents out in the order
the rising water reaches them, so the deltas sum to the requested amount and
a larger amount never gives any class less. Classes with a zero target never
receive or give money.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Dict, List, Sequence, Tuple

from common.exceptions import InsufficientHoldingsError
from common.logging_utils import get_logger
from common.money import CENT, ZERO, to_decimal
from engine.deviation import AllocationResult, build_result
from portfolio.asset_class import AssetClass
from portfolio.portfolio import Portfolio

logger = get_logger(__name__)

CONTRIBUTE = 1
WITHDRAW = -1


@dataclass(frozen=True)
class AllocationRequest:
    """Signed amount to allocate: positive contributes, negative withdraws."""

    amount: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount, "amount"))

    @property
    def is_contribution(self) -> bool:
        return self.amount > 0

    @property
    def is_withdrawal(self) -> bool:
        return self.amount < 0


def sorted_pool(portfolio: Portfolio, direction: int = CONTRIBUTE) -> List[AssetClass]:
    """Eligible classes, most extreme first for the given direction.

    ``sorted`` is stable, so equal levels stay in declaration order.
    """
    return sorted(portfolio.eligible(), key=lambda c: direction * c.level)


def cost_to_level(pool: Sequence[AssetClass], level: Decimal) -> Decimal:
    """Money needed to raise every class in ``pool`` to at least ``level``."""
    return sum(
        (c.target_ratio * (level - c.level) for c in pool if c.level < level),
        ZERO,
    )


def _water_level(pool: Sequence[AssetClass], budget: Decimal, direction: int) -> Decimal:
    """Exact water level after spreading ``budget`` (>= 0) over ``pool``.

    Levels are mirrored for withdrawals (``direction * level``) so one loop
    serves both directions. ``pool`` is ordered as by :func:`sorted_pool`.
    """
    levels = [direction * c.level for c in pool]
    level = levels[0]
    weight = ZERO
    remaining = budget

    for i, c in enumerate(pool):
        weight += c.target_ratio
        if i + 1 == len(pool):
            break
        cost = weight * (levels[i + 1] - level)
        if remaining < cost:
            break
        remaining -= cost
        level = levels[i + 1]

    return level + remaining / weight


def _whole_cents(amount: Decimal) -> int:
    return int((amount / CENT).to_integral_value(rounding=ROUND_FLOOR))


def _cent_point(c: AssetClass, n: int, direction: int) -> Decimal:
    """Mirrored water level at which ``c`` has moved its n-th cent."""
    return direction * c.level + n * CENT / c.target_ratio


def _apportion(
    pool: Sequence[AssetClass],
    level: Decimal,
    amount: Decimal,
    direction: int,
) -> Dict[str, Decimal]:
    """Round the split at ``level`` to whole cents.

    Each class takes its n-th cent when the water reaches its cent point;
    cents go out in that order, ties in pool order. A larger amount only
    appends cents, so no class ever gets less for a larger amount.

    Withdrawn cents are capped at holdings. What is left below a cent goes to
    the first class in the pool that can take it.
    """
    budget = abs(amount)
    wanted = _whole_cents(budget)
    rank = {c.name: i for i, c in enumerate(pool)}
    caps = {c.name: _whole_cents(c.current_value) if direction == WITHDRAW else None for c in pool}

    def point(c: AssetClass, n: int) -> Tuple[Decimal, int]:
        return _cent_point(c, n, direction), rank[c.name]

    steps: Dict[str, int] = {}
    for c in pool:
        moved = c.target_ratio * (level - direction * c.level)
        n = _whole_cents(moved) if moved > 0 else 0
        cap = caps[c.name]
        steps[c.name] = n if cap is None else min(n, cap)

    taken = sum(steps.values())
    # Decimal precision can land the level just past a cent point
    while taken > wanted:
        last = max((c for c in pool if steps[c.name] > 0), key=lambda c: point(c, steps[c.name]))
        steps[last.name] -= 1
        taken -= 1
    while taken < wanted:
        open_ = [c for c in pool if caps[c.name] is None or steps[c.name] < caps[c.name]]
        if not open_:
            break
        nxt = min(open_, key=lambda c: point(c, steps[c.name] + 1))
        steps[nxt.name] += 1
        taken += 1

    moved_by = {name: n * CENT for name, n in steps.items()}
    rest = budget - taken * CENT
    for c in pool:
        if rest <= 0:
            break
        room = rest if direction == CONTRIBUTE else min(rest, c.current_value - moved_by[c.name])
        moved_by[c.name] += room
        rest -= room

    logger.debug("Apportioned %d cents; %s left below a cent", taken, budget - taken * CENT)
    # ZERO - d keeps an untouched class at unsigned zero
    return {name: d if direction == CONTRIBUTE else ZERO - d for name, d in moved_by.items()}


def waterfall_deltas(portfolio: Portfolio, amount: Decimal) -> Dict[str, Decimal]:
    """Per-class deltas for a signed amount, in declaration order.

    Raises:
        DataError: If ``amount`` is not a finite number.
        InsufficientHoldingsError: If a withdrawal exceeds what eligible
            classes hold.
    """
    amount = to_decimal(amount, "amount")
    deltas = {name: ZERO for name in portfolio.names}
    if amount == 0:
        return deltas

    direction = CONTRIBUTE if amount > 0 else WITHDRAW
    budget = abs(amount)
    if direction == WITHDRAW:
        available = portfolio.withdrawable_value()
        if budget > available:
            raise InsufficientHoldingsError(budget, available)

    pool = sorted_pool(portfolio, direction)
    level = _water_level(pool, budget, direction)
    logger.debug("Water level %s reached", direction * level)

    deltas.update(_apportion(pool, level, amount, direction))
    logger.info(
        "Allocated %s across %d of %d classes",
        amount,
        sum(1 for d in deltas.values() if d != 0),
        len(deltas),
    )
    return deltas


def allocate(portfolio: Portfolio, request: AllocationRequest) -> AllocationResult:
    """Allocate a contribution or withdrawal across the portfolio's classes."""
    deltas = waterfall_deltas(portfolio, request.amount)
    return build_result(portfolio, request.amount, deltas)


def final_levels(result: AllocationResult) -> Dict[str, Tuple[Decimal, Decimal]]:
    """(before, after) level per eligible class of an allocation result."""
    return {
        name: (c.value_before / c.target_ratio, c.value_after / c.target_ratio)
        for name, c in result.classes.items()
        if c.target_ratio > 0
    }
