"""Lazy-portfolio target generation.

Targets can be fixed in configuration or derived from the investor's age:

- "Age in bonds": hold ``from_years - age`` percent in stocks, the rest in bonds.
  ``from_years=100`` is the classic rule; 110 and 120 are more aggressive.
- "Core Four": split the stock share 33/17/40/10 between US total market,
  US small/mid cap, international stocks and REITs. The small-cap slice tilts
  a total-market fund (roughly 75% large cap) back toward a 50/50 size split.
"""
from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Dict, Optional

from common.exceptions import ConfigurationError
from common.money import HUNDRED, ONE, ZERO

US_BONDS = "US Bonds"
US_TOTAL = "US Total"
US_SMALL = "US Small"
INTL_STOCKS = "International Stocks"
REIT = "REIT"

CORE_FOUR_STOCK_SPLIT = {
    US_TOTAL: Decimal("0.33"),
    US_SMALL: Decimal("0.17"),
    INTL_STOCKS: Decimal("0.40"),
    REIT: Decimal("0.10"),
}

WEEKS_PER_YEAR = Decimal(52)


def age_in_weeks(birthday: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    if birthday >= today:
        raise ConfigurationError(f"Birthday {birthday.isoformat()} is not in the past")
    return (today - birthday).days // 7


def bond_allocation(birthday: date, from_years: int, today: Optional[date] = None) -> Decimal:
    """Bond ratio from the "age in bonds" rule, adjusted weekly.

    Args:
        birthday: Investor's date of birth.
        from_years: Stock share is ``from_years - age`` percent (100, 110, 120).
        today: Evaluation date (defaults to today).

    Returns:
        Bond ratio in [0, 1].
    """
    age = Decimal(age_in_weeks(birthday, today)) / WEEKS_PER_YEAR
    stock_pct = (Decimal(from_years) - age).quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)
    stock_ratio = stock_pct / HUNDRED

    # Young investors would get negative bonds, very old ones more than 100%
    if stock_ratio > ONE:
        return ZERO
    if stock_ratio < ZERO:
        return ONE
    return ONE - stock_ratio


def core_four(ratio_bonds: Decimal) -> Dict[str, Decimal]:
    """Core Four targets for a given bond ratio.

    Raises:
        ConfigurationError: If ``ratio_bonds`` is outside [0, 1].
    """
    if ratio_bonds < ZERO:
        raise ConfigurationError(f"Bond ratio must be positive, got {ratio_bonds}")
    if ratio_bonds > ONE:
        raise ConfigurationError(f"Bond ratio cannot exceed 100%, got {ratio_bonds}")

    ratio_stocks = ONE - ratio_bonds
    targets = {US_BONDS: ratio_bonds}
    for name, share in CORE_FOUR_STOCK_SPLIT.items():
        targets[name] = share * ratio_stocks
    return targets
