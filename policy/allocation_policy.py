from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Any, Optional

from common.exceptions import ConfigurationError, DataError
from common.money import to_decimal
from policy.lazy_portfolio import bond_allocation, core_four
from portfolio.allocation import DEFAULT_RATIO_TOLERANCE, TargetAllocation

STRATEGIES = ("fixed", "core_four")

@dataclass(frozen=True)
class AllocationPolicy:
    raw: Dict[str, Any]

    @property
    def _section(self) -> Dict[str, Any]:
        return self.raw.get("allocation") or {}

    @property
    def strategy(self) -> str:
        s = str(self._section.get("strategy", "fixed"))
        if s not in STRATEGIES:
            raise ConfigurationError(f"Unknown target strategy {s!r}; expected one of {STRATEGIES}")
        return s

    @property
    def ratio_tolerance(self) -> Decimal:
        value = self._section.get("ratio_tolerance")
        if value is None:
            return DEFAULT_RATIO_TOLERANCE
        try:
            tol = to_decimal(value, "ratio_tolerance")
        except DataError as e:
            raise ConfigurationError(str(e)) from e
        if tol < 0:
            raise ConfigurationError(f"ratio_tolerance must be non-negative, got {tol}")
        return tol

    @property
    def targets(self) -> TargetAllocation:
        return TargetAllocation.from_mapping(self.raw.get("targets") or {})

    @property
    def birthday(self) -> date:
        value = (self.raw.get("user") or {}).get("birthday")
        if isinstance(value, date):
            return value
        if not value:
            raise ConfigurationError("core_four strategy requires user.birthday")
        try:
            return datetime.strptime(str(value), "%Y-%m-%d").date()
        except ValueError:
            raise ConfigurationError(f"Invalid birthday {value!r}; expected YYYY-MM-DD") from None

    @property
    def from_years(self) -> int:
        value = self._section.get("from_years", 120)
        if isinstance(value, bool):
            raise ConfigurationError(f"Invalid from_years {value!r}; expected a whole number of years")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid from_years {value!r}; expected a whole number of years") from None

    def resolve_targets(self, today: Optional[date] = None) -> TargetAllocation:
        """Targets for this run, validated against the configured tolerance."""
        if self.strategy == "core_four":
            ratio_bonds = bond_allocation(self.birthday, self.from_years, today)
            alloc = TargetAllocation(targets=core_four(ratio_bonds))
        else:
            alloc = self.targets
        alloc.validate_sum_to_one(self.ratio_tolerance)
        return alloc
