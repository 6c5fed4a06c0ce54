from __future__ import annotations
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, List, Mapping, Tuple

from common.money import ZERO
from portfolio.asset_class import AssetClass

@dataclass(frozen=True)
class Portfolio:
    """Read-only snapshot of asset classes in declaration order."""

    asset_classes: Tuple[AssetClass, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "asset_classes", tuple(self.asset_classes))

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.asset_classes]

    @property
    def targets(self) -> Dict[str, Decimal]:
        return {c.name: c.target_ratio for c in self.asset_classes}

    def get(self, name: str) -> AssetClass:
        for c in self.asset_classes:
            if c.name == name:
                return c
        raise KeyError(name)

    def eligible(self) -> List[AssetClass]:
        return [c for c in self.asset_classes if c.eligible]

    def total_value(self) -> Decimal:
        return sum((c.current_value for c in self.asset_classes), ZERO)

    def withdrawable_value(self) -> Decimal:
        return sum((c.current_value for c in self.eligible()), ZERO)

    def current_values(self) -> Dict[str, Decimal]:
        return {c.name: c.current_value for c in self.asset_classes}

    def current_weights(self) -> Dict[str, Decimal]:
        total = self.total_value()
        vals = self.current_values()
        if total <= 0:
            return {t: ZERO for t in vals}
        return {t: v / total for t, v in vals.items()}

    def with_deltas(self, deltas: Mapping[str, Decimal]) -> "Portfolio":
        """Hypothetical snapshot with each class shifted by its delta."""
        return Portfolio(
            tuple(
                replace(c, adjustment=c.adjustment + deltas.get(c.name, ZERO))
                for c in self.asset_classes
            )
        )
