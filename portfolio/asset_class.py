from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple

from common.money import ZERO
from portfolio.fund import Fund

@dataclass(frozen=True)
class AssetClass:
    name: str
    target_ratio: Decimal
    funds: Tuple[Fund, ...] = field(default_factory=tuple)
    adjustment: Decimal = ZERO  # pending contribution (+) or withdrawal (-)

    @property
    def holdings_value(self) -> Decimal:
        return sum((f.value for f in self.funds), ZERO)

    @property
    def current_value(self) -> Decimal:
        return self.holdings_value + self.adjustment

    @property
    def eligible(self) -> bool:
        """Zero-target classes never receive or give money."""
        return self.target_ratio > 0

    @property
    def level(self) -> Optional[Decimal]:
        """Value per unit of target weight; lower means more underweight."""
        if not self.eligible:
            return None
        return self.current_value / self.target_ratio

    @property
    def tickers(self) -> Tuple[str, ...]:
        return tuple(f.ticker for f in self.funds)
