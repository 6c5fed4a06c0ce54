from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping

from common.exceptions import ConfigurationError, DataError
from common.money import ONE, ZERO, to_decimal

DEFAULT_RATIO_TOLERANCE = Decimal("0.000001")

@dataclass(frozen=True)
class TargetAllocation:
    targets: Dict[str, Decimal]  # asset class -> ratio, declaration order

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "TargetAllocation":
        targets: Dict[str, Decimal] = {}
        for name, ratio in (raw or {}).items():
            if ratio is None:
                raise ConfigurationError(f"Asset class {name!r} has an undefined target ratio")
            try:
                targets[str(name)] = to_decimal(ratio, f"target ratio for {name}")
            except DataError as e:
                raise ConfigurationError(str(e)) from e
        return cls(targets=targets)

    @property
    def names(self) -> list[str]:
        return list(self.targets)

    def total(self) -> Decimal:
        return sum(self.targets.values(), ZERO)

    def validate_sum_to_one(self, tol: Decimal = DEFAULT_RATIO_TOLERANCE) -> None:
        if not self.targets:
            raise ConfigurationError("No asset classes configured")
        for name, ratio in self.targets.items():
            if ratio < 0:
                raise ConfigurationError(f"Asset class {name!r} has negative target {ratio}")
            if ratio > ONE:
                raise ConfigurationError(f"Asset class {name!r} target {ratio} exceeds 100%")
        s = self.total()
        if abs(s - ONE) > tol:
            raise ConfigurationError(f"Targets must sum to 1.0, got {s}")
