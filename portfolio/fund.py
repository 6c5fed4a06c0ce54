from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal

from common.exceptions import DataError
from common.money import to_decimal

@dataclass(frozen=True)
class Fund:
    ticker: str
    asset_class: str
    shares: Decimal
    price: Decimal

    def __post_init__(self) -> None:
        shares = to_decimal(self.shares, f"shares for {self.ticker}")
        price = to_decimal(self.price, f"price for {self.ticker}")
        if shares < 0:
            raise DataError(f"Fund {self.ticker} has negative share count {shares}")
        if price < 0:
            raise DataError(f"Fund {self.ticker} has negative price {price}")
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "shares", shares)
        object.__setattr__(self, "price", price)

    @property
    def value(self) -> Decimal:
        return self.shares * self.price
