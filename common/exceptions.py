"""Exception hierarchy for the rebalancer.

Every error the engine raises derives from :class:`RebalancerError` so the CLI
can report it in one place. None of these are retried: the engine only ever
works on an already-resolved snapshot.
"""
from __future__ import annotations

from decimal import Decimal


class RebalancerError(Exception):
    """Base exception for all rebalancer errors."""

    pass


class ConfigurationError(RebalancerError):
    """Raised when the target configuration is invalid.

    Examples:
        - Target ratios do not sum to 1 within tolerance
        - A class has a negative or undefined target
        - Unknown target strategy or malformed birthday
    """

    pass


class ClassificationError(RebalancerError):
    """Raised when a fund cannot be mapped to a configured asset class."""

    def __init__(self, ticker: str, asset_class: str | None = None) -> None:
        self.ticker = ticker
        self.asset_class = asset_class
        if asset_class is None:
            msg = f"Fund {ticker} has no asset class classification"
        else:
            msg = f"Fund {ticker} is tagged with unknown asset class {asset_class!r}"
        super().__init__(msg)


class InsufficientHoldingsError(RebalancerError):
    """Raised when a withdrawal exceeds what the portfolio holds."""

    def __init__(self, requested: Decimal, available: Decimal) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot withdraw {requested:,.2f}: only {available:,.2f} is held"
        )


class DataError(RebalancerError):
    """Raised when a fund record carries corrupt data.

    Examples:
        - Negative share count
        - Negative price
        - Numeric field that cannot be parsed
    """

    pass
