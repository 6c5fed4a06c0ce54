"""Portfolio aggregation.

Turns tagged fund records into a :class:`Portfolio` snapshot: one asset class
per configured target, in declaration order, each holding its funds.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from common.exceptions import ClassificationError
from common.logging_utils import get_logger
from portfolio.allocation import DEFAULT_RATIO_TOLERANCE, TargetAllocation
from portfolio.asset_class import AssetClass
from portfolio.classification import Classifications
from portfolio.fund import Fund
from portfolio.portfolio import Portfolio

logger = get_logger(__name__)

Targets = Union[TargetAllocation, Mapping[str, Any]]


def classify_funds(
    records: Iterable[Mapping[str, Any]],
    classifications: Optional[Classifications] = None,
) -> List[Fund]:
    """Build Fund values from raw records.

    A record's own ``asset_class`` wins; otherwise the ticker is looked up in
    ``classifications``.

    Raises:
        ClassificationError: If a record has no class and no lookup entry.
        DataError: If shares or price are negative or unparseable.
    """
    funds: List[Fund] = []
    for r in records:
        ticker = str(r["ticker"])
        asset_class = r.get("asset_class")
        if not asset_class:
            if classifications is None:
                raise ClassificationError(ticker)
            asset_class = classifications.classify(ticker)
        funds.append(Fund(ticker=ticker, asset_class=str(asset_class), shares=r["shares"], price=r["price"]))
    return funds


def aggregate(funds: Iterable[Fund], targets: Targets, tolerance=DEFAULT_RATIO_TOLERANCE) -> Portfolio:
    """Group funds by asset class into a validated snapshot.

    Args:
        funds: Fund values already tagged with an asset class.
        targets: Target ratio per class, in declaration order.
        tolerance: Allowed distance of the target sum from 1.

    Returns:
        Portfolio snapshot.

    Raises:
        ConfigurationError: If targets are invalid.
        ClassificationError: If a fund's class is not configured.
    """
    alloc = targets if isinstance(targets, TargetAllocation) else TargetAllocation.from_mapping(targets)
    alloc.validate_sum_to_one(tolerance)

    grouped: Dict[str, List[Fund]] = {name: [] for name in alloc.targets}
    for f in funds:
        if f.asset_class not in grouped:
            raise ClassificationError(f.ticker, f.asset_class)
        grouped[f.asset_class].append(f)

    portfolio = Portfolio(
        tuple(
            AssetClass(name=name, target_ratio=ratio, funds=tuple(grouped[name]))
            for name, ratio in alloc.targets.items()
        )
    )
    logger.debug(
        "Aggregated %d funds into %d asset classes, total %s",
        sum(len(v) for v in grouped.values()),
        len(portfolio.asset_classes),
        portfolio.total_value(),
    )
    return portfolio
