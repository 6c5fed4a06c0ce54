from __future__ import annotations
from typing import Dict, Any
from engine.deviation import ratio, relative_deviation
from engine.equalization import minimum_to_equalize
from portfolio.portfolio import Portfolio

def portfolio_summary(portfolio: Portfolio) -> Dict[str, Any]:
    total = portfolio.total_value()
    classes = []
    for c in portfolio.asset_classes:
        actual = ratio(c.current_value, total)
        classes.append({
            "name": c.name,
            "value": c.current_value,
            "ratio": actual,
            "target": c.target_ratio,
            "level": c.level,
            "deviation": relative_deviation(c.target_ratio, actual),
            "funds": list(c.tickers),
        })
    return {
        "total_value": total,
        "asset_classes": classes,
        "minimum_to_equalize": minimum_to_equalize(portfolio),
    }
