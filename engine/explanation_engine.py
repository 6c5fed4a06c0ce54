from __future__ import annotations
from typing import List
from common.money import format_dollars, format_percent
from engine.deviation import AllocationResult

def explain_allocation(result: AllocationResult) -> List[str]:
    lines = [
        f"Portfolio value before: {format_dollars(result.total_before)} after: {format_dollars(result.new_total)}"
    ]
    for c in result.classes.values():
        if c.delta < 0:
            action = f"Withdraw {format_dollars(-c.delta)} from {c.name}"
        else:
            action = f"Contribute {format_dollars(c.delta)} to {c.name}"
        if c.funds:
            action += f"  ({', '.join(c.funds)})"
        lines.append(action)
        lines.append(
            f"    Target: {format_percent(c.target_ratio)} "
            f"Start: {format_percent(c.before_ratio)} Final: {format_percent(c.after_ratio)}"
        )
    return lines
