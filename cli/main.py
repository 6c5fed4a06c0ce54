"""Rebalancer CLI.

Provides commands for:
- status: Current asset-class values, ratios and deviations
- allocate: Split one contribution or withdrawal across asset classes
- equalize: Minimum contribution that brings every class to target
- interactive: Ask repeatedly for amounts against one snapshot
- targets: Show the resolved target ratios
"""
from __future__ import annotations

import argparse
from decimal import Decimal
from typing import Callable, List, Optional

from common.config_loader import (
    DEFAULT_CLASSIFICATIONS_PATH,
    DEFAULT_HOLDINGS_PATH,
    DEFAULT_POLICY_PATH,
    load_all,
)
from common.exceptions import DataError, RebalancerError
from common.logging_utils import get_logger, setup_logging
from common.money import format_dollars, format_percent, format_signed_percent, to_decimal
from engine.aggregator import aggregate, classify_funds
from engine.equalization import minimum_to_equalize
from engine.explanation_engine import explain_allocation
from engine.waterfall import AllocationRequest, allocate
from policy.allocation_policy import AllocationPolicy
from portfolio.classification import Classifications
from portfolio.holdings_loader import load_holdings
from portfolio.portfolio import Portfolio
from reporting.explainability import allocation_table
from reporting.summary import portfolio_summary

logger = get_logger(__name__)

QUIT_WORDS = {"", "q", "quit", "exit"}


def build_portfolio(cfg) -> Portfolio:
    """Build the portfolio snapshot from loaded configuration."""
    policy = AllocationPolicy(cfg.policy)
    targets = policy.resolve_targets()

    classifications = None
    if cfg.classifications_path is not None:
        classifications = Classifications.from_csv(cfg.classifications_path)

    records = load_holdings(cfg.holdings_path)
    funds = classify_funds(records, classifications)
    return aggregate(funds, targets, tolerance=policy.ratio_tolerance)


def _load(args) -> Portfolio:
    cfg = load_all(args.config, args.holdings, args.classifications)
    return build_portfolio(cfg)


def print_allocation(portfolio: Portfolio, amount: Decimal, table: bool = False) -> None:
    result = allocate(portfolio, AllocationRequest(amount))
    if table:
        print(allocation_table(result).to_string())
    else:
        for line in explain_allocation(result):
            print(line)


def cmd_status(args) -> int:
    """Handle status command: current snapshot."""
    portfolio = _load(args)
    summary = portfolio_summary(portfolio)

    print(f"Portfolio value: {format_dollars(summary['total_value'])}")
    print("=" * 60)
    for c in summary["asset_classes"]:
        print(
            f"  {c['name']:22} {format_dollars(c['value']):>14}  "
            f"{format_percent(c['ratio']):>7} (target {format_percent(c['target'])}, "
            f"deviation {format_signed_percent(c['deviation'])})"
        )
        if c["funds"]:
            print(f"      funds: {', '.join(c['funds'])}")
    print(f"\nMinimum to bring all assets to target: {format_dollars(summary['minimum_to_equalize'])}")
    return 0


def cmd_allocate(args) -> int:
    """Handle allocate command: one contribution or withdrawal."""
    portfolio = _load(args)
    print_allocation(portfolio, to_decimal(args.amount, "amount"), table=args.table)
    return 0


def cmd_equalize(args) -> int:
    """Handle equalize command: minimum buy-only amount to reach target."""
    portfolio = _load(args)
    print(f"Minimum to bring all assets to target: {format_dollars(minimum_to_equalize(portfolio))}")
    return 0


def run_session(
    portfolio: Portfolio,
    read: Callable[[str], str] = input,
    table: bool = False,
) -> int:
    """Ask for amounts until the user quits; each query is independent.

    Returns:
        Number of allocations printed.
    """
    count = 0
    print(f"Minimum to bring all assets to target: {format_dollars(minimum_to_equalize(portfolio))}")
    while True:
        try:
            answer = read("How much to contribute or withdraw? ").strip()
        except EOFError:
            break
        if answer.lower() in QUIT_WORDS:
            break
        try:
            amount = to_decimal(answer, "amount")
        except DataError:
            print("Please type a number!")
            continue
        try:
            print_allocation(portfolio, amount, table=table)
        except RebalancerError as e:
            print(f"Error: {e}")
            continue
        count += 1
        print()
    return count


def cmd_interactive(args) -> int:
    """Handle interactive command: session loop over one snapshot."""
    portfolio = _load(args)
    run_session(portfolio, table=args.table)
    return 0


def cmd_targets(args) -> int:
    """Handle targets command: show resolved target ratios."""
    cfg = load_all(args.config, args.holdings, args.classifications)
    policy = AllocationPolicy(cfg.policy)
    alloc = policy.resolve_targets()
    print(f"Target allocation (strategy: {policy.strategy})")
    print("=" * 40)
    for name, ratio in alloc.targets.items():
        print(f"  {name:24} {format_percent(ratio):>8}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="Rebalancer CLI: split contributions and withdrawals across asset classes",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for all commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=DEFAULT_POLICY_PATH, help="Policy config file")
    common.add_argument("--holdings", default=DEFAULT_HOLDINGS_PATH, help="Fund holdings (YAML or CSV)")
    common.add_argument(
        "--classifications",
        default=DEFAULT_CLASSIFICATIONS_PATH,
        help="Ticker to asset class CSV",
    )
    common.add_argument("--log-level", default="WARNING", help="Logging level")

    st = sub.add_parser("status", parents=[common], help="Show current allocation")
    st.set_defaults(func=cmd_status)

    al = sub.add_parser("allocate", parents=[common], help="Allocate a contribution or withdrawal")
    al.add_argument(
        "--amount",
        required=True,
        help="Amount to contribute (positive) or withdraw (negative)",
    )
    al.add_argument("--table", action="store_true", help="Print a table instead of prose")
    al.set_defaults(func=cmd_allocate)

    eq = sub.add_parser("equalize", parents=[common], help="Minimum contribution to reach target")
    eq.set_defaults(func=cmd_equalize)

    it = sub.add_parser("interactive", parents=[common], help="Ask repeatedly for amounts")
    it.add_argument("--table", action="store_true", help="Print tables instead of prose")
    it.set_defaults(func=cmd_interactive)

    tg = sub.add_parser("targets", parents=[common], help="Show resolved target ratios")
    tg.set_defaults(func=cmd_targets)

    return p


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        code = args.func(args)
    except (RebalancerError, FileNotFoundError) as e:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"Error: {e}")
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
