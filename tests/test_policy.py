"""Tests for target generation.

Covers:
- Age-in-bonds ratio and its clamping
- Core Four split
- AllocationPolicy strategy resolution and config errors
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from common.exceptions import ConfigurationError
from policy.allocation_policy import AllocationPolicy
from policy.lazy_portfolio import (
    INTL_STOCKS,
    REIT,
    US_BONDS,
    US_SMALL,
    US_TOTAL,
    age_in_weeks,
    bond_allocation,
    core_four,
)

TODAY = date(2020, 1, 1)


class TestBondAllocation:
    """Tests for the age-in-bonds rule."""

    def test_forty_year_old(self):
        """2087 weeks old with from_years=120 -> 79.87% stocks."""
        assert bond_allocation(date(1980, 1, 1), 120, today=TODAY) == Decimal("0.2013")

    def test_age_in_weeks(self):
        assert age_in_weeks(date(1980, 1, 1), TODAY) == 2087

    def test_young_investor_clamped_to_zero(self):
        """Stock share above 100% means no bonds."""
        assert bond_allocation(date(2019, 1, 1), 120, today=TODAY) == 0

    def test_old_investor_clamped_to_one(self):
        """Negative stock share means all bonds."""
        assert bond_allocation(date(1880, 1, 1), 100, today=TODAY) == 1

    def test_future_birthday_fails(self):
        with pytest.raises(ConfigurationError, match="not in the past"):
            bond_allocation(date(2030, 1, 1), 120, today=TODAY)


class TestCoreFour:
    """Tests for the Core Four split."""

    def test_split(self):
        targets = core_four(Decimal("0.2"))

        assert targets == {
            US_BONDS: Decimal("0.2"),
            US_TOTAL: Decimal("0.264"),
            US_SMALL: Decimal("0.136"),
            INTL_STOCKS: Decimal("0.32"),
            REIT: Decimal("0.08"),
        }
        assert sum(targets.values()) == 1

    def test_bonds_listed_first(self):
        assert list(core_four(Decimal("0.5")))[0] == US_BONDS

    def test_negative_ratio_fails(self):
        with pytest.raises(ConfigurationError, match="must be positive"):
            core_four(Decimal("-0.1"))

    def test_ratio_above_one_fails(self):
        with pytest.raises(ConfigurationError, match="cannot exceed"):
            core_four(Decimal("1.1"))


class TestAllocationPolicy:
    """Tests for resolving targets from configuration."""

    def test_fixed_targets(self):
        policy = AllocationPolicy({"targets": {"US Stocks": 0.6, "US Bonds": 0.4}})

        alloc = policy.resolve_targets()

        assert policy.strategy == "fixed"
        assert alloc.targets == {"US Stocks": Decimal("0.6"), "US Bonds": Decimal("0.4")}

    def test_core_four_from_birthday(self):
        policy = AllocationPolicy(
            {
                "user": {"birthday": "1980-01-01"},
                "allocation": {"strategy": "core_four", "from_years": 120},
            }
        )

        alloc = policy.resolve_targets(today=TODAY)

        assert alloc.targets[US_BONDS] == Decimal("0.2013")
        assert alloc.total() == 1

    def test_birthday_as_yaml_date(self):
        """YAML parses unquoted dates to date objects."""
        policy = AllocationPolicy({"user": {"birthday": date(1980, 1, 1)}})

        assert policy.birthday == date(1980, 1, 1)

    def test_unknown_strategy_fails(self):
        with pytest.raises(ConfigurationError, match="Unknown target strategy"):
            AllocationPolicy({"allocation": {"strategy": "golden_butterfly"}}).strategy

    def test_missing_birthday_fails(self):
        policy = AllocationPolicy({"allocation": {"strategy": "core_four"}})

        with pytest.raises(ConfigurationError, match="requires user.birthday"):
            policy.resolve_targets(today=TODAY)

    def test_bad_birthday_fails(self):
        with pytest.raises(ConfigurationError, match="YYYY-MM-DD"):
            AllocationPolicy({"user": {"birthday": "01/01/1980"}}).birthday

    def test_targets_must_sum_to_one(self):
        policy = AllocationPolicy({"targets": {"US Stocks": 0.6, "US Bonds": 0.3}})

        with pytest.raises(ConfigurationError, match="sum to 1.0"):
            policy.resolve_targets()

    def test_configured_tolerance(self):
        """A looser tolerance accepts display-rounded targets."""
        policy = AllocationPolicy(
            {
                "allocation": {"ratio_tolerance": "0.001"},
                "targets": {"US Stocks": "0.4268", "US Bonds": "0.5730"},
            }
        )

        assert policy.ratio_tolerance == Decimal("0.001")
        assert policy.resolve_targets().names == ["US Stocks", "US Bonds"]

    @pytest.mark.parametrize("bad", ["old", None, [100], True])
    def test_invalid_from_years_fails(self, bad):
        policy = AllocationPolicy(
            {
                "user": {"birthday": "1980-01-01"},
                "allocation": {"strategy": "core_four", "from_years": bad},
            }
        )

        with pytest.raises(ConfigurationError, match="Invalid from_years"):
            policy.resolve_targets(today=TODAY)

    def test_from_years_defaults_to_120(self):
        assert AllocationPolicy({}).from_years == 120

    def test_negative_tolerance_fails(self):
        with pytest.raises(ConfigurationError, match="non-negative"):
            AllocationPolicy({"allocation": {"ratio_tolerance": -1}}).ratio_tolerance
