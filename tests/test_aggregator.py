"""Tests for portfolio aggregation and input loading.

Covers:
- Grouping funds into configured classes
- Configuration, classification and data errors
- Classification CSV and holdings YAML/CSV loaders
"""
from __future__ import annotations

from decimal import Decimal

import pytest

from common.exceptions import ClassificationError, ConfigurationError, DataError
from engine.aggregator import aggregate, classify_funds
from portfolio.allocation import TargetAllocation
from portfolio.classification import Classifications
from portfolio.fund import Fund
from portfolio.holdings_loader import load_holdings


TARGETS = {"US Stocks": "0.6", "International Stocks": "0.3", "US Bonds": "0.1"}


def make_funds() -> list[Fund]:
    return [
        Fund("VTSAX", "US Stocks", Decimal("10"), Decimal("100")),
        Fund("FZROX", "US Stocks", Decimal("50"), Decimal("15")),
        Fund("VTIAX", "International Stocks", Decimal("20"), Decimal("30")),
    ]


class TestAggregate:
    """Tests for grouping funds into a snapshot."""

    def test_groups_by_class(self):
        """Class values are sums of their funds."""
        p = aggregate(make_funds(), TARGETS)

        assert p.current_values() == {
            "US Stocks": Decimal("1750"),
            "International Stocks": Decimal("600"),
            "US Bonds": Decimal("0"),
        }
        assert p.total_value() == Decimal("2350")

    def test_preserves_declaration_order(self):
        """Classes appear in target order; funds keep input order."""
        p = aggregate(make_funds(), TARGETS)

        assert p.names == ["US Stocks", "International Stocks", "US Bonds"]
        assert p.get("US Stocks").tickers == ("VTSAX", "FZROX")

    def test_current_weights(self):
        p = aggregate(make_funds(), TARGETS)

        weights = p.current_weights()

        assert abs(weights["US Stocks"] - Decimal("0.7447")) < Decimal("0.0001")
        assert weights["US Bonds"] == 0

    def test_unknown_asset_class_fails(self):
        """A fund tagged with an unconfigured class is surfaced."""
        funds = make_funds() + [Fund("VGSLX", "REIT", Decimal("1"), Decimal("1"))]

        with pytest.raises(ClassificationError, match="VGSLX") as exc:
            aggregate(funds, TARGETS)

        assert exc.value.asset_class == "REIT"

    def test_targets_not_summing_to_one_fail(self):
        """Targets are never normalized silently."""
        with pytest.raises(ConfigurationError, match="sum to 1.0"):
            aggregate(make_funds(), {"US Stocks": "0.6", "US Bonds": "0.3"})

    def test_negative_target_fails(self):
        with pytest.raises(ConfigurationError, match="negative"):
            aggregate([], {"US Stocks": "-0.2", "US Bonds": "1.2"})

    def test_undefined_target_fails(self):
        with pytest.raises(ConfigurationError, match="undefined"):
            TargetAllocation.from_mapping({"US Stocks": None})

    def test_tolerance_allows_rounded_targets(self):
        """A looser tolerance accepts display-rounded targets."""
        p = aggregate([], {"A": "0.4999", "B": "0.5"}, tolerance=Decimal("0.001"))

        assert p.total_value() == 0

    def test_with_deltas_builds_new_snapshot(self):
        """Hypothetical snapshots leave the source snapshot unchanged."""
        p = aggregate(make_funds(), TARGETS)

        after = p.with_deltas({"US Bonds": Decimal("250")})

        assert after.get("US Bonds").current_value == Decimal("250")
        assert p.get("US Bonds").current_value == 0


class TestFundValidation:
    """Corrupt fund data is rejected, never clamped."""

    def test_negative_shares_fail(self):
        with pytest.raises(DataError, match="negative share"):
            Fund("VTSAX", "US Stocks", Decimal("-1"), Decimal("100"))

    def test_negative_price_fails(self):
        with pytest.raises(DataError, match="negative price"):
            Fund("VTSAX", "US Stocks", Decimal("1"), Decimal("-100"))

    def test_unparseable_shares_fail(self):
        with pytest.raises(DataError):
            Fund("VTSAX", "US Stocks", "lots", Decimal("100"))

    @pytest.mark.parametrize("price", ["NaN", "Infinity", "sNaN"])
    def test_non_finite_price_fails(self, price):
        with pytest.raises(DataError, match="price for VTSAX"):
            Fund("VTSAX", "US Stocks", Decimal("1"), price)

    def test_nan_shares_fail(self):
        with pytest.raises(DataError, match="shares for VTSAX"):
            Fund("VTSAX", "US Stocks", Decimal("NaN"), Decimal("100"))

    def test_value_is_exact(self):
        f = Fund("VTSAX", "US Stocks", "0.1", 0.2)

        assert f.value == Decimal("0.02")


class TestClassification:
    """Tests for the ticker lookup."""

    def test_from_csv(self, tmp_path):
        path = tmp_path / "classified.csv"
        path.write_text("ticker,asset_class\nVTSAX,US Stocks\nvbtlx,US Bonds\n")

        c = Classifications.from_csv(path)

        assert c.classify("VTSAX") == "US Stocks"
        assert c.classify("VBTLX") == "US Bonds"
        assert "vtsax" in c

    def test_unknown_ticker_fails(self, tmp_path):
        path = tmp_path / "classified.csv"
        path.write_text("ticker,asset_class\nVTSAX,US Stocks\n")

        with pytest.raises(ClassificationError, match="QQQ"):
            Classifications.from_csv(path).classify("QQQ")

    def test_missing_column_fails(self, tmp_path):
        path = tmp_path / "classified.csv"
        path.write_text("symbol,class\nVTSAX,US Stocks\n")

        with pytest.raises(ConfigurationError, match="missing columns"):
            Classifications.from_csv(path)

    def test_conflicting_rows_fail(self, tmp_path):
        path = tmp_path / "classified.csv"
        path.write_text("ticker,asset_class\nVTSAX,US Stocks\nVTSAX,REIT\n")

        with pytest.raises(ConfigurationError, match="both"):
            Classifications.from_csv(path)

    def test_classify_funds_uses_lookup(self):
        lookup = Classifications({"VTSAX": "US Stocks"})
        records = [
            {"ticker": "VTSAX", "shares": "2", "price": "50"},
            {"ticker": "VBTLX", "asset_class": "US Bonds", "shares": "1", "price": "10"},
        ]

        funds = classify_funds(records, lookup)

        assert [f.asset_class for f in funds] == ["US Stocks", "US Bonds"]

    def test_classify_funds_without_lookup_fails(self):
        with pytest.raises(ClassificationError, match="no asset class"):
            classify_funds([{"ticker": "VTSAX", "shares": "2", "price": "50"}])


class TestHoldingsLoader:
    """Tests for fund record files."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "holdings.yaml"
        path.write_text(
            "funds:\n"
            "  - {ticker: vtsax, asset_class: US Stocks, shares: '10.5', price: '100'}\n"
            "  - {ticker: VBTLX, shares: '3', price: '9.5'}\n"
        )

        records = load_holdings(path)

        assert records[0] == {"ticker": "VTSAX", "asset_class": "US Stocks", "shares": "10.5", "price": "100"}
        assert "asset_class" not in records[1]

    def test_csv_with_fractions(self, tmp_path):
        """Ledger-style fractional quantities survive exactly."""
        path = tmp_path / "holdings.csv"
        path.write_text("ticker,shares,price,asset_class\nVTSAX,12050/100,98.12,US Stocks\n")

        records = load_holdings(path)
        funds = classify_funds(records)

        assert funds[0].shares == Decimal("120.5")
        assert funds[0].value == Decimal("120.5") * Decimal("98.12")

    def test_missing_price_fails(self, tmp_path):
        path = tmp_path / "holdings.csv"
        path.write_text("ticker,shares,price\nVTSAX,10,\n")

        with pytest.raises(DataError, match="no price"):
            load_holdings(path)
