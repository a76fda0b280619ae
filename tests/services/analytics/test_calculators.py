# tests/services/analytics/test_calculators.py
"""
Unit tests for the point-in-time analytics calculators.

These tests verify the pure calculation logic WITHOUT database dependencies,
using the frozen record types the record store produces.

Test Coverage:
- to_decimal: Coercion of missing and malformed numbers
- HoldingsAggregator: Quantity and net-invested replay
- PricingResolver: Journal -> average cost -> initial price
- ValuationEngine: Value clamping and gain formulas
- PortfolioSummarizer: Totals, allocation, grouping, top performers
"""

import random
from datetime import date, datetime
from decimal import Decimal

import pytest

from portfolio_journal.models import TransactionType
from portfolio_journal.services.analytics.calculators import (
    HoldingsAggregator,
    PortfolioSummarizer,
    PricingResolver,
    ValuationEngine,
    normalize_transaction_type,
    percentage_of,
    to_decimal,
)
from portfolio_journal.services.analytics.types import (
    HoldingTotals,
    PriceSource,
    ResolvedPrice,
)
from tests.conftest import make_entry, make_investment, make_txn


# =============================================================================
# HELPERS
# =============================================================================

def _valuate(investment, transactions, latest_entry=None):
    totals = HoldingsAggregator().aggregate(
        investment.id, transactions, investment.initial_price_per_unit
    )
    resolved = PricingResolver().resolve(latest_entry, totals, investment.initial_price_per_unit)
    return ValuationEngine().calculate(investment, totals, resolved)


# =============================================================================
# NUMERIC COERCION
# =============================================================================

class TestToDecimal:
    """Tests for to_decimal()."""

    @pytest.mark.parametrize("value", [None, "", "abc", "NaN", "Infinity", float("nan"), float("inf"), True])
    def test_malformed_values_become_zero(self, value):
        assert to_decimal(value) == Decimal("0")

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_numeric_string_is_parsed(self):
        assert to_decimal(" 12.50 ") == Decimal("12.50")

    def test_decimal_passes_through(self):
        assert to_decimal(Decimal("3.14159")) == Decimal("3.14159")

    def test_int(self):
        assert to_decimal(7) == Decimal("7")


class TestNormalizeTransactionType:

    @pytest.mark.parametrize("value, expected", [
        ("buy", TransactionType.BUY),
        ("SELL", TransactionType.SELL),
        (" Buy ", TransactionType.BUY),
        (TransactionType.SELL, TransactionType.SELL),
    ])
    def test_known_kinds(self, value, expected):
        assert normalize_transaction_type(value) == expected

    @pytest.mark.parametrize("value", ["dividend", "", None, 3])
    def test_unknown_kinds(self, value):
        assert normalize_transaction_type(value) is None


# =============================================================================
# HOLDINGS AGGREGATOR
# =============================================================================

class TestHoldingsAggregator:
    """Tests for HoldingsAggregator."""

    def test_single_buy(self):
        totals = HoldingsAggregator().aggregate(1, [make_txn(1, "buy", "10", "1000")])

        assert totals.total_quantity == Decimal("10")
        assert totals.net_invested == Decimal("1000")
        assert totals.avg_cost_per_unit == Decimal("100")
        assert totals.last_transaction_date == date(2024, 1, 15)

    def test_buy_then_partial_sell(self):
        totals = HoldingsAggregator().aggregate(1, [
            make_txn(1, "buy", "10", "1000", date(2024, 1, 1)),
            make_txn(2, "sell", "4", "600", date(2024, 6, 1)),
        ])

        assert totals.total_quantity == Decimal("6")
        assert totals.net_invested == Decimal("400")
        assert totals.avg_cost_per_unit == Decimal("400") / Decimal("6")
        assert totals.last_transaction_date == date(2024, 6, 1)

    def test_order_independent(self):
        """Any permutation of the transactions gives the same totals."""
        transactions = [
            make_txn(1, "buy", "10", "1000", date(2024, 1, 1)),
            make_txn(2, "buy", "5", "600", date(2024, 2, 1)),
            make_txn(3, "sell", "3", "450", date(2024, 3, 1)),
            make_txn(4, "buy", "0.5", "61.25", date(2024, 4, 1)),
            make_txn(5, "sell", "2", "250", date(2024, 5, 1)),
        ]
        expected = HoldingsAggregator().aggregate(1, transactions)

        rng = random.Random(42)
        for _ in range(10):
            shuffled = transactions[:]
            rng.shuffle(shuffled)
            assert HoldingsAggregator().aggregate(1, shuffled) == expected

    def test_oversell_goes_negative(self):
        totals = HoldingsAggregator().aggregate(1, [
            make_txn(1, "buy", "5", "500"),
            make_txn(2, "sell", "8", "900"),
        ])

        assert totals.total_quantity == Decimal("-3")
        assert totals.net_invested == Decimal("-400")

    def test_zero_quantity_uses_initial_price(self):
        totals = HoldingsAggregator().aggregate(
            1,
            [make_txn(1, "buy", "10", "500"), make_txn(2, "sell", "10", "1000")],
            initial_price_per_unit=Decimal("50"),
        )

        assert totals.total_quantity == Decimal("0")
        assert totals.avg_cost_per_unit == Decimal("50")

    def test_no_transactions(self):
        totals = HoldingsAggregator().aggregate(1, [], initial_price_per_unit="25")

        assert totals.total_quantity == Decimal("0")
        assert totals.net_invested == Decimal("0")
        assert totals.avg_cost_per_unit == Decimal("25")
        assert totals.last_transaction_date is None

    def test_unknown_type_is_ignored(self):
        totals = HoldingsAggregator().aggregate(1, [
            make_txn(1, "buy", "10", "1000"),
            make_txn(2, "dividend", "99", "99", date(2024, 9, 1)),
        ])

        assert totals.total_quantity == Decimal("10")
        assert totals.net_invested == Decimal("1000")

    def test_malformed_numbers_count_as_zero(self):
        totals = HoldingsAggregator().aggregate(1, [
            make_txn(1, "buy", "10", "1000"),
            make_txn(2, "buy", None, "not-a-number"),
        ])

        assert totals.total_quantity == Decimal("10")
        assert totals.net_invested == Decimal("1000")

    def test_datetime_and_string_dates(self):
        totals = HoldingsAggregator().aggregate(1, [
            make_txn(1, "buy", "1", "10", datetime(2024, 3, 5, 14, 30)),
            make_txn(2, "buy", "1", "10", "2024-04-20"),
        ])

        assert totals.last_transaction_date == date(2024, 4, 20)


# =============================================================================
# PRICING RESOLVER
# =============================================================================

class TestPricingResolver:
    """Tests for PricingResolver."""

    def _totals(self, avg_cost: str) -> HoldingTotals:
        return HoldingTotals(
            investment_id=1,
            total_quantity=Decimal("10"),
            net_invested=Decimal("1000"),
            avg_cost_per_unit=Decimal(avg_cost),
        )

    def test_journal_price_wins(self):
        resolved = PricingResolver().resolve(make_entry(1, "120"), self._totals("100"), "90")

        assert resolved == ResolvedPrice(price=Decimal("120"), source=PriceSource.JOURNAL)

    def test_zero_journal_price_falls_back_to_average_cost(self):
        resolved = PricingResolver().resolve(make_entry(1, "0"), self._totals("100"), "90")

        assert resolved.price == Decimal("100")
        assert resolved.source == PriceSource.AVERAGE_COST

    def test_no_journal_uses_average_cost(self):
        resolved = PricingResolver().resolve(None, self._totals("100"), "90")

        assert resolved.source == PriceSource.AVERAGE_COST

    def test_non_positive_average_cost_uses_initial_price(self):
        resolved = PricingResolver().resolve(None, self._totals("-5"), "90")

        assert resolved == ResolvedPrice(price=Decimal("90"), source=PriceSource.INITIAL_PRICE)

    def test_everything_missing_gives_zero(self):
        """The resolver is total: it never fails, worst case price 0."""
        resolved = PricingResolver().resolve(make_entry(1, None), self._totals("0"), None)

        assert resolved.price == Decimal("0")
        assert resolved.source == PriceSource.INITIAL_PRICE


# =============================================================================
# VALUATION ENGINE
# =============================================================================

class TestValuationEngine:
    """Tests for ValuationEngine."""

    def test_journal_priced_gain(self):
        """10 units bought for 1000, journal price 120 -> value 1200, gain 20%."""
        valuation = _valuate(
            make_investment(),
            [make_txn(1, "buy", "10", "1000")],
            make_entry(1, "120"),
        )

        assert valuation.current_value == Decimal("1200")
        assert valuation.gain == Decimal("200")
        assert valuation.gain_percent == Decimal("20")
        assert valuation.price_source == PriceSource.JOURNAL

    def test_full_selloff(self):
        """Bought 10 for 500, sold 10 for 1000: nothing held, basis clamped."""
        valuation = _valuate(
            make_investment(initial_price_per_unit="50"),
            [make_txn(1, "buy", "10", "500"), make_txn(2, "sell", "10", "1000")],
        )

        assert valuation.totals.net_invested == Decimal("-500")
        assert valuation.current_value == Decimal("0")
        assert valuation.gain == Decimal("0")
        assert valuation.gain_percent == Decimal("0")

    def test_oversold_value_is_zero(self):
        valuation = _valuate(
            make_investment(),
            [make_txn(1, "buy", "5", "500"), make_txn(2, "sell", "8", "400")],
            make_entry(1, "150"),
        )

        assert valuation.totals.total_quantity == Decimal("-3")
        assert valuation.current_value == Decimal("0")

    def test_unpriced_investment_has_no_gain(self):
        """Valued at average cost, gain is exactly zero."""
        valuation = _valuate(make_investment(), [make_txn(1, "buy", "4", "100")])

        assert valuation.current_price == Decimal("25")
        assert valuation.current_value == Decimal("100")
        assert valuation.gain == Decimal("0")

    def test_loss(self):
        valuation = _valuate(
            make_investment(),
            [make_txn(1, "buy", "10", "1000")],
            make_entry(1, "75"),
        )

        assert valuation.gain == Decimal("-250")
        assert valuation.gain_percent == Decimal("-25")


class TestPercentageOf:

    def test_regular(self):
        assert percentage_of(Decimal("1"), Decimal("4")) == Decimal("25")

    @pytest.mark.parametrize("whole", [Decimal("0"), Decimal("-10")])
    def test_non_positive_whole(self, whole):
        assert percentage_of(Decimal("5"), whole) == Decimal("0")


# =============================================================================
# PORTFOLIO SUMMARIZER
# =============================================================================

@pytest.fixture
def two_category_valuations():
    """Stock worth 600 and gold worth 400."""
    stock = make_investment(id=1, name="Apple", category="stock")
    gold = make_investment(id=2, name="Gold bar", symbol=None, category="commodity")
    return [
        _valuate(stock, [make_txn(1, "buy", "6", "500", investment_id=1)], make_entry(1, "100", investment_id=1)),
        _valuate(gold, [make_txn(2, "buy", "4", "400", investment_id=2)], make_entry(2, "100", investment_id=2)),
    ]


class TestPortfolioSummarizer:
    """Tests for PortfolioSummarizer."""

    def test_summary_totals(self, two_category_valuations):
        summary = PortfolioSummarizer().summarize(two_category_valuations)

        assert summary.total_value == Decimal("1000")
        assert summary.total_invested == Decimal("900")
        assert summary.total_gain == Decimal("100")
        assert summary.total_gain_percent == Decimal("100") / Decimal("900") * 100

    def test_total_invested_is_not_clamped(self):
        sold = _valuate(
            make_investment(),
            [make_txn(1, "buy", "10", "500"), make_txn(2, "sell", "10", "1000")],
        )
        summary = PortfolioSummarizer().summarize([sold])

        assert summary.total_invested == Decimal("-500")
        assert summary.total_gain == Decimal("0")
        assert summary.total_gain_percent == Decimal("0")

    def test_empty(self):
        summary = PortfolioSummarizer().summarize([])

        assert summary.total_value == Decimal("0")
        assert summary.total_gain_percent == Decimal("0")

    def test_allocation_percentages(self, two_category_valuations):
        allocation = PortfolioSummarizer().allocate(two_category_valuations, Decimal("1000"))

        assert [a.category for a in allocation] == ["stock", "commodity"]
        assert [a.percentage for a in allocation] == [Decimal("60"), Decimal("40")]
        assert [a.count for a in allocation] == [1, 1]

    def test_allocation_sums_to_total(self, two_category_valuations):
        summarizer = PortfolioSummarizer()
        total = summarizer.summarize(two_category_valuations).total_value
        allocation = summarizer.allocate(two_category_valuations, total)

        assert sum(a.value for a in allocation) == total
        assert abs(sum(a.percentage for a in allocation) - Decimal("100")) <= Decimal("0.01")

    def test_allocation_of_worthless_portfolio(self):
        sold = _valuate(
            make_investment(),
            [make_txn(1, "buy", "1", "10"), make_txn(2, "sell", "1", "10")],
        )
        allocation = PortfolioSummarizer().allocate([sold], Decimal("0"))

        assert allocation[0].percentage == Decimal("0")

    def test_untyped_investments_are_uncategorized(self):
        valuation = _valuate(make_investment(category=None), [make_txn(1, "buy", "1", "10")])

        grouped = PortfolioSummarizer().group_by_category([valuation])

        assert list(grouped) == ["uncategorized"]

    def test_group_by_category_keeps_order(self):
        valuations = [
            _valuate(make_investment(id=i, category=c), [make_txn(i, "buy", "1", "10", investment_id=i)])
            for i, c in [(1, "stock"), (2, "crypto"), (3, "stock")]
        ]

        grouped = PortfolioSummarizer().group_by_category(valuations)

        assert [v.investment_id for v in grouped["stock"]] == [1, 3]
        assert [v.investment_id for v in grouped["crypto"]] == [2]

    def test_top_performers_sorted_and_limited(self):
        prices = ["110", "150", "90", "200", "130", "120"]
        valuations = [
            _valuate(
                make_investment(id=i, name=f"Inv {i}"),
                [make_txn(i, "buy", "1", "100", investment_id=i)],
                make_entry(i, price, investment_id=i),
            )
            for i, price in enumerate(prices, start=1)
        ]

        top = PortfolioSummarizer(top_performers_limit=5).top_performers(valuations)

        assert [t.name for t in top] == ["Inv 4", "Inv 2", "Inv 5", "Inv 6", "Inv 1"]
        assert top[0].gain_percent == Decimal("100")

    def test_top_performers_exclude_sold_out(self):
        held = _valuate(make_investment(id=1, name="Held"), [make_txn(1, "buy", "1", "100")])
        sold = _valuate(
            make_investment(id=2, name="Sold"),
            [
                make_txn(2, "buy", "1", "100", investment_id=2),
                make_txn(3, "sell", "1", "300", investment_id=2),
            ],
        )

        top = PortfolioSummarizer().top_performers([sold, held])

        assert [t.name for t in top] == ["Held"]

    def test_top_performers_ties_keep_input_order(self):
        valuations = [
            _valuate(make_investment(id=i, name=n), [make_txn(i, "buy", "1", "100", investment_id=i)])
            for i, n in [(1, "First"), (2, "Second")]
        ]

        top = PortfolioSummarizer().top_performers(valuations)

        assert [t.name for t in top] == ["First", "Second"]
