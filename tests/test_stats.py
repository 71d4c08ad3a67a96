"""
Tests for cohort grouping and price-distribution summaries
Run with: pytest tests/test_stats.py -v
"""

import math

import pytest

from fairodds.cohorts import aggregate, qualifying_cohorts
from fairodds.normalize import bet_key, line_key, normalize_rows
from fairodds.stats import mean_and_std, summarize

from factories import cohort_rows, raw_row


class TestAggregate:
    def test_groups_keep_input_order(self):
        quotes = normalize_rows([
            raw_row(1.9, bookmaker="A", player="Second"),
            raw_row(1.8, bookmaker="B", player="First"),
            raw_row(2.0, bookmaker="C", player="Second"),
        ])

        groups = aggregate(quotes, bet_key)

        assert [k.player for k in groups] == ["Second", "First"]
        assert [q.bookmaker for q in groups[bet_key(quotes[0])]] == ["A", "C"]

    def test_line_key_merges_sides(self):
        quotes = normalize_rows([raw_row(1.9, label="Over"), raw_row(1.9, label="Under")])

        assert len(aggregate(quotes, bet_key)) == 2
        assert len(aggregate(quotes, line_key)) == 1

    def test_empty(self):
        assert aggregate([], bet_key) == {}

    def test_qualifying_cohorts(self):
        quotes = normalize_rows(cohort_rows([1.9] * 10, player="Deep") + cohort_rows([1.9] * 9, player="Thin"))

        kept = qualifying_cohorts(aggregate(quotes, bet_key), 10)

        assert [k.player for k in kept] == ["Deep"]


class TestMeanAndStd:
    def test_sample_std(self):
        mean, std = mean_and_std([1.0, 2.0, 3.0, 4.0])
        assert mean == pytest.approx(2.5)
        # Sample variance: 5 / 3
        assert std == pytest.approx(math.sqrt(5 / 3))

    def test_single_price_has_zero_std(self):
        assert mean_and_std([2.0]) == (2.0, 0.0)


class TestSummarize:
    def test_empty(self):
        s = summarize([])

        assert s.count == 0
        assert s.mean is None
        assert s.std is None
        assert s.min is None
        assert s.max is None
        assert s.histogram == {}

    def test_all_invalid(self):
        s = summarize([None, float("nan"), "abc"])
        assert s.count == 0
        assert s.mean is None

    def test_non_positive_prices_excluded(self):
        s = summarize([0, -2.0, 2.0])

        assert s.count == 1
        assert s.mean == 2.0
        assert s.min == s.max == 2.0
        assert s.histogram == {"2.00": 1}

    def test_single_price(self):
        s = summarize([1.9])

        assert s.count == 1
        assert s.mean == 1.9
        assert s.std == 0
        assert s.min == s.max == 1.9

    def test_statistics_and_histogram(self):
        s = summarize([2.0, 1.9, 1.9, None, 2.104, "1.9"])

        assert s.count == 5
        assert s.mean == pytest.approx((2.0 + 1.9 * 3 + 2.104) / 5)
        assert s.std > 0
        assert s.min == 1.9
        assert s.max == 2.104
        assert s.histogram == {"1.90": 3, "2.00": 1, "2.10": 1}
        assert list(s.histogram) == ["1.90", "2.00", "2.10"]

    def test_matches_value_bet_std(self):
        prices = [1.5] * 9 + [5.0]
        assert summarize(prices).std == pytest.approx(mean_and_std(prices)[1])
