import pytest

from winecorp.core import growth_trend
from winecorp.core.growth_trend import update_growth_trend
from winecorp.core.share_metrics import (
    book_value_per_share,
    get_share_metrics,
    shareholder_breakdown,
)
from winecorp.core.share_price import (
    GracePeriods,
    adjust_share_price_weekly,
    anchor_factor,
    apply_share_structure_adjustment,
    expected_improvement_rates,
    initialize_share_price,
    market_cap_requirement,
    metric_deltas,
    min_share_price,
    share_price_breakdown,
)
from winecorp.data.share_params import METRIC_KEYS
from winecorp.domain.time import GameDate, Season


def test_book_value_per_share(company):
    assert book_value_per_share(company) == pytest.approx(12.5)
    metrics = get_share_metrics(company)
    assert metrics.cash_per_share == pytest.approx(10.0)
    assert metrics.debt_per_share == 0.0


def test_initialize_share_price(company):
    assert initialize_share_price(company) == pytest.approx(12.5)
    assert company.shares.last_share_price_update == company.date


def test_anchor_factor():
    assert anchor_factor(10.0, 10.0) == 1.0
    assert anchor_factor(20.0, 10.0) == pytest.approx(1 / 3)
    assert anchor_factor(10.0, 0.0) == 0.0


def test_min_share_price():
    assert min_share_price(12.5) == pytest.approx(1.25)
    assert min_share_price(0.0) == 0.01


def test_market_cap_requirement():
    assert market_cap_requirement(1_000_000.0) == 0.0
    assert market_cap_requirement(10_000_000.0) == pytest.approx(0.005)
    assert market_cap_requirement(1e15) == pytest.approx(0.03)


def test_expected_rates_in_percent():
    rates = expected_improvement_rates(1.0, 0.0)
    assert rates["earnings_per_share"] == pytest.approx(1.5)
    assert set(rates) == set(METRIC_KEYS)


def test_deltas_are_zero_during_grace_periods():
    grace = GracePeriods(has_48_week_history=False, is_first_year=True, is_dividend_grace_period=True)
    actual = {key: 50.0 for key in METRIC_KEYS}
    expected = {key: 1.0 for key in METRIC_KEYS}
    assert all(v == 0.0 for v in metric_deltas(actual, expected, grace).values())

    grace = GracePeriods(has_48_week_history=True, is_first_year=False, is_dividend_grace_period=False)
    assert all(v == 49.0 for v in metric_deltas(actual, expected, grace).values())


def test_weekly_adjustment_initializes_price(company):
    update = adjust_share_price_weekly(company)
    assert update.success
    assert company.shares.share_price == pytest.approx(12.5)


def test_weekly_adjustment_in_grace_keeps_price_and_stores_snapshot(company):
    initialize_share_price(company)
    update = adjust_share_price_weekly(company)
    assert update.success
    assert update.new_price == pytest.approx(12.5)
    assert len(company.metrics_history) == 1
    adjust_share_price_weekly(company)
    assert len(company.metrics_history) == 1


def test_structure_adjustment(company):
    with pytest.raises(ValueError):
        apply_share_structure_adjustment(company, 100_000, 120_000, issuance=True)
    initialize_share_price(company)
    diluted = apply_share_structure_adjustment(company, 100_000, 120_000, issuance=True)
    assert diluted == pytest.approx(12.5 * 100 / 120 * 0.97)
    concentrated = apply_share_structure_adjustment(company, 120_000, 100_000, issuance=False)
    assert concentrated > diluted


def test_breakdown(company):
    assert share_price_breakdown(company) is None
    initialize_share_price(company)
    breakdown = share_price_breakdown(company)
    assert breakdown.base_price == pytest.approx(12.5)
    assert not breakdown.has_history
    assert set(breakdown.adjustment.contributions) == set(METRIC_KEYS)


def test_shareholder_breakdown(company):
    split = shareholder_breakdown(company)
    assert split.player_shares == 60_000
    assert split.family_shares == 40_000
    assert split.outside_shares == 0
    assert split.non_player_ownership_pct == pytest.approx(40.0)


def test_growth_trend_waits_for_history(company):
    assert update_growth_trend(company) == 1.0


def test_growth_trend_drops_when_flat(company):
    company.date = GameDate(1, Season.SPRING, 2026)
    assert update_growth_trend(company) == pytest.approx(0.98)
    # une seule mise à jour par semaine
    assert update_growth_trend(company) == pytest.approx(0.98)


def test_growth_trend_rises_when_outperforming(company, monkeypatch):
    company.date = GameDate(1, Season.SPRING, 2026)
    monkeypatch.setattr(growth_trend, "performance_scores", lambda c: [1.2, 1.0])
    assert update_growth_trend(company) == pytest.approx(1.02)


def test_growth_trend_bounds(company, monkeypatch):
    company.date = GameDate(1, Season.SPRING, 2026)
    monkeypatch.setattr(growth_trend, "performance_scores", lambda c: [2.0])
    company.shares.growth_trend_multiplier = 1.49
    assert update_growth_trend(company) == pytest.approx(1.5)

    company.date = company.date.advance()
    monkeypatch.setattr(growth_trend, "performance_scores", lambda c: [0.1])
    company.shares.growth_trend_multiplier = 0.51
    assert update_growth_trend(company) == pytest.approx(0.5)
    company.date = company.date.advance()
    assert update_growth_trend(company) == pytest.approx(0.5)
