import pytest

from winecorp.core import board
from winecorp.core.board import (
    BoardSatisfactionBreakdown,
    board_satisfaction,
    board_satisfaction_breakdown,
    calculate_board_satisfaction,
    performance_score,
    store_board_snapshot,
    weighted_satisfaction,
)
from winecorp.data.board_params import NEW_COMPANY_SATISFACTION
from winecorp.domain.company import BoardSnapshot
from winecorp.domain.time import GameDate, Season


def test_performance_score_is_centered():
    assert performance_score({}) == 0.5
    assert performance_score({"a": 100.0, "b": -100.0}) == pytest.approx(0.5)
    assert performance_score({"a": 250.0}) == 1.0
    assert performance_score({"a": -250.0}) == 0.0


def test_weighted_satisfaction_uses_raw_weights():
    assert weighted_satisfaction(0.5, 0.5, 0.7) == pytest.approx(0.465)
    assert weighted_satisfaction(1.0, 1.0, 1.0) == pytest.approx(0.85)
    assert weighted_satisfaction(0.0, 0.0, 0.0) == 0.0


def test_full_ownership_is_always_satisfied(company):
    company.shares.player_shares = company.shares.total_shares
    company.shares.outstanding_shares = 0
    breakdown = calculate_board_satisfaction(company)
    assert breakdown.satisfaction == 1.0
    assert breakdown.ownership_pressure == 0.0


def test_first_year_floor(company):
    breakdown = calculate_board_satisfaction(company)
    assert breakdown.is_grace_period_active
    assert breakdown.satisfaction >= NEW_COMPANY_SATISFACTION
    assert breakdown.player_ownership_pct == pytest.approx(60.0)
    assert breakdown.ownership_pressure == pytest.approx(0.4)


def test_no_floor_after_first_year(company):
    company.date = GameDate(1, Season.SPRING, 2026)
    breakdown = calculate_board_satisfaction(company)
    assert not breakdown.is_grace_period_active
    assert 0.0 <= breakdown.satisfaction <= 1.0


def test_unstable_history_lowers_consistency(company):
    company.date = GameDate(1, Season.SPRING, 2026)
    steady = calculate_board_satisfaction(company).consistency_score
    for i, value in enumerate([0.1, 0.9, 0.1, 0.9, 0.1, 0.9]):
        company.board_history.append(
            BoardSnapshot(
                date=GameDate.from_index(i),
                satisfaction=value,
                performance_score=0.5,
                stability_score=0.5,
                consistency_score=0.5,
                ownership_pressure=0.4,
                player_ownership_pct=60.0,
            )
        )
    assert calculate_board_satisfaction(company).consistency_score < steady


def test_breakdown_is_cached_per_week(company):
    first = board_satisfaction_breakdown(company)
    assert board_satisfaction_breakdown(company) is first
    assert board_satisfaction(company) == first.satisfaction


def test_calculation_error_returns_defaults(company, monkeypatch):
    def broken(_):
        raise ZeroDivisionError("boom")

    monkeypatch.setattr(board, "calculate_board_satisfaction", broken)
    breakdown = board_satisfaction_breakdown(company)
    assert breakdown == BoardSatisfactionBreakdown()
    assert not any(k.startswith("board_satisfaction:") for k in company.cache)


def test_store_board_snapshot_one_per_week(company):
    store_board_snapshot(company)
    snapshot = store_board_snapshot(company)
    assert len(company.board_history) == 1
    assert company.board_history[0] == snapshot
    assert not any(k.startswith("board_satisfaction:") for k in company.cache)
