import random

import pytest

from winecorp.core.game import advance_week, create_company, run_weeks
from winecorp.core.loans import apply_for_loan
from winecorp.core.share_operations import update_dividend_rate
from winecorp.domain.time import GameDate, Season


@pytest.fixture
def game_company():
    return create_company("Domaine du Test", rng=random.Random(42))


def test_create_company(game_company):
    c = game_company
    assert c.shares.total_shares == 205_000
    assert c.shares.player_shares == 200_000
    assert c.shares.outstanding_shares == 5_000
    assert c.money == 10_000_000.0
    assert c.initial_vineyard_value == 250_000.0
    assert c.shares.share_price == pytest.approx(50.0)
    assert c.lenders
    assert c.customers


def test_create_company_with_outside_investment():
    c = create_company("Domaine Associé", player_cash=500_000.0, outside_investment=250_000.0, rng=random.Random(1))
    assert c.money == 750_000.0
    assert c.shares.player_ownership_pct == pytest.approx(500 / 1_000 * 100, abs=0.01)


def test_create_company_requires_cash():
    with pytest.raises(ValueError):
        create_company("Domaine Vide", player_cash=0.0)


def test_advance_week(game_company):
    result = advance_week(game_company, random.Random(1))
    assert game_company.date == GameDate(2, Season.SPRING, 2024)
    assert result.date == game_company.date
    assert result.money_end == game_company.money
    assert 0.0 <= result.credit_rating <= 1.0
    assert result.board_satisfaction >= 0.8
    assert len(game_company.metrics_history) == 1
    assert len(game_company.board_history) == 1


def test_season_start_pays_loans_and_dividends(game_company, make_lender):
    lender = make_lender()
    game_company.lenders.append(lender)
    apply_for_loan(game_company, lender, 100_000.0, 8)
    assert update_dividend_rate(game_company, 0.1).success

    results = run_weeks(game_company, 12, random.Random(2))
    season_start = results[-1]
    assert season_start.date == GameDate(1, Season.SUMMER, 2024)
    assert season_start.loan_payments > 0
    assert season_start.dividends_paid == pytest.approx(0.1 * 205_000)
    assert all(r.loan_payments == 0 for r in results[:-1])


def test_runs_are_reproducible():
    a = create_company("A", rng=random.Random(9))
    b = create_company("B", rng=random.Random(9))
    prices_a = [(r.share_price, r.economy_phase) for r in run_weeks(a, 14, random.Random(3))]
    prices_b = [(r.share_price, r.economy_phase) for r in run_weeks(b, 14, random.Random(3))]
    assert prices_a == prices_b
