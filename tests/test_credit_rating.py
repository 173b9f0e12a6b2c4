import pytest

from winecorp.core.credit_rating import (
    asset_health,
    calculate_credit_rating,
    credit_rating,
    negative_balance_penalty,
    normalize_asset_coverage,
    normalize_debt_to_asset,
    normalize_liquidity,
    normalize_missed_payments,
    payment_history,
    rating_category,
    rating_description,
)
from winecorp.core.finance import add_transaction
from winecorp.data.credit_params import CREDIT_RATING_WEIGHTS
from winecorp.domain.transactions import TransactionCategory


def test_normalizations():
    assert normalize_debt_to_asset(0.0) == 1.0
    assert normalize_debt_to_asset(1.2) == 0.0
    assert normalize_debt_to_asset(0.5) == pytest.approx(1 - 0.5**1.5)
    assert normalize_asset_coverage(5.0) == 1.0
    assert normalize_asset_coverage(3.0) == pytest.approx(0.67)
    assert normalize_asset_coverage(1.0) == pytest.approx(0.165)
    assert normalize_liquidity(1.0) == pytest.approx(0.5)
    assert normalize_liquidity(0.0) == 0.0
    assert [normalize_missed_payments(n) for n in range(4)] == [1.0, 0.5, 0.25, 0.0]


def test_asset_health_without_debt():
    health = asset_health(1_000_000.0, 0.0, 800_000.0, 0.0, 200_000.0)
    w = CREDIT_RATING_WEIGHTS.asset_health
    assert health.debt_to_asset_ratio == 0.0
    assert health.score == pytest.approx(
        w.debt_to_asset + w.asset_coverage + w.liquidity + 0.33 * w.fixed_assets
    )


def test_heavy_debt_lowers_asset_health():
    healthy = asset_health(1_000_000.0, 100_000.0, 500_000.0, 0.0, 500_000.0)
    indebted = asset_health(1_000_000.0, 900_000.0, 500_000.0, 0.0, 500_000.0)
    assert indebted.score < healthy.score


def test_negative_balance_penalty():
    assert negative_balance_penalty(1_000.0, 100_000.0).score == 0.0
    penalty = negative_balance_penalty(-50_000.0, 100_000.0)
    assert penalty.consecutive_weeks_negative == 5
    assert penalty.score == pytest.approx(-0.10)
    assert negative_balance_penalty(-10_000_000.0, 100_000.0).score == pytest.approx(-0.30)


def test_payment_history_counts_payments(company):
    for _ in range(4):
        add_transaction(company, -1_000.0, "Échéance", TransactionCategory.LOAN_PAYMENT)
    history = payment_history(company)
    assert history.on_time_payments == 4
    assert history.loan_payoffs == 1
    assert history.normalized_missed_payments == 1.0


def test_new_company_rating(company):
    breakdown = calculate_credit_rating(company)
    assert breakdown.base_rating == 0.5
    assert breakdown.final_rating == pytest.approx(0.5 + 0.9665 * 0.20 + 0.20 * 0.15, abs=1e-3)
    assert 0.0 <= breakdown.final_rating <= 1.0


def test_rating_is_cached_until_next_transaction(company):
    value = credit_rating(company)
    assert company.cache[f"credit_rating:{company.date.index}"] == value
    add_transaction(company, -1.0, "Frais", TransactionCategory.OTHER)
    assert company.cache == {}


@pytest.mark.parametrize(
    "rating, letter", [(0.97, "AAA"), (0.72, "A"), (0.50, "BBB-"), (0.12, "CCC"), (0.01, "C")]
)
def test_rating_category(rating, letter):
    assert rating_category(rating) == letter


def test_rating_description():
    assert rating_description(0.99) == "Exceptional creditworthiness"
