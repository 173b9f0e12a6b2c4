import pytest

from winecorp.core import board_enforcer, share_operations
from winecorp.core.share_operations import (
    buy_back_stock,
    dividend_prestige_impact,
    dividend_rate_limits,
    dividends_due,
    issue_stock,
    max_buyback_shares,
    max_issuance_shares,
    pay_dividends,
    update_dividend_rate,
)
from winecorp.core.share_price import initialize_share_price
from winecorp.domain.transactions import STOCK_ISSUANCE_PREFIX, TransactionCategory


@pytest.fixture
def priced(company):
    initialize_share_price(company)
    return company


def test_issue_stock(priced):
    result = issue_stock(priced, 10_000)
    assert result.success
    assert result.capital_raised == pytest.approx(125_000.0)
    assert priced.shares.total_shares == 110_000
    assert priced.shares.outstanding_shares == 50_000
    assert priced.money == pytest.approx(1_125_000.0)
    t = priced.transactions[-1]
    assert t.category == TransactionCategory.INITIAL_INVESTMENT
    assert t.description.startswith(STOCK_ISSUANCE_PREFIX)
    assert t.shares == 10_000
    assert priced.shares.share_price < 12.5


def test_issue_stock_hard_limits(priced):
    assert not issue_stock(priced, 0).success
    too_many = issue_stock(priced, max_issuance_shares(priced) + 1)
    assert not too_many.success
    assert priced.shares.total_shares == 100_000


def test_issue_stock_board_rejection(priced, monkeypatch):
    monkeypatch.setattr(board_enforcer, "board_satisfaction", lambda company: 0.1)
    result = issue_stock(priced, 1_000)
    assert not result.success
    assert "conseil" in result.error


def test_buy_back_stock(priced):
    result = buy_back_stock(priced, 1_000)
    assert result.success
    assert result.cost == pytest.approx(12_500.0)
    assert priced.shares.outstanding_shares == 39_000
    assert priced.shares.total_shares == 99_000
    assert priced.money == pytest.approx(987_500.0)
    assert priced.shares.share_price > 12.5


def test_buy_back_yearly_quota(priced):
    assert buy_back_stock(priced, 6_000).success
    result = buy_back_stock(priced, 5_000)
    assert not result.success
    assert "25%" in result.error


def test_buy_back_limits(priced):
    assert not buy_back_stock(priced, 40_001).success
    assert not buy_back_stock(priced, 100, price=1_000_000.0).success
    assert max_buyback_shares(priced) == 10_000


def test_dividend_prestige_impact():
    assert dividend_prestige_impact(1.0, 1.1) == pytest.approx(0.025)
    assert dividend_prestige_impact(1.0, 0.9) == pytest.approx(-0.1)
    assert dividend_prestige_impact(0.0, 0.5) == pytest.approx(0.25)
    assert dividend_prestige_impact(1.0, 1.001) == 0.0


def test_update_dividend_rate(priced):
    result = update_dividend_rate(priced, 1.0)
    assert result.success
    assert priced.shares.dividend_rate == 1.0
    assert priced.prestige == pytest.approx(1.25)


def test_dividend_constraints(priced):
    assert not update_dividend_rate(priced, -0.1).success
    assert not update_dividend_rate(priced, 5.0).success
    assert update_dividend_rate(priced, 1.0).success
    cut = update_dividend_rate(priced, 0.5)
    assert not cut.success
    assert priced.shares.dividend_rate == 1.0


def test_dividend_rate_limits(priced):
    limits = dividend_rate_limits(priced)
    assert limits.min == 0.0
    assert limits.max == pytest.approx(2.5)


def test_pay_dividends_once_per_season(priced):
    assert not dividends_due(priced)
    update_dividend_rate(priced, 1.0)
    assert dividends_due(priced)

    payment = pay_dividends(priced)
    assert payment.success
    assert payment.total_payment == pytest.approx(100_000.0)
    assert payment.player_payment == pytest.approx(60_000.0)
    assert payment.outstanding_payment == pytest.approx(40_000.0)
    assert priced.transactions[-1].category == TransactionCategory.DIVIDEND_PAYMENT
    assert not pay_dividends(priced).success


def test_pay_dividends_only_in_first_week(priced):
    update_dividend_rate(priced, 1.0)
    priced.date = priced.date.advance()
    assert not pay_dividends(priced).success


def test_issue_stock_initializes_price_before_changes(company):
    assert company.shares.share_price == 0
    result = issue_stock(company, 1_000, price=2.0)
    assert result.success
    assert result.capital_raised == pytest.approx(2_000.0)
    assert company.shares.total_shares == 101_000
    assert company.shares.share_price > 0


def test_issue_stock_without_price_changes_nothing(company, monkeypatch):
    monkeypatch.setattr(share_operations, "initialize_share_price", lambda c: 0.0)
    money = company.money
    result = issue_stock(company, 1_000, price=2.0)
    assert not result.success
    assert company.money == money
    assert company.shares.total_shares == 100_000
    assert not buy_back_stock(company, 1_000, price=2.0).success
    assert company.shares.outstanding_shares == 40_000


def test_dividend_cut_within_board_floor(priced, monkeypatch):
    priced.shares.dividend_rate = 1.0
    monkeypatch.setattr(board_enforcer, "board_satisfaction", lambda company: 0.4)

    too_deep = update_dividend_rate(priced, 0.91)
    assert not too_deep.success
    assert "conseil" in too_deep.error
    assert priced.shares.dividend_rate == 1.0

    small = update_dividend_rate(priced, 0.95)
    assert small.success
    assert priced.shares.dividend_rate == 0.95
