import pytest

from winecorp.core.loans import (
    apply_for_loan,
    credit_multiplier,
    duration_modifier,
    effective_interest_rate,
    extra_payment_fee,
    loan_terms,
    make_extra_payment,
    next_payment_date,
    origination_fee,
    prepayment_penalty,
    process_loan_payment,
    process_seasonal_loan_payments,
    repay_loan_in_full,
    seasonal_payment,
    seize_vineyards,
)
from winecorp.domain.company import Vineyard
from winecorp.domain.economy import EconomyPhase
from winecorp.domain.loans import LenderType, LoanStatus
from winecorp.domain.time import GameDate, Season
from winecorp.domain.transactions import TransactionCategory
from winecorp.errors import InsufficientFundsError, LoanError


@pytest.fixture
def lender(company, make_lender):
    lender = make_lender()
    company.lenders.append(lender)
    return lender


@pytest.fixture
def loan(company, lender):
    return apply_for_loan(company, lender, 100_000.0, 8)


def test_rate_modifiers():
    assert credit_multiplier(1.0) == pytest.approx(0.8)
    assert credit_multiplier(0.0) == pytest.approx(1.5)
    assert duration_modifier(None) == 1.0
    assert duration_modifier(16) == 1.0
    assert duration_modifier(20) == 0.95
    assert duration_modifier(200) == 0.85


def test_effective_interest_rate():
    rate = effective_interest_rate(0.05, EconomyPhase.STABLE, LenderType.BANK, 1.0, 8)
    assert rate == pytest.approx(0.05 * 0.9 * 0.8)
    crash = effective_interest_rate(0.05, EconomyPhase.CRASH, LenderType.BANK, 1.0, 8)
    assert crash > rate


def test_seasonal_payment():
    assert seasonal_payment(1_000.0, 0.0, 4) == 250.0
    payment = seasonal_payment(100_000.0, 0.05, 4)
    assert payment * 4 > 100_000.0
    assert payment == pytest.approx(28_201.18, abs=0.01)


def test_origination_fee(make_lender):
    lender = make_lender()
    assert origination_fee(100_000.0, lender, 0.9, 8) == round(2_000 * 0.7 * 0.91)
    assert origination_fee(100_000.0, lender, 0.5, 30) == 2_000
    assert origination_fee(10_000.0, lender, 0.5, 30) == 1_000
    assert origination_fee(10_000_000.0, lender, 0.5, 30) == 15_000


def test_loan_terms(make_lender):
    terms = loan_terms(make_lender(), 100_000.0, 8, 0.5, EconomyPhase.STABLE)
    assert terms.total_interest == pytest.approx(terms.total_repayment - 100_000.0)
    assert terms.total_expenses == pytest.approx(terms.origination_fee + terms.total_interest)


def test_next_payment_date():
    assert next_payment_date(GameDate(5, Season.SPRING, 2024)) == GameDate(1, Season.SUMMER, 2024)
    assert next_payment_date(GameDate(5, Season.WINTER, 2024)) == GameDate(1, Season.SPRING, 2025)


def test_fees():
    assert extra_payment_fee(1_000.0) == 250.0
    assert extra_payment_fee(10_000.0) == pytest.approx(800.0)


def test_apply_for_loan(company, loan):
    assert loan.remaining_balance == 100_000.0
    assert loan.seasons_remaining == 8
    assert loan.next_payment_due == GameDate(1, Season.SUMMER, 2024)
    assert company.money == pytest.approx(1_100_000.0 - loan.origination_fee)
    categories = [t.category for t in company.transactions[-2:]]
    assert categories == [TransactionCategory.LOAN_RECEIVED, TransactionCategory.LOAN_ORIGINATION_FEE]
    assert company.outstanding_loans() == 100_000.0


def test_apply_for_loan_refusals(company, make_lender):
    with pytest.raises(LoanError):
        apply_for_loan(company, make_lender(), 1_000.0, 8)
    with pytest.raises(LoanError):
        apply_for_loan(company, make_lender(), 100_000.0, 200)
    with pytest.raises(LoanError):
        apply_for_loan(company, make_lender(risk_tolerance=0.99), 100_000.0, 8)
    with pytest.raises(LoanError):
        apply_for_loan(company, make_lender(blacklisted=True), 100_000.0, 8)


def test_full_payment(company, loan):
    before = company.money
    event = process_loan_payment(company, loan)
    assert event.amount_paid == pytest.approx(loan.seasonal_payment)
    assert company.money == pytest.approx(before - loan.seasonal_payment)
    assert loan.seasons_remaining == 7
    assert loan.missed_payments == 0


def test_loan_paid_off_after_last_season(company, lender):
    loan = apply_for_loan(company, lender, 100_000.0, 4)
    for _ in range(4):
        process_loan_payment(company, loan)
    assert loan.status == LoanStatus.PAID_OFF
    assert loan.remaining_balance == 0.0
    assert company.outstanding_loans() == 0.0


def test_first_missed_payment_adds_late_fee(company, loan):
    company.money = 0.0
    balance = loan.remaining_balance
    event = process_loan_payment(company, loan)
    assert event.missed_payments == 1
    assert loan.remaining_balance == balance + round(loan.seasonal_payment * 0.02)


def test_second_warning_raises_rate_and_costs_prestige(company, loan):
    company.money = 0.0
    company.prestige = 30.0
    loan.missed_payments = 1
    rate = loan.effective_interest_rate
    balance = loan.remaining_balance
    process_loan_payment(company, loan)
    assert loan.effective_interest_rate == pytest.approx(rate + 0.005)
    assert loan.remaining_balance == balance + round(balance * 0.05)
    assert company.prestige == pytest.approx(5.0)


def test_third_warning_seizes_vineyards(company, loan):
    company.money = 0.0
    loan.missed_payments = 2
    event = process_loan_payment(company, loan)
    assert event.seizure.vineyards_seized == 1
    assert event.seizure.sale_proceeds == pytest.approx(187_500.0)
    assert company.vineyards == []
    assert any(t.category == TransactionCategory.VINEYARD_SALE for t in company.transactions)
    assert loan.status == LoanStatus.ACTIVE


def test_seizure_keeps_identical_vineyards(company, loan):
    company.vineyards = [Vineyard("Parcelle", 100_000.0), Vineyard("Parcelle", 100_000.0)]
    result = seize_vineyards(company, loan)
    assert result.vineyards_seized == 1
    assert result.sale_proceeds == pytest.approx(75_000.0)
    assert len(company.vineyards) == 1


def test_fourth_warning_defaults(company, lender, loan):
    company.money = 0.0
    company.prestige = 100.0
    loan.missed_payments = 3
    event = process_loan_payment(company, loan)
    assert event.status == LoanStatus.DEFAULTED
    assert lender.blacklisted
    assert company.prestige == pytest.approx(25.0)


def test_partial_payment_counts_as_missed(company, loan):
    company.money = 1_000.0
    event = process_loan_payment(company, loan)
    assert event.amount_paid == pytest.approx(1_000.0)
    assert event.missed_payments == 1


def test_seasonal_processing_only_due_loans(company, loan):
    assert process_seasonal_loan_payments(company) == []
    company.date = GameDate(1, Season.SUMMER, 2024)
    events = process_seasonal_loan_payments(company)
    assert [e.loan_id for e in events] == [loan.id]


def test_repay_in_full(company, loan):
    penalty = prepayment_penalty(loan)
    assert penalty >= 1_000.0
    before = company.money
    total = repay_loan_in_full(company, loan.id)
    assert total == pytest.approx(100_000.0 + penalty)
    assert company.money == pytest.approx(before - total)
    assert loan.status == LoanStatus.PAID_OFF
    with pytest.raises(LoanError):
        repay_loan_in_full(company, loan.id)


def test_repay_in_full_needs_cash(company, loan):
    company.money = 10.0
    with pytest.raises(InsufficientFundsError):
        repay_loan_in_full(company, loan.id)


def test_extra_payment(company, loan):
    payment = loan.seasonal_payment
    fee = make_extra_payment(company, loan.id, 40_000.0)
    assert fee == pytest.approx(3_200.0)
    assert loan.remaining_balance == pytest.approx(60_000.0)
    assert loan.seasonal_payment < payment
    with pytest.raises(LoanError):
        make_extra_payment(company, loan.id, 60_000.0)
