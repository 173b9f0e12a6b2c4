import logging
import random

from winecorp.core.board import board_satisfaction_breakdown
from winecorp.core.credit_rating import calculate_credit_rating, credit_rating
from winecorp.core.finance import balance_sheet, cash_flow_statement, income_statement
from winecorp.core.game import create_company, run_weeks
from winecorp.core.lenders import available_lenders
from winecorp.core.loans import apply_for_loan
from winecorp.core.share_operations import issue_stock
from winecorp.core.share_price import share_price_breakdown
from winecorp.errors import LoanError
from winecorp.ui.reports import (
    print_balance_sheet,
    print_board,
    print_cash_flow,
    print_credit_rating,
    print_income_statement,
    print_share_price,
    print_week_result,
)


def run(seed: int = 42, weeks: int = 24):
    rng = random.Random(seed)
    company = create_company("Domaine de Démo", outside_investment=50_000.0, rng=rng)
    print_balance_sheet(balance_sheet(company))

    lenders = available_lenders(company.lenders, credit_rating(company), company.prestige)
    if lenders:
        lender = lenders[0]
        try:
            apply_for_loan(company, lender, lender.min_loan_amount, lender.min_duration_seasons)
        except LoanError as e:
            print(f"Prêt refusé : {e}")

    result = issue_stock(company, 500)
    if not result.success:
        print(f"Émission refusée : {result.error}")

    for week in run_weeks(company, weeks, rng):
        print_week_result(week)

    print_income_statement(income_statement(company))
    print_cash_flow(cash_flow_statement(company))
    print_balance_sheet(balance_sheet(company))
    print_credit_rating(calculate_credit_rating(company))
    print_board(board_satisfaction_breakdown(company))
    breakdown = share_price_breakdown(company)
    if breakdown is not None:
        print_share_price(breakdown)


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    run()
