import random

from winecorp.core.board import board_satisfaction_breakdown
from winecorp.core.credit_rating import calculate_credit_rating
from winecorp.core.finance import balance_sheet, cash_flow_statement, income_statement
from winecorp.core.game import advance_week, create_company
from winecorp.core.share_price import share_price_breakdown
from winecorp.ui.reports import (
    print_balance_sheet,
    print_board,
    print_cash_flow,
    print_credit_rating,
    print_income_statement,
    print_share_price,
    print_week_result,
)


def test_reports_print(capsys):
    company = create_company("Domaine Affiché", rng=random.Random(4))
    result = advance_week(company, random.Random(4))

    print_week_result(result)
    print_income_statement(income_statement(company))
    print_cash_flow(cash_flow_statement(company))
    print_balance_sheet(balance_sheet(company))
    print_credit_rating(calculate_credit_rating(company))
    print_board(board_satisfaction_breakdown(company))
    print_share_price(share_price_breakdown(company))

    out = capsys.readouterr().out
    assert "Domaine Affiché" in out
    assert "TOTAL ACTIF" in out
    assert "Notation de crédit" in out
