"""
Indicateurs par action : actif, trésorerie, dette, valeur comptable,
chiffre d'affaires et bénéfice par action, plus les agrégats glissants
sur 48 semaines utilisés par le cours.
"""

import logging

from pydantic import BaseModel

from winecorp.core.credit_rating import credit_rating
from winecorp.core.finance import (
    FinancialData,
    Period,
    calculate_financial_data,
    calculate_financial_data_rolling,
    transactions_last_weeks,
)
from winecorp.data.finance_params import ROLLING_WEEKS
from winecorp.data.loan_params import DEFAULT_CREDIT_RATING
from winecorp.domain.company import Company
from winecorp.domain.time import GameDate, company_weeks
from winecorp.domain.transactions import TransactionCategory

logger = logging.getLogger(__name__)


class ShareMetrics(BaseModel):
    asset_per_share: float = 0.0
    cash_per_share: float = 0.0
    debt_per_share: float = 0.0
    book_value_per_share: float = 0.0
    revenue_per_share: float = 0.0
    earnings_per_share: float = 0.0
    dividend_per_share_current_year: float = 0.0
    dividend_per_share_previous_year: float = 0.0
    credit_rating: float = DEFAULT_CREDIT_RATING
    profit_margin: float = 0.0
    revenue_growth: float = 0.0
    # Fenêtre glissante de 48 semaines
    earnings_per_share_48w: float = 0.0
    revenue_per_share_48w: float = 0.0
    revenue_growth_48w: float = 0.0
    profit_margin_48w: float = 0.0
    dividend_per_share_48w: float = 0.0


class ShareholderBreakdown(BaseModel):
    player_shares: int
    family_shares: int
    outside_shares: int
    player_pct: float
    family_pct: float
    outside_pct: float
    non_player_ownership_pct: float


def _per_share(value: float, shares: int) -> float:
    return value / shares if shares > 0 else 0.0


def book_value_per_share(company: Company) -> float:
    """(actif total - dettes) / nombre d'actions."""
    data = calculate_financial_data(company, Period.YEAR)
    return _per_share(data.total_assets - company.outstanding_loans(), company.shares.total_shares)


def revenue_growth(company: Company, data: FinancialData) -> float:
    """Croissance du chiffre d'affaires sur l'année précédente (100% si elle était nulle)."""
    previous_revenue = 0.0
    if company.date.year > company.founded_year:
        last_year = GameDate(1, company.date.season, company.date.year - 1)
        previous_revenue = calculate_financial_data(company, Period.YEAR, last_year).income
    if previous_revenue > 0:
        return (data.income - previous_revenue) / previous_revenue
    return 1.0 if data.income > 0 else 0.0


def dividends_for_year(company: Company, year: int) -> float:
    return sum(
        abs(t.amount)
        for t in company.transactions
        if t.category == TransactionCategory.DIVIDEND_PAYMENT and t.date.year == year
    )


def rolling_metrics(company: Company) -> dict:
    """BPA, CA par action, marge, croissance et dividende par action sur 48 semaines.

    La croissance compare les 48 dernières semaines aux 48 précédentes,
    uniquement quand la société a plus de 48 semaines d'existence.
    """
    shares = company.shares.total_shares
    last = calculate_financial_data_rolling(company, ROLLING_WEEKS)
    revenue = last.income

    growth = 0.0
    if company_weeks(company.founded_year, company.date) > ROLLING_WEEKS:
        both = calculate_financial_data_rolling(company, ROLLING_WEEKS * 2)
        previous = both.income - revenue
        if previous > 0:
            growth = (revenue - previous) / previous
        elif revenue > 0:
            growth = 1.0

    dividends = sum(
        abs(t.amount)
        for t in transactions_last_weeks(company, ROLLING_WEEKS)
        if t.category == TransactionCategory.DIVIDEND_PAYMENT
    )
    return {
        "earnings_per_share_48w": _per_share(last.net_income, shares),
        "revenue_per_share_48w": _per_share(revenue, shares),
        "profit_margin_48w": last.net_income / revenue if revenue > 0 else 0.0,
        "revenue_growth_48w": growth,
        "dividend_per_share_48w": _per_share(dividends, shares),
    }


def get_share_metrics(company: Company) -> ShareMetrics:
    """Photo complète des indicateurs par action ; valeurs nulles en cas d'erreur."""
    try:
        shares = company.shares.total_shares
        data = calculate_financial_data(company, Period.YEAR)
        debt = company.outstanding_loans()
        assets = data.total_assets if data.total_assets > 0 else company.money
        cash = data.cash_money if data.cash_money >= 0 else company.money
        year = company.date.year

        return ShareMetrics(
            asset_per_share=_per_share(assets, shares),
            cash_per_share=_per_share(cash, shares),
            debt_per_share=_per_share(debt, shares),
            book_value_per_share=_per_share(assets - debt, shares),
            revenue_per_share=_per_share(data.income, shares),
            earnings_per_share=_per_share(data.net_income, shares),
            dividend_per_share_current_year=_per_share(dividends_for_year(company, year), shares),
            dividend_per_share_previous_year=_per_share(
                dividends_for_year(company, year - 1), shares
            ),
            credit_rating=credit_rating(company),
            profit_margin=data.net_income / data.income if data.income > 0 else 0.0,
            revenue_growth=revenue_growth(company, data),
            **rolling_metrics(company),
        )
    except (ArithmeticError, ValueError) as e:
        logger.error("Calcul des indicateurs par action impossible: %s", e)
        return ShareMetrics()


def shareholder_breakdown(company: Company) -> ShareholderBreakdown:
    """Répartit les actions hors joueur entre famille et investisseurs.

    Le partage suit le poids des apports : vignes familiales d'un côté,
    investissements extérieurs (émissions comprises) de l'autre.
    """
    total = company.shares.total_shares
    player = company.shares.player_shares
    non_player = max(total - player, 0)

    data = calculate_financial_data(company, Period.ALL)
    family_equity = max(data.family_contribution, 0.0)
    outside_equity = max(data.outside_investment, 0.0)

    family = 0
    outside = non_player
    if family_equity + outside_equity > 0 and non_player > 0:
        family = round(non_player * family_equity / (family_equity + outside_equity))
        outside = max(non_player - family, 0)

    def pct(n: int) -> float:
        return n / total * 100 if total > 0 else 0.0

    return ShareholderBreakdown(
        player_shares=player,
        family_shares=family,
        outside_shares=outside,
        player_pct=pct(player),
        family_pct=pct(family),
        outside_pct=pct(outside),
        non_player_ownership_pct=pct(family) + pct(outside),
    )
