"""
Journal des transactions et états financiers (compte de résultat, bilan,
flux de trésorerie) d'une société viticole.

Les flux de capital (apports, emprunts, dividendes, immobilisations) touchent
la trésorerie mais jamais le résultat.
"""

import logging
from collections import defaultdict
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from winecorp.data.finance_params import (
    DEFAULT_STAGE_MULTIPLIER,
    DEFAULT_WINE_PRICE,
    GRAPE_VALUE_PER_UNIT,
    MIN_SHARES,
    ROLLING_WEEKS,
    TARGET_SHARE_PRICE,
    WINE_STAGE_MULTIPLIER,
)
from winecorp.domain.company import Company, WineState
from winecorp.domain.time import GameDate, subtract_weeks
from winecorp.domain.transactions import (
    CAPITALIZED_CATEGORIES,
    OUTSIDE_INVESTMENT_LABEL,
    PLAYER_CONTRIBUTION_LABEL,
    STOCK_ISSUANCE_PREFIX,
    Transaction,
    TransactionCategory,
)

logger = logging.getLogger(__name__)


class Period(Enum):
    WEEKLY = "weekly"
    SEASON = "season"
    YEAR = "year"
    ALL = "all"


class LineItem(BaseModel):
    description: str
    amount: float


class FinancialData(BaseModel):
    income: float
    expenses: float
    net_income: float
    income_details: List[LineItem]
    expense_details: List[LineItem]
    cash_money: float
    total_assets: float
    fixed_assets: float
    current_assets: float
    buildings_value: float
    all_vineyards_value: float
    wine_value: float
    grapes_value: float
    # Capitaux propres
    player_contribution: float
    family_contribution: float
    outside_investment: float
    retained_earnings: float
    total_equity: float


# ------- Journal -------


def add_transaction(
    company: Company,
    amount: float,
    description: str,
    category: TransactionCategory,
    recurring: bool = False,
    shares: Optional[int] = None,
) -> Transaction:
    """Enregistre une opération datée et met à jour la trésorerie.

    Args:
        company: Société concernée.
        amount: Montant signé (positif = encaissement).
        description: Libellé de l'opération.
        category: Catégorie comptable.
        recurring: Opération récurrente (salaires, entretien...).
        shares: Nombre d'actions pour les émissions et rachats.

    Returns:
        La transaction créée, portant le solde après opération.

    Raises:
        ValueError: Si le libellé est vide.
    """
    if not description:
        raise ValueError("Une transaction doit avoir un libellé")

    company.money += amount
    transaction = Transaction(
        date=company.date,
        amount=amount,
        description=description,
        category=category,
        money=company.money,
        recurring=recurring,
        shares=shares,
    )
    company.transactions.append(transaction)
    # Les indicateurs mis en cache dépendent de la trésorerie
    company.cache.clear()
    logger.debug("%s: %+.2f (%s)", company.name, amount, description)
    return transaction


def _in_period(t: Transaction, period: Period, date: GameDate) -> bool:
    if period == Period.WEEKLY:
        return t.date == date
    if period == Period.SEASON:
        return t.date.same_season(date)
    if period == Period.YEAR:
        return t.date.year == date.year
    return True


def transactions_for_period(
    company: Company, period: Period, date: Optional[GameDate] = None
) -> List[Transaction]:
    date = date or company.date
    return [t for t in company.transactions if _in_period(t, period, date)]


def transactions_last_weeks(company: Company, weeks_back: int) -> List[Transaction]:
    """Transactions de la fenêtre glissante [date - weeks_back, date], bornes incluses."""
    start = subtract_weeks(company.date, weeks_back).index
    end = company.date.index
    return [t for t in company.transactions if start <= t.date.index <= end]


# ------- Valorisation des actifs -------


def wine_value(company: Company) -> float:
    """Valeur des lots vinifiés (hors raisins, valorisés à part)."""
    total = 0.0
    for batch in company.wine_batches:
        if batch.state == WineState.GRAPES:
            continue
        stage = WINE_STAGE_MULTIPLIER.get(batch.state, DEFAULT_STAGE_MULTIPLIER)
        quality = batch.grape_quality or 0.5
        price = batch.estimated_price or DEFAULT_WINE_PRICE
        total += batch.quantity * stage * quality * price
    return total


def grapes_value(company: Company) -> float:
    return sum(
        batch.quantity * (batch.grape_quality or 0.5) * GRAPE_VALUE_PER_UNIT
        for batch in company.wine_batches
        if batch.state == WineState.GRAPES
    )


def total_assets(company: Company) -> float:
    return (
        company.money
        + company.buildings_value
        + company.vineyards_value()
        + wine_value(company)
        + grapes_value(company)
    )


def company_value(company: Company) -> float:
    """Valeur nette : actif total moins encours des emprunts."""
    return total_assets(company) - company.outstanding_loans()


# ------- Agrégats -------


def _operating_totals(transactions: Iterable[Transaction]):
    income = 0.0
    expenses = 0.0
    by_category: Dict[str, float] = defaultdict(float)
    for t in transactions:
        if t.is_capital_flow:
            continue
        by_category[t.category.value] += t.amount
        if t.amount >= 0:
            income += t.amount
        else:
            expenses += -t.amount

    income_details = [
        LineItem(description=c, amount=a) for c, a in by_category.items() if a >= 0
    ]
    expense_details = [
        LineItem(description=c, amount=-a) for c, a in by_category.items() if a < 0
    ]
    income_details.sort(key=lambda item: item.amount, reverse=True)
    expense_details.sort(key=lambda item: item.amount, reverse=True)
    return income, expenses, income_details, expense_details


def is_player_contribution(t: Transaction) -> bool:
    return t.description == PLAYER_CONTRIBUTION_LABEL or (
        t.category == TransactionCategory.INITIAL_INVESTMENT
        and "Player cash contribution" in t.description
    )


def is_outside_investment(t: Transaction) -> bool:
    if t.amount <= 0:
        return False
    return (
        t.description == OUTSIDE_INVESTMENT_LABEL
        or (
            t.category == TransactionCategory.INITIAL_INVESTMENT
            and "Outside investment" in t.description
        )
        or t.description.startswith(STOCK_ISSUANCE_PREFIX)
    )


def _build_financial_data(
    company: Company, transactions: List[Transaction]
) -> FinancialData:
    income, expenses, income_details, expense_details = _operating_totals(transactions)

    vineyards = company.vineyards_value()
    wine = wine_value(company)
    grapes = grapes_value(company)
    fixed = company.buildings_value + vineyards
    current = wine + grapes

    # Capitaux propres : toujours calculés sur l'historique complet
    player = 0.0
    outside = 0.0
    for t in company.transactions:
        if is_player_contribution(t):
            player += t.amount
        elif is_outside_investment(t):
            outside += t.amount

    if company.initial_vineyard_value:
        family = company.initial_vineyard_value
    else:
        family = vineyards

    all_income, all_expenses, _, _ = _operating_totals(company.transactions)
    retained = all_income - all_expenses

    return FinancialData(
        income=income,
        expenses=expenses,
        net_income=income - expenses,
        income_details=income_details,
        expense_details=expense_details,
        cash_money=company.money,
        total_assets=company.money + fixed + current,
        fixed_assets=fixed,
        current_assets=current,
        buildings_value=company.buildings_value,
        all_vineyards_value=vineyards,
        wine_value=wine,
        grapes_value=grapes,
        player_contribution=player,
        family_contribution=family,
        outside_investment=outside,
        retained_earnings=retained,
        total_equity=player + family + outside + retained,
    )


def calculate_financial_data(
    company: Company, period: Period = Period.YEAR, date: Optional[GameDate] = None
) -> FinancialData:
    """Résultat de la période demandée et photo de l'actif à la date courante.

    Args:
        company: Société analysée.
        period: Hebdomadaire, saison, année ou tout l'historique.
        date: Date de référence de la période (par défaut la date courante).
    """
    return _build_financial_data(company, transactions_for_period(company, period, date))


def calculate_financial_data_rolling(
    company: Company, weeks_back: int = ROLLING_WEEKS
) -> FinancialData:
    """Même calcul sur une fenêtre glissante de `weeks_back` semaines."""
    return _build_financial_data(company, transactions_last_weeks(company, weeks_back))


# ------- États -------


class IncomeStatement(BaseModel):
    revenue: float
    expenses: float
    net_income: float
    revenue_lines: List[LineItem]
    expense_lines: List[LineItem]


class Assets(BaseModel):
    cash: float
    buildings: float
    vineyards: float
    wine: float
    grapes: float
    fixed: float
    current: float
    total: float


class Liabilities(BaseModel):
    loans: float
    player_contribution: float
    family_contribution: float
    outside_investment: float
    retained_earnings: float
    equity: float
    total: float


class BalanceSheet(BaseModel):
    assets: Assets
    liabilities: Liabilities


class CashFlowStatement(BaseModel):
    operating: float
    investing: float
    financing: float
    net_change: float
    opening_cash: float
    closing_cash: float


def income_statement(
    company: Company, period: Period = Period.YEAR, date: Optional[GameDate] = None
) -> IncomeStatement:
    data = calculate_financial_data(company, period, date)
    return IncomeStatement(
        revenue=data.income,
        expenses=data.expenses,
        net_income=data.net_income,
        revenue_lines=data.income_details,
        expense_lines=data.expense_details,
    )


def balance_sheet(company: Company) -> BalanceSheet:
    """Bilan simplifié à la date courante.

    Le passif reprend l'encours des emprunts et les capitaux propres
    (apports, vignes familiales, investisseurs, résultats cumulés).
    """
    data = calculate_financial_data(company, Period.ALL)
    loans = company.outstanding_loans()
    assets = Assets(
        cash=data.cash_money,
        buildings=data.buildings_value,
        vineyards=data.all_vineyards_value,
        wine=data.wine_value,
        grapes=data.grapes_value,
        fixed=data.fixed_assets,
        current=data.current_assets,
        total=data.total_assets,
    )
    liabilities = Liabilities(
        loans=loans,
        player_contribution=data.player_contribution,
        family_contribution=data.family_contribution,
        outside_investment=data.outside_investment,
        retained_earnings=data.retained_earnings,
        equity=data.total_equity,
        total=loans + data.total_equity,
    )
    return BalanceSheet(assets=assets, liabilities=liabilities)


_FINANCING_CATEGORIES = frozenset(
    {
        TransactionCategory.INITIAL_INVESTMENT,
        TransactionCategory.LOAN_RECEIVED,
        TransactionCategory.LOAN_PAYMENT,
        TransactionCategory.LOAN_ORIGINATION_FEE,
        TransactionCategory.DIVIDEND_PAYMENT,
    }
)


def cash_flow_statement(
    company: Company, period: Period = Period.YEAR, date: Optional[GameDate] = None
) -> CashFlowStatement:
    """Flux de trésorerie d'exploitation, d'investissement et de financement."""
    transactions = transactions_for_period(company, period, date)
    operating = investing = financing = 0.0
    for t in transactions:
        if t.category in CAPITALIZED_CATEGORIES:
            investing += t.amount
        elif t.category in _FINANCING_CATEGORIES:
            financing += t.amount
        else:
            operating += t.amount

    net = operating + investing + financing
    if transactions:
        opening = transactions[0].money - transactions[0].amount
        closing = transactions[-1].money
    else:
        opening = closing = company.money
    return CashFlowStatement(
        operating=operating,
        investing=investing,
        financing=financing,
        net_change=net,
        opening_cash=opening,
        closing_cash=closing,
    )


def initial_share_count(capital: float) -> int:
    """Nombre d'actions à la création : cours cible de 50 €, 10 000 actions minimum."""
    return max(round(capital / TARGET_SHARE_PRICE), MIN_SHARES)
