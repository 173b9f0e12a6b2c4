"""
Notation de crédit : santé de l'actif, historique de paiement, stabilité et
pénalité de solde négatif, composées autour d'une note de base de 50%.
"""

import logging
import math
from collections import defaultdict
from typing import Dict, List, Tuple

import numpy as np
from pydantic import BaseModel

from winecorp.core.finance import Period, calculate_financial_data, company_value
from winecorp.data.credit_params import (
    ASSET_COVERAGE_EXCELLENT,
    ASSET_COVERAGE_FAIR,
    ASSET_COVERAGE_GOOD,
    BASE_RATING,
    CREDIT_RATING_WEIGHTS,
    LIQUIDITY_EXCELLENT,
    LIQUIDITY_FAIR,
    LIQUIDITY_GOOD,
    MAX_EXPENSE_EFFICIENCY,
    MAX_PROFIT_CONSISTENCY,
    MAX_RATING,
    MIN_RATING,
    NEGATIVE_BALANCE_MAX_PENALTY,
    NEGATIVE_BALANCE_MAX_WEEKS,
    NEGATIVE_BALANCE_MIN_THRESHOLD,
    NEGATIVE_BALANCE_VALUE_SHARE,
    NO_DEBT_RATIO,
    PAYMENTS_PER_PAYOFF,
    RATING_CATEGORIES,
    REFERENCE_PAYMENTS,
    REFERENCE_PAYOFFS,
)
from winecorp.domain.company import Company
from winecorp.domain.time import WEEKS_PER_SEASON, WEEKS_PER_YEAR, company_weeks
from winecorp.domain.transactions import TransactionCategory
from winecorp.rules.curves import age_modifier, consistency_score
from winecorp.utils import clamp, clamp01

logger = logging.getLogger(__name__)


class AssetHealth(BaseModel):
    debt_to_asset_ratio: float
    asset_coverage: float
    liquidity_ratio: float
    fixed_asset_ratio: float
    normalized_debt_to_asset: float
    normalized_asset_coverage: float
    normalized_liquidity: float
    normalized_fixed_assets: float
    score: float


class PaymentHistory(BaseModel):
    on_time_payments: int
    loan_payoffs: int
    missed_payments: int
    consecutive_missed_payments: int
    normalized_on_time_payments: float
    normalized_loan_payoffs: float
    normalized_missed_payments: float
    score: float


class CompanyStability(BaseModel):
    company_age: float  # années
    profit_consistency: float
    expense_efficiency: float
    normalized_age: float
    normalized_profit_consistency: float
    normalized_expense_efficiency: float
    score: float


class NegativeBalance(BaseModel):
    consecutive_weeks_negative: int
    penalty_per_week: float
    normalized_weeks: float
    score: float  # 0 à -0.30


class CreditRatingBreakdown(BaseModel):
    base_rating: float
    asset_health: AssetHealth
    payment_history: PaymentHistory
    company_stability: CompanyStability
    negative_balance: NegativeBalance
    final_rating: float


# ------- Normalisations (0..1) -------


def normalize_debt_to_asset(ratio: float) -> float:
    """0% de dette = 1.0, 50% ≈ 0.65, 100% et plus = 0.0."""
    if ratio <= 0:
        return 1.0
    if ratio >= 1.0:
        return 0.0
    return clamp01(1 - ratio**1.5)


def normalize_asset_coverage(coverage: float) -> float:
    """0x = 0.0, 2x = 0.33, 3x = 0.67, 5x et plus = 1.0."""
    if coverage >= ASSET_COVERAGE_EXCELLENT:
        return 1.0
    if coverage >= ASSET_COVERAGE_GOOD:
        span = ASSET_COVERAGE_EXCELLENT - ASSET_COVERAGE_GOOD
        return 0.67 + (coverage - ASSET_COVERAGE_GOOD) / span * 0.33
    if coverage >= ASSET_COVERAGE_FAIR:
        span = ASSET_COVERAGE_GOOD - ASSET_COVERAGE_FAIR
        return 0.33 + (coverage - ASSET_COVERAGE_FAIR) / span * 0.34
    return max(0.0, coverage / ASSET_COVERAGE_FAIR * 0.33)


def normalize_liquidity(liquidity: float) -> float:
    """0x = 0.0, 0.5x = 0.17, 1x = 0.5, 2x et plus = 1.0."""
    if liquidity >= LIQUIDITY_EXCELLENT:
        return 1.0
    if liquidity >= LIQUIDITY_GOOD:
        span = LIQUIDITY_EXCELLENT - LIQUIDITY_GOOD
        return 0.5 + (liquidity - LIQUIDITY_GOOD) / span * 0.5
    if liquidity >= LIQUIDITY_FAIR:
        span = LIQUIDITY_GOOD - LIQUIDITY_FAIR
        return 0.17 + (liquidity - LIQUIDITY_FAIR) / span * 0.33
    return max(0.0, liquidity / LIQUIDITY_FAIR * 0.17)


def normalize_fixed_asset_ratio(ratio: float) -> float:
    """0% = 0.0, 20% = 0.33, 40% = 0.67, 60% et plus = 1.0."""
    if ratio >= 0.6:
        return 1.0
    if ratio >= 0.4:
        return 0.67 + (ratio - 0.4) / 0.2 * 0.33
    if ratio >= 0.2:
        return 0.33 + (ratio - 0.2) / 0.2 * 0.34
    return max(0.0, ratio / 0.2 * 0.33)


def normalize_missed_payments(count: int) -> float:
    if count <= 0:
        return 1.0
    if count == 1:
        return 0.5
    if count == 2:
        return 0.25
    return 0.0


# ------- Composantes -------


def asset_health(
    total_assets: float,
    outstanding_loans: float,
    cash: float,
    current_assets: float,
    fixed_assets: float,
) -> AssetHealth:
    if outstanding_loans > 0:
        debt_ratio = outstanding_loans / total_assets if total_assets > 0 else 1.0
        coverage = total_assets / outstanding_loans
        liquidity = (cash + current_assets) / outstanding_loans
    else:
        debt_ratio = 0.0
        coverage = NO_DEBT_RATIO
        liquidity = NO_DEBT_RATIO
    fixed_ratio = fixed_assets / total_assets if total_assets > 0 else 0.0

    n_debt = clamp01(normalize_debt_to_asset(debt_ratio))
    n_cov = clamp01(normalize_asset_coverage(coverage))
    n_liq = clamp01(normalize_liquidity(liquidity))
    n_fixed = clamp01(normalize_fixed_asset_ratio(fixed_ratio))

    w = CREDIT_RATING_WEIGHTS.asset_health
    score = (
        n_debt * w.debt_to_asset
        + n_cov * w.asset_coverage
        + n_liq * w.liquidity
        + n_fixed * w.fixed_assets
    )
    return AssetHealth(
        debt_to_asset_ratio=debt_ratio,
        asset_coverage=coverage,
        liquidity_ratio=liquidity,
        fixed_asset_ratio=fixed_ratio,
        normalized_debt_to_asset=n_debt,
        normalized_asset_coverage=n_cov,
        normalized_liquidity=n_liq,
        normalized_fixed_assets=n_fixed,
        score=clamp01(score),
    )


def payment_history(company: Company) -> PaymentHistory:
    """Échéances honorées (transactions de remboursement) et incidents en cours."""
    on_time = sum(
        1
        for t in company.transactions
        if t.category == TransactionCategory.LOAN_PAYMENT and t.amount < 0
    )
    payoffs = on_time // PAYMENTS_PER_PAYOFF
    missed = sum(loan.missed_payments for loan in company.active_loans)
    consecutive = sum(max(0, loan.missed_payments - 1) for loan in company.active_loans)

    n_on_time = clamp01(on_time / REFERENCE_PAYMENTS)
    n_payoffs = clamp01(payoffs / REFERENCE_PAYOFFS)
    n_missed = normalize_missed_payments(missed)

    w = CREDIT_RATING_WEIGHTS.payment_history
    # n_missed vaut déjà 1.0 sans incident
    score = n_on_time * w.on_time + n_payoffs * w.payoffs + n_missed * w.missed
    return PaymentHistory(
        on_time_payments=on_time,
        loan_payoffs=payoffs,
        missed_payments=missed,
        consecutive_missed_payments=consecutive,
        normalized_on_time_payments=n_on_time,
        normalized_loan_payoffs=n_payoffs,
        normalized_missed_payments=n_missed,
        score=clamp01(score),
    )


def seasonal_profits(company: Company) -> List[Tuple[int, float]]:
    """Résultat d'exploitation par saison, trié chronologiquement.

    Returns:
        Liste de tuples `(index de saison, résultat)`.
    """
    profits: Dict[int, float] = defaultdict(float)
    for t in company.transactions:
        if t.is_capital_flow:
            continue
        profits[t.date.index // WEEKS_PER_SEASON] += t.amount
    return sorted(profits.items())


def profit_consistency(company: Company) -> float:
    """Régularité des 4 dernières saisons, ramenée sur 0..0.03."""
    last_four = [p for _, p in seasonal_profits(company)[-4:]]
    if len(last_four) < 2:
        return 0.0
    # Échelle relative pour que l'écart-type soit comparable à 0.3
    scale = max(float(np.mean(np.abs(last_four))), 1.0)
    values = [p / scale for p in last_four]
    score = consistency_score(
        values[:-1], values[-1], min_samples=2, default=0.7, max_std=0.3
    )
    return score * MAX_PROFIT_CONSISTENCY


def expense_efficiency(company: Company) -> float:
    """Part des recettes de l'année non absorbée par les charges, ramenée sur 0..0.02."""
    income = 0.0
    expenses = 0.0
    for t in company.transactions:
        if t.date.year != company.date.year or t.is_capital_flow:
            continue
        if t.amount >= 0:
            income += t.amount
        else:
            expenses -= t.amount
    if income == 0:
        return 0.0
    return max(0.0, (1 - expenses / income) * MAX_EXPENSE_EFFICIENCY)


def company_stability(company: Company) -> CompanyStability:
    age = company_weeks(company.founded_year, company.date) / WEEKS_PER_YEAR
    raw_consistency = profit_consistency(company)
    raw_efficiency = expense_efficiency(company)

    n_age = age_modifier(age)
    n_consistency = clamp01(raw_consistency / MAX_PROFIT_CONSISTENCY)
    n_efficiency = clamp01(raw_efficiency / MAX_EXPENSE_EFFICIENCY)

    w = CREDIT_RATING_WEIGHTS.company_stability
    score = (
        n_age * w.age
        + n_consistency * w.profit_consistency
        + n_efficiency * w.expense_efficiency
    )
    return CompanyStability(
        company_age=age,
        profit_consistency=raw_consistency,
        expense_efficiency=raw_efficiency,
        normalized_age=n_age,
        normalized_profit_consistency=n_consistency,
        normalized_expense_efficiency=n_efficiency,
        score=clamp01(score),
    )


def negative_balance_penalty(money: float, value: float) -> NegativeBalance:
    """Pénalité de 0 à -30% selon l'ampleur du découvert rapportée à la taille de la société.

    Le nombre de semaines de découvert est estimé : une tranche vaut
    max(10 000 €, 5% de la valeur nette).
    """
    per_week = NEGATIVE_BALANCE_MAX_PENALTY / NEGATIVE_BALANCE_MAX_WEEKS
    if money >= 0:
        return NegativeBalance(
            consecutive_weeks_negative=0,
            penalty_per_week=per_week,
            normalized_weeks=0.0,
            score=0.0,
        )
    threshold = max(NEGATIVE_BALANCE_MIN_THRESHOLD, value * NEGATIVE_BALANCE_VALUE_SHARE)
    weeks = min(math.ceil(abs(money) / threshold), NEGATIVE_BALANCE_MAX_WEEKS)
    normalized = clamp01(weeks / NEGATIVE_BALANCE_MAX_WEEKS)
    return NegativeBalance(
        consecutive_weeks_negative=weeks,
        penalty_per_week=per_week,
        normalized_weeks=normalized,
        score=normalized * NEGATIVE_BALANCE_MAX_PENALTY,
    )


def calculate_credit_rating(company: Company) -> CreditRatingBreakdown:
    """Note finale = 50% + composantes pondérées + pénalité, bornée à [0, 1]."""
    data = calculate_financial_data(company, Period.YEAR)
    health = asset_health(
        data.total_assets,
        company.outstanding_loans(),
        data.cash_money,
        data.current_assets,
        data.fixed_assets,
    )
    history = payment_history(company)
    stability = company_stability(company)
    negative = negative_balance_penalty(company.money, company_value(company))

    w = CREDIT_RATING_WEIGHTS.weights
    final = clamp(
        BASE_RATING
        + health.score * w.asset_health
        + history.score * w.payment_history
        + stability.score * w.company_stability
        + negative.score,
        MIN_RATING,
        MAX_RATING,
    )
    return CreditRatingBreakdown(
        base_rating=BASE_RATING,
        asset_health=health,
        payment_history=history,
        company_stability=stability,
        negative_balance=negative,
        final_rating=final,
    )


def credit_rating(company: Company) -> float:
    """Note finale seule, mise en cache pour la semaine courante."""
    key = f"credit_rating:{company.date.index}"
    if key not in company.cache:
        company.cache[key] = calculate_credit_rating(company).final_rating
    return company.cache[key]


def rating_category(rating: float) -> str:
    for floor, letter, _ in RATING_CATEGORIES:
        if rating >= floor:
            return letter
    return RATING_CATEGORIES[-1][1]


def rating_description(rating: float) -> str:
    for floor, _, description in RATING_CATEGORIES:
        if rating >= floor:
            return description
    return RATING_CATEGORIES[-1][2]
