"""
Application des contraintes du conseil d'administration.

Chaque type d'action a un seuil de départ (au-dessus, aucune contrainte),
un seuil bloquant (en dessous ou égal, action refusée) et, entre les deux,
une éventuelle formule qui plafonne l'action selon la satisfaction et la
situation financière.
"""

import logging
import math
from typing import Callable, Dict, Optional

from pydantic import BaseModel

from winecorp.core.board import board_satisfaction
from winecorp.core.finance import Period, calculate_financial_data
from winecorp.data import board_params as bp
from winecorp.domain.board import BoardConstraintType, LimitingConstraint
from winecorp.domain.company import Company
from winecorp.domain.time import SEASONS_PER_YEAR

logger = logging.getLogger(__name__)


class FinancialContext(BaseModel):
    """Situation financière lue par les formules de plafonnement."""

    cash: float = 0.0
    total_assets: float = 0.0
    fixed_assets: float = 0.0
    current_assets: float = 0.0
    expenses_per_season: float = 0.0
    profit_margin: float = 0.0
    debt_ratio: float = 0.0
    total_shares: int = 0
    outstanding_shares: int = 0
    share_price: float = 0.0
    old_dividend_rate: float = 0.0
    new_dividend_rate: float = 0.0


class EnforcementResult(BaseModel):
    allowed: bool
    satisfaction: float
    limit: Optional[float] = None
    message: Optional[str] = None


class ConstraintInfo(BaseModel):
    hard_limit: Optional[float]
    board_limit: Optional[float]
    effective_limit: Optional[float]
    limiting_constraint: LimitingConstraint
    constraint_reason: str
    is_blocked: bool
    block_reason: Optional[str] = None
    is_limited: bool
    satisfaction: float


def financial_context(company: Company, **overrides) -> FinancialContext:
    """Construit le contexte à partir de l'exercice en cours."""
    data = calculate_financial_data(company, Period.YEAR)
    total = data.total_assets
    context = FinancialContext(
        cash=company.money,
        total_assets=total,
        fixed_assets=data.fixed_assets,
        current_assets=data.current_assets,
        expenses_per_season=data.expenses / SEASONS_PER_YEAR,
        profit_margin=data.net_income / data.income if data.income > 0 else 0.0,
        debt_ratio=company.outstanding_loans() / total if total > 0 else 0.0,
        total_shares=company.shares.total_shares,
        outstanding_shares=company.shares.outstanding_shares,
        share_price=company.shares.share_price,
        old_dividend_rate=company.shares.dividend_rate,
    )
    return context.model_copy(update=overrides)


# ------- Formules de plafonnement -------


def _margin_multiplier(profit_margin: float, negative: float, low_penalty: float) -> float:
    if profit_margin < 0:
        return negative
    if profit_margin < bp.LOW_MARGIN_THRESHOLD:
        return 1 - (bp.LOW_MARGIN_THRESHOLD - profit_margin) / bp.LOW_MARGIN_THRESHOLD * low_penalty
    return 1.0


def vineyard_purchase_limit(satisfaction: float, _value: float, ctx: FinancialContext) -> float:
    """Budget d'achat : part de la trésorerie égale à la satisfaction.

    Réduit quand l'actif est trop immobilisé sans réserve suffisante,
    puis selon la marge.
    """
    base = ctx.cash * satisfaction
    multiplier = 1.0

    fixed_ratio = ctx.fixed_assets / ctx.total_assets if ctx.total_assets > 0 else 0.0
    non_fixed = ctx.current_assets + ctx.cash
    required = ctx.expenses_per_season * bp.VINEYARD_LIQUIDITY_SEASONS
    if fixed_ratio > bp.VINEYARD_FIXED_ASSET_RATIO_LIMIT and non_fixed < required:
        shortfall = (required - non_fixed) / required
        ratio_penalty = (fixed_ratio - bp.VINEYARD_FIXED_ASSET_RATIO_LIMIT) / (
            1 - bp.VINEYARD_FIXED_ASSET_RATIO_LIMIT
        )
        combined = min(1.0, shortfall * 0.7 + ratio_penalty * 0.3)
        multiplier = 1 - combined * bp.VINEYARD_MAX_LIQUIDITY_PENALTY

    multiplier *= _margin_multiplier(
        ctx.profit_margin, bp.VINEYARD_NEGATIVE_MARGIN_MULTIPLIER, bp.VINEYARD_LOW_MARGIN_PENALTY
    )
    return max(0.0, base * multiplier)


def share_issuance_limit(satisfaction: float, value: float, ctx: FinancialContext) -> float:
    """Nombre max d'actions émises, de 20% à 50% du total."""
    if ctx.total_shares <= 0:
        return 0
    base = math.floor(
        ctx.total_shares * (bp.ISSUANCE_BASE_RATIO + satisfaction * bp.ISSUANCE_SATISFACTION_RATIO)
    )
    multiplier = 1.0
    if ctx.share_price < bp.ISSUANCE_LOW_PRICE_THRESHOLD:
        shortfall = (bp.ISSUANCE_LOW_PRICE_THRESHOLD - ctx.share_price) / bp.ISSUANCE_LOW_PRICE_THRESHOLD
        multiplier = 1 - shortfall * bp.ISSUANCE_MAX_PRICE_PENALTY
    return min(math.floor(base * multiplier), ctx.total_shares)


def share_buyback_limit(satisfaction: float, value: float, ctx: FinancialContext) -> float:
    """Nombre max d'actions rachetées, freiné par la dette et la trésorerie engagée."""
    if ctx.outstanding_shares <= 0:
        return 0
    base = math.floor(
        ctx.outstanding_shares
        * (bp.BUYBACK_BASE_RATIO + satisfaction * bp.BUYBACK_SATISFACTION_RATIO)
    )
    multiplier = 1.0
    if ctx.debt_ratio > bp.BUYBACK_DEBT_RATIO_THRESHOLD:
        excess = min((ctx.debt_ratio - bp.BUYBACK_DEBT_RATIO_THRESHOLD) / bp.BUYBACK_DEBT_RATIO_RANGE, 1.0)
        multiplier *= 1 - excess * bp.BUYBACK_MAX_DEBT_PENALTY

    if ctx.cash > 0:
        usage = base * ctx.share_price / ctx.cash
        if usage > bp.BUYBACK_CASH_USAGE_THRESHOLD:
            excess = min(
                (usage - bp.BUYBACK_CASH_USAGE_THRESHOLD) / (1 - bp.BUYBACK_CASH_USAGE_THRESHOLD), 1.0
            )
            multiplier *= 1 - excess * bp.BUYBACK_MAX_CASH_PENALTY

    return min(
        math.floor(base * multiplier), math.floor(ctx.outstanding_shares * bp.BUYBACK_HARD_RATIO)
    )


def dividend_change_limit(satisfaction: float, value: float, ctx: FinancialContext) -> float:
    """Taux plafond (hausse) ou plancher (baisse) autorisé par le conseil.

    Sans dividende existant, le plafond est le taux finançable par quatre
    saisons de trésorerie.
    """
    old = ctx.old_dividend_rate
    new = value if value is not None else ctx.new_dividend_rate
    if old <= 0:
        if ctx.total_shares <= 0:
            return 0.0
        return max(0.0, ctx.cash / (bp.DIVIDEND_RESERVE_SEASONS * ctx.total_shares))

    change = bp.DIVIDEND_BASE_CHANGE + satisfaction * bp.DIVIDEND_SATISFACTION_CHANGE
    max_rate = old * (1 + change)
    min_rate = old * (1 - change)

    increase_multiplier = 1.0
    required = new * ctx.total_shares * bp.DIVIDEND_RESERVE_SEASONS
    if new > old and ctx.cash < required:
        shortfall = (required - ctx.cash) / required if required > 0 else 0.0
        increase_multiplier = max(
            bp.DIVIDEND_MIN_INCREASE_MULTIPLIER, 1 - shortfall * bp.DIVIDEND_SHORTFALL_PENALTY
        )
    increase_multiplier *= _margin_multiplier(
        ctx.profit_margin, bp.DIVIDEND_NEGATIVE_MARGIN_MULTIPLIER, bp.DIVIDEND_LOW_MARGIN_PENALTY
    )

    floor_rate = max(0.0, min_rate, old * bp.DIVIDEND_HARD_MIN_RATIO)
    if new > old:
        return max_rate * increase_multiplier
    return floor_rate


ScalingFormula = Callable[[float, Optional[float], FinancialContext], float]

SCALING_FORMULAS: Dict[BoardConstraintType, ScalingFormula] = {
    BoardConstraintType.VINEYARD_PURCHASE: vineyard_purchase_limit,
    BoardConstraintType.SHARE_ISSUANCE: share_issuance_limit,
    BoardConstraintType.SHARE_BUYBACK: share_buyback_limit,
    BoardConstraintType.DIVIDEND_CHANGE: dividend_change_limit,
}


# ------- Contrôles -------


def _is_fully_owned(company: Company) -> bool:
    return company.shares.player_ownership_pct >= 100.0


def _within_limit(
    action: BoardConstraintType, value: float, limit: float, ctx: FinancialContext
) -> bool:
    # Une baisse de dividende est bornée par un plancher.
    if action == BoardConstraintType.DIVIDEND_CHANGE and value <= ctx.old_dividend_rate:
        return value >= limit
    return value <= limit


def is_action_allowed(
    company: Company,
    action: BoardConstraintType,
    value: Optional[float] = None,
    context: Optional[FinancialContext] = None,
) -> EnforcementResult:
    """Vérifie qu'une action passe le conseil.

    Une erreur de calcul n'empêche jamais le joueur d'agir : elle est
    journalisée et l'action autorisée.
    """
    try:
        if _is_fully_owned(company):
            return EnforcementResult(allowed=True, satisfaction=1.0)

        satisfaction = board_satisfaction(company)
        constraint = bp.BOARD_CONSTRAINTS[action]
        if satisfaction <= constraint["max"]:
            return EnforcementResult(
                allowed=False, satisfaction=satisfaction, message=constraint["message"]
            )

        formula = SCALING_FORMULAS.get(action)
        if formula is not None and value is not None:
            ctx = context or financial_context(company)
            limit = formula(satisfaction, value, ctx)
            if satisfaction > constraint["start"]:
                return EnforcementResult(allowed=True, satisfaction=satisfaction, limit=limit)
            if _within_limit(action, value, limit, ctx):
                return EnforcementResult(allowed=True, satisfaction=satisfaction, limit=limit)
            return EnforcementResult(
                allowed=False,
                satisfaction=satisfaction,
                limit=limit,
                message=f"Le conseil limite cette opération à {limit:,.2f} (demandé : {value:,.2f}).",
            )

        if satisfaction > constraint["start"]:
            return EnforcementResult(allowed=True, satisfaction=satisfaction)
        return EnforcementResult(
            allowed=False, satisfaction=satisfaction, message=constraint["message"]
        )
    except (ArithmeticError, ValueError, KeyError) as e:
        logger.error("Contrôle du conseil impossible (%s): %s", action.value, e)
        return EnforcementResult(allowed=True, satisfaction=1.0)


def get_action_limit(
    company: Company,
    action: BoardConstraintType,
    value: Optional[float] = None,
    context: Optional[FinancialContext] = None,
) -> Optional[float]:
    """Plafond imposé par le conseil ; None s'il n'y en a pas."""
    formula = SCALING_FORMULAS.get(action)
    if formula is None or _is_fully_owned(company):
        return None
    satisfaction = board_satisfaction(company)
    if satisfaction > bp.BOARD_CONSTRAINTS[action]["start"]:
        return None
    return formula(satisfaction, value, context or financial_context(company))


def constraint_info(
    company: Company,
    action: BoardConstraintType,
    hard_limit: Optional[float],
    value: Optional[float] = None,
    context: Optional[FinancialContext] = None,
) -> ConstraintInfo:
    """Combine la limite réglementaire et celle du conseil, et désigne la plus stricte."""
    satisfaction = 1.0 if _is_fully_owned(company) else board_satisfaction(company)
    constraint = bp.BOARD_CONSTRAINTS[action]

    if not _is_fully_owned(company) and satisfaction <= constraint["max"]:
        return ConstraintInfo(
            hard_limit=hard_limit,
            board_limit=0.0,
            effective_limit=0.0,
            limiting_constraint=LimitingConstraint.BOARD,
            constraint_reason="Action bloquée par le conseil",
            is_blocked=True,
            block_reason=constraint["message"],
            is_limited=True,
            satisfaction=satisfaction,
        )

    board_limit = get_action_limit(company, action, value, context)
    if board_limit is not None and (hard_limit is None or board_limit < hard_limit):
        limiting, effective = LimitingConstraint.BOARD, board_limit
        reason = "Plafond du conseil"
    elif hard_limit is not None:
        limiting, effective = LimitingConstraint.HARD, hard_limit
        reason = "Limite réglementaire"
    else:
        limiting, effective = LimitingConstraint.NONE, None
        reason = "Aucune contrainte"

    return ConstraintInfo(
        hard_limit=hard_limit,
        board_limit=board_limit,
        effective_limit=effective,
        limiting_constraint=limiting,
        constraint_reason=reason,
        is_blocked=False,
        is_limited=limiting == LimitingConstraint.BOARD,
        satisfaction=satisfaction,
    )
