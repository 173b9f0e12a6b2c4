"""
Satisfaction du conseil d'administration.

Trois composantes pondérées : performance (écart des indicateurs du cours
à leurs attentes), stabilité (reprise de la notation de crédit) et
régularité (écart-type de l'historique de satisfaction). La pression
actionnariale croît avec la part du capital détenue hors joueur.
"""

import logging
from typing import Dict, List

import numpy as np
from pydantic import BaseModel

from winecorp.core.credit_rating import asset_health, company_stability
from winecorp.core.finance import Period, calculate_financial_data
from winecorp.core.share_metrics import get_share_metrics
from winecorp.core.share_price import (
    actual_improvements,
    current_metric_values,
    expected_improvement_rates,
    grace_periods,
    improvement_multipliers,
    metric_deltas,
)
from winecorp.data.board_params import (
    BOARD_SATISFACTION_WEIGHTS,
    CONSISTENCY_DEFAULT,
    CONSISTENCY_MAX_STD,
    CONSISTENCY_MIN_SAMPLES,
    NEW_COMPANY_SATISFACTION,
    PERFORMANCE_DELTA_CAP,
    SATISFACTION_HISTORY_LIMIT,
    STABILITY_ASSET_HEALTH_WEIGHT,
    STABILITY_COMPANY_WEIGHT,
)
from winecorp.domain.company import BoardSnapshot, Company
from winecorp.rules.curves import consistency_score
from winecorp.utils import clamp, clamp01

logger = logging.getLogger(__name__)


class PerformanceDetails(BaseModel):
    earnings_per_share_delta: float = 0.0
    revenue_per_share_delta: float = 0.0
    profit_margin_delta: float = 0.0
    revenue_growth_delta: float = 0.0
    metric_deltas: Dict[str, float] = {}


class StabilityDetails(BaseModel):
    cash_ratio: float = 0.0
    debt_ratio: float = 0.0
    fixed_asset_ratio: float = 0.0
    asset_health_score: float = 0.5
    company_stability_score: float = 0.5


class ConsistencyDetails(BaseModel):
    volatility: float = 0.3
    history_size: int = 0


class BoardSatisfactionBreakdown(BaseModel):
    satisfaction: float = NEW_COMPANY_SATISFACTION
    performance_score: float = 0.5
    stability_score: float = 0.5
    consistency_score: float = 0.5
    ownership_pressure: float = 0.5
    player_ownership_pct: float = 50.0
    performance: PerformanceDetails = PerformanceDetails()
    stability: StabilityDetails = StabilityDetails()
    consistency: ConsistencyDetails = ConsistencyDetails()
    is_grace_period_active: bool = False


def _cache_key(company: Company) -> str:
    return f"board_satisfaction:{company.date.index}"


def invalidate_board_cache(company: Company) -> None:
    for key in [k for k in company.cache if k.startswith("board_satisfaction:")]:
        del company.cache[key]


# ------- Composantes -------


def performance_score(deltas: Dict[str, float]) -> float:
    """Moyenne des écarts ramenés sur 0..1 (écart borné à +/-100 points)."""
    if not deltas:
        return 0.5
    scores = [
        (clamp(d, -PERFORMANCE_DELTA_CAP, PERFORMANCE_DELTA_CAP) + PERFORMANCE_DELTA_CAP)
        / (2 * PERFORMANCE_DELTA_CAP)
        for d in deltas.values()
    ]
    return float(np.mean(scores))


def stability_details(company: Company) -> StabilityDetails:
    data = calculate_financial_data(company, Period.YEAR)
    loans = company.outstanding_loans()
    health = asset_health(
        data.total_assets, loans, data.cash_money, data.current_assets, data.fixed_assets
    )
    stability = company_stability(company)
    total = data.total_assets
    return StabilityDetails(
        cash_ratio=data.cash_money / total if total > 0 else 0.0,
        debt_ratio=loans / total if total > 0 else 0.0,
        fixed_asset_ratio=data.fixed_assets / total if total > 0 else 0.0,
        asset_health_score=health.score,
        company_stability_score=stability.score,
    )


def stability_score(details: StabilityDetails) -> float:
    return clamp01(
        details.asset_health_score * STABILITY_ASSET_HEALTH_WEIGHT
        + details.company_stability_score * STABILITY_COMPANY_WEIGHT
    )


def satisfaction_history(company: Company) -> List[float]:
    return [s.satisfaction for s in company.recent_board_snapshots(SATISFACTION_HISTORY_LIMIT)]


def weighted_satisfaction(performance: float, stability: float, consistency: float) -> float:
    w = BOARD_SATISFACTION_WEIGHTS
    return (
        performance * w["performance"]
        + stability * w["stability"]
        + consistency * w["consistency"]
    )


# ------- Calcul -------


def _full_ownership_breakdown() -> BoardSatisfactionBreakdown:
    return BoardSatisfactionBreakdown(
        satisfaction=1.0,
        performance_score=1.0,
        stability_score=1.0,
        consistency_score=1.0,
        ownership_pressure=0.0,
        player_ownership_pct=100.0,
    )


def calculate_board_satisfaction(company: Company) -> BoardSatisfactionBreakdown:
    """Détail complet de la satisfaction du conseil à la date courante.

    La régularité est évaluée deux fois : une première passe avec une
    valeur courante nulle donne une satisfaction provisoire, qui sert
    ensuite de valeur courante pour la passe définitive. Pendant la
    première année, la satisfaction ne descend pas sous 0.8.
    """
    player_pct = company.shares.player_ownership_pct
    if player_pct >= 100.0:
        return _full_ownership_breakdown()

    grace = grace_periods(company)
    metrics = get_share_metrics(company)
    actual = actual_improvements(company, current_metric_values(company, metrics))
    multipliers = improvement_multipliers(company)
    expected = expected_improvement_rates(
        multipliers.improvement_multiplier, multipliers.market_cap_requirement
    )
    deltas = metric_deltas(actual, expected, grace)
    performance = performance_score(deltas)

    stability_info = stability_details(company)
    stability = stability_score(stability_info)

    history = satisfaction_history(company)

    def consistency_for(current: float) -> float:
        return consistency_score(
            history,
            current,
            min_samples=CONSISTENCY_MIN_SAMPLES,
            default=CONSISTENCY_DEFAULT,
            max_std=CONSISTENCY_MAX_STD,
        )

    def floored(value: float) -> float:
        value = clamp01(value)
        if grace.is_first_year:
            value = max(value, NEW_COMPANY_SATISFACTION)
        return value

    provisional = floored(weighted_satisfaction(performance, stability, consistency_for(0.0)))
    consistency = consistency_for(provisional)
    satisfaction = floored(weighted_satisfaction(performance, stability, consistency))

    return BoardSatisfactionBreakdown(
        satisfaction=satisfaction,
        performance_score=performance,
        stability_score=stability,
        consistency_score=consistency,
        ownership_pressure=clamp01(1.0 - player_pct / 100.0),
        player_ownership_pct=player_pct,
        performance=PerformanceDetails(
            earnings_per_share_delta=deltas["earnings_per_share"],
            revenue_per_share_delta=deltas["revenue_per_share"],
            profit_margin_delta=deltas["profit_margin"],
            revenue_growth_delta=deltas["revenue_growth"],
            metric_deltas=deltas,
        ),
        stability=stability_info,
        consistency=ConsistencyDetails(volatility=1.0 - consistency, history_size=len(history)),
        is_grace_period_active=grace.is_first_year,
    )


def board_satisfaction_breakdown(company: Company) -> BoardSatisfactionBreakdown:
    """Version mise en cache pour la semaine ; valeurs par défaut en cas d'erreur."""
    key = _cache_key(company)
    if key in company.cache:
        return company.cache[key]
    try:
        breakdown = calculate_board_satisfaction(company)
    except (ArithmeticError, ValueError) as e:
        logger.error("Satisfaction du conseil indisponible pour %s: %s", company.name, e)
        return BoardSatisfactionBreakdown()
    company.cache[key] = breakdown
    return breakdown


def board_satisfaction(company: Company) -> float:
    return board_satisfaction_breakdown(company).satisfaction


def store_board_snapshot(company: Company) -> BoardSnapshot:
    """Archive la satisfaction de la semaine (une photo par semaine)."""
    breakdown = board_satisfaction_breakdown(company)
    snapshot = BoardSnapshot(
        date=company.date,
        satisfaction=breakdown.satisfaction,
        performance_score=breakdown.performance_score,
        stability_score=breakdown.stability_score,
        consistency_score=breakdown.consistency_score,
        ownership_pressure=breakdown.ownership_pressure,
        player_ownership_pct=breakdown.player_ownership_pct,
    )
    company.store_board_snapshot(snapshot)
    invalidate_board_cache(company)
    return snapshot
