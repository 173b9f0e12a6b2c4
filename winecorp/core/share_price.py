"""
Cours de l'action : ajustement hebdomadaire incrémental.

Chaque semaine, huit indicateurs sont comparés à leur valeur d'il y a
48 semaines. L'écart entre la progression réelle et la progression attendue
(économie, prestige, tendance de croissance, capitalisation) déplace le cours,
freiné par un facteur d'ancrage sur la valeur comptable par action.
"""

import logging
import math
from typing import Dict, Optional

from pydantic import BaseModel

from winecorp.core.credit_rating import credit_rating
from winecorp.core.economy import expectation_multiplier
from winecorp.core.finance import Period, calculate_financial_data
from winecorp.core.share_metrics import ShareMetrics, get_share_metrics
from winecorp.data.share_params import (
    DIVIDEND_GRACE_WEEKS,
    HISTORY_WEEKS,
    METRIC_KEYS,
    PAYMENTS_PER_YEAR,
    SHARE_VALUATION,
)
from winecorp.domain.company import Company, MetricsSnapshot
from winecorp.domain.economy import EconomyPhase
from winecorp.domain.time import WEEKS_PER_SEASON, WEEKS_PER_YEAR, company_weeks
from winecorp.rules.curves import normalize_prestige
from winecorp.utils import clamp

logger = logging.getLogger(__name__)

MetricValues = Dict[str, float]


class GracePeriods(BaseModel):
    has_48_week_history: bool
    is_first_year: bool
    is_dividend_grace_period: bool


class ImprovementMultipliers(BaseModel):
    improvement_multiplier: float
    market_cap_requirement: float
    market_cap: float
    economy_phase: EconomyPhase
    economy_multiplier: float
    prestige: float
    normalized_prestige: float
    prestige_multiplier: float
    growth_trend_multiplier: float


class MetricContribution(BaseModel):
    delta_percent: float
    delta_ratio: float
    contribution: float


class SharePriceAdjustment(BaseModel):
    new_price: float
    adjustment: float
    total_contribution: float
    anchor_factor: float
    deltas: Dict[str, float]
    contributions: Dict[str, MetricContribution]


class AnchorDetails(BaseModel):
    deviation: float
    strength: float
    exponent: float
    denominator: float
    anchor_factor: float


class SharePriceUpdate(BaseModel):
    success: bool
    new_price: Optional[float] = None
    error: Optional[str] = None


class SharePriceBreakdown(BaseModel):
    current_price: float
    base_price: float
    adjustment: SharePriceAdjustment
    share_metrics: ShareMetrics
    expected_improvement_rates: Dict[str, float]
    current_values: Dict[str, float]
    previous_values: Dict[str, Optional[float]]
    has_history: bool
    anchor: AnchorDetails
    multipliers: ImprovementMultipliers
    expected_dividend_payments: int


# ------- Attentes du marché -------


def market_cap(share_price: float, total_shares: int) -> float:
    if total_shares == 0 or share_price <= 0:
        return 0.0
    return share_price * total_shares


def market_cap_requirement(cap: float) -> float:
    """Exigence supplémentaire des grosses capitalisations : +0.5% par décade au-delà de 1 M€, 3% max."""
    config = SHARE_VALUATION.market_cap
    if not config.enabled or cap <= config.base_market_cap:
        return 0.0
    return min(config.base_rate * math.log10(cap / config.base_market_cap), config.max_rate)


def prestige_multiplier(prestige: float) -> float:
    scaling = SHARE_VALUATION.prestige_scaling
    return scaling.base + normalize_prestige(prestige) * (scaling.max_multiplier - scaling.base)


def improvement_multipliers(company: Company) -> ImprovementMultipliers:
    economy = expectation_multiplier(company.economy_phase)
    prestige = prestige_multiplier(company.prestige)
    trend = company.shares.growth_trend_multiplier
    cap = market_cap(company.shares.share_price, company.shares.total_shares)
    return ImprovementMultipliers(
        improvement_multiplier=economy * prestige * trend,
        market_cap_requirement=market_cap_requirement(cap),
        market_cap=cap,
        economy_phase=company.economy_phase,
        economy_multiplier=economy,
        prestige=company.prestige,
        normalized_prestige=normalize_prestige(company.prestige),
        prestige_multiplier=prestige,
        growth_trend_multiplier=trend,
    )


def expected_improvement_rates(multiplier: float, cap_requirement: float) -> MetricValues:
    """Progression attendue sur 48 semaines par indicateur, en points de %."""
    rates = SHARE_VALUATION.expected_improvement_rates
    return {key: (rates[key] * multiplier + cap_requirement) * 100 for key in METRIC_KEYS}


def grace_periods(company: Company) -> GracePeriods:
    weeks = company_weeks(company.founded_year, company.date)
    return GracePeriods(
        has_48_week_history=weeks >= HISTORY_WEEKS,
        is_first_year=weeks < WEEKS_PER_YEAR,
        is_dividend_grace_period=weeks < DIVIDEND_GRACE_WEEKS,
    )


def expected_dividend_payments(company: Company) -> int:
    weeks = company_weeks(company.founded_year, company.date)
    if weeks < WEEKS_PER_YEAR:
        return min(PAYMENTS_PER_YEAR, math.ceil(weeks / WEEKS_PER_SEASON))
    return PAYMENTS_PER_YEAR


# ------- Progressions réelles -------


def _relative_change(current: float, previous: float) -> float:
    if previous > 0:
        return (current - previous) / previous * 100
    return 100.0 if current > 0 else 0.0


def trend_delta(current: float, previous: float, fallback_for_positive: float = 0.0) -> float:
    if previous > 0:
        return (current - previous) / previous * 100
    return fallback_for_positive if current > 0 else 0.0


def profitability_improvements(current: MetricValues, previous: MetricValues) -> MetricValues:
    """Progression en % des indicateurs de rentabilité (100% si partis de zéro)."""
    improvements = {
        key: _relative_change(current[key], previous[key])
        for key in ("earnings_per_share", "revenue_per_share", "dividend_per_share", "profit_margin")
    }
    # La croissance peut être négative : on la compare en écart absolu
    cur, prev = current["revenue_growth"], previous["revenue_growth"]
    if prev > -1:
        improvements["revenue_growth"] = (cur - prev) / (abs(prev) + 0.01) * 100
    else:
        improvements["revenue_growth"] = 100.0 if cur > -1 else 0.0
    return improvements


def trend_improvements(
    current: MetricValues, previous: MetricValues, has_history: bool
) -> MetricValues:
    if not has_history:
        return {"credit_rating": 0.0, "fixed_asset_ratio": 0.0, "prestige": 0.0}
    return {
        "credit_rating": trend_delta(current["credit_rating"], previous["credit_rating"]),
        "fixed_asset_ratio": trend_delta(
            current["fixed_asset_ratio"], previous["fixed_asset_ratio"]
        ),
        "prestige": trend_delta(current["prestige"], previous["prestige"], 100.0),
    }


def metric_deltas(
    actual: MetricValues, expected: MetricValues, grace: GracePeriods
) -> MetricValues:
    """Écart réel - attendu ; nul pendant les périodes de grâce."""
    deltas = {}
    for key in METRIC_KEYS:
        if key == "dividend_per_share":
            active = not grace.is_dividend_grace_period
        elif key in ("credit_rating", "fixed_asset_ratio", "prestige"):
            active = grace.has_48_week_history
        else:
            active = not grace.is_first_year
        deltas[key] = actual[key] - expected[key] if active else 0.0
    return deltas


# ------- Valeurs comparées -------


def fixed_asset_ratio(company: Company) -> float:
    data = calculate_financial_data(company, Period.YEAR)
    return data.fixed_assets / data.total_assets if data.total_assets > 0 else 0.0


def current_metric_values(company: Company, metrics: ShareMetrics) -> MetricValues:
    return {
        "earnings_per_share": metrics.earnings_per_share_48w,
        "revenue_per_share": metrics.revenue_per_share_48w,
        "dividend_per_share": metrics.dividend_per_share_48w,
        "revenue_growth": metrics.revenue_growth_48w,
        "profit_margin": metrics.profit_margin_48w,
        "credit_rating": credit_rating(company),
        "fixed_asset_ratio": fixed_asset_ratio(company),
        "prestige": company.prestige,
    }


def _snapshot_values(snapshot: MetricsSnapshot) -> MetricValues:
    return {
        "earnings_per_share": snapshot.earnings_per_share_48w,
        "revenue_per_share": snapshot.revenue_per_share_48w,
        "dividend_per_share": snapshot.dividend_per_share_48w,
        "revenue_growth": snapshot.revenue_growth_48w,
        "profit_margin": snapshot.profit_margin_48w,
        "credit_rating": snapshot.credit_rating,
        "fixed_asset_ratio": snapshot.fixed_asset_ratio,
        "prestige": snapshot.prestige,
    }


def previous_metric_values(company: Company, current: MetricValues) -> MetricValues:
    """Valeurs d'il y a 48 semaines, ou les valeurs actuelles sans historique."""
    snapshot = company.metrics_snapshot_weeks_ago(HISTORY_WEEKS)
    if snapshot is None:
        return dict(current)
    return _snapshot_values(snapshot)


def actual_improvements(company: Company, current: MetricValues) -> MetricValues:
    previous = previous_metric_values(company, current)
    improvements = profitability_improvements(current, previous)
    improvements.update(
        trend_improvements(current, previous, grace_periods(company).has_48_week_history)
    )
    return improvements


# ------- Ajustement -------


def anchor_factor(current_price: float, base_price: float) -> float:
    """1 / (1 + force * écart^exposant) : plus le cours s'éloigne de la valeur comptable, plus il ralentit."""
    if base_price <= 0 or current_price <= 0:
        return 0.0
    deviation = abs(current_price - base_price) / base_price
    anchor = SHARE_VALUATION.anchor
    return 1 / (1 + anchor.strength * deviation**anchor.exponent)


def anchor_details(current_price: float, base_price: float) -> AnchorDetails:
    anchor = SHARE_VALUATION.anchor
    deviation = abs(current_price - base_price) / base_price if base_price > 0 else 0.0
    return AnchorDetails(
        deviation=deviation,
        strength=anchor.strength,
        exponent=anchor.exponent,
        denominator=1 + anchor.strength * deviation**anchor.exponent,
        anchor_factor=anchor_factor(current_price, base_price),
    )


def min_share_price(book_value: float) -> float:
    return max(0.01, book_value * SHARE_VALUATION.anchor.min_price_ratio_to_anchor)


def calculate_incremental_adjustment(
    company: Company,
    current_price: float,
    base_price: float,
    metrics: Optional[ShareMetrics] = None,
) -> SharePriceAdjustment:
    metrics = metrics or get_share_metrics(company)
    current = current_metric_values(company, metrics)
    multipliers = improvement_multipliers(company)
    expected = expected_improvement_rates(
        multipliers.improvement_multiplier, multipliers.market_cap_requirement
    )
    deltas = metric_deltas(
        actual_improvements(company, current), expected, grace_periods(company)
    )

    contributions = {}
    total = 0.0
    for key, delta in deltas.items():
        config = SHARE_VALUATION.metrics[key]
        ratio = clamp(delta / 100, -config.max_ratio, config.max_ratio)
        contribution = ratio * config.base_adjustment
        contributions[key] = MetricContribution(
            delta_percent=delta, delta_ratio=ratio, contribution=contribution
        )
        total += contribution

    factor = anchor_factor(current_price, base_price)
    adjustment = total * factor
    new_price = max(min_share_price(base_price), current_price + adjustment)
    return SharePriceAdjustment(
        new_price=new_price,
        adjustment=adjustment,
        total_contribution=total,
        anchor_factor=factor,
        deltas=deltas,
        contributions=contributions,
    )


def initialize_share_price(company: Company) -> float:
    """Cours initial = valeur comptable par action."""
    price = get_share_metrics(company).book_value_per_share
    company.shares.share_price = price
    company.shares.last_share_price_update = company.date
    return price


def adjust_share_price_weekly(company: Company) -> SharePriceUpdate:
    """Ajuste le cours et enregistre la photo hebdomadaire des indicateurs."""
    try:
        current_price = company.shares.share_price
        if current_price <= 0:
            return SharePriceUpdate(success=True, new_price=initialize_share_price(company))

        metrics = get_share_metrics(company)
        base_price = metrics.book_value_per_share
        result = calculate_incremental_adjustment(company, current_price, base_price, metrics)

        company.store_metrics_snapshot(
            MetricsSnapshot(
                date=company.date,
                credit_rating=credit_rating(company),
                prestige=company.prestige,
                fixed_asset_ratio=fixed_asset_ratio(company),
                share_price=result.new_price,
                book_value_per_share=base_price,
                earnings_per_share_48w=metrics.earnings_per_share_48w,
                revenue_per_share_48w=metrics.revenue_per_share_48w,
                dividend_per_share_48w=metrics.dividend_per_share_48w,
                profit_margin_48w=metrics.profit_margin_48w,
                revenue_growth_48w=metrics.revenue_growth_48w,
            )
        )
        company.shares.share_price = result.new_price
        company.shares.last_share_price_update = company.date
        logger.debug(
            "%s: cours %.2f -> %.2f", company.name, current_price, result.new_price
        )
        return SharePriceUpdate(success=True, new_price=result.new_price)
    except (ArithmeticError, ValueError) as e:
        logger.error("Ajustement du cours impossible pour %s: %s", company.name, e)
        return SharePriceUpdate(success=False, error="Failed to adjust share price")


def apply_share_structure_adjustment(
    company: Company, old_total: int, new_total: int, issuance: bool
) -> float:
    """Réaction immédiate du cours à une émission (dilution) ou un rachat (concentration).

    Raises:
        ValueError: Si le cours n'est pas encore initialisé.
    """
    current_price = company.shares.share_price
    if current_price <= 0:
        raise ValueError("Share price not initialized")

    config = SHARE_VALUATION.share_structure
    reaction = config.dilution_penalty if issuance else config.concentration_bonus
    new_price = current_price * (old_total / new_total) * reaction
    final = max(min_share_price(get_share_metrics(company).book_value_per_share), new_price)

    company.shares.share_price = final
    company.shares.last_share_price_update = company.date
    return final


def share_price_breakdown(company: Company) -> Optional[SharePriceBreakdown]:
    """Détail de l'ajustement de la semaine ; None tant que le cours n'est pas initialisé."""
    current_price = company.shares.share_price
    if current_price <= 0:
        return None

    metrics = get_share_metrics(company)
    base_price = metrics.book_value_per_share
    multipliers = improvement_multipliers(company)
    current = current_metric_values(company, metrics)
    snapshot = company.metrics_snapshot_weeks_ago(HISTORY_WEEKS)
    if snapshot is not None:
        previous: Dict[str, Optional[float]] = _snapshot_values(snapshot)
    else:
        previous = {key: None for key in METRIC_KEYS}

    return SharePriceBreakdown(
        current_price=current_price,
        base_price=base_price,
        adjustment=calculate_incremental_adjustment(company, current_price, base_price, metrics),
        share_metrics=metrics,
        expected_improvement_rates=expected_improvement_rates(
            multipliers.improvement_multiplier, multipliers.market_cap_requirement
        ),
        current_values=current,
        previous_values=previous,
        has_history=snapshot is not None,
        anchor=anchor_details(current_price, base_price),
        multipliers=multipliers,
        expected_dividend_payments=expected_dividend_payments(company),
    )
