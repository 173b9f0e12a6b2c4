"""
Tendance de croissance : multiplicateur des attentes du marché, relevé quand
la société dépasse les progressions attendues et abaissé quand elle les rate.
"""

import logging

from winecorp.core.share_metrics import get_share_metrics
from winecorp.core.share_price import (
    actual_improvements,
    current_metric_values,
    expected_improvement_rates,
    grace_periods,
    improvement_multipliers,
)
from winecorp.data.share_params import SHARE_VALUATION
from winecorp.domain.company import Company

logger = logging.getLogger(__name__)

OUTPERFORM_THRESHOLD = 1.0
UNDERPERFORM_THRESHOLD = 0.8

_PROFITABILITY_KEYS = ("earnings_per_share", "revenue_per_share", "revenue_growth", "profit_margin")
_TREND_KEYS = ("credit_rating", "fixed_asset_ratio", "prestige")


def performance_scores(company: Company) -> list:
    """Ratios réel / attendu des indicateurs sortis de leur période de grâce."""
    grace = grace_periods(company)
    actual = actual_improvements(company, current_metric_values(company, get_share_metrics(company)))
    multipliers = improvement_multipliers(company)
    expected = expected_improvement_rates(
        multipliers.improvement_multiplier, multipliers.market_cap_requirement
    )

    keys = []
    if not grace.is_first_year:
        keys.extend(_PROFITABILITY_KEYS)
    if not grace.is_dividend_grace_period:
        keys.append("dividend_per_share")
    if grace.has_48_week_history:
        keys.extend(_TREND_KEYS)
    return [actual[key] / expected[key] for key in keys if expected[key] > 0]


def update_growth_trend(company: Company) -> float:
    """Met à jour le multiplicateur une fois par semaine, après 48 semaines d'existence.

    +0.02 si la moyenne des ratios atteint 1, -0.02 sous 0.8, bornes [0.5, 1.5].

    Returns:
        Le multiplicateur de tendance en vigueur.
    """
    shares = company.shares
    if shares.last_growth_trend_update == company.date:
        return shares.growth_trend_multiplier
    if not grace_periods(company).has_48_week_history:
        return shares.growth_trend_multiplier

    scores = performance_scores(company)
    if not scores:
        return shares.growth_trend_multiplier

    config = SHARE_VALUATION.growth_trend
    average = sum(scores) / len(scores)
    multiplier = shares.growth_trend_multiplier
    if average >= OUTPERFORM_THRESHOLD:
        multiplier = min(1.0 + config.max_adjustment, multiplier + config.increment)
    elif average < UNDERPERFORM_THRESHOLD:
        multiplier = max(1.0 - config.min_adjustment, multiplier - config.increment)

    if multiplier != shares.growth_trend_multiplier:
        logger.info(
            "%s: tendance de croissance %.2f -> %.2f (score moyen %.2f)",
            company.name,
            shares.growth_trend_multiplier,
            multiplier,
            average,
        )
    shares.growth_trend_multiplier = multiplier
    shares.last_growth_trend_update = company.date
    return multiplier
