"""Génération des prêteurs et accès au crédit."""

import logging
import random
from typing import List, Optional

from pydantic import BaseModel

from winecorp.data.loan_params import (
    LENDER_NAMES,
    LENDER_PARAMS,
    LENDER_TYPE_DISTRIBUTION,
    MAX_LENDERS,
    MIN_LENDERS,
    PRESTIGE_RISK_BONUS,
)
from winecorp.domain.loans import Lender, LenderType, OriginationFee
from winecorp.rules.curves import normalize_prestige, skewed_multiplier

logger = logging.getLogger(__name__)


class LenderAvailability(BaseModel):
    is_available: bool
    base_requirement: float
    prestige_bonus: float
    adjusted_requirement: float
    normalized_prestige: float


def pick_lender_type(rng: random.Random) -> LenderType:
    """Tirage selon la distribution cumulée des types."""
    roll = rng.random()
    cumulative = 0.0
    for lender_type, share in LENDER_TYPE_DISTRIBUTION.items():
        cumulative += share
        if roll < cumulative:
            return lender_type
    return list(LENDER_TYPE_DISTRIBUTION)[-1]


def lender_name(lender_type: LenderType, rng: random.Random) -> str:
    if lender_type == LenderType.BANK:
        return rng.choice(LENDER_NAMES["banks"])
    if lender_type == LenderType.INVESTMENT_FUND:
        return rng.choice(LENDER_NAMES["investment_funds"])
    if lender_type == LenderType.QUICK_LOAN:
        return rng.choice(LENDER_NAMES["quick_loans"])
    return f"{rng.choice(LENDER_NAMES['private_prefixes'])} {rng.choice(LENDER_NAMES['private_suffixes'])}"


def generate_lender(lender_type: LenderType, rng: random.Random) -> Lender:
    params = LENDER_PARAMS[lender_type]
    fee = params.origination_fee
    return Lender(
        name=lender_name(lender_type, rng),
        type=lender_type,
        risk_tolerance=rng.uniform(*params.risk_tolerance_range),
        flexibility=rng.uniform(*params.flexibility_range),
        market_presence=skewed_multiplier(rng.random()),
        base_interest_rate=rng.uniform(*params.base_interest_range),
        min_loan_amount=params.loan_amount_range[0],
        max_loan_amount=params.loan_amount_range[1],
        min_duration_seasons=params.duration_range[0],
        max_duration_seasons=params.duration_range[1],
        origination_fee=OriginationFee(
            base_percent=rng.uniform(*fee.base_percent_range),
            min_fee=rng.uniform(*fee.min_fee_range),
            max_fee=rng.uniform(*fee.max_fee_range),
            credit_rating_modifier=rng.uniform(*fee.credit_rating_modifier_range),
            duration_modifier=rng.uniform(*fee.duration_modifier_range),
        ),
    )


def generate_lenders(rng: Optional[random.Random] = None) -> List[Lender]:
    """Crée entre 25 et 65 prêteurs répartis par type."""
    rng = rng or random.Random()
    count = rng.randint(MIN_LENDERS, MAX_LENDERS)
    lenders = [generate_lender(pick_lender_type(rng), rng) for _ in range(count)]
    logger.debug("%d prêteurs générés", count)
    return lenders


def lender_availability(
    lender: Lender, credit_rating: float, prestige: float = 0.0
) -> LenderAvailability:
    """La notation doit atteindre la tolérance au risque du prêteur.

    Le prestige abaisse l'exigence de 0.20 au plus. Notation et tolérance
    sont toutes deux sur 0..1.
    """
    normalized = normalize_prestige(prestige) if prestige else 0.0
    bonus = normalized * PRESTIGE_RISK_BONUS
    adjusted = lender.risk_tolerance - bonus
    return LenderAvailability(
        is_available=credit_rating >= adjusted and not lender.blacklisted,
        base_requirement=lender.risk_tolerance,
        prestige_bonus=bonus,
        adjusted_requirement=adjusted,
        normalized_prestige=normalized,
    )


def available_lenders(
    lenders: List[Lender], credit_rating: float, prestige: float = 0.0
) -> List[Lender]:
    return [
        lender
        for lender in lenders
        if lender_availability(lender, credit_rating, prestige).is_available
    ]


def blacklist_lender(lender: Lender) -> None:
    lender.blacklisted = True
    logger.warning("Prêteur %s : société placée sur liste noire", lender.name)
