"""Cycle économique : transitions de phase à chaque changement de saison."""

import logging
import random
from typing import Optional

from winecorp.data.economy_params import (
    ECONOMY_EXPECTATION_MULTIPLIERS,
    ECONOMY_INTEREST_MULTIPLIERS,
    ECONOMY_SALES_MULTIPLIERS,
    TRANSITION_SHIFT_EDGE,
    TRANSITION_SHIFT_MIDDLE,
)
from winecorp.domain.economy import ECONOMY_PHASES, EconomyPhase

logger = logging.getLogger(__name__)


def next_economy_phase(
    phase: EconomyPhase, rng: Optional[random.Random] = None
) -> EconomyPhase:
    """Tire la phase suivante.

    Phases centrales : 25% vers le bas, 25% vers le haut, 50% stable.
    Crash et Boom : 33% vers le bas puis 33% vers le haut (bornés), sinon stable,
    soit 1/3 de chances de revenir vers le centre.
    """
    rng = rng or random
    idx = ECONOMY_PHASES.index(phase)
    is_edge = idx in (0, len(ECONOMY_PHASES) - 1)
    shift = TRANSITION_SHIFT_EDGE if is_edge else TRANSITION_SHIFT_MIDDLE

    roll = rng.random()
    if roll < shift:
        return ECONOMY_PHASES[max(0, idx - 1)]
    if roll < shift * 2:
        return ECONOMY_PHASES[min(len(ECONOMY_PHASES) - 1, idx + 1)]
    return phase


def interest_multiplier(phase: EconomyPhase) -> float:
    return ECONOMY_INTEREST_MULTIPLIERS[phase]


def expectation_multiplier(phase: EconomyPhase) -> float:
    return ECONOMY_EXPECTATION_MULTIPLIERS[phase]


def sales_multipliers(phase: EconomyPhase) -> dict:
    return ECONOMY_SALES_MULTIPLIERS[phase]
