from enum import Enum


class EconomyPhase(Enum):
    CRASH = "Crash"
    RECESSION = "Recession"
    STABLE = "Stable"
    EXPANSION = "Expansion"
    BOOM = "Boom"


# Du plus bas au plus haut, sert aux transitions de phase
ECONOMY_PHASES = [
    EconomyPhase.CRASH,
    EconomyPhase.RECESSION,
    EconomyPhase.STABLE,
    EconomyPhase.EXPANSION,
    EconomyPhase.BOOM,
]
