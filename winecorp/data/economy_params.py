# Paramètres macro-économiques par phase

from winecorp.domain.economy import EconomyPhase

# Probabilité de glisser vers chaque phase voisine (le reste = stabilité)
TRANSITION_SHIFT_MIDDLE = 0.25  # phases centrales : 25% gauche, 25% droite, 50% reste
TRANSITION_SHIFT_EDGE = 0.33  # Crash/Boom : 33% vers l'intérieur, 67% reste

ECONOMY_SALES_MULTIPLIERS = {
    EconomyPhase.CRASH: {
        "frequency": 0.5,
        "quantity": 0.6,
        "price_tolerance": 0.85,
        "multiple_order_penalty": 0.8,
    },
    EconomyPhase.RECESSION: {
        "frequency": 0.8,
        "quantity": 0.85,
        "price_tolerance": 0.95,
        "multiple_order_penalty": 0.9,
    },
    EconomyPhase.STABLE: {
        "frequency": 1.0,
        "quantity": 1.0,
        "price_tolerance": 1.0,
        "multiple_order_penalty": 1.0,
    },
    EconomyPhase.EXPANSION: {
        "frequency": 1.2,
        "quantity": 1.15,
        "price_tolerance": 1.05,
        "multiple_order_penalty": 1.05,
    },
    EconomyPhase.BOOM: {
        "frequency": 1.5,
        "quantity": 1.3,
        "price_tolerance": 1.15,
        "multiple_order_penalty": 1.1,
    },
}

# Coût du crédit : plus cher en récession, moins cher en expansion
ECONOMY_INTEREST_MULTIPLIERS = {
    EconomyPhase.CRASH: 1.5,
    EconomyPhase.RECESSION: 1.2,
    EconomyPhase.STABLE: 1.0,
    EconomyPhase.EXPANSION: 0.9,
    EconomyPhase.BOOM: 0.8,
}

# Exigence des actionnaires sur la progression des indicateurs
ECONOMY_EXPECTATION_MULTIPLIERS = {
    EconomyPhase.CRASH: 0.6,
    EconomyPhase.RECESSION: 0.8,
    EconomyPhase.STABLE: 1.0,
    EconomyPhase.EXPANSION: 1.2,
    EconomyPhase.BOOM: 1.5,
}
