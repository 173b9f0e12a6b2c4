# Paramètres du conseil d'administration

from winecorp.domain.board import BoardConstraintType

# Poids de la satisfaction
BOARD_SATISFACTION_WEIGHTS = {
    "performance": 0.40,
    "stability": 0.25,
    "consistency": 0.20,
}

NEW_COMPANY_SATISFACTION = 0.8  # plancher pendant la première année

# Composante stabilité (reprise de la notation de crédit)
STABILITY_ASSET_HEALTH_WEIGHT = 0.6
STABILITY_COMPANY_WEIGHT = 0.4

# Régularité
SATISFACTION_HISTORY_LIMIT = 12
CONSISTENCY_MIN_SAMPLES = 4
CONSISTENCY_DEFAULT = 0.7
CONSISTENCY_MAX_STD = 0.3

# Écart de performance pris en compte (en points de %)
PERFORMANCE_DELTA_CAP = 100.0

# Seuils par type d'action :
#   start : au-dessus, aucune contrainte
#   max : en dessous ou égal, action interdite
BOARD_CONSTRAINTS = {
    BoardConstraintType.VINEYARD_PURCHASE: {
        "start": 0.8,
        "max": 0.2,
        "message": "Le conseil refuse tout achat de vignoble tant que sa satisfaction est aussi basse.",
    },
    BoardConstraintType.SHARE_ISSUANCE: {
        "start": 0.6,
        "max": 0.3,
        "message": "Le conseil refuse toute émission d'actions tant que sa satisfaction est aussi basse.",
    },
    BoardConstraintType.SHARE_BUYBACK: {
        "start": 0.5,
        "max": 0.2,
        "message": "Le conseil refuse tout rachat d'actions tant que sa satisfaction est aussi basse.",
    },
    BoardConstraintType.DIVIDEND_CHANGE: {
        "start": 0.5,
        "max": 0.3,
        "message": "Le conseil refuse toute modification du dividende tant que sa satisfaction est aussi basse.",
    },
    BoardConstraintType.STAFF_HIRING: {
        "start": 0.7,
        "max": 0.4,
        "message": "Le conseil gèle les embauches tant que sa satisfaction est aussi basse.",
    },
}

# Achat de vignoble : pénalité de liquidité
VINEYARD_FIXED_ASSET_RATIO_LIMIT = 0.70
VINEYARD_LIQUIDITY_SEASONS = 2.5  # saisons de charges à couvrir en actifs non immobilisés
VINEYARD_MAX_LIQUIDITY_PENALTY = 0.6
VINEYARD_NEGATIVE_MARGIN_MULTIPLIER = 0.4
LOW_MARGIN_THRESHOLD = 0.05

# Émission d'actions : 20% à 50% du capital selon la satisfaction
ISSUANCE_BASE_RATIO = 0.20
ISSUANCE_SATISFACTION_RATIO = 0.30
ISSUANCE_LOW_PRICE_THRESHOLD = 0.5
ISSUANCE_MAX_PRICE_PENALTY = 0.3

# Rachat d'actions : 10% à 25% des actions en circulation
BUYBACK_BASE_RATIO = 0.10
BUYBACK_SATISFACTION_RATIO = 0.15
BUYBACK_DEBT_RATIO_THRESHOLD = 0.20
BUYBACK_DEBT_RATIO_RANGE = 0.10
BUYBACK_MAX_DEBT_PENALTY = 0.5
BUYBACK_CASH_USAGE_THRESHOLD = 0.5
BUYBACK_MAX_CASH_PENALTY = 0.4
BUYBACK_HARD_RATIO = 0.25

# Dividende : variation de 3% à 10% par changement
DIVIDEND_BASE_CHANGE = 0.03
DIVIDEND_SATISFACTION_CHANGE = 0.07
DIVIDEND_RESERVE_SEASONS = 4
DIVIDEND_MIN_INCREASE_MULTIPLIER = 0.1
DIVIDEND_SHORTFALL_PENALTY = 0.9
DIVIDEND_NEGATIVE_MARGIN_MULTIPLIER = 0.3
DIVIDEND_LOW_MARGIN_PENALTY = 0.5
DIVIDEND_HARD_MIN_RATIO = 0.9
VINEYARD_LOW_MARGIN_PENALTY = 0.3
