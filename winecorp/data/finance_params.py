# Paramètres financiers (création de société, valorisation des stocks)

from winecorp.domain.company import WineState

# --- Création de société ---
STARTING_MONEY = 10_000_000.0  # apport de départ
STARTING_PRESTIGE = 1.0
FAMILY_VINEYARD_VALUE = 250_000.0  # vignes familiales apportées à la création

# --- Actions ---
TARGET_SHARE_PRICE = 50.0  # prix cible d'une action à la création
MIN_SHARES = 10_000  # plancher de liquidité

# --- Valorisation des stocks ---
# Coefficient par stade d'élaboration (bouteille = valeur pleine)
WINE_STAGE_MULTIPLIER = {
    WineState.BOTTLED: 1.0,
    WineState.MUST_READY: 0.5,
    WineState.MUST_FERMENTING: 0.5,
}
DEFAULT_STAGE_MULTIPLIER = 0.3
DEFAULT_WINE_PRICE = 10.0
GRAPE_VALUE_PER_UNIT = 5.0

# --- Fenêtres glissantes ---
ROLLING_WEEKS = 48
