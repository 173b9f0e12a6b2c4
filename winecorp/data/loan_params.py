"""
Paramètres des prêts et des prêteurs.
Les fourchettes par type de prêteur sont chargées depuis `lenders.json`.
"""

from typing import Dict, Tuple

from pydantic import BaseModel, RootModel

from winecorp.domain.loans import LenderType
from winecorp.utils import DATA_DIR, load_and_validate

Range = Tuple[float, float]


class OriginationFeeRanges(BaseModel):
    base_percent_range: Range
    min_fee_range: Range
    max_fee_range: Range
    credit_rating_modifier_range: Range
    duration_modifier_range: Range


class LenderParams(BaseModel):
    base_interest_range: Range
    loan_amount_range: Range
    duration_range: Tuple[int, int]
    risk_tolerance_range: Range
    flexibility_range: Range
    origination_fee: OriginationFeeRanges


class LenderParamsTable(RootModel[Dict[LenderType, LenderParams]]):
    def __getitem__(self, key: LenderType) -> LenderParams:
        return self.root[key]


LENDER_PARAMS = load_and_validate(DATA_DIR / "lenders.json", LenderParamsTable)

# --- Génération ---
LENDER_TYPE_DISTRIBUTION = {
    LenderType.BANK: 0.25,
    LenderType.INVESTMENT_FUND: 0.25,
    LenderType.PRIVATE_LENDER: 0.40,
    LenderType.QUICK_LOAN: 0.10,
}
MIN_LENDERS = 25
MAX_LENDERS = 65
PRESTIGE_RISK_BONUS = 0.20  # réduction max de l'exigence de notation grâce au prestige

# --- Taux ---
LENDER_TYPE_MULTIPLIERS = {
    LenderType.BANK: 0.9,
    LenderType.INVESTMENT_FUND: 1.1,
    LenderType.PRIVATE_LENDER: 1.4,
    LenderType.QUICK_LOAN: 1.6,
}

DEFAULT_CREDIT_RATING = 0.5
CREDIT_BEST_MULTIPLIER = 0.8  # notation 1.0
CREDIT_MULTIPLIER_SPREAD = 0.7  # 0.8 + 0.7 * (1 - notation)

# (durée max en saisons, modificateur de taux)
DURATION_INTEREST_MODIFIERS = [
    (16, 1.0),
    (40, 0.95),
    (80, 0.90),
]
VERY_LONG_TERM_MODIFIER = 0.85

# --- Incidents de paiement ---
WARNING_1_LATE_FEE_PERCENT = 0.02  # du montant de l'échéance, ajouté au capital restant
WARNING_2_INTEREST_INCREASE = 0.005
WARNING_2_BALANCE_PENALTY_PERCENT = 0.05
WARNING_2_PRESTIGE_PENALTY = -25.0
WARNING_3_MAX_SEIZURE_PERCENT = 0.50  # part max du vignoble saisissable
SEIZURE_SALE_RATIO = 0.75  # vente forcée à 75% de la valeur
DEFAULT_PRESTIGE_PENALTY = -75.0

# --- Remboursements anticipés ---
EXTRA_PAYMENT_FEE_RATE = 0.08
EXTRA_PAYMENT_MIN_FEE = 250.0
PREPAYMENT_INTEREST_FACTOR = 0.25
PREPAYMENT_MIN_PENALTY = 1000.0

# --- Noms des prêteurs ---
LENDER_NAMES = {
    "banks": [
        "First National", "Capital Trust", "Premier Banking", "Heritage Financial",
        "Vineyard Bank", "Agricultural Savings", "Rural Development Bank",
        "Community First", "Growers Credit", "Estate Finance", "Valley Bank",
    ],
    "investment_funds": [
        "Growth Capital Partners", "Vineyard Ventures", "Agricultural Investment Fund",
        "Premium Asset Management", "Strategic Growth Fund", "Heritage Capital",
        "Land & Asset Partners", "Rural Investment Group", "Estate Development Fund",
        "Harvest Capital", "Terravest Partners", "Vintage Growth Fund",
    ],
    "private_prefixes": [
        "Anderson", "Bennett", "Carter", "Davis", "Edwards", "Fischer",
        "Garcia", "Hughes", "Jenkins", "Klein", "Larson", "Martinez",
        "Nelson", "O'Brien", "Parker", "Quinn", "Roberts", "Sullivan",
        "Thompson", "Wagner", "Williams", "Young",
    ],
    "private_suffixes": [
        "Lending", "Capital", "Finance", "Loans", "Credit Services",
        "Private Funding", "Financial Solutions",
    ],
    "quick_loans": [
        "FlashBridge Finance", "Rapid Relief Loans", "SwiftLine Funding",
        "Express Capital Group", "Lightning Credit Partners", "QuickHarvest Lending",
        "Momentum Microloans",
    ],
}
