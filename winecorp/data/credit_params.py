"""
Pondérations et seuils de la notation de crédit.
Les poids (somme = 1 par bloc) sont chargés depuis `credit_rating.json`.
"""

from pydantic import BaseModel, model_validator

from winecorp.utils import DATA_DIR, load_and_validate


class _Weights(BaseModel):
    @model_validator(mode="after")
    def _sum_to_one(self):
        total = sum(getattr(self, name) for name in type(self).model_fields)
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"{type(self).__name__}: la somme des poids vaut {total}")
        return self


class FinalWeights(BaseModel):
    asset_health: float
    payment_history: float
    company_stability: float


class AssetHealthWeights(_Weights):
    debt_to_asset: float
    asset_coverage: float
    liquidity: float
    fixed_assets: float


class PaymentHistoryWeights(_Weights):
    on_time: float
    payoffs: float
    missed: float


class StabilityWeights(_Weights):
    age: float
    profit_consistency: float
    expense_efficiency: float


class CreditRatingWeightsModel(BaseModel):
    weights: FinalWeights
    asset_health: AssetHealthWeights
    payment_history: PaymentHistoryWeights
    company_stability: StabilityWeights


CREDIT_RATING_WEIGHTS = load_and_validate(
    DATA_DIR / "credit_rating.json", CreditRatingWeightsModel
)

BASE_RATING = 0.50
MIN_RATING = 0.0
MAX_RATING = 1.0

# Solde négatif
NEGATIVE_BALANCE_MAX_WEEKS = 15
NEGATIVE_BALANCE_MAX_PENALTY = -0.30
NEGATIVE_BALANCE_MIN_THRESHOLD = 10_000.0
NEGATIVE_BALANCE_VALUE_SHARE = 0.05

# Couverture des dettes par l'actif
ASSET_COVERAGE_EXCELLENT = 5.0
ASSET_COVERAGE_GOOD = 3.0
ASSET_COVERAGE_FAIR = 2.0
NO_DEBT_RATIO = 999.0

# Liquidité
LIQUIDITY_EXCELLENT = 2.0
LIQUIDITY_GOOD = 1.0
LIQUIDITY_FAIR = 0.5

# Historique de paiement
REFERENCE_PAYMENTS = 20
REFERENCE_PAYOFFS = 5
PAYMENTS_PER_PAYOFF = 4

# Stabilité
MAX_PROFIT_CONSISTENCY = 0.03
MAX_EXPENSE_EFFICIENCY = 0.02

# Seuils planchers -> catégorie
RATING_CATEGORIES = [
    (0.95, "AAA", "Exceptional creditworthiness"),
    (0.90, "AA+", "Excellent creditworthiness"),
    (0.85, "AA", "Very good creditworthiness"),
    (0.80, "AA-", "Good creditworthiness"),
    (0.75, "A+", "Strong creditworthiness"),
    (0.70, "A", "Solid creditworthiness"),
    (0.65, "A-", "Adequate creditworthiness"),
    (0.60, "BBB+", "Acceptable creditworthiness"),
    (0.55, "BBB", "Fair creditworthiness"),
    (0.50, "BBB-", "Average creditworthiness"),
    (0.45, "BB+", "Below average creditworthiness"),
    (0.40, "BB", "Poor creditworthiness"),
    (0.35, "BB-", "Very poor creditworthiness"),
    (0.30, "B+", "High risk creditworthiness"),
    (0.25, "B", "Very high risk creditworthiness"),
    (0.20, "B-", "Extremely high risk creditworthiness"),
    (0.15, "CCC+", "Speculative creditworthiness"),
    (0.10, "CCC", "Highly speculative creditworthiness"),
    (0.05, "CC", "Very highly speculative creditworthiness"),
    (0.0, "C", "Default risk creditworthiness"),
]
