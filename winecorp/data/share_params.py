"""
Paramètres de valorisation de l'action (chargés depuis `share_valuation.json`)
et contraintes dures des opérations sur le capital.
"""

from pydantic import BaseModel, Field

from winecorp.utils import DATA_DIR, load_and_validate

# Ordre canonique des indicateurs suivis par le cours
METRIC_KEYS = (
    "earnings_per_share",
    "revenue_per_share",
    "dividend_per_share",
    "revenue_growth",
    "profit_margin",
    "credit_rating",
    "fixed_asset_ratio",
    "prestige",
)


class MetricRates(BaseModel):
    earnings_per_share: float
    revenue_per_share: float
    dividend_per_share: float
    revenue_growth: float
    profit_margin: float
    credit_rating: float
    fixed_asset_ratio: float
    prestige: float

    def __getitem__(self, key):
        # Allows dict-like access
        return getattr(self, key)


class MetricConfig(BaseModel):
    base_adjustment: float = Field(gt=0)
    max_ratio: float = Field(gt=0)


class MetricConfigs(BaseModel):
    earnings_per_share: MetricConfig
    revenue_per_share: MetricConfig
    dividend_per_share: MetricConfig
    revenue_growth: MetricConfig
    profit_margin: MetricConfig
    credit_rating: MetricConfig
    fixed_asset_ratio: MetricConfig
    prestige: MetricConfig

    def __getitem__(self, key):
        return getattr(self, key)


class AnchorConfig(BaseModel):
    strength: float
    exponent: float
    min_price_ratio_to_anchor: float


class GrowthTrendConfig(BaseModel):
    increment: float
    max_adjustment: float
    min_adjustment: float


class MarketCapConfig(BaseModel):
    enabled: bool
    base_market_cap: float
    base_rate: float
    max_rate: float


class ShareStructureConfig(BaseModel):
    dilution_penalty: float = Field(lt=1)
    concentration_bonus: float = Field(gt=1)


class PrestigeScaling(BaseModel):
    base: float
    max_multiplier: float


class ShareValuationModel(BaseModel):
    expected_improvement_rates: MetricRates
    metrics: MetricConfigs
    anchor: AnchorConfig
    growth_trend: GrowthTrendConfig
    market_cap: MarketCapConfig
    share_structure: ShareStructureConfig
    prestige_scaling: PrestigeScaling


SHARE_VALUATION = load_and_validate(
    DATA_DIR / "share_valuation.json", ShareValuationModel
)

# --- Périodes de grâce (semaines d'existence) ---
HISTORY_WEEKS = 48
DIVIDEND_GRACE_WEEKS = 36
PAYMENTS_PER_YEAR = 4

# --- Contraintes dures ---
MIN_ISSUANCE_PRICE = 0.10
MAX_ISSUANCE_RATIO = 0.5  # par opération, en part du total
MAX_BUYBACK_RATIO_PER_YEAR = 0.25  # en part des actions en circulation
MAX_BUYBACK_DEBT_RATIO = 0.30
MAX_DIVIDEND_DECREASE = 0.10  # par saison
SMALL_DIVIDEND_CHANGE = 0.005  # toujours autorisé

# Impact prestige d'un changement de dividende
DIVIDEND_CHANGE_PRESTIGE = {
    "base_factor": 0.5,
    "cut_multiplier": 2.0,
    "increase_multiplier": 0.5,
    "min_impact": 0.001,
}
