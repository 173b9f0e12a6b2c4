"""
Données clients par pays et par type, chargées depuis `customers.json`.
"""

from typing import Annotated, Dict, List, Tuple

from pydantic import BaseModel, Field

from winecorp.domain.customers import CustomerCountry, CustomerType
from winecorp.utils import DATA_DIR, load_and_validate


class RegionalData(BaseModel):
    purchasing_power: float = Field(gt=0)
    wine_tradition: float = Field(gt=0)
    customer_type_weights: Dict[
        CustomerType, Annotated[float, Field(strict=True, ge=0, le=1)]
    ]


class CustomerTypeConfig(BaseModel):
    price_multiplier_range: Tuple[float, float]
    quantity_range: Tuple[int, int]
    base_quantity_multiplier: float
    multiple_order_penalty: float
    market_share_multiplier: float = Field(gt=0, le=1)


class CountryNames(BaseModel):
    first_names: List[str]
    last_names: List[str]
    suffixes: Dict[CustomerType, List[str]]


class CustomerDataModel(BaseModel):
    regions: Dict[CustomerCountry, RegionalData]
    customer_types: Dict[CustomerType, CustomerTypeConfig]
    names: Dict[CustomerCountry, CountryNames]


CUSTOMER_DATA = load_and_validate(DATA_DIR / "customers.json", CustomerDataModel)
CUSTOMER_REGIONAL_DATA = CUSTOMER_DATA.regions
CUSTOMER_TYPES = CUSTOMER_DATA.customer_types
CUSTOMER_NAMES = CUSTOMER_DATA.names

# Génération des parts de marché
MAX_CUSTOMERS_PER_COUNTRY = 1000
MIN_PRICE_MULTIPLIER = 0.1
MAX_PRICE_MULTIPLIER = 2.0

# (seuil du premier tirage, nombre de tirages dont on garde le minimum)
MARKET_SHARE_DRAWS = [
    (0.9, 5),
    (0.7, 4),
    (0.5, 3),
    (0.1, 2),
]

# Relation client
BASE_RELATIONSHIP = 0.1
PRESTIGE_RELATIONSHIP_SCALE = 25.0

# Probabilité d'acquérir un client selon le prestige
PRESTIGE_ORDER_GENERATION = {
    "min_base_chance": 0.05,
    "mid_prestige_chance": 0.15,
    "max_base_chance": 0.35,
    "prestige_threshold": 100.0,
    "diminishing_factor": 200.0,
    "pending_order_penalty": 0.8,
}
