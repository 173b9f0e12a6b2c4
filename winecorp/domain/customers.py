from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class CustomerCountry(Enum):
    FRANCE = "France"
    GERMANY = "Germany"
    ITALY = "Italy"
    SPAIN = "Spain"
    UNITED_STATES = "United States"


class CustomerType(Enum):
    # Valeurs alignées avec les clés JSON
    RESTAURANT = "Restaurant"
    WINE_SHOP = "Wine Shop"
    PRIVATE_COLLECTOR = "Private Collector"
    CHAIN_STORE = "Chain Store"


class Customer(BaseModel):
    """Client importateur généré pour un pays donné."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    country: CustomerCountry
    customer_type: CustomerType
    purchasing_power: float
    wine_tradition: float
    market_share: float = Field(ge=0, le=1)
    price_multiplier: float = Field(ge=0.1, le=2.0)
    relationship: float
    active_customer: bool = False
