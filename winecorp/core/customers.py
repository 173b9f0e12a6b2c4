"""
Génération des clients importateurs par pays.

Chaque pays est rempli de clients jusqu'à 100% de parts de marché. Les
grosses parts sont rares : chaque part est le minimum de plusieurs tirages
asymétriques, d'autant plus nombreux que le premier tirage est élevé.
"""

import logging
import math
import random
from typing import List, Optional

from pydantic import BaseModel

from winecorp.data.customer_params import (
    BASE_RELATIONSHIP,
    CUSTOMER_NAMES,
    CUSTOMER_REGIONAL_DATA,
    CUSTOMER_TYPES,
    MARKET_SHARE_DRAWS,
    MAX_CUSTOMERS_PER_COUNTRY,
    MAX_PRICE_MULTIPLIER,
    MIN_PRICE_MULTIPLIER,
    PRESTIGE_ORDER_GENERATION,
    PRESTIGE_RELATIONSHIP_SCALE,
)
from winecorp.domain.company import Company, WineState
from winecorp.domain.customers import Customer, CustomerCountry, CustomerType
from winecorp.rules.curves import normalize_prestige, skewed_multiplier
from winecorp.utils import clamp

logger = logging.getLogger(__name__)


class AcquisitionChance(BaseModel):
    company_prestige: float
    available_wines: int
    pending_orders: int
    base_chance: float
    pending_penalty: float
    final_chance: float
    random_roll: float = 0.0
    customer_acquired: bool = False


def customer_relationship(market_share: float, prestige: float = 1.0) -> float:
    """Relation initiale : portée par le prestige, diluée par la taille du client.

    Example:
        prestige 0 -> ~0.1 ; 10% de parts de marché divise l'apport du prestige par ~1.5
    """
    contribution = normalize_prestige(prestige) * PRESTIGE_RELATIONSHIP_SCALE
    impact = 1 + 0.7 * market_share**0.25 + market_share**0.9
    return max(BASE_RELATIONSHIP, BASE_RELATIONSHIP + contribution / impact)


def select_customer_type(country: CustomerCountry, rng: random.Random) -> CustomerType:
    weights = CUSTOMER_REGIONAL_DATA[country].customer_type_weights
    roll = rng.random() * sum(weights.values())
    cumulative = 0.0
    for customer_type, weight in weights.items():
        cumulative += weight
        if roll <= cumulative:
            return customer_type
    return CustomerType.RESTAURANT


def customer_name(country: CustomerCountry, customer_type: CustomerType, rng: random.Random) -> str:
    names = CUSTOMER_NAMES[country]
    first = rng.choice(names.first_names)
    last = rng.choice(names.last_names)
    suffix = rng.choice(names.suffixes[customer_type])
    if customer_type == CustomerType.PRIVATE_COLLECTOR:
        return f"{first} {last} {suffix}"
    if customer_type == CustomerType.RESTAURANT and country == CustomerCountry.UNITED_STATES:
        return f"{last}'s {suffix}"
    return f"{last} {suffix}"


def draw_market_share(rng: random.Random) -> float:
    """Part de marché brute (0..1) : minimum de 1 à 5 tirages asymétriques."""
    first = skewed_multiplier(rng.random())
    draws = next((n for threshold, n in MARKET_SHARE_DRAWS if first >= threshold), 1)
    value = first
    for _ in range(draws - 1):
        value = min(value, skewed_multiplier(rng.random()))
    return value


def price_multiplier(
    country: CustomerCountry, customer_type: CustomerType, market_share: float, rng: random.Random
) -> float:
    region = CUSTOMER_REGIONAL_DATA[country]
    base = rng.uniform(*CUSTOMER_TYPES[customer_type].price_multiplier_range)
    raw = base * region.purchasing_power * region.wine_tradition * (1 - market_share)
    return clamp(raw, MIN_PRICE_MULTIPLIER, MAX_PRICE_MULTIPLIER)


def create_customer(
    country: CustomerCountry,
    customer_type: CustomerType,
    market_share: float,
    prestige: float,
    rng: random.Random,
) -> Customer:
    region = CUSTOMER_REGIONAL_DATA[country]
    return Customer(
        name=customer_name(country, customer_type, rng),
        country=country,
        customer_type=customer_type,
        purchasing_power=region.purchasing_power,
        wine_tradition=region.wine_tradition,
        market_share=market_share,
        price_multiplier=price_multiplier(country, customer_type, market_share, rng),
        relationship=customer_relationship(market_share, prestige),
    )


def market_shares_for_country(country: CustomerCountry, rng: random.Random):
    """Tire (type, part en %) jusqu'à couvrir 100% ; l'excédent est retiré au dernier client."""
    types: List[CustomerType] = []
    shares: List[float] = []
    total = 0.0
    while total < 100.0:
        customer_type = select_customer_type(country, rng)
        share = draw_market_share(rng) * CUSTOMER_TYPES[customer_type].market_share_multiplier * 100
        types.append(customer_type)
        shares.append(share)
        total += share
        if len(shares) > MAX_CUSTOMERS_PER_COUNTRY:
            logger.warning("%s: limite de %d clients atteinte", country.value, MAX_CUSTOMERS_PER_COUNTRY)
            break
    if total > 100.0:
        shares[-1] -= total - 100.0
    return list(zip(types, shares))


def generate_customers(prestige: float = 1.0, rng: Optional[random.Random] = None) -> List[Customer]:
    """Clients de tous les pays, pour un prestige de départ donné."""
    rng = rng or random.Random()
    customers = []
    for country in CUSTOMER_REGIONAL_DATA:
        for customer_type, share in market_shares_for_country(country, rng):
            customers.append(create_customer(country, customer_type, clamp(share / 100, 0.0, 1.0), prestige, rng))
    logger.debug("%d clients générés", len(customers))
    return customers


def initialize_customers(company: Company, rng: Optional[random.Random] = None) -> List[Customer]:
    """Génère les clients une seule fois par société."""
    if not company.customers:
        company.customers = generate_customers(company.prestige, rng)
    return company.customers


def update_relationships_for_prestige(company: Company) -> List[Customer]:
    """Recalcule la relation des seuls clients actifs."""
    active = [c for c in company.customers if c.active_customer]
    for customer in active:
        customer.relationship = customer_relationship(customer.market_share, company.prestige)
    return active


# ------- Acquisition -------


def base_acquisition_chance(prestige: float) -> float:
    """Linéaire de 5% à 15% jusqu'au prestige 100, puis vers 35% par arctangente."""
    p = PRESTIGE_ORDER_GENERATION
    if prestige <= p["prestige_threshold"]:
        return p["min_base_chance"] + prestige / p["prestige_threshold"] * (
            p["mid_prestige_chance"] - p["min_base_chance"]
        )
    factor = math.atan((prestige - p["prestige_threshold"]) / p["diminishing_factor"]) / math.pi
    return p["mid_prestige_chance"] + factor * (p["max_base_chance"] - p["mid_prestige_chance"])


def acquisition_chance(
    company: Company, rng: Optional[random.Random] = None, dry_run: bool = False
) -> AcquisitionChance:
    """Chance qu'un client se manifeste cette semaine ; nulle sans vin en bouteille."""
    bottled = [b for b in company.wine_batches if b.state == WineState.BOTTLED and b.quantity > 0]
    if not bottled:
        return AcquisitionChance(
            company_prestige=company.prestige,
            available_wines=0,
            pending_orders=0,
            base_chance=0.0,
            pending_penalty=1.0,
            final_chance=0.0,
        )

    base = base_acquisition_chance(company.prestige)
    penalty = PRESTIGE_ORDER_GENERATION["pending_order_penalty"] ** company.pending_orders
    final = base * penalty
    roll = 0.0 if dry_run else (rng or random).random()
    return AcquisitionChance(
        company_prestige=company.prestige,
        available_wines=len(bottled),
        pending_orders=company.pending_orders,
        base_chance=base,
        pending_penalty=penalty,
        final_chance=final,
        random_roll=roll,
        customer_acquired=not dry_run and roll < final,
    )
