import random

import pytest

from winecorp.core.finance import add_transaction
from winecorp.domain.company import Company, ShareStructure, Vineyard
from winecorp.domain.loans import Lender, LenderType, OriginationFee
from winecorp.domain.transactions import PLAYER_CONTRIBUTION_LABEL, TransactionCategory


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def company():
    """Société détenue à 60% par le joueur : 1 M€ d'apport et 250 k€ de vignes familiales."""
    c = Company(
        name="Domaine Test",
        shares=ShareStructure(total_shares=100_000, player_shares=60_000, outstanding_shares=40_000),
    )
    add_transaction(c, 1_000_000.0, PLAYER_CONTRIBUTION_LABEL, TransactionCategory.INITIAL_INVESTMENT)
    c.vineyards.append(Vineyard(name="Vignes familiales", value=250_000.0))
    c.initial_vineyard_value = 250_000.0
    return c


@pytest.fixture
def make_lender():
    def _make(**overrides):
        params = dict(
            name="Banque Test",
            type=LenderType.BANK,
            risk_tolerance=0.3,
            flexibility=0.6,
            market_presence=0.5,
            base_interest_rate=0.05,
            min_loan_amount=50_000.0,
            max_loan_amount=500_000.0,
            min_duration_seasons=4,
            max_duration_seasons=40,
            origination_fee=OriginationFee(
                base_percent=0.02,
                min_fee=1_000.0,
                max_fee=15_000.0,
                credit_rating_modifier=0.7,
                duration_modifier=1.1,
            ),
        )
        params.update(overrides)
        return Lender(**params)

    return _make


class FixedRandom:
    """Générateur dont `random()` renvoie les valeurs données, dans l'ordre."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0) if len(self.values) > 1 else self.values[0]


@pytest.fixture
def fixed_random():
    return FixedRandom
