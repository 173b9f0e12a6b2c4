import random

import pytest

from winecorp.core.lenders import (
    available_lenders,
    blacklist_lender,
    generate_lenders,
    lender_availability,
    pick_lender_type,
)
from winecorp.data.loan_params import LENDER_PARAMS, MAX_LENDERS, MIN_LENDERS
from winecorp.domain.loans import LenderType


def test_generated_lenders_within_ranges(rng):
    lenders = generate_lenders(rng)
    assert MIN_LENDERS <= len(lenders) <= MAX_LENDERS
    for lender in lenders:
        params = LENDER_PARAMS[lender.type]
        low, high = params.base_interest_range
        assert low <= lender.base_interest_rate <= high
        low, high = params.risk_tolerance_range
        assert low <= lender.risk_tolerance <= high
        assert 0.0 <= lender.market_presence <= 1.0
        assert lender.origination_fee.min_fee <= lender.origination_fee.max_fee
        assert lender.name


def test_generation_is_reproducible():
    a = [lender.name for lender in generate_lenders(random.Random(3))]
    b = [lender.name for lender in generate_lenders(random.Random(3))]
    assert a == b


@pytest.mark.parametrize(
    "roll, expected",
    [
        (0.10, LenderType.BANK),
        (0.30, LenderType.INVESTMENT_FUND),
        (0.60, LenderType.PRIVATE_LENDER),
        (0.95, LenderType.QUICK_LOAN),
    ],
)
def test_pick_lender_type(fixed_random, roll, expected):
    assert pick_lender_type(fixed_random(roll)) == expected


def test_prestige_lowers_requirement(make_lender):
    lender = make_lender(risk_tolerance=0.5)
    assert not lender_availability(lender, 0.45).is_available
    availability = lender_availability(lender, 0.45, prestige=100.0)
    assert availability.prestige_bonus == pytest.approx(0.18)
    assert availability.is_available


def test_blacklisted_lenders_are_unavailable(make_lender):
    good, bad = make_lender(), make_lender()
    blacklist_lender(bad)
    assert available_lenders([good, bad], 0.9) == [good]
