import pytest

from winecorp.domain.time import (
    WEEKS_PER_YEAR,
    GameDate,
    Season,
    company_weeks,
    subtract_weeks,
)


def test_index_starts_at_zero():
    assert GameDate().index == 0
    assert GameDate(1, Season.SUMMER, 2024).index == 12
    assert GameDate(1, Season.SPRING, 2025).index == WEEKS_PER_YEAR


def test_advance_rolls_over_season_and_year():
    assert GameDate(12, Season.SPRING, 2024).advance() == GameDate(1, Season.SUMMER, 2024)
    assert GameDate(12, Season.WINTER, 2024).advance() == GameDate(1, Season.SPRING, 2025)


def test_from_index_round_trip():
    date = GameDate(7, Season.FALL, 2026)
    assert GameDate.from_index(date.index) == date


def test_invalid_week_rejected():
    with pytest.raises(ValueError):
        GameDate(13, Season.SPRING, 2024)
    with pytest.raises(ValueError):
        GameDate(0, Season.SPRING, 2024)


def test_company_weeks_counts_first_week():
    assert company_weeks(2024, GameDate()) == 1
    assert company_weeks(2024, GameDate(1, Season.SPRING, 2025)) == 49


def test_subtract_weeks_never_goes_before_start():
    assert subtract_weeks(GameDate(3, Season.SPRING, 2024), 10) == GameDate()


def test_same_season():
    a = GameDate(1, Season.FALL, 2024)
    assert a.same_season(GameDate(12, Season.FALL, 2024))
    assert not a.same_season(GameDate(1, Season.FALL, 2025))
