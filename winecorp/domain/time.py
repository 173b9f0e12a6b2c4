"""Calendrier du jeu : 4 saisons de 12 semaines, 48 semaines par an."""

from dataclasses import dataclass
from enum import Enum

START_YEAR = 2024
WEEKS_PER_SEASON = 12
SEASONS_PER_YEAR = 4
WEEKS_PER_YEAR = WEEKS_PER_SEASON * SEASONS_PER_YEAR


class Season(Enum):
    SPRING = "Spring"
    SUMMER = "Summer"
    FALL = "Fall"
    WINTER = "Winter"

    @property
    def index(self) -> int:
        return SEASON_ORDER.index(self)


SEASON_ORDER = [Season.SPRING, Season.SUMMER, Season.FALL, Season.WINTER]


@dataclass(frozen=True)
class GameDate:
    """Date de jeu (semaine 1-12, saison, année). Trier via `index`."""

    week: int = 1
    season: Season = Season.SPRING
    year: int = START_YEAR

    def __post_init__(self):
        if not 1 <= self.week <= WEEKS_PER_SEASON:
            raise ValueError(f"Semaine invalide: {self.week}")

    @property
    def index(self) -> int:
        """Nombre de semaines écoulées depuis semaine 1, printemps START_YEAR."""
        return (
            (self.year - START_YEAR) * WEEKS_PER_YEAR
            + self.season.index * WEEKS_PER_SEASON
            + (self.week - 1)
        )

    @classmethod
    def from_index(cls, index: int) -> "GameDate":
        index = max(0, index)
        year = START_YEAR + index // WEEKS_PER_YEAR
        in_year = index % WEEKS_PER_YEAR
        return cls(
            week=in_year % WEEKS_PER_SEASON + 1,
            season=SEASON_ORDER[in_year // WEEKS_PER_SEASON],
            year=year,
        )

    def advance(self, weeks: int = 1) -> "GameDate":
        return GameDate.from_index(self.index + weeks)

    def same_season(self, other: "GameDate") -> bool:
        return self.season == other.season and self.year == other.year

    def __str__(self) -> str:
        return f"Semaine {self.week}, {self.season.value} {self.year}"


START_DATE = GameDate()


def absolute_weeks(date: GameDate, start: GameDate = START_DATE) -> int:
    """Semaines écoulées entre `start` et `date`, la première semaine comptant 1."""
    return max(1, date.index - start.index + 1)


def company_weeks(founded_year: int, date: GameDate) -> int:
    """Âge de la société en semaines depuis la semaine 1 du printemps de sa fondation.

    Example:
        >>> company_weeks(2024, GameDate(1, Season.SPRING, 2025))
        49
    """
    return absolute_weeks(date, GameDate(1, Season.SPRING, founded_year))


def subtract_weeks(date: GameDate, weeks: int) -> GameDate:
    return GameDate.from_index(date.index - weeks)
