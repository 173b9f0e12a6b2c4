from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from winecorp.domain.customers import Customer
from winecorp.domain.economy import EconomyPhase
from winecorp.domain.loans import Lender, Loan
from winecorp.domain.time import GameDate, START_YEAR
from winecorp.domain.transactions import Transaction


class WineState(Enum):
    GRAPES = "grapes"
    MUST_READY = "must_ready"
    MUST_FERMENTING = "must_fermenting"
    BOTTLED = "bottled"


@dataclass
class Vineyard:
    name: str
    value: float
    hectares: float = 1.0


@dataclass
class WineBatch:
    """Lot en cave (raisins, moût ou bouteilles)."""

    name: str
    quantity: float
    state: WineState
    grape_quality: float = 0.5
    estimated_price: float = 10.0


@dataclass
class ShareStructure:
    """Répartition du capital.

    `outstanding_shares` désigne les actions détenues hors joueur
    (famille + investisseurs), d'où total = joueur + en circulation.
    """

    total_shares: int
    player_shares: int
    outstanding_shares: int
    share_price: float = 0.0
    dividend_rate: float = 0.0
    growth_trend_multiplier: float = 1.0
    last_dividend_paid: Optional[GameDate] = None
    last_growth_trend_update: Optional[GameDate] = None
    last_share_price_update: Optional[GameDate] = None

    @property
    def player_ownership_pct(self) -> float:
        if self.total_shares <= 0:
            return 100.0
        return self.player_shares / self.total_shares * 100.0


class MetricsSnapshot(BaseModel):
    """Photo hebdomadaire des indicateurs, base des comparaisons à 48 semaines."""

    date: GameDate
    credit_rating: float
    prestige: float
    fixed_asset_ratio: float
    share_price: float
    book_value_per_share: float
    earnings_per_share_48w: float = 0.0
    revenue_per_share_48w: float = 0.0
    dividend_per_share_48w: float = 0.0
    profit_margin_48w: float = 0.0
    revenue_growth_48w: float = 0.0


class BoardSnapshot(BaseModel):
    date: GameDate
    satisfaction: float
    performance_score: float
    stability_score: float
    consistency_score: float
    ownership_pressure: float
    player_ownership_pct: float


@dataclass
class Company:
    """État complet d'une société viticole à une date de jeu donnée."""

    name: str
    shares: ShareStructure
    founded_year: int = START_YEAR
    date: GameDate = field(default_factory=GameDate)
    money: float = 0.0
    prestige: float = 1.0
    economy_phase: EconomyPhase = EconomyPhase.STABLE
    buildings_value: float = 0.0
    initial_vineyard_value: Optional[float] = None
    pending_orders: int = 0
    transactions: List[Transaction] = field(default_factory=list)
    vineyards: List[Vineyard] = field(default_factory=list)
    wine_batches: List[WineBatch] = field(default_factory=list)
    loans: List[Loan] = field(default_factory=list)
    lenders: List[Lender] = field(default_factory=list)
    customers: List[Customer] = field(default_factory=list)
    metrics_history: List[MetricsSnapshot] = field(default_factory=list)
    board_history: List[BoardSnapshot] = field(default_factory=list)
    cache: Dict[str, object] = field(default_factory=dict)

    @property
    def active_loans(self) -> List[Loan]:
        return [loan for loan in self.loans if loan.is_active]

    def outstanding_loans(self) -> float:
        return sum(loan.remaining_balance for loan in self.active_loans)

    def vineyards_value(self) -> float:
        return sum(v.value for v in self.vineyards)

    def lender(self, lender_id: str) -> Optional[Lender]:
        return next((lender for lender in self.lenders if lender.id == lender_id), None)

    # ------- Historique des indicateurs -------

    def store_metrics_snapshot(self, snapshot: MetricsSnapshot) -> None:
        """Remplace la photo de la même semaine si elle existe déjà."""
        self.metrics_history = [
            s for s in self.metrics_history if s.date.index != snapshot.date.index
        ]
        self.metrics_history.append(snapshot)
        self.metrics_history.sort(key=lambda s: s.date.index)

    def metrics_snapshot_weeks_ago(self, weeks: int) -> Optional[MetricsSnapshot]:
        """Dernière photo prise au plus tard `weeks` semaines avant la date courante."""
        target = self.date.index - weeks
        if target < 0:
            return None
        candidates = [s for s in self.metrics_history if s.date.index <= target]
        return candidates[-1] if candidates else None

    def store_board_snapshot(self, snapshot: BoardSnapshot) -> None:
        self.board_history = [
            s for s in self.board_history if s.date.index != snapshot.date.index
        ]
        self.board_history.append(snapshot)
        self.board_history.sort(key=lambda s: s.date.index)

    def recent_board_snapshots(self, limit: int = 12) -> List[BoardSnapshot]:
        return self.board_history[-limit:]
