from typing import List, Optional

from pydantic import BaseModel

from winecorp.domain.economy import EconomyPhase
from winecorp.domain.time import GameDate


class WeekResult(BaseModel):
    """Snapshot des principaux indicateurs d'une semaine pour une société."""

    company_name: str
    date: GameDate
    economy_phase: EconomyPhase
    money_start: float
    money_end: float
    share_price: float
    credit_rating: float
    board_satisfaction: float
    growth_trend_multiplier: float
    loan_payments: float = 0.0
    missed_loan_payments: int = 0
    dividends_paid: float = 0.0
    customer_acquired: bool = False
    events: List[str] = []
    error: Optional[str] = None
