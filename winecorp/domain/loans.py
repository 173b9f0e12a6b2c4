from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel

from winecorp.domain.economy import EconomyPhase
from winecorp.domain.time import GameDate


class LenderType(Enum):
    BANK = "Bank"
    INVESTMENT_FUND = "Investment Fund"
    PRIVATE_LENDER = "Private Lender"
    QUICK_LOAN = "QuickLoan"


class LoanStatus(Enum):
    ACTIVE = "active"
    PAID_OFF = "paid_off"
    DEFAULTED = "defaulted"


class OriginationFee(BaseModel):
    """Barème de frais de dossier propre à un prêteur."""

    base_percent: float
    min_fee: float
    max_fee: float
    credit_rating_modifier: float
    duration_modifier: float


@dataclass
class Lender:
    name: str
    type: LenderType
    risk_tolerance: float
    flexibility: float
    market_presence: float
    base_interest_rate: float
    min_loan_amount: float
    max_loan_amount: float
    min_duration_seasons: int
    max_duration_seasons: int
    origination_fee: OriginationFee
    blacklisted: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))


@dataclass
class Loan:
    """Prêt en cours, remboursé par échéances saisonnières constantes."""

    lender_id: str
    lender_name: str
    lender_type: LenderType
    principal_amount: float
    base_interest_rate: float
    economy_phase_at_creation: EconomyPhase
    credit_rating_at_creation: float
    effective_interest_rate: float
    origination_fee: float
    remaining_balance: float
    seasonal_payment: float
    seasons_remaining: int
    total_seasons: int
    start_date: GameDate
    next_payment_due: GameDate
    missed_payments: int = 0
    status: LoanStatus = LoanStatus.ACTIVE
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE
