from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from uuid import uuid4

from winecorp.domain.time import GameDate


class TransactionCategory(Enum):
    # Recettes
    WINE_SALES = "Wine Sales"
    GRAPE_SALES = "Grape Sales"
    INITIAL_INVESTMENT = "Initial Investment"
    DIVIDEND_PAYMENT = "Dividend Payment"
    DIVIDEND_RECEIVED = "Dividend Received"
    VINEYARD_SALE = "Vineyard Sale"

    # Charges
    STAFF_WAGES = "Staff Wages"
    STAFF_SEARCH = "Staff Search"
    LAND_SEARCH = "Land Search"
    LENDER_SEARCH = "Lender Search"
    VINEYARD_PURCHASE = "Vineyard Purchase"
    EQUIPMENT_PURCHASE = "Equipment Purchase"
    BUILDING_CONSTRUCTION = "Building Construction"
    VINEYARD_PLANTING = "Vineyard Planting"
    MAINTENANCE = "Maintenance"
    SUPPLIES = "Supplies"
    UTILITIES = "Utilities"
    RESEARCH = "Research"
    OTHER = "Other"

    # Emprunts
    LOAN_RECEIVED = "Loan Received"
    LOAN_PAYMENT = "Loan Payment"
    LOAN_ORIGINATION_FEE = "Loan Origination Fee"
    LOAN_EXTRA_PAYMENT_FEE = "Loan Extra Payment Fee"
    LOAN_PREPAYMENT_FEE = "Loan Prepayment Fee"


# Immobilisations : touchent l'actif et la trésorerie mais pas le résultat
CAPITALIZED_CATEGORIES = frozenset(
    {
        TransactionCategory.VINEYARD_PURCHASE,
        TransactionCategory.EQUIPMENT_PURCHASE,
        TransactionCategory.BUILDING_CONSTRUCTION,
        TransactionCategory.VINEYARD_PLANTING,
    }
)

# Flux de capital/financement, exclus du compte de résultat
CAPITAL_FLOW_CATEGORIES = frozenset(
    {
        TransactionCategory.INITIAL_INVESTMENT,
        TransactionCategory.LOAN_RECEIVED,
        TransactionCategory.LOAN_PAYMENT,
        TransactionCategory.LOAN_ORIGINATION_FEE,
        TransactionCategory.DIVIDEND_PAYMENT,
    }
    | CAPITALIZED_CATEGORIES
)

PLAYER_CONTRIBUTION_LABEL = "Initial Capital: Player cash contribution"
OUTSIDE_INVESTMENT_LABEL = "Outside investment committed"
STOCK_ISSUANCE_PREFIX = "Stock Issuance"
STOCK_BUYBACK_PREFIX = "Stock Buyback"


@dataclass
class Transaction:
    """Un mouvement de trésorerie daté.

    Attributes:
        date: Semaine de jeu de l'opération.
        amount: Montant signé (positif = entrée, négatif = sortie).
        description: Libellé lisible.
        category: Catégorie comptable.
        money: Solde de trésorerie après l'opération.
        shares: Nombre d'actions concernées (émission/rachat), sinon None.
    """

    date: GameDate
    amount: float
    description: str
    category: TransactionCategory
    money: float = 0.0
    recurring: bool = False
    shares: Optional[int] = None
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def is_capital_flow(self) -> bool:
        # Les rachats d'actions sont classés "Other" mais restent du capital
        return self.category in CAPITAL_FLOW_CATEGORIES or self.description.startswith(
            STOCK_BUYBACK_PREFIX
        )
