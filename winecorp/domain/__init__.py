"""
Domain objects for WineCorp.

The domain layer holds the business objects that model the winery
company: calendar, transactions, share structure, loans and lenders,
customers and economy phases.  Mutable state is kept in plain
dataclasses, value snapshots in pydantic models.
"""

from .board import BoardConstraintType, LimitingConstraint
from .company import (
    BoardSnapshot,
    Company,
    MetricsSnapshot,
    ShareStructure,
    Vineyard,
    WineBatch,
    WineState,
)
from .customers import Customer, CustomerCountry, CustomerType
from .economy import EconomyPhase
from .loans import Lender, LenderType, Loan, LoanStatus, OriginationFee
from .time import GameDate, Season
from .transactions import Transaction, TransactionCategory

__all__ = [
    "BoardConstraintType",
    "LimitingConstraint",
    "BoardSnapshot",
    "Company",
    "MetricsSnapshot",
    "ShareStructure",
    "Vineyard",
    "WineBatch",
    "WineState",
    "Customer",
    "CustomerCountry",
    "CustomerType",
    "EconomyPhase",
    "Lender",
    "LenderType",
    "Loan",
    "LoanStatus",
    "OriginationFee",
    "GameDate",
    "Season",
    "Transaction",
    "TransactionCategory",
]
