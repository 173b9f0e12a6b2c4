from enum import Enum


class BoardConstraintType(Enum):
    SHARE_ISSUANCE = "share_issuance"
    SHARE_BUYBACK = "share_buyback"
    DIVIDEND_CHANGE = "dividend_change"
    VINEYARD_PURCHASE = "vineyard_purchase"
    STAFF_HIRING = "staff_hiring"


class LimitingConstraint(Enum):
    HARD = "hard"
    BOARD = "board"
    NONE = "none"
