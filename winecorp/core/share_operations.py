"""
Opérations sur le capital : émission, rachat, taux de dividende et
versement saisonnier des dividendes.

Chaque opération passe d'abord les limites réglementaires, puis le
contrôle du conseil, avant de toucher la trésorerie et la structure
du capital.
"""

import logging
import math
from typing import Optional

from pydantic import BaseModel

from winecorp.core.board_enforcer import financial_context, is_action_allowed
from winecorp.core.finance import Period, add_transaction, calculate_financial_data
from winecorp.core.share_price import apply_share_structure_adjustment, initialize_share_price
from winecorp.data.board_params import DIVIDEND_RESERVE_SEASONS
from winecorp.data.share_params import (
    DIVIDEND_CHANGE_PRESTIGE,
    MAX_BUYBACK_DEBT_RATIO,
    MAX_BUYBACK_RATIO_PER_YEAR,
    MAX_DIVIDEND_DECREASE,
    MAX_ISSUANCE_RATIO,
    MIN_ISSUANCE_PRICE,
    SMALL_DIVIDEND_CHANGE,
)
from winecorp.domain.board import BoardConstraintType
from winecorp.domain.company import Company
from winecorp.domain.transactions import STOCK_BUYBACK_PREFIX, STOCK_ISSUANCE_PREFIX, TransactionCategory
from winecorp.errors import (
    BoardRejectionError,
    InsufficientFundsError,
    ShareOperationError,
    WinecorpError,
)

logger = logging.getLogger(__name__)


class ShareOperationResult(BaseModel):
    success: bool
    error: Optional[str] = None
    total_shares: Optional[int] = None
    outstanding_shares: Optional[int] = None
    player_shares: Optional[int] = None
    player_ownership_pct: Optional[float] = None
    capital_raised: Optional[float] = None
    cost: Optional[float] = None
    share_price: Optional[float] = None


class DividendChangeResult(BaseModel):
    success: bool
    error: Optional[str] = None
    old_rate: Optional[float] = None
    new_rate: Optional[float] = None
    prestige_impact: float = 0.0


class DividendPaymentResult(BaseModel):
    success: bool
    error: Optional[str] = None
    total_payment: float = 0.0
    player_payment: float = 0.0
    outstanding_payment: float = 0.0


class DividendRateLimits(BaseModel):
    min: float
    max: float


def _current_price(company: Company, price: Optional[float]) -> float:
    """Cours de l'opération ; initialise le cours de la société s'il ne l'est pas."""
    if company.shares.share_price <= 0:
        initialize_share_price(company)
    if company.shares.share_price <= 0:
        raise ShareOperationError("Cours de l'action non initialisé")
    if price is not None:
        return price
    return company.shares.share_price


def _debt_ratio(company: Company) -> float:
    data = calculate_financial_data(company, Period.YEAR)
    if data.total_assets <= 0:
        return 0.0
    return company.outstanding_loans() / data.total_assets


def shares_bought_back_this_year(company: Company) -> int:
    return sum(
        t.shares or 0
        for t in company.transactions
        if t.description.startswith(STOCK_BUYBACK_PREFIX) and t.date.year == company.date.year
    )


def _check_board(company: Company, action: BoardConstraintType, value: float) -> None:
    check = is_action_allowed(company, action, value, financial_context(company))
    if not check.allowed:
        raise BoardRejectionError(check.message or "Le conseil n'approuve pas l'opération", check.limit)


def _structure_result(company: Company, **extra) -> ShareOperationResult:
    s = company.shares
    return ShareOperationResult(
        success=True,
        total_shares=s.total_shares,
        outstanding_shares=s.outstanding_shares,
        player_shares=s.player_shares,
        player_ownership_pct=s.player_ownership_pct,
        share_price=s.share_price,
        **extra,
    )


# ------- Limites (affichage) -------


def max_issuance_shares(company: Company) -> int:
    return math.floor(company.shares.total_shares * MAX_ISSUANCE_RATIO)


def max_buyback_shares(company: Company) -> int:
    """Minimum des plafonds : actions en circulation, trésorerie, quota annuel, dette."""
    outstanding = company.shares.outstanding_shares
    try:
        price = _current_price(company, None)
    except ShareOperationError:
        return 0
    by_cash = math.floor(max(company.money, 0.0) / price)
    yearly = math.floor(outstanding * MAX_BUYBACK_RATIO_PER_YEAR)
    remaining = max(0, yearly - shares_bought_back_this_year(company))
    by_debt = 0 if _debt_ratio(company) > MAX_BUYBACK_DEBT_RATIO else outstanding
    return max(0, min(outstanding, by_cash, remaining, by_debt))


def dividend_rate_limits(company: Company) -> DividendRateLimits:
    """Plancher (baisse de 10% ou petite variation) et plafond (quatre saisons de trésorerie)."""
    total = company.shares.total_shares
    old = company.shares.dividend_rate
    by_cash = company.money / (DIVIDEND_RESERVE_SEASONS * total) if total > 0 else 0.0
    minimum = 0.0
    if old > 0:
        minimum = max(0.0, old - max(old * MAX_DIVIDEND_DECREASE, SMALL_DIVIDEND_CHANGE))
    maximum = old if old > by_cash else by_cash
    return DividendRateLimits(min=minimum, max=max(0.0, maximum))


# ------- Émission -------


def issue_stock(company: Company, shares: int, price: Optional[float] = None) -> ShareOperationResult:
    """Émet de nouvelles actions vendues à des investisseurs extérieurs."""
    try:
        if shares <= 0:
            raise ShareOperationError("Le nombre d'actions doit être positif")
        share_price = _current_price(company, price)
        if share_price < MIN_ISSUANCE_PRICE:
            raise ShareOperationError(
                f"Cours trop bas pour émettre : minimum {MIN_ISSUANCE_PRICE:.2f} € par action"
            )
        limit = max_issuance_shares(company)
        if shares > limit:
            raise ShareOperationError(
                f"Une émission ne peut dépasser 50% du capital : {limit} actions au plus"
            )
        _check_board(company, BoardConstraintType.SHARE_ISSUANCE, shares)

        capital = shares * share_price
        old_total = company.shares.total_shares
        company.shares.total_shares += shares
        company.shares.outstanding_shares += shares
        add_transaction(
            company,
            capital,
            f"{STOCK_ISSUANCE_PREFIX}: {shares} shares @ {share_price:.2f}€ per share",
            TransactionCategory.INITIAL_INVESTMENT,
            shares=shares,
        )
        apply_share_structure_adjustment(company, old_total, company.shares.total_shares, issuance=True)
        logger.info("%s: émission de %d actions à %.2f €", company.name, shares, share_price)
        return _structure_result(company, capital_raised=capital)
    except WinecorpError as e:
        return ShareOperationResult(success=False, error=str(e))


# ------- Rachat -------


def buy_back_stock(company: Company, shares: int, price: Optional[float] = None) -> ShareOperationResult:
    """Rachète des actions détenues hors joueur."""
    try:
        if shares <= 0:
            raise ShareOperationError("Le nombre d'actions doit être positif")
        outstanding = company.shares.outstanding_shares
        if shares > outstanding:
            raise ShareOperationError("Impossible de racheter plus d'actions qu'il n'en circule")
        share_price = _current_price(company, price)
        if share_price <= 0:
            raise ShareOperationError("Le cours doit être positif")

        cost = shares * share_price
        if cost > company.money:
            raise InsufficientFundsError("Trésorerie insuffisante pour ce rachat")
        already = shares_bought_back_this_year(company)
        yearly = math.floor(outstanding * MAX_BUYBACK_RATIO_PER_YEAR)
        if already + shares > yearly:
            raise ShareOperationError(
                f"Rachats limités à 25% des actions en circulation par an : "
                f"{already} déjà rachetées, {max(0, yearly - already)} restantes"
            )
        debt_ratio = _debt_ratio(company)
        if debt_ratio > MAX_BUYBACK_DEBT_RATIO:
            raise ShareOperationError(
                f"Rachat interdit au-delà de 30% d'endettement (actuel : {debt_ratio:.1%})"
            )
        _check_board(company, BoardConstraintType.SHARE_BUYBACK, shares)

        old_total = company.shares.total_shares
        company.shares.total_shares -= shares
        company.shares.outstanding_shares -= shares
        add_transaction(
            company,
            -cost,
            f"{STOCK_BUYBACK_PREFIX}: {shares} shares @ {share_price:.2f}€ per share",
            TransactionCategory.OTHER,
            shares=shares,
        )
        apply_share_structure_adjustment(company, old_total, company.shares.total_shares, issuance=False)
        logger.info("%s: rachat de %d actions à %.2f €", company.name, shares, share_price)
        return _structure_result(company, cost=cost)
    except WinecorpError as e:
        return ShareOperationResult(success=False, error=str(e))


# ------- Dividendes -------


def dividend_prestige_impact(old_rate: float, new_rate: float) -> float:
    """Effet sur le prestige : une baisse coûte deux fois plus qu'une hausse ne rapporte."""
    change = new_rate - old_rate
    if change == 0:
        return 0.0
    if old_rate > 0:
        change_pct = change / old_rate
    else:
        change_pct = 1.0 if new_rate > 0 else 0.0
    base = abs(change_pct) * DIVIDEND_CHANGE_PRESTIGE["base_factor"]
    if change < 0:
        impact = -base * DIVIDEND_CHANGE_PRESTIGE["cut_multiplier"]
    else:
        impact = base * DIVIDEND_CHANGE_PRESTIGE["increase_multiplier"]
    return impact if abs(impact) >= DIVIDEND_CHANGE_PRESTIGE["min_impact"] else 0.0


def _check_dividend_constraints(company: Company, new_rate: float) -> None:
    if new_rate < 0:
        raise ShareOperationError("Le dividende ne peut pas être négatif")
    required = new_rate * company.shares.total_shares * DIVIDEND_RESERVE_SEASONS
    if new_rate > 0 and company.money < required:
        raise InsufficientFundsError(
            f"Réserve insuffisante : {required:,.0f} € requis (4 saisons de dividendes)"
        )
    old = company.shares.dividend_rate
    if old > 0 and new_rate < old:
        decrease = old - new_rate
        if decrease >= SMALL_DIVIDEND_CHANGE and decrease / old > MAX_DIVIDEND_DECREASE:
            raise ShareOperationError(
                f"Baisse limitée à 10% par saison : minimum {old * (1 - MAX_DIVIDEND_DECREASE):.4f} € par action"
            )


def update_dividend_rate(company: Company, rate: float) -> DividendChangeResult:
    """Change le dividende par action et par saison, avec effet sur le prestige."""
    old = company.shares.dividend_rate
    try:
        _check_dividend_constraints(company, rate)
        _check_board(company, BoardConstraintType.DIVIDEND_CHANGE, rate)
    except WinecorpError as e:
        return DividendChangeResult(success=False, error=str(e), old_rate=old)

    company.shares.dividend_rate = rate
    impact = dividend_prestige_impact(old, rate)
    if impact:
        company.prestige = max(0.0, company.prestige + impact)
        company.cache.clear()
    logger.info("%s: dividende %.4f -> %.4f (prestige %+.3f)", company.name, old, rate, impact)
    return DividendChangeResult(success=True, old_rate=old, new_rate=rate, prestige_impact=impact)


def dividends_due(company: Company) -> bool:
    """Dus en semaine 1 de chaque saison, une seule fois par saison."""
    if company.shares.dividend_rate <= 0 or company.date.week != 1:
        return False
    last = company.shares.last_dividend_paid
    return last is None or not last.same_season(company.date)


def pay_dividends(company: Company) -> DividendPaymentResult:
    s = company.shares
    if s.dividend_rate <= 0:
        return DividendPaymentResult(success=False, error="Aucun dividende fixé")
    if company.date.week != 1:
        return DividendPaymentResult(
            success=False, error="Les dividendes se versent en semaine 1 de chaque saison"
        )
    if not dividends_due(company):
        return DividendPaymentResult(success=False, error="Dividendes déjà versés cette saison")

    player_payment = s.dividend_rate * s.player_shares
    outstanding_payment = s.dividend_rate * s.outstanding_shares
    total = player_payment + outstanding_payment
    if total > company.money:
        return DividendPaymentResult(success=False, error="Trésorerie insuffisante pour les dividendes")

    add_transaction(
        company,
        -total,
        f"Dividend Payment: {s.dividend_rate:.4f}€ per share ({s.total_shares} shares)",
        TransactionCategory.DIVIDEND_PAYMENT,
    )
    s.last_dividend_paid = company.date
    logger.info("%s: dividendes versés %.2f €", company.name, total)
    return DividendPaymentResult(
        success=True,
        total_payment=total,
        player_payment=player_payment,
        outstanding_payment=outstanding_payment,
    )
