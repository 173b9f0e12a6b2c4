"""
Prêts : conditions, souscription, échéances saisonnières et incidents
de paiement, remboursements anticipés.

Une échéance manquée (ou partielle) fait monter le compteur d'avertissements :
1. frais de retard ajoutés au capital restant ;
2. hausse du taux, pénalité sur le capital et perte de prestige ;
3. saisie forcée de vignobles puis paiement d'urgence ;
4. et au-delà, défaut : prêteur sur liste noire et lourde perte de prestige.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel

from winecorp.core.credit_rating import credit_rating
from winecorp.core.economy import interest_multiplier
from winecorp.core.finance import add_transaction
from winecorp.core.lenders import blacklist_lender, lender_availability
from winecorp.data.loan_params import (
    CREDIT_BEST_MULTIPLIER,
    CREDIT_MULTIPLIER_SPREAD,
    DEFAULT_PRESTIGE_PENALTY,
    DURATION_INTEREST_MODIFIERS,
    EXTRA_PAYMENT_FEE_RATE,
    EXTRA_PAYMENT_MIN_FEE,
    LENDER_TYPE_MULTIPLIERS,
    PREPAYMENT_INTEREST_FACTOR,
    PREPAYMENT_MIN_PENALTY,
    SEIZURE_SALE_RATIO,
    VERY_LONG_TERM_MODIFIER,
    WARNING_1_LATE_FEE_PERCENT,
    WARNING_2_BALANCE_PENALTY_PERCENT,
    WARNING_2_INTEREST_INCREASE,
    WARNING_2_PRESTIGE_PENALTY,
    WARNING_3_MAX_SEIZURE_PERCENT,
)
from winecorp.domain.company import Company
from winecorp.domain.economy import EconomyPhase
from winecorp.domain.loans import Lender, LenderType, Loan, LoanStatus
from winecorp.domain.time import SEASON_ORDER, GameDate, Season
from winecorp.domain.transactions import TransactionCategory
from winecorp.errors import InsufficientFundsError, LoanError

logger = logging.getLogger(__name__)


class LoanTerms(BaseModel):
    effective_interest_rate: float
    seasonal_payment: float
    total_repayment: float
    total_interest: float
    origination_fee: float
    total_expenses: float


class SeizureResult(BaseModel):
    vineyards_seized: int = 0
    value_recovered: float = 0.0
    sale_proceeds: float = 0.0
    vineyard_names: List[str] = []


class LoanPaymentEvent(BaseModel):
    loan_id: str
    lender_name: str
    amount_paid: float
    missed_payments: int
    status: LoanStatus
    seizure: Optional[SeizureResult] = None


# ------- Conditions -------


def credit_multiplier(rating: float) -> float:
    """0.8 pour une notation parfaite, 1.5 pour une notation nulle."""
    return CREDIT_BEST_MULTIPLIER + CREDIT_MULTIPLIER_SPREAD * (1 - rating)


def duration_modifier(duration_seasons: Optional[int]) -> float:
    if not duration_seasons:
        return 1.0
    for max_seasons, modifier in DURATION_INTEREST_MODIFIERS:
        if duration_seasons <= max_seasons:
            return modifier
    return VERY_LONG_TERM_MODIFIER


def effective_interest_rate(
    base_rate: float,
    economy_phase: EconomyPhase,
    lender_type: LenderType,
    rating: float,
    duration_seasons: Optional[int] = None,
) -> float:
    return (
        base_rate
        * interest_multiplier(economy_phase)
        * LENDER_TYPE_MULTIPLIERS[lender_type]
        * credit_multiplier(rating)
        * duration_modifier(duration_seasons)
    )


def seasonal_payment(principal: float, rate: float, seasons: int) -> float:
    """Échéance constante d'un prêt amortissable."""
    if rate == 0:
        return principal / seasons
    growth = (1 + rate) ** seasons
    return principal * rate * growth / (growth - 1)


def origination_fee(principal: float, lender: Lender, rating: float, duration_seasons: int) -> float:
    """Frais de dossier arrondis, modulés par la notation et la durée puis bornés."""
    fee = lender.origination_fee
    base = principal * fee.base_percent

    if rating >= 0.8:
        credit_mod = fee.credit_rating_modifier
    elif rating >= 0.6:
        credit_mod = 0.9 + (fee.credit_rating_modifier - 0.9) * 0.5
    elif rating >= 0.4:
        credit_mod = 1.0
    elif rating >= 0.2:
        credit_mod = 1.0 + (1.5 - fee.credit_rating_modifier) * 0.3
    else:
        credit_mod = 1.0 + (1.5 - fee.credit_rating_modifier) * 0.6

    if duration_seasons <= 16:
        duration_mod = 0.9 + (fee.duration_modifier - 1.0) * 0.1
    elif duration_seasons <= 40:
        duration_mod = 1.0
    elif duration_seasons <= 80:
        duration_mod = 1.0 + (fee.duration_modifier - 1.0) * 0.5
    else:
        duration_mod = fee.duration_modifier

    final = max(fee.min_fee, min(fee.max_fee, base * credit_mod * duration_mod))
    return round(final)


def loan_terms(
    lender: Lender,
    principal: float,
    duration_seasons: int,
    rating: float,
    economy_phase: EconomyPhase,
) -> LoanTerms:
    rate = effective_interest_rate(
        lender.base_interest_rate, economy_phase, lender.type, rating, duration_seasons
    )
    payment = seasonal_payment(principal, rate, duration_seasons)
    total = payment * duration_seasons
    fee = origination_fee(principal, lender, rating, duration_seasons)
    return LoanTerms(
        effective_interest_rate=rate,
        seasonal_payment=payment,
        total_repayment=total,
        total_interest=total - principal,
        origination_fee=fee,
        total_expenses=fee + total - principal,
    )


def total_interest(loan: Loan) -> float:
    return loan.seasonal_payment * loan.total_seasons - loan.principal_amount


def remaining_interest(loan: Loan) -> float:
    return loan.seasonal_payment * loan.seasons_remaining - loan.remaining_balance


def prepayment_penalty(loan: Loan) -> float:
    return max(PREPAYMENT_MIN_PENALTY, max(remaining_interest(loan), 0.0) * PREPAYMENT_INTEREST_FACTOR)


def extra_payment_fee(amount: float) -> float:
    return max(EXTRA_PAYMENT_MIN_FEE, amount * EXTRA_PAYMENT_FEE_RATE)


def next_payment_date(date: GameDate) -> GameDate:
    """Semaine 1 de la saison suivante."""
    index = (date.season.index + 1) % len(SEASON_ORDER)
    season = SEASON_ORDER[index]
    year = date.year + 1 if season == Season.SPRING else date.year
    return GameDate(1, season, year)


# ------- Souscription -------


def apply_for_loan(company: Company, lender: Lender, amount: float, duration_seasons: int) -> Loan:
    """Souscrit un prêt et encaisse le capital, frais de dossier déduits.

    Raises:
        LoanError: Prêteur indisponible ou montant/durée hors de ses bornes.
    """
    rating = credit_rating(company)
    if not lender_availability(lender, rating, company.prestige).is_available:
        raise LoanError(f"{lender.name} refuse de prêter à cette société")
    if not lender.min_loan_amount <= amount <= lender.max_loan_amount:
        raise LoanError(
            f"Montant hors bornes ({lender.min_loan_amount:,.0f} - {lender.max_loan_amount:,.0f} €)"
        )
    if not lender.min_duration_seasons <= duration_seasons <= lender.max_duration_seasons:
        raise LoanError(
            f"Durée hors bornes ({lender.min_duration_seasons} - {lender.max_duration_seasons} saisons)"
        )

    terms = loan_terms(lender, amount, duration_seasons, rating, company.economy_phase)
    loan = Loan(
        lender_id=lender.id,
        lender_name=lender.name,
        lender_type=lender.type,
        principal_amount=amount,
        base_interest_rate=lender.base_interest_rate,
        economy_phase_at_creation=company.economy_phase,
        credit_rating_at_creation=rating,
        effective_interest_rate=terms.effective_interest_rate,
        origination_fee=terms.origination_fee,
        remaining_balance=amount,
        seasonal_payment=terms.seasonal_payment,
        seasons_remaining=duration_seasons,
        total_seasons=duration_seasons,
        start_date=company.date,
        next_payment_due=next_payment_date(company.date),
    )
    company.loans.append(loan)
    add_transaction(
        company, amount, f"Loan received from {lender.name}", TransactionCategory.LOAN_RECEIVED
    )
    add_transaction(
        company,
        -terms.origination_fee,
        f"Origination fee for loan from {lender.name}",
        TransactionCategory.LOAN_ORIGINATION_FEE,
    )
    logger.info(
        "%s: prêt de %.0f € chez %s à %.2f%% sur %d saisons",
        company.name,
        amount,
        lender.name,
        terms.effective_interest_rate * 100,
        duration_seasons,
    )
    return loan


# ------- Incidents de paiement -------


def _adjust_prestige(company: Company, amount: float) -> None:
    company.prestige = max(0.0, company.prestige + amount)
    company.cache.clear()


def seize_vineyards(company: Company, loan: Loan) -> SeizureResult:
    """Vend les vignobles les moins chers jusqu'à 50% de la valeur du portefeuille, décotés de 25%."""
    if not company.vineyards:
        return SeizureResult()
    max_value = company.vineyards_value() * WARNING_3_MAX_SEIZURE_PERCENT
    seized = []
    recovered = 0.0
    for vineyard in sorted(company.vineyards, key=lambda v: v.value):
        if recovered >= max_value:
            break
        seized.append(vineyard)
        recovered += vineyard.value

    seized_ids = {id(v) for v in seized}
    company.vineyards = [v for v in company.vineyards if id(v) not in seized_ids]
    proceeds = recovered * SEIZURE_SALE_RATIO
    if proceeds > 0:
        add_transaction(
            company,
            proceeds,
            f"Forced vineyard sale by {loan.lender_name} - {len(seized)} vineyard(s) sold",
            TransactionCategory.VINEYARD_SALE,
        )
    logger.warning("%s: %d vignoble(s) saisi(s) par %s", company.name, len(seized), loan.lender_name)
    return SeizureResult(
        vineyards_seized=len(seized),
        value_recovered=recovered,
        sale_proceeds=proceeds,
        vineyard_names=[v.name for v in seized],
    )


def _warning_1(company: Company, loan: Loan) -> None:
    loan.remaining_balance += round(loan.seasonal_payment * WARNING_1_LATE_FEE_PERCENT)


def _warning_2(company: Company, loan: Loan) -> None:
    loan.effective_interest_rate += WARNING_2_INTEREST_INCREASE
    loan.remaining_balance += round(loan.remaining_balance * WARNING_2_BALANCE_PENALTY_PERCENT)
    _adjust_prestige(company, WARNING_2_PRESTIGE_PENALTY)


def _warning_3(company: Company, loan: Loan) -> SeizureResult:
    seizure = seize_vineyards(company, loan)
    if company.money > 0:
        payment = min(company.money, loan.remaining_balance)
        add_transaction(
            company,
            -payment,
            f"Emergency loan payment to {loan.lender_name} using all available funds",
            TransactionCategory.LOAN_PAYMENT,
        )
        loan.remaining_balance = max(0.0, loan.remaining_balance - payment)
    return seizure


def default_on_loan(company: Company, loan: Loan) -> None:
    loan.status = LoanStatus.DEFAULTED
    _adjust_prestige(company, DEFAULT_PRESTIGE_PENALTY)
    lender = company.lender(loan.lender_id)
    if lender is not None:
        blacklist_lender(lender)
    logger.error("%s: défaut sur le prêt de %s", company.name, loan.lender_name)


def _apply_warning(company: Company, loan: Loan) -> Optional[SeizureResult]:
    level = loan.missed_payments
    logger.warning("%s: échéance manquée chez %s (avertissement %d)", company.name, loan.lender_name, level)
    if level == 1:
        _warning_1(company, loan)
    elif level == 2:
        _warning_2(company, loan)
    elif level == 3:
        return _warning_3(company, loan)
    else:
        seizure = _warning_3(company, loan)
        default_on_loan(company, loan)
        return seizure
    return None


def process_loan_payment(company: Company, loan: Loan) -> LoanPaymentEvent:
    """Règle l'échéance d'un prêt : paiement complet, partiel ou manqué."""
    due = loan.seasonal_payment
    paid = 0.0
    seizure = None

    if company.money >= due:
        paid = due
        add_transaction(
            company, -due, f"Loan payment to {loan.lender_name}", TransactionCategory.LOAN_PAYMENT
        )
        loan.remaining_balance -= due
        loan.seasons_remaining -= 1
        loan.missed_payments = max(0, loan.missed_payments - 1)
        if loan.remaining_balance <= 0 or loan.seasons_remaining <= 0:
            loan.remaining_balance = 0.0
            loan.seasons_remaining = 0
            loan.missed_payments = 0
            loan.status = LoanStatus.PAID_OFF
            logger.info("%s: prêt de %s soldé", company.name, loan.lender_name)
        else:
            loan.next_payment_due = next_payment_date(company.date)
    elif company.money > 0:
        paid = company.money
        add_transaction(
            company,
            -paid,
            f"Partial loan payment to {loan.lender_name} ({paid:,.0f} of {due:,.0f} due)",
            TransactionCategory.LOAN_PAYMENT,
        )
        loan.remaining_balance -= paid
        loan.seasons_remaining -= 1
        loan.missed_payments += 1
        loan.next_payment_due = next_payment_date(company.date)
        seizure = _apply_warning(company, loan)
    else:
        loan.missed_payments += 1
        loan.next_payment_due = next_payment_date(company.date)
        seizure = _apply_warning(company, loan)

    return LoanPaymentEvent(
        loan_id=loan.id,
        lender_name=loan.lender_name,
        amount_paid=paid,
        missed_payments=loan.missed_payments,
        status=loan.status,
        seizure=seizure,
    )


def process_seasonal_loan_payments(company: Company) -> List[LoanPaymentEvent]:
    """Règle les prêts dont l'échéance tombe dans la saison courante."""
    return [
        process_loan_payment(company, loan)
        for loan in company.active_loans
        if loan.next_payment_due.same_season(company.date)
    ]


# ------- Remboursements anticipés -------


def _active_loan(company: Company, loan_id: str) -> Loan:
    loan = next((loan for loan in company.active_loans if loan.id == loan_id), None)
    if loan is None:
        raise LoanError("Prêt introuvable")
    return loan


def repay_loan_in_full(company: Company, loan_id: str) -> float:
    """Solde un prêt avant terme, indemnité de remboursement anticipé comprise.

    Returns:
        Le montant total décaissé.
    """
    loan = _active_loan(company, loan_id)
    penalty = prepayment_penalty(loan)
    total = loan.remaining_balance + penalty
    if company.money < total:
        raise InsufficientFundsError("Trésorerie insuffisante pour solder le prêt")

    add_transaction(
        company,
        -loan.remaining_balance,
        f"Early loan payoff to {loan.lender_name}",
        TransactionCategory.LOAN_PAYMENT,
    )
    add_transaction(
        company,
        -penalty,
        f"Prepayment penalty for loan from {loan.lender_name}",
        TransactionCategory.LOAN_PREPAYMENT_FEE,
    )
    loan.remaining_balance = 0.0
    loan.seasons_remaining = 0
    loan.status = LoanStatus.PAID_OFF
    logger.info("%s: prêt de %s soldé par anticipation", company.name, loan.lender_name)
    return total


def make_extra_payment(company: Company, loan_id: str, amount: float) -> float:
    """Remboursement partiel anticipé ; l'échéance est recalculée sur la durée restante.

    Returns:
        Les frais de gestion prélevés.
    """
    loan = _active_loan(company, loan_id)
    if amount <= 0:
        raise LoanError("Le montant doit être positif")
    if amount >= loan.remaining_balance:
        raise LoanError("Utiliser le remboursement total pour solder le prêt")
    fee = extra_payment_fee(amount)
    if company.money < amount + fee:
        raise InsufficientFundsError("Trésorerie insuffisante pour ce remboursement")

    add_transaction(
        company,
        -amount,
        f"Extra loan payment to {loan.lender_name}",
        TransactionCategory.LOAN_PAYMENT,
    )
    add_transaction(
        company,
        -fee,
        f"Extra payment fee for loan from {loan.lender_name}",
        TransactionCategory.LOAN_EXTRA_PAYMENT_FEE,
    )
    loan.remaining_balance -= amount
    if loan.seasons_remaining > 0:
        loan.seasonal_payment = seasonal_payment(
            loan.remaining_balance, loan.effective_interest_rate, loan.seasons_remaining
        )
    return fee
