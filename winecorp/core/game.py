"""
Création d'une société et boucle hebdomadaire.

Chaque semaine : avancée du calendrier, puis en début de saison transition
économique, échéances de prêts et dividendes ; enfin mise à jour du cours,
de la tendance de croissance et de la satisfaction du conseil.
"""

import logging
import random
from typing import List, Optional

from winecorp.core.board import store_board_snapshot
from winecorp.core.credit_rating import credit_rating
from winecorp.core.customers import acquisition_chance, initialize_customers
from winecorp.core.economy import next_economy_phase
from winecorp.core.finance import add_transaction, initial_share_count
from winecorp.core.growth_trend import update_growth_trend
from winecorp.core.lenders import generate_lenders
from winecorp.core.loans import process_seasonal_loan_payments
from winecorp.core.results import WeekResult
from winecorp.core.share_operations import dividends_due, pay_dividends
from winecorp.core.share_price import adjust_share_price_weekly, initialize_share_price
from winecorp.data.finance_params import FAMILY_VINEYARD_VALUE, STARTING_MONEY, STARTING_PRESTIGE
from winecorp.domain.company import Company, ShareStructure, Vineyard
from winecorp.domain.loans import LoanStatus
from winecorp.domain.time import START_DATE, GameDate
from winecorp.domain.transactions import (
    OUTSIDE_INVESTMENT_LABEL,
    PLAYER_CONTRIBUTION_LABEL,
    TransactionCategory,
)

logger = logging.getLogger(__name__)


def create_company(
    name: str,
    player_cash: float = STARTING_MONEY,
    outside_investment: float = 0.0,
    family_vineyard_value: float = FAMILY_VINEYARD_VALUE,
    date: GameDate = START_DATE,
    rng: Optional[random.Random] = None,
) -> Company:
    """Crée une société, son capital, ses prêteurs et ses clients.

    Le nombre d'actions suit le capital total (apport du joueur, vignes
    familiales et investisseurs) ; le joueur reçoit la part correspondant
    à son apport, le reste est détenu hors joueur.

    Raises:
        ValueError: Si l'apport du joueur n'est pas positif.
    """
    if player_cash <= 0:
        raise ValueError("L'apport du joueur doit être positif")
    rng = rng or random.Random()

    capital = player_cash + outside_investment + family_vineyard_value
    total = initial_share_count(capital)
    player = min(total, round(total * player_cash / capital))
    company = Company(
        name=name,
        shares=ShareStructure(
            total_shares=total, player_shares=player, outstanding_shares=total - player
        ),
        founded_year=date.year,
        date=date,
        prestige=STARTING_PRESTIGE,
    )

    add_transaction(company, player_cash, PLAYER_CONTRIBUTION_LABEL, TransactionCategory.INITIAL_INVESTMENT)
    if outside_investment > 0:
        add_transaction(
            company, outside_investment, OUTSIDE_INVESTMENT_LABEL, TransactionCategory.INITIAL_INVESTMENT
        )
    if family_vineyard_value > 0:
        company.vineyards.append(Vineyard(name="Vignes familiales", value=family_vineyard_value))
        company.initial_vineyard_value = family_vineyard_value

    company.lenders = generate_lenders(rng)
    initialize_customers(company, rng)
    initialize_share_price(company)
    logger.info(
        "Société %s créée : %d actions, %.1f%% au joueur, cours %.2f €",
        name,
        total,
        company.shares.player_ownership_pct,
        company.shares.share_price,
    )
    return company


def _start_of_season(company: Company, result: WeekResult, rng: random.Random) -> None:
    previous = company.economy_phase
    company.economy_phase = next_economy_phase(previous, rng)
    if company.economy_phase != previous:
        result.events.append(f"Économie : {previous.value} -> {company.economy_phase.value}")

    for event in process_seasonal_loan_payments(company):
        result.loan_payments += event.amount_paid
        if event.missed_payments:
            result.missed_loan_payments += 1
            result.events.append(
                f"Échéance manquée chez {event.lender_name} (avertissement {event.missed_payments})"
            )
        if event.status == LoanStatus.DEFAULTED:
            result.events.append(f"Défaut sur le prêt de {event.lender_name}")

    if dividends_due(company):
        payment = pay_dividends(company)
        if payment.success:
            result.dividends_paid = payment.total_payment
        else:
            result.events.append(payment.error)


def advance_week(company: Company, rng: Optional[random.Random] = None) -> WeekResult:
    """Joue une semaine et renvoie le bilan de la semaine."""
    rng = rng or random.Random()
    money_start = company.money
    company.date = company.date.advance()
    company.cache.clear()

    result = WeekResult(
        company_name=company.name,
        date=company.date,
        economy_phase=company.economy_phase,
        money_start=money_start,
        money_end=money_start,
        share_price=company.shares.share_price,
        credit_rating=0.0,
        board_satisfaction=0.0,
        growth_trend_multiplier=company.shares.growth_trend_multiplier,
    )

    if company.date.week == 1:
        _start_of_season(company, result, rng)

    update = adjust_share_price_weekly(company)
    if not update.success:
        result.error = update.error
    update_growth_trend(company)
    snapshot = store_board_snapshot(company)
    result.customer_acquired = acquisition_chance(company, rng).customer_acquired

    result.economy_phase = company.economy_phase
    result.money_end = company.money
    result.share_price = company.shares.share_price
    result.credit_rating = credit_rating(company)
    result.board_satisfaction = snapshot.satisfaction
    result.growth_trend_multiplier = company.shares.growth_trend_multiplier
    return result


def run_weeks(company: Company, weeks: int, rng: Optional[random.Random] = None) -> List[WeekResult]:
    rng = rng or random.Random()
    return [advance_week(company, rng) for _ in range(weeks)]
