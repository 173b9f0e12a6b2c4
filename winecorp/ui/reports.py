from winecorp.console_style import bold, cyan, score, signed
from winecorp.core.board import BoardSatisfactionBreakdown
from winecorp.core.credit_rating import CreditRatingBreakdown, rating_category
from winecorp.core.finance import BalanceSheet, CashFlowStatement, IncomeStatement
from winecorp.core.results import WeekResult
from winecorp.core.share_price import SharePriceBreakdown
from winecorp.utils import format_to_euro


def _pct(value: float) -> str:
    return f"{value * 100:5.1f}%"


def _bar(value: float, width: int = 24, fill_char: str = "█") -> str:
    """Barre de progression pour une valeur 0-1."""
    ratio = max(0.0, min(1.0, value))
    n = int(round(ratio * width))
    return fill_char * n + " " * (width - n)


def print_income_statement(statement: IncomeStatement, title: str = "Compte de résultat"):
    print(f"\n{bold(title)}")
    print("=" * 48)
    for line in statement.revenue_lines:
        print(f"  + {line.description:<28} {format_to_euro(line.amount):>14}")
    for line in statement.expense_lines:
        print(f"  - {line.description:<28} {format_to_euro(line.amount):>14}")
    print("-" * 48)
    print(f"💶 Chiffre d'affaires          {format_to_euro(statement.revenue):>14}")
    print(f"🧾 Charges                     {format_to_euro(statement.expenses):>14}")
    net = format_to_euro(statement.net_income)
    print(f"📈 Résultat net                {signed(statement.net_income, f'{net:>14}')}")
    print("=" * 48)


def print_balance_sheet(sheet: BalanceSheet):
    a, p = sheet.assets, sheet.liabilities
    print(f"\n{bold('📒 Bilan')}")
    print("=" * 48)
    print("ACTIF")
    print(f"💶 Trésorerie        : {format_to_euro(a.cash)}")
    print(f"🍇 Vignobles         : {format_to_euro(a.vineyards)}")
    print(f"🏠 Bâtiments         : {format_to_euro(a.buildings)}")
    print(f"🍷 Vins et raisins   : {format_to_euro(a.wine + a.grapes)}")
    print(f"👉 TOTAL ACTIF       : {format_to_euro(a.total)}")
    print("\nPASSIF")
    print(f"🏦 Emprunts          : {format_to_euro(p.loans)}")
    print(f"🧱 Apport joueur     : {format_to_euro(p.player_contribution)}")
    print(f"👪 Apport familial   : {format_to_euro(p.family_contribution)}")
    print(f"💼 Investisseurs     : {format_to_euro(p.outside_investment)}")
    print(f"📊 Résultats cumulés : {format_to_euro(p.retained_earnings)}")
    print(f"👉 TOTAL PASSIF      : {format_to_euro(p.total)}")
    print("=" * 48)


def print_cash_flow(statement: CashFlowStatement):
    print(f"\n{bold('💧 Flux de trésorerie')}")
    print(f"Exploitation   : {format_to_euro(statement.operating)}")
    print(f"Investissement : {format_to_euro(statement.investing)}")
    print(f"Financement    : {format_to_euro(statement.financing)}")
    print(f"Variation      : {signed(statement.net_change, format_to_euro(statement.net_change))}")


def print_credit_rating(breakdown: CreditRatingBreakdown):
    final = breakdown.final_rating
    print(f"\n{bold('🏦 Notation de crédit')} : {score(final, f'{rating_category(final)} ({_pct(final)})')}")
    print(f"Santé de l'actif     [{_bar(breakdown.asset_health.score)}] {_pct(breakdown.asset_health.score)}")
    print(f"Historique paiements [{_bar(breakdown.payment_history.score)}] {_pct(breakdown.payment_history.score)}")
    print(f"Stabilité            [{_bar(breakdown.company_stability.score)}] {_pct(breakdown.company_stability.score)}")
    if breakdown.negative_balance.score < 0:
        print(f"Découvert            : {_pct(breakdown.negative_balance.score)}")


def print_board(breakdown: BoardSatisfactionBreakdown):
    sat = breakdown.satisfaction
    print(f"\n{bold('🏛️  Conseil')} : satisfaction {score(sat, _pct(sat))}")
    print(f"Performance [{_bar(breakdown.performance_score)}] {_pct(breakdown.performance_score)}")
    print(f"Stabilité   [{_bar(breakdown.stability_score)}] {_pct(breakdown.stability_score)}")
    print(f"Régularité  [{_bar(breakdown.consistency_score)}] {_pct(breakdown.consistency_score)}")
    print(f"Part du joueur : {breakdown.player_ownership_pct:.1f}%  pression {_pct(breakdown.ownership_pressure)}")
    if breakdown.is_grace_period_active:
        print(cyan("Première année : plancher de satisfaction actif"))


def print_share_price(breakdown: SharePriceBreakdown):
    adj = breakdown.adjustment
    print(f"\n{bold('📈 Cours')} : {breakdown.current_price:.2f} € (valeur comptable {breakdown.base_price:.2f} €)")
    print(f"{'Indicateur':<20} {'Écart':>9} {'Contribution':>13}")
    for key, contribution in adj.contributions.items():
        print(
            f"{key:<20} {contribution.delta_percent:>8.1f}% "
            f"{signed(contribution.contribution, f'{contribution.contribution:>+13.4f}')}"
        )
    print(f"Ancrage {adj.anchor_factor:.3f} -> ajustement {signed(adj.adjustment, f'{adj.adjustment:+.4f} €')}")


def print_week_result(result: WeekResult) -> None:
    print(f"\n{'─' * 64}")
    print(f"📊 {result.company_name} - {result.date} ({result.economy_phase.value})")
    print(f"Trésorerie : {format_to_euro(result.money_start)} -> {format_to_euro(result.money_end)}")
    print(
        f"Cours : {result.share_price:.2f} €   Notation : {rating_category(result.credit_rating)}"
        f"   Conseil : {score(result.board_satisfaction, _pct(result.board_satisfaction))}"
    )
    if result.loan_payments:
        print(f"Échéances payées : {format_to_euro(result.loan_payments)}")
    if result.dividends_paid:
        print(f"Dividendes versés : {format_to_euro(result.dividends_paid)}")
    for event in result.events:
        print(f"  • {event}")
    if result.error:
        print(f"⚠️  {result.error}")
