import pytest

from winecorp.core import board_enforcer
from winecorp.core.board_enforcer import (
    FinancialContext,
    constraint_info,
    dividend_change_limit,
    financial_context,
    get_action_limit,
    is_action_allowed,
    share_buyback_limit,
    share_issuance_limit,
    vineyard_purchase_limit,
)
from winecorp.data.board_params import BOARD_CONSTRAINTS
from winecorp.domain.board import BoardConstraintType, LimitingConstraint


@pytest.fixture
def satisfaction(monkeypatch):
    """Fixe la satisfaction vue par le contrôleur."""

    def _set(value):
        monkeypatch.setattr(board_enforcer, "board_satisfaction", lambda company: value)

    return _set


@pytest.fixture
def ctx():
    return FinancialContext(
        cash=100_000.0,
        total_assets=1_000_000.0,
        fixed_assets=200_000.0,
        profit_margin=0.10,
        total_shares=100_000,
        outstanding_shares=40_000,
        share_price=5.0,
        old_dividend_rate=1.0,
    )


def test_vineyard_limit_scales_with_satisfaction(ctx):
    assert vineyard_purchase_limit(0.5, 0, ctx) == pytest.approx(50_000.0)
    assert vineyard_purchase_limit(0.7, 0, ctx) > vineyard_purchase_limit(0.5, 0, ctx)


def test_vineyard_limit_negative_margin(ctx):
    losing = ctx.model_copy(update={"profit_margin": -0.2})
    assert vineyard_purchase_limit(0.5, 0, losing) == pytest.approx(20_000.0)


def test_share_issuance_limit(ctx):
    assert share_issuance_limit(0.0, 0, ctx) == 20_000
    cheap = ctx.model_copy(update={"share_price": 0.25})
    assert share_issuance_limit(0.0, 0, cheap) == 17_000
    assert share_issuance_limit(1.0, 0, ctx) == 50_000


def test_share_buyback_limit(ctx):
    rich = ctx.model_copy(update={"cash": 10_000_000.0})
    assert share_buyback_limit(0.0, 0, rich) == 4_000
    indebted = rich.model_copy(update={"debt_ratio": 0.35})
    assert share_buyback_limit(0.0, 0, indebted) == 2_000


def test_dividend_limits(ctx):
    rich = ctx.model_copy(update={"cash": 1_000_000.0})
    assert dividend_change_limit(0.5, 1.05, rich) == pytest.approx(1.065)
    assert dividend_change_limit(0.5, 0.5, rich) == pytest.approx(0.935)
    first = rich.model_copy(update={"old_dividend_rate": 0.0})
    assert dividend_change_limit(0.5, 2.0, first) == pytest.approx(2.5)


def test_blocked_below_max(company, satisfaction):
    satisfaction(0.15)
    result = is_action_allowed(company, BoardConstraintType.SHARE_BUYBACK, 10)
    assert not result.allowed
    assert result.message == BOARD_CONSTRAINTS[BoardConstraintType.SHARE_BUYBACK]["message"]


def test_limited_between_thresholds(company, satisfaction, ctx):
    satisfaction(0.5)
    assert is_action_allowed(company, BoardConstraintType.VINEYARD_PURCHASE, 40_000, ctx).allowed
    refused = is_action_allowed(company, BoardConstraintType.VINEYARD_PURCHASE, 60_000, ctx)
    assert not refused.allowed
    assert refused.limit == pytest.approx(50_000.0)


def test_dividend_cut_checked_against_floor(company, satisfaction, ctx):
    satisfaction(0.4)
    action = BoardConstraintType.DIVIDEND_CHANGE
    small_cut = is_action_allowed(company, action, 0.95, ctx)
    assert small_cut.allowed
    assert small_cut.limit == pytest.approx(0.942)
    assert not is_action_allowed(company, action, 0.91, ctx).allowed


def test_unconstrained_above_start(company, satisfaction, ctx):
    satisfaction(0.9)
    result = is_action_allowed(company, BoardConstraintType.VINEYARD_PURCHASE, 10_000_000, ctx)
    assert result.allowed
    assert result.limit is not None


def test_threshold_only_action(company, satisfaction):
    satisfaction(0.5)
    assert not is_action_allowed(company, BoardConstraintType.STAFF_HIRING).allowed
    satisfaction(0.8)
    assert is_action_allowed(company, BoardConstraintType.STAFF_HIRING).allowed


def test_full_ownership_bypasses_board(company, satisfaction):
    satisfaction(0.0)
    company.shares.player_shares = company.shares.total_shares
    result = is_action_allowed(company, BoardConstraintType.SHARE_ISSUANCE, 1_000)
    assert result.allowed
    assert result.satisfaction == 1.0


def test_calculation_error_allows_action(company, monkeypatch):
    def broken(_):
        raise ZeroDivisionError("boom")

    monkeypatch.setattr(board_enforcer, "board_satisfaction", broken)
    assert is_action_allowed(company, BoardConstraintType.SHARE_ISSUANCE, 1_000).allowed


def test_get_action_limit(company, satisfaction, ctx):
    satisfaction(0.9)
    assert get_action_limit(company, BoardConstraintType.VINEYARD_PURCHASE, 0, ctx) is None
    satisfaction(0.5)
    assert get_action_limit(company, BoardConstraintType.VINEYARD_PURCHASE, 0, ctx) == pytest.approx(50_000.0)
    assert get_action_limit(company, BoardConstraintType.STAFF_HIRING) is None


def test_constraint_info_picks_strictest(company, satisfaction, ctx):
    satisfaction(0.5)
    board_wins = constraint_info(company, BoardConstraintType.VINEYARD_PURCHASE, 80_000.0, 0, ctx)
    assert board_wins.limiting_constraint == LimitingConstraint.BOARD
    assert board_wins.effective_limit == pytest.approx(50_000.0)
    assert board_wins.is_limited

    hard_wins = constraint_info(company, BoardConstraintType.VINEYARD_PURCHASE, 30_000.0, 0, ctx)
    assert hard_wins.limiting_constraint == LimitingConstraint.HARD
    assert hard_wins.effective_limit == 30_000.0

    none = constraint_info(company, BoardConstraintType.STAFF_HIRING, None)
    assert none.limiting_constraint == LimitingConstraint.NONE


def test_constraint_info_blocked(company, satisfaction):
    satisfaction(0.1)
    info = constraint_info(company, BoardConstraintType.SHARE_ISSUANCE, 1_000.0)
    assert info.is_blocked
    assert info.board_limit == 0.0
    assert info.effective_limit == 0.0


def test_financial_context_overrides(company):
    ctx = financial_context(company, new_dividend_rate=0.5)
    assert ctx.cash == company.money
    assert ctx.total_shares == 100_000
    assert ctx.new_dividend_rate == 0.5
