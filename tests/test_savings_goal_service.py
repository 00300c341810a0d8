"""
Тесты целей накоплений и вычисляемого прогресса.
"""

from datetime import date
from decimal import Decimal

import pytest

from cost_tracker.models import CostType, Currency
from cost_tracker.services.savings_goal_service import (
    add_savings_goal,
    delete_savings_goal,
    get_savings_goals,
    get_savings_progress,
    update_savings_goal,
)
from cost_tracker.utils.exceptions import NotFoundError, ValidationError


def goal_payload(**overrides):
    payload = {
        "name": "Отпуск",
        "targetAmount": 1000,
        "currency": "USD",
        "targetDate": {"year": 2025, "month": 6, "day": 1},
    }
    payload.update(overrides)
    return payload


class TestSavingsGoalCrud:
    """CRUD целей накоплений."""

    def test_add_goal_accepts_camel_case(self, db_session):
        goal = add_savings_goal(db_session, goal_payload())

        assert goal.id is not None
        assert goal.target_amount == Decimal("1000")
        assert goal.target_date == date(2025, 6, 1)

    def test_add_goal_accepts_snake_case(self, db_session):
        goal = add_savings_goal(db_session, {
            "name": "Машина", "target_amount": 500, "currency": "GBP", "target_date": "2026-01-01"
        })
        assert goal.currency == Currency.GBP

    @pytest.mark.parametrize("overrides", [
        {"name": "  "},
        {"targetAmount": 0},
        {"currency": "BTC"},
    ])
    def test_add_goal_validation(self, db_session, overrides):
        with pytest.raises(ValidationError):
            add_savings_goal(db_session, goal_payload(**overrides))

    def test_update_goal(self, db_session):
        goal = add_savings_goal(db_session, goal_payload())

        updated = update_savings_goal(db_session, goal.id, {"targetAmount": 1500})

        assert updated.target_amount == Decimal("1500")
        assert updated.name == "Отпуск"

    def test_delete_goal(self, db_session):
        goal = add_savings_goal(db_session, goal_payload())

        delete_savings_goal(db_session, goal.id)

        assert get_savings_goals(db_session) == []
        with pytest.raises(NotFoundError):
            update_savings_goal(db_session, goal.id, {"name": "x"})


class TestSavingsProgress:
    """Прогресс вычисляется по записям накоплений."""

    def test_progress_from_deposits_and_withdrawals(self, db_session, rates, cost_factory):
        add_savings_goal(db_session, goal_payload(targetAmount=1000))
        cost_factory(500, date(2024, 1, 1), "Savings", type=CostType.SAVINGS_DEPOSIT)
        cost_factory(350, date(2024, 2, 1), "Savings", currency=Currency.ILS, type=CostType.SAVINGS_DEPOSIT)
        cost_factory(100, date(2024, 3, 1), "Savings", type=CostType.SAVINGS_WITHDRAWAL)
        cost_factory(700, date(2024, 3, 1), "Food")

        [progress] = get_savings_progress(db_session, rates=rates)

        assert progress.current_amount == pytest.approx(500.0)
        assert progress.progress == pytest.approx(50.0)
        assert progress.is_completed is False

    def test_progress_capped_at_100(self, db_session, rates, cost_factory):
        add_savings_goal(db_session, goal_payload(targetAmount=100))
        cost_factory(250, date(2024, 1, 1), "Savings", type=CostType.SAVINGS_DEPOSIT)

        [progress] = get_savings_progress(db_session, rates=rates)

        assert progress.progress == 100.0
        assert progress.is_completed is True

    def test_progress_in_goal_currency(self, db_session, rates, cost_factory):
        add_savings_goal(db_session, goal_payload(targetAmount=700, currency="ILS"))
        cost_factory(100, date(2024, 1, 1), "Savings", type=CostType.SAVINGS_DEPOSIT)

        [progress] = get_savings_progress(db_session, rates=rates)

        assert progress.current_amount == pytest.approx(350.0)
        assert progress.progress == pytest.approx(50.0)

    def test_no_goals(self, db_session):
        # Без целей курсы не запрашиваются
        assert get_savings_progress(db_session) == []
