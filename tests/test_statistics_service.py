"""
Тесты статистики месяца.
"""

from datetime import date

import pytest
from hypothesis import given, strategies as st

from cost_tracker.models import CostType, Currency
from cost_tracker.services.statistics_service import (
    build_statistics,
    change_percentage,
    previous_period,
)


def test_previous_period():
    assert previous_period(2024, 3) == (2024, 2)
    assert previous_period(2024, 1) == (2023, 12)


@given(current=st.floats(min_value=0, max_value=1e9, allow_nan=False))
def test_zero_previous_gives_zero_change(current):
    """Без расходов в прошлом месяце изменение равно нулю."""
    assert change_percentage(current, 0.0) == 0.0


def test_january_vs_february_scenario(db_session, rates, cost_factory):
    cost_factory(100, date(2024, 1, 10))
    cost_factory(150, date(2024, 2, 10))

    stats = build_statistics(db_session, 2024, 2, "USD", rates=rates)

    assert stats.total_this_month == pytest.approx(150.0)
    assert stats.total_last_month == pytest.approx(100.0)
    assert stats.change_percentage == pytest.approx(50.0)
    assert stats.currency == Currency.USD


def test_average_daily_uses_calendar_days(db_session, rates, cost_factory):
    cost_factory(290, date(2024, 2, 1))

    stats = build_statistics(db_session, 2024, 2, "USD", rates=rates)

    # 2024 - високосный год, в феврале 29 дней
    assert stats.average_daily == pytest.approx(10.0)


def test_january_compares_with_previous_december(db_session, rates, cost_factory):
    cost_factory(200, date(2023, 12, 31))
    cost_factory(100, date(2024, 1, 1))

    stats = build_statistics(db_session, 2024, 1, "USD", rates=rates)

    assert stats.total_last_month == pytest.approx(200.0)
    assert stats.change_percentage == pytest.approx(-50.0)


def test_total_by_category_only_counts_expenses(db_session, rates, cost_factory):
    cost_factory(30, date(2024, 3, 1), "Food")
    cost_factory(20, date(2024, 3, 2), "Food")
    cost_factory(35, date(2024, 3, 3), "Taxi", currency=Currency.ILS)
    cost_factory(1000, date(2024, 3, 4), "Salary", type=CostType.INCOME)

    stats = build_statistics(db_session, 2024, 3, "USD", rates=rates)

    assert stats.total_by_category == pytest.approx({"Food": 50.0, "Taxi": 10.0})
    assert stats.change_percentage == 0.0
