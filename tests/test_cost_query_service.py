"""
Тесты выборок записей и CRUD сервиса записей.
"""

from datetime import date
from decimal import Decimal

import pytest

from cost_tracker.models import CostDB, CostType, Currency
from cost_tracker.services.cost_query_service import (
    filter_costs,
    get_all_costs,
    get_costs_by_category,
    get_costs_by_date_range,
    get_costs_by_month,
)
from cost_tracker.services.cost_service import add_cost, delete_cost, get_cost, update_cost
from cost_tracker.utils.exceptions import NotFoundError, ValidationError


class TestCostService:
    """Создание, обновление и удаление записей."""

    def test_add_cost_from_mapping_with_date_parts(self, db_session):
        cost = add_cost(db_session, {
            "sum": 100,
            "currency": "USD",
            "category": "Food",
            "type": "expense",
            "date": {"year": 2024, "month": 3, "day": 10},
        })

        assert cost.id is not None
        assert cost.date == date(2024, 3, 10)
        assert cost.type == CostType.EXPENSE
        assert cost.description == ""

    def test_add_cost_defaults_to_today(self, db_session):
        cost = add_cost(db_session, {"sum": 5, "currency": "ILS", "category": "Coffee"})
        assert cost.date == date.today()

    @pytest.mark.parametrize("payload", [
        {"sum": 0, "currency": "USD", "category": "Food"},
        {"sum": -10, "currency": "USD", "category": "Food"},
        {"sum": 10, "currency": "JPY", "category": "Food"},
        {"sum": 10, "currency": "USD", "category": "   "},
        {"currency": "USD", "category": "Food"},
        {"sum": 10, "currency": "USD", "category": "Food", "date": {"year": 2024, "month": 2, "day": 30}},
    ])
    def test_add_cost_validation(self, db_session, payload):
        with pytest.raises(ValidationError):
            add_cost(db_session, payload)
        assert db_session.query(CostDB).count() == 0

    def test_round_trip(self, db_session, cost_factory):
        created = cost_factory("12.34", date(2024, 5, 1), "Books", currency=Currency.GBP, description="Роман")

        loaded = get_cost(db_session, created.id)

        assert loaded.sum == Decimal("12.34")
        assert loaded.currency == Currency.GBP
        assert loaded.category == "Books"
        assert loaded.description == "Роман"
        assert loaded.date == date(2024, 5, 1)

    def test_update_keeps_other_fields(self, db_session, cost_factory):
        created = cost_factory(40, date(2024, 5, 1), "Books")

        updated = update_cost(db_session, created.id, {"sum": 45, "description": None})

        assert updated.sum == Decimal("45")
        assert updated.category == "Books"
        assert updated.date == date(2024, 5, 1)

    def test_update_missing_raises(self, db_session):
        with pytest.raises(NotFoundError):
            update_cost(db_session, 123, {"sum": 1})

    def test_delete_cost(self, db_session, cost_factory):
        created = cost_factory(40, date(2024, 5, 1))

        delete_cost(db_session, created.id)

        with pytest.raises(NotFoundError):
            get_cost(db_session, created.id)
        with pytest.raises(NotFoundError):
            delete_cost(db_session, created.id)


class TestCostQueries:
    """Выборки по месяцу, категории, периоду и фильтру."""

    def test_date_range_inclusive_boundaries(self, db_session, cost_factory):
        cost_factory(1, date(2023, 12, 31))
        first = cost_factory(2, date(2024, 1, 1))
        middle = cost_factory(3, date(2024, 1, 15))
        last = cost_factory(4, date(2024, 1, 31))
        cost_factory(5, date(2024, 2, 1))

        result = get_costs_by_date_range(
            db_session,
            {"year": 2024, "month": 1, "day": 1},
            {"year": 2024, "month": 1, "day": 31},
        )

        assert [c.id for c in result] == [first.id, middle.id, last.id]

    def test_date_range_sorted_by_date(self, db_session, cost_factory):
        late = cost_factory(1, date(2024, 1, 20))
        early = cost_factory(2, date(2024, 1, 5))

        result = get_costs_by_date_range(db_session, "2024-01-01", date(2024, 1, 31))

        assert [c.id for c in result] == [early.id, late.id]

    def test_date_range_invalid_date(self, db_session):
        with pytest.raises(ValidationError):
            get_costs_by_date_range(db_session, "not-a-date", date(2024, 1, 31))

    def test_costs_by_month_does_not_cross_year(self, db_session, cost_factory):
        march_2024 = cost_factory(1, date(2024, 3, 5))
        cost_factory(2, date(2023, 3, 5))
        cost_factory(3, date(2024, 4, 1))

        assert [c.id for c in get_costs_by_month(db_session, 2024, 3)] == [march_2024.id]

    def test_costs_by_month_rejects_bad_month(self, db_session):
        with pytest.raises(ValidationError):
            get_costs_by_month(db_session, 2024, 13)

    def test_costs_by_category_is_case_sensitive(self, db_session, cost_factory):
        food = cost_factory(1, date(2024, 3, 5), "Food")
        cost_factory(2, date(2024, 3, 5), "food")

        assert [c.id for c in get_costs_by_category(db_session, "Food")] == [food.id]

    def test_get_all_costs(self, db_session, march_costs):
        assert len(get_all_costs(db_session)) == len(march_costs)

    def test_filter_costs_combined(self, db_session, cost_factory):
        cost_factory(10, date(2024, 3, 1), "Food")
        match = cost_factory(50, date(2024, 3, 2), "Food")
        cost_factory(50, date(2024, 3, 3), "Food", currency=Currency.ILS)
        cost_factory(500, date(2024, 3, 4), "Food")
        cost_factory(50, date(2024, 3, 5), "Travel")

        result = filter_costs(
            db_session, categories=["Food"], min_sum=20, max_sum=100, currency=Currency.USD
        )

        assert [c.id for c in result] == [match.id]

    def test_filter_costs_without_criteria_returns_all(self, db_session, march_costs):
        assert len(filter_costs(db_session)) == len(march_costs)

    def test_filter_costs_invalid_range(self, db_session):
        with pytest.raises(ValidationError):
            filter_costs(db_session, min_sum=100, max_sum=10)
