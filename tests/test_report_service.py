"""
Тесты построения месячных и годовых отчётов.

Тестирует:
- Разбиение записей по корзинам и итоги
- Полноту отчёта (property-based)
- Поведение при ошибке загрузки курсов
"""

from contextlib import contextmanager
from datetime import date
from decimal import Decimal

import httpx
import pytest
from hypothesis import given, strategies as st, settings
from sqlalchemy.orm import sessionmaker

from cost_tracker.models import CostCreate, CostDB, CostType, Currency
from cost_tracker.services.cost_service import add_cost
from cost_tracker.services.exchange_rate_service import ExchangeRateProvider
from cost_tracker.services.report_service import build_report, build_yearly_report
from cost_tracker.utils.exceptions import MissingRateError, RateFetchError, ValidationError
from conftest import make_engine

RATES = {"USD": 1.0, "ILS": 4.0, "GBP": 0.5, "EURO": 0.8}

# Создаём тестовый движок БД в памяти для property-based тестов
test_engine = make_engine()
TestSessionLocal = sessionmaker(bind=test_engine)


@contextmanager
def get_test_session():
    """Контекстный менеджер для создания тестовой сессии БД."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        # Очищаем данные после использования
        session.rollback()
        session.query(CostDB).delete()
        session.commit()
        session.close()


class TestBuildReport:
    """Месячный отчёт."""

    def test_single_expense_scenario(self, db_session, rates):
        add_cost(db_session, {
            "sum": 100,
            "currency": "USD",
            "category": "Food",
            "type": "expense",
            "date": {"year": 2024, "month": 3, "day": 10},
        })

        report = build_report(db_session, 2024, 3, "USD", rates=rates)

        assert report.totals.expenses == pytest.approx(100.0)
        assert len(report.expenses) == 1
        assert report.expenses[0].date.day == 10
        assert report.expenses[0].currency == Currency.USD
        assert report.totals.balance == pytest.approx(-100.0)

    def test_buckets_and_totals(self, db_session, rates, march_costs):
        report = build_report(db_session, 2024, 3, Currency.USD, rates=rates)

        # 100 USD + 35 ILS (= 10 USD)
        assert report.totals.expenses == pytest.approx(110.0)
        assert report.totals.incomes == pytest.approx(2000.0)
        assert report.totals.savings == pytest.approx(250.0)
        assert report.totals.balance == pytest.approx(1890.0)
        assert len(report.savings.deposits) == 1
        assert len(report.savings.withdrawals) == 1
        assert len(report.costs) == len(march_costs)

    def test_report_in_other_currency(self, db_session, rates, march_costs):
        report = build_report(db_session, 2024, 3, "ILS", rates=rates)

        assert report.currency == Currency.ILS
        assert report.totals.expenses == pytest.approx(385.0)
        assert all(item.currency == Currency.ILS for item in report.costs)

    def test_serialized_item_uses_date_key(self, db_session, rates, march_costs):
        report = build_report(db_session, 2024, 3, "USD", rates=rates)

        dumped = report.model_dump(by_alias=True)

        assert dumped["expenses"][0]["Date"] == {"day": 10}

    def test_empty_month(self, db_session, rates):
        report = build_report(db_session, 2024, 7, "USD", rates=rates)

        assert report.costs == []
        assert report.totals.expenses == 0.0
        assert report.totals.balance == 0.0

    def test_invalid_month(self, db_session, rates):
        with pytest.raises(ValidationError):
            build_report(db_session, 2024, 0, "USD", rates=rates)

    def test_missing_rate(self, db_session, march_costs):
        with pytest.raises(MissingRateError):
            build_report(db_session, 2024, 3, "USD", rates={"USD": 1.0})

    def test_rate_fetch_failure_aborts_report(self, db_session, march_costs):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        provider = ExchangeRateProvider(
            "https://rates.example.test/rates.json",
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(RateFetchError):
            build_report(db_session, 2024, 3, "USD", provider=provider)


class TestYearlyReport:
    """Годовой обзор."""

    def test_yearly_totals_are_sum_of_months(self, db_session, rates, cost_factory):
        cost_factory(100, date(2024, 1, 5))
        cost_factory(200, date(2024, 6, 5))
        cost_factory(1000, date(2024, 6, 1), "Salary", type=CostType.INCOME)
        cost_factory(999, date(2025, 1, 1))

        yearly = build_yearly_report(db_session, 2024, "USD", rates=rates)

        assert [m.month for m in yearly.months] == list(range(1, 13))
        assert yearly.months[0].expenses == pytest.approx(100.0)
        assert yearly.months[5].balance == pytest.approx(800.0)
        assert yearly.totals.expenses == pytest.approx(300.0)
        assert yearly.totals.incomes == pytest.approx(1000.0)


# --- Strategies ---
cost_types = st.sampled_from(CostType)
currencies = st.sampled_from(Currency)
report_months = st.tuples(st.integers(min_value=2023, max_value=2025), st.integers(min_value=1, max_value=12))
cost_entries = st.lists(
    st.tuples(
        st.decimals(min_value=Decimal("0.01"), max_value=Decimal("10000"), places=2),
        currencies,
        cost_types,
        report_months,
        st.integers(min_value=1, max_value=28),
    ),
    max_size=15,
)


class TestReportProperties:
    """Property-based тесты отчёта."""

    @given(entries=cost_entries, target=report_months, currency=currencies)
    @settings(max_examples=30, deadline=None)
    def test_report_completeness(self, entries, target, currency):
        """
        Отчёт содержит ровно записи выбранного месяца, а итоги
        совпадают с суммами по корзинам.
        """
        year, month = target
        with get_test_session() as session:
            expected_ids = set()
            for amount, cur, cost_type, (y, m), day in entries:
                row = add_cost(session, CostCreate(
                    sum=amount, currency=cur, category="Any", type=cost_type, date=date(y, m, day)
                ))
                if (y, m) == (year, month):
                    expected_ids.add(row.id)

            report = build_report(session, year, month, currency, rates=RATES)

            assert {item.id for item in report.costs} == expected_ids
            assert len(report.costs) == len(expected_ids)
            assert report.totals.expenses == pytest.approx(sum(i.sum for i in report.expenses))
            assert report.totals.incomes == pytest.approx(sum(i.sum for i in report.incomes))
            assert report.totals.savings == pytest.approx(
                sum(i.sum for i in report.savings.deposits) - sum(i.sum for i in report.savings.withdrawals)
            )
