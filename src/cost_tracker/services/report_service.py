"""
Сервис построения отчётов.

Предоставляет функции:
- build_report: месячный отчёт в целевой валюте с разбиением по типам записей
- build_yearly_report: годовой обзор из двенадцати месячных отчётов

Если курсы валют не удалось получить, отчёт не строится (RateFetchError),
частичных отчётов не бывает. Месяц без записей - валидный отчёт с нулевыми итогами.
"""

import logging
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from cost_tracker.models import (
    CostDB,
    CostType,
    Currency,
    ExchangeRates,
    MonthlyTotals,
    Report,
    ReportCostItem,
    ReportDate,
    ReportTotals,
    SavingsBuckets,
    YearlyReport,
)
from cost_tracker.services.cost_query_service import get_costs_by_month
from cost_tracker.services.currency_service import as_currency, convert
from cost_tracker.services.exchange_rate_service import ExchangeRateProvider, resolve_rates
from cost_tracker.utils.validation import validate_year_month

logger = logging.getLogger(__name__)


def to_report_item(cost: CostDB, currency: Currency, rates: ExchangeRates) -> ReportCostItem:
    """Строка отчёта: сумма в валюте отчёта, от даты остаётся только день."""
    return ReportCostItem(
        id=cost.id,
        sum=convert(cost.sum, cost.currency, currency, rates),
        currency=currency,
        category=cost.category,
        description=cost.description or "",
        type=cost.type,
        date=ReportDate(day=cost.date.day),
    )


def _total(items: List[ReportCostItem]) -> float:
    return sum((item.sum for item in items), 0.0)


def build_report(
    session: Session,
    year: int,
    month: int,
    currency: Union[Currency, str],
    rates: Optional[ExchangeRates] = None,
    provider: Optional[ExchangeRateProvider] = None
) -> Report:
    """
    Строит месячный отчёт.

    Args:
        session: Активная сессия БД
        year: Год
        month: Месяц (1-12)
        currency: Валюта отчёта
        rates: Готовая таблица курсов (если None - загружается)
        provider: Провайдер курсов (если None - по настройкам)

    Returns:
        Report: Корзины expenses / incomes / savings и итоги

    Raises:
        ValidationError: Невалидные год, месяц или валюта
        RateFetchError: Не удалось получить курсы
        MissingRateError: Валюты нет в таблице курсов
    """
    validate_year_month(year, month)
    target = as_currency(currency)
    rates = resolve_rates(rates, provider)

    costs = get_costs_by_month(session, year, month)

    expenses: List[ReportCostItem] = []
    incomes: List[ReportCostItem] = []
    deposits: List[ReportCostItem] = []
    withdrawals: List[ReportCostItem] = []
    buckets = {
        CostType.EXPENSE: expenses,
        CostType.INCOME: incomes,
        CostType.SAVINGS_DEPOSIT: deposits,
        CostType.SAVINGS_WITHDRAWAL: withdrawals,
    }

    for cost in costs:
        buckets[CostType(cost.type)].append(to_report_item(cost, target, rates))

    total_expenses = _total(expenses)
    total_incomes = _total(incomes)

    report = Report(
        year=year,
        month=month,
        currency=target,
        expenses=expenses,
        incomes=incomes,
        savings=SavingsBuckets(deposits=deposits, withdrawals=withdrawals),
        totals=ReportTotals(
            expenses=total_expenses,
            incomes=total_incomes,
            savings=_total(deposits) - _total(withdrawals),
            balance=total_incomes - total_expenses,
            currency=target,
        ),
    )

    logger.info(
        f"Отчёт за {month:02d}.{year} в {target.value}: {len(costs)} записей, "
        f"расходы {total_expenses:.2f}, доходы {total_incomes:.2f}"
    )
    return report


def build_yearly_report(
    session: Session,
    year: int,
    currency: Union[Currency, str],
    rates: Optional[ExchangeRates] = None,
    provider: Optional[ExchangeRateProvider] = None
) -> YearlyReport:
    """
    Строит годовой обзор по месяцам.

    Курсы загружаются один раз и используются для всех двенадцати месяцев.
    Итоги года - сумма месячных итогов в порядке месяцев.
    """
    validate_year_month(year, 1)
    target = as_currency(currency)
    rates = resolve_rates(rates, provider)

    months: List[MonthlyTotals] = []
    for month in range(1, 13):
        totals = build_report(session, year, month, target, rates=rates).totals
        months.append(MonthlyTotals(
            month=month,
            expenses=totals.expenses,
            incomes=totals.incomes,
            savings=totals.savings,
            balance=totals.balance,
        ))

    year_totals = ReportTotals(
        expenses=sum((m.expenses for m in months), 0.0),
        incomes=sum((m.incomes for m in months), 0.0),
        savings=sum((m.savings for m in months), 0.0),
        balance=sum((m.balance for m in months), 0.0),
        currency=target,
    )

    logger.info(f"Годовой отчёт за {year} в {target.value}: расходы {year_totals.expenses:.2f}")
    return YearlyReport(year=year, currency=target, months=months, totals=year_totals)
