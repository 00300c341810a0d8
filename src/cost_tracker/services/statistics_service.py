"""
Сервис статистики: сравнение месяца с предыдущим.
"""

import calendar
import logging
from collections import defaultdict
from typing import Dict, Optional, Tuple, Union

from sqlalchemy.orm import Session

from cost_tracker.models import Currency, ExchangeRates, Statistics
from cost_tracker.services.currency_service import as_currency
from cost_tracker.services.exchange_rate_service import ExchangeRateProvider, resolve_rates
from cost_tracker.services.report_service import build_report
from cost_tracker.utils.validation import validate_year_month

logger = logging.getLogger(__name__)


def previous_period(year: int, month: int) -> Tuple[int, int]:
    """Предыдущий месяц: для января - декабрь прошлого года."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def change_percentage(current: float, previous: float) -> float:
    """
    Изменение в процентах относительно предыдущего значения.

    Если в предыдущем периоде расходов не было, изменение считается нулевым.
    """
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def build_statistics(
    session: Session,
    year: int,
    month: int,
    currency: Union[Currency, str],
    rates: Optional[ExchangeRates] = None,
    provider: Optional[ExchangeRateProvider] = None
) -> Statistics:
    """
    Считает статистику месяца.

    Args:
        session: Активная сессия БД
        year: Год
        month: Месяц (1-12)
        currency: Валюта
        rates: Готовая таблица курсов (если None - загружается один раз
            для обоих отчётов)
        provider: Провайдер курсов

    Returns:
        Statistics: Расходы за текущий и прошлый месяц, средний расход в день,
            расходы по категориям и процент изменения

    Raises:
        RateFetchError: Не удалось получить курсы
    """
    validate_year_month(year, month)
    target = as_currency(currency)
    rates = resolve_rates(rates, provider)

    current = build_report(session, year, month, target, rates=rates)
    prev_year, prev_month = previous_period(year, month)
    total_this_month = current.totals.expenses
    if prev_year >= 1:
        total_last_month = build_report(session, prev_year, prev_month, target, rates=rates).totals.expenses
    else:
        total_last_month = 0.0
    days_in_month = calendar.monthrange(year, month)[1]

    by_category: Dict[str, float] = defaultdict(float)
    for item in current.expenses:
        by_category[item.category] += item.sum

    stats = Statistics(
        total_this_month=total_this_month,
        total_last_month=total_last_month,
        average_daily=total_this_month / days_in_month,
        total_by_category=dict(by_category),
        change_percentage=change_percentage(total_this_month, total_last_month),
        currency=target,
    )

    logger.info(
        f"Статистика за {month:02d}.{year}: {total_this_month:.2f} против "
        f"{total_last_month:.2f} ({stats.change_percentage:+.1f}%)"
    )
    return stats
