"""
Выборки записей из коллекции costs.

- get_costs_by_month: точное совпадение года и месяца
- get_costs_by_category: точное (регистрозависимое) совпадение категории
- get_costs_by_date_range: период включительно с обеих сторон
- filter_costs: комбинированный фильтр (категории, диапазон суммы, валюта)

Все выборки выполняют полный проход по коллекции: данные - локальная
история одного пользователя, индексы не поддерживаются.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Union
import logging

from sqlalchemy.orm import Session

from cost_tracker.models import CostDB, Currency
from cost_tracker.models.models import coerce_date_parts
from cost_tracker.services import record_store
from cost_tracker.utils.exceptions import ValidationError
from cost_tracker.utils.validation import validate_year_month

logger = logging.getLogger(__name__)


def _as_date(value: Any, field_name: str) -> date:
    try:
        result = coerce_date_parts(value)
        if isinstance(result, str):
            result = date.fromisoformat(result)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Невалидная дата {field_name}: {value!r} ({e})") from e
    if not isinstance(result, date):
        raise ValidationError(f"Невалидная дата {field_name}: {value!r}")
    return result


def get_all_costs(session: Session) -> List[CostDB]:
    """Возвращает все записи в порядке добавления."""
    return record_store.scan(session, "costs")


def get_costs_by_month(session: Session, year: int, month: int) -> List[CostDB]:
    """
    Получает записи за указанный месяц (без перехода через границу года).

    Args:
        session: Активная сессия БД
        year: Год
        month: Месяц (1-12)

    Returns:
        Список записей (может быть пустым)

    Raises:
        ValidationError: Если год или месяц вне диапазона
    """
    validate_year_month(year, month)
    logger.debug(f"Получение записей за {month:02d}.{year}")

    costs = [
        cost for cost in record_store.scan(session, "costs")
        if cost.date.year == year and cost.date.month == month
    ]

    logger.info(f"Найдено {len(costs)} записей за {month:02d}.{year}")
    return costs


def get_costs_by_category(session: Session, category: str) -> List[CostDB]:
    """
    Получает записи с указанной категорией (точное совпадение с учётом регистра).
    """
    logger.debug(f"Получение записей категории: {category!r}")

    costs = [cost for cost in record_store.scan(session, "costs") if cost.category == category]

    logger.info(f"Найдено {len(costs)} записей категории {category!r}")
    return costs


def get_costs_by_date_range(session: Session, start_date: Any, end_date: Any) -> List[CostDB]:
    """
    Получает записи за период (включительно).

    Даты сравниваются как целые календарные дни. Принимаются date,
    ISO строка или словарь {year, month, day}.

    Args:
        session: Активная сессия БД
        start_date: Дата начала периода
        end_date: Дата окончания периода

    Returns:
        Список записей за период, упорядоченный по дате

    Raises:
        ValidationError: Если дата невалидна
    """
    start = _as_date(start_date, "начала периода")
    end = _as_date(end_date, "окончания периода")
    logger.debug(f"Получение записей за период: {start} - {end}")

    costs = [cost for cost in record_store.scan(session, "costs") if start <= cost.date <= end]
    costs.sort(key=lambda cost: (cost.date, cost.id))

    logger.info(f"Найдено {len(costs)} записей за период {start} - {end}")
    return costs


def filter_costs(
    session: Session,
    categories: Optional[Iterable[str]] = None,
    min_sum: Optional[Union[Decimal, float, int]] = None,
    max_sum: Optional[Union[Decimal, float, int]] = None,
    currency: Optional[Currency] = None
) -> List[CostDB]:
    """
    Комбинированный фильтр записей.

    Все критерии необязательны и объединяются через И. Границы суммы
    включительные и сравниваются с исходной суммой записи (без пересчёта).
    """
    selected = set(categories) if categories else None
    low = Decimal(str(min_sum)) if min_sum is not None else None
    high = Decimal(str(max_sum)) if max_sum is not None else None

    if low is not None and high is not None and low > high:
        raise ValidationError(f"Минимальная сумма {low} больше максимальной {high}")

    result = []
    for cost in record_store.scan(session, "costs"):
        if selected is not None and cost.category not in selected:
            continue
        if low is not None and cost.sum < low:
            continue
        if high is not None and cost.sum > high:
            continue
        if currency is not None and cost.currency != currency:
            continue
        result.append(cost)

    logger.info(f"Фильтр записей: найдено {len(result)}")
    return result
