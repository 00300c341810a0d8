"""
Сервис бюджетов.

Предоставляет функции для:
- Создания, поиска и удаления бюджетов
- Расчёта фактических расходов по области действия бюджета
- Проверки порогов: предупреждение при 80% и превышение лимита
- Формирования уведомлений по бюджетам

Ошибка при расчёте одного бюджета не прерывает проверку остальных:
такой бюджет считается с нулевыми расходами.
"""

import logging
import math
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from cost_tracker.models import (
    Budget,
    BudgetAlert,
    BudgetCreate,
    BudgetDB,
    BudgetSignal,
    BudgetStatus,
    BudgetType,
    ExchangeRates,
)
from cost_tracker.services import record_store
from cost_tracker.services.cost_query_service import get_costs_by_category
from cost_tracker.services.currency_service import convert
from cost_tracker.services.exchange_rate_service import ExchangeRateProvider, resolve_rates
from cost_tracker.services.report_service import build_report, build_yearly_report
from cost_tracker.utils.exceptions import CostTrackerError, ValidationError
from cost_tracker.utils.validation import parse_model

logger = logging.getLogger(__name__)

# Порог предупреждения, % от лимита
WARNING_THRESHOLD = 80

# Допуск на погрешность сложения float при пересчёте валют
REL_TOLERANCE = 1e-9


def set_budget(session: Session, budget: Union[BudgetCreate, Mapping[str, Any]]) -> BudgetDB:
    """
    Создаёт бюджет.

    Raises:
        ValidationError: Если область действия не соответствует типу
            или сумма не положительна
    """
    payload = parse_model(BudgetCreate, budget)
    row = record_store.insert(session, "budgets", payload.model_dump())
    logger.info(
        f"Создан бюджет {row.type.value} на {row.amount} {row.currency.value} (ID {row.id})"
    )
    return row


def get_all_budgets(session: Session) -> List[BudgetDB]:
    """Все бюджеты; если коллекция не создана - пустой список."""
    return record_store.scan(session, "budgets")


def get_budget(
    session: Session,
    year: int,
    month: Optional[int] = None,
    category: Optional[str] = None
) -> Optional[BudgetDB]:
    """
    Ищет первый подходящий бюджет года.

    - указана category: бюджет типа CATEGORY с этой категорией
    - указан month: бюджет типа MONTHLY на этот месяц
    - не указано ни то, ни другое: бюджет типа YEARLY

    Returns:
        Найденный бюджет или None
    """
    for budget in get_all_budgets(session):
        if budget.year != year:
            continue
        if category and budget.category == category and budget.type == BudgetType.CATEGORY:
            return budget
        elif month and budget.month == month and budget.type == BudgetType.MONTHLY:
            return budget
        elif not month and not category and budget.type == BudgetType.YEARLY:
            return budget
    return None


def delete_budget(session: Session, budget_id: int) -> None:
    """
    Удаляет бюджет.

    Raises:
        NotFoundError: Если бюджета нет
    """
    record_store.delete(session, "budgets", budget_id)


def evaluate_threshold(spent: float, amount: Union[Decimal, float]) -> Optional[BudgetSignal]:
    """
    Сигнал по порогам бюджета.

    Превышение - только при spent строго больше лимита; предупреждение -
    при использовании от 80% лимита.
    """
    amount = float(amount)
    if spent > amount and not math.isclose(spent, amount, rel_tol=REL_TOLERANCE):
        return BudgetSignal.EXCEEDED
    percentage = usage_percentage(spent, amount)
    if percentage >= WARNING_THRESHOLD or math.isclose(percentage, WARNING_THRESHOLD, rel_tol=REL_TOLERANCE):
        return BudgetSignal.WARNING
    return None


def usage_percentage(spent: float, amount: Union[Decimal, float]) -> float:
    """Доля использованного бюджета в процентах, посчитанная в Decimal."""
    return float(Decimal(str(spent)) * 100 / Decimal(str(amount)))


def compute_spent(session: Session, budget: BudgetDB, rates: ExchangeRates) -> float:
    """
    Фактические расходы по бюджету в его валюте.

    - MONTHLY: расходы месячного отчёта
    - YEARLY: сумма расходов двенадцати месячных отчётов
    - CATEGORY: все записи категории, пересчитанные в валюту бюджета

    Raises:
        ValidationError: Если область действия бюджета не заполнена
    """
    if budget.type == BudgetType.MONTHLY:
        if budget.month is None:
            raise ValidationError(f"У месячного бюджета {budget.id} не указан месяц")
        return build_report(session, budget.year, budget.month, budget.currency, rates=rates).totals.expenses

    if budget.type == BudgetType.YEARLY:
        return build_yearly_report(session, budget.year, budget.currency, rates=rates).totals.expenses

    if budget.type == BudgetType.CATEGORY:
        if not budget.category:
            raise ValidationError(f"У бюджета категории {budget.id} не указана категория")
        costs = get_costs_by_category(session, budget.category)
        return sum((convert(c.sum, c.currency, budget.currency, rates) for c in costs), 0.0)

    raise ValidationError(f"Неизвестный тип бюджета: {budget.type!r}")


def _status(budget: BudgetDB, spent: float, error: Optional[str] = None) -> BudgetStatus:
    amount = float(budget.amount)
    return BudgetStatus(
        budget=Budget.model_validate(budget),
        spent=spent,
        percentage=usage_percentage(spent, budget.amount),
        remaining=amount - spent,
        signal=evaluate_threshold(spent, amount),
        error=error,
    )


def evaluate_budget(
    session: Session,
    budget: BudgetDB,
    rates: Optional[ExchangeRates] = None,
    provider: Optional[ExchangeRateProvider] = None
) -> BudgetStatus:
    """
    Проверяет один бюджет. Ошибки пробрасываются вызывающему коду.
    """
    spent = compute_spent(session, budget, resolve_rates(rates, provider))
    return _status(budget, spent)


def evaluate_budgets(
    session: Session,
    rates: Optional[ExchangeRates] = None,
    provider: Optional[ExchangeRateProvider] = None
) -> List[BudgetStatus]:
    """
    Проверяет все бюджеты.

    Если rates не переданы, курсы загружаются для каждого бюджета отдельно,
    так что ошибка загрузки затрагивает только текущий бюджет.
    Бюджет, расчёт которого завершился ошибкой, получает нулевые расходы
    и текст ошибки в поле error.
    """
    statuses = []
    for budget in get_all_budgets(session):
        try:
            statuses.append(evaluate_budget(session, budget, rates, provider))
        except (CostTrackerError, SQLAlchemyError) as e:
            if isinstance(e, SQLAlchemyError):
                session.rollback()
            logger.warning(f"Не удалось рассчитать бюджет ID {budget.id}, расходы приняты за 0: {e}")
            statuses.append(_status(budget, 0.0, error=str(e)))

    flagged = sum(1 for s in statuses if s.signal is not None)
    logger.info(f"Проверено бюджетов: {len(statuses)}, с сигналами: {flagged}")
    return statuses


def build_alert(status: BudgetStatus) -> Optional[BudgetAlert]:
    """Уведомление по результату проверки бюджета (или None, если сигнала нет)."""
    budget = status.budget
    currency = budget.currency.value

    if status.signal == BudgetSignal.EXCEEDED:
        return BudgetAlert(
            id=f"budget-exceeded-{budget.id}",
            type="budget_exceeded",
            budget_id=budget.id,
            message=(
                f"Бюджет превышен! Потрачено {status.spent:.2f} {currency} "
                f"из {float(budget.amount):.2f} {currency}"
            ),
        )
    if status.signal == BudgetSignal.WARNING:
        return BudgetAlert(
            id=f"budget-warning-{budget.id}",
            type="budget_warning",
            budget_id=budget.id,
            message=f"Предупреждение: использовано {status.percentage:.1f}% бюджета",
        )
    return None


def check_budgets(
    session: Session,
    rates: Optional[ExchangeRates] = None,
    provider: Optional[ExchangeRateProvider] = None
) -> List[BudgetAlert]:
    """Проверяет все бюджеты и возвращает уведомления по сработавшим порогам."""
    alerts = []
    for status in evaluate_budgets(session, rates, provider):
        alert = build_alert(status)
        if alert is not None:
            alerts.append(alert)
    return alerts
