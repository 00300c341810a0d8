"""
Сервис целей накоплений.

Цель хранит только название, сумму, валюту и срок. Текущая сумма
вычисляется при каждом запросе: пополнения минус снятия по всем записям,
пересчитанные в валюту цели.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from cost_tracker.models import (
    CostType,
    ExchangeRates,
    SavingsGoal,
    SavingsGoalCreate,
    SavingsGoalDB,
    SavingsGoalProgress,
    SavingsGoalUpdate,
)
from cost_tracker.services import record_store
from cost_tracker.services.currency_service import convert
from cost_tracker.services.exchange_rate_service import ExchangeRateProvider, resolve_rates
from cost_tracker.utils.validation import parse_model

logger = logging.getLogger(__name__)


def get_savings_goals(session: Session) -> List[SavingsGoalDB]:
    """Все цели накоплений; если коллекция не создана - пустой список."""
    return record_store.scan(session, "savingsGoals")


def add_savings_goal(
    session: Session,
    goal: Union[SavingsGoalCreate, Mapping[str, Any]]
) -> SavingsGoalDB:
    """
    Создаёт цель накоплений.

    Raises:
        ValidationError: Если данные не прошли валидацию
        DatabaseError: Если хранилище не содержит коллекцию целей
    """
    payload = parse_model(SavingsGoalCreate, goal)
    row = record_store.insert(session, "savingsGoals", payload.model_dump())
    logger.info(f"Создана цель '{row.name}' на {row.target_amount} {row.currency.value} (ID {row.id})")
    return row


def update_savings_goal(
    session: Session,
    goal_id: int,
    goal: Union[SavingsGoalUpdate, Mapping[str, Any]]
) -> SavingsGoalDB:
    """
    Обновляет цель (только переданные поля).

    Raises:
        NotFoundError: Если цели нет
    """
    payload = parse_model(SavingsGoalUpdate, goal)
    partial = payload.model_dump(exclude_unset=True, exclude_none=True)
    return record_store.update(session, "savingsGoals", goal_id, partial)


def delete_savings_goal(session: Session, goal_id: int) -> None:
    """
    Удаляет цель.

    Raises:
        NotFoundError: Если цели нет
    """
    record_store.delete(session, "savingsGoals", goal_id)


def get_savings_progress(
    session: Session,
    rates: Optional[ExchangeRates] = None,
    provider: Optional[ExchangeRateProvider] = None
) -> List[SavingsGoalProgress]:
    """
    Прогресс по всем целям.

    Накопленная сумма общая для всех целей: записи накоплений
    не привязаны к конкретной цели.

    Returns:
        Список SavingsGoalProgress; progress ограничен 100%

    Raises:
        RateFetchError: Не удалось получить курсы
        MissingRateError: Валюты нет в таблице курсов
    """
    goals = get_savings_goals(session)
    if not goals:
        return []

    rates = resolve_rates(rates, provider)
    costs = record_store.scan(session, "costs")
    deposits = [c for c in costs if c.type == CostType.SAVINGS_DEPOSIT]
    withdrawals = [c for c in costs if c.type == CostType.SAVINGS_WITHDRAWAL]

    result = []
    for goal in goals:
        deposited = sum((convert(c.sum, c.currency, goal.currency, rates) for c in deposits), 0.0)
        withdrawn = sum((convert(c.sum, c.currency, goal.currency, rates) for c in withdrawals), 0.0)
        current = deposited - withdrawn
        target = float(goal.target_amount)

        result.append(SavingsGoalProgress(
            goal=SavingsGoal.model_validate(goal),
            current_amount=current,
            progress=min(current / target * 100, 100.0),
            is_completed=current >= target,
        ))

    logger.debug(f"Прогресс рассчитан для {len(result)} целей")
    return result
