"""
Модуль сервисного слоя для записей расходов/доходов/накоплений.

Содержит CRUD операции:
- add_cost: создание новой записи с валидацией
- get_cost: получение записи по ID
- update_cost: частичное обновление записи
- delete_cost: удаление записи с проверкой существования

Все функции принимают сессию БД как параметр (Dependency Injection).
"""

from typing import Any, Mapping, Union
import logging

from sqlalchemy.orm import Session

from cost_tracker.models import CostDB, CostCreate, CostUpdate
from cost_tracker.services import record_store
from cost_tracker.utils.exceptions import NotFoundError
from cost_tracker.utils.validation import parse_model

logger = logging.getLogger(__name__)


def add_cost(session: Session, cost: Union[CostCreate, Mapping[str, Any]]) -> CostDB:
    """
    Создаёт новую запись.

    Если дата не указана, запись получает текущую дату.

    Args:
        session: Активная сессия БД
        cost: Данные записи (Pydantic модель или словарь)

    Returns:
        Созданная запись с назначенным ID

    Raises:
        ValidationError: Если данные не прошли валидацию
        SQLAlchemyError: При ошибках записи в базу данных
    """
    payload = parse_model(CostCreate, cost)
    logger.debug(
        f"Создание записи: {payload.sum} {payload.currency.value}, "
        f"категория={payload.category!r}, тип={payload.type.value}"
    )
    return record_store.insert(session, "costs", payload.model_dump())


def get_cost(session: Session, cost_id: int) -> CostDB:
    """
    Получает запись по ID.

    Raises:
        NotFoundError: Если записи нет
    """
    cost = record_store.get(session, "costs", cost_id)
    if cost is None:
        error_msg = f"Запись с ID {cost_id} не найдена"
        logger.error(error_msg)
        raise NotFoundError(error_msg)
    return cost


def update_cost(
    session: Session,
    cost_id: int,
    cost: Union[CostUpdate, Mapping[str, Any]]
) -> CostDB:
    """
    Обновляет существующую запись.

    Обновляются только переданные поля, остальные сохраняются.

    Raises:
        ValidationError: Если данные не прошли валидацию
        NotFoundError: Если записи нет
    """
    payload = parse_model(CostUpdate, cost)
    partial = payload.model_dump(exclude_unset=True, exclude_none=True)
    logger.debug(f"Обновление записи ID {cost_id}: {partial}")
    return record_store.update(session, "costs", cost_id, partial)


def delete_cost(session: Session, cost_id: int) -> None:
    """
    Удаляет запись.

    Raises:
        NotFoundError: Если записи нет
    """
    logger.debug(f"Удаление записи ID {cost_id}")
    record_store.delete(session, "costs", cost_id)
