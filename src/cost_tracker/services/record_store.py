"""
Хранилище записей: единый CRUD для четырёх коллекций.

Коллекции (costs, categories, budgets, savingsGoals) адресуются по имени.
Все функции принимают сессию БД как параметр (Dependency Injection).

- insert: добавление с автоинкрементным ID
- get: получение по ID (None, если записи нет)
- update: поверхностное слияние частичных данных с существующей записью
- delete: удаление по ID
- scan: полный список записей коллекции

Каждая изменяющая операция фиксирует транзакцию до возврата результата.
Сканирование коллекции, которая ещё не создана, возвращает пустой список.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from sqlalchemy import inspect
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from cost_tracker.models import Base, CostDB, CategoryDB, BudgetDB, SavingsGoalDB
from cost_tracker.utils.exceptions import DatabaseError, NotFoundError, ValidationError
from cost_tracker.utils.validation import validate_record_id

logger = logging.getLogger(__name__)

COLLECTIONS: Dict[str, Type[Base]] = {
    "costs": CostDB,
    "categories": CategoryDB,
    "budgets": BudgetDB,
    "savingsGoals": SavingsGoalDB,
}

# Поля, которые назначает хранилище и которые нельзя перезаписать слиянием
_PROTECTED_FIELDS = frozenset(["id", "created_at", "updated_at"])


def _model_for(collection: str) -> Type[Base]:
    model = COLLECTIONS.get(collection)
    if model is None:
        error_msg = f"Неизвестная коллекция: {collection!r}. Доступны: {', '.join(COLLECTIONS)}"
        logger.error(error_msg)
        raise ValidationError(error_msg)
    return model


def collection_exists(session: Session, collection: str) -> bool:
    """Проверяет, создана ли таблица коллекции в хранилище."""
    model = _model_for(collection)
    return inspect(session.connection()).has_table(model.__tablename__)


def _require_collection(session: Session, collection: str) -> Type[Base]:
    model = _model_for(collection)
    if not collection_exists(session, collection):
        error_msg = (
            f"Коллекция '{collection}' не существует. "
            f"Откройте хранилище с более новой версией для её создания."
        )
        logger.error(error_msg)
        raise DatabaseError(error_msg)
    return model


def _columns(model: Type[Base]) -> frozenset:
    return frozenset(column.key for column in inspect(model).columns)


def _check_fields(model: Type[Base], record: Mapping[str, Any]) -> None:
    unknown = set(record) - _columns(model)
    if unknown:
        error_msg = f"Неизвестные поля для {model.__tablename__}: {', '.join(sorted(unknown))}"
        logger.error(error_msg)
        raise ValidationError(error_msg)


def insert(session: Session, collection: str, record: Mapping[str, Any]) -> Base:
    """
    Добавляет запись в коллекцию.

    Args:
        session: Активная сессия БД
        collection: Имя коллекции
        record: Поля записи (без ID)

    Returns:
        Сохранённая запись с назначенным ID

    Raises:
        ValidationError: Неизвестная коллекция или поле
        DatabaseError: Коллекция не создана
        SQLAlchemyError: При ошибках записи в базу данных
    """
    model = _require_collection(session, collection)
    values = {k: v for k, v in record.items() if k not in _PROTECTED_FIELDS}
    _check_fields(model, values)

    try:
        row = model(**values)
        session.add(row)
        session.commit()
        session.refresh(row)
        logger.info(f"Запись добавлена в '{collection}' с ID: {row.id}")
        return row

    except SQLAlchemyError as e:
        logger.error(f"Ошибка при добавлении записи в '{collection}': {e}")
        session.rollback()
        raise


def get(session: Session, collection: str, record_id: int) -> Optional[Base]:
    """
    Получает запись по ID.

    Returns:
        Запись или None, если её нет (или коллекция ещё не создана)
    """
    model = _model_for(collection)
    validate_record_id(record_id, f"ID записи '{collection}'")
    if not collection_exists(session, collection):
        return None

    try:
        return session.get(model, record_id)
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при получении записи {record_id} из '{collection}': {e}")
        raise


def update(
    session: Session,
    collection: str,
    record_id: int,
    partial: Mapping[str, Any]
) -> Base:
    """
    Обновляет запись поверхностным слиянием.

    Поля из partial перезаписывают одноимённые поля записи, остальные
    поля сохраняются. ID не меняется.

    Raises:
        NotFoundError: Если записи с таким ID нет
        ValidationError: Неизвестная коллекция или поле
    """
    model = _require_collection(session, collection)
    validate_record_id(record_id, f"ID записи '{collection}'")
    values = {k: v for k, v in partial.items() if k not in _PROTECTED_FIELDS}
    _check_fields(model, values)

    try:
        row = session.get(model, record_id)
        if row is None:
            error_msg = f"Запись с ID {record_id} не найдена в '{collection}'"
            logger.error(error_msg)
            raise NotFoundError(error_msg)

        for field, value in values.items():
            setattr(row, field, value)

        session.commit()
        session.refresh(row)
        logger.info(f"Запись {record_id} в '{collection}' обновлена: {', '.join(values) or 'без изменений'}")
        return row

    except SQLAlchemyError as e:
        logger.error(f"Ошибка при обновлении записи {record_id} в '{collection}': {e}")
        session.rollback()
        raise


def delete(session: Session, collection: str, record_id: int) -> None:
    """
    Удаляет запись по ID.

    Raises:
        NotFoundError: Если записи с таким ID нет
    """
    model = _require_collection(session, collection)
    validate_record_id(record_id, f"ID записи '{collection}'")

    try:
        row = session.get(model, record_id)
        if row is None:
            error_msg = f"Запись с ID {record_id} не найдена в '{collection}'"
            logger.error(error_msg)
            raise NotFoundError(error_msg)

        session.delete(row)
        session.commit()
        logger.info(f"Запись {record_id} удалена из '{collection}'")

    except SQLAlchemyError as e:
        logger.error(f"Ошибка при удалении записи {record_id} из '{collection}': {e}")
        session.rollback()
        raise


def scan(session: Session, collection: str) -> List[Base]:
    """
    Возвращает все записи коллекции в порядке ID.

    Коллекция, которая ещё не создана, даёт пустой список.
    """
    model = _model_for(collection)
    if not collection_exists(session, collection):
        logger.warning(f"Коллекция '{collection}' ещё не создана, возвращается пустой список")
        return []

    try:
        rows = session.query(model).order_by(model.id).all()
        logger.debug(f"Прочитано {len(rows)} записей из '{collection}'")
        return rows
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при чтении коллекции '{collection}': {e}")
        raise
