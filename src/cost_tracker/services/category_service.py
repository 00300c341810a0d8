"""
Сервис управления категориями.

Предоставляет функции для работы со справочником категорий:
- Получение списка категорий
- Создание, изменение и удаление категорий
- Объединённое представление: зарегистрированные категории плюс
  категории, встречающиеся только в записях

Категория записи - свободный текст, а не внешний ключ. Удаление категории
не затрагивает записи с таким названием.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from cost_tracker.config import settings
from cost_tracker.models import CategoryDB, CategoryCreate, CategoryUpdate, CategoryView
from cost_tracker.services import record_store
from cost_tracker.utils.validation import parse_model

logger = logging.getLogger(__name__)


def get_categories(session: Session) -> List[CategoryDB]:
    """
    Получает список всех зарегистрированных категорий.

    Если коллекция категорий ещё не создана, возвращается пустой список.
    """
    categories = record_store.scan(session, "categories")
    logger.info(f"Загружено {len(categories)} категорий")
    return categories


def add_category(
    session: Session,
    category: Union[CategoryCreate, Mapping[str, Any]]
) -> CategoryDB:
    """
    Создаёт новую категорию.

    Уникальность названия не проверяется.

    Raises:
        ValidationError: Если название пустое
        DatabaseError: Если коллекция категорий не создана
    """
    payload = parse_model(CategoryCreate, category)
    row = record_store.insert(session, "categories", payload.model_dump())
    logger.info(f"Создана категория '{row.name}' с ID {row.id}")
    return row


def update_category(
    session: Session,
    category_id: int,
    category: Union[CategoryUpdate, Mapping[str, Any]]
) -> CategoryDB:
    """
    Обновляет категорию (только переданные поля).

    Переименование не меняет категорию у уже существующих записей.

    Raises:
        NotFoundError: Если категории нет
    """
    payload = parse_model(CategoryUpdate, category)
    partial = payload.model_dump(exclude_unset=True)
    # color и icon можно сбросить в None, название - нет
    if partial.get("name") is None:
        partial.pop("name", None)
    return record_store.update(session, "categories", category_id, partial)


def delete_category(session: Session, category_id: int) -> None:
    """
    Удаляет категорию. Записи с этой категорией остаются без изменений.

    Raises:
        NotFoundError: Если категории нет
    """
    record_store.delete(session, "categories", category_id)


def get_category_view(
    session: Session,
    default_color: Optional[str] = None
) -> List[CategoryView]:
    """
    Объединённый список категорий.

    Сначала идут зарегистрированные категории, затем названия, которые
    встречаются в записях, но не зарегистрированы (в порядке первого
    появления, с цветом по умолчанию и без ID).

    Args:
        session: Активная сессия БД
        default_color: Цвет для незарегистрированных категорий
            (по умолчанию settings.default_category_color)
    """
    default_color = default_color or settings.default_category_color

    view = [
        CategoryView(id=c.id, name=c.name, color=c.color, icon=c.icon, registered=True)
        for c in get_categories(session)
    ]
    known = {item.name for item in view}

    for cost in record_store.scan(session, "costs"):
        if cost.category not in known:
            known.add(cost.category)
            view.append(CategoryView(name=cost.category, color=default_color, registered=False))

    logger.debug(f"Объединённый список категорий: {len(view)} шт.")
    return view
