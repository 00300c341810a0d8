"""
Модуль управления хранилищем Cost Tracker.

Содержит функции для:
- Инициализации базы данных с аддитивным версионированием схемы
- Управления сессиями БД через контекстный менеджер
- Обработки ошибок с автоматическим откатом транзакций

Версия хранилища хранится в SQLite (PRAGMA user_version). Каждая версия
добавляет коллекции; повышение версии создаёт недостающие таблицы и никогда
ничего не удаляет.

Путь к базе данных по умолчанию определяется в config.py через settings.db_path
"""

from contextlib import contextmanager
from typing import Dict, Generator, List, Optional, Tuple
import logging
import atexit

from sqlalchemy import create_engine, Engine, Table
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import SQLAlchemyError

from cost_tracker.config import settings
from cost_tracker.models import Base
from cost_tracker.utils.exceptions import DatabaseError

logger = logging.getLogger(__name__)

# Текущая версия хранилища
STORE_VERSION = 3

# Таблицы, появившиеся в каждой версии хранилища
SCHEMA_VERSIONS: Dict[int, Tuple[str, ...]] = {
    1: ("costs",),
    2: ("categories", "budgets"),
    3: ("savings_goals",),
}

# Глобальные переменные для engine и session factory
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None
_atexit_registered = False


def tables_for_version(version: int) -> List[Table]:
    """Возвращает таблицы, которые должны существовать в хранилище версии version."""
    return [
        Base.metadata.tables[name]
        for introduced_in, names in sorted(SCHEMA_VERSIONS.items())
        if introduced_in <= version
        for name in names
    ]


def get_store_version(engine: Engine) -> int:
    """Читает версию хранилища из PRAGMA user_version."""
    with engine.connect() as conn:
        return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)


def upgrade_schema(engine: Engine, version: int = STORE_VERSION) -> int:
    """
    Создаёт недостающие таблицы для указанной версии хранилища.

    Args:
        engine: Подключение к базе данных
        version: Запрошенная версия хранилища

    Returns:
        int: Версия, которая была в хранилище до вызова

    Raises:
        DatabaseError: Если версия меньше 1 или меньше уже сохранённой
    """
    if version < 1:
        raise DatabaseError(f"Недопустимая версия хранилища: {version}")

    with engine.begin() as conn:
        current = int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)
        if version < current:
            error_msg = (
                f"Хранилище уже имеет версию {current}, "
                f"открытие с версией {version} не поддерживается"
            )
            logger.error(error_msg)
            raise DatabaseError(error_msg)

        # checkfirst: существующие таблицы не трогаем
        Base.metadata.create_all(bind=conn, tables=tables_for_version(version), checkfirst=True)

        if version > current:
            conn.exec_driver_sql(f"PRAGMA user_version = {int(version)}")
            logger.info(f"Версия хранилища повышена: {current} -> {version}")

    return current


def init_db(db_path: Optional[str] = None, version: int = STORE_VERSION) -> Engine:
    """
    Инициализирует подключение к базе данных и создаёт таблицы.

    Args:
        db_path: Путь к файлу SQLite (по умолчанию settings.db_path);
            ":memory:" - хранилище в памяти
        version: Версия хранилища

    Returns:
        Engine: Инициализированный engine
    """
    global _engine, _SessionLocal, _atexit_registered

    if _engine is not None:
        close_db()

    db_path = db_path or settings.db_path
    database_url = f"sqlite:///{db_path}"
    logger.info(f"Инициализация базы данных: {database_url} (версия {version})")

    engine_kwargs = {"connect_args": {"check_same_thread": False}, "echo": False}
    if db_path == ":memory:":
        # Одно соединение на весь процесс, иначе каждая сессия видит пустую БД
        engine_kwargs["poolclass"] = StaticPool

    try:
        engine = create_engine(database_url, **engine_kwargs)
        upgrade_schema(engine, version)
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при инициализации базы данных: {e}")
        raise

    _engine = engine
    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

    if not _atexit_registered:
        atexit.register(close_db)
        _atexit_registered = True

    logger.info("База данных успешно инициализирована")
    return _engine


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Контекстный менеджер для работы с сессией базы данных.
    """
    if _SessionLocal is None:
        error_msg = "База данных не инициализирована. Вызовите init_db() перед использованием."
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    session: Session = _SessionLocal()

    try:
        logger.debug("Создана новая сессия БД")
        yield session

    except SQLAlchemyError as e:
        logger.error(f"Ошибка SQLAlchemy, откат транзакции: {e}")
        session.rollback()
        raise

    except Exception:
        session.rollback()
        raise

    finally:
        session.close()
        logger.debug("Сессия БД закрыта")


def close_db() -> None:
    """
    Закрывает соединение с базой данных и освобождает ресурсы.
    """
    global _engine, _SessionLocal

    if _engine is not None:
        logger.info("Закрытие соединения с базой данных...")
        _engine.dispose()
        _engine = None
        _SessionLocal = None
        logger.info("Соединение с базой данных закрыто")
