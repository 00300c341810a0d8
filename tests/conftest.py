"""
Конфигурация pytest для тестов cost_tracker.
"""
import os
import tempfile

# Данные тестов (config.json, логи) не должны попадать в домашнюю директорию.
# Переменная задаётся до импорта cost_tracker: Config создаётся при импорте.
os.environ.setdefault("COST_TRACKER_DATA_DIR", tempfile.mkdtemp(prefix="cost_tracker_tests_"))

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cost_tracker.database import upgrade_schema
from cost_tracker.models import CostCreate, CostType, Currency
from cost_tracker.services.cost_service import add_cost


def make_engine(version=None):
    """Движок SQLite в памяти с хранилищем указанной версии."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if version is None:
        upgrade_schema(engine)
    else:
        upgrade_schema(engine, version)
    return engine


@pytest.fixture
def db_session():
    """
    Централизованная фикстура для создания временной БД и сессии.
    Автоматически закрывает соединение после теста.
    """
    engine = make_engine()
    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    # Закрываем сессию и соединение
    session.close()
    engine.dispose()


@pytest.fixture
def rates():
    """Фиксированная таблица курсов (единиц валюты за один USD)."""
    return {"USD": 1.0, "ILS": 3.5, "GBP": 0.8, "EURO": 0.9}


@pytest.fixture
def cost_factory(db_session):
    """
    Фабрика записей в тестовой БД.

    Returns:
        Callable: add(sum, on, category="Food", currency=USD, type=EXPENSE)
    """
    def add(sum, on, category="Food", currency=Currency.USD, type=CostType.EXPENSE, description=""):
        return add_cost(db_session, CostCreate(
            sum=Decimal(str(sum)),
            currency=currency,
            category=category,
            description=description,
            type=type,
            date=on,
        ))
    return add


@pytest.fixture
def march_costs(cost_factory):
    """Набор записей за март 2024 всех четырёх типов."""
    return [
        cost_factory(100, date(2024, 3, 10), "Food"),
        cost_factory(35, date(2024, 3, 12), "Transport", currency=Currency.ILS),
        cost_factory(2000, date(2024, 3, 1), "Salary", type=CostType.INCOME),
        cost_factory(300, date(2024, 3, 15), "Savings", type=CostType.SAVINGS_DEPOSIT),
        cost_factory(50, date(2024, 3, 20), "Savings", type=CostType.SAVINGS_WITHDRAWAL),
    ]
