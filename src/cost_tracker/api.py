"""
Фасад Cost Tracker для потребителей (UI, скрипты).

CostTracker открывает хранилище, на каждую операцию создаёт сессию БД,
вызывает соответствующую функцию сервисного слоя и возвращает Pydantic
модели, отвязанные от сессии.

В процессе одновременно активно одно хранилище: повторное создание
CostTracker переключает глобальное подключение.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from cost_tracker.config import settings
from cost_tracker.database import STORE_VERSION, close_db, get_db_session, init_db
from cost_tracker.models import (
    Budget,
    BudgetAlert,
    BudgetStatus,
    Category,
    CategoryView,
    Cost,
    Currency,
    Report,
    SavingsGoal,
    SavingsGoalProgress,
    Statistics,
    YearlyReport,
)
from cost_tracker.services import (
    budget_service,
    category_service,
    cost_query_service,
    cost_service,
    report_service,
    savings_goal_service,
    statistics_service,
)
from cost_tracker.services.exchange_rate_service import ExchangeRateProvider
from cost_tracker.utils.error_handler import ErrorHandler
from cost_tracker.utils.logger import setup_logging

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]


class CostTracker:
    """
    Точка входа в ядро учёта расходов.

    Args:
        db_path: Путь к файлу SQLite (по умолчанию settings.db_path),
            ":memory:" - хранилище в памяти
        version: Версия хранилища
        rate_provider: Провайдер курсов валют
        configure_logging: Настроить корневой логгер (JSON файл сессии
            и консоль) через setup_logging
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        version: int = STORE_VERSION,
        rate_provider: Optional[ExchangeRateProvider] = None,
        configure_logging: bool = False
    ):
        if configure_logging:
            setup_logging()
        self.rate_provider = rate_provider or ExchangeRateProvider()
        self.error_handler = ErrorHandler()
        init_db(db_path, version)
        logger.info("CostTracker готов к работе")

    def close(self) -> None:
        """Закрывает хранилище."""
        close_db()

    def __enter__(self) -> "CostTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def handle_error(self, exception: Exception, context_message: str = "") -> str:
        """Логирует ошибку и возвращает сообщение для пользователя."""
        return self.error_handler.handle(exception, context_message)

    # ------------------------------------------------------------------
    # Записи
    # ------------------------------------------------------------------

    def add_cost(self, cost: Payload) -> Cost:
        with get_db_session() as session:
            return Cost.model_validate(cost_service.add_cost(session, cost))

    def get_cost(self, cost_id: int) -> Cost:
        with get_db_session() as session:
            return Cost.model_validate(cost_service.get_cost(session, cost_id))

    def update_cost(self, cost_id: int, updates: Payload) -> Cost:
        with get_db_session() as session:
            return Cost.model_validate(cost_service.update_cost(session, cost_id, updates))

    def delete_cost(self, cost_id: int) -> None:
        with get_db_session() as session:
            cost_service.delete_cost(session, cost_id)

    def get_all_costs(self) -> List[Cost]:
        with get_db_session() as session:
            return [Cost.model_validate(c) for c in cost_query_service.get_all_costs(session)]

    def get_costs_by_category(self, category: str) -> List[Cost]:
        with get_db_session() as session:
            rows = cost_query_service.get_costs_by_category(session, category)
            return [Cost.model_validate(c) for c in rows]

    def get_costs_by_date_range(self, start_date: Any, end_date: Any) -> List[Cost]:
        """Записи в диапазоне дат включительно, по возрастанию даты."""
        with get_db_session() as session:
            rows = cost_query_service.get_costs_by_date_range(session, start_date, end_date)
            return [Cost.model_validate(c) for c in rows]

    def filter_costs(
        self,
        categories: Optional[Iterable[str]] = None,
        min_sum: Optional[float] = None,
        max_sum: Optional[float] = None,
        currency: Optional[Union[Currency, str]] = None
    ) -> List[Cost]:
        with get_db_session() as session:
            rows = cost_query_service.filter_costs(session, categories, min_sum, max_sum, currency)
            return [Cost.model_validate(c) for c in rows]

    # ------------------------------------------------------------------
    # Отчёты и статистика
    # ------------------------------------------------------------------

    def get_report(self, year: int, month: int, currency: Optional[Union[Currency, str]] = None) -> Report:
        """Месячный отчёт; валюта по умолчанию - settings.default_currency."""
        with get_db_session() as session:
            return report_service.build_report(
                session, year, month, currency or settings.default_currency, provider=self.rate_provider
            )

    def get_yearly_report(self, year: int, currency: Optional[Union[Currency, str]] = None) -> YearlyReport:
        with get_db_session() as session:
            return report_service.build_yearly_report(
                session, year, currency or settings.default_currency, provider=self.rate_provider
            )

    def get_statistics(
        self,
        year: int,
        month: int,
        currency: Optional[Union[Currency, str]] = None
    ) -> Statistics:
        with get_db_session() as session:
            return statistics_service.build_statistics(
                session, year, month, currency or settings.default_currency, provider=self.rate_provider
            )

    # ------------------------------------------------------------------
    # Категории
    # ------------------------------------------------------------------

    def get_categories(self) -> List[Category]:
        with get_db_session() as session:
            return [Category.model_validate(c) for c in category_service.get_categories(session)]

    def add_category(self, category: Payload) -> Category:
        with get_db_session() as session:
            return Category.model_validate(category_service.add_category(session, category))

    def update_category(self, category_id: int, updates: Payload) -> Category:
        with get_db_session() as session:
            row = category_service.update_category(session, category_id, updates)
            return Category.model_validate(row)

    def delete_category(self, category_id: int) -> None:
        with get_db_session() as session:
            category_service.delete_category(session, category_id)

    def get_category_view(self) -> List[CategoryView]:
        with get_db_session() as session:
            return category_service.get_category_view(session)

    # ------------------------------------------------------------------
    # Бюджеты
    # ------------------------------------------------------------------

    def get_budget(
        self,
        year: int,
        month: Optional[int] = None,
        category: Optional[str] = None
    ) -> Optional[Budget]:
        with get_db_session() as session:
            row = budget_service.get_budget(session, year, month, category)
            return Budget.model_validate(row) if row is not None else None

    def set_budget(self, budget: Payload) -> Budget:
        with get_db_session() as session:
            return Budget.model_validate(budget_service.set_budget(session, budget))

    def get_all_budgets(self) -> List[Budget]:
        with get_db_session() as session:
            return [Budget.model_validate(b) for b in budget_service.get_all_budgets(session)]

    def delete_budget(self, budget_id: int) -> None:
        with get_db_session() as session:
            budget_service.delete_budget(session, budget_id)

    def evaluate_budgets(self) -> List[BudgetStatus]:
        with get_db_session() as session:
            return budget_service.evaluate_budgets(session, provider=self.rate_provider)

    def check_budgets(self) -> List[BudgetAlert]:
        with get_db_session() as session:
            return budget_service.check_budgets(session, provider=self.rate_provider)

    # ------------------------------------------------------------------
    # Цели накоплений
    # ------------------------------------------------------------------

    def get_savings_goals(self) -> List[SavingsGoal]:
        with get_db_session() as session:
            rows = savings_goal_service.get_savings_goals(session)
            return [SavingsGoal.model_validate(g) for g in rows]

    def add_savings_goal(self, goal: Payload) -> SavingsGoal:
        with get_db_session() as session:
            return SavingsGoal.model_validate(savings_goal_service.add_savings_goal(session, goal))

    def update_savings_goal(self, goal_id: int, updates: Payload) -> SavingsGoal:
        with get_db_session() as session:
            row = savings_goal_service.update_savings_goal(session, goal_id, updates)
            return SavingsGoal.model_validate(row)

    def delete_savings_goal(self, goal_id: int) -> None:
        with get_db_session() as session:
            savings_goal_service.delete_savings_goal(session, goal_id)

    def get_savings_progress(self) -> List[SavingsGoalProgress]:
        with get_db_session() as session:
            return savings_goal_service.get_savings_progress(session, provider=self.rate_provider)
