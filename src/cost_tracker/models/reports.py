"""
Модели результатов агрегации: отчёты, статистика, бюджеты, накопления.

Все суммы в этих моделях уже пересчитаны в целевую валюту и имеют тип float
(округление - задача слоя отображения).
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from .enums import Currency, CostType, BudgetSignal
from .models import Budget, SavingsGoal

# Таблица курсов: валюта -> количество единиц за один USD
ExchangeRates = Dict[str, float]


class ReportDate(BaseModel):
    """Упрощённая дата строки отчёта: отчёт уже ограничен одним месяцем."""
    day: int


class ReportCostItem(BaseModel):
    """Строка отчёта с суммой в валюте отчёта."""
    id: int
    sum: float
    currency: Currency
    category: str
    description: str
    type: CostType
    date: ReportDate = Field(serialization_alias="Date")


class SavingsBuckets(BaseModel):
    """Пополнения и снятия накоплений за период."""
    deposits: List[ReportCostItem] = Field(default_factory=list)
    withdrawals: List[ReportCostItem] = Field(default_factory=list)


class ReportTotals(BaseModel):
    """
    Итоги отчёта.

    Attributes:
        expenses: Сумма расходов
        incomes: Сумма доходов
        savings: Пополнения минус снятия
        balance: Доходы минус расходы
        currency: Валюта итогов
    """
    expenses: float = 0.0
    incomes: float = 0.0
    savings: float = 0.0
    balance: float = 0.0
    currency: Currency


class Report(BaseModel):
    """Месячный отчёт в одной валюте."""
    year: int
    month: int
    currency: Currency
    expenses: List[ReportCostItem] = Field(default_factory=list)
    incomes: List[ReportCostItem] = Field(default_factory=list)
    savings: SavingsBuckets = Field(default_factory=SavingsBuckets)
    totals: ReportTotals

    @computed_field
    @property
    def costs(self) -> List[ReportCostItem]:
        """Все строки отчёта из всех корзин."""
        return [
            *self.expenses,
            *self.incomes,
            *self.savings.deposits,
            *self.savings.withdrawals,
        ]


class MonthlyTotals(BaseModel):
    """Итоги одного месяца в годовом отчёте."""
    month: int
    expenses: float
    incomes: float
    savings: float
    balance: float


class YearlyReport(BaseModel):
    """Годовой обзор: итоги по каждому из 12 месяцев и за год."""
    year: int
    currency: Currency
    months: List[MonthlyTotals]
    totals: ReportTotals


class Statistics(BaseModel):
    """
    Сравнение месяца с предыдущим.

    Attributes:
        total_this_month: Расходы текущего месяца
        total_last_month: Расходы предыдущего месяца
        average_daily: Средний расход в день (по числу дней месяца)
        total_by_category: Расходы текущего месяца по категориям
        change_percentage: Изменение к предыдущему месяцу в процентах
            (0, если в предыдущем месяце расходов не было)
        currency: Валюта
    """
    total_this_month: float
    total_last_month: float
    average_daily: float
    total_by_category: Dict[str, float] = Field(default_factory=dict)
    change_percentage: float
    currency: Currency


class BudgetStatus(BaseModel):
    """Результат проверки одного бюджета."""
    budget: Budget
    spent: float
    percentage: float
    remaining: float
    signal: Optional[BudgetSignal] = None
    error: Optional[str] = None


class BudgetAlert(BaseModel):
    """Уведомление о бюджете со стабильным ID (для исключения дубликатов)."""
    id: str
    type: str
    budget_id: int
    message: str


class SavingsGoalProgress(BaseModel):
    """Вычисленный прогресс цели накоплений."""
    goal: SavingsGoal
    current_amount: float
    progress: float
    is_completed: bool


class CategoryView(BaseModel):
    """
    Категория в объединённом представлении.

    Категории, встречающиеся только в записях, не имеют ID
    и получают цвет по умолчанию.
    """
    id: Optional[int] = None
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
    registered: bool
