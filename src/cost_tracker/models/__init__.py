"""Модели данных Cost Tracker."""

from .enums import Currency, CostType, BudgetType, BudgetSignal
from .models import (
    Base,
    CostDB,
    CategoryDB,
    BudgetDB,
    SavingsGoalDB,
    CostCreate,
    CostUpdate,
    Cost,
    CategoryCreate,
    CategoryUpdate,
    Category,
    BudgetCreate,
    Budget,
    SavingsGoalCreate,
    SavingsGoalUpdate,
    SavingsGoal,
)
from .reports import (
    ExchangeRates,
    ReportDate,
    ReportCostItem,
    SavingsBuckets,
    ReportTotals,
    Report,
    MonthlyTotals,
    YearlyReport,
    Statistics,
    BudgetStatus,
    BudgetAlert,
    SavingsGoalProgress,
    CategoryView,
)

__all__ = [
    "Currency",
    "CostType",
    "BudgetType",
    "BudgetSignal",
    "Base",
    "CostDB",
    "CategoryDB",
    "BudgetDB",
    "SavingsGoalDB",
    "CostCreate",
    "CostUpdate",
    "Cost",
    "CategoryCreate",
    "CategoryUpdate",
    "Category",
    "BudgetCreate",
    "Budget",
    "SavingsGoalCreate",
    "SavingsGoalUpdate",
    "SavingsGoal",
    "ExchangeRates",
    "ReportDate",
    "ReportCostItem",
    "SavingsBuckets",
    "ReportTotals",
    "Report",
    "MonthlyTotals",
    "YearlyReport",
    "Statistics",
    "BudgetStatus",
    "BudgetAlert",
    "SavingsGoalProgress",
    "CategoryView",
]
