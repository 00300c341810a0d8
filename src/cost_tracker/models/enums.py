"""
Модуль перечислений (enums) для Cost Tracker.

Содержит все Enum классы, используемые в моделях данных.
"""

from enum import Enum


class Currency(str, Enum):
    """
    Поддерживаемые валюты.

    Курс каждой валюты задаётся как количество единиц валюты за один USD.
    """
    USD = "USD"
    ILS = "ILS"
    GBP = "GBP"
    EURO = "EURO"


class CostType(str, Enum):
    """
    Тип финансовой записи.

    Attributes:
        EXPENSE: Расход
        INCOME: Доход
        SAVINGS_DEPOSIT: Пополнение накоплений
        SAVINGS_WITHDRAWAL: Снятие с накоплений
    """
    EXPENSE = "expense"
    INCOME = "income"
    SAVINGS_DEPOSIT = "savings_deposit"
    SAVINGS_WITHDRAWAL = "savings_withdrawal"


class BudgetType(str, Enum):
    """
    Область действия бюджета.

    Attributes:
        MONTHLY: Бюджет на конкретный месяц года
        YEARLY: Бюджет на весь год
        CATEGORY: Бюджет на категорию (за всё время)
    """
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CATEGORY = "category"


class BudgetSignal(str, Enum):
    """
    Сигнал превышения порога бюджета.

    Attributes:
        WARNING: Израсходовано 80% и более
        EXCEEDED: Израсходовано больше лимита
    """
    WARNING = "warning"
    EXCEEDED = "exceeded"
