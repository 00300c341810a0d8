"""
Модуль моделей данных для Cost Tracker.

Содержит определения моделей для четырёх коллекций хранилища:
- CostDB / CategoryDB / BudgetDB / SavingsGoalDB: SQLAlchemy модели
- *Create / *Update: Pydantic модели для валидации входных данных
- Cost / Category / Budget / SavingsGoal: Pydantic модели для чтения из БД
"""

from collections.abc import Mapping
from datetime import datetime
from datetime import date as date_type
from typing import Any, Optional
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, Enum as SQLEnum, Index
from sqlalchemy.orm import DeclarativeBase
from pydantic import (
    AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
)

from .enums import Currency, CostType, BudgetType


# Декларативная база для SQLAlchemy моделей
class Base(DeclarativeBase):
    """Базовый класс для всех SQLAlchemy моделей."""
    pass


class CostDB(Base):
    """
    Финансовая запись (расход, доход, пополнение или снятие накоплений).

    Attributes:
        id: Автоинкрементный идентификатор, назначается хранилищем
        sum: Сумма (положительное число) в валюте записи
        currency: Валюта записи
        category: Категория - свободный текст, не внешний ключ
        description: Описание
        type: Тип записи
        date: Календарная дата записи
        created_at: Дата создания записи
        updated_at: Дата последнего обновления
    """
    __tablename__ = "costs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sum = Column(Numeric(12, 2), nullable=False)
    currency = Column(SQLEnum(Currency), nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    type = Column(SQLEnum(CostType), nullable=False, default=CostType.EXPENSE)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index('ix_costs_date', 'date'),
    )


class CategoryDB(Base):
    """
    Справочник категорий.

    Название не уникально: совпадение имён допускается, а расходы
    ссылаются на категорию по тексту, а не по ID.
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    color = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class BudgetDB(Base):
    """
    Бюджет (лимит расходов).

    Attributes:
        year: Год действия бюджета
        month: Месяц (только для MONTHLY)
        amount: Лимит в валюте бюджета
        currency: Валюта бюджета
        category: Категория (только для CATEGORY)
        type: Область действия
    """
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(SQLEnum(Currency), nullable=False)
    category = Column(String, nullable=True)
    type = Column(SQLEnum(BudgetType), nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class SavingsGoalDB(Base):
    """
    Цель накоплений.

    Прогресс не хранится: он вычисляется по записям накоплений.
    """
    __tablename__ = "savings_goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    target_amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(SQLEnum(Currency), nullable=False)
    target_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


# =============================================================================
# Pydantic модели для валидации и ответов API
# =============================================================================

def coerce_date_parts(value: Any) -> Any:
    """
    Принимает дату в виде словаря {year, month, day}.

    Остальные значения (date, строка ISO) передаются стандартной валидации.

    Example:
        >>> coerce_date_parts({"year": 2024, "month": 3, "day": 10})
        datetime.date(2024, 3, 10)
    """
    if isinstance(value, Mapping):
        try:
            return date_type(int(value["year"]), int(value["month"]), int(value["day"]))
        except KeyError as e:
            raise ValueError(f'В дате отсутствует поле {e}')
    return value


def _strip_required_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f'{field_name} не может быть пустым или состоять только из пробелов')
    return value.strip()


class CostCreate(BaseModel):
    """
    Pydantic модель для создания записи с валидацией.

    - Сумма должна быть положительной
    - Категория не может быть пустой
    - Дата по умолчанию - текущая (как при добавлении записи из формы)

    Attributes:
        sum: Сумма записи (больше 0)
        currency: Валюта
        category: Категория (свободный текст)
        description: Описание
        type: Тип записи (по умолчанию расход)
        date: Дата; принимается date, ISO строка или {year, month, day}
    """
    sum: Decimal = Field(gt=Decimal('0'), description="Сумма должна быть положительной")
    currency: Currency
    category: str
    description: str = ""
    type: CostType = CostType.EXPENSE
    date: date_type = Field(default_factory=date_type.today)

    @field_validator('date', mode='before')
    @classmethod
    def parse_date_parts(cls, v: Any) -> Any:
        return coerce_date_parts(v)

    @field_validator('category')
    @classmethod
    def category_not_empty(cls, v: str) -> str:
        return _strip_required_text(v, 'Категория')


class CostUpdate(BaseModel):
    """
    Pydantic модель для обновления записи.

    Все поля опциональные - обновляются только указанные.
    """
    sum: Optional[Decimal] = Field(None, gt=Decimal('0'))
    currency: Optional[Currency] = None
    category: Optional[str] = None
    description: Optional[str] = None
    type: Optional[CostType] = None
    date: Optional[date_type] = None

    @field_validator('date', mode='before')
    @classmethod
    def parse_date_parts(cls, v: Any) -> Any:
        return coerce_date_parts(v)

    @field_validator('category')
    @classmethod
    def category_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _strip_required_text(v, 'Категория')


class Cost(BaseModel):
    """Pydantic модель для чтения записи из базы данных."""
    id: int
    sum: Decimal
    currency: Currency
    category: str
    description: str
    type: CostType
    date: date_type
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryCreate(BaseModel):
    """
    Pydantic модель для создания категории.

    Название обрезается по краям и не может быть пустым.
    """
    name: str = Field(description="Название категории")
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_empty_and_trim(cls, v: str) -> str:
        return _strip_required_text(v, 'Название категории')


class CategoryUpdate(BaseModel):
    """Pydantic модель для частичного обновления категории."""
    name: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_empty_and_trim(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _strip_required_text(v, 'Название категории')


class Category(BaseModel):
    """Pydantic модель для чтения категории из БД."""
    id: int
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BudgetCreate(BaseModel):
    """
    Pydantic модель для создания бюджета.

    Проверяет согласованность области действия с типом:
    - MONTHLY: указан month, не указана category
    - YEARLY: не указаны ни month, ни category
    - CATEGORY: указана category, не указан month
    """
    year: int = Field(ge=1, le=9999)
    month: Optional[int] = Field(None, ge=1, le=12)
    amount: Decimal = Field(gt=Decimal('0'), description="Лимит должен быть положительным")
    currency: Currency
    category: Optional[str] = None
    type: BudgetType

    @field_validator('category')
    @classmethod
    def category_trim(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _strip_required_text(v, 'Категория')

    @model_validator(mode='after')
    def check_scope(self) -> 'BudgetCreate':
        if self.type == BudgetType.MONTHLY:
            if self.month is None or self.category is not None:
                raise ValueError('Месячный бюджет требует month и не допускает category')
        elif self.type == BudgetType.YEARLY:
            if self.month is not None or self.category is not None:
                raise ValueError('Годовой бюджет не допускает month и category')
        elif self.type == BudgetType.CATEGORY:
            if self.category is None or self.month is not None:
                raise ValueError('Бюджет категории требует category и не допускает month')
        return self


class Budget(BaseModel):
    """Pydantic модель для чтения бюджета из БД."""
    id: int
    year: int
    month: Optional[int] = None
    amount: Decimal
    currency: Currency
    category: Optional[str] = None
    type: BudgetType

    model_config = ConfigDict(from_attributes=True)


class SavingsGoalCreate(BaseModel):
    """
    Pydantic модель для создания цели накоплений.

    Принимает как snake_case, так и camelCase имена полей
    (target_amount / targetAmount, target_date / targetDate).
    """
    name: str
    target_amount: Decimal = Field(
        gt=Decimal('0'),
        validation_alias=AliasChoices('target_amount', 'targetAmount'),
    )
    currency: Currency
    target_date: date_type = Field(validation_alias=AliasChoices('target_date', 'targetDate'))

    @field_validator('name')
    @classmethod
    def name_not_empty_and_trim(cls, v: str) -> str:
        return _strip_required_text(v, 'Название цели')

    @field_validator('target_date', mode='before')
    @classmethod
    def parse_date_parts(cls, v: Any) -> Any:
        return coerce_date_parts(v)


class SavingsGoalUpdate(BaseModel):
    """Pydantic модель для частичного обновления цели накоплений."""
    name: Optional[str] = None
    target_amount: Optional[Decimal] = Field(
        None,
        gt=Decimal('0'),
        validation_alias=AliasChoices('target_amount', 'targetAmount'),
    )
    currency: Optional[Currency] = None
    target_date: Optional[date_type] = Field(
        None, validation_alias=AliasChoices('target_date', 'targetDate')
    )

    @field_validator('name')
    @classmethod
    def name_not_empty_and_trim(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _strip_required_text(v, 'Название цели')

    @field_validator('target_date', mode='before')
    @classmethod
    def parse_date_parts(cls, v: Any) -> Any:
        return coerce_date_parts(v)


class SavingsGoal(BaseModel):
    """Pydantic модель для чтения цели накоплений из БД."""
    id: int
    name: str
    target_amount: Decimal
    currency: Currency
    target_date: date_type

    model_config = ConfigDict(from_attributes=True)
