import logging
from typing import Any, Mapping, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cost_tracker.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_year_month(year: int, month: int) -> None:
    """
    Валидация пары (год, месяц) для отчётов и выборок.

    Args:
        year: Год (1..9999)
        month: Месяц (1..12)

    Raises:
        ValidationError: Если значения вне допустимого диапазона
    """
    if not isinstance(year, int) or not 1 <= year <= 9999:
        error_msg = f'Невалидный год: {year}. Ожидается целое число от 1 до 9999'
        logger.error(error_msg)
        raise ValidationError(error_msg)
    if not isinstance(month, int) or not 1 <= month <= 12:
        error_msg = f'Невалидный месяц: {month}. Ожидается целое число от 1 до 12'
        logger.error(error_msg)
        raise ValidationError(error_msg)


def validate_record_id(record_id: int, field_name: str = "ID") -> None:
    """
    Валидация идентификатора записи (автоинкрементное целое > 0).

    Raises:
        ValidationError: Если формат невалидный
    """
    if isinstance(record_id, bool) or not isinstance(record_id, int) or record_id <= 0:
        error_msg = f'Невалидный {field_name}: {record_id!r}. Ожидается положительное целое число'
        logger.error(error_msg)
        raise ValidationError(error_msg)


def parse_model(model_cls: Type[ModelT], data: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    """
    Валидирует входные данные Pydantic моделью.

    Args:
        model_cls: Класс Pydantic модели
        data: Экземпляр модели или словарь с полями

    Returns:
        Экземпляр model_cls

    Raises:
        ValidationError: Если данные не прошли валидацию
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        error_msg = f"Ошибка валидации {model_cls.__name__}: {e}"
        logger.error(error_msg)
        raise ValidationError(error_msg) from e
