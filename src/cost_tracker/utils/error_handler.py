"""
Модуль централизованной обработки ошибок.
Превращает исключения ядра в сообщения, которые UI может показать пользователю.
"""

import logging
import traceback

from cost_tracker.utils.exceptions import (
    ValidationError,
    NotFoundError,
    RateFetchError,
    MissingRateError,
    DatabaseError,
)

logger = logging.getLogger(__name__)


def get_user_message(exception: Exception) -> str:
    """Возвращает понятное пользователю сообщение об ошибке."""
    if isinstance(exception, ValidationError):
        return f"Ошибка ввода: {exception}"
    elif isinstance(exception, NotFoundError):
        return f"Запись не найдена: {exception}"
    elif isinstance(exception, RateFetchError):
        return "Не удалось получить курсы валют. Проверьте адрес источника и повторите попытку."
    elif isinstance(exception, MissingRateError):
        return f"Нет курса для валюты: {exception}"
    elif isinstance(exception, DatabaseError):
        return "Произошла ошибка при работе с хранилищем. Попробуйте позже."
    else:
        return f"Произошла непредвиденная ошибка: {exception}"


class ErrorHandler:
    """
    Класс для централизованной обработки ошибок.
    """

    def handle(self, exception: Exception, context_message: str = "") -> str:
        """
        Логирует исключение и возвращает сообщение для пользователя.

        Args:
            exception: Исключение, которое нужно обработать.
            context_message: Дополнительное сообщение о контексте ошибки.

        Returns:
            str: Сообщение для отображения (уведомление в UI)
        """
        log_message = f"{context_message}: {exception}" if context_message else str(exception)

        if isinstance(exception, (ValidationError, NotFoundError, MissingRateError)):
            logger.warning(f"User error: {log_message}")
        else:
            logger.error(f"System error: {log_message}\n{traceback.format_exc()}")

        return get_user_message(exception)
