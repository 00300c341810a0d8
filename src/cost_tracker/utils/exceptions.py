"""
Модуль пользовательских исключений приложения.
"""

class CostTrackerError(Exception):
    """Базовый класс для всех исключений приложения."""
    pass

class ValidationError(CostTrackerError):
    """Исключение при ошибке валидации данных (отсутствует поле, недопустимое значение)."""
    pass

class NotFoundError(CostTrackerError):
    """Исключение когда запись с указанным ID не найдена в коллекции."""
    pass

class RateFetchError(CostTrackerError):
    """Исключение когда источник курсов валют недоступен или вернул не JSON."""
    pass

class MissingRateError(CostTrackerError):
    """Исключение когда валюта отсутствует в полученной таблице курсов."""
    pass

class DatabaseError(CostTrackerError):
    """Исключение при ошибках работы с хранилищем (например, коллекция не создана)."""
    pass
