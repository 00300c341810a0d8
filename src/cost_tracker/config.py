"""
Модуль конфигурации Cost Tracker.

Содержит настройки:
- Основные параметры приложения (название, версия)
- Путь к файлу хранилища
- Источник курсов валют (URL) и параметры HTTP-запроса
- Настройки логирования
- Персистентность настроек (загрузка/сохранение)
- Управление пользовательской директорией данных
"""

import os
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Переменная окружения с URL курсов по умолчанию
EXCHANGE_RATE_URL_ENV = "COST_TRACKER_EXCHANGE_RATE_URL"

# Переменная окружения для переопределения директории данных
DATA_DIR_ENV = "COST_TRACKER_DATA_DIR"

# Жёстко заданный источник курсов на случай отсутствия настроек
FALLBACK_EXCHANGE_RATE_URL = (
    "https://gist.githubusercontent.com/Pafestivo/e4e1c962472306b578983a6a0c40828e"
    "/raw/exchange-rates.json"
)


class Config:
    """
    Класс конфигурации приложения.
    Реализует паттерн Singleton для доступа к настройкам из любой части приложения.

    Все пользовательские данные (хранилище, логи, настройки) находятся в
    директории ~/.cost_tracker_data/ (или в COST_TRACKER_DATA_DIR, если задана).
    """

    _instance = None

    # Константы приложения
    APP_NAME = "Cost Tracker"
    VERSION = "1.0.0"

    @staticmethod
    def get_user_data_dir() -> Path:
        """
        Возвращает путь к директории пользовательских данных.

        Создаёт директорию и поддиректорию logs/ при необходимости.

        Returns:
            Path: Путь к директории данных
        """
        override = os.getenv(DATA_DIR_ENV)
        data_dir = Path(override) if override else Path.home() / ".cost_tracker_data"

        data_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Директория пользовательских данных: {data_dir}")

        logs_dir = data_dir / "logs"
        logs_dir.mkdir(exist_ok=True)
        logger.debug(f"Директория логов: {logs_dir}")

        return data_dir

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True

        self.user_data_dir = self.get_user_data_dir()

        # Пути к файлам
        self.db_path: str = str(self.user_data_dir / "costs.db")
        self.config_file: str = str(self.user_data_dir / "config.json")
        self.log_file: str = str(self.user_data_dir / "logs" / "cost_tracker.log")

        # Источник курсов: None означает "не задан пользователем"
        self.exchange_rate_url: Optional[str] = None
        self.http_timeout: float = 10.0
        # 0 - курсы запрашиваются при каждой операции
        self.rate_cache_ttl: float = 0.0

        # Настройки логирования
        self.log_level: str = "INFO"

        # Настройки отображения
        self.default_currency: str = "USD"
        self.default_category_color: str = "#9e9e9e"

        self.load()

    def load(self) -> None:
        """
        Загружает настройки из файла конфигурации.

        Если файл не существует, используются значения по умолчанию.
        Путь к хранилищу не загружается из конфигурации.
        """
        if not os.path.exists(self.config_file):
            logger.info(f"Файл конфигурации не найден, используются значения по умолчанию: {self.config_file}")
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            # Значения применяются только если файл разобран целиком
            exchange_rate_url = data.get("exchange_rate_url") or None
            http_timeout = float(data.get("http_timeout", 10.0))
            rate_cache_ttl = float(data.get("rate_cache_ttl", 0.0))
            log_level = data.get("log_level", "INFO")
            default_currency = data.get("default_currency", "USD")
            default_category_color = data.get("default_category_color", "#9e9e9e")

            self.exchange_rate_url = exchange_rate_url
            self.http_timeout = http_timeout
            self.rate_cache_ttl = rate_cache_ttl
            self.log_level = log_level
            self.default_currency = default_currency
            self.default_category_color = default_category_color

            logger.info(f"Конфигурация загружена из {self.config_file}")

        except Exception as e:
            logger.error(f"Ошибка при загрузке конфигурации, используются текущие значения: {e}")

    def save(self) -> None:
        """Сохраняет текущие настройки в файл конфигурации."""
        data = {
            "exchange_rate_url": self.exchange_rate_url,
            "http_timeout": self.http_timeout,
            "rate_cache_ttl": self.rate_cache_ttl,
            "log_level": self.log_level,
            "default_currency": self.default_currency,
            "default_category_color": self.default_category_color,
        }

        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4, ensure_ascii=False)
            logger.info(f"Конфигурация сохранена в {self.config_file}")
        except OSError as e:
            logger.error(f"Ошибка при сохранении конфигурации: {e}")

    def resolve_exchange_rate_url(self) -> str:
        """
        Определяет URL источника курсов валют.

        Приоритет: сохранённая настройка пользователя, переменная окружения,
        жёстко заданный адрес.

        Returns:
            str: URL (или путь к локальному JSON файлу)
        """
        if self.exchange_rate_url:
            return self.exchange_rate_url
        env_url = os.getenv(EXCHANGE_RATE_URL_ENV)
        if env_url:
            return env_url
        return FALLBACK_EXCHANGE_RATE_URL


# Глобальный экземпляр конфигурации
settings = Config()
