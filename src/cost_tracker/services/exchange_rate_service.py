"""
Провайдер курсов валют.

Загружает JSON вида {"USD": 1, "ILS": 3.7, "GBP": 0.79, "EURO": 0.92}
(единиц валюты за один USD) по настраиваемому адресу. Адрес без схемы
http(s):// читается как локальный JSON файл.

Курсы по умолчанию не кэшируются: каждая операция получает свежие данные.
Если задан TTL кэша, кэш хранится по URL, поэтому смена источника
вступает в силу при следующем же вызове.
"""

import json
import logging
import math
import time
from pathlib import Path
from typing import Dict, Optional, Tuple

import httpx

from cost_tracker.config import settings
from cost_tracker.models import ExchangeRates
from cost_tracker.utils.exceptions import RateFetchError

logger = logging.getLogger(__name__)


def _is_remote(url: str) -> bool:
    return url.startswith(("http://", "https://"))


def parse_rates(data: object, source: str) -> ExchangeRates:
    """
    Проверяет, что ответ - объект с конечными положительными числовыми курсами.

    Raises:
        RateFetchError: Если структура ответа невалидна
    """
    if not isinstance(data, dict):
        raise RateFetchError(f"Источник {source} вернул не объект JSON")

    rates: Dict[str, float] = {}
    for code, value in data.items():
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not math.isfinite(value)
            or value <= 0
        ):
            raise RateFetchError(f"Невалидный курс {code}={value!r} в ответе {source}")
        rates[str(code)] = float(value)
    return rates


def fetch_exchange_rates(
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None
) -> ExchangeRates:
    """
    Загружает таблицу курсов.

    Args:
        url: Адрес источника (по умолчанию - из настроек)
        timeout: Таймаут HTTP запроса в секундах
        transport: Транспорт httpx (подменяется в тестах)

    Returns:
        ExchangeRates: Таблица курсов

    Raises:
        RateFetchError: Источник недоступен или ответ не является валидным JSON
    """
    url = url or settings.resolve_exchange_rate_url()
    timeout = settings.http_timeout if timeout is None else timeout
    logger.debug(f"Загрузка курсов валют из {url}")

    if _is_remote(url):
        try:
            with httpx.Client(timeout=timeout, transport=transport) as client:
                response = client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Источник курсов недоступен ({url}): {e}")
            raise RateFetchError(f"Не удалось загрузить курсы из {url}: {e}") from e
        except ValueError as e:
            logger.error(f"Источник курсов вернул не JSON ({url}): {e}")
            raise RateFetchError(f"Ответ {url} не является JSON: {e}") from e
    else:
        path = Path(url[len("file://"):] if url.startswith("file://") else url)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.error(f"Не удалось прочитать файл курсов {path}: {e}")
            raise RateFetchError(f"Не удалось прочитать файл курсов {path}: {e}") from e
        except ValueError as e:
            logger.error(f"Файл курсов {path} не является JSON: {e}")
            raise RateFetchError(f"Файл курсов {path} не является JSON: {e}") from e

    rates = parse_rates(data, url)
    logger.info(f"Получены курсы для {len(rates)} валют из {url}")
    return rates


class ExchangeRateProvider:
    """
    Провайдер курсов с опциональным кэшем.

    Attributes:
        url: Фиксированный адрес источника; None - брать из настроек
            при каждом вызове
        cache_ttl: Время жизни кэша в секундах (0 - без кэша)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        cache_ttl: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.url = url
        self.timeout = timeout
        self.cache_ttl = settings.rate_cache_ttl if cache_ttl is None else cache_ttl
        self.transport = transport
        self._cache: Dict[str, Tuple[float, ExchangeRates]] = {}

    def current_url(self) -> str:
        """Адрес, который будет использован при следующем запросе."""
        return self.url or settings.resolve_exchange_rate_url()

    def get_rates(self) -> ExchangeRates:
        """
        Возвращает таблицу курсов (из кэша, если он включён и не устарел).

        Raises:
            RateFetchError: При ошибке загрузки
        """
        url = self.current_url()

        if self.cache_ttl > 0:
            cached = self._cache.get(url)
            if cached is not None and time.monotonic() - cached[0] < self.cache_ttl:
                logger.debug(f"Курсы для {url} получены из кэша")
                return dict(cached[1])

        rates = fetch_exchange_rates(url, timeout=self.timeout, transport=self.transport)

        if self.cache_ttl > 0:
            self._cache[url] = (time.monotonic(), rates)
        return dict(rates)

    def invalidate(self) -> None:
        """Очищает кэш курсов."""
        self._cache.clear()


def resolve_rates(
    rates: Optional[ExchangeRates] = None,
    provider: Optional[ExchangeRateProvider] = None
) -> ExchangeRates:
    """
    Возвращает переданную таблицу курсов или загружает свежую.

    Позволяет вызывающему коду получить курсы один раз и переиспользовать
    их для нескольких отчётов в рамках одной операции.
    """
    if rates is not None:
        return rates
    return (provider or ExchangeRateProvider()).get_rates()
