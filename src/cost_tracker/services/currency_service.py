"""
Пересчёт сумм между валютами через USD.

Курс каждой валюты - количество её единиц за один USD, поэтому
amount_in_usd = amount / rates[from], result = amount_in_usd * rates[to].
Округление здесь не выполняется.
"""

import logging
from decimal import Decimal
from typing import Mapping, Union

from cost_tracker.models import Currency
from cost_tracker.utils.exceptions import MissingRateError, ValidationError

logger = logging.getLogger(__name__)

Amount = Union[int, float, Decimal]


def _rate_for(rates: Mapping[str, float], currency: Union[Currency, str]) -> float:
    code = currency.value if isinstance(currency, Currency) else str(currency)
    rate = rates.get(code)
    if rate is None:
        error_msg = f"Курс для валюты {code} отсутствует (доступны: {', '.join(sorted(rates))})"
        logger.error(error_msg)
        raise MissingRateError(error_msg)
    return float(rate)


def convert(
    amount: Amount,
    from_currency: Union[Currency, str],
    to_currency: Union[Currency, str],
    rates: Mapping[str, float]
) -> float:
    """
    Пересчитывает сумму из одной валюты в другую.

    Args:
        amount: Сумма в исходной валюте
        from_currency: Исходная валюта
        to_currency: Целевая валюта
        rates: Таблица курсов (единиц валюты за один USD)

    Returns:
        float: Сумма в целевой валюте

    Raises:
        MissingRateError: Если какой-либо валюты нет в таблице курсов

    Example:
        >>> convert(100, "USD", "GBP", {"USD": 1.0, "GBP": 0.75})
        75.0
    """
    rate_from = _rate_for(rates, from_currency)
    rate_to = _rate_for(rates, to_currency)
    return float(amount) * (rate_to / rate_from)


def as_currency(value: Union[Currency, str]) -> Currency:
    """
    Приводит значение к Currency.

    Raises:
        ValidationError: Если валюта не поддерживается
    """
    try:
        return Currency(value)
    except ValueError as e:
        error_msg = f"Неподдерживаемая валюта: {value!r}. Доступны: {', '.join(c.value for c in Currency)}"
        logger.error(error_msg)
        raise ValidationError(error_msg) from e
