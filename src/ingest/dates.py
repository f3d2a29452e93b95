"""Dates — нормализация даты/времени из выгрузки брокера.

Сначала пробуется формат выгрузки (по умолчанию "%d-%m-%Y" / "%H:%M"),
при неудаче — эвристический разбор dateutil (day-first).
"""

from datetime import date, datetime, time
from typing import Final

from dateutil import parser

from src.core.errors import IngestionError

DEFAULT_DATE_FORMAT: Final[str] = "%d-%m-%Y"
DEFAULT_TIME_FORMAT: Final[str] = "%H:%M"


def _fallback_parse(value: str, primary_error: ValueError) -> datetime:
    try:
        return parser.parse(value, dayfirst=True)
    except (ValueError, OverflowError) as e:
        raise IngestionError(
            f"cannot parse {value!r}: {primary_error}; fallback: {e}"
        ) from e


def parse_date(value: str, fmt: str = DEFAULT_DATE_FORMAT) -> date:
    """
    Разбор даты сделки.

    Raises:
        IngestionError: если не сработал ни формат, ни fallback
    """
    value = value.strip()
    try:
        return datetime.strptime(value, fmt).date()
    except ValueError as e:
        return _fallback_parse(value, e).date()


def parse_time(value: str, fmt: str = DEFAULT_TIME_FORMAT) -> time:
    """
    Разбор времени сделки.

    Raises:
        IngestionError: если не сработал ни формат, ни fallback
    """
    value = value.strip()
    try:
        return datetime.strptime(value, fmt).time()
    except ValueError as e:
        return _fallback_parse(value, e).time()
