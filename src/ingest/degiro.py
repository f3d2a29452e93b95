"""DEGIRO — разбор выгрузки "Transactions" в поток Transaction.

Формат CSV (19 позиционных колонок, колонки валют без заголовка):
Date, Time, Product, ISIN, Reference, Venue, Quantity, Price, <ccy>,
Local value, <ccy>, Value, <ccy>, Exchange rate, Transaction and/or third,
<ccy>, Total, <ccy>, Order ID

Выгрузка отсортирована от новых сделок к старым, поэтому основной reader
(read_transactions) читает файл с конца: сделки выдаются от старых к новым,
файл целиком в память не загружается. Переводы строк внутри полей
не поддерживаются.
"""

import csv
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Dict, Final, Iterator, Optional, Sequence, Union

import jsonschema
from pydantic import ValidationError

from src.core.contracts import validate_transaction_record
from src.core.domain import Money, Transaction, parse_decimal
from src.core.errors import IngestionError, InvalidMoney
from src.ingest.dates import DEFAULT_DATE_FORMAT, DEFAULT_TIME_FORMAT, parse_date, parse_time
from src.ingest.reverse_lines import DEFAULT_CHUNK_SIZE, iter_lines_reversed

logger = logging.getLogger(__name__)


# Имена позиционных колонок выгрузки
COLUMNS: Final[tuple[str, ...]] = (
    "date",
    "time",
    "product",
    "isin",
    "reference",
    "venue",
    "quantity",
    "price",
    "price_currency",
    "local_value",
    "local_value_currency",
    "value",
    "value_currency",
    "exchange_rate",
    "transaction_costs",
    "transaction_costs_currency",
    "total",
    "total_currency",
    "order_id",
)


@dataclass(frozen=True)
class ReaderConfig:
    """Параметры чтения выгрузки."""
    date_format: str = DEFAULT_DATE_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    encoding: str = "utf-8"


def to_record(fields: Sequence[str]) -> Dict[str, str]:
    """
    Сопоставление позиционных полей строки с именами колонок.

    Raises:
        IngestionError: число полей не совпадает с форматом
    """
    if len(fields) != len(COLUMNS):
        raise IngestionError(
            f"expected {len(COLUMNS)} columns, got {len(fields)}: {list(fields)!r}"
        )
    return {name: value.strip() for name, value in zip(COLUMNS, fields)}


def _money(amount: str, currency: str) -> Optional[Money]:
    if not amount:
        return None
    parsed = Money.parse(amount)
    if currency:
        return Money(parsed.amount, currency)
    return parsed


def _decimal(value: str) -> Optional[Decimal]:
    if not value:
        return None
    try:
        return parse_decimal(value)
    except InvalidMoney as e:
        raise IngestionError(f"invalid decimal {value!r}") from e


def parse_record(fields: Sequence[str], config: ReaderConfig = ReaderConfig()) -> Transaction:
    """
    Построение Transaction из строки выгрузки.

    Args:
        fields: позиционные поля строки CSV
        config: форматы даты/времени

    Returns:
        Transaction

    Raises:
        IngestionError: строка не соответствует контракту transaction_record
            или не разбирается (сумма, дата, модель)
        MalformedTransaction: знаки quantity и value несогласованы
    """
    record = to_record(fields)

    try:
        validate_transaction_record(record)
    except jsonschema.ValidationError as e:
        raise IngestionError(
            f"record {record.get('order_id')!r} violates transaction_record: {e.message}"
        ) from e

    try:
        proceeds = _money(record["value"], record["value_currency"])
        return Transaction(
            date=parse_date(record["date"], config.date_format),
            time=parse_time(record["time"], config.time_format) if record["time"] else None,
            product=record["product"],
            instrument_id=record["isin"],
            reference=record["reference"],
            venue=record["venue"],
            quantity=int(record["quantity"]),
            price=_money(record["price"], record["price_currency"]),
            local_value=_money(record["local_value"], record["local_value_currency"]),
            proceeds=proceeds,
            exchange_rate=_decimal(record["exchange_rate"]),
            transaction_costs=_money(
                record["transaction_costs"], record["transaction_costs_currency"]
            ),
            total=_money(record["total"], record["total_currency"]),
            order_id=record["order_id"],
        )
    except InvalidMoney as e:
        raise IngestionError(f"record {record['order_id']!r}: {e}") from e
    except ValidationError as e:
        raise IngestionError(f"record {record['order_id']!r}: {e}") from e


def parse_line(line: str, config: ReaderConfig = ReaderConfig()) -> Transaction:
    """Разбор одной строки CSV (без заголовка)."""
    rows = list(csv.reader([line]))
    if len(rows) != 1:
        raise IngestionError(f"expected a single CSV record, got {len(rows)}: {line!r}")
    return parse_record(rows[0], config)


def read_transactions(
    path: Union[str, Path],
    config: ReaderConfig = ReaderConfig(),
) -> Iterator[Transaction]:
    """
    Сделки из выгрузки, прочитанной с конца (от старых к новым).

    Первая физическая строка файла — заголовок, она пропускается.
    Пустые строки пропускаются.

    Yields:
        Transaction в порядке от старых к новым
    """
    with open(path, "rb") as f:
        lines = iter_lines_reversed(f, config.chunk_size, config.encoding)
        previous = next(lines, None)
        for line in lines:
            # previous гарантированно не заголовок: за ним есть ещё строка
            if previous.strip():
                yield parse_line(previous, config)
            previous = line
        logger.debug("skipped header of %s: %r", path, previous)


def read_transactions_forward(
    path: Union[str, Path],
    config: ReaderConfig = ReaderConfig(),
) -> Iterator[Transaction]:
    """Сделки из файла, уже отсортированного от старых к новым."""
    with open(path, newline="", encoding=config.encoding) as f:
        reader = csv.reader(f)
        header = next(reader, None)
        logger.debug("skipped header of %s: %r", path, header)
        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            yield parse_record(row, config)
