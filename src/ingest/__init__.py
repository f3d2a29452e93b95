"""Ingest — источники сделок для ledger.

- dates: разбор даты/времени с fallback на dateutil
- reverse_lines: чтение строк файла с конца
- degiro: разбор выгрузки DEGIRO "Transactions"
"""

from .dates import DEFAULT_DATE_FORMAT, DEFAULT_TIME_FORMAT, parse_date, parse_time
from .degiro import (
    COLUMNS,
    ReaderConfig,
    parse_line,
    parse_record,
    read_transactions,
    read_transactions_forward,
    to_record,
)
from .reverse_lines import DEFAULT_CHUNK_SIZE, iter_lines_reversed

__all__ = [
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_TIME_FORMAT",
    "parse_date",
    "parse_time",
    "COLUMNS",
    "ReaderConfig",
    "parse_line",
    "parse_record",
    "read_transactions",
    "read_transactions_forward",
    "to_record",
    "DEFAULT_CHUNK_SIZE",
    "iter_lines_reversed",
]
