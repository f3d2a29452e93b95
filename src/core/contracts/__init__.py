"""
Contract Validation Module

Модуль для валидации JSON контрактов: строки выгрузки брокера и итогового отчёта.
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    TaxReportValidator,
    TransactionRecordValidator,
    validate_tax_report,
    validate_transaction_record,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "TransactionRecordValidator",
    "TaxReportValidator",
    # Functions
    "validate_transaction_record",
    "validate_tax_report",
]
