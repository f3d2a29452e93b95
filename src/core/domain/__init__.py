"""
Domain models and value objects.

Contains fundamental domain entities: Money, Transaction.
"""

from src.core.domain.money import MONEY_CONTEXT, MONEY_PRECISION, Money, parse_decimal
from src.core.domain.transaction import Transaction, TransactionType

__all__ = [
    # Money
    "MONEY_CONTEXT",
    "MONEY_PRECISION",
    "Money",
    "parse_decimal",
    # Transaction model
    "Transaction",
    "TransactionType",
]
