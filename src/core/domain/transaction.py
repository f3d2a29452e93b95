"""
Transaction — Модель сделки купли/продажи

Immutable Pydantic модель. Согласованность знаков проверяется при создании:
- quantity < 0 (продажа) → proceeds >= 0
- quantity > 0 (покупка) → proceeds <= 0 (стоимость хранится отрицательной)

Тип сделки (BUY/SELL) не хранится, а выводится из знака proceeds.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.domain.money import Money
from src.core.errors import MalformedTransaction


# =============================================================================
# ENUMS
# =============================================================================


class TransactionType(str, Enum):
    """Тип сделки"""

    BUY = "buy"
    SELL = "sell"


# =============================================================================
# TRANSACTION MODEL
# =============================================================================


class Transaction(BaseModel):
    """
    Модель сделки.

    Участвуют в расчёте только date, instrument_id, quantity, proceeds.
    Остальные поля переносятся из выгрузки брокера для диагностики.

    Immutable модель (frozen=True).
    """

    # Расчётные поля
    date: datetime.date = Field(..., description="Дата сделки")
    instrument_id: str = Field(..., min_length=1, description="Идентификатор инструмента (ISIN)")
    quantity: int = Field(..., description="Количество (< 0 для продажи)")
    proceeds: Money = Field(..., description="Выручка (< 0 для покупки)")
    order_id: str = Field(..., description="Идентификатор поручения")

    # Описательные поля выгрузки
    time: datetime.time | None = Field(None, description="Время сделки")
    product: str = Field("", description="Название инструмента")
    reference: str = Field("", description="Биржевой код")
    venue: str = Field("", description="Площадка исполнения")
    price: Money | None = Field(None, description="Цена за единицу")
    local_value: Money | None = Field(None, description="Сумма в валюте инструмента")
    exchange_rate: Decimal | None = Field(None, description="Курс конверсии")
    transaction_costs: Money | None = Field(None, description="Комиссии")
    total: Money | None = Field(None, description="Итог с комиссиями")

    model_config = {"frozen": True}

    @field_validator("proceeds", "price", "local_value", "transaction_costs", "total", mode="before")
    @classmethod
    def parse_money_text(cls, v: Any) -> Any:
        """Текстовые суммы разбираются через Money.parse"""
        if isinstance(v, str):
            return Money.parse(v)
        return v

    @model_validator(mode="after")
    def validate_sign_pairing(self) -> "Transaction":
        """Проверка согласованности знаков quantity и proceeds"""
        amount = self.proceeds.amount
        if self.quantity < 0 and amount < 0:
            raise MalformedTransaction(
                self.order_id, MalformedTransaction.SELL_WITH_NEGATIVE_PROCEEDS
            )
        if self.quantity > 0 and amount > 0:
            raise MalformedTransaction(
                self.order_id, MalformedTransaction.BUY_WITH_POSITIVE_PROCEEDS
            )
        return self

    @property
    def type(self) -> TransactionType:
        """Отрицательная выручка → покупка, иначе → продажа"""
        if self.proceeds.is_negative():
            return TransactionType.BUY
        return TransactionType.SELL

    def is_buy(self) -> bool:
        return self.type is TransactionType.BUY

    def is_sell(self) -> bool:
        return self.type is TransactionType.SELL

    @property
    def year(self) -> int:
        return self.date.year
