"""
Money — Точная денежная сумма с необязательной валютой

Immutable Pydantic модель. Сумма хранится как Decimal (без ошибок двоичного
float), валюта — в нижнем регистре или None.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Бинарные операции (add/subtract) допустимы только при совпадающей валюте
   (без учёта регистра; две суммы без валюты совместимы) → иначе CurrencyMismatch
2. Унарные операции (neg/abs/multiply/divide/normalize) всегда допустимы
3. Деление на нулевое количество → явный ZeroDivisionError
4. Сравнение и отображение выполняются над нормализованным значением
"""

import re
from decimal import ROUND_HALF_EVEN, Context, Decimal, InvalidOperation
from typing import Any, Final

from pydantic import BaseModel, Field, field_validator

from src.core.errors import CurrencyMismatch, InvalidMoney


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Точность decimal128: 34 значащих цифры
MONEY_PRECISION: Final[int] = 34

MONEY_CONTEXT: Final[Context] = Context(prec=MONEY_PRECISION, rounding=ROUND_HALF_EVEN)

# Валюта префиксом: "EUR -12.50", "usd12"
_PREFIX_CURRENCY_RE: Final[re.Pattern[str]] = re.compile(
    r"^\s*([a-z]+)\s*(-?[0-9,.]+)\s*$", re.IGNORECASE
)

# Валюта суффиксом: "-12.50 EUR", "12usd"
_SUFFIX_CURRENCY_RE: Final[re.Pattern[str]] = re.compile(
    r"^\s*(-?[0-9,.]+)\s*([a-z]+)\s*$", re.IGNORECASE
)


# "," допустима только как разделитель тысяч: "1,234.5", но не "1,5"
_GROUPED_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"^-?[0-9]{1,3}(,[0-9]{3})*(\.[0-9]+)?$")


def _to_decimal(text: str, original: str) -> Decimal:
    text = text.strip()
    if "," in text:
        if not _GROUPED_NUMBER_RE.match(text):
            raise InvalidMoney(original)
        text = text.replace(",", "")
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise InvalidMoney(original) from e
    if not value.is_finite():
        raise InvalidMoney(original)
    return value


def parse_decimal(text: str) -> Decimal:
    """Разбор числа без валюты (по тем же правилам, что и Money.parse)."""
    return _to_decimal(text, text)


# =============================================================================
# MONEY MODEL
# =============================================================================


class Money(BaseModel):
    """
    Денежная сумма.

    Immutable модель (frozen=True): все операции возвращают новый экземпляр.

    Examples:
        >>> str(Money(Decimal("100.500"), "EUR"))
        '100.5 eur'
        >>> Money(10) + Money(5)
        Money(amount=Decimal('15'), currency=None)
    """

    amount: Decimal = Field(default=Decimal(0), description="Сумма (точный decimal)")
    currency: str | None = Field(default=None, description="Код валюты (lower-case)")

    model_config = {"frozen": True}

    def __init__(self, amount: Any = Decimal(0), currency: str | None = None, **data: Any) -> None:
        super().__init__(amount=amount, currency=currency, **data)

    @field_validator("amount")
    @classmethod
    def validate_finite(cls, v: Decimal) -> Decimal:
        """NaN/Inf не являются денежной суммой"""
        if not v.is_finite():
            raise ValueError(f"amount must be finite, got {v}")
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str | None) -> str | None:
        """Валюта хранится в нижнем регистре; пустая строка → None"""
        if v is None:
            return None
        v = v.strip().lower()
        return v or None

    # -------------------------------------------------------------------------
    # Конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls, currency: str | None = None) -> "Money":
        """Нулевая сумма в заданной валюте."""
        return cls(Decimal(0), currency)

    @classmethod
    def parse(cls, text: str) -> "Money":
        """
        Разбор суммы из текста.

        Валюта может стоять префиксом ("EUR 10.5") или суффиксом ("10.5 EUR").
        Без валюты выполняется обычный числовой разбор.

        Args:
            text: Текстовое представление суммы

        Returns:
            Money

        Raises:
            InvalidMoney: Если текст не является суммой
        """
        match = _PREFIX_CURRENCY_RE.match(text)
        if match:
            return cls(_to_decimal(match.group(2), text), match.group(1))

        match = _SUFFIX_CURRENCY_RE.match(text)
        if match:
            return cls(_to_decimal(match.group(1), text), match.group(2))

        return cls(_to_decimal(text, text))

    # -------------------------------------------------------------------------
    # Бинарные операции
    # -------------------------------------------------------------------------

    def _check_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatch(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        """
        Сложение.

        Raises:
            CurrencyMismatch: Если валюты различаются
        """
        self._check_currency(other)
        return Money(MONEY_CONTEXT.add(self.amount, other.amount), self.currency)

    def subtract(self, other: "Money") -> "Money":
        """
        Вычитание.

        Raises:
            CurrencyMismatch: Если валюты различаются
        """
        self._check_currency(other)
        return Money(MONEY_CONTEXT.subtract(self.amount, other.amount), self.currency)

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    # -------------------------------------------------------------------------
    # Унарные операции
    # -------------------------------------------------------------------------

    def multiply(self, factor: int) -> "Money":
        """Умножение на целое количество."""
        return Money(MONEY_CONTEXT.multiply(self.amount, Decimal(factor)), self.currency)

    def divide(self, divisor: int) -> "Money":
        """
        Деление на целое количество.

        Raises:
            ZeroDivisionError: Если divisor == 0
        """
        if divisor == 0:
            raise ZeroDivisionError(f"cannot divide {self} by zero quantity")
        return Money(MONEY_CONTEXT.divide(self.amount, Decimal(divisor)), self.currency)

    def __neg__(self) -> "Money":
        return Money(MONEY_CONTEXT.minus(self.amount), self.currency)

    def __abs__(self) -> "Money":
        return Money(MONEY_CONTEXT.abs(self.amount), self.currency)

    def abs(self) -> "Money":
        return abs(self)

    def is_negative(self) -> bool:
        return self.amount < 0

    def normalize(self) -> "Money":
        """
        Удаление незначащих нулей без изменения значения.

        Идемпотентна: normalize(normalize(x)) == normalize(x).
        """
        if self.amount.is_zero():
            return Money(Decimal(0), self.currency)
        return Money(MONEY_CONTEXT.normalize(self.amount), self.currency)

    # -------------------------------------------------------------------------
    # Сравнение и отображение
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.currency == other.currency and self.amount == other.amount

    def __hash__(self) -> int:
        return hash((self.normalize().amount, self.currency))

    def digits(self) -> str:
        """Нормализованная сумма без экспоненты и без валюты."""
        return format(self.normalize().amount, "f")

    def __str__(self) -> str:
        digits = self.digits()
        if self.currency is None:
            return digits
        return f"{digits} {self.currency}"

    def __repr__(self) -> str:
        return f"Money(amount={self.amount!r}, currency={self.currency!r})"
