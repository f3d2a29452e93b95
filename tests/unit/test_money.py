"""
Тесты для Money — точная денежная сумма с валютой

Проверяет:
1. Арифметику в пределах одной валюты
2. CurrencyMismatch при смешении валют
3. Нормализацию (идемпотентность, отображение)
4. Разбор текста с валютой префиксом/суффиксом
5. Immutability (frozen=True)
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.domain import MONEY_PRECISION, Money
from src.core.errors import CurrencyMismatch, InvalidMoney


# =============================================================================
# ARITHMETIC
# =============================================================================


class TestMoneyArithmetic:
    """Тесты арифметики Money"""

    def test_add_same_currency(self) -> None:
        """Сложение сумм в одной валюте"""
        result = Money(Decimal("10.25"), "eur") + Money(Decimal("4.75"), "eur")
        assert result == Money(Decimal("15"), "eur")
        assert result.currency == "eur"

    def test_subtract_without_currency(self) -> None:
        """Суммы без валюты совместимы"""
        assert Money(100) - Money(250) == Money(-150)

    def test_currency_is_case_insensitive(self) -> None:
        """Валюта сравнивается без учёта регистра"""
        result = Money(1, "EUR").add(Money(2, "eur"))
        assert result == Money(3, "eur")

    def test_add_different_currency_fails(self) -> None:
        """Сложение разных валют → CurrencyMismatch"""
        with pytest.raises(CurrencyMismatch) as exc_info:
            Money(1, "eur") + Money(1, "usd")
        assert exc_info.value.left == "eur"
        assert exc_info.value.right == "usd"

    def test_subtract_tagged_and_untagged_fails(self) -> None:
        """Сумма без валюты не смешивается с суммой в валюте"""
        with pytest.raises(CurrencyMismatch):
            Money(1).subtract(Money(1, "eur"))

    def test_subtract_then_add_roundtrip(self) -> None:
        """normalize(add(subtract(a, b), b)) == normalize(a)"""
        pairs = [
            (Money(Decimal("100.10"), "eur"), Money(Decimal("0.015"), "eur")),
            (Money(Decimal("-3.5")), Money(Decimal("1234567.891"))),
            (Money(Decimal("0")), Money(Decimal("-0.0001"))),
        ]
        for a, b in pairs:
            assert ((a - b) + b).normalize() == a.normalize()

    def test_multiply_by_quantity(self) -> None:
        """Умножение на целое количество"""
        assert Money(Decimal("2.5")).multiply(-3) == Money(Decimal("-7.5"))

    def test_divide_by_quantity(self) -> None:
        """Деление на целое количество"""
        assert Money(Decimal("155.5")).divide(5) == Money(Decimal("31.1"))

    def test_divide_keeps_decimal128_precision(self) -> None:
        """Деление сохраняет 34 значащих цифры"""
        result = Money(1000).divide(3)
        digits = result.digits().replace(".", "").lstrip("0")
        assert len(digits) == MONEY_PRECISION

    def test_divide_by_zero_fails(self) -> None:
        """Деление на нулевое количество → ZeroDivisionError"""
        with pytest.raises(ZeroDivisionError):
            Money(100).divide(0)

    def test_abs_and_negative(self) -> None:
        """abs / neg / is_negative"""
        m = Money(Decimal("-12.5"), "eur")
        assert m.is_negative()
        assert abs(m) == Money(Decimal("12.5"), "eur")
        assert m.abs() == abs(m)
        assert -m == Money(Decimal("12.5"), "eur")
        assert not Money(0).is_negative()


# =============================================================================
# NORMALIZATION
# =============================================================================


class TestMoneyNormalization:
    """Тесты нормализации и отображения"""

    def test_normalize_strips_trailing_zeros(self) -> None:
        """Незначащие нули удаляются"""
        assert str(Money(Decimal("100.500"), "EUR")) == "100.5 eur"
        assert Money(Decimal("2.000")).normalize().amount.as_tuple().exponent == 0

    def test_normalize_idempotent(self) -> None:
        """normalize(normalize(x)) == normalize(x)"""
        for value in ("0.00", "100", "1E+3", "-12.3400", "0.000001"):
            once = Money(Decimal(value)).normalize()
            twice = once.normalize()
            assert twice == once
            assert twice.amount.as_tuple() == once.amount.as_tuple()

    def test_str_has_no_exponent(self) -> None:
        """Отображение без экспоненты"""
        assert str(Money(Decimal("1E+2"))) == "100"
        assert str(Money(Decimal("-1.50E+3"), "usd")) == "-1500 usd"

    def test_zero_renders_as_zero(self) -> None:
        """Ноль отображается как 0 (без знака и дробной части)"""
        assert str(Money(Decimal("0.00"))) == "0"
        assert str(Money(Decimal("-0.0"))) == "0"

    def test_equal_values_equal_hashes(self) -> None:
        """Равные значения с разным представлением имеют один hash"""
        assert Money(Decimal("1.0")) == Money(1)
        assert len({Money(Decimal("1.0")), Money(1), Money(Decimal("1.000"))}) == 1


# =============================================================================
# PARSING
# =============================================================================


class TestMoneyParse:
    """Тесты разбора Money из текста"""

    def test_parse_currency_prefix(self) -> None:
        """Валюта префиксом"""
        m = Money.parse("EUR 10.50")
        assert m.amount == Decimal("10.50")
        assert m.currency == "eur"

    def test_parse_currency_suffix(self) -> None:
        """Валюта суффиксом"""
        m = Money.parse("-12.5usd")
        assert m == Money(Decimal("-12.5"), "usd")

    def test_parse_plain_number(self) -> None:
        """Без валюты — обычный числовой разбор"""
        m = Money.parse(" -500 ")
        assert m == Money(-500)
        assert m.currency is None

    def test_parse_grouping_separator(self) -> None:
        """Запятая — разделитель разрядов"""
        assert Money.parse("1,234.50 EUR") == Money(Decimal("1234.50"), "eur")

    def test_parse_grouped_thousands(self) -> None:
        """Несколько групп разрядов"""
        assert Money.parse("1,234.5") == Money(Decimal("1234.5"))
        assert Money.parse("EUR -1,234,567") == Money(-1234567, "eur")

    @pytest.mark.parametrize("text", ["1,5", "1,5 EUR", "-500,00", "12,34.5", "1,2345", ",123", "1,,234"])
    def test_parse_decimal_comma_rejected(self, text: str) -> None:
        """Десятичная запятая не принимается за разделитель разрядов"""
        with pytest.raises(InvalidMoney):
            Money.parse(text)

    @pytest.mark.parametrize("text", ["", "EUR", "12.3.4", "NaN", "Infinity", "ten eur"])
    def test_parse_invalid(self, text: str) -> None:
        """Невалидный текст → InvalidMoney"""
        with pytest.raises(InvalidMoney):
            Money.parse(text)


# =============================================================================
# MODEL
# =============================================================================


class TestMoneyModel:
    """Тесты Pydantic модели Money"""

    def test_money_immutable(self) -> None:
        """Money должна быть immutable (frozen=True)"""
        m = Money(1)
        with pytest.raises(ValidationError):
            m.amount = Decimal(2)  # type: ignore

    def test_money_defaults(self) -> None:
        """По умолчанию: ноль без валюты"""
        m = Money()
        assert m.amount == 0
        assert m.currency is None
        assert Money.zero("EUR") == Money(0, "eur")

    def test_empty_currency_is_none(self) -> None:
        """Пустая валюта нормализуется в None"""
        assert Money(1, "  ").currency is None

    def test_nan_rejected(self) -> None:
        """NaN не является денежной суммой"""
        with pytest.raises(ValidationError):
            Money(Decimal("NaN"))
