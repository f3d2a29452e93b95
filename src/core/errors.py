"""
Errors — Иерархия исключений расчёта налогового отчёта

Все нарушения контрактов ядра (валюта, знаки сделки, порядок входных данных,
состояние ledger, отсутствие данных за год) выражены отдельными типами.
Каждое исключение хранит данные, позволяющие найти проблемную сделку.
"""


class TaxReportError(Exception):
    """Базовый класс для всех ошибок пакета."""


# =============================================================================
# MONEY
# =============================================================================


class CurrencyMismatch(TaxReportError):
    """Бинарная операция над Money с разными валютами."""

    def __init__(self, left: str | None, right: str | None) -> None:
        self.left = left
        self.right = right
        super().__init__(f"currency mismatch: left={left!r} right={right!r}")


class InvalidMoney(TaxReportError):
    """Текст не может быть разобран как денежная сумма."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"invalid money amount: {text!r}")


# =============================================================================
# TRANSACTION
# =============================================================================


class MalformedTransaction(TaxReportError):
    """
    Несогласованность знаков quantity и proceeds.

    reason:
        sell_with_negative_proceeds — продажа (quantity < 0) с отрицательной выручкой
        buy_with_positive_proceeds — покупка (quantity > 0) с положительной выручкой
    """

    SELL_WITH_NEGATIVE_PROCEEDS = "sell_with_negative_proceeds"
    BUY_WITH_POSITIVE_PROCEEDS = "buy_with_positive_proceeds"

    def __init__(self, order_id: str, reason: str) -> None:
        self.order_id = order_id
        self.reason = reason
        super().__init__(f"malformed transaction {order_id!r}: {reason}")


class DegenerateTransaction(TaxReportError):
    """Сделка с нулевым количеством."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"transaction {order_id!r} has zero quantity")


# =============================================================================
# LEDGER / ENGINE
# =============================================================================


class OutOfOrderInput(TaxReportError):
    """Источник нарушил неубывающий порядок дат."""

    def __init__(self, at_order_id: str) -> None:
        self.at_order_id = at_order_id
        super().__init__(f"transactions out of date order at {at_order_id!r}")


class SellWithoutPriorPosition(TaxReportError):
    """Продажа инструмента, который ни разу не покупался."""

    def __init__(self, instrument_id: str) -> None:
        self.instrument_id = instrument_id
        super().__init__(f"sell of {instrument_id!r} without prior position")


class UndefinedAverageCost(TaxReportError):
    """Покупка вернула отрицательную позицию ровно в ноль: средняя стоимость не определена."""

    def __init__(self, instrument_id: str, order_id: str) -> None:
        self.instrument_id = instrument_id
        self.order_id = order_id
        super().__init__(
            f"buy {order_id!r} leaves {instrument_id!r} at zero quantity: average cost undefined"
        )


class MissingYearData(TaxReportError):
    """Нет реализованных результатов за запрошенный год."""

    def __init__(self, year: int) -> None:
        self.year = year
        super().__init__(f"no recorded activity for year {year}")


class IngestionError(TaxReportError):
    """Сбой внешнего источника сделок (чтение, разбор, даты)."""
