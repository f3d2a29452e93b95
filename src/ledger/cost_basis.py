"""Cost-Basis Ledger — средневзвешенная стоимость позиции по инструменту.

Покупка (quantity > 0, proceeds = -cost):
- cumulative_cost += |proceeds|
- running_quantity += quantity
- average_unit_cost = cumulative_cost / running_quantity (пересчёт с нуля)

Продажа (quantity < 0, proceeds >= 0):
- matched_cost = |average_unit_cost * quantity|
- realized = proceeds - matched_cost
- cumulative_cost -= proceeds (выручка, а не matched_cost)
- running_quantity += quantity
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from src.core.domain import Money, Transaction
from src.core.errors import DegenerateTransaction, SellWithoutPriorPosition, UndefinedAverageCost

logger = logging.getLogger(__name__)


@dataclass
class LedgerEntry:
    """Состояние позиции по одному инструменту."""

    cumulative_cost: Money
    average_unit_cost: Money
    running_quantity: int = 0


@dataclass(frozen=True)
class RealizedResult:
    """Результат продажи."""

    transaction: Transaction
    matched_cost: Money
    realized: Money

    @property
    def year(self) -> int:
        return self.transaction.date.year


class CostBasisLedger:
    """Ledger средневзвешенной стоимости по всем инструментам.

    Единственный writer: сделки применяются последовательно в порядке дат.
    Запись по инструменту создаётся при первой покупке.
    """

    def __init__(self):
        self._entries: Dict[str, LedgerEntry] = {}

    def __contains__(self, instrument_id: str) -> bool:
        return instrument_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, instrument_id: str) -> Optional[LedgerEntry]:
        return self._entries.get(instrument_id)

    def apply(self, tr: Transaction) -> Optional[RealizedResult]:
        """Применение сделки к ledger.

        Args:
            tr: сделка (покупка или продажа)

        Returns:
            RealizedResult для продажи, None для покупки

        Raises:
            DegenerateTransaction: quantity == 0
            SellWithoutPriorPosition: продажа инструмента без записи в ledger
            UndefinedAverageCost: покупка закрыла отрицательную позицию в ноль
            CurrencyMismatch: валюта сделки отличается от валюты позиции
        """
        if tr.quantity == 0:
            raise DegenerateTransaction(tr.order_id)

        if tr.is_buy():
            self._apply_buy(tr)
            return None
        return self._apply_sell(tr)

    def _apply_buy(self, tr: Transaction) -> None:
        currency = tr.proceeds.currency
        entry = self._entries.get(tr.instrument_id)
        if entry is None:
            entry = LedgerEntry(
                cumulative_cost=Money.zero(currency),
                average_unit_cost=Money.zero(currency),
            )
            self._entries[tr.instrument_id] = entry

        if entry.running_quantity + tr.quantity == 0:
            raise UndefinedAverageCost(tr.instrument_id, tr.order_id)

        entry.cumulative_cost = entry.cumulative_cost + abs(tr.proceeds)
        entry.running_quantity += tr.quantity
        entry.average_unit_cost = entry.cumulative_cost.divide(entry.running_quantity)

        logger.debug(
            "buy %s qty=%d cost=%s -> total=%s qty=%d avg=%s",
            tr.instrument_id,
            tr.quantity,
            abs(tr.proceeds),
            entry.cumulative_cost,
            entry.running_quantity,
            entry.average_unit_cost,
        )

    def _apply_sell(self, tr: Transaction) -> RealizedResult:
        entry = self._entries.get(tr.instrument_id)
        if entry is None:
            raise SellWithoutPriorPosition(tr.instrument_id)

        matched_cost = abs(entry.average_unit_cost.multiply(tr.quantity))
        realized = tr.proceeds - matched_cost

        # Уменьшается на выручку, не на matched_cost
        entry.cumulative_cost = entry.cumulative_cost - tr.proceeds
        entry.running_quantity += tr.quantity

        if entry.running_quantity < 0:
            logger.warning(
                "position %s went negative: qty=%d after order %s",
                tr.instrument_id,
                entry.running_quantity,
                tr.order_id,
            )

        logger.debug(
            "sell %s qty=%d proceeds=%s matched=%s realized=%s",
            tr.instrument_id,
            tr.quantity,
            tr.proceeds,
            matched_cost,
            realized,
        )
        return RealizedResult(transaction=tr, matched_cost=matched_cost, realized=realized)
