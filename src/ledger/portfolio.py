"""Portfolio — последовательный проход по сделкам и построение Report.

Источник сделок — однопроходный ленивый iterator. Движок держит lookahead
в одну сделку:
- проверка неубывающего порядка дат (нарушение → OutOfOrderInput)
- ранняя остановка, когда следующая сделка относится к году после целевого

Сделки после целевого года не применяются и не считываются дальше lookahead.
"""

import logging
from typing import Iterable, Iterator, Optional

from src.core.domain import Transaction
from src.core.errors import IngestionError, OutOfOrderInput, TaxReportError
from src.ledger.cost_basis import CostBasisLedger
from src.ledger.report import Report
from src.ledger.year_buckets import YearBucketAccumulator

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


class TransactionSource:
    """Однопроходный источник сделок с lookahead в один элемент.

    Исключения нижележащего iterator, не относящиеся к пакету, оборачиваются
    в IngestionError.
    """

    def __init__(self, transactions: Iterable[Transaction]):
        self._iter: Iterator[Transaction] = iter(transactions)
        self._pending: object = None
        self._has_pending = False

    def _pull(self) -> object:
        try:
            return next(self._iter)
        except StopIteration:
            return _EXHAUSTED
        except TaxReportError:
            raise
        except Exception as e:
            raise IngestionError(f"transaction source failed: {e}") from e

    def peek(self) -> Optional[Transaction]:
        """Следующая сделка без извлечения; None в конце источника."""
        if not self._has_pending:
            self._pending = self._pull()
            self._has_pending = True
        if self._pending is _EXHAUSTED:
            return None
        return self._pending  # type: ignore[return-value]

    def next(self) -> Optional[Transaction]:
        """Извлечение следующей сделки; None в конце источника."""
        item = self.peek()
        if item is not None:
            self._has_pending = False
            self._pending = None
        return item

    def close(self) -> None:
        """Закрытие нижележащего iterator (генератор держит открытый файл)."""
        close = getattr(self._iter, "close", None)
        if close is not None:
            close()


class Portfolio:
    """Расчёт годового отчёта по потоку сделок.

    Portfolio строит ровно один отчёт: источник не перезапускается.
    """

    def __init__(self, transactions: Iterable[Transaction], carry_window_years: int = 0):
        """
        Args:
            transactions: сделки в неубывающем порядке дат
            carry_window_years: глубина окна переноса убытков (лет)
        """
        if carry_window_years < 0:
            raise ValueError(f"carry_window_years must be non-negative, got {carry_window_years}")
        self._source = TransactionSource(transactions)
        self.carry_window_years = carry_window_years
        self._consumed = False

    @classmethod
    def with_carry_losses(
        cls, transactions: Iterable[Transaction], carry_window_years: int
    ) -> "Portfolio":
        return cls(transactions, carry_window_years=carry_window_years)

    def report(self, year: int) -> Report:
        """Проход по сделкам до конца целевого года и построение отчёта.

        Args:
            year: целевой год отчёта

        Returns:
            Report по бакетам, накопленным до целевого года включительно

        Raises:
            RuntimeError: источник уже израсходован предыдущим вызовом
            OutOfOrderInput: дата следующей сделки раньше текущей
            IngestionError: сбой источника
            DegenerateTransaction, SellWithoutPriorPosition, CurrencyMismatch:
                нарушение контракта ledger
        """
        if self._consumed:
            raise RuntimeError("transaction source already consumed by a previous report")
        self._consumed = True

        ledger = CostBasisLedger()
        buckets = YearBucketAccumulator()
        applied = 0

        try:
            while True:
                tr = self._source.next()
                if tr is None:
                    break
                if tr.date.year > year:
                    break

                next_tr = self._source.peek()
                if next_tr is not None and next_tr.date < tr.date:
                    raise OutOfOrderInput(next_tr.order_id)

                result = ledger.apply(tr)
                if result is not None:
                    buckets.record(result.year, result.realized)
                applied += 1

                if next_tr is not None and next_tr.date.year > year:
                    logger.debug(
                        "stopping at order %s: year %d is after %d",
                        next_tr.order_id,
                        next_tr.date.year,
                        year,
                    )
                    break
        finally:
            self._source.close()

        report = Report(
            year_buckets=buckets.finalize(),
            target_year=year,
            carry_window_years=self.carry_window_years,
            transactions_consumed=applied,
        )
        logger.info(
            "report for %d built: %d transactions, %d instruments, years=%s",
            year,
            applied,
            len(ledger),
            list(report.year_buckets),
        )
        return report
