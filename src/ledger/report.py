"""Report — итоговый immutable отчёт по годовым бакетам.

Отчёт хранит только бакеты по годам (состояние ledger по инструментам
отбрасывается). Все запросы — чистые функции над сохранённым состоянием.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

from src.core.domain import Money
from src.core.errors import MissingYearData
from src.ledger.carry_loss import CarryLossResolver, CarryResolution
from src.ledger.year_buckets import YearBucket


@dataclass(frozen=True)
class Report:
    """Налоговый отчёт за целевой год.

    Attributes:
        year_buckets: бакеты по годам (read-only)
        target_year: год отчёта
        carry_window_years: глубина окна переноса убытков
        transactions_consumed: число применённых сделок
    """

    year_buckets: Mapping[int, YearBucket]
    target_year: int
    carry_window_years: int = 0
    transactions_consumed: int = 0
    _resolver: CarryLossResolver = field(
        default_factory=CarryLossResolver, repr=False, compare=False
    )

    def __post_init__(self):
        if self.carry_window_years < 0:
            raise ValueError(
                f"carry_window_years must be non-negative, got {self.carry_window_years}"
            )
        snapshot = {year: self.year_buckets[year] for year in sorted(self.year_buckets)}
        object.__setattr__(self, "year_buckets", MappingProxyType(snapshot))

    def profit(self) -> Money:
        """Net-результат целевого года (прибыли + убытки).

        Raises:
            MissingYearData: нет продаж в целевом году
        """
        bucket = self.year_buckets.get(self.target_year)
        if bucket is None:
            raise MissingYearData(self.target_year)
        return bucket.net().normalize()

    def adjusted_profit(self) -> Money:
        """Результат целевого года с учётом переноса убытков прошлых лет."""
        return self.carry_resolution().adjusted_profit

    def carry_resolution(self) -> CarryResolution:
        """Полный результат прохода state machine переноса (для диагностики)."""
        return self._resolver.resolve(
            self.year_buckets, self.target_year, self.carry_window_years
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-совместимое представление (контракт tax_report)."""
        resolution = self.carry_resolution()
        bucket = self.year_buckets.get(self.target_year)

        return {
            "target_year": self.target_year,
            "carry_window_years": self.carry_window_years,
            "transactions_consumed": self.transactions_consumed,
            "currency": resolution.adjusted_profit.currency,
            "years": [
                {
                    "year": year,
                    "gains": b.gains.digits(),
                    "losses": b.losses.digits(),
                    "net": b.net().digits(),
                }
                for year, b in self.year_buckets.items()
            ],
            "profit": bucket.net().digits() if bucket is not None else None,
            "adjusted_profit": resolution.adjusted_profit.digits(),
            "carried_loss": resolution.carried_loss.digits(),
            "carry_state": resolution.final_state.value,
        }
