"""Year Buckets — накопление реализованных результатов по календарным годам.

Прибыли и убытки года хранятся раздельно и сворачиваются только при чтении.
"""

from typing import Dict, Mapping

from pydantic import BaseModel, Field

from src.core.domain import Money


class YearBucket(BaseModel):
    """Сумма прибылей и сумма убытков за год.

    Immutable модель (frozen=True): record() возвращает новый экземпляр.
    """

    gains: Money = Field(default_factory=Money, description="Сумма неотрицательных результатов")
    losses: Money = Field(default_factory=Money, description="Сумма отрицательных результатов")

    model_config = {"frozen": True}

    @classmethod
    def empty(cls, currency: str | None = None) -> "YearBucket":
        return cls(gains=Money.zero(currency), losses=Money.zero(currency))

    def record(self, realized: Money) -> "YearBucket":
        """Добавление результата продажи в слот по знаку."""
        if realized.is_negative():
            return self.model_copy(update={"losses": self.losses + realized})
        return self.model_copy(update={"gains": self.gains + realized})

    def net(self) -> Money:
        return self.gains + self.losses

    @property
    def currency(self) -> str | None:
        return self.gains.currency


class YearBucketAccumulator:
    """Маршрутизация результатов продаж в бакеты по году продажи."""

    def __init__(self):
        self._buckets: Dict[int, YearBucket] = {}

    def __len__(self) -> int:
        return len(self._buckets)

    def record(self, year: int, realized: Money) -> YearBucket:
        """Запись результата продажи за год; бакет создаётся лениво."""
        bucket = self._buckets.get(year)
        if bucket is None:
            bucket = YearBucket.empty(realized.currency)
        bucket = bucket.record(realized)
        self._buckets[year] = bucket
        return bucket

    def finalize(self) -> Mapping[int, YearBucket]:
        """Снимок бакетов, отсортированный по году."""
        return {year: self._buckets[year] for year in sorted(self._buckets)}
