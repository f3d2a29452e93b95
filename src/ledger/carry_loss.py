"""Carry-Loss Resolver — перенос убытков прошлых лет на целевой год.

Прямой проход по годам окна [target_year - window, target_year] по возрастанию:
- IDLE: перенос не накапливается
- CARRYING: накапливается отрицательный итог

Для net-результата года v:
1. year == target_year → остановка, v — предварительный результат
2. IDLE и v < 0 → CARRYING, running_total = v
3. CARRYING → running_total += v; если running_total >= 0 → обнуление, IDLE
4. IDLE и v >= 0 → без изменений

Итог = предварительный результат + running_total, только если при достижении
target_year состояние CARRYING. Убыток самого target_year в перенос не входит.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional, Tuple

from src.core.domain import Money
from src.ledger.year_buckets import YearBucket


class CarryState(str, Enum):
    """Состояние переноса убытков."""
    IDLE = "IDLE"
    CARRYING = "CARRYING"


@dataclass(frozen=True)
class CarryStep:
    """Один шаг прохода по годам (для диагностики)."""

    year: int
    net: Money
    previous_state: CarryState
    new_state: CarryState
    running_total: Money
    transition_reason: str


@dataclass(frozen=True)
class CarryResolution:
    """Результат расчёта переноса убытков."""

    target_year: int
    carry_window_years: int
    adjusted_profit: Money
    provisional_profit: Money
    carried_loss: Money
    final_state: CarryState
    steps: Tuple[CarryStep, ...]

    @property
    def carry_applied(self) -> bool:
        return self.final_state == CarryState.CARRYING


class CarryLossResolver:
    """State machine переноса убытков."""

    def resolve(
        self,
        year_buckets: Mapping[int, YearBucket],
        target_year: int,
        carry_window_years: int,
    ) -> CarryResolution:
        """Расчёт скорректированной прибыли целевого года.

        Args:
            year_buckets: бакеты по годам
            target_year: целевой год отчёта
            carry_window_years: глубина окна переноса (лет, >= 0)

        Returns:
            CarryResolution с итогом и шагами прохода

        Raises:
            ValueError: carry_window_years < 0
            CurrencyMismatch: бакеты окна в разных валютах
        """
        if carry_window_years < 0:
            raise ValueError(f"carry_window_years must be non-negative, got {carry_window_years}")

        window = sorted(
            year for year in year_buckets
            if target_year - carry_window_years <= year <= target_year
        )
        currency = self._window_currency(year_buckets, window)

        state = CarryState.IDLE
        running_total = Money.zero(currency)
        provisional: Optional[Money] = None
        steps: List[CarryStep] = []

        for year in window:
            net = year_buckets[year].net()

            # 1. Целевой год: остановка
            if year == target_year:
                provisional = net
                steps.append(CarryStep(
                    year=year,
                    net=net,
                    previous_state=state,
                    new_state=state,
                    running_total=running_total,
                    transition_reason="target_year_reached",
                ))
                break

            previous_state = state

            # 2. Начало эпизода переноса
            if state == CarryState.IDLE and net.is_negative():
                state = CarryState.CARRYING
                running_total = net
                reason = "loss_opens_carry"
            # 3. Поглощение в открытом эпизоде
            elif state == CarryState.CARRYING:
                running_total = running_total + net
                if not running_total.is_negative():
                    running_total = Money.zero(currency)
                    state = CarryState.IDLE
                    reason = "carry_absorbed"
                else:
                    reason = "carry_continues"
            # 4. Прибыльный год вне эпизода
            else:
                reason = "no_transition"

            steps.append(CarryStep(
                year=year,
                net=net,
                previous_state=previous_state,
                new_state=state,
                running_total=running_total,
                transition_reason=reason,
            ))

        if provisional is None:
            provisional = Money.zero(currency)

        if state == CarryState.CARRYING:
            adjusted = provisional + running_total
            carried_loss = running_total
        else:
            adjusted = provisional
            carried_loss = Money.zero(currency)

        return CarryResolution(
            target_year=target_year,
            carry_window_years=carry_window_years,
            adjusted_profit=adjusted.normalize(),
            provisional_profit=provisional,
            carried_loss=carried_loss,
            final_state=state,
            steps=tuple(steps),
        )

    def _window_currency(
        self,
        year_buckets: Mapping[int, YearBucket],
        window: List[int],
    ) -> Optional[str]:
        """Валюта нулевых сумм: валюта последнего (ближайшего к целевому) года окна."""
        if not window:
            return None
        return year_buckets[window[-1]].currency
