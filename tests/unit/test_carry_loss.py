"""
Тесты для Carry-Loss Resolver

Проверяет:
1. Переходы IDLE ↔ CARRYING
2. Остановку на целевом году
3. Границы окна переноса
4. Несколько эпизодов переноса
5. Отсутствие данных за целевой год
"""

from typing import Dict

import pytest

from src.core.domain import Money
from src.ledger.carry_loss import CarryLossResolver, CarryState
from src.ledger.year_buckets import YearBucket


def buckets(nets: Dict[int, int], currency: str | None = None) -> Dict[int, YearBucket]:
    return {year: YearBucket.empty(currency).record(Money(net, currency)) for year, net in nets.items()}


@pytest.fixture
def resolver() -> CarryLossResolver:
    return CarryLossResolver()


# =============================================================================
# ADJUSTED PROFIT
# =============================================================================


class TestCarryLossResolution:
    """Тесты итога переноса убытков"""

    def test_loss_absorbed_before_target(self, resolver: CarryLossResolver) -> None:
        """Убыток погашен прибылью до целевого года → перенос не применяется"""
        result = resolver.resolve(buckets({2018: -100, 2019: 150, 2020: 50}), 2020, 5)
        assert result.adjusted_profit == Money(50)
        assert result.final_state == CarryState.IDLE
        assert not result.carry_applied
        assert result.carried_loss == Money(0)

    def test_open_carry_reduces_target(self, resolver: CarryLossResolver) -> None:
        """Непогашенный убыток вычитается из результата целевого года"""
        result = resolver.resolve(buckets({2018: -300, 2019: 100, 2020: 500}), 2020, 5)
        assert result.adjusted_profit == Money(300)
        assert result.provisional_profit == Money(500)
        assert result.carried_loss == Money(-200)
        assert result.final_state == CarryState.CARRYING
        assert result.carry_applied

    def test_carry_can_make_target_negative(self, resolver: CarryLossResolver) -> None:
        """Перенесённый убыток больше прибыли года → отрицательный итог"""
        result = resolver.resolve(buckets({2019: 1000, 2020: -200, 2021: 50}), 2021, 5)
        assert result.adjusted_profit == Money(-150)

    def test_target_year_loss_not_carried(self, resolver: CarryLossResolver) -> None:
        """Убыток самого целевого года не открывает перенос"""
        result = resolver.resolve(buckets({2020: 50, 2021: -100}), 2021, 5)
        assert result.adjusted_profit == Money(-100)
        assert result.final_state == CarryState.IDLE

    def test_multiple_episodes(self, resolver: CarryLossResolver) -> None:
        """Закрытый эпизод не влияет, открытый применяется"""
        result = resolver.resolve(
            buckets({2016: -100, 2017: 200, 2018: -50, 2019: -25, 2020: 100}), 2020, 5
        )
        assert result.adjusted_profit == Money(25)
        assert [s.transition_reason for s in result.steps] == [
            "loss_opens_carry",
            "carry_absorbed",
            "loss_opens_carry",
            "carry_continues",
            "target_year_reached",
        ]

    def test_exact_absorption_closes_episode(self, resolver: CarryLossResolver) -> None:
        """running_total == 0 → эпизод закрыт"""
        result = resolver.resolve(buckets({2018: -100, 2019: 100, 2020: 10}), 2020, 5)
        assert result.adjusted_profit == Money(10)
        assert result.final_state == CarryState.IDLE

    def test_adjusted_equals_profit_without_carry(self, resolver: CarryLossResolver) -> None:
        """Окно 0: итог равен результату целевого года"""
        result = resolver.resolve(buckets({2019: -500, 2020: 80}), 2020, 0)
        assert result.adjusted_profit == Money(80)
        assert len(result.steps) == 1

    def test_currency_propagates(self, resolver: CarryLossResolver) -> None:
        """Валюта итога — валюта бакетов"""
        result = resolver.resolve(buckets({2019: -10, 2020: 30}, "eur"), 2020, 1)
        assert result.adjusted_profit == Money(20, "eur")
        assert result.adjusted_profit.currency == "eur"


# =============================================================================
# WINDOW
# =============================================================================


class TestCarryLossWindow:
    """Тесты окна переноса"""

    def test_years_outside_window_ignored(self, resolver: CarryLossResolver) -> None:
        """Годы старше target - window не участвуют"""
        data = buckets({2018: -1000, 2019: -100, 2020: 500})
        assert resolver.resolve(data, 2020, 1).adjusted_profit == Money(400)
        assert resolver.resolve(data, 2020, 2).adjusted_profit == Money(-600)

    def test_years_after_target_ignored(self, resolver: CarryLossResolver) -> None:
        """Годы после целевого не участвуют"""
        result = resolver.resolve(buckets({2019: -100, 2020: 50, 2021: -1000}), 2020, 5)
        assert result.adjusted_profit == Money(-50)
        assert [s.year for s in result.steps] == [2019, 2020]

    def test_negative_window_rejected(self, resolver: CarryLossResolver) -> None:
        """Отрицательное окно → ValueError"""
        with pytest.raises(ValueError):
            resolver.resolve({}, 2020, -1)


# =============================================================================
# MISSING DATA
# =============================================================================


class TestCarryLossMissingData:
    """Тесты отсутствующих лет"""

    def test_missing_target_year_uses_zero(self, resolver: CarryLossResolver) -> None:
        """Нет продаж в целевом году → предварительный результат 0"""
        result = resolver.resolve(buckets({2020: -100}), 2021, 1)
        assert result.provisional_profit == Money(0)
        assert result.adjusted_profit == Money(-100)
        assert result.final_state == CarryState.CARRYING

    def test_no_buckets(self, resolver: CarryLossResolver) -> None:
        """Пустые данные → 0"""
        result = resolver.resolve({}, 2021, 5)
        assert result.adjusted_profit == Money(0)
        assert result.steps == ()

    def test_gaps_between_years(self, resolver: CarryLossResolver) -> None:
        """Пропущенные годы внутри окна не прерывают перенос"""
        result = resolver.resolve(buckets({2016: -70, 2020: 100}), 2020, 5)
        assert result.adjusted_profit == Money(30)
