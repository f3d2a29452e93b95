"""Ledger — расчёт реализованных результатов и переноса убытков.

- CostBasisLedger: средневзвешенная стоимость по инструментам
- YearBucketAccumulator: прибыли/убытки по календарным годам
- CarryLossResolver: state machine переноса убытков (IDLE/CARRYING)
- Report: immutable отчёт за целевой год
- Portfolio: последовательный проход по сделкам с lookahead
"""

from .carry_loss import (
    CarryLossResolver,
    CarryResolution,
    CarryState,
    CarryStep,
)
from .cost_basis import CostBasisLedger, LedgerEntry, RealizedResult
from .portfolio import Portfolio, TransactionSource
from .report import Report
from .year_buckets import YearBucket, YearBucketAccumulator

__all__ = [
    "CarryLossResolver",
    "CarryResolution",
    "CarryState",
    "CarryStep",
    "CostBasisLedger",
    "LedgerEntry",
    "RealizedResult",
    "Portfolio",
    "TransactionSource",
    "Report",
    "YearBucket",
    "YearBucketAccumulator",
]
