"""Data quality validation for candles and quotes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from cloudquant.models.candle import Candle
from cloudquant.models.quote import Quote


@dataclass
class ValidationCheck:
    """Single validation check result."""

    name: str
    passed: bool
    message: str = ""


@dataclass
class ValidationResult:
    """Aggregate validation result."""

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failed_checks(self) -> list[ValidationCheck]:
        return [c for c in self.checks if not c.passed]

    def summary(self) -> str:
        return "; ".join(c.message for c in self.failed_checks)


def check_time_order(candles: list[Candle]) -> ValidationCheck:
    """Candles must be ordered by non-decreasing time."""
    out_of_order = 0
    try:
        keys = [c.sort_key for c in candles]
    except (TypeError, ValueError) as exc:
        return ValidationCheck("time_order", False, f"unparseable candle time: {exc}")
    for i in range(1, len(keys)):
        if keys[i] < keys[i - 1]:
            out_of_order += 1
    if out_of_order:
        return ValidationCheck("time_order", False, f"{out_of_order} out of order")
    return ValidationCheck("time_order", True)


def validate_candles(candles: list[Candle]) -> ValidationResult:
    """Run all quality checks on a candle series.

    Checks:
        1. Not empty
        2. No NaN/inf prices
        3. Volume sanity (non-negative)
        4. Time ordering (non-decreasing)
        5. OHLC consistency (low <= open/close <= high)
    """
    result = ValidationResult()

    # 1. Not empty
    if not candles:
        result.checks.append(ValidationCheck("not_empty", False, "No candles provided"))
        return result
    result.checks.append(ValidationCheck("not_empty", True, f"{len(candles)} candles"))

    # 2. No NaN/inf
    nan_count = 0
    for c in candles:
        for val in (c.open, c.high, c.low, c.close):
            if math.isnan(val) or math.isinf(val):
                nan_count += 1
    if nan_count:
        result.checks.append(ValidationCheck("no_nulls", False, f"{nan_count} NaN/Inf values"))
    else:
        result.checks.append(ValidationCheck("no_nulls", True))

    # 3. Volume sanity
    neg_vol = sum(1 for c in candles if c.volume is not None and c.volume < 0)
    if neg_vol:
        result.checks.append(
            ValidationCheck("volume_sanity", False, f"{neg_vol} candles with negative volume")
        )
    else:
        result.checks.append(ValidationCheck("volume_sanity", True))

    # 4. Time ordering
    result.checks.append(check_time_order(candles))

    # 5. OHLC consistency
    inconsistent = 0
    for c in candles:
        if c.high < c.low:
            inconsistent += 1
        elif c.high < c.open or c.high < c.close:
            inconsistent += 1
        elif c.low > c.open or c.low > c.close:
            inconsistent += 1
    if inconsistent:
        result.checks.append(
            ValidationCheck("ohlc_consistency", False, f"{inconsistent} candles with H<L or H<O/C")
        )
    else:
        result.checks.append(ValidationCheck("ohlc_consistency", True))

    return result


def validate_quote(quote: Quote) -> bool:
    """Basic quote sanity check.

    Finnhub answers unknown symbols with an all-zero payload, so a current
    price of zero is treated as no data.
    """
    values = (quote.c, quote.d, quote.dp, quote.h, quote.l, quote.o, quote.pc)
    if any(math.isnan(v) or math.isinf(v) for v in values):
        return False
    return quote.c > 0
