"""Rating aggregation helpers"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable


def round_rating(value: float) -> float:
    """Round to one decimal, halves away from zero (4.25 -> 4.3)"""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def incremental_mean(current: float, count: int, new_value: int) -> tuple[float, int]:
    """
    Fold one new rating into a running average.

    Returns (new_average, new_count) where
    new_average = round((current * count + new_value) / (count + 1), 1).
    With count == 0 the result is simply new_value.
    """
    if not 1 <= new_value <= 5:
        raise ValueError("Rating must be between 1 and 5")
    count = max(count or 0, 0)
    current = current or 0.0
    new_count = count + 1
    return round_rating((current * count + new_value) / new_count), new_count


def average(ratings: Iterable[int]) -> tuple[float, int]:
    """Full recomputation used when an existing rating changes"""
    values = list(ratings)
    if not values:
        return 0.0, 0
    return round_rating(sum(values) / len(values)), len(values)
